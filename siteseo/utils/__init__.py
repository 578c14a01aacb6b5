"""Utility modules for the package.

This package contains shared utility functions.
"""

from siteseo.utils.numbers import percentage, round_half_up

__all__ = [
    "percentage",
    "round_half_up",
]
