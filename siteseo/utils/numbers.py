"""Numeric helpers shared by the link graph, validator and statistics.

Percentages and averages in the package round halves up (12.5 -> 13), not
to the nearest even integer as the built-in round() does.
"""

import math


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves up."""
    return math.floor(value + 0.5)


def percentage(part: int, whole: int) -> int:
    """``part`` as a whole-number percentage of ``whole``; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
