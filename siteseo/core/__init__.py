"""Core utilities and configuration."""

from siteseo.core.config import Settings, get_settings
from siteseo.core.logging import get_logger, pipeline_logger, setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "get_logger",
    "pipeline_logger",
    "setup_logging",
]
