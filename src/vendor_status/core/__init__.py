"""
Core functionality for the vendor status system.

This module provides foundational components including configuration management,
exception handling, and logging functionality.
"""

from vendor_status.core.config import Settings, get_settings
from vendor_status.core.exceptions import (
    ConfigurationError,
    FetchError,
    ParsingError,
    PathResolutionError,
    VendorStatusError,
)
from vendor_status.core.logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "VendorStatusError",
    "ConfigurationError",
    "ParsingError",
    "PathResolutionError",
    "FetchError",
    "get_logger",
    "setup_logging",
]
