"""
Data models for the vendor status system.

This module provides Pydantic models for the canonical health record and
the per-source extraction configuration.
"""

from vendor_status.models.base import VendorStatusModel
from vendor_status.models.health import (
    DEFAULT_ERROR_STATES,
    CanonicalState,
    Component,
    NormalizedReport,
)
from vendor_status.models.source_config import (
    DEFAULT_FALLBACK_SELECTORS,
    ErrorThresholds,
    FeedConfig,
    HeuristicTextConfig,
    PathAddressedConfig,
    SourceConfig,
    SourceFormat,
    StructuredMarkupConfig,
    parse_source_config,
)

__all__ = [
    "VendorStatusModel",
    "CanonicalState",
    "DEFAULT_ERROR_STATES",
    "Component",
    "NormalizedReport",
    "SourceFormat",
    "SourceConfig",
    "StructuredMarkupConfig",
    "PathAddressedConfig",
    "ErrorThresholds",
    "FeedConfig",
    "HeuristicTextConfig",
    "DEFAULT_FALLBACK_SELECTORS",
    "parse_source_config",
]
