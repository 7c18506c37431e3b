"""
Services for the vendor status system.

The normalization service is the engine entry point; the source checker
fetches live documents and feeds them through it.
"""

from .normalization_service import (
    ADAPTERS,
    StatusNormalizationService,
    get_normalization_service,
    normalize,
)
from .source_checker import HealthSummary, SourceChecker, SourceCheckResult, summarize

__all__ = [
    "ADAPTERS",
    "StatusNormalizationService",
    "get_normalization_service",
    "normalize",
    "SourceChecker",
    "SourceCheckResult",
    "HealthSummary",
    "summarize",
]
