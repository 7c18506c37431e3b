"""
Vendor status normalization engine.

Turns vendor status documents (styled HTML pages, JSON/XML payloads, RSS
feeds and announcement listings) into one canonical health report.
"""

__version__ = "1.0.0"

from vendor_status.models import (
    CanonicalState,
    Component,
    FeedConfig,
    HeuristicTextConfig,
    NormalizedReport,
    PathAddressedConfig,
    SourceFormat,
    StructuredMarkupConfig,
    parse_source_config,
)
from vendor_status.services.normalization_service import (
    StatusNormalizationService,
    normalize,
)

__all__ = [
    "__version__",
    "CanonicalState",
    "Component",
    "NormalizedReport",
    "SourceFormat",
    "StructuredMarkupConfig",
    "PathAddressedConfig",
    "FeedConfig",
    "HeuristicTextConfig",
    "parse_source_config",
    "StatusNormalizationService",
    "normalize",
]
