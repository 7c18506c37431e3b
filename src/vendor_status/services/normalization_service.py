"""
Normalization service: the single entry point of the extraction engine.

Given a raw document and its source configuration, the service dispatches to
the adapter for the configured format and folds the result into a
:class:`NormalizedReport`. Problems with the document itself never escape as
exceptions; they become a one-component parse-error report. Only a missing
or malformed configuration raises.
"""

from typing import Any, Optional

import structlog

from ..core.config import EngineSettings
from ..core.exceptions import ConfigurationError, ParsingError
from ..documents import load_tree
from ..models.health import NormalizedReport
from ..models.source_config import BaseSourceConfig, PathAddressedConfig, SourceFormat
from ..parsers.aggregator import aggregate, parse_failure_report
from ..parsers.base import BaseAdapter
from ..parsers.feed import FeedAdapter
from ..parsers.heuristic import HeuristicTextAdapter
from ..parsers.markup import StructuredMarkupAdapter
from ..parsers.path_data import PathAddressedAdapter

logger = structlog.get_logger(__name__)

ADAPTERS: dict[SourceFormat, type[BaseAdapter]] = {
    SourceFormat.STRUCTURED_MARKUP: StructuredMarkupAdapter,
    SourceFormat.PATH_ADDRESSED: PathAddressedAdapter,
    SourceFormat.FEED: FeedAdapter,
    SourceFormat.HEURISTIC_TEXT: HeuristicTextAdapter,
}

_missing_formats = set(SourceFormat) - set(ADAPTERS)
if _missing_formats:
    raise ImportError(
        f"No adapter registered for formats: {sorted(f.value for f in _missing_formats)}"
    )

# Raised by adapters when a document has an unexpected shape
DOCUMENT_ERRORS = (
    ParsingError,
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    RecursionError,
)


class StatusNormalizationService:
    """Dispatches documents to format adapters and aggregates the result."""

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        self.engine_settings = engine_settings or EngineSettings()
        self.logger = logger.bind(service="normalization")
        self._adapters: dict[SourceFormat, BaseAdapter] = {
            source_format: adapter_class(self.engine_settings)
            for source_format, adapter_class in ADAPTERS.items()
        }

    def adapter_for(self, config: BaseSourceConfig) -> BaseAdapter:
        return self._adapters[config.source_format]

    def normalize(self, document: Any, config: Optional[BaseSourceConfig]) -> NormalizedReport:
        """
        Normalize one raw document into a report.

        Args:
            document: Markup or feed text, path-addressed payload text, or an
                already deserialized JSON/XML tree
            config: Source configuration; its ``format`` selects the adapter

        Returns:
            NormalizedReport, a parse-error report if the document is unreadable

        Raises:
            ConfigurationError: If the configuration is missing or not a
                source configuration
        """
        if config is None:
            raise ConfigurationError("A source configuration is required")
        if not isinstance(config, BaseSourceConfig):
            raise ConfigurationError(
                "Unsupported configuration type",
                details={"config_type": type(config).__name__},
            )

        adapter = self.adapter_for(config)

        try:
            if isinstance(config, PathAddressedConfig) and isinstance(document, (str, bytes)):
                document = load_tree(document, config.wire_format)
            components = adapter.extract(document, config)
        except ConfigurationError:
            raise
        except DOCUMENT_ERRORS as e:
            message = e.message if isinstance(e, ParsingError) else str(e)
            self.logger.warning(
                "Document could not be parsed",
                source=config.name,
                format=config.source_format.value,
                error=message,
                error_type=type(e).__name__,
            )
            detail = dict(e.details) if isinstance(e, ParsingError) else {}
            return parse_failure_report(
                adapter.error_component_name(config), message or type(e).__name__, detail
            )

        report = aggregate(components)
        self.logger.info(
            "Document normalized",
            source=config.name,
            format=config.source_format.value,
            total_components=report.total_components,
            error_count=report.error_count,
        )
        return report


_default_service: Optional[StatusNormalizationService] = None


def get_normalization_service() -> StatusNormalizationService:
    """Return the shared service instance, built with default engine limits."""
    global _default_service
    if _default_service is None:
        _default_service = StatusNormalizationService()
    return _default_service


def normalize(document: Any, config: Optional[BaseSourceConfig]) -> NormalizedReport:
    """Module-level helper using the shared service."""
    return get_normalization_service().normalize(document, config)
