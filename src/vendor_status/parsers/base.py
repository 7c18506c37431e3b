"""
Base adapter class and helpers shared by the format adapters.

Every adapter turns one raw document plus its source configuration into a
list of canonical components. Adapters never aggregate; that is the job of
:mod:`vendor_status.parsers.aggregator`.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import structlog
from bs4 import BeautifulSoup

from ..core.config import EngineSettings
from ..core.exceptions import ConfigurationError, HTMLParsingError
from ..models.health import Component
from ..models.source_config import BaseSourceConfig

logger = structlog.get_logger(__name__)

ConfigType = TypeVar("ConfigType", bound=BaseSourceConfig)

MARKUP_PARSER = "html.parser"


def load_markup(document: Any, features: str = MARKUP_PARSER) -> BeautifulSoup:
    """
    Turn raw markup into a BeautifulSoup tree.

    Args:
        document: HTML/XML text, bytes, or an already parsed soup
        features: BeautifulSoup tree builder

    Raises:
        HTMLParsingError: If the document is empty or not markup text
    """
    if isinstance(document, BeautifulSoup):
        return document
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")
    if not isinstance(document, str):
        raise HTMLParsingError(
            "Expected markup text",
            details={"document_type": type(document).__name__},
        )
    if not document.strip():
        raise HTMLParsingError("Document is empty")
    return BeautifulSoup(document, features)


class BaseAdapter(ABC, Generic[ConfigType]):
    """
    Abstract base adapter for one document format.

    Provides the configuration check and logging; subclasses implement
    :meth:`_extract` for their format. Adapters hold no per-call state, so
    one instance can serve concurrent callers.
    """

    #: Name of the synthetic component reported when this format fails to parse
    parse_error_name: str = "Parsing Error"

    def __init__(
        self, adapter_name: str, engine_settings: EngineSettings | None = None
    ) -> None:
        """
        Initialize base adapter.

        Args:
            adapter_name: Name used in log context
            engine_settings: Extraction limits, defaults when omitted
        """
        self.adapter_name = adapter_name
        self.engine_settings = engine_settings or EngineSettings()
        self.logger = logger.bind(adapter=adapter_name)

    @property
    @abstractmethod
    def config_class(self) -> type[ConfigType]:
        """Configuration variant this adapter accepts."""
        pass

    @abstractmethod
    def _extract(self, document: Any, config: ConfigType) -> list[Component]:
        """Extract components from a document already known to match the config."""
        pass

    def extract(self, document: Any, config: ConfigType) -> list[Component]:
        """
        Extract canonical components from a raw document.

        Args:
            document: Raw document in this adapter's format
            config: Source configuration for this adapter's format

        Returns:
            Components in document order

        Raises:
            ConfigurationError: If the configuration is missing or of another format
            ParsingError: If the document cannot be interpreted
        """
        self.check_config(config)

        components = self._extract(document, config)

        self.logger.debug(
            "Extraction completed",
            source=config.name,
            component_count=len(components),
            error_count=sum(1 for c in components if c.is_error),
        )
        return components

    def error_component_name(self, config: Any) -> str:
        """Name of the synthetic component reported when extraction fails."""
        return self.parse_error_name

    def check_config(self, config: Any) -> None:
        """Reject a missing configuration or one meant for another adapter."""
        if config is None:
            raise ConfigurationError(
                f"{self.adapter_name} adapter requires a configuration"
            )
        if not isinstance(config, self.config_class):
            raise ConfigurationError(
                f"{self.adapter_name} adapter cannot use {type(config).__name__}",
                details={"expected": self.config_class.__name__},
            )
