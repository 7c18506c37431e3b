"""
Structured-markup adapter for styled HTML status pages.

Each node matched by the configured selectors becomes one component. Names
come from name-like sub-elements, ``data-*`` attributes or the first line
of text; states come from the status vocabulary applied to the node's
attributes and classes (its own and its descendants', which covers icon
children), then from keywords in its text and tooltips.
"""

from typing import Any, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..core.config import EngineSettings
from ..models.health import Component
from ..models.source_config import StructuredMarkupConfig
from .base import BaseAdapter, load_markup
from .fallback import select_nodes, with_fallback
from .vocabulary import classify

logger = structlog.get_logger(__name__)

NAME_SELECTORS = (
    ".component",
    ".name",
    ".component-name",
    ".service-name",
    ".title",
    "h1",
    "h2",
    "h3",
    "h4",
    ".label",
)
NAME_ATTRIBUTES = ("data-name", "data-component-name", "data-service")
STATUS_ATTRIBUTES = ("data-component-status", "data-status")
STATUS_TEXT_SELECTOR = ".component-status, .status, .status-text"
TOOLTIP_ATTRIBUTE = "data-title"
MAX_TEXT_NAME_LENGTH = 100


def _text(node: Tag) -> str:
    return node.get_text(" ", strip=True)


def extract_component_name(node: Tag, index: int) -> str:
    """
    Derive a display name for a matched node.

    Table rows use their first cell. Other nodes try name-like descendants,
    then ``data-*`` attributes, then the first line of their own text, and
    finally a positional placeholder.
    """
    if node.name == "tr":
        first_cell = node.find("td")
        if first_cell is not None:
            label = first_cell.select_one(".component")
            if label is not None and _text(label):
                return _text(label)
            if _text(first_cell):
                return _text(first_cell)

    for selector in NAME_SELECTORS:
        found = node.select_one(selector)
        if found is not None and _text(found):
            return _text(found)

    for attribute in NAME_ATTRIBUTES:
        value = node.get(attribute)
        if isinstance(value, str) and value.strip():
            return value.strip()

    text = node.get_text().strip()
    if text and len(text) < MAX_TEXT_NAME_LENGTH:
        first_line = text.split("\n")[0].strip()
        if first_line:
            return first_line

    return f"Component {index + 1}"


def status_indicators(node: Tag) -> list[str]:
    """Raw tokens for a node, explicit data attributes before class names."""
    indicators: list[str] = []

    for attribute in STATUS_ATTRIBUTES:
        value = node.get(attribute)
        if isinstance(value, str) and value.strip():
            indicators.append(value)

    indicators.extend(node.get("class") or [])
    for child in node.find_all(class_=True):
        indicators.extend(child.get("class") or [])

    return indicators


def keyword_text(node: Tag) -> str:
    """Text scanned for status keywords: tooltips first, then visible text."""
    tooltips = [
        child.get(TOOLTIP_ATTRIBUTE)
        for child in node.find_all(attrs={TOOLTIP_ATTRIBUTE: True})
    ]
    parts = [tooltip for tooltip in tooltips if isinstance(tooltip, str)]
    parts.append(_text(node))
    return " ".join(parts)


class StructuredMarkupAdapter(BaseAdapter[StructuredMarkupConfig]):
    """Extracts components from HTML status pages using CSS selectors."""

    parse_error_name = "HTML Parsing Error"

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        super().__init__("structured_markup", engine_settings)

    @property
    def config_class(self) -> type[StructuredMarkupConfig]:
        return StructuredMarkupConfig

    def _extract(self, document: Any, config: StructuredMarkupConfig) -> list[Component]:
        soup = load_markup(document)
        text_limit = self.engine_settings.status_text_limit

        def primary(tree: BeautifulSoup) -> Optional[list[Component]]:
            for selector in config.primary_selectors:
                nodes = select_nodes(tree, selector)
                if nodes:
                    self.logger.debug(
                        "Primary selector matched", selector=selector, node_count=len(nodes)
                    )
                    return [
                        self.build_component(node, index, config, self._status_text(node))
                        for index, node in enumerate(nodes)
                    ]
            self.logger.info(
                "No primary selector matched, trying fallbacks",
                source=config.name,
                selectors=list(config.primary_selectors),
            )
            return None

        def fallback(node: Tag, index: int) -> Component:
            return self.build_component(node, index, config, _text(node)[:text_limit])

        return with_fallback(
            soup,
            primary,
            config.fallback_selectors,
            fallback,
            limit=self.engine_settings.fallback_limit,
        )

    @staticmethod
    def _status_text(node: Tag) -> str:
        return " ".join(_text(found) for found in node.select(STATUS_TEXT_SELECTOR)).strip()

    def build_component(
        self,
        node: Tag,
        index: int,
        config: StructuredMarkupConfig,
        status_text: str,
    ) -> Component:
        """Name and classify a single matched node."""
        classification = classify(
            status_indicators(node),
            config.status_vocabulary,
            config.effective_error_states,
            text=keyword_text(node),
            default=config.unmatched_state,
        )
        return Component.from_state(
            name=extract_component_name(node, index),
            state=classification.state,
            error_states=config.effective_error_states,
            raw_indicator=classification.indicator,
            detail={
                "statusText": status_text or None,
                "matchedBy": classification.matched_by,
            },
        )
