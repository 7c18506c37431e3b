"""
Ordered fallback cascade for markup documents.

The primary extraction strategy runs first. Only when it produces nothing
are the fallback selectors tried, in order, stopping at the first selector
that matches at least one node. Finding nothing is not an error: the
cascade then reports zero components.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from ..models.health import Component
from .base import load_markup

logger = structlog.get_logger(__name__)

FALLBACK_LIMIT = 10

PrimaryExtractor = Callable[[BeautifulSoup], Optional[list[Component]]]
ElementExtractor = Callable[[Tag, int], Optional[Component]]


@dataclass
class CascadeResult:
    """Components plus a record of which strategy produced them."""

    components: list[Component] = field(default_factory=list)
    matched_selector: Optional[str] = None
    node_count: int = 0

    @property
    def used_fallback(self) -> bool:
        return self.matched_selector is not None


def select_nodes(soup: BeautifulSoup | Tag, selector: str) -> list[Tag]:
    """Run a CSS selector, treating a malformed selector as matching nothing."""
    try:
        return soup.select(selector)
    except SelectorSyntaxError as e:
        logger.warning("Skipping invalid selector", selector=selector, error=str(e))
        return []


def run_cascade(
    document: Any,
    primary_extractor: PrimaryExtractor,
    fallback_selectors: Sequence[str],
    per_element_extractor: ElementExtractor,
    limit: int = FALLBACK_LIMIT,
) -> CascadeResult:
    """
    Run the primary extractor, then the fallback selectors if it found nothing.

    Args:
        document: Markup text or parsed soup
        primary_extractor: Returns components, or None/empty when it found nothing
        fallback_selectors: Selectors tried in order against the whole document
        per_element_extractor: Builds a component from ``(node, index)``; may
            return None to drop a node
        limit: Maximum nodes processed from the matching fallback selector

    Returns:
        CascadeResult with the components of the first successful strategy
    """
    soup = load_markup(document)

    primary = primary_extractor(soup)
    if primary:
        return CascadeResult(components=list(primary))

    for selector in fallback_selectors:
        nodes = select_nodes(soup, selector)
        if not nodes:
            continue

        logger.debug(
            "Fallback selector matched",
            selector=selector,
            node_count=len(nodes),
            limit=limit,
        )
        components = []
        for index, node in enumerate(nodes[:limit]):
            component = per_element_extractor(node, index)
            if component is not None:
                components.append(component)
        return CascadeResult(
            components=components, matched_selector=selector, node_count=len(nodes)
        )

    logger.debug("No fallback selector matched", tried=len(fallback_selectors))
    return CascadeResult()


def with_fallback(
    document: Any,
    primary_extractor: PrimaryExtractor,
    fallback_selectors: Sequence[str],
    per_element_extractor: ElementExtractor,
    limit: int = FALLBACK_LIMIT,
) -> list[Component]:
    """Like :func:`run_cascade`, returning only the components."""
    return run_cascade(
        document, primary_extractor, fallback_selectors, per_element_extractor, limit
    ).components
