"""
Heuristic adapter for announcement and blog listings.

Some vendors publish incidents only as posts in a community blog. Each
candidate post becomes a component: posts whose title says the issue is
resolved are operational, everything else is an active outage. Navigation
chrome and very short titles are discarded as noise.
"""

from typing import Any, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..core.config import EngineSettings
from ..models.health import CanonicalState, Component
from ..models.source_config import HeuristicTextConfig
from .base import BaseAdapter, load_markup
from .fallback import select_nodes

logger = structlog.get_logger(__name__)

NOSCRIPT_POST_SELECTOR = "li, article, .post, .entry, .discussion-item"
BROAD_SELECTORS = (
    "li",
    "article",
    ".post",
    ".entry",
    'div[class*="post"]',
    'div[class*="entry"]',
    'a[href*="discussion"]',
)
TITLE_TEXT_LIMIT = 200
NAME_LIMIT = 60


def truncate(text: str, limit: int) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def find_title(element: Tag, topic_marker: str) -> tuple[str, Optional[str]]:
    """
    Locate a post title and link for a candidate element.

    Prefers the first link whose href contains ``topic_marker``, then any
    link, then the element's own text cut to 200 characters.

    Returns:
        Tuple of (title, url); url is None when the title came from text
    """
    links = element.find_all("a")
    marked = [
        link for link in links
        if topic_marker and topic_marker in (link.get("href") or "")
    ]

    for link in marked[:1] + links[:1]:
        title = link.get_text(" ", strip=True)
        if title:
            return title, link.get("href")

    return truncate(element.get_text(" ", strip=True), TITLE_TEXT_LIMIT), None


class HeuristicTextAdapter(BaseAdapter[HeuristicTextConfig]):
    """Mines announcement listings for outage posts."""

    parse_error_name = "Announcement Parsing Error"

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        super().__init__("heuristic_text", engine_settings)

    @property
    def config_class(self) -> type[HeuristicTextConfig]:
        return HeuristicTextConfig

    def _extract(self, document: Any, config: HeuristicTextConfig) -> list[Component]:
        soup = load_markup(document)
        candidates = self.find_candidates(soup, config)

        if not candidates:
            self.logger.info("No announcement candidates found", source=config.name)
            return [self._placeholder(config)]

        limit = self.engine_settings.heuristic_candidate_limit
        components = []
        for element in candidates[:limit]:
            component = self.build_component(element, config)
            if component is not None:
                components.append(component)
        return components

    def find_candidates(self, soup: BeautifulSoup, config: HeuristicTextConfig) -> list[Tag]:
        """
        Collect candidate post elements.

        Posts rendered inside ``<noscript>`` win, then the configured
        selectors, then the first broad selector that matches anything.
        """
        if config.scan_noscript:
            for noscript in soup.find_all("noscript"):
                inner = BeautifulSoup(noscript.decode_contents(), "html.parser")
                posts = select_nodes(inner, NOSCRIPT_POST_SELECTOR)
                if posts:
                    self.logger.debug("Using posts from noscript block", post_count=len(posts))
                    return posts

        if config.selectors:
            matched = {id(node) for selector in config.selectors for node in select_nodes(soup, selector)}
            if matched:
                # Document order, each node once
                return [node for node in soup.find_all(True) if id(node) in matched]

        for selector in BROAD_SELECTORS:
            posts = select_nodes(soup, selector)
            if posts:
                self.logger.debug("Broad selector matched", selector=selector, post_count=len(posts))
                return posts

        return []

    def is_noise(self, title: str, config: HeuristicTextConfig) -> bool:
        if len(title) < config.min_title_length:
            return True
        lowered = title.lower()
        return any(phrase.lower() in lowered for phrase in config.boilerplate_phrases)

    def resolution(self, title: str, config: HeuristicTextConfig) -> Optional[str]:
        """Return the resolved keyword found in the title, if the post is resolved."""
        lowered = title.lower()
        if any(keyword.lower() in lowered for keyword in config.unresolved_keywords):
            return None
        for keyword in config.resolved_keywords:
            if keyword.lower() in lowered:
                return keyword
        return None

    def build_component(
        self, element: Tag, config: HeuristicTextConfig
    ) -> Optional[Component]:
        """Classify one candidate post, or None when it is navigation noise."""
        title, url = find_title(element, config.topic_marker)
        if not title or self.is_noise(title, config):
            return None

        keyword = self.resolution(title, config)
        resolved = keyword is not None
        state = CanonicalState.OPERATIONAL if resolved else CanonicalState.MAJOR_OUTAGE

        return Component.from_state(
            name=truncate(title, NAME_LIMIT),
            state=state,
            error_states=config.effective_error_states,
            raw_indicator=keyword,
            detail={"fullTitle": title, "url": url, "isResolved": resolved},
        )

    def _placeholder(self, config: HeuristicTextConfig) -> Component:
        return Component.from_state(
            name=config.placeholder_name,
            state=CanonicalState.OPERATIONAL,
            error_states=config.effective_error_states,
            detail={"statusText": "No recent posts found (assuming operational)"},
        )
