"""
Feed adapter for RSS and Atom status feeds.

Each entry's title is the health signal: it is normal only when it contains
one of the configured normal-operation phrases, otherwise it is treated as a
major outage.
"""

from typing import Any, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..core.config import EngineSettings
from ..core.exceptions import FeedParsingError
from ..models.health import CanonicalState, Component
from ..models.source_config import FeedConfig
from .base import BaseAdapter

logger = structlog.get_logger(__name__)

FEED_PARSER = "xml"


def _child_text(entry: Tag, *names: str) -> Optional[str]:
    for name in names:
        child = entry.find(name)
        if child is not None:
            text = child.get_text(strip=True)
            if text:
                return text
    return None


def feed_entries(document: Any) -> list[Tag]:
    """
    Locate the entries of an RSS channel or Atom feed.

    Raises:
        FeedParsingError: If the document is not a feed
    """
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")
    if not isinstance(document, (str, BeautifulSoup)):
        raise FeedParsingError(
            "Expected feed text", details={"document_type": type(document).__name__}
        )
    if isinstance(document, str) and not document.strip():
        raise FeedParsingError("Feed document is empty")

    soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, FEED_PARSER)

    channel = soup.find("channel")
    if channel is not None:
        return channel.find_all("item")

    atom = soup.find("feed")
    if atom is not None:
        return atom.find_all("entry")

    raise FeedParsingError("No RSS channel or Atom feed found")


class FeedAdapter(BaseAdapter[FeedConfig]):
    """Turns feed entries into components by inspecting their titles."""

    parse_error_name = "Feed Parse Error"

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        super().__init__("feed", engine_settings)

    @property
    def config_class(self) -> type[FeedConfig]:
        return FeedConfig

    def _extract(self, document: Any, config: FeedConfig) -> list[Component]:
        entries = feed_entries(document)
        self.logger.debug("Found feed entries", entry_count=len(entries))

        return [
            self.build_component(entry, index, config)
            for index, entry in enumerate(entries)
        ]

    def is_normal(self, title: Optional[str], config: FeedConfig) -> bool:
        if not title:
            return False
        lowered = title.lower()
        return any(phrase.lower() in lowered for phrase in config.normal_phrases)

    def build_component(self, entry: Tag, index: int, config: FeedConfig) -> Component:
        title = _child_text(entry, "title")
        normal = self.is_normal(title, config)
        state = CanonicalState.OPERATIONAL if normal else CanonicalState.MAJOR_OUTAGE

        return Component.from_state(
            name=title or f"Feed Item {index + 1}",
            state=state,
            error_states=config.effective_error_states,
            raw_indicator=title,
            detail={
                "description": _child_text(entry, "description", "summary", "content"),
                "pubDate": _child_text(entry, "pubDate", "published", "updated"),
                "isNormalOperation": normal,
            },
        )
