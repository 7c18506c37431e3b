"""
Source definitions: where each vendor publishes its status and how to read it.

Definitions can be loaded from a JSON file (a list of objects with ``name``,
``url``, ``config`` and an optional ``description``); the built-in set covers
the library vendors the monitor was first written for.
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from vendor_status.core.exceptions import ConfigurationError
from vendor_status.models.base import VendorStatusModel
from vendor_status.models.health import CanonicalState
from vendor_status.models.source_config import (
    FeedConfig,
    HeuristicTextConfig,
    PathAddressedConfig,
    SourceConfig,
    StructuredMarkupConfig,
)


class SourceDefinition(VendorStatusModel):
    """A named vendor status endpoint and its extraction configuration."""

    name: str
    url: str
    config: SourceConfig
    description: Optional[str] = None


_definitions_adapter = TypeAdapter(list[SourceDefinition])


def load_sources(path: Union[str, Path]) -> list[SourceDefinition]:
    """
    Load source definitions from a JSON file.

    Args:
        path: File containing a JSON list of source definitions

    Returns:
        Validated source definitions in file order

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read sources file {path}", details={"error": str(e)}, cause=e
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Sources file {path} is not valid JSON", details={"error": e.msg}, cause=e
        ) from e

    try:
        return _definitions_adapter.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid source definitions in {path}",
            details={"errors": e.errors(include_url=False)},
            cause=e,
        ) from e


def find_source(
    name: str, sources: Optional[list[SourceDefinition]] = None
) -> Optional[SourceDefinition]:
    """Look up a source by name, case-insensitively."""
    for source in sources if sources is not None else DEFAULT_SOURCES:
        if source.name.lower() == name.lower():
            return source
    return None


_SERVICE_NOW_ERRORS = ("down", "error", "outage", "degraded", "partial_outage", "major_outage")

DEFAULT_SOURCES: list[SourceDefinition] = [
    SourceDefinition(
        name="Ebsco",
        url="https://status.ebsco.com/",
        config=StructuredMarkupConfig(
            name="Ebsco",
            primary_selectors=(".component-inner-container",),
            status_vocabulary={
                "status-green": CanonicalState.OPERATIONAL,
                "status-yellow": CanonicalState.DEGRADED,
                "status-orange": CanonicalState.PARTIAL_OUTAGE,
                "status-red": CanonicalState.MAJOR_OUTAGE,
            },
        ),
    ),
    SourceDefinition(
        name="ProQuest",
        url="https://status.proquest.com/",
        config=StructuredMarkupConfig(
            name="ProQuest",
            primary_selectors=("tr:has(.component)",),
            status_vocabulary={
                "glyphicon-ok-circle": CanonicalState.OPERATIONAL,
                "all-clear": CanonicalState.OPERATIONAL,
                "glyphicon-warning-sign": CanonicalState.DEGRADED,
                "glyphicon-exclamation-sign": CanonicalState.PARTIAL_OUTAGE,
                "glyphicon-remove-circle": CanonicalState.MAJOR_OUTAGE,
                "glyphicon-ban-circle": CanonicalState.MAJOR_OUTAGE,
            },
        ),
    ),
    SourceDefinition(
        name="Springshare",
        url="https://lounge.springshare.com/categories/announcements/p1",
        config=HeuristicTextConfig(
            name="Springshare",
            error_states=frozenset({CanonicalState.MAJOR_OUTAGE}),
            placeholder_name="Springshare Services",
            boilerplate_phrases=(
                "all categories",
                "recent posts",
                "navigation",
                "springy community announcements",
                "community announcements",
            ),
        ),
    ),
    SourceDefinition(
        name="Gale",
        url="https://support.gale.com/technical/status/rss.php",
        description=(
            'Items other than "All Gale Resources Operating Normally" indicate outages'
        ),
        config=FeedConfig(name="Gale"),
    ),
    SourceDefinition(
        name="OCLC",
        url="https://oclc.service-now.com/api/now/sp/page?portal_id=24fa0f696f6d36005630496aea3ee4a9",
        description="OCLC service status JSON API",
        config=PathAddressedConfig(
            name="OCLC",
            items_path="result.containers.1.rows.0.columns.0.widgets.0.widget.data.services",
            name_field="name",
            status_field="status",
            error_vocabulary=_SERVICE_NOW_ERRORS,
        ),
    ),
    SourceDefinition(
        name="Ex Libris",
        url="https://status.exlibrisgroup.com/api/now/sp/page?portal_id=24ca47791b6fd8d04bd3ca286e4bcb75",
        description="Ex Libris service status JSON API",
        config=PathAddressedConfig(
            name="Ex Libris",
            items_path="result.containers.2.rows.0.columns.0.widgets.0.widget.data.services",
            name_field="name",
            status_field="status",
            error_vocabulary=_SERVICE_NOW_ERRORS,
        ),
    ),
]
