"""
Path-addressed adapter for JSON and XML status payloads.

The payload arrives already deserialized into nested dicts and lists (see
:mod:`vendor_status.documents`); JSON and XML trees are handled the same
way. Items are located with ``items_path`` and each item is classified
either from numeric threshold fields (outage/degradation/planned counts) or
from a string status field.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional

import structlog

from ..core.config import EngineSettings
from ..core.exceptions import ParsingError
from ..models.health import CanonicalState, Component
from ..models.source_config import PathAddressedConfig
from .base import BaseAdapter
from .path import find_service_collection, resolve, resolve_collection
from .vocabulary import lookup_token

logger = structlog.get_logger(__name__)

TEXT_KEY = "#text"
HEALTHY_STATUS_WORDS = ("operational", "ok", "normal")

_SEVERITY = {
    CanonicalState.OPERATIONAL: 0,
    CanonicalState.UNKNOWN: 1,
    CanonicalState.DEGRADED: 2,
    CanonicalState.PARTIAL_OUTAGE: 3,
    CanonicalState.MAJOR_OUTAGE: 4,
}

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def worst_state(*states: CanonicalState) -> CanonicalState:
    """Return the most severe of the given states."""
    return max(states, key=lambda state: _SEVERITY[state])


def scalar_text(value: Any) -> Optional[str]:
    """Render a resolved leaf as text; XML elements with attributes expose ``#text``."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, Mapping) and TEXT_KEY in value:
        return scalar_text(value[TEXT_KEY])
    return None


def as_count(value: Any) -> int:
    """Read a count leniently: leading integer of a string, otherwise 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    text = scalar_text(value)
    if text:
        match = _LEADING_INT.match(text)
        if match:
            return int(match.group(1))
    return 0


def _is_numeric_text(value: Any) -> bool:
    return isinstance(value, str) and _LEADING_INT.match(value) is not None


class PathAddressedAdapter(BaseAdapter[PathAddressedConfig]):
    """Extracts components from deserialized JSON/XML trees via dot paths."""

    parse_error_name = "JSON Parsing Error"

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        super().__init__("path_addressed", engine_settings)

    @property
    def config_class(self) -> type[PathAddressedConfig]:
        return PathAddressedConfig

    def error_component_name(self, config: Any) -> str:
        if isinstance(config, PathAddressedConfig) and config.wire_format == "xml":
            return "XML Parsing Error"
        return self.parse_error_name

    def _extract(self, document: Any, config: PathAddressedConfig) -> list[Component]:
        if not isinstance(document, (Mapping, list, tuple)):
            raise ParsingError(
                "Expected a deserialized JSON/XML tree",
                details={"document_type": type(document).__name__},
            )

        items = self._collection(document, config)
        self.logger.debug("Resolved service collection", item_count=len(items))

        return [
            self.build_component(item, index, config) for index, item in enumerate(items)
        ]

    def _collection(self, tree: Any, config: PathAddressedConfig) -> list[Any]:
        if config.items_path:
            return resolve_collection(tree, config.items_path)

        path, items = find_service_collection(tree)
        if path is None:
            self.logger.info("No service collection discovered", source=config.name)
        else:
            self.logger.debug("Discovered service collection", path=path)
        return items

    def build_component(
        self, item: Any, index: int, config: PathAddressedConfig
    ) -> Component:
        """Name and classify a single service item."""
        name = scalar_text(resolve(item, config.name_field)) or f"Service {index + 1}"

        if config.uses_thresholds:
            state, raw_indicator, messages = self._threshold_state(item, config)
        elif config.status_field:
            value = resolve(item, config.status_field)
            raw_indicator = scalar_text(value)
            state = self.status_state(value, config)
            messages = [f"Status: {raw_indicator}"] if raw_indicator else []
        else:
            state, raw_indicator = self._implicit_state(item, config)
            messages = [f"Status: {raw_indicator}"] if raw_indicator else []

        error_states = config.effective_error_states
        return Component.from_state(
            name=name,
            state=state,
            error_states=error_states,
            raw_indicator=raw_indicator,
            detail={
                "errorMessages": messages if state in error_states else [],
                "rawData": item,
            },
        )

    def status_state(self, value: Any, config: PathAddressedConfig) -> CanonicalState:
        """
        Classify a string status value.

        Exact vocabulary tokens and canonical state names win; otherwise any
        error-vocabulary substring means a major outage. An absent value is
        unknown.
        """
        if isinstance(value, bool):
            return CanonicalState.OPERATIONAL if value else CanonicalState.MAJOR_OUTAGE

        text = scalar_text(value)
        if not text:
            return CanonicalState.UNKNOWN

        mapped = lookup_token(text, config.status_vocabulary)
        if mapped is not None:
            return mapped

        lowered = text.lower()
        if any(token.lower() in lowered for token in config.error_vocabulary):
            return CanonicalState.MAJOR_OUTAGE
        return CanonicalState.OPERATIONAL

    def _threshold_state(
        self, item: Any, config: PathAddressedConfig
    ) -> tuple[CanonicalState, Optional[str], list[str]]:
        thresholds = config.error_thresholds
        checks = (
            (config.outage_field, thresholds.outage, CanonicalState.MAJOR_OUTAGE, "outages"),
            (config.degradation_field, thresholds.degradation, CanonicalState.DEGRADED, "degradations"),
            (config.planned_field, thresholds.planned, CanonicalState.DEGRADED, "planned maintenances"),
        )

        state = CanonicalState.OPERATIONAL
        messages: list[str] = []
        readings: list[str] = []
        found_any = False

        for field, threshold, breach_state, label in checks:
            if not field or threshold < 0:
                continue

            value = resolve(item, field)
            text = scalar_text(value)
            if text is None:
                continue
            found_any = True
            readings.append(f"{field}={text}")

            # Some vendors put a status phrase where a count is expected
            if field == config.outage_field and isinstance(value, str) and not _is_numeric_text(value):
                if not any(word in text.lower() for word in HEALTHY_STATUS_WORDS):
                    state = worst_state(state, CanonicalState.MAJOR_OUTAGE)
                    messages.append(f"Status: {text}")
                continue

            count = as_count(value)
            if count > threshold:
                state = worst_state(state, breach_state)
                messages.append(f"{count} {label}")

        if not found_any:
            return CanonicalState.UNKNOWN, None, []
        return state, ", ".join(readings), messages

    def _implicit_state(
        self, item: Any, config: PathAddressedConfig
    ) -> tuple[CanonicalState, Optional[str]]:
        """Classify an item when no status or threshold field is configured."""
        if not isinstance(item, Mapping):
            return CanonicalState.UNKNOWN, None

        for key in ("status", "state"):
            if key in item and item[key] is not None:
                return self.status_state(item[key], config), scalar_text(item[key])

        for key in ("operational", "isOperational"):
            if isinstance(item.get(key), bool):
                healthy = item[key]
                state = CanonicalState.OPERATIONAL if healthy else CanonicalState.MAJOR_OUTAGE
                return state, f"{key}={str(healthy).lower()}"

        return CanonicalState.UNKNOWN, None
