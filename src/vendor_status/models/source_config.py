"""
Declarative per-source extraction configuration.

One frozen record per supported document format, combined into the
``SourceConfig`` discriminated union on the ``format`` field. Records hold
only data (selectors, field paths, keyword lists), never code.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, TypeAdapter, field_validator, model_validator

from vendor_status.models.base import VendorStatusModel
from vendor_status.models.health import DEFAULT_ERROR_STATES, CanonicalState


class SourceFormat(str, Enum):
    """Closed set of document formats the engine understands."""

    STRUCTURED_MARKUP = "structured_markup"
    PATH_ADDRESSED = "path_addressed"
    FEED = "feed"
    HEURISTIC_TEXT = "heuristic_text"


DEFAULT_FALLBACK_SELECTORS: tuple[str, ...] = (
    'div[class*="component"]',
    'div[class*="service"]',
    'div[class*="status"]',
    ".status",
    ".service",
    ".component",
    "[data-status]",
    'div[id*="status"]',
    'div[id*="service"]',
    'tr[class*="status"]',
    'li[class*="status"]',
)


def _as_tuple(v: Any) -> Any:
    """Accept a bare string wherever a list of strings is expected."""
    if isinstance(v, str):
        return (v,)
    return v


class BaseSourceConfig(VendorStatusModel):
    """Fields shared by every format variant."""

    name: Optional[str] = Field(default=None, description="Label used in log output")

    error_states: frozenset[CanonicalState] = Field(
        default=DEFAULT_ERROR_STATES,
        description="Canonical states counted as unhealthy",
    )

    unknown_is_error: bool = Field(
        default=False,
        description="Count components whose state could not be classified as errors",
    )

    @property
    def source_format(self) -> SourceFormat:
        return SourceFormat(self.format)  # type: ignore[attr-defined]

    @property
    def effective_error_states(self) -> frozenset[CanonicalState]:
        """Error states with ``unknown`` added when configured."""
        if self.unknown_is_error:
            return self.error_states | {CanonicalState.UNKNOWN}
        return self.error_states


class StructuredMarkupConfig(BaseSourceConfig):
    """Styled HTML status pages queried with CSS selectors."""

    format: Literal["structured_markup"] = "structured_markup"

    primary_selectors: tuple[str, ...] = Field(
        ..., min_length=1, description="CSS selectors tried in order"
    )

    status_vocabulary: dict[str, CanonicalState] = Field(
        default_factory=dict,
        description="Vendor class names or tokens mapped to canonical states",
    )

    fallback_selectors: tuple[str, ...] = Field(
        default=DEFAULT_FALLBACK_SELECTORS,
        description="Selectors tried when no primary selector matches",
    )

    unmatched_state: CanonicalState = Field(
        default=CanonicalState.OPERATIONAL,
        description="State used when no indicator or keyword matches",
    )

    @field_validator("primary_selectors", "fallback_selectors", mode="before")
    @classmethod
    def accept_single_selector(cls, v: Any) -> Any:
        return _as_tuple(v)

    @field_validator("primary_selectors")
    @classmethod
    def validate_selectors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(selector.strip() for selector in v if selector and selector.strip())
        if not cleaned:
            raise ValueError("primary_selectors must contain at least one selector")
        return cleaned


class ErrorThresholds(VendorStatusModel):
    """Counts above which a threshold field marks a service unhealthy.

    A negative threshold disables the corresponding check.
    """

    outage: int = 0
    degradation: int = 0
    planned: int = 0


class PathAddressedConfig(BaseSourceConfig):
    """JSON or XML payloads navigated with dot-separated field paths."""

    format: Literal["path_addressed"] = "path_addressed"

    items_path: Optional[str] = Field(
        default=None, description="Dot path to the collection of services"
    )

    name_field: str = Field(default="name", description="Dot path to the item label")

    status_field: Optional[str] = Field(
        default=None, description="Dot path to a string status value"
    )

    status_vocabulary: dict[str, CanonicalState] = Field(
        default_factory=dict,
        description="Exact status tokens (case-insensitive) mapped to canonical states",
    )

    error_vocabulary: tuple[str, ...] = Field(
        default=("down", "error", "outage", "degraded", "partial_outage", "major_outage"),
        description="Substrings marking a status value as unhealthy",
    )

    outage_field: Optional[str] = None
    degradation_field: Optional[str] = None
    planned_field: Optional[str] = None

    error_thresholds: ErrorThresholds = Field(default_factory=ErrorThresholds)

    wire_format: Literal["json", "xml"] = Field(
        default="json", description="How a text document should be deserialized"
    )

    auto_discover: bool = Field(
        default=False,
        description="Locate the service collection automatically when items_path is unset",
    )

    @field_validator("error_vocabulary", mode="before")
    @classmethod
    def accept_single_token(cls, v: Any) -> Any:
        return _as_tuple(v)

    @field_validator("status_vocabulary")
    @classmethod
    def lowercase_vocabulary(
        cls, v: dict[str, CanonicalState]
    ) -> dict[str, CanonicalState]:
        return {token.strip().lower(): state for token, state in v.items()}

    @model_validator(mode="after")
    def require_collection(self) -> "PathAddressedConfig":
        if not self.items_path and not self.auto_discover:
            raise ValueError("items_path is required unless auto_discover is enabled")
        return self

    @property
    def uses_thresholds(self) -> bool:
        return any((self.outage_field, self.degradation_field, self.planned_field))


class FeedConfig(BaseSourceConfig):
    """RSS or Atom feeds whose entry titles carry the health signal."""

    format: Literal["feed"] = "feed"

    normal_phrases: tuple[str, ...] = Field(
        default=("operating normally", "all systems operational", "no issues"),
        description="Title phrases meaning normal operation",
    )

    @field_validator("normal_phrases", mode="before")
    @classmethod
    def accept_single_phrase(cls, v: Any) -> Any:
        return _as_tuple(v)


class HeuristicTextConfig(BaseSourceConfig):
    """Announcement or blog listings with no status markup at all."""

    format: Literal["heuristic_text"] = "heuristic_text"

    selectors: tuple[str, ...] = Field(
        default=("li", ".discussion-item", ".topic", "article"),
        description="Selectors for candidate posts",
    )

    scan_noscript: bool = Field(
        default=True, description="Look for posts inside <noscript> blocks first"
    )

    topic_marker: str = Field(
        default="discussion", description="Substring identifying post links"
    )

    resolved_keywords: tuple[str, ...] = ("resolved", "fix released", "merged")

    unresolved_keywords: tuple[str, ...] = ("not resolved", "unresolved")

    boilerplate_phrases: tuple[str, ...] = (
        "all categories",
        "recent posts",
        "navigation",
        "community announcements",
    )

    min_title_length: int = Field(default=20, ge=0)

    placeholder_name: str = Field(default="Vendor Announcements", min_length=1)

    @field_validator(
        "selectors",
        "resolved_keywords",
        "unresolved_keywords",
        "boilerplate_phrases",
        mode="before",
    )
    @classmethod
    def accept_single_keyword(cls, v: Any) -> Any:
        return _as_tuple(v)


SourceConfig = Annotated[
    Union[StructuredMarkupConfig, PathAddressedConfig, FeedConfig, HeuristicTextConfig],
    Field(discriminator="format"),
]

_source_config_adapter: TypeAdapter[SourceConfig] = TypeAdapter(SourceConfig)


def parse_source_config(data: dict[str, Any]) -> SourceConfig:
    """Validate a plain mapping into the matching configuration variant."""
    return _source_config_adapter.validate_python(data)
