"""
Canonical health records produced by the extraction engine.

Every adapter, whatever the vendor format, ends up emitting ``Component``
instances; the aggregator folds them into a ``NormalizedReport``.
"""

from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import Field, computed_field, field_validator, model_validator

from vendor_status.models.base import VendorStatusModel


class CanonicalState(str, Enum):
    """The fixed set of health states the engine ever emits."""

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    PARTIAL_OUTAGE = "partial_outage"
    MAJOR_OUTAGE = "major_outage"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: Any) -> Optional["CanonicalState"]:
        """Return the state whose value equals ``token`` (case-insensitive), if any."""
        if token is None:
            return None
        try:
            return cls(str(token).strip().lower())
        except ValueError:
            return None


DEFAULT_ERROR_STATES = frozenset(
    {
        CanonicalState.DEGRADED,
        CanonicalState.PARTIAL_OUTAGE,
        CanonicalState.MAJOR_OUTAGE,
    }
)


class Component(VendorStatusModel):
    """One monitored sub-service extracted from a source document."""

    name: str = Field(..., min_length=1, description="Display label, never empty")
    state: CanonicalState = Field(..., description="Canonical health state")
    is_error: bool = Field(..., description="Whether the state counts as unhealthy")
    raw_indicator: Optional[str] = Field(
        default=None, description="Vendor token the state was derived from"
    )
    detail: Optional[dict[str, Any]] = Field(
        default=None, description="Diagnostic data for drill-down display"
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @classmethod
    def from_state(
        cls,
        name: str,
        state: CanonicalState,
        error_states: Iterable[CanonicalState],
        raw_indicator: Optional[str] = None,
        detail: Optional[dict[str, Any]] = None,
    ) -> "Component":
        """
        Build a component whose ``is_error`` flag is derived from ``state``.

        This is the only constructor adapters use, so ``is_error`` can never
        disagree with the configured error states.
        """
        return cls(
            name=name,
            state=state,
            is_error=state in frozenset(error_states),
            raw_indicator=raw_indicator,
            detail=detail,
        )


class NormalizedReport(VendorStatusModel):
    """Engine output: the canonical health record for one source document."""

    total_components: int = Field(..., ge=0)
    error_count: int = Field(..., ge=0)
    healthy_count: int = Field(..., ge=0)
    components: list[Component] = Field(default_factory=list)
    parse_error: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def check_totals(self) -> "NormalizedReport":
        if self.total_components != len(self.components):
            raise ValueError(
                f"total_components ({self.total_components}) does not match "
                f"{len(self.components)} components"
            )
        if self.healthy_count + self.error_count != self.total_components:
            raise ValueError(
                f"healthy_count ({self.healthy_count}) + error_count "
                f"({self.error_count}) != total_components ({self.total_components})"
            )
        actual_errors = sum(1 for component in self.components if component.is_error)
        if actual_errors != self.error_count:
            raise ValueError(
                f"error_count ({self.error_count}) does not match "
                f"{actual_errors} components flagged as errors"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message(self) -> Optional[str]:
        """Human-readable summary, ``None`` when everything is healthy."""
        if self.parse_error:
            return f"Parse error: {self.parse_error}"
        if self.error_count > 0:
            return f"{self.error_count} of {self.total_components} components have issues"
        return None

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def errors(self) -> list[Component]:
        """Components flagged unhealthy, in document order."""
        return [component for component in self.components if component.is_error]

    def healthy(self) -> list[Component]:
        """Components not flagged unhealthy, in document order."""
        return [component for component in self.components if not component.is_error]
