"""
Folding of extracted components into a normalized report.

This is also the one place where an extraction failure turns into a
successful result: :func:`parse_failure_report` builds the single
``major_outage`` component that stands in for an unreadable document.
"""

from collections.abc import Iterable
from typing import Any, Optional

from ..models.health import CanonicalState, Component, NormalizedReport


def aggregate(components: Iterable[Component]) -> NormalizedReport:
    """Tally components into a report, preserving their order."""
    components = list(components)
    error_count = sum(1 for component in components if component.is_error)

    return NormalizedReport(
        total_components=len(components),
        error_count=error_count,
        healthy_count=len(components) - error_count,
        components=components,
    )


def parse_failure_report(
    name: str, message: str, detail: Optional[dict[str, Any]] = None
) -> NormalizedReport:
    """
    Build the report for a document that could not be interpreted.

    Args:
        name: Name of the synthetic component, e.g. ``"JSON Parsing Error"``
        message: Failure message, surfaced as ``parse_error``
        detail: Extra diagnostic fields merged into the component detail

    Returns:
        Report with exactly one erroring component
    """
    component = Component(
        name=name,
        state=CanonicalState.MAJOR_OUTAGE,
        is_error=True,
        detail={"message": message, **(detail or {})},
    )
    return NormalizedReport(
        total_components=1,
        error_count=1,
        healthy_count=0,
        components=[component],
        parse_error=message,
    )
