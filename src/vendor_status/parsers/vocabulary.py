"""
Mapping of raw vendor indicators onto canonical health states.

Indicators are tried in the priority order the caller supplies them
(explicit data attribute, then structural class names); the first one found
in the vocabulary wins. When none match, the element text is scanned for
built-in phrase groups, and only then does the configured default apply.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

from ..models.health import CanonicalState

OPERATIONAL_PHRASES: tuple[str, ...] = ("operating normally", "operational", "ok", "normal")
DEGRADED_PHRASES: tuple[str, ...] = ("degraded", "warning", "slow")
OUTAGE_PHRASES: tuple[str, ...] = ("outage", "down", "error", "incident")

# Order matters: the first group with a phrase present in the text wins.
KEYWORD_GROUPS: tuple[tuple[CanonicalState, tuple[str, ...]], ...] = (
    (CanonicalState.OPERATIONAL, OPERATIONAL_PHRASES),
    (CanonicalState.DEGRADED, DEGRADED_PHRASES),
    (CanonicalState.MAJOR_OUTAGE, OUTAGE_PHRASES),
)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one element."""

    state: CanonicalState
    is_error: bool
    indicator: Optional[str] = None
    matched_by: str = "default"


def lookup_token(
    token: Optional[str], vocabulary: Mapping[str, CanonicalState]
) -> Optional[CanonicalState]:
    """
    Find the canonical state for a single raw token.

    The vocabulary is checked exactly, then case-insensitively; a token that
    is itself a canonical state name maps to that state.
    """
    if token is None:
        return None
    token = token.strip()
    if not token:
        return None

    if token in vocabulary:
        return CanonicalState(vocabulary[token])

    lowered = token.lower()
    for key, state in vocabulary.items():
        if key.lower() == lowered:
            return CanonicalState(state)

    return CanonicalState.from_token(lowered)


def keyword_match(text: Optional[str]) -> tuple[Optional[CanonicalState], Optional[str]]:
    """
    Scan free text for the built-in phrase groups; returns (state, phrase).

    Phrases match as plain substrings, so "ok" is found inside "Ebook".
    This only runs when no indicator is in the vocabulary: map the vendor's
    tokens in ``status_vocabulary`` to decide the state explicitly, and set
    ``unmatched_state`` for elements where neither matches.
    """
    if not text:
        return None, None
    lowered = text.lower()
    for state, phrases in KEYWORD_GROUPS:
        for phrase in phrases:
            if phrase in lowered:
                return state, phrase
    return None, None


def classify(
    indicators: Iterable[Optional[str]],
    vocabulary: Mapping[str, CanonicalState],
    error_states: Iterable[CanonicalState],
    text: Optional[str] = None,
    default: CanonicalState = CanonicalState.OPERATIONAL,
) -> Classification:
    """
    Classify an element from its raw indicators and text.

    Args:
        indicators: Candidate tokens, highest priority first
        vocabulary: Vendor token to canonical state mapping
        error_states: States counted as unhealthy
        text: Visible text used for the keyword fallback
        default: State used when nothing matches

    Returns:
        Classification whose ``is_error`` is ``state in error_states``
    """
    errors = frozenset(error_states)

    for indicator in indicators:
        state = lookup_token(indicator, vocabulary)
        if state is not None:
            return Classification(state, state in errors, indicator.strip(), "vocabulary")

    state, phrase = keyword_match(text)
    if state is not None:
        return Classification(state, state in errors, phrase, "keyword")

    return Classification(default, default in errors, None, "default")
