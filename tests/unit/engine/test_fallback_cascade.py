"""
Tests for the ordered fallback cascade.
"""

from vendor_status.models.health import DEFAULT_ERROR_STATES, CanonicalState, Component
from vendor_status.parsers.fallback import run_cascade, select_nodes, with_fallback
from vendor_status.parsers.base import load_markup


def _component(node, index):
    return Component.from_state(
        name=node.get_text(strip=True) or f"Component {index + 1}",
        state=CanonicalState.OPERATIONAL,
        error_states=DEFAULT_ERROR_STATES,
    )


class CountingExtractor:
    """Element extractor that records how often it is invoked."""

    def __init__(self):
        self.calls = 0

    def __call__(self, node, index):
        self.calls += 1
        return _component(node, index)


class TestRunCascade:
    """Test cascade ordering and limits."""

    def test_fallback_not_invoked_when_primary_matches(self):
        """Test fallback selectors are never tried after a primary hit."""
        extractor = CountingExtractor()
        primary_result = [
            Component.from_state("Primary", CanonicalState.OPERATIONAL, DEFAULT_ERROR_STATES)
        ]

        result = run_cascade(
            "<div class='status'>x</div>",
            lambda soup: primary_result,
            [".status"],
            extractor,
        )

        assert extractor.calls == 0
        assert result.components == primary_result
        assert result.used_fallback is False

    def test_first_matching_selector_wins(self):
        """Test later selectors are ignored once one matches."""
        html = "<ul><li class='status'>One</li></ul><div class='service'>Two</div>"
        result = run_cascade(html, lambda soup: None, [".missing", ".service", ".status"], _component)

        assert result.matched_selector == ".service"
        assert [c.name for c in result.components] == ["Two"]

    def test_limit_caps_processed_nodes(self):
        """Test only the first ``limit`` nodes become components."""
        html = "".join(f"<div class='status'>Item {i}</div>" for i in range(25))
        result = run_cascade(html, lambda soup: [], [".status"], _component, limit=10)

        assert len(result.components) == 10
        assert result.node_count == 25
        assert result.components[0].name == "Item 0"

    def test_nothing_found_is_empty(self):
        """Test an exhausted cascade reports zero components."""
        assert with_fallback("<p>nothing</p>", lambda soup: None, [".status"], _component) == []

    def test_dropped_nodes(self):
        """Test the element extractor may skip nodes."""
        html = "<div class='s'>keep</div><div class='s'></div>"
        components = with_fallback(
            html,
            lambda soup: None,
            [".s"],
            lambda node, i: _component(node, i) if node.get_text(strip=True) else None,
        )
        assert [c.name for c in components] == ["keep"]


class TestSelectNodes:
    """Test selector execution."""

    def test_invalid_selector_matches_nothing(self):
        soup = load_markup("<div class='a'>x</div>")
        assert select_nodes(soup, "div[") == []
        assert len(select_nodes(soup, ".a")) == 1
