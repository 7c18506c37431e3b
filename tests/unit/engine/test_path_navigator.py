"""
Tests for dot-path navigation over nested data.
"""

import pytest

from vendor_status.core.exceptions import PathResolutionError
from vendor_status.parsers.path import (
    discover_collections,
    find_service_collection,
    resolve,
    resolve_collection,
)


class TestResolve:
    """Test lenient field resolution."""

    def test_resolves_nested_mapping(self):
        """Test a plain nested path returns the leaf."""
        assert resolve({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_missing_segment_returns_none(self):
        """Test stepping into a scalar yields None instead of raising."""
        assert resolve({"a": 1}, "a.b") is None
        assert resolve({"a": {}}, "a.b.c") is None

    def test_empty_path_returns_root(self):
        """Test an empty or missing path returns the root unchanged."""
        root = {"a": 1}
        assert resolve(root, "") is root
        assert resolve(root, None) is root

    def test_list_segments_use_first_element(self):
        """Test a name segment applied to a list reads its first element."""
        data = {"outages": [{"outage": "0"}, {"outage": "5"}]}
        assert resolve(data, "outages.outage") == "0"

    def test_final_list_collapses_to_first_element(self):
        """Test a path ending on a list returns its first element."""
        assert resolve({"names": ["first", "second"]}, "names") == "first"

    def test_integer_segment_indexes_list(self):
        """Test integer segments select by position."""
        data = {"rows": [{"v": "a"}, {"v": "b"}]}
        assert resolve(data, "rows.1.v") == "b"
        assert resolve(data, "rows.5.v") is None

    def test_does_not_mutate_input(self):
        """Test resolution leaves the tree untouched."""
        data = {"a": [{"b": 1}]}
        resolve(data, "a.b")
        assert data == {"a": [{"b": 1}]}


class TestResolveCollection:
    """Test strict collection resolution."""

    def test_returns_list_at_path(self):
        """Test a list at the path is returned whole."""
        data = {"result": {"items": [1, 2, 3]}}
        assert resolve_collection(data, "result.items") == [1, 2, 3]

    def test_indexes_through_lists(self):
        """Test integer segments walk into list positions."""
        data = {"containers": [{"rows": []}, {"rows": [{"services": ["x"]}]}]}
        assert resolve_collection(data, "containers.1.rows.0.services") == ["x"]

    def test_single_object_is_wrapped(self):
        """Test a lone object becomes a one-item collection."""
        data = {"services": {"service": {"name": "Only"}}}
        assert resolve_collection(data, "services.service") == [{"name": "Only"}]

    def test_null_is_empty(self):
        """Test an explicit null yields no items."""
        assert resolve_collection({"services": None}, "services") == []

    def test_missing_path_raises_with_available_keys(self):
        """Test a broken path reports the failing segment and the keys present."""
        with pytest.raises(PathResolutionError) as exc_info:
            resolve_collection({"result": {"data": []}}, "result.services")

        error = exc_info.value
        assert error.details["segment"] == "services"
        assert error.details["available"] == ["data"]
        assert "result.services" in error.message


class TestServiceDiscovery:
    """Test automatic location of service collections."""

    def test_discover_collections_reports_paths(self):
        """Test every nested list is yielded with its path."""
        data = {"a": {"b": [1, 2]}, "c": [{"d": [3]}]}
        paths = [path for path, _ in discover_collections(data)]
        assert "a.b" in paths
        assert "c" in paths
        assert "c.0.d" in paths

    def test_picks_largest_service_like_list(self):
        """Test the largest list of service-shaped records wins."""
        data = {
            "links": [{"href": "/a"}, {"href": "/b"}, {"href": "/c"}],
            "widget": {
                "services": [
                    {"name": "A", "status": "ok"},
                    {"name": "B", "status": "ok"},
                ]
            },
        }
        path, items = find_service_collection(data)
        assert path == "widget.services"
        assert len(items) == 2

    def test_nothing_found(self):
        """Test a tree without service records yields no collection."""
        assert find_service_collection({"values": [1, 2, 3]}) == (None, [])
