"""
Tests for JSON/XML payload deserialization.
"""

import pytest

from vendor_status.core.exceptions import JSONParsingError, XMLParsingError
from vendor_status.documents import load_json_tree, load_tree, load_xml_tree


class TestJsonTrees:
    def test_valid(self):
        assert load_json_tree('{"a": [1, 2]}') == {"a": [1, 2]}
        assert load_json_tree(b'[{"b": null}]') == [{"b": None}]

    def test_invalid(self):
        with pytest.raises(JSONParsingError) as exc_info:
            load_json_tree("{not json")
        assert exc_info.value.details["line"] == 1

    def test_empty(self):
        with pytest.raises(JSONParsingError):
            load_json_tree("  ")


class TestXmlTrees:
    """Test the XML to nested-dict conversion."""

    def test_attributes_and_repeated_children(self):
        xml = (
            "<response><services>"
            "<service id='1'><name>Alma</name><status>up</status></service>"
            "<service id='2'><name>Primo</name><status>down</status></service>"
            "</services></response>"
        )
        tree = load_xml_tree(xml)

        services = tree["response"]["services"]["service"]
        assert services == [
            {"id": "1", "name": "Alma", "status": "up"},
            {"id": "2", "name": "Primo", "status": "down"},
        ]

    def test_single_child_is_not_a_list(self):
        tree = load_xml_tree("<r><item><name>Only</name></item></r>")
        assert tree == {"r": {"item": {"name": "Only"}}}

    def test_text_with_attributes(self):
        tree = load_xml_tree('<r><count unit="n"> 3 </count></r>')
        assert tree == {"r": {"count": {"unit": "n", "#text": "3"}}}

    def test_namespaces_stripped(self):
        tree = load_xml_tree('<a:r xmlns:a="urn:x"><a:v>1</a:v></a:r>')
        assert tree == {"r": {"v": "1"}}

    def test_malformed(self):
        with pytest.raises(XMLParsingError):
            load_xml_tree("<r><unclosed></r>")


class TestLoadTree:
    def test_json_format(self):
        assert load_tree('{"x": 1}', "json") == {"x": 1}

    def test_xml_endpoint_answering_json(self):
        """Test JSON text is accepted when XML was expected."""
        assert load_tree('{"services": []}', "xml") == {"services": []}

    def test_xml_neither_format(self):
        with pytest.raises(XMLParsingError):
            load_tree("plain words", "xml")

    def test_xml_format(self):
        assert load_tree("<r><v>1</v></r>", "xml") == {"r": {"v": "1"}}
