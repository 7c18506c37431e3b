"""
Deserialization of path-addressed payloads into plain trees.

JSON and XML payloads both become nested dicts and lists so that the same
dot paths work on either. For XML, attributes are merged into the element's
dict, repeated child elements become lists and text-only elements become
plain strings; text alongside attributes or children is kept under
``#text``. The document root element is kept as the single top-level key.
"""

import json
from typing import Any, Literal, Union

from lxml import etree

from vendor_status.core.exceptions import JSONParsingError, XMLParsingError

TEXT_KEY = "#text"

WireFormat = Literal["json", "xml"]


def _as_text(document: Union[str, bytes]) -> str:
    if isinstance(document, bytes):
        return document.decode("utf-8", errors="replace")
    return document


def load_json_tree(document: Union[str, bytes]) -> Any:
    """
    Parse JSON text.

    Raises:
        JSONParsingError: If the text is empty, not valid JSON, or nested too deeply
    """
    text = _as_text(document).strip()
    if not text:
        raise JSONParsingError("Response is empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JSONParsingError(
            f"Invalid JSON: {e.msg}",
            details={"line": e.lineno, "column": e.colno, "sample": text[:50]},
            cause=e,
        ) from e
    except RecursionError as e:
        raise JSONParsingError(
            "JSON nesting is too deep", details={"sample": text[:50]}, cause=e
        ) from e


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def element_to_tree(element: Any) -> Any:
    """Convert one lxml element into a string or dict."""
    attributes = {_local_name(key): value for key, value in element.attrib.items()}
    children = [child for child in element if isinstance(child.tag, str)]
    text = " ".join((element.text or "").split())

    if not children and not attributes:
        return text

    node: dict[str, Any] = dict(attributes)
    for child in children:
        key = _local_name(child.tag)
        value = element_to_tree(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    if text:
        node[TEXT_KEY] = text
    return node


def load_xml_tree(document: Union[str, bytes]) -> dict[str, Any]:
    """
    Parse XML text into nested dicts keyed by the root element name.

    Raises:
        XMLParsingError: If the text is empty or not well-formed XML
    """
    text = _as_text(document).strip()
    if not text:
        raise XMLParsingError("Response is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise XMLParsingError(
            f"Invalid XML: {e}", details={"sample": text[:50]}, cause=e
        ) from e

    return {_local_name(root.tag): element_to_tree(root)}


def load_tree(document: Union[str, bytes], wire_format: WireFormat = "json") -> Any:
    """
    Deserialize a payload according to its wire format.

    Some XML endpoints answer with JSON; when the xml format is requested
    and the text carries no markup at all, it is read as JSON instead.
    """
    if wire_format == "json":
        return load_json_tree(document)

    text = _as_text(document).strip()
    if text and ("<" not in text or ">" not in text):
        try:
            return load_json_tree(text)
        except JSONParsingError as e:
            raise XMLParsingError(
                "Response is neither XML nor JSON",
                details={"sample": text[:50]},
                cause=e,
            ) from e
    return load_xml_tree(text)
