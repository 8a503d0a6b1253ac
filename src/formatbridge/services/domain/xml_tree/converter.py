#!/usr/bin/env python3
"""Node <-> XML tree converter.

Writes Node trees as XML elements and reads XML documents back into Node
trees. XML attributes are folded into the Node according to an
XmlEncodingPolicy:

- NONE:    attributes are dropped
- GROUP:   {"value": <content>, "attributes": {<name>: <value>, ...}}
- MERGE:   {"value": <text>, <name>: <value>, ...}, or the nested content
           with the attributes merged in
- ATTRIBS: {<name>: <value>, ...}; element content is dropped

When writing, the shape of each mapping selects the encoding: a mapping
with an "attributes" key is written as GROUP, a mapping with a "value" key
(and no "attributes") as MERGE, and anything else as nested elements. A
field that is itself named "attributes" therefore always triggers the GROUP
reading.

Repeated sibling names collapse into a list in document order, and a list
value is written back as repeated siblings.
"""
import logging
from typing import Any

# Use defusedxml for secure XML parsing (prevents XXE and entity expansion attacks)
import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

# Element building and serialization come from the standard library
from xml.etree.ElementTree import Element, ElementTree, SubElement, tostring

from ....core.config import converter_config
from ....models.models import XmlEncodingPolicy
from ..coercion import box, unbox
from ..tree.builder import InvalidTypeError, Node, check_depth, is_composite, is_record, iter_fields

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

# Element name used for entries of a top-level list
LIST_ITEM_TAG = "item"


class XmlParseError(ValueError):
    """Malformed XML text given to an explicit decode entry point."""


def parse_xml(data: str | bytes) -> Element:
    """Parse XML text into its root element.

    Args:
        data: XML document as str or bytes

    Returns:
        Root element

    Raises:
        XmlParseError: If the document is malformed, cannot be encoded, or
                       uses forbidden constructs (entity declarations,
                       external references)
    """
    try:
        return ET.fromstring(data)
    except (ET.ParseError, DefusedXmlException, UnicodeError) as e:
        raise XmlParseError(f"Invalid XML document: {e}") from e


def _as_element(data: Any) -> Element:
    if isinstance(data, Element):
        return data
    if isinstance(data, ElementTree):
        return data.getroot()
    if isinstance(data, (str, bytes, bytearray)):
        return parse_xml(bytes(data) if isinstance(data, bytearray) else data)
    raise InvalidTypeError(f"Cannot read XML from {type(data).__name__}")


# ---------------------------------------------------------------------------
# Node -> XML
# ---------------------------------------------------------------------------

def build_xml(into: Element, data: Any) -> Element:
    """Write a Node's entries, in order, as children of ``into``.

    Each entry is written according to the shape of its value:

    1. scalar: leaf child with the unboxed text
    2. list: one sibling per item, all sharing the key as name
    3. mapping with "attributes": child with text (or nested content) from
       "value" and an XML attribute per "attributes" entry
    4. mapping with "value" only: child with text from "value"; other scalar
       entries become attributes, composite entries nested elements
    5. any other mapping: child whose entries all become nested elements

    A top-level list writes one <item> child per entry.

    Args:
        into: Element to append to
        data: Node (mapping or list); records are read through their fields

    Returns:
        ``into``, for chaining
    """
    _build(into, data, 1)
    return into


def _build(into: Element, data: Any, depth: int) -> None:
    check_depth(depth)

    if isinstance(data, (list, tuple)):
        for item in data:
            _append(into, LIST_ITEM_TAG, item, depth)
        return

    if is_record(data):
        data = dict(iter_fields(data))

    if not isinstance(data, dict):
        into.text = unbox(data)
        return

    for key, value in data.items():
        _append(into, str(key), value, depth)


def _leaf(parent: Element, key: str, value: Any) -> Element:
    node = SubElement(parent, key)
    node.text = unbox(value)
    return node


def _append(parent: Element, key: str, value: Any, depth: int) -> None:
    if not is_composite(value):
        _leaf(parent, key, value)
        return

    if is_record(value):
        value = dict(iter_fields(value))

    # Multiple nodes of the same name
    if isinstance(value, (list, tuple)):
        for item in value:
            if is_composite(item):
                _append(parent, key, item, depth + 1)
            else:
                _leaf(parent, key, item)
        return

    node = SubElement(parent, key)

    # GROUP shape
    if "attributes" in value:
        _write_content(node, value.get("value"), depth)
        attributes = value["attributes"]
        if isinstance(attributes, dict):
            for name, attr in attributes.items():
                node.set(str(name), unbox(attr))
        return

    # MERGE shape
    if "value" in value:
        _write_content(node, value["value"], depth)
        for name, item in value.items():
            if name == "value":
                continue
            if is_composite(item):
                _append(node, str(name), item, depth + 1)
            else:
                node.set(str(name), unbox(item))
        return

    # ATTRIBS shape or plain nesting: never attributes
    for name, item in value.items():
        _append(node, str(name), item, depth + 1)


def _write_content(node: Element, content: Any, depth: int) -> None:
    if is_composite(content):
        _build(node, content, depth + 1)
    else:
        node.text = unbox(content)


def render_xml(root: Element) -> str:
    """Render an element as a standalone document with an XML declaration."""
    body = tostring(
        root,
        encoding="unicode",
        short_empty_elements=converter_config.XML_SHORT_EMPTY_ELEMENTS,
    )
    return f"{XML_DECLARATION}\n{body}".strip()


def node_to_xml(data: Any, root_name: str = None) -> str:
    """Build a complete XML document from a Node.

    Args:
        data: Node to write
        root_name: Root element name (defaults to ConverterConfig.DEFAULT_ROOT_NAME)

    Returns:
        Rendered XML document text
    """
    root = Element(root_name or converter_config.DEFAULT_ROOT_NAME)
    build_xml(root, data)
    return render_xml(root)


# ---------------------------------------------------------------------------
# XML -> Node
# ---------------------------------------------------------------------------

def xml_to_node(data: Any, policy: XmlEncodingPolicy | str = XmlEncodingPolicy.GROUP) -> Node:
    """Convert an XML document or element into a Node.

    A childless element decodes to its boxed text. Otherwise each distinct
    child name becomes a key (in document order); names that occur more than
    once map to a list of decoded children.

    Args:
        data: XML text/bytes, Element or ElementTree
        policy: How attributes are folded into the result

    Returns:
        Node tree (a scalar for a childless root)

    Raises:
        XmlParseError: If text input is not well-formed XML
        InvalidTypeError: If data is neither text nor an element
        NestingTooDeepError: If nesting exceeds the configured depth
        ValueError: If policy is not a known policy name

    Example:
        >>> xml_to_node("<root><a>1</a><a>2</a></root>", XmlEncodingPolicy.NONE)
        {'a': [1, 2]}
    """
    policy = XmlEncodingPolicy(policy)
    element = _as_element(data)
    logger.debug(f"Decoding <{element.tag}> with policy {policy.value}")
    return _decode_element(element, policy, 1)


def _decode_element(element: Element, policy: XmlEncodingPolicy, depth: int) -> Node:
    check_depth(depth)

    if len(element) == 0:
        return box(element.text or "")

    grouped: dict[str, list[Element]] = {}
    for child in element:
        grouped.setdefault(child.tag, []).append(child)

    node = {}
    for tag, children in grouped.items():
        values = [_decode_child(child, policy, depth) for child in children]
        node[tag] = values if len(values) > 1 else values[0]
    return node


def _decode_child(child: Element, policy: XmlEncodingPolicy, depth: int) -> Node:
    if not child.attrib or policy is XmlEncodingPolicy.NONE:
        return _decode_element(child, policy, depth + 1)

    attributes = {name: box(value) for name, value in child.attrib.items()}

    if policy is XmlEncodingPolicy.ATTRIBS:
        return attributes

    content = _decode_element(child, policy, depth + 1)

    if policy is XmlEncodingPolicy.GROUP:
        return {"value": content, "attributes": attributes}

    # MERGE: attributes override everything except the "value" key
    merged = dict(content) if isinstance(content, dict) else {"value": content}
    for name, value in attributes.items():
        if name == "value" and "value" in merged:
            continue
        merged[name] = value
    return merged
