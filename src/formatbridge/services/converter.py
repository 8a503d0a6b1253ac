#!/usr/bin/env python3
"""Canonical format conversion service.

Converts any supported input (container, record, JSON text, serialized text,
XML) into any target representation. The input format is detected once and
the decoded payload is reused, so text is never parsed twice.

Conversions never raise on well-formed input of a detected type. Input of
no known format is cast best-effort: to_node() wraps a scalar in a list,
to_record() wraps it as {"value": scalar}.
"""
import json
import logging
import math
from types import SimpleNamespace
from typing import Any

from ..core.config import converter_config
from ..models.models import FormatTag, XmlEncodingPolicy
from .domain.detection import identify
from .domain.serialized import encode as encode_serialized
from .domain.tree import Node, build_node_from_record, build_record_from_node, is_composite, is_record
from .domain.tree.builder import check_depth
from .domain.xml_tree import node_to_xml, render_xml, xml_to_node

logger = logging.getLogger(__name__)


def _cast_node(value: Any) -> Node:
    """Cast a decoded value into a mapping or list."""
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, tuple):
        return list(value)
    if value is None:
        return []
    return [value]


def _as_text(data: str | bytes | bytearray) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8")
    return data


def _decode_xml(root: Any) -> Node:
    """Decode an XML root with the GROUP policy; an empty root reads as an empty mapping."""
    node = xml_to_node(root, XmlEncodingPolicy.GROUP)
    if node == "":
        return {}
    return node


def _json_ready(value: Any, depth: int) -> Any:
    """Copy a Node for json.dumps within the depth limit.

    Records are mirrored and non-finite floats become None, since JSON has
    no literal for them.
    """
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if is_record(value):
        value = build_node_from_record(value)
    if isinstance(value, dict):
        check_depth(depth)
        return {key: _json_ready(item, depth + 1) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        check_depth(depth)
        return [_json_ready(item, depth + 1) for item in value]
    return value


def _mirror_record(obj: Any) -> Any:
    """Fallback hook for encoders: records become Nodes, anything else text."""
    if is_record(obj):
        return build_node_from_record(obj)
    return str(obj)


def _to_node(tag: FormatTag, payload: Any, data: Any, recursive: bool) -> Node:
    if tag is FormatTag.CONTAINER:
        return build_node_from_record(data) if recursive else data

    if tag is FormatTag.RECORD:
        return build_node_from_record(data)

    if tag in (FormatTag.JSON, FormatTag.SERIALIZED):
        return _cast_node(payload)

    if tag is FormatTag.XML:
        return _cast_node(_decode_xml(payload))

    logger.debug(f"Casting {type(data).__name__} input to a node")
    return _cast_node(data)


def to_node(data: Any, recursive: bool = False) -> Node:
    """Transform any supported input into a Node (dict or list).

    Args:
        data: Container, record, JSON/serialized/XML text, or XML element
        recursive: For container input, return a deep copy with every tier
                   mirrored and boxed instead of the input itself

    Returns:
        Node tree

    Example:
        >>> to_node('<root><a>1</a><a>2</a></root>')
        {'a': [1, 2]}
    """
    tag, payload = identify(data)
    return _to_node(tag, payload, data, recursive)


def to_record(data: Any, recursive: bool = False) -> Any:
    """Transform any supported input into a SimpleNamespace record.

    Args:
        data: Any supported input
        recursive: For record input, rebuild it instead of returning it as-is

    Returns:
        Record (a new SimpleNamespace unless data is a record and not recursive)
    """
    tag, payload = identify(data)

    if tag is FormatTag.RECORD:
        return build_record_from_node(data) if recursive else data

    if tag is FormatTag.CONTAINER:
        source = data
    elif tag in (FormatTag.JSON, FormatTag.SERIALIZED):
        source = payload
    elif tag is FormatTag.XML:
        source = _decode_xml(payload)
    else:
        source = data

    if not is_composite(source):
        logger.debug(f"Casting {type(source).__name__} value to a record")
        if source is None:
            return SimpleNamespace()
        source = {"value": source}

    return build_record_from_node(source)


def to_json(data: Any) -> str:
    """Transform any supported input into JSON text.

    JSON text is returned unchanged, preserving its original formatting.
    NaN and infinite floats are written as null.

    Raises:
        NestingTooDeepError: If nesting exceeds the configured depth
    """
    tag, payload = identify(data)

    if tag is FormatTag.JSON:
        return _as_text(data)

    node = _json_ready(_to_node(tag, payload, data, recursive=False), 1)
    indent = converter_config.JSON_INDENT
    return json.dumps(
        node,
        ensure_ascii=False,
        indent=indent,
        separators=(",", ": ") if indent is not None else (",", ":"),
        default=_mirror_record,
    )


def to_serialized(data: Any) -> str:
    """Transform any supported input into serialized text.

    Serialized input is decoded and encoded again rather than returned as
    given, so the output is always in the encoder's canonical form.
    """
    tag, payload = identify(data)
    node = _to_node(tag, payload, data, recursive=False)
    return encode_serialized(node, default=_mirror_record)


def to_xml(data: Any, root_name: str = None) -> str:
    """Transform any supported input into an XML document.

    XML text is returned unchanged and XML elements are rendered as-is.
    Everything else is normalized into a boxed Node tree and written under
    an element named ``root_name``.

    Args:
        data: Any supported input
        root_name: Root element name (defaults to ConverterConfig.DEFAULT_ROOT_NAME)

    Returns:
        XML document text starting with the XML declaration
    """
    tag, payload = identify(data)

    if tag is FormatTag.XML:
        if isinstance(data, (str, bytes, bytearray)):
            return _as_text(data)
        return render_xml(payload)

    node = _to_node(tag, payload, data, recursive=True)
    logger.debug(f"Writing {tag.value} input as XML")
    return node_to_xml(node, root_name)
