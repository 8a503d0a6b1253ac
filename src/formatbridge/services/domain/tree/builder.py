#!/usr/bin/env python3
"""Record/Node tree builder.

Mirrors plain records into Nodes (dicts, lists and boxed scalars) and back
into ``types.SimpleNamespace`` records. Both directions are structural
mirrors: composite values recurse, scalar values pass through ``box``.

A record is any plain field-carrying object:

- pydantic models (fields from ``model_fields``)
- objects with a ``__dict__`` (SimpleNamespace, dataclasses, plain classes);
  dunder and callable entries are skipped
- ``__slots__`` classes
"""
import logging
from types import ModuleType, SimpleNamespace
from typing import Any, Iterator
from xml.etree.ElementTree import Element, ElementTree

from pydantic import BaseModel

from ....core.config import converter_config
from ..coercion import box

logger = logging.getLogger(__name__)

Node = dict[str, Any] | list[Any] | str | int | float | bool | None


class InvalidTypeError(TypeError):
    """A non-composite value was given where a mapping or list is required."""


class NestingTooDeepError(ValueError):
    """Input nesting exceeds ConverterConfig.MAX_DEPTH."""


def check_depth(depth: int) -> None:
    """Raise NestingTooDeepError once ``depth`` passes the configured limit."""
    limit = converter_config.MAX_DEPTH
    if depth > limit:
        logger.warning(f"Refusing to recurse past depth {limit}")
        raise NestingTooDeepError(f"Nesting deeper than {limit} levels")


def is_record(value: Any) -> bool:
    """Check if value is a plain field-carrying object.

    Classes, modules, functions, XML elements, text, numbers and containers
    are not records.
    """
    if value is None or isinstance(value, (str, bytes, bytearray, int, float, dict, list, tuple, set)):
        return False
    if isinstance(value, (type, ModuleType, Element, ElementTree)) or callable(value):
        return False
    if isinstance(value, BaseModel):
        return True
    return hasattr(value, "__dict__") or hasattr(type(value), "__slots__")


def is_composite(value: Any) -> bool:
    """Check if value is a mapping, sequence or record (anything that recurses)."""
    return isinstance(value, (dict, list, tuple)) or is_record(value)


def iter_fields(record: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, value) pairs for a record's public data fields."""
    if isinstance(record, BaseModel):
        for name in type(record).model_fields:
            yield name, getattr(record, name)
        return

    if hasattr(record, "__dict__"):
        for name, value in vars(record).items():
            if name.startswith("__") or callable(value):
                continue
            yield name, value
        return

    slots = getattr(type(record), "__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    for name in slots:
        if name.startswith("__") or not hasattr(record, name):
            continue
        value = getattr(record, name)
        if not callable(value):
            yield name, value


def _entries(source: Any) -> Iterator[tuple[Any, Any]]:
    if isinstance(source, dict):
        return iter(source.items())
    return iter_fields(source)


def build_node_from_record(source: Any) -> Node:
    """Turn a record (or container) into a Node, recursing through every tier.

    Args:
        source: Record, dict, list or tuple

    Returns:
        A new dict (or list for sequences) with boxed scalar leaves

    Raises:
        InvalidTypeError: If source is a scalar
        NestingTooDeepError: If nesting exceeds the configured depth

    Example:
        >>> build_node_from_record(SimpleNamespace(one=SimpleNamespace(two="2")))
        {'one': {'two': 2}}
    """
    if not is_composite(source):
        raise InvalidTypeError(f"Cannot build a node tree from {type(source).__name__}")
    return _node_from(source, 1)


def _node_from(source: Any, depth: int) -> Node:
    check_depth(depth)

    if isinstance(source, (list, tuple)):
        return [_node_from(item, depth + 1) if is_composite(item) else box(item) for item in source]

    node = {}
    for key, value in _entries(source):
        if is_composite(value):
            node[key] = _node_from(value, depth + 1)
        else:
            node[key] = box(value)
    return node


def build_record_from_node(source: Any) -> SimpleNamespace:
    """Turn a Node (or record) into a SimpleNamespace record.

    Nested mappings become records, nested lists stay lists with their items
    mirrored, scalars are boxed. A top-level list becomes a record keyed by
    string index ("0", "1", ...).

    Raises:
        InvalidTypeError: If source is a scalar
        NestingTooDeepError: If nesting exceeds the configured depth
    """
    if not is_composite(source):
        raise InvalidTypeError(f"Cannot build a record from {type(source).__name__}")

    if isinstance(source, (list, tuple)):
        source = {str(index): item for index, item in enumerate(source)}

    return _record_from(source, 1)


def _record_from(source: Any, depth: int) -> Any:
    check_depth(depth)

    if isinstance(source, (list, tuple)):
        return [_record_from(item, depth + 1) if is_composite(item) else box(item) for item in source]

    record = SimpleNamespace()
    for key, value in _entries(source):
        if is_composite(value):
            setattr(record, str(key), _record_from(value, depth + 1))
        else:
            setattr(record, str(key), box(value))
    return record
