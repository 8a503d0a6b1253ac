#!/usr/bin/env python3
"""Format detection by speculative parsing.

Each ``is_*`` probe returns the decoded value when the input matches its
format, and the NO_MATCH sentinel otherwise. Probes never raise: decode
errors are logged at DEBUG and swallowed, so callers can cascade through
the probes and reuse whichever payload matched.

Detection order is fixed: container, record, JSON, serialized, XML. Input
that is valid in more than one format gets the first tag in that order
(e.g. ``"42"`` is JSON, not XML or serialized).
"""
import json
import logging
from typing import Any
from xml.etree.ElementTree import Element, ElementTree

from ....models.models import FormatTag
from ..serialized import DECODE_FAILED, try_decode
from ..tree import is_record as _is_plain_record
from ..xml_tree import XmlParseError, parse_xml

logger = logging.getLogger(__name__)

TEXT_TYPES = (str, bytes, bytearray)


class _NoMatch:
    """Type of the NO_MATCH sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NO_MATCH"

    def __bool__(self):
        return False


# Returned by probes that do not match; distinct from every decoded value
NO_MATCH = _NoMatch()


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def is_container(data: Any) -> Any:
    """Check if data is a native container (dict, list or tuple)."""
    if isinstance(data, (dict, list, tuple)):
        return data
    return NO_MATCH


def is_record(data: Any) -> Any:
    """Check if data is a plain record object."""
    if _is_plain_record(data):
        return data
    return NO_MATCH


def is_json(data: Any) -> Any:
    """Check if data is JSON text.

    A document that decodes to JSON ``null`` is reported as NOT JSON, so
    ``"null"`` falls through to the later probes.

    Returns:
        Decoded value, or NO_MATCH
    """
    if not isinstance(data, TEXT_TYPES):
        return NO_MATCH

    try:
        decoded = json.loads(data, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug(f"JSON probe failed: {e}")
        return NO_MATCH

    if decoded is None:
        return NO_MATCH
    return decoded


def is_serialized(data: Any) -> Any:
    """Check if data is serialized text.

    Returns:
        Decoded value (which may legitimately be None or False), or NO_MATCH
    """
    if not isinstance(data, TEXT_TYPES):
        return NO_MATCH

    decoded = try_decode(data)
    if decoded is DECODE_FAILED:
        return NO_MATCH
    return decoded


def is_xml(data: Any) -> Any:
    """Check if data is an XML document (text, Element or ElementTree).

    Returns:
        Root element, or NO_MATCH
    """
    if isinstance(data, Element):
        return data
    if isinstance(data, ElementTree):
        return data.getroot()
    if not isinstance(data, TEXT_TYPES):
        return NO_MATCH

    try:
        return parse_xml(bytes(data) if isinstance(data, bytearray) else data)
    except XmlParseError as e:
        logger.debug(f"XML probe failed: {e}")
        return NO_MATCH


# Probe order is significant
PROBES = (
    (FormatTag.CONTAINER, is_container),
    (FormatTag.RECORD, is_record),
    (FormatTag.JSON, is_json),
    (FormatTag.SERIALIZED, is_serialized),
    (FormatTag.XML, is_xml),
)


def identify(data: Any) -> tuple[FormatTag, Any]:
    """Detect the format of data and return it with the decoded payload.

    Returns:
        (tag, payload); payload is the decoded value for textual formats,
        the input itself for containers/records, and the input unchanged
        for FormatTag.UNKNOWN
    """
    for tag, probe in PROBES:
        payload = probe(data)
        if payload is not NO_MATCH:
            logger.debug(f"Detected {tag.value} input")
            return tag, payload
    return FormatTag.UNKNOWN, data


def detect(data: Any) -> FormatTag:
    """Return the FormatTag for data."""
    tag, _ = identify(data)
    return tag


def type_name(data: Any) -> str:
    """Return the detected format name, or the Python type name for unknown input.

    Example:
        >>> type_name('{"a": 1}'), type_name(42)
        ('json', 'int')
    """
    tag = detect(data)
    if tag is FormatTag.UNKNOWN:
        return type(data).__name__
    return tag.value
