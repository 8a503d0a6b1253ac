"""
Format Detection Domain

Cascading speculative-parse classifier for container, record, JSON,
serialized and XML input.
"""

from .detector import (
    NO_MATCH,
    detect,
    identify,
    is_container,
    is_json,
    is_record,
    is_serialized,
    is_xml,
    type_name,
)

__all__ = [
    "NO_MATCH",
    "detect",
    "identify",
    "is_container",
    "is_json",
    "is_record",
    "is_serialized",
    "is_xml",
    "type_name",
]
