#!/usr/bin/env python3

from enum import Enum

from pydantic import BaseModel


class FormatTag(str, Enum):
    """Representation detected for an input value."""

    CONTAINER = "container"
    RECORD = "record"
    JSON = "json"
    SERIALIZED = "serialized"
    XML = "xml"
    UNKNOWN = "unknown"


class XmlEncodingPolicy(str, Enum):
    """How XML attributes are folded into (and out of) a Node."""

    NONE = "none"  # attributes dropped
    MERGE = "merge"  # attributes merged beside a "value" key
    GROUP = "group"  # {"value": ..., "attributes": {...}}
    ATTRIBS = "attribs"  # attributes only


# Pydantic Models


class DetectionReport(BaseModel):
    format: FormatTag
    type_name: str  # tag value, or the Python type name for unknown input
    size: int | None = None  # length in characters/bytes for textual input
