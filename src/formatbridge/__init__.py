"""formatbridge - detection and canonical conversion between containers,
records, JSON, serialized text and XML."""

from .models.models import DetectionReport, FormatTag, XmlEncodingPolicy
from .services.converter import to_json, to_node, to_record, to_serialized, to_xml
from .services.domain.coercion import box, unbox
from .services.domain.detection import NO_MATCH, detect, identify, is_container, is_json, is_record, is_serialized, is_xml
from .services.domain.serialized import SerializedDecodeError
from .services.domain.tree import InvalidTypeError, NestingTooDeepError, build_node_from_record, build_record_from_node
from .services.domain.xml_tree import XmlParseError, build_xml, xml_to_node

__version__ = "0.1.0"
__all__ = [
    # Converters
    "to_json",
    "to_node",
    "to_record",
    "to_serialized",
    "to_xml",
    # Detection
    "NO_MATCH",
    "detect",
    "identify",
    "is_container",
    "is_json",
    "is_record",
    "is_serialized",
    "is_xml",
    # Builders
    "build_node_from_record",
    "build_record_from_node",
    "build_xml",
    "xml_to_node",
    # Coercion
    "box",
    "unbox",
    # Models
    "DetectionReport",
    "FormatTag",
    "XmlEncodingPolicy",
    # Errors
    "InvalidTypeError",
    "NestingTooDeepError",
    "SerializedDecodeError",
    "XmlParseError",
]
