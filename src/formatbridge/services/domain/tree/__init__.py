"""
Tree Builder Domain

Structural mirrors between plain records and Node trees.
"""

from .builder import (
    InvalidTypeError,
    NestingTooDeepError,
    Node,
    build_node_from_record,
    build_record_from_node,
    is_composite,
    is_record,
)

__all__ = [
    "InvalidTypeError",
    "NestingTooDeepError",
    "Node",
    "build_node_from_record",
    "build_record_from_node",
    "is_composite",
    "is_record",
]
