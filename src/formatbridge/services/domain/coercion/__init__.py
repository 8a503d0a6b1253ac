"""
Scalar Coercion Domain

Boxing of document text into typed scalars and back.
"""

from .scalars import ScalarValue, box, unbox

__all__ = ["ScalarValue", "box", "unbox"]
