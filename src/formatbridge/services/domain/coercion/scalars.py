#!/usr/bin/env python3
"""Scalar coercion between typed values and their text form.

``box`` turns text read from a document into a typed scalar, ``unbox`` turns
a typed scalar back into the text written to a document. The pair is lossy on
purpose: ``"007"`` boxes to ``7`` and unboxes to ``"7"``.
"""
import re
from typing import Any

# Optional sign, digits, optional single decimal point
NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$", re.ASCII)

ScalarValue = str | int | float | bool | None


def box(raw: Any) -> ScalarValue:
    """Convert a raw value into a typed scalar.

    Args:
        raw: Text from a document, or an already typed scalar

    Returns:
        int or float for numeric strings, bool for "true"/"false",
        the value itself for bool/int/float/None, else a string

    Example:
        >>> box("42"), box("42.5"), box("true"), box("hi")
        (42, 42.5, True, 'hi')
    """
    # bool before int: bool subclasses int
    if isinstance(raw, bool):
        return raw

    if raw is None or isinstance(raw, (int, float)):
        return raw

    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    elif not isinstance(raw, str):
        return str(raw)

    if NUMERIC_PATTERN.fullmatch(raw):
        try:
            if "." in raw:
                return float(raw)
            return int(raw)
        except ValueError:
            # Past the interpreter's int digit limit
            return raw

    if raw == "true":
        return True
    if raw == "false":
        return False

    return raw


def unbox(value: Any) -> str:
    """Render a scalar as document text.

    Example:
        >>> unbox(True), unbox(42), unbox(None)
        ('true', '42', '')
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)
