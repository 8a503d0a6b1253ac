#!/usr/bin/env python3
"""Typed-length serialization text format.

Every value is prefixed with a one-letter type code; strings and arrays carry
their length so the text can be decoded without escaping::

    N;                      None
    b:1;  b:0;              bool
    i:42;                   int
    d:1.5;  d:INF;  d:NAN;  float
    s:5:"hello";            str (length counts UTF-8 bytes)
    a:2:{i:0;s:1:"x";i:1;b:1;}            list
    a:1:{s:3:"key";i:7;}                  dict
    O:8:"stdClass":0:{}                   empty dict

Arrays whose keys are exactly 0..n-1 in order decode to lists, anything else
decodes to a dict. ``a:0:{}`` is an empty list; empty dicts are written in the
object form so that ``decode(encode(x)) == x`` holds for every Node.
"""
import logging
import math
import re
from typing import Any, Callable

from ....core.config import converter_config
from ..tree.builder import check_depth

logger = logging.getLogger(__name__)

_FLOAT_RE = re.compile(rb"-?INF|NAN|-?\d+(\.\d*)?([eE][+-]?\d+)?", re.ASCII)
_INT_RE = re.compile(rb"-?\d+", re.ASCII)


class SerializedDecodeError(ValueError):
    """Malformed serialized text."""

    def __init__(self, message: str, position: int = None):
        self.position = position
        if position is not None:
            message = f"{message} at offset {position}"
        super().__init__(message)


class _DecodeFailed:
    """Type of the DECODE_FAILED sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "DECODE_FAILED"

    def __bool__(self):
        return False


# Returned by try_decode(); never equal to a decoded value
DECODE_FAILED = _DecodeFailed()


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode(value: Any, default: Callable[[Any], Any] = None) -> str:
    """Serialize a Node.

    Args:
        value: None, bool, int, float, str, list/tuple or dict
        default: Called with any other object; its return value is encoded
                 in its place (like ``json.dumps(default=...)``)

    Returns:
        Serialized text

    Raises:
        TypeError: For unsupported objects when no ``default`` is given
        NestingTooDeepError: If nesting exceeds the configured depth
    """
    parts: list[str] = []
    _encode(value, parts, default, 1)
    return "".join(parts)


def _encode(value: Any, out: list[str], default, depth: int) -> None:
    # bool before int: bool subclasses int
    if value is None:
        out.append("N;")
    elif isinstance(value, bool):
        out.append(f"b:{int(value)};")
    elif isinstance(value, int):
        out.append(f"i:{value};")
    elif isinstance(value, float):
        out.append(f"d:{_float_text(value)};")
    elif isinstance(value, str):
        _encode_str(value, out)
    elif isinstance(value, (list, tuple)):
        check_depth(depth)
        out.append(f"a:{len(value)}:{{")
        for index, item in enumerate(value):
            out.append(f"i:{index};")
            _encode(item, out, default, depth + 1)
        out.append("}")
    elif isinstance(value, dict):
        check_depth(depth)
        if not value:
            out.append('O:8:"stdClass":0:{}')
            return
        out.append(f"a:{len(value)}:{{")
        for key, item in value.items():
            _encode_key(key, out)
            _encode(item, out, default, depth + 1)
        out.append("}")
    elif default is not None:
        _encode(default(value), out, default, depth)
    else:
        raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def _encode_str(value: str, out: list[str]) -> None:
    out.append(f's:{len(value.encode("utf-8"))}:"{value}";')


def _encode_key(key: Any, out: list[str]) -> None:
    if isinstance(key, int) and not isinstance(key, bool):
        out.append(f"i:{key};")
    else:
        _encode_str(str(key), out)


def _float_text(value: float) -> str:
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    return repr(value)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

class _Reader:
    """Cursor over the UTF-8 bytes of a serialized document."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def fail(self, message: str):
        raise SerializedDecodeError(message, self.pos)

    def expect(self, token: bytes) -> None:
        end = self.pos + len(token)
        if self.data[self.pos:end] != token:
            self.fail(f"Expected {token.decode()!r}")
        self.pos = end

    def read_until(self, terminator: bytes) -> bytes:
        end = self.data.find(terminator, self.pos)
        if end < 0:
            self.fail(f"Missing {terminator.decode()!r}")
        chunk = self.data[self.pos:end]
        self.pos = end + len(terminator)
        return chunk

    def read_int(self, terminator: bytes) -> int:
        start = self.pos
        chunk = self.read_until(terminator)
        if not _INT_RE.fullmatch(chunk):
            raise SerializedDecodeError("Invalid integer", start)
        try:
            return int(chunk)
        except ValueError:
            raise SerializedDecodeError("Integer too long", start)

    def read_length(self) -> int:
        start = self.pos
        length = self.read_int(b":")
        if length < 0:
            raise SerializedDecodeError("Negative length", start)
        return length

    def read_raw(self, length: int) -> bytes:
        end = self.pos + length
        if end > len(self.data):
            self.fail("Unexpected end of input")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def read_text(self, length: int) -> str:
        start = self.pos
        try:
            return self.read_raw(length).decode("utf-8")
        except UnicodeDecodeError:
            raise SerializedDecodeError("String length splits a UTF-8 sequence", start)

    def peek(self) -> bytes:
        return self.data[self.pos:self.pos + 1]


def decode(text: str | bytes) -> Any:
    """Decode serialized text.

    Args:
        text: Serialized document (str or UTF-8 bytes)

    Returns:
        The decoded Node

    Raises:
        SerializedDecodeError: On malformed input, trailing data or nesting
                               deeper than the configured limit
    """
    if isinstance(text, str):
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise SerializedDecodeError(f"Text is not valid UTF-8: {e.reason}", e.start)
    elif isinstance(text, (bytes, bytearray)):
        data = bytes(text)
    else:
        raise SerializedDecodeError(f"Cannot decode {type(text).__name__}")

    reader = _Reader(data)
    value = _decode_value(reader, 1)
    if reader.pos != len(data):
        reader.fail("Trailing data")
    return value


def try_decode(text: Any) -> Any:
    """Decode serialized text, returning DECODE_FAILED instead of raising."""
    try:
        return decode(text)
    except SerializedDecodeError as e:
        logger.debug(f"Serialized decode failed: {e}")
        return DECODE_FAILED


def _decode_value(reader: _Reader, depth: int) -> Any:
    code = reader.peek()

    if code == b"N":
        reader.expect(b"N;")
        return None

    if code == b"b":
        reader.expect(b"b:")
        flag = reader.read_until(b";")
        if flag not in (b"0", b"1"):
            reader.fail("Invalid boolean")
        return flag == b"1"

    if code == b"i":
        reader.expect(b"i:")
        return reader.read_int(b";")

    if code == b"d":
        reader.expect(b"d:")
        start = reader.pos
        chunk = reader.read_until(b";")
        if not _FLOAT_RE.fullmatch(chunk):
            raise SerializedDecodeError("Invalid float", start)
        return float(chunk)

    if code == b"s":
        return _decode_str(reader)

    if code == b"a":
        reader.expect(b"a:")
        return _decode_array(reader, depth)

    if code == b"O":
        reader.expect(b"O:")
        name_length = reader.read_length()
        reader.expect(b'"')
        reader.read_text(name_length)
        reader.expect(b'":')
        fields = _decode_array(reader, depth)
        # Object fields always decode to a mapping
        if isinstance(fields, list):
            return {str(index): item for index, item in enumerate(fields)}
        return fields

    reader.fail("Unknown type code")


def _decode_str(reader: _Reader) -> str:
    reader.expect(b"s:")
    length = reader.read_length()
    reader.expect(b'"')
    text = reader.read_text(length)
    reader.expect(b'";')
    return text


def _decode_array(reader: _Reader, depth: int) -> Any:
    if depth > converter_config.MAX_DEPTH:
        reader.fail("Nesting too deep")

    count = reader.read_length()
    reader.expect(b"{")

    entries: dict[Any, Any] = {}
    for _ in range(count):
        code = reader.peek()
        if code == b"i":
            reader.expect(b"i:")
            key = reader.read_int(b";")
        elif code == b"s":
            key = _decode_str(reader)
        else:
            reader.fail("Array keys must be integers or strings")
        entries[key] = _decode_value(reader, depth + 1)

    reader.expect(b"}")

    if list(entries) == list(range(count)):
        return list(entries.values())
    return entries
