"""
Serialized Text Domain

Encoder and decoder for the typed-length serialization format.
"""

from .codec import DECODE_FAILED, SerializedDecodeError, decode, encode, try_decode

__all__ = ["DECODE_FAILED", "SerializedDecodeError", "decode", "encode", "try_decode"]
