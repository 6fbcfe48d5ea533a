"""
LWES Wire Codec
===============

Bounded Context: Event Serialization

Binary encoding of one event for the multicast transport (big-endian).

Layout:
    name        u8 length + UTF-8 bytes
    count       u16 number of attributes
    attribute   u8 length + UTF-8 key, u8 type token, value

Value encodings by type token:
    0x05 STRING   u16 length + UTF-8 bytes
    0x07 INT_64   signed 64-bit integer
    0x09 BOOLEAN  one byte, 0 or 1
"""

import struct
from typing import Any, Dict, Mapping, Tuple

from .exceptions import DecodeError, EncodeError

STRING_TOKEN = 0x05
INT_64_TOKEN = 0x07
BOOLEAN_TOKEN = 0x09

MAX_SHORT_STRING = 0xFF
MAX_STRING = 0xFFFF
MAX_ATTRIBUTES = 0xFFFF

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_I64 = struct.Struct(">q")


def _encode_short_string(value: str, what: str) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) > MAX_SHORT_STRING:
        raise EncodeError(f"{what} too long ({len(raw)} bytes, max {MAX_SHORT_STRING}): {value[:32]!r}")
    return _U8.pack(len(raw)) + raw


def _encode_value(key: str, value: Any) -> bytes:
    if isinstance(value, bool):
        return _U8.pack(BOOLEAN_TOKEN) + _U8.pack(1 if value else 0)

    if isinstance(value, int):
        try:
            return _U8.pack(INT_64_TOKEN) + _I64.pack(value)
        except struct.error as e:
            raise EncodeError(f"Attribute {key!r} out of INT_64 range: {value}") from e

    raw = str(value).encode("utf-8")
    if len(raw) > MAX_STRING:
        raise EncodeError(f"Attribute {key!r} too long ({len(raw)} bytes, max {MAX_STRING})")
    return _U8.pack(STRING_TOKEN) + _U16.pack(len(raw)) + raw


def encode_event(name: str, fields: Mapping[str, Any]) -> bytes:
    """
    Encode an event to bytes.

    Args:
        name: Event (channel) name, at most 255 UTF-8 bytes
        fields: Attribute mapping; str, int and bool values are typed,
            anything else is sent as its string form

    Returns:
        Encoded datagram payload

    Raises:
        EncodeError: If a name or value exceeds its length limit

    Example:
        >>> encode_event("App::Info", {'message': 'hi'})[:10]
        b'\\tApp::Info'
    """
    if len(fields) > MAX_ATTRIBUTES:
        raise EncodeError(f"Too many attributes: {len(fields)}")

    parts = [_encode_short_string(name, "Event name"), _U16.pack(len(fields))]
    for key, value in fields.items():
        parts.append(_encode_short_string(str(key), "Attribute name"))
        parts.append(_encode_value(key, value))

    return b"".join(parts)


class _Reader:
    """Cursor over a datagram that raises DecodeError on truncation."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise DecodeError(f"Truncated event at offset {self.offset} (need {size} bytes)")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: struct.Struct) -> Any:
        return fmt.unpack(self.take(fmt.size))[0]

    def text(self, size: int) -> str:
        try:
            return self.take(size).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 at offset {self.offset}") from e


def decode_event(data: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode bytes produced by encode_event.

    Returns:
        (event name, attribute dict)

    Raises:
        DecodeError: On truncation, unknown type tokens, bad UTF-8 or
            trailing bytes
    """
    reader = _Reader(data)
    name = reader.text(reader.unpack(_U8))
    count = reader.unpack(_U16)

    fields: Dict[str, Any] = {}
    for _ in range(count):
        key = reader.text(reader.unpack(_U8))
        token = reader.unpack(_U8)

        if token == STRING_TOKEN:
            fields[key] = reader.text(reader.unpack(_U16))
        elif token == INT_64_TOKEN:
            fields[key] = reader.unpack(_I64)
        elif token == BOOLEAN_TOKEN:
            fields[key] = reader.unpack(_U8) != 0
        else:
            raise DecodeError(f"Unknown type token 0x{token:02x} for attribute {key!r}")

    if reader.offset != len(data):
        raise DecodeError(f"{len(data) - reader.offset} trailing bytes after event")

    return name, fields
