"""
Canonical byte encoding of records.

A record is encoded as a 4-byte big-endian field count followed by, for
each field in insertion order, the length-prefixed UTF-8 field name and the
length-prefixed raw value. All length prefixes are 4-byte big-endian
unsigned integers. Insertion order is kept because record signatures are
order-sensitive.
"""

import struct
from typing import Any, Collection, Mapping

_LENGTH = struct.Struct(">I")


def to_bytes(value: Any, encoding: str = "utf-8") -> bytes:
    """
    Coerce a record value to bytes.

    ``str`` values are encoded with ``encoding``; bytes-like values are copied.

    Raises:
        TypeError: For any other value type
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode(encoding)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(
        f"Record values must be bytes or str, got {type(value).__name__}"
    )


def _pack(chunk: bytes) -> bytes:
    return _LENGTH.pack(len(chunk)) + chunk


def encode_record(
    record: Mapping[str, Any],
    exclude: Collection[str] = (),
    encoding: str = "utf-8",
) -> bytes:
    """
    Encode ``record`` into its canonical byte form.

    Args:
        record: Mapping of field name to bytes (or str) value
        exclude: Field names left out of the encoding
        encoding: Text encoding applied to str values

    Returns:
        Deterministic byte string for the record
    """
    items = [(name, value) for name, value in record.items() if name not in exclude]
    parts = [_LENGTH.pack(len(items))]
    for name, value in items:
        parts.append(_pack(name.encode("utf-8")))
        parts.append(_pack(to_bytes(value, encoding)))
    return b"".join(parts)
