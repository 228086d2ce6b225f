"""Numeric wire codecs.

Pure functions for the three numeric layouts used by the term format:

- big-endian fixed-width integers (unsigned and two's complement)
- IEEE-754 doubles, big-endian on the wire regardless of host byte order
- sign-magnitude arbitrary-precision integers with little-endian magnitude
"""

from __future__ import annotations

import struct
import sys
from typing import Sequence


def encode_uint(value: int, byte_length: int) -> bytes:
    """Encode an unsigned integer as ``byte_length`` big-endian bytes.

    Args:
        value: Unsigned integer value to write (must be >= 0)
        byte_length: Number of bytes to use for encoding (>= 1)

    Returns:
        Encoded bytes, most significant first

    Raises:
        ValueError: If value is negative or doesn't fit in byte_length bytes

    Example:
        >>> encode_uint(258, 2)
        b'\\x01\\x02'
    """
    if value < 0:
        raise ValueError(f"encode_uint requires non-negative value, got {value}")
    if byte_length < 1:
        raise ValueError(f"byte_length must be >= 1, got {byte_length}")

    max_value = (1 << (byte_length * 8)) - 1
    if value > max_value:
        raise ValueError(
            f"Value {value} requires more than {byte_length} bytes (max: {max_value})"
        )

    result = bytearray()
    for offset in range((byte_length - 1) * 8, -1, -8):
        result.append((value >> offset) & 0xFF)
    return bytes(result)


def decode_uint(data: Sequence[int]) -> int:
    """Decode big-endian bytes to an unsigned integer.

    Args:
        data: Bytes, most significant first

    Returns:
        Unsigned integer value
    """
    value = 0
    for byte in data:
        value = (value << 8) + byte
    return value


def encode_int(value: int, byte_length: int) -> bytes:
    """Encode a signed integer as big-endian two's complement.

    Raises:
        ValueError: If value doesn't fit in byte_length bytes
    """
    if byte_length < 1:
        raise ValueError(f"byte_length must be >= 1, got {byte_length}")

    bits = byte_length * 8
    min_value = -(1 << (bits - 1))
    max_value = (1 << (bits - 1)) - 1
    if value < min_value or value > max_value:
        raise ValueError(
            f"Value {value} doesn't fit in {byte_length} bytes (range: {min_value} to {max_value})"
        )

    if value < 0:
        value += 1 << bits
    return encode_uint(value, byte_length)


def decode_int(data: Sequence[int]) -> int:
    """Decode big-endian two's complement bytes to a signed integer."""
    unsigned_value = decode_uint(data)
    bits = len(data) * 8
    if bits and unsigned_value & (1 << (bits - 1)):
        return unsigned_value - (1 << bits)
    return unsigned_value


def encode_double(value: float, byteorder: str = sys.byteorder) -> bytes:
    """Encode a float as a big-endian IEEE-754 double.

    The value is packed in the host's native layout and reversed when the
    host is little-endian. ``byteorder`` defaults to the running host and can
    be overridden to exercise either path.

    Args:
        value: Float to encode
        byteorder: Host byte order, "little" or "big"

    Returns:
        8 bytes, most significant first
    """
    native = _pack_native(float(value), byteorder)
    if byteorder == "little":
        return native[::-1]
    return native


def decode_double(data: bytes, byteorder: str = sys.byteorder) -> float:
    """Decode a big-endian IEEE-754 double.

    Raises:
        ValueError: If data is not exactly 8 bytes
    """
    if len(data) != 8:
        raise ValueError(f"double requires 8 bytes, got {len(data)}")
    native = bytes(data)
    if byteorder == "little":
        native = native[::-1]
    return _unpack_native(native, byteorder)


def _pack_native(value: float, byteorder: str) -> bytes:
    if byteorder == "little":
        return struct.pack("<d", value)
    if byteorder == "big":
        return struct.pack(">d", value)
    raise ValueError(f"byteorder must be 'little' or 'big', got {byteorder!r}")


def _unpack_native(data: bytes, byteorder: str) -> float:
    if byteorder == "little":
        return struct.unpack("<d", data)[0]
    if byteorder == "big":
        return struct.unpack(">d", data)[0]
    raise ValueError(f"byteorder must be 'little' or 'big', got {byteorder!r}")


def encode_bignum(value: int) -> tuple[int, bytes]:
    """Split an integer into a sign byte and little-endian magnitude.

    Args:
        value: Any integer

    Returns:
        Tuple of (sign, magnitude) where sign is 0 for non-negative values
        and 1 for negative ones. Zero encodes as an empty magnitude.

    Example:
        >>> encode_bignum(-258)
        (1, b'\\x02\\x01')
    """
    sign = 1 if value < 0 else 0
    magnitude = -value if sign else value
    return sign, magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "little")


def decode_bignum(sign: int, magnitude: Sequence[int]) -> int:
    """Rebuild an integer from a sign byte and little-endian magnitude.

    Byte ``i`` of the magnitude is weighted by ``256 ** i``. Any nonzero
    sign negates the result.
    """
    value = int.from_bytes(bytes(magnitude), "little")
    if sign != 0:
        value = -value
    return value
