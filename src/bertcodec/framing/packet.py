"""Length-prefixed packet framing.

Frames follow Erlang's ``{packet, N}`` socket option: a big-endian unsigned
length header of 1, 2 or 4 bytes followed by the payload.
"""

from __future__ import annotations

from typing import Literal

from ..codec.numeric import decode_uint, encode_uint
from ..exceptions import FramingError

HeaderSize = Literal[1, 2, 4]

_HEADER_SIZES = (1, 2, 4)


def frame_packet(payload: bytes, header_size: HeaderSize = 4) -> bytes:
    """Prefix a payload with its length.

    Args:
        payload: Bytes to frame (usually the output of encode())
        header_size: Size of the length header in bytes (1, 2 or 4)

    Returns:
        Framed packet

    Raises:
        ValueError: If header_size is not 1, 2 or 4
        FramingError: If the payload is too long for the header

    Example:
        >>> frame_packet(b"\\x83j")
        b'\\x00\\x00\\x00\\x02\\x83j'
    """
    _check_header_size(header_size)
    max_length = (1 << (header_size * 8)) - 1
    if len(payload) > max_length:
        raise FramingError(
            f"Payload of {len(payload)} bytes does not fit a {header_size}-byte header"
        )
    return encode_uint(len(payload), header_size) + bytes(payload)


def unframe_packet(framed: bytes, header_size: HeaderSize = 4) -> bytes:
    """Strip and validate the length header of one packet.

    Raises:
        FramingError: If the frame is empty, truncated or has extra bytes
    """
    _check_header_size(header_size)
    if not framed:
        raise FramingError("Cannot unframe empty data")
    if len(framed) < header_size:
        raise FramingError(f"Frame too short for length header: {len(framed)} bytes")

    expected = read_length(framed[:header_size])
    payload = framed[header_size:]
    if len(payload) != expected:
        raise FramingError(
            f"Length mismatch: header says {expected} bytes, but got {len(payload)} bytes"
        )
    return bytes(payload)


def read_length(header: bytes) -> int:
    """Decode a length header."""
    _check_header_size(len(header))
    return decode_uint(header)


def _check_header_size(header_size: int) -> None:
    if header_size not in _HEADER_SIZES:
        raise ValueError(f"Invalid header size: {header_size}. Must be 1, 2 or 4")
