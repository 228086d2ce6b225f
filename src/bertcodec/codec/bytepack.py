"""Byte-level packing and unpacking utilities.

``BytePacker`` is the append-only output buffer of a single encode call.
``ByteCursor`` is an immutable (buffer, offset) read position: every read
returns the value together with a new cursor, so decode steps never share
mutable state and never copy the remaining input.
"""

from __future__ import annotations

from typing import NamedTuple

from . import numeric


class BytePacker:
    """Packs wire values into a growing byte buffer.

    Example:
        >>> packer = BytePacker()
        >>> packer.write_byte(131)
        >>> packer.write_uint(2, 4)
        >>> data = packer.to_bytes()
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_byte(self, value: int) -> None:
        """Write a single unsigned byte.

        Raises:
            ValueError: If value is outside 0-255
        """
        if value < 0 or value > 0xFF:
            raise ValueError(f"byte value must be 0-255, got {value}")
        self._buffer.append(value)

    def write_uint(self, value: int, byte_length: int) -> None:
        """Write an unsigned big-endian integer of ``byte_length`` bytes."""
        self._buffer.extend(numeric.encode_uint(value, byte_length))

    def write_int(self, value: int, byte_length: int) -> None:
        """Write a signed big-endian two's complement integer."""
        self._buffer.extend(numeric.encode_int(value, byte_length))

    def write_double(self, value: float) -> None:
        """Write a big-endian IEEE-754 double."""
        self._buffer.extend(numeric.encode_double(value))

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer.extend(data)

    def byte_length(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the buffer."""
        return bytes(self._buffer)


class ByteCursor(NamedTuple):
    """Immutable read position over a byte buffer.

    Attributes:
        data: The whole input buffer (never copied or sliced by reads)
        offset: Index of the next unread byte
    """

    data: bytes
    offset: int = 0

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def read_bytes(self, num_bytes: int) -> tuple[bytes, ByteCursor]:
        """Read ``num_bytes`` raw bytes.

        Raises:
            IndexError: If not enough bytes are available
        """
        end = self.offset + num_bytes
        if num_bytes < 0 or end > len(self.data):
            raise IndexError(
                f"Not enough bytes: need {num_bytes}, have {self.remaining()}"
            )
        return self.data[self.offset:end], ByteCursor(self.data, end)

    def read_byte(self) -> tuple[int, ByteCursor]:
        """Read one unsigned byte.

        Raises:
            IndexError: If the buffer is exhausted
        """
        if self.offset >= len(self.data):
            raise IndexError("Attempted to read past end of byte buffer")
        return self.data[self.offset], ByteCursor(self.data, self.offset + 1)

    def read_uint(self, byte_length: int) -> tuple[int, ByteCursor]:
        """Read an unsigned big-endian integer of ``byte_length`` bytes."""
        raw, cursor = self.read_bytes(byte_length)
        return numeric.decode_uint(raw), cursor

    def read_int(self, byte_length: int) -> tuple[int, ByteCursor]:
        """Read a signed big-endian two's complement integer."""
        raw, cursor = self.read_bytes(byte_length)
        return numeric.decode_int(raw), cursor

    def read_double(self) -> tuple[float, ByteCursor]:
        """Read a big-endian IEEE-754 double."""
        raw, cursor = self.read_bytes(8)
        return numeric.decode_double(raw), cursor
