"""Unit tests for byte packing utilities."""

from __future__ import annotations

import pytest

from bertcodec.codec.bytepack import ByteCursor, BytePacker
from bertcodec.codec.tags import TAG_REGISTRY, Tag, lookup_tag


class TestBytePacker:
    """Test BytePacker functionality."""

    def test_write_primitives(self) -> None:
        """Writes append in order."""
        packer = BytePacker()
        packer.write_byte(131)
        packer.write_uint(2, 4)
        packer.write_int(-1, 2)
        packer.write_bytes(b"ok")

        assert packer.byte_length() == 9
        assert packer.to_bytes() == b"\x83\x00\x00\x00\x02\xff\xffok"

    def test_write_double(self) -> None:
        """Doubles are written big-endian."""
        packer = BytePacker()
        packer.write_double(1.5)
        assert packer.to_bytes() == b"\x3f\xf8" + b"\x00" * 6

    def test_write_byte_bounds(self) -> None:
        """A byte is 0-255."""
        packer = BytePacker()
        with pytest.raises(ValueError, match="0-255"):
            packer.write_byte(256)
        with pytest.raises(ValueError, match="0-255"):
            packer.write_byte(-1)

    def test_to_bytes_is_a_copy(self) -> None:
        """Later writes do not change earlier snapshots."""
        packer = BytePacker()
        packer.write_byte(1)
        snapshot = packer.to_bytes()
        packer.write_byte(2)
        assert snapshot == b"\x01"


class TestByteCursor:
    """Test ByteCursor functionality."""

    def test_reads_advance_new_cursor(self) -> None:
        """Reads return a new cursor and leave the old one untouched."""
        start = ByteCursor(b"\x01\x00\x02ok")
        value, after = start.read_byte()

        assert value == 1
        assert start.offset == 0
        assert after.offset == 1
        assert after.data is start.data

        length, after = after.read_uint(2)
        text, after = after.read_bytes(length)
        assert text == b"ok"
        assert after.at_end()
        assert after.remaining() == 0

    def test_read_signed(self) -> None:
        """Signed reads use two's complement."""
        value, _ = ByteCursor(b"\xff\xff\xff\xfe").read_int(4)
        assert value == -2

    def test_read_double(self) -> None:
        """Doubles are read big-endian."""
        value, cursor = ByteCursor(b"\x3f\xf8" + b"\x00" * 6).read_double()
        assert value == 1.5
        assert cursor.offset == 8

    def test_read_past_end(self) -> None:
        """Reading beyond the buffer raises IndexError."""
        cursor = ByteCursor(b"\x01")
        with pytest.raises(IndexError, match="Not enough bytes"):
            cursor.read_bytes(2)
        with pytest.raises(IndexError, match="past end"):
            ByteCursor(b"").read_byte()


class TestTagRegistry:
    """Test the wire tag registry."""

    def test_known_tags(self) -> None:
        """Every supported tag byte maps to its Tag."""
        assert lookup_tag(97) is Tag.SMALL_INT
        assert lookup_tag(108) is Tag.LIST
        assert lookup_tag(116) is Tag.MAP
        assert len(TAG_REGISTRY) == 19

    def test_unknown_tag(self) -> None:
        """Unknown bytes are not in the registry."""
        assert lookup_tag(200) is None
        assert lookup_tag(131) is None

    def test_registry_is_read_only(self) -> None:
        """The registry cannot be mutated."""
        with pytest.raises(TypeError):
            TAG_REGISTRY[200] = Tag.NIL  # type: ignore[index]
