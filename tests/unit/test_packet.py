"""Unit tests for packet framing."""

from __future__ import annotations

import pytest

from bertcodec import FramingError, frame_packet, unframe_packet
from bertcodec.framing.packet import read_length


class TestFramePacket:
    """Test adding length headers."""

    def test_default_header(self) -> None:
        """The default header is 4 bytes."""
        assert frame_packet(b"\x83j") == b"\x00\x00\x00\x02\x83j"

    @pytest.mark.parametrize(
        ("header_size", "expected"),
        [
            (1, b"\x03abc"),
            (2, b"\x00\x03abc"),
            (4, b"\x00\x00\x00\x03abc"),
        ],
    )
    def test_header_sizes(self, header_size: int, expected: bytes) -> None:
        assert frame_packet(b"abc", header_size) == expected

    def test_empty_payload(self) -> None:
        assert frame_packet(b"", 2) == b"\x00\x00"

    def test_payload_too_long(self) -> None:
        """A 1-byte header cannot describe 256 bytes."""
        frame_packet(bytes(255), 1)
        with pytest.raises(FramingError, match="does not fit"):
            frame_packet(bytes(256), 1)

    def test_invalid_header_size(self) -> None:
        with pytest.raises(ValueError, match="Invalid header size"):
            frame_packet(b"abc", 3)


class TestUnframePacket:
    """Test stripping length headers."""

    def test_roundtrip(self) -> None:
        framed = frame_packet(b"payload", 2)
        assert unframe_packet(framed, 2) == b"payload"

    def test_empty(self) -> None:
        with pytest.raises(FramingError, match="empty"):
            unframe_packet(b"")

    def test_too_short(self) -> None:
        with pytest.raises(FramingError, match="too short"):
            unframe_packet(b"\x00\x00")

    def test_length_mismatch(self) -> None:
        with pytest.raises(FramingError, match="Length mismatch"):
            unframe_packet(b"\x00\x00\x00\x05ab")
        with pytest.raises(FramingError, match="Length mismatch"):
            unframe_packet(b"\x01ab", 1)

    def test_read_length(self) -> None:
        assert read_length(b"\x00\x10") == 16
        assert read_length(b"\x01\x00\x00\x00") == 2**24
