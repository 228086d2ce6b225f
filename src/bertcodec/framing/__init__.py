"""Packet framing and transport channel for bertcodec.

This module provides length-prefixed framing for encoded terms and a
channel that sends and receives terms over a socket-like object.
"""

from __future__ import annotations

from .channel import BertChannel, is_error_reply
from .packet import frame_packet, unframe_packet

__all__ = [
    "BertChannel",
    "is_error_reply",
    "frame_packet",
    "unframe_packet",
]
