"""BERT codec for bertcodec.

This module provides encoding and decoding between Python values and the
External Term Format subset used by BERT.
"""

from __future__ import annotations

from .bytepack import ByteCursor, BytePacker
from .decoder import decode, decode_term, decode_value
from .encoder import encode, encode_value, infer_term
from .tags import START_MARKER, TAG_REGISTRY, Tag

__all__ = [
    "encode",
    "decode",
    "decode_term",
    "decode_value",
    "encode_value",
    "infer_term",
    "ByteCursor",
    "BytePacker",
    "Tag",
    "TAG_REGISTRY",
    "START_MARKER",
]
