"""Wire tag registry.

Maps the one-byte tags of the supported External Term Format subset to
``Tag`` members. The registry is built once at import time and is read-only.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Optional

START_MARKER = 131


class Tag(enum.IntEnum):
    """Wire tags understood by the codec."""

    NEW_FLOAT = 70
    SMALL_INT = 97
    INT = 98
    FLOAT = 99
    ATOM = 100
    PORT = 102
    PID = 103
    SMALL_TUPLE = 104
    TUPLE = 105
    NIL = 106
    STRING = 107
    LIST = 108
    BINARY = 109
    SMALL_BIG = 110
    BIG = 111
    SMALL_ATOM = 115
    MAP = 116
    ATOM_UTF8 = 118
    SMALL_ATOM_UTF8 = 119


TAG_REGISTRY: Mapping[int, Tag] = MappingProxyType({int(tag): tag for tag in Tag})

ATOM_TAGS = frozenset({Tag.ATOM, Tag.SMALL_ATOM, Tag.ATOM_UTF8, Tag.SMALL_ATOM_UTF8})
INTEGER_TAGS = frozenset({Tag.SMALL_INT, Tag.INT, Tag.SMALL_BIG, Tag.BIG})
TUPLE_TAGS = frozenset({Tag.SMALL_TUPLE, Tag.TUPLE})

# Tags the decoder understands but the encoder refuses to write.
DECODE_ONLY_TAGS = frozenset({Tag.FLOAT, Tag.PORT, Tag.PID})


def lookup_tag(byte: int) -> Optional[Tag]:
    """Return the Tag for a wire byte, or None if the byte is not a known tag."""
    return TAG_REGISTRY.get(byte)
