"""bertcodec: BERT (Binary ERlang Term) codec

A Python library for encoding and decoding the subset of Erlang's External
Term Format used by BERT and BERT-RPC.

Key Features:
- Explicit typed terms (atoms, tuples, lists, binaries, maps, bignums)
- Best-effort inference for plain Python values
- Pydantic-based, frozen term model and codec configuration
- Length-prefixed framing and a socket channel with error-reply routing

Quick Start:
    >>> from bertcodec import Atom, Binary, Int, Tuple, decode, encode
    >>>
    >>> data = encode(Tuple([Atom("ok"), Int(42), Binary("thing")]))
    >>> decode(data)
    ('ok', 42, 'thing')
    >>> encode([])
    b'\\x83j'
"""

from __future__ import annotations

from .codec import Tag, decode, decode_term, encode, infer_term
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import (
    BertError,
    ConstructionError,
    DecodeError,
    EncodeError,
    FormatError,
    FramingError,
    RangeError,
    TermTypeError,
)
from .framing import BertChannel, frame_packet, is_error_reply, unframe_packet
from .models import (
    Atom,
    AtomUtf8,
    Big,
    Binary,
    Float,
    Int,
    IntList,
    List,
    Map,
    Nil,
    SmallAtom,
    SmallAtomUtf8,
    String,
    Term,
    Tuple,
)

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_term",
    "infer_term",
    # Terms
    "Term",
    "Tag",
    "Nil",
    "Int",
    "Big",
    "Float",
    "Atom",
    "SmallAtom",
    "AtomUtf8",
    "SmallAtomUtf8",
    "String",
    "IntList",
    "Binary",
    "Tuple",
    "List",
    "Map",
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "BertError",
    "DecodeError",
    "EncodeError",
    "FormatError",
    "RangeError",
    "TermTypeError",
    "ConstructionError",
    "FramingError",
    # Framing
    "frame_packet",
    "unframe_packet",
    "BertChannel",
    "is_error_reply",
    # Version
    "__version__",
]
