"""BERT encoder.

This module provides the encode() function that converts Python values and
Term trees to External Term Format bytes.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import EncodeError, RangeError, TermTypeError
from ..models.term import Term, is_sequence, map_items
from .bytepack import BytePacker
from .numeric import encode_bignum
from .tags import DECODE_ONLY_TAGS, START_MARKER, Tag

logger = logging.getLogger(__name__)

EncodeStep = Callable[[Any, BytePacker, CodecConfig, int], None]

MAX_STRING_LENGTH = 65535
MAX_ATOM_LENGTH = 255


def encode(value: Any, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a value to BERT bytes.

    Terms are written with their own tag. Untagged values are inferred first
    (see infer_term).

    Args:
        value: Term or plain Python value to encode
        config: Codec limits and policies (defaults to DEFAULT_CONFIG)

    Returns:
        Encoded bytes, starting with the 131 marker

    Raises:
        RangeError: If a number, length or arity is above its ceiling
        TermTypeError: If an untagged value has no wire type

    Examples:
        ```python
        from bertcodec import Atom, Int, List, encode

        encode(Int(42))                    # b'\\x83a*'
        encode(Atom("ok"))                 # b'\\x83d\\x00\\x02ok'
        encode(List([Int(1), Int(2)]))     # b'\\x83l\\x00\\x00\\x00\\x02a\\x01a\\x02j'
        encode({"swamp": "thing"})         # map with a binary key
        ```
    """
    config = config or DEFAULT_CONFIG
    packer = BytePacker()
    packer.write_byte(START_MARKER)
    try:
        encode_value(value, packer, config)
    except EncodeError as e:
        logger.debug("Encoding %s failed: %s", type(value).__name__, e)
        raise
    except RecursionError as e:
        raise RangeError("Nesting too deep for the interpreter stack") from e
    logger.debug("Encoded %s to %d bytes", type(value).__name__, packer.byte_length())
    return packer.to_bytes()


def infer_term(value: Any) -> Term:
    """Wrap an untagged Python value in the Term it is best encoded as.

    Rules:
        - None -> Nil
        - bool -> atom ``true`` / ``false``
        - int -> Int
        - float -> Float
        - str, bytes, bytearray -> Binary
        - tuple -> Tuple
        - empty sequence -> Nil, other sequences -> List
        - tuples never become Nil, even when empty
        - mapping -> Map

    Raises:
        TermTypeError: If no rule applies
    """
    if isinstance(value, Term):
        return value
    if value is None:
        return Term(tag=Tag.NIL, value=[])
    if isinstance(value, bool):
        return Term(tag=Tag.ATOM, value="true" if value else "false")
    if isinstance(value, int):
        return Term(tag=Tag.INT, value=value)
    if isinstance(value, float):
        return Term(tag=Tag.NEW_FLOAT, value=value)
    if isinstance(value, (str, bytes, bytearray)):
        return Term(tag=Tag.BINARY, value=value)
    if isinstance(value, tuple):
        return Term(tag=Tag.TUPLE, value=value)
    if is_sequence(value):
        if len(value) == 0:
            return Term(tag=Tag.NIL, value=[])
        return Term(tag=Tag.LIST, value=value)
    if isinstance(value, Mapping):
        return Term(tag=Tag.MAP, value=value)

    raise TermTypeError(
        f"Unsupported value of type {type(value).__name__}: "
        f"provide an explicit tagged value"
    )


def encode_value(
    value: Any, packer: BytePacker, config: CodecConfig = DEFAULT_CONFIG, depth: int = 0
) -> None:
    """Append the encoding of one value (without the start marker).

    Raises:
        RangeError: If a limit is exceeded or nesting passes config.max_depth
        TermTypeError: If the value cannot be encoded
    """
    if depth > config.max_depth:
        raise RangeError(f"Nesting exceeds max_depth={config.max_depth}")

    term = infer_term(value)
    if term.tag in DECODE_ONLY_TAGS:
        raise TermTypeError(f"{term.tag.name} terms are decode-only and cannot be encoded")

    _ENCODERS[term.tag](term.value, packer, config, depth)


def _check_length(length: int, what: str, config: CodecConfig) -> None:
    if length > config.max_length:
        raise RangeError(
            f"{what} length {length} exceeds max_length={config.max_length}"
        )


def _encode_small_int(value: int, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    if value < 0 or value > 255:
        _encode_int(value, packer, config, depth)
        return
    packer.write_byte(Tag.SMALL_INT)
    packer.write_uint(value, 1)


def _encode_int(value: int, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    if value > config.max_integer or value < -(config.max_integer + 1):
        raise RangeError(
            f"Integer {value} outside [{-(config.max_integer + 1)}, {config.max_integer}]; "
            f"use Big() for larger values"
        )
    if 0 <= value < 256:
        _encode_small_int(value, packer, config, depth)
        return
    packer.write_byte(Tag.INT)
    packer.write_int(value, 4)


def _encode_big(value: int, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    sign, magnitude = encode_bignum(value)
    if len(magnitude) < 256:
        packer.write_byte(Tag.SMALL_BIG)
        packer.write_uint(len(magnitude), 1)
    else:
        _check_length(len(magnitude), "Bignum", config)
        packer.write_byte(Tag.BIG)
        packer.write_uint(len(magnitude), 4)
    packer.write_byte(sign)
    packer.write_bytes(magnitude)


def _encode_new_float(value: float, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    try:
        value = float(value)
    except OverflowError as e:
        raise RangeError(f"Number too large for a float: {e}") from e
    if not math.isfinite(value) and not config.allow_non_finite:
        raise RangeError(f"Cannot encode non-finite float {value} (set allow_non_finite)")
    packer.write_byte(Tag.NEW_FLOAT)
    packer.write_double(value)


def _encode_nil(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    packer.write_byte(Tag.NIL)


def _write_atom(
    raw: bytes, small_tag: Tag, tag: Tag, small: bool, packer: BytePacker
) -> None:
    if len(raw) > MAX_ATOM_LENGTH:
        raise RangeError(f"Atoms may only be up to {MAX_ATOM_LENGTH} bytes, got {len(raw)}")
    if small:
        packer.write_byte(small_tag)
        packer.write_uint(len(raw), 1)
    else:
        packer.write_byte(tag)
        packer.write_uint(len(raw), 2)
    packer.write_bytes(raw)


def _encode_atom(value: str, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    try:
        raw = value.encode("latin-1")
    except UnicodeEncodeError:
        _encode_atom_utf8(value, packer, config, depth)
        return
    _write_atom(raw, Tag.SMALL_ATOM, Tag.ATOM, False, packer)


def _encode_small_atom(value: str, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    try:
        raw = value.encode("latin-1")
    except UnicodeEncodeError:
        _encode_small_atom_utf8(value, packer, config, depth)
        return
    _write_atom(raw, Tag.SMALL_ATOM, Tag.ATOM, True, packer)


def _encode_atom_utf8(value: str, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    _write_atom(value.encode("utf-8"), Tag.SMALL_ATOM_UTF8, Tag.ATOM_UTF8, False, packer)


def _encode_small_atom_utf8(
    value: str, packer: BytePacker, config: CodecConfig, depth: int
) -> None:
    _write_atom(value.encode("utf-8"), Tag.SMALL_ATOM_UTF8, Tag.ATOM_UTF8, True, packer)


def _encode_string(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    codes = [ord(char) for char in value] if isinstance(value, str) else list(value)

    # Too long or too wide for the 2-byte form: fall back to a list of integers.
    if len(codes) > MAX_STRING_LENGTH or any(code > 255 for code in codes):
        _encode_list([Term(tag=Tag.INT, value=code) for code in codes], packer, config, depth)
        return

    packer.write_byte(Tag.STRING)
    packer.write_uint(len(codes), 2)
    packer.write_bytes(bytes(codes))


def _encode_list(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    _check_length(len(value), "List", config)
    packer.write_byte(Tag.LIST)
    packer.write_uint(len(value), 4)
    for element in value:
        encode_value(element, packer, config, depth + 1)
    packer.write_byte(Tag.NIL)


def _encode_tuple(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    arity = len(value)
    _check_length(arity, "Tuple", config)
    if arity < 256:
        packer.write_byte(Tag.SMALL_TUPLE)
        packer.write_uint(arity, 1)
    else:
        packer.write_byte(Tag.TUPLE)
        packer.write_uint(arity, 4)
    for element in value:
        encode_value(element, packer, config, depth + 1)


def _encode_binary(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    _check_length(len(raw), "Binary", config)
    packer.write_byte(Tag.BINARY)
    packer.write_uint(len(raw), 4)
    packer.write_bytes(raw)


def _encode_map(value: Any, packer: BytePacker, config: CodecConfig, depth: int) -> None:
    items = map_items(value)
    _check_length(len(items), "Map", config)
    packer.write_byte(Tag.MAP)
    packer.write_uint(len(items), 4)

    plain = isinstance(value, Mapping)
    for key, item in items:
        if plain:
            key = _binary_key(key)
        encode_value(key, packer, config, depth + 1)
        encode_value(item, packer, config, depth + 1)


def _binary_key(key: Any) -> Term:
    """Coerce a plain mapping key to a binary term."""
    if isinstance(key, Term):
        raise TermTypeError(
            f"Typed key {key!r} in a plain mapping; use Map() with (key, value) pairs "
            f"to keep key types"
        )
    if isinstance(key, (str, bytes, bytearray)):
        return Term(tag=Tag.BINARY, value=key)
    return Term(tag=Tag.BINARY, value=str(key))


_ENCODERS: Mapping[Tag, EncodeStep] = MappingProxyType(
    {
        Tag.NEW_FLOAT: _encode_new_float,
        Tag.SMALL_INT: _encode_small_int,
        Tag.INT: _encode_int,
        Tag.ATOM: _encode_atom,
        Tag.SMALL_TUPLE: _encode_tuple,
        Tag.TUPLE: _encode_tuple,
        Tag.NIL: _encode_nil,
        Tag.STRING: _encode_string,
        Tag.LIST: _encode_list,
        Tag.BINARY: _encode_binary,
        Tag.SMALL_BIG: _encode_big,
        Tag.BIG: _encode_big,
        Tag.SMALL_ATOM: _encode_small_atom,
        Tag.MAP: _encode_map,
        Tag.ATOM_UTF8: _encode_atom_utf8,
        Tag.SMALL_ATOM_UTF8: _encode_small_atom_utf8,
    }
)
