"""BERT decoder.

This module provides the decode() and decode_term() functions that convert
External Term Format bytes back to Python values.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import FormatError
from ..models.term import Term
from .bytepack import ByteCursor
from .numeric import decode_bignum
from .tags import START_MARKER, Tag, lookup_tag

logger = logging.getLogger(__name__)

DecodeStep = Callable[[ByteCursor, CodecConfig, int], "tuple[Term, ByteCursor]"]

LEGACY_FLOAT_SIZE = 31


def decode(data: Any, config: Optional[CodecConfig] = None) -> Any:
    """Decode BERT bytes to plain Python values.

    Atoms, char lists and text binaries become ``str``; tuples become
    ``tuple``, lists ``list`` and maps ``dict``.

    Args:
        data: Encoded bytes (bytes, bytearray, memoryview or a sequence of ints)
        config: Codec limits and policies (defaults to DEFAULT_CONFIG)

    Returns:
        Decoded value

    Raises:
        FormatError: If the data is not well-formed BERT

    Examples:
        ```python
        from bertcodec import decode

        decode(bytes([131, 97, 42]))          # 42
        decode(bytes([131, 106]))             # []
        decode(b"\\x83d\\x00\\x02ok")          # 'ok'
        ```
    """
    return decode_term(data, config).to_python()


def decode_term(data: Any, config: Optional[CodecConfig] = None) -> Term:
    """Decode BERT bytes to a fully typed Term tree.

    Unlike decode(), the result keeps the wire type of every node, so an
    atom key in a map stays distinguishable from a binary key.

    Raises:
        FormatError: If the data is not well-formed BERT
    """
    config = config or DEFAULT_CONFIG
    cursor = ByteCursor(_as_bytes(data))

    try:
        marker, cursor = cursor.read_byte()
    except IndexError as e:
        raise FormatError("Cannot decode empty data") from e

    if marker != START_MARKER:
        raise FormatError(
            f"Data must begin with the start marker {START_MARKER}, actually starts with {marker}"
        )

    try:
        term, cursor = decode_value(cursor, config)
    except IndexError as e:
        logger.debug("Truncated BERT payload at %d bytes", len(cursor.data))
        raise FormatError(f"Truncated data: {e}") from e
    except FormatError as e:
        logger.debug("Decoding failed: %s", e)
        raise
    except RecursionError as e:
        raise FormatError("Nesting too deep for the interpreter stack") from e

    if not cursor.at_end() and not config.allow_trailing:
        raise FormatError(f"Unparsed trailing data: {cursor.remaining()} bytes")

    logger.debug("Decoded %s term from %d bytes", term.tag.name, len(cursor.data))
    return term


def decode_value(
    cursor: ByteCursor, config: CodecConfig = DEFAULT_CONFIG, depth: int = 0
) -> tuple[Term, ByteCursor]:
    """Decode one term starting at the cursor.

    Args:
        cursor: Position of the tag byte
        config: Codec limits and policies
        depth: Current nesting level

    Returns:
        Tuple of (term, cursor after the term)

    Raises:
        FormatError: If the tag is unknown or nesting exceeds config.max_depth
        IndexError: If data is truncated
    """
    if depth > config.max_depth:
        raise FormatError(f"Nesting exceeds max_depth={config.max_depth}")

    token, cursor = cursor.read_byte()
    tag = lookup_tag(token)
    if tag is None:
        raise FormatError(f"unknown tag {token} at offset {cursor.offset - 1}")

    return _DECODERS[tag](cursor, config, depth)


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        # Each character carries one byte.
        try:
            return data.encode("latin-1")
        except UnicodeEncodeError as e:
            raise FormatError(f"Text input must only hold byte-sized characters: {e}") from e
    try:
        return bytes(data)
    except (TypeError, ValueError) as e:
        raise FormatError(f"Cannot read bytes from {type(data).__name__}: {e}") from e


def _check_length(length: int, what: str, config: CodecConfig) -> None:
    if length > config.max_length:
        raise FormatError(f"{what} length {length} exceeds max_length={config.max_length}")


def _decode_sequence(
    cursor: ByteCursor, count: int, config: CodecConfig, depth: int
) -> tuple[list[Term], ByteCursor]:
    # Every element takes at least one byte.
    if count > cursor.remaining():
        raise IndexError(f"{count} elements announced, {cursor.remaining()} bytes left")

    elements = []
    for _ in range(count):
        element, cursor = decode_value(cursor, config, depth + 1)
        elements.append(element)
    return elements, cursor


def _decode_text(cursor: ByteCursor, length_size: int, encoding: str) -> tuple[str, ByteCursor]:
    length, cursor = cursor.read_uint(length_size)
    raw, cursor = cursor.read_bytes(length)
    try:
        return raw.decode(encoding), cursor
    except UnicodeDecodeError as e:
        raise FormatError(f"Invalid {encoding} text: {e}") from e


def _decode_small_int(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = cursor.read_uint(1)
    return Term(tag=Tag.SMALL_INT, value=value), cursor


def _decode_int(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = cursor.read_int(4)
    return Term(tag=Tag.INT, value=value), cursor


def _decode_new_float(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = cursor.read_double()
    if not math.isfinite(value) and not config.allow_non_finite:
        raise FormatError(f"Non-finite float {value} (set allow_non_finite to accept)")
    return Term(tag=Tag.NEW_FLOAT, value=value), cursor


def _decode_float(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    raw, cursor = cursor.read_bytes(LEGACY_FLOAT_SIZE)
    text = raw.split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()
    try:
        value = float(text)
    except ValueError as e:
        raise FormatError(f"Invalid legacy float text {text!r}") from e
    return Term(tag=Tag.FLOAT, value=value), cursor


def _decode_atom(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = _decode_text(cursor, 2, "latin-1")
    return Term(tag=Tag.ATOM, value=value), cursor


def _decode_small_atom(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = _decode_text(cursor, 1, "latin-1")
    return Term(tag=Tag.SMALL_ATOM, value=value), cursor


def _decode_atom_utf8(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = _decode_text(cursor, 2, "utf-8")
    return Term(tag=Tag.ATOM_UTF8, value=value), cursor


def _decode_small_atom_utf8(
    cursor: ByteCursor, config: CodecConfig, depth: int
) -> tuple[Term, ByteCursor]:
    value, cursor = _decode_text(cursor, 1, "utf-8")
    return Term(tag=Tag.SMALL_ATOM_UTF8, value=value), cursor


def _decode_port(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    node, cursor = decode_value(cursor, config, depth + 1)
    ident, cursor = cursor.read_uint(4)
    _creation, cursor = cursor.read_uint(1)
    return Term(tag=Tag.PORT, value=f"{node.to_python()}<{ident}>"), cursor


def _decode_pid(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    node, cursor = decode_value(cursor, config, depth + 1)
    ident, cursor = cursor.read_uint(4)
    _serial, cursor = cursor.read_uint(4)
    _creation, cursor = cursor.read_uint(1)
    return Term(tag=Tag.PID, value=f"{node.to_python()}<{ident}>"), cursor


def _decode_small_tuple(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    arity, cursor = cursor.read_uint(1)
    elements, cursor = _decode_sequence(cursor, arity, config, depth)
    return Term(tag=Tag.SMALL_TUPLE, value=tuple(elements)), cursor


def _decode_tuple(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    arity, cursor = cursor.read_uint(4)
    _check_length(arity, "Tuple", config)
    elements, cursor = _decode_sequence(cursor, arity, config, depth)
    return Term(tag=Tag.TUPLE, value=tuple(elements)), cursor


def _decode_nil(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    return Term(tag=Tag.NIL, value=[]), cursor


def _decode_string(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    value, cursor = _decode_text(cursor, 2, "latin-1")
    return Term(tag=Tag.STRING, value=value), cursor


def _decode_list(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    length, cursor = cursor.read_uint(4)
    _check_length(length, "List", config)
    elements, cursor = _decode_sequence(cursor, length, config, depth)

    tail, cursor = decode_value(cursor, config, depth + 1)
    if tail.tag is not Tag.NIL:
        raise FormatError(
            f"Lists must end with a nil terminator, found {tail.tag.name} instead"
        )
    return Term(tag=Tag.LIST, value=elements), cursor


def _decode_binary(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    length, cursor = cursor.read_uint(4)
    _check_length(length, "Binary", config)
    raw, cursor = cursor.read_bytes(length)

    value: Any = raw
    if config.binary_as_text:
        try:
            value = raw.decode("utf-8")
        except UnicodeDecodeError:
            value = raw
    return Term(tag=Tag.BINARY, value=value), cursor


def _decode_bignum(
    cursor: ByteCursor, length_size: int, tag: Tag, config: CodecConfig
) -> tuple[Term, ByteCursor]:
    length, cursor = cursor.read_uint(length_size)
    _check_length(length, "Bignum", config)
    sign, cursor = cursor.read_uint(1)
    magnitude, cursor = cursor.read_bytes(length)
    return Term(tag=tag, value=decode_bignum(sign, magnitude)), cursor


def _decode_small_big(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    return _decode_bignum(cursor, 1, Tag.SMALL_BIG, config)


def _decode_big(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    return _decode_bignum(cursor, 4, Tag.BIG, config)


def _decode_map(cursor: ByteCursor, config: CodecConfig, depth: int) -> tuple[Term, ByteCursor]:
    arity, cursor = cursor.read_uint(4)
    _check_length(arity, "Map", config)
    elements, cursor = _decode_sequence(cursor, arity * 2, config, depth)
    pairs = list(_pairwise(elements))
    return Term(tag=Tag.MAP, value=pairs), cursor


def _pairwise(elements: list[Term]) -> Iterable[tuple[Term, Term]]:
    iterator = iter(elements)
    return zip(iterator, iterator)


_DECODERS: Mapping[Tag, DecodeStep] = MappingProxyType(
    {
        Tag.NEW_FLOAT: _decode_new_float,
        Tag.SMALL_INT: _decode_small_int,
        Tag.INT: _decode_int,
        Tag.FLOAT: _decode_float,
        Tag.ATOM: _decode_atom,
        Tag.PORT: _decode_port,
        Tag.PID: _decode_pid,
        Tag.SMALL_TUPLE: _decode_small_tuple,
        Tag.TUPLE: _decode_tuple,
        Tag.NIL: _decode_nil,
        Tag.STRING: _decode_string,
        Tag.LIST: _decode_list,
        Tag.BINARY: _decode_binary,
        Tag.SMALL_BIG: _decode_small_big,
        Tag.BIG: _decode_big,
        Tag.SMALL_ATOM: _decode_small_atom,
        Tag.MAP: _decode_map,
        Tag.ATOM_UTF8: _decode_atom_utf8,
        Tag.SMALL_ATOM_UTF8: _decode_small_atom_utf8,
    }
)
