"""Exception hierarchy for bertcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BertError for easy catching of any bertcodec-specific error.
"""

from __future__ import annotations


class BertError(Exception):
    """Base exception for all bertcodec errors."""

    pass


class DecodeError(BertError):
    """Raised when decoding binary data fails."""

    pass


class FormatError(DecodeError, ValueError):
    """Raised when the wire bytes do not follow the BERT grammar.

    Examples:
        - Leading byte is not the 131 start marker
        - Unknown tag byte
        - List not terminated by a nil tag
        - Truncated payload or unparsed trailing bytes
        - Nesting deeper than the configured limit
    """

    pass


class EncodeError(BertError):
    """Raised when encoding a value fails."""

    pass


class RangeError(EncodeError, ValueError):
    """Raised when a value does not fit its wire representation.

    Examples:
        - Integer above the encodable ceiling (2^27 - 1 by default)
        - Length, arity or element count above the configured limit
        - Atom longer than 255 bytes
        - NaN or Infinity without allow_non_finite
    """

    pass


class TermTypeError(EncodeError, TypeError):
    """Raised when a value cannot be mapped to a wire type.

    Examples:
        - Untagged host value with no inference rule (e.g. a set)
        - Decode-only tag such as pid, port or legacy float
        - Typed term used as a key in a plain mapping
    """

    pass


class ConstructionError(BertError, TypeError):
    """Raised when a term constructor receives an argument of the wrong shape.

    Examples:
        - Tuple() or List() given something other than a sequence
        - Map() given something other than pairs or a mapping
    """

    pass


class FramingError(BertError):
    """Raised when framing or channel operations fail.

    Examples:
        - Truncated frame or length header
        - Length field inconsistency
        - Peer closed the connection mid-frame
    """

    pass
