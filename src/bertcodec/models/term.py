"""Tagged term model and constructors.

A ``Term`` pairs a wire ``Tag`` with a payload. The constructors below make
type intent explicit: a Python list could be an Erlang list, tuple or char
list, and a string could be an atom, a binary or a char list. Untagged values
go through the encoder's inference rules instead.

Example:
    >>> from bertcodec import Atom, Binary, Int, Tuple, encode
    >>> encode(Tuple([Atom("ok"), Int(42), Binary("thing")]))
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from ..codec.tags import ATOM_TAGS, INTEGER_TAGS, TUPLE_TAGS, Tag
from ..exceptions import ConstructionError

_TEXT_TYPES = (str, bytes, bytearray)


class Term(BaseModel):
    """A value paired with the wire tag that describes it.

    Composite payloads hold either nested ``Term`` instances or untagged host
    values (which are inferred at encode time). Terms produced by
    ``decode_term`` hold ``Term`` children all the way down, and map payloads
    hold a list of ``(key, value)`` term pairs.

    Attributes:
        tag: Wire tag
        value: Payload, shaped according to the tag
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    tag: Tag
    value: Any = None

    @model_validator(mode="after")
    def check_payload(self) -> Term:
        _check_payload(self.tag, self.value)
        return self

    def to_python(self) -> Any:
        """Unwrap this term, recursively, to plain Python values.

        Atoms, strings and text binaries all become ``str``; tuples become
        ``tuple``, lists and nil become ``list`` and maps become ``dict``.
        """
        tag = self.tag
        if tag is Tag.NIL:
            return []
        if tag in TUPLE_TAGS:
            return tuple(unwrap(item) for item in self.value)
        if tag is Tag.LIST:
            return [unwrap(item) for item in self.value]
        if tag is Tag.MAP:
            return {freeze(unwrap(key)): unwrap(value) for key, value in map_items(self.value)}
        if tag is Tag.STRING and not isinstance(self.value, str):
            return "".join(chr(code) for code in self.value)
        return self.value

    def __repr__(self) -> str:
        return f"Term({self.tag.name}, {self.value!r})"


def unwrap(value: Any) -> Any:
    """Return the plain Python value for a term, or the value itself if untagged."""
    if isinstance(value, Term):
        return value.to_python()
    return value


def freeze(value: Any) -> Any:
    """Make a decoded value usable as a dict key."""
    if isinstance(value, list):
        return tuple(freeze(item) for item in value)
    if isinstance(value, tuple):
        return tuple(freeze(item) for item in value)
    if isinstance(value, dict):
        return tuple((freeze(key), freeze(item)) for key, item in value.items())
    return value


def map_items(value: Any) -> list[tuple[Any, Any]]:
    """Return the (key, value) pairs of a map payload in order."""
    if isinstance(value, Mapping):
        return list(value.items())
    return [(pair[0], pair[1]) for pair in value]


def is_sequence(value: Any) -> bool:
    """True for ordered sequences that are not text or bytes."""
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_payload(tag: Tag, value: Any) -> None:
    """Raise ConstructionError if ``value`` cannot be a payload for ``tag``."""
    if tag is Tag.NIL:
        if value is not None and not (is_sequence(value) and len(value) == 0):
            raise ConstructionError(f"Nil carries no payload, got {value!r}")
        return

    if tag in INTEGER_TAGS:
        if not _is_int(value):
            raise ConstructionError(f"{tag.name} requires an int, got {type(value).__name__}")
        return

    if tag in (Tag.NEW_FLOAT, Tag.FLOAT):
        if not (_is_int(value) or isinstance(value, float)):
            raise ConstructionError(f"{tag.name} requires a number, got {type(value).__name__}")
        return

    if tag in ATOM_TAGS or tag in (Tag.PORT, Tag.PID):
        if not isinstance(value, str):
            raise ConstructionError(f"{tag.name} requires a str, got {type(value).__name__}")
        return

    if tag is Tag.STRING:
        if isinstance(value, str):
            return
        if not is_sequence(value):
            raise ConstructionError("Must use a str or a sequence of ints to create strings.")
        for code in value:
            if not _is_int(code) or code < 0:
                raise ConstructionError(
                    f"String elements must be non-negative ints, got {code!r}"
                )
        return

    if tag is Tag.BINARY:
        if not isinstance(value, _TEXT_TYPES):
            raise ConstructionError(
                f"BINARY requires str or bytes, got {type(value).__name__}"
            )
        return

    if tag in TUPLE_TAGS:
        if not is_sequence(value):
            raise ConstructionError("Must use a sequence to create tuples.")
        return

    if tag is Tag.LIST:
        if not is_sequence(value):
            raise ConstructionError("Must use a sequence to create lists.")
        return

    if tag is Tag.MAP:
        if isinstance(value, Mapping):
            return
        if not is_sequence(value):
            raise ConstructionError("Must use a mapping or a sequence of pairs to create maps.")
        for pair in value:
            if not is_sequence(pair) or len(pair) != 2:
                raise ConstructionError(f"Map entries must be (key, value) pairs, got {pair!r}")
        return


def Nil() -> Term:
    """Create an empty list term."""
    return Term(tag=Tag.NIL, value=[])


def Int(value: int) -> Term:
    """Create an integer term.

    Values 0-255 are written with the 1-byte small integer tag, larger
    values with the 4-byte integer tag.
    """
    return Term(tag=Tag.INT, value=value)


def Float(value: float) -> Term:
    """Create a float term (written as an 8-byte IEEE-754 double)."""
    return Term(tag=Tag.NEW_FLOAT, value=value)


def Big(value: int) -> Term:
    """Create an arbitrary-precision integer term.

    Example:
        >>> encode(Big(2**64))
    """
    return Term(tag=Tag.BIG, value=value)


def Atom(value: str) -> Term:
    """Create an atom term.

    Atoms are written latin-1 when possible and UTF-8 otherwise.
    """
    return Term(tag=Tag.ATOM, value=value)


def SmallAtom(value: str) -> Term:
    return Term(tag=Tag.SMALL_ATOM, value=value)


def AtomUtf8(value: str) -> Term:
    return Term(tag=Tag.ATOM_UTF8, value=value)


def SmallAtomUtf8(value: str) -> Term:
    return Term(tag=Tag.SMALL_ATOM_UTF8, value=value)


def String(value: str) -> Term:
    """Create a char list term from text."""
    return Term(tag=Tag.STRING, value=value)


def IntList(value: Sequence[int]) -> Term:
    """Create a char list term from a sequence of small integers.

    Raises:
        ConstructionError: If value is not a sequence of non-negative ints
    """
    if not is_sequence(value):
        raise ConstructionError("Must use a sequence to create lists.")
    return Term(tag=Tag.STRING, value=list(value))


def Binary(value: str | bytes) -> Term:
    """Create a binary term. Text is written as UTF-8."""
    return Term(tag=Tag.BINARY, value=value)


def Tuple(value: Sequence[Any]) -> Term:
    """Create a tuple term.

    Raises:
        ConstructionError: If value is not an ordered sequence
    """
    return Term(tag=Tag.TUPLE, value=value)


def List(value: Sequence[Any]) -> Term:
    """Create a proper list term.

    Raises:
        ConstructionError: If value is not an ordered sequence
    """
    return Term(tag=Tag.LIST, value=value)


def Map(value: Mapping[Any, Any] | Sequence[Any]) -> Term:
    """Create a map term.

    A sequence of ``(key, value)`` pairs keeps the key types as given. A plain
    mapping has every key written as a binary.

    Raises:
        ConstructionError: If value is neither a mapping nor a sequence of pairs
    """
    return Term(tag=Tag.MAP, value=value)
