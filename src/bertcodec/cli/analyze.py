"""Term analysis CLI helpers."""

from __future__ import annotations

from typing import Any

from ..codec.decoder import decode_term
from ..codec.tags import TUPLE_TAGS, Tag
from ..exceptions import FormatError
from ..models.term import Term, map_items


def parse_hex(text: str) -> bytes:
    """Parse a hex dump, ignoring whitespace, colons and a leading 0x.

    Raises:
        FormatError: If the text is not valid hex
    """
    cleaned = "".join(text.split()).replace(":", "")
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    try:
        return bytes.fromhex(cleaned)
    except ValueError as e:
        raise FormatError(f"Invalid hex input: {e}") from e


def analyze_hex(text: str) -> str:
    """Decode a hex dump and render its typed term tree."""
    return format_term(decode_term(parse_hex(text)))


def format_term(term: Term, indent: int = 0) -> str:
    """Render a term tree, one node per line.

    Example:
        >>> print(format_term(decode_term(b"\\x83h\\x02d\\x00\\x02oka*")))
        SMALL_TUPLE arity=2
          ATOM 'ok'
          SMALL_INT 42
    """
    lines: list[str] = []
    _format_node(term, indent, lines)
    return "\n".join(lines)


def _format_node(node: Any, indent: int, lines: list[str]) -> None:
    pad = "  " * indent
    if not isinstance(node, Term):
        lines.append(f"{pad}{node!r}")
        return

    name = node.tag.name
    if node.tag in TUPLE_TAGS:
        lines.append(f"{pad}{name} arity={len(node.value)}")
        for element in node.value:
            _format_node(element, indent + 1, lines)
    elif node.tag is Tag.LIST:
        lines.append(f"{pad}{name} length={len(node.value)}")
        for element in node.value:
            _format_node(element, indent + 1, lines)
    elif node.tag is Tag.MAP:
        items = map_items(node.value)
        lines.append(f"{pad}{name} arity={len(items)}")
        for key, value in items:
            lines.append(f"{pad}  key:")
            _format_node(key, indent + 2, lines)
            lines.append(f"{pad}  value:")
            _format_node(value, indent + 2, lines)
    elif node.tag is Tag.NIL:
        lines.append(f"{pad}{name}")
    else:
        lines.append(f"{pad}{name} {node.value!r}")
