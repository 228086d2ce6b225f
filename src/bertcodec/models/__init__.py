"""Tagged term model for bertcodec.

This module provides the Term class and the constructors used to give
values an explicit wire type.
"""

from __future__ import annotations

from .term import (
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

__all__ = [
    "Term",
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
]
