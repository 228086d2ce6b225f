#!/usr/bin/env python3
"""Basic usage example for bertcodec.

This example demonstrates:
1. Building typed terms with the constructors
2. Encoding to BERT bytes
3. Decoding to plain Python values and to a typed term tree
4. Inference for untagged Python values
"""

from __future__ import annotations

from bertcodec import (
    Atom,
    Big,
    Binary,
    Int,
    List,
    Map,
    Tuple,
    decode,
    decode_term,
    encode,
)
from bertcodec.cli.analyze import format_term


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bertcodec Basic Usage Example")
    print("=" * 60)
    print()

    # Build a typed term
    print("1. Building a {ok, 42, <<\"thing\">>} reply...")
    reply = Tuple([Atom("ok"), Int(42), Binary("thing")])
    print(f"   Term: {reply!r}")
    print()

    # Encode it
    print("2. Encoding to BERT bytes...")
    data = encode(reply)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex()}")
    print()

    # Decode it both ways
    print("3. Decoding...")
    print(f"   Plain value: {decode(data)!r}")
    print("   Typed tree:")
    for line in format_term(decode_term(data)).splitlines():
        print(f"     {line}")
    print()

    # Untagged values are inferred
    print("4. Encoding untagged Python values...")
    for value in [None, True, 7, 2.5, "text", (1, 2), [1, 2], {"swamp": "thing"}]:
        print(f"   {value!r:>22} -> {encode(value).hex()}")
    print()

    # Typed map keys and bignums
    print("5. Typed map keys and bignums...")
    term = Map([(Atom("id"), Big(2**70)), (Atom("tags"), List([Atom("a"), Atom("b")]))])
    decoded = decode_term(encode(term))
    print(f"   Key types: {[key.tag.name for key, _ in decoded.value]}")
    print(f"   Value: {decoded.to_python()!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
