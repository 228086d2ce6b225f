"""Main CLI entry point for bertcodec."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from .. import __version__
from ..cli.analyze import analyze_hex, parse_hex
from ..codec.decoder import decode
from ..codec.encoder import encode
from ..exceptions import BertError


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the bertcodec CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="bertcodec: BERT (Binary ERlang Term) codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bertcodec --decode 836d0000000568656c6c6f        Decode to a Python value
  bertcodec --decode "83 68 02 64 00 02 6f 6b 61 2a" --typed
                                                   Show the typed term tree
  bertcodec --encode '{"swamp": "thing"}'          Encode a JSON literal
  bertcodec --version                              Show version
        """,
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--decode",
        metavar="HEX",
        type=str,
        help="Decode a hex dump of BERT bytes",
    )
    group.add_argument(
        "--encode",
        metavar="JSON",
        type=str,
        help="Encode a JSON literal and print the bytes as hex",
    )

    parser.add_argument(
        "--typed",
        action="store_true",
        help="With --decode, print the typed term tree",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bertcodec {__version__}",
    )

    args = parser.parse_args(argv)

    if args.decode is not None:
        try:
            if args.typed:
                print(analyze_hex(args.decode))
            else:
                print(repr(decode(parse_hex(args.decode))))
            return 0
        except BertError as e:
            print(f"Error decoding data: {e}", file=sys.stderr)
            return 1

    if args.encode is not None:
        try:
            value = json.loads(args.encode)
        except json.JSONDecodeError as e:
            print(f"Error: invalid JSON: {e}", file=sys.stderr)
            return 1
        try:
            print(encode(value).hex())
            return 0
        except BertError as e:
            print(f"Error encoding value: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
