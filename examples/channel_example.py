#!/usr/bin/env python3
"""Socket channel example for bertcodec.

This example demonstrates:
1. Length-prefixed framing of encoded terms
2. A BERT-RPC style call/reply over a socket pair
3. Routing {error, Reason} replies to an error handler
"""

from __future__ import annotations

import logging
import socket

from bertcodec import Atom, BertChannel, Binary, Int, List, Tuple, encode, frame_packet


def main() -> None:
    """Run the channel example."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("bertcodec Channel Example")
    print("=" * 60)
    print()

    print("1. Framing an encoded term...")
    payload = encode(Atom("ping"))
    print(f"   Payload: {payload.hex()}")
    print(f"   Packet:  {frame_packet(payload).hex()}")
    print()

    client_sock, server_sock = socket.socketpair()
    with BertChannel(client_sock) as client, BertChannel(server_sock) as server:
        print("2. Calling calc:add(1, 2)...")
        client.send(
            Tuple([Atom("call"), Atom("calc"), Atom("add"), List([Int(1), Int(2)])]),
            on_success=lambda reply: print(f"   Reply: {reply!r}"),
        )
        _, _, _, args = server.receive()
        server.send(Tuple([Atom("reply"), Int(sum(args))]))
        client.receive()
        print()

        print("3. Calling calc:div(1, 0)...")
        client.send(
            Tuple([Atom("call"), Atom("calc"), Atom("div"), List([Int(1), Int(0)])]),
            on_error=lambda reply: print(f"   Error: {reply!r}"),
        )
        server.receive()
        server.send(Tuple([Atom("error"), Tuple([Atom("user"), Int(400), Binary("badarith")])]))
        client.receive()
        print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
