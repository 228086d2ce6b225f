"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bertcodec import Atom, Binary, Int, List, Tuple


class FakeSocket:
    """In-memory socket double: records sent bytes, replays queued bytes."""

    def __init__(self, incoming: bytes = b"", chunk_size: int = 3) -> None:
        self.sent = bytearray()
        self.incoming = bytearray(incoming)
        self.chunk_size = chunk_size
        self.closed = False

    def sendall(self, data: bytes) -> None:
        self.sent.extend(data)

    def recv(self, bufsize: int) -> bytes:
        size = min(bufsize, self.chunk_size, len(self.incoming))
        chunk = bytes(self.incoming[:size])
        del self.incoming[:size]
        return chunk

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_socket_factory():
    """Build FakeSocket instances preloaded with incoming bytes."""
    return FakeSocket


@pytest.fixture
def ok_reply():
    """A typical {ok, 42, <<"thing">>} reply term."""
    return Tuple([Atom("ok"), Int(42), Binary("thing")])


@pytest.fixture
def error_reply():
    """A typical {error, [<<"boom">>]} reply term."""
    return Tuple([Atom("error"), List([Binary("boom")])])
