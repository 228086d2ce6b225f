"""Unit tests for the socket channel."""

from __future__ import annotations

import logging

import pytest

from bertcodec import (
    Atom,
    BertChannel,
    Binary,
    FormatError,
    FramingError,
    Int,
    List,
    Tuple,
    encode,
    frame_packet,
    is_error_reply,
)


def packet(value: object, header_size: int = 4) -> bytes:
    return frame_packet(encode(value), header_size)


class Recorder:
    """Collects the messages a handler sees."""

    def __init__(self) -> None:
        self.messages: list = []

    def __call__(self, message: object) -> None:
        self.messages.append(message)


class TestIsErrorReply:
    """Test detection of {error, Reason} replies."""

    def test_error_tuple(self) -> None:
        assert is_error_reply(Tuple([Atom("error"), Binary("boom")]))

    def test_error_list(self) -> None:
        assert is_error_reply(List([Atom("error"), Binary("boom")]))

    @pytest.mark.parametrize(
        "term",
        [
            Tuple([Atom("ok"), Binary("fine")]),
            Tuple([Binary("error"), Binary("boom")]),
            Tuple([Atom("error")]),
            Tuple([Atom("error"), Int(1), Int(2)]),
            Int(1),
            Atom("error"),
        ],
    )
    def test_not_error(self, term) -> None:
        assert not is_error_reply(term)


class TestBertChannel:
    """Test sending, receiving and handler routing."""

    def test_send(self, fake_socket_factory, ok_reply) -> None:
        """send() writes one framed packet."""
        sock = fake_socket_factory()
        BertChannel(sock).send(ok_reply)
        assert bytes(sock.sent) == packet(ok_reply)

    def test_receive_success(self, fake_socket_factory, ok_reply) -> None:
        """Non-error replies go to on_success, in partial reads."""
        sock = fake_socket_factory(packet(ok_reply), chunk_size=3)
        on_success, on_error = Recorder(), Recorder()
        channel = BertChannel(sock, on_success=on_success, on_error=on_error)

        message = channel.receive()

        assert message == ("ok", 42, "thing")
        assert on_success.messages == [("ok", 42, "thing")]
        assert on_error.messages == []

    def test_receive_error(self, fake_socket_factory, error_reply) -> None:
        """{error, Reason} replies go to on_error."""
        sock = fake_socket_factory(packet(error_reply))
        on_success, on_error = Recorder(), Recorder()
        channel = BertChannel(sock, on_success=on_success, on_error=on_error)

        assert channel.receive() == ("error", ["boom"])
        assert on_error.messages == [("error", ["boom"])]
        assert on_success.messages == []

    def test_one_shot_success_handler(self, fake_socket_factory, ok_reply) -> None:
        """A handler passed to send() handles exactly one reply."""
        sock = fake_socket_factory(packet(ok_reply) + packet(Int(7)))
        default, once = Recorder(), Recorder()
        channel = BertChannel(sock, on_success=default)

        channel.send(Atom("ping"), on_success=once)
        channel.receive()
        channel.receive()

        assert once.messages == [("ok", 42, "thing")]
        assert default.messages == [7]

    def test_one_shot_error_handler_waits(
        self, fake_socket_factory, ok_reply, error_reply
    ) -> None:
        """A pending error handler survives success replies until it is used."""
        incoming = packet(ok_reply) + packet(error_reply) + packet(error_reply)
        sock = fake_socket_factory(incoming)
        on_success, on_error, once = Recorder(), Recorder(), Recorder()
        channel = BertChannel(sock, on_success=on_success, on_error=on_error)

        channel.send(Atom("ping"), on_error=once)
        channel.receive()
        channel.receive()
        channel.receive()

        assert on_success.messages == [("ok", 42, "thing")]
        assert once.messages == [("error", ["boom"])]
        assert on_error.messages == [("error", ["boom"])]

    def test_header_size(self, fake_socket_factory, ok_reply) -> None:
        sock = fake_socket_factory(packet(ok_reply, 2))
        channel = BertChannel(sock, on_success=Recorder(), header_size=2)
        channel.send(Int(1))

        assert channel.receive() == ("ok", 42, "thing")
        assert bytes(sock.sent) == packet(Int(1), 2)

    def test_connection_closed_mid_packet(self, fake_socket_factory, ok_reply) -> None:
        sock = fake_socket_factory(packet(ok_reply)[:-2])
        with pytest.raises(FramingError, match="Connection closed"):
            BertChannel(sock).receive()

    def test_invalid_payload(self, fake_socket_factory) -> None:
        sock = fake_socket_factory(frame_packet(b"\x82j"))
        with pytest.raises(FormatError, match="start marker"):
            BertChannel(sock).receive()

    def test_default_handlers_log(self, fake_socket_factory, ok_reply, error_reply, caplog) -> None:
        """Without handlers, replies are logged."""
        sock = fake_socket_factory(packet(ok_reply) + packet(error_reply))
        channel = BertChannel(sock)

        with caplog.at_level(logging.INFO, logger="bertcodec.framing.channel"):
            channel.receive()
            channel.receive()

        levels = [record.levelno for record in caplog.records]
        assert logging.INFO in levels
        assert logging.WARNING in levels
        assert "error reply" in caplog.text

    def test_context_manager_closes(self, fake_socket_factory) -> None:
        sock = fake_socket_factory()
        with BertChannel(sock):
            pass
        assert sock.closed

    def test_close_without_close_method(self) -> None:
        """Transports without close() are left alone."""

        class Pipe:
            def sendall(self, data: bytes) -> None:
                pass

            def recv(self, bufsize: int) -> bytes:
                return b""

        BertChannel(Pipe()).close()
