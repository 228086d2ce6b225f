"""Term channel over a socket-like transport.

``BertChannel`` frames encoded terms with a length header and routes each
decoded reply to a success or error handler. Any object with ``sendall()``
and ``recv()`` works as the transport (a connected ``socket.socket``, an SSL
socket, or a test double).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from ..codec.decoder import decode_term
from ..codec.encoder import encode
from ..codec.tags import ATOM_TAGS, TUPLE_TAGS, Tag
from ..config import CodecConfig
from ..exceptions import FramingError
from ..models.term import Term
from .packet import HeaderSize, frame_packet, read_length

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class SocketLike(Protocol):
    def sendall(self, data: bytes) -> Any: ...

    def recv(self, bufsize: int) -> bytes: ...


def is_error_reply(term: Term) -> bool:
    """Return True for ``{error, Reason}``: a two-element tuple or list led by the atom error."""
    if term.tag not in TUPLE_TAGS and term.tag is not Tag.LIST:
        return False
    if len(term.value) != 2:
        return False
    head = term.value[0]
    return isinstance(head, Term) and head.tag in ATOM_TAGS and head.value == "error"


def _log_success(message: Any) -> None:
    logger.info("Received message: %r", message)


def _log_error(message: Any) -> None:
    logger.warning("Received error reply: %r", message)


class BertChannel:
    """Send and receive BERT terms over a socket-like transport.

    Args:
        sock: Transport with ``sendall(bytes)`` and ``recv(n)``
        on_success: Called with each decoded non-error message
        on_error: Called with each decoded ``{error, Reason}`` message
        config: Codec configuration for encode/decode
        header_size: Length header size in bytes (1, 2 or 4)

    Example:
        ```python
        import socket
        from bertcodec import Atom, BertChannel, Tuple

        sock = socket.create_connection(("localhost", 9999))
        with BertChannel(sock) as channel:
            channel.send(Tuple([Atom("call"), Atom("echo"), "hello"]))
            reply = channel.receive()
        ```
    """

    def __init__(
        self,
        sock: SocketLike,
        on_success: Optional[Handler] = None,
        on_error: Optional[Handler] = None,
        config: Optional[CodecConfig] = None,
        header_size: HeaderSize = 4,
    ) -> None:
        self._sock = sock
        self._config = config
        self._header_size = header_size
        self.on_success: Handler = on_success or _log_success
        self.on_error: Handler = on_error or _log_error
        self._pending_success: Optional[Handler] = None
        self._pending_error: Optional[Handler] = None

    def send(
        self,
        value: Any,
        on_success: Optional[Handler] = None,
        on_error: Optional[Handler] = None,
    ) -> None:
        """Encode and send one value.

        Handlers passed here replace the channel handlers until they have
        handled one message, then the channel handlers apply again.

        Raises:
            EncodeError: If the value cannot be encoded
        """
        payload = encode(value, self._config)
        if on_success is not None:
            self._pending_success = on_success
        if on_error is not None:
            self._pending_error = on_error
        self._sock.sendall(frame_packet(payload, self._header_size))
        logger.debug("Sent %d byte packet", len(payload))

    def receive(self) -> Any:
        """Read one packet, dispatch it to a handler and return its value.

        Raises:
            FramingError: If the peer closes the connection mid-packet
            FormatError: If the payload is not valid BERT
        """
        header = self._recv_exact(self._header_size)
        payload = self._recv_exact(read_length(header))
        term = decode_term(payload, self._config)
        message = term.to_python()
        logger.debug("Received %s term in %d byte packet", term.tag.name, len(payload))

        if is_error_reply(term):
            handler = self._pending_error or self.on_error
            self._pending_error = None
        else:
            handler = self._pending_success or self.on_success
            self._pending_success = None

        handler(message)
        return message

    def close(self) -> None:
        close = getattr(self._sock, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> BertChannel:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _recv_exact(self, num_bytes: int) -> bytes:
        chunks = bytearray()
        while len(chunks) < num_bytes:
            chunk = self._sock.recv(num_bytes - len(chunks))
            if not chunk:
                raise FramingError(
                    f"Connection closed after {len(chunks)} of {num_bytes} bytes"
                )
            chunks.extend(chunk)
        return bytes(chunks)
