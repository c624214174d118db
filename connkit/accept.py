"""Server-side TLS acceptor services with a per-thread concurrency limit."""

from __future__ import annotations

import asyncio
import datetime
import logging
import operator
import ssl
import threading
from dataclasses import dataclass
from typing import Any

from connkit.counter import Counter
from connkit.futures import Ready, ok

logger = logging.getLogger(__name__)

DEFAULT_TLS_HANDSHAKE_TIMEOUT = 3.0
"""Seconds an acceptor waits for a TLS handshake by default."""

_max_conn = 256
_local = threading.local()


def max_concurrent_tls_connect(num: int) -> None:
    """Set the per-thread limit of concurrent TLS handshakes.

    The limit is read when a thread first creates an acceptor service, so it
    should be set before any service is built. The default is 256.
    """
    global _max_conn
    value = operator.index(num)
    if value < 0:
        raise ValueError(f"connection limit must not be negative: {value}")
    _max_conn = value


def _max_conn_counter() -> Counter:
    counter = getattr(_local, "counter", None)
    if counter is None:
        counter = Counter(_max_conn)
        _local.counter = counter
    return counter


def _seconds(value: float | datetime.timedelta) -> float:
    if isinstance(value, datetime.timedelta):
        seconds = value.total_seconds()
    else:
        seconds = float(value)
    if seconds < 0:
        raise ValueError(f"handshake timeout must not be negative: {seconds}")
    return seconds


class TlsError(Exception):
    """A TLS handshake error, a handshake timeout or an inner service error."""

    message = "TLS error"

    def __init__(self, source: Any = None) -> None:
        super().__init__(self.message)
        self.source = source
        if isinstance(source, BaseException):
            self.__cause__ = source

    def __str__(self) -> str:
        return self.message


class TlsTimeout(TlsError):
    """The TLS handshake did not finish in time."""

    message = "TLS handshake has timed-out"

    def __init__(self) -> None:
        super().__init__(None)


class TlsHandshakeError(TlsError):
    """The TLS handshake failed."""

    message = "TLS handshake error"

    def __init__(self, source: Any) -> None:
        super().__init__(source)


class ServiceError(TlsError):
    """A service behind the acceptor failed."""

    message = "Service error"

    def __init__(self, source: Any) -> None:
        super().__init__(source)


@dataclass(frozen=True, eq=False, repr=False)
class TlsStream:
    """A server-side stream after a completed TLS handshake."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter

    @property
    def ssl_object(self) -> ssl.SSLObject | None:
        return self.writer.get_extra_info("ssl_object")

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        return self.writer.get_extra_info(name, default)

    def version(self) -> str | None:
        """Negotiated TLS protocol version."""
        obj = self.ssl_object
        return obj.version() if obj is not None else None

    def selected_alpn_protocol(self) -> str | None:
        """Protocol agreed by ALPN, if any."""
        obj = self.ssl_object
        return obj.selected_alpn_protocol() if obj is not None else None

    async def read(self, n: int = -1) -> bytes:
        return await self.reader.read(n)

    def write(self, data: bytes) -> None:
        self.writer.write(data)

    async def drain(self) -> None:
        await self.writer.drain()

    def close(self) -> None:
        self.writer.close()

    async def wait_closed(self) -> None:
        await self.writer.wait_closed()

    def __iter__(self):
        yield self.reader
        yield self.writer

    def __repr__(self) -> str:
        peer = self.writer.get_extra_info("peername")
        return f"TlsStream(peer={peer!r}, version={self.version()!r})"


class AcceptorService:
    """Performs server TLS handshakes, limited by a shared counter."""

    __slots__ = ("_context", "counter", "handshake_timeout")

    def __init__(
        self,
        context: ssl.SSLContext,
        counter: Counter,
        handshake_timeout: float | datetime.timedelta = DEFAULT_TLS_HANDSHAKE_TIMEOUT,
    ) -> None:
        self._context = context
        self.counter = counter
        self.handshake_timeout = _seconds(handshake_timeout)

    async def ready(self) -> None:
        """Wait until another handshake may start."""
        await self.counter.wait_available()

    async def call(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> TlsStream:
        """Run the TLS handshake on an accepted connection.

        Raises :class:`TlsTimeout` if it takes too long and
        :class:`TlsHandshakeError` if it fails; the connection is closed then.
        """
        with self.counter.get():
            try:
                await asyncio.wait_for(
                    writer.start_tls(self._context), self.handshake_timeout
                )
            except TimeoutError:
                writer.close()
                raise TlsTimeout() from None
            except OSError as exc:
                logger.debug("TLS handshake error: %r", exc)
                writer.close()
                raise TlsHandshakeError(exc) from exc
        return TlsStream(reader, writer)

    def __repr__(self) -> str:
        return f"AcceptorService(timeout={self.handshake_timeout})"


class Acceptor:
    """Factory of TLS acceptor services sharing one server context."""

    __slots__ = ("_context", "handshake_timeout")

    def __init__(self, context: ssl.SSLContext) -> None:
        if not isinstance(context, ssl.SSLContext):
            raise TypeError(f"expected an ssl.SSLContext, got {type(context).__name__}")
        self._context = context
        self.handshake_timeout = DEFAULT_TLS_HANDSHAKE_TIMEOUT

    def set_handshake_timeout(
        self, handshake_timeout: float | datetime.timedelta
    ) -> Acceptor:
        """Limit how long a handshake may take; the default is 3 seconds."""
        self.handshake_timeout = _seconds(handshake_timeout)
        return self

    def new_service(self) -> Ready[AcceptorService]:
        """An awaitable that yields a service using this thread's counter."""
        return ok(
            AcceptorService(self._context, _max_conn_counter(), self.handshake_timeout)
        )

    def __repr__(self) -> str:
        return f"Acceptor(timeout={self.handshake_timeout})"