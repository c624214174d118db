"""TCP connector: opens a stream to the resolved addresses of a request."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from connkit.connection import Connection
from connkit.errors import ConnectIoError, Unresolved
from connkit.futures import Ready, ok
from connkit.info import ConnectInfo, IpAddr, SocketAddr

logger = logging.getLogger(__name__)

TcpStream = tuple[asyncio.StreamReader, asyncio.StreamWriter]


async def _connect(addr: SocketAddr, local_addr: IpAddr | None) -> TcpStream:
    host, port = addr
    if local_addr is None:
        return await asyncio.open_connection(host, port)
    return await asyncio.open_connection(host, port, local_addr=(str(local_addr), 0))


@dataclass(frozen=True)
class TcpConnectorService:
    """Connects to the addresses of a resolved request, trying each in order."""

    async def call(self, req: ConnectInfo) -> Connection:
        """Open a TCP stream for ``req``.

        Raises :class:`Unresolved` if ``req`` has no addresses, and
        :class:`ConnectIoError` if every address fails.
        """
        if not req.is_resolved():
            logger.error("TCP connector: unresolved connection address")
            raise Unresolved()

        hostname = req.hostname()
        port = req.port()
        logger.debug("TCP connector: connecting to %s on port %s", hostname, port)

        last_error: OSError | None = None
        for addr in req.addrs():
            try:
                stream = await _connect(addr, req.local_addr)
            except OSError as exc:
                logger.debug(
                    "TCP connector: failed to connect to %r port: %s", hostname, port
                )
                last_error = exc
                continue
            logger.debug(
                "TCP connector: successfully connected to %r - %r",
                hostname,
                stream[1].get_extra_info("peername"),
            )
            return Connection(req.request, stream)

        assert last_error is not None
        raise ConnectIoError(last_error)


@dataclass(frozen=True)
class TcpConnector:
    """Factory of TCP connector services."""

    def service(self) -> TcpConnectorService:
        """A new TCP connector service."""
        return TcpConnectorService()

    def new_service(self) -> Ready[TcpConnectorService]:
        """An awaitable that yields a new TCP connector service."""
        return ok(self.service())