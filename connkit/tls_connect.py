"""TLS connector: upgrades a connected TCP stream with a client handshake."""

from __future__ import annotations

import ipaddress
import logging
import re
import ssl

from connkit.connection import Connection
from connkit.futures import Ready, ok

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?")

INVALID_SERVER_NAME = "connection parameters specified invalid server name"


def default_client_context() -> ssl.SSLContext:
    """A client context that verifies certificates against the system roots."""
    return ssl.create_default_context(ssl.Purpose.SERVER_AUTH)


def _is_valid_server_name(name: str) -> bool:
    try:
        ipaddress.ip_address(name)
    except ValueError:
        pass
    else:
        return True
    if name.endswith("."):
        name = name[:-1]
    if not name or len(name) > 253:
        return False
    return all(_LABEL_RE.fullmatch(label) for label in name.split("."))


class TlsConnectorService:
    """Performs the client TLS handshake on an established connection."""

    __slots__ = ("_context",)

    def __init__(self, context: ssl.SSLContext) -> None:
        self._context = context

    async def call(self, connection: Connection) -> Connection:
        """Upgrade the ``(reader, writer)`` pair of ``connection`` to TLS.

        Raises ValueError for a request whose hostname is not a valid server
        name, and OSError (including ssl.SSLError) if the handshake fails.
        """
        hostname = connection.hostname()
        logger.debug("TLS handshake start for: %r", hostname)
        if not _is_valid_server_name(hostname):
            raise ValueError(INVALID_SERVER_NAME)

        (reader, writer), conn = connection.replace_io(None)
        try:
            await writer.start_tls(self._context, server_hostname=hostname)
        except OSError as exc:
            logger.debug("TLS handshake error: %r", exc)
            writer.close()
            raise
        logger.debug("TLS handshake success: %r", hostname)
        return conn.replace_io((reader, writer))[1]

    def __repr__(self) -> str:
        return "TlsConnectorService"


class TlsConnector:
    """Factory of TLS connector services sharing one client context."""

    __slots__ = ("_context",)

    def __init__(self, context: ssl.SSLContext | None = None) -> None:
        self._context = context if context is not None else default_client_context()

    @staticmethod
    def service(context: ssl.SSLContext) -> TlsConnectorService:
        """A TLS connector service using ``context``."""
        return TlsConnectorService(context)

    def new_service(self) -> Ready[TlsConnectorService]:
        """An awaitable that yields a new TLS connector service."""
        return ok(TlsConnectorService(self._context))

    def __repr__(self) -> str:
        return "TlsConnector"