"""Combined resolver and TCP connector."""

from __future__ import annotations

from typing import Any

from connkit.connection import Connection
from connkit.futures import Ready, ok
from connkit.info import ConnectInfo
from connkit.resolver import Resolver, ResolverService
from connkit.tcp import TcpConnector, TcpConnectorService


class ConnectorService:
    """Resolves a request if needed, then opens a TCP stream to it."""

    __slots__ = ("_tcp", "_resolver")

    def __init__(
        self,
        tcp: TcpConnectorService | None = None,
        resolver: ResolverService | None = None,
    ) -> None:
        self._tcp = tcp if tcp is not None else TcpConnectorService()
        self._resolver = resolver if resolver is not None else ResolverService()

    async def call(self, req: Any) -> Connection:
        """Connect to ``req``: a :class:`ConnectInfo` or a host request."""
        if not isinstance(req, ConnectInfo):
            req = ConnectInfo(req)
        resolved = await self._resolver.call(req)
        return await self._tcp.call(resolved)

    def __repr__(self) -> str:
        return f"ConnectorService(resolver={self._resolver!r})"


class Connector:
    """Factory of connector services using the given resolver."""

    __slots__ = ("_resolver",)

    def __init__(self, resolver: Resolver | None = None) -> None:
        self._resolver = resolver if resolver is not None else Resolver()

    def service(self) -> ConnectorService:
        """Build a connector service."""
        return ConnectorService(TcpConnector().service(), self._resolver.service())

    def new_service(self) -> Ready[ConnectorService]:
        """An awaitable that yields a new connector service."""
        return ok(self.service())

    def __repr__(self) -> str:
        return f"Connector({self._resolver!r})"