"""DNS resolution of connection requests."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
from abc import ABC, abstractmethod
from collections.abc import Iterable

from connkit.errors import NoRecords, ResolverError
from connkit.futures import Ready, ok
from connkit.info import ConnectInfo, SocketAddr

logger = logging.getLogger(__name__)


class Resolve(ABC):
    """A custom asynchronous DNS resolver."""

    @abstractmethod
    async def lookup(self, host: str, port: int) -> Iterable[SocketAddr]:
        """Resolve ``host`` into socket addresses that use ``port``."""


class ResolverService:
    """Resolves connection requests, by the system resolver or a custom one."""

    __slots__ = ("_custom",)

    def __init__(self, resolver: Resolve | None = None) -> None:
        self._custom = resolver

    @staticmethod
    def custom(resolver: Resolve) -> ResolverService:
        """A service that resolves with ``resolver``."""
        if not callable(getattr(resolver, "lookup", None)):
            raise TypeError("resolver must have a lookup(host, port) method")
        return ResolverService(resolver)

    @staticmethod
    async def _default_lookup(req: ConnectInfo) -> list[SocketAddr]:
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                req.hostname(), req.port(), type=socket.SOCK_STREAM
            )
        except OSError as exc:
            logger.debug(
                "DNS resolver: failed to resolve host %r err: %r", req.hostname(), exc
            )
            raise ResolverError(exc) from exc
        return [(info[4][0], info[4][1]) for info in infos]

    async def call(self, req: ConnectInfo) -> ConnectInfo:
        """Resolve ``req`` if needed and return it with addresses set."""
        if req.is_resolved():
            return req

        hostname = req.hostname()
        try:
            ip = ipaddress.ip_address(hostname)
        except ValueError:
            pass
        else:
            return req.set_addr((ip, req.port()))

        logger.debug("DNS resolver: resolving host %r", hostname)
        if self._custom is None:
            addrs = await self._default_lookup(req)
        else:
            try:
                addrs = await self._custom.lookup(hostname, req.port())
            except Exception as exc:
                raise ResolverError(exc) from exc

        req.set_addrs(addrs)
        logger.debug(
            "DNS resolver: host %r resolved to %r", hostname, list(req.addrs())
        )
        if not req.is_resolved():
            raise NoRecords()
        return req

    def __repr__(self) -> str:
        kind = "default" if self._custom is None else "custom"
        return f"ResolverService({kind})"


class Resolver:
    """Factory of DNS resolver services."""

    __slots__ = ("_service",)

    def __init__(self, service: ResolverService | None = None) -> None:
        self._service = service if service is not None else ResolverService()

    @staticmethod
    def custom(resolver: Resolve) -> Resolver:
        """A factory whose services resolve with ``resolver``."""
        return Resolver(ResolverService.custom(resolver))

    def service(self) -> ResolverService:
        """The resolver service."""
        return self._service

    def new_service(self) -> Ready[ResolverService]:
        """An awaitable that yields the resolver service."""
        return ok(self._service)

    def __repr__(self) -> str:
        return f"Resolver({self._service!r})"