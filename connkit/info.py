"""Connection request information: the request, its port and resolved addresses."""

from __future__ import annotations

import ipaddress
import operator
from collections import deque
from collections.abc import Iterable, Iterator
from typing import Any, Union

from connkit.host import host_hostname, host_port

SocketAddr = tuple[str, int]
"""A resolved socket address: a normalised IP address text and a port."""

IpAddr = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _check_port(port: Any) -> int:
    value = operator.index(port)
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"port out of range: {value}")
    return value


def _socket_addr(value: Any) -> SocketAddr:
    try:
        ip, port = value
    except (TypeError, ValueError):
        raise TypeError(f"not a socket address: {value!r}") from None
    return str(ipaddress.ip_address(ip)), _check_port(port)


def _ip_addr(value: Any) -> IpAddr:
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return value
    if isinstance(value, (str, int, bytes)):
        return ipaddress.ip_address(value)
    return ipaddress.ip_address(bytes(value))


class ConnectInfo:
    """A connection request that may carry pre-resolved socket addresses.

    Setters change the object in place and return it, so calls chain.
    """

    __slots__ = ("request", "_port", "_addr", "local_addr")

    def __init__(self, request: Any) -> None:
        port = host_port(request)
        self.request = request
        self._port = port if port is not None else 0
        self._addr: SocketAddr | deque[SocketAddr] | None = None
        self.local_addr: IpAddr | None = None

    @classmethod
    def with_addr(cls, request: Any, addr: Any) -> ConnectInfo:
        """Connection info whose socket address is already known."""
        info = cls(request)
        info._port = 0
        info._addr = _socket_addr(addr)
        return info

    def set_port(self, port: int) -> ConnectInfo:
        """Set the fallback port, used when the request names none."""
        self._port = _check_port(port)
        return self

    def set_addr(self, addr: Any) -> ConnectInfo:
        """Set a single socket address, or clear the addresses with None."""
        self._addr = None if addr is None else _socket_addr(addr)
        return self

    def set_addrs(self, addrs: Iterable[Any]) -> ConnectInfo:
        """Set a list of socket addresses, tried in order."""
        resolved = deque(_socket_addr(addr) for addr in addrs)
        if len(resolved) < 2:
            self._addr = resolved.popleft() if resolved else None
        else:
            self._addr = resolved
        return self

    def set_local_addr(self, addr: Any) -> ConnectInfo:
        """Set the local IP address the connection is made from."""
        self.local_addr = _ip_addr(addr)
        return self

    def hostname(self) -> str:
        """Hostname of the request."""
        return host_hostname(self.request)

    def port(self) -> int:
        """Port named by the request, else the one set on this info."""
        port = host_port(self.request)
        return port if port is not None else self._port

    def _addr_tuple(self) -> tuple[SocketAddr, ...]:
        if self._addr is None:
            return ()
        if isinstance(self._addr, deque):
            return tuple(self._addr)
        return (self._addr,)

    def addrs(self) -> Iterator[SocketAddr]:
        """Iterate over the resolved addresses without removing them."""
        return iter(self._addr_tuple())

    def take_addrs(self) -> Iterator[SocketAddr]:
        """Remove the resolved addresses and iterate over them."""
        addrs = self._addr_tuple()
        self._addr = None
        return iter(addrs)

    def is_resolved(self) -> bool:
        """True once at least one socket address is known."""
        return self._addr is not None

    def _key(self) -> tuple[Any, ...]:
        return (self.request, self._port, self._addr_tuple(), self.local_addr)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConnectInfo):
            return self._key() == other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.hostname()}:{self.port()}"

    def __repr__(self) -> str:
        return (
            f"ConnectInfo(request={self.request!r}, port={self._port}, "
            f"addrs={list(self._addr_tuple())!r}, local_addr={self.local_addr!r})"
        )