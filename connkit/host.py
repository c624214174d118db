"""Hostname and port extraction from connection requests."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlsplit

_PORT_RE = re.compile(r"\+?[0-9]+")

_SCHEME_PORTS = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "amqp": 5672,
    "amqps": 5671,
    "mqtt": 1883,
    "mqtts": 8883,
    "ftp": 21,
    "ftps": 990,
    "redis": 6379,
    "mysql": 3306,
    "postgres": 5432,
}


def _parse_port(text: str) -> int | None:
    if not _PORT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= 0xFFFF else None


def scheme_to_port(scheme: str | None) -> int | None:
    """Well-known port for a URL scheme, or None."""
    if scheme is None:
        return None
    return _SCHEME_PORTS.get(scheme)


class Host(ABC):
    """Something a hostname and an optional port can be derived from."""

    @abstractmethod
    def hostname(self) -> str:
        """The hostname part."""

    def port(self) -> int | None:
        """The port, if one is known."""
        return None


class UriHost(Host):
    """A URI used as a connection request."""

    __slots__ = ("uri", "_scheme", "_hostname", "_port")

    def __init__(self, uri: str) -> None:
        self.uri = uri
        if "://" in uri or uri.startswith("/"):
            parts = urlsplit(uri)
            self._scheme = parts.scheme or None
            netloc = parts.netloc
        else:
            self._scheme = None
            netloc = uri.split("/", 1)[0]

        authority = netloc.rpartition("@")[2]
        if authority.startswith("["):
            close = authority.find("]")
            if close == -1:
                raise ValueError(f"invalid IPv6 host in URI: {uri!r}")
            host = authority[: close + 1]
            rest = authority[close + 1 :]
            if rest and not rest.startswith(":"):
                raise ValueError(f"invalid authority in URI: {uri!r}")
            port_text = rest[1:]
        else:
            host, _, port_text = authority.partition(":")

        self._hostname = host
        if port_text:
            port = _parse_port(port_text)
            if port is None:
                raise ValueError(f"invalid port in URI: {uri!r}")
            self._port: int | None = port
        else:
            self._port = None

    def hostname(self) -> str:
        return self._hostname

    def port(self) -> int | None:
        if self._port is not None:
            return self._port
        return scheme_to_port(self._scheme)

    def __str__(self) -> str:
        return self.uri

    def __repr__(self) -> str:
        return f"UriHost({self.uri!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UriHost):
            return self.uri == other.uri
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.uri)


def host_hostname(request: Any) -> str:
    """Hostname of a ``"host[:port]"`` string or a :class:`Host`."""
    if isinstance(request, str):
        return request.partition(":")[0]
    if isinstance(request, Host):
        return request.hostname()
    raise TypeError(f"not a host: {type(request).__name__}")


def host_port(request: Any) -> int | None:
    """Port of a ``"host[:port]"`` string or a :class:`Host`, or None."""
    if isinstance(request, str):
        _, sep, tail = request.partition(":")
        return _parse_port(tail) if sep else None
    if isinstance(request, Host):
        return request.port()
    raise TypeError(f"not a host: {type(request).__name__}")