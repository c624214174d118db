"""A connected I/O object paired with the request that produced it."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from connkit.host import host_hostname

R = TypeVar("R")
IO = TypeVar("IO")
IO2 = TypeVar("IO2")


class Connection(Generic[R, IO]):
    """Wraps the underlying I/O and the connection request.

    Attributes not found on the connection are looked up on the I/O object.
    """

    __slots__ = ("request", "io")

    def __init__(self, request: R, io: IO) -> None:
        self.request = request
        self.io = io

    def into_parts(self) -> tuple[IO, R]:
        """Split into ``(io, request)``."""
        return self.io, self.request

    def replace_io(self, io: IO2) -> tuple[IO, Connection[R, IO2]]:
        """Return the old I/O and a new connection holding ``io``."""
        return self.io, Connection(self.request, io)

    def hostname(self) -> str:
        """Hostname of the request."""
        return host_hostname(self.request)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in ("io", "request"):
            raise AttributeError(name)
        return getattr(self.io, name)

    def __repr__(self) -> str:
        return f"Connection(request={self.request!r}, io={self.io!r})"