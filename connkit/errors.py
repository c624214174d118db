"""Errors raised by connector services."""

from __future__ import annotations


class ConnectError(Exception):
    """Base class for failures of a connector service."""

    message = "Connect error"

    def __init__(self, source: BaseException | None = None) -> None:
        super().__init__(self.message)
        self.source = source
        if source is not None:
            self.__cause__ = source

    def __str__(self) -> str:
        return self.message


class ResolverError(ConnectError):
    """Failed to resolve the hostname."""

    message = "Failed to resolve hostname"

    def __init__(self, source: BaseException) -> None:
        super().__init__(source)


class NoRecords(ConnectError):
    """No DNS records were found."""

    message = "No DNS records found for the input"


class InvalidInput(ConnectError):
    """The input was invalid."""

    message = "Invalid input"


class Unresolved(ConnectError):
    """The connector was given a request whose host is not resolved."""

    message = "Connector received `Connect` method with unresolved host"


class ConnectIoError(ConnectError):
    """An I/O error while connecting."""

    message = "I/O error"

    def __init__(self, source: BaseException) -> None:
        super().__init__(source)