"""Small awaitable building blocks: ready values, either-of-two, poll functions."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
L = TypeVar("L")
R = TypeVar("R")


class _Pending:
    __slots__ = ()

    def __repr__(self) -> str:
        return "PENDING"


PENDING = _Pending()
"""Returned by a poll function to signal it is not finished yet."""


class Ready(Generic[T]):
    """An awaitable that is immediately complete; it may be consumed once."""

    __slots__ = ("_outcome",)

    def __init__(self, value: T, *, _error: bool = False) -> None:
        self._outcome: tuple[bool, Any] | None = (_error, value)

    def _take(self, message: str) -> T:
        if self._outcome is None:
            raise RuntimeError(message)
        is_error, payload = self._outcome
        self._outcome = None
        if is_error:
            raise payload
        return payload

    def into_inner(self) -> T:
        """Return the value directly, or raise the stored error."""
        return self._take("Ready value already taken")

    async def _resolve(self) -> T:
        return self._take("Ready polled after completion")

    def __await__(self) -> Generator[Any, None, T]:
        return self._resolve().__await__()

    def __repr__(self) -> str:
        return "Ready(taken)" if self._outcome is None else "Ready(...)"


def ready(val: T) -> Ready[T]:
    """An awaitable that completes with ``val``."""
    return Ready(val)


def ok(val: T) -> Ready[T]:
    """An awaitable that completes successfully with ``val``."""
    return Ready(val)


def err(error: BaseException) -> Ready[Any]:
    """An awaitable that raises ``error`` when awaited."""
    return Ready(error, _error=True)


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """One of two values, awaited as whichever it holds."""

    value: Any
    is_left: bool

    @staticmethod
    def left(value: L) -> Either[L, Any]:
        return Either(value, True)

    @staticmethod
    def right(value: R) -> Either[Any, R]:
        return Either(value, False)

    @property
    def is_right(self) -> bool:
        return not self.is_left

    def into_inner(self) -> Any:
        """The held value, whichever side it is."""
        return self.value

    def __await__(self) -> Generator[Any, None, Any]:
        awaitable: Awaitable[Any] = self.value
        return awaitable.__await__()


@dataclass
class _Context:
    waker: Callable[[], None]


def _waker_for(fut: asyncio.Future) -> Callable[[], None]:
    def wake() -> None:
        if not fut.done():
            fut.set_result(None)

    return wake


class PollFn(Generic[T]):
    """Awaitable driven by a function called with a context until it is ready."""

    __slots__ = ("_f",)

    def __init__(self, f: Callable[[_Context], Any]) -> None:
        self._f = f

    def __await__(self) -> Generator[Any, None, T]:
        loop = asyncio.get_running_loop()
        while True:
            fut = loop.create_future()
            result = self._f(_Context(_waker_for(fut)))
            if result is not PENDING:
                return result
            yield from fut

    def __repr__(self) -> str:
        return "PollFn"


def poll_fn(f: Callable[[_Context], Any]) -> PollFn[Any]:
    """Build an awaitable from ``f``; ``f`` returns PENDING until done."""
    return PollFn(f)