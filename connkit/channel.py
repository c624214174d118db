"""Unbounded single-consumer, multi-producer FIFO channel for one event loop."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from connkit.waker import LocalWaker

_PENDING = object()
_ENDED = object()


class SendError(Exception):
    """Raised when sending after the receiver is gone or the channel is closed."""

    def __init__(self, item: Any) -> None:
        super().__init__("send failed because receiver is gone")
        self.item = item

    def into_inner(self) -> Any:
        """Return the message that could not be sent."""
        return self.item

    def __repr__(self) -> str:
        return "SendError('...')"


class ChannelEmpty(Exception):
    """Raised by :meth:`Receiver.try_recv` when no message is ready yet."""


@dataclass
class _Shared:
    buffer: deque = field(default_factory=deque)
    blocked_recv: LocalWaker = field(default_factory=LocalWaker)
    has_receiver: bool = True
    senders: int = 0


def channel() -> tuple[Sender, Receiver]:
    """Create a connected sender and receiver."""
    shared = _Shared()
    return Sender(shared), Receiver(shared)


class Sender:
    """Transmission end of a channel."""

    def __init__(self, shared: _Shared) -> None:
        shared.senders += 1
        self._shared = shared
        self._released = False

    def send(self, item: Any) -> None:
        """Queue ``item``; raise :class:`SendError` if nobody can receive it."""
        if self._released:
            raise RuntimeError("sender has been released")
        shared = self._shared
        if not shared.has_receiver:
            raise SendError(item)
        shared.buffer.append(item)
        shared.blocked_recv.wake()

    def close(self) -> None:
        """Stop all senders from sending; buffered messages stay receivable."""
        self._shared.has_receiver = False

    def clone(self) -> Sender:
        """Another sender for the same channel."""
        return Sender(self._shared)

    def release(self) -> None:
        """Give up this sender; the last release ends the receiver's stream."""
        if self._released:
            return
        self._released = True
        shared = self._shared
        if shared.has_receiver and shared.senders == 1:
            shared.blocked_recv.wake()
        shared.senders -= 1

    def __enter__(self) -> Sender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Sender(released={self._released})"


class Receiver:
    """Receiving end of a channel; also an async iterator."""

    def __init__(self, shared: _Shared) -> None:
        self._shared = shared

    def _poll(self) -> Any:
        shared = self._shared
        if shared.senders == 0:
            return shared.buffer.popleft() if shared.buffer else _ENDED
        if shared.buffer:
            return shared.buffer.popleft()
        return _PENDING

    def try_recv(self) -> Any:
        """Return the next message without waiting.

        Returns None once every sender is gone and the buffer is drained;
        raises :class:`ChannelEmpty` if a message may still arrive.
        """
        value = self._poll()
        if value is _PENDING:
            raise ChannelEmpty()
        if value is _ENDED:
            return None
        return value

    async def _next(self) -> Any:
        loop = asyncio.get_running_loop()
        while True:
            value = self._poll()
            if value is not _PENDING:
                return value
            fut = loop.create_future()

            def wake(fut: asyncio.Future = fut) -> None:
                if not fut.done():
                    fut.set_result(None)

            self._shared.blocked_recv.register(wake)
            await fut

    async def recv(self) -> Any:
        """Wait for the next message; None once all senders are gone."""
        value = await self._next()
        return None if value is _ENDED else value

    def sender(self) -> Sender:
        """Create a sender attached to this receiver."""
        return Sender(self._shared)

    def close(self) -> None:
        """Drop buffered messages and refuse further sends."""
        self._shared.buffer.clear()
        self._shared.has_receiver = False

    def __aiter__(self) -> Receiver:
        return self

    async def __anext__(self) -> Any:
        value = await self._next()
        if value is _ENDED:
            raise StopAsyncIteration
        return value

    def __enter__(self) -> Receiver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Receiver(buffered={len(self._shared.buffer)})"