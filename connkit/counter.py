"""Shared counter that wakes a waiting task when it drops below capacity."""

from __future__ import annotations

import asyncio

from connkit.waker import LocalWaker, Waker


class Counter:
    """Counts acquired guards and notifies a task when room frees up."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self._count = 0
        self._task = LocalWaker()

    def get(self) -> CounterGuard:
        """Acquire a guard, incrementing the counter until it is released."""
        return CounterGuard(self)

    def available(self, waker: Waker) -> bool:
        """Return True if below capacity; otherwise register ``waker``."""
        if self._count < self.capacity:
            return True
        self._task.register(waker)
        return False

    async def wait_available(self) -> None:
        """Wait until the counter is below capacity."""
        loop = asyncio.get_running_loop()
        while True:
            fut = loop.create_future()

            def wake(fut: asyncio.Future = fut) -> None:
                if not fut.done():
                    fut.set_result(None)

            if self.available(wake):
                return
            await fut

    def total(self) -> int:
        """Number of guards currently held."""
        return self._count

    def _inc(self) -> None:
        self._count += 1

    def _dec(self) -> None:
        num = self._count
        self._count = num - 1
        if num == self.capacity:
            self._task.wake()

    def __repr__(self) -> str:
        return f"Counter(count={self._count}, capacity={self.capacity})"


class CounterGuard:
    """Keeps its counter incremented until released."""

    __slots__ = ("_counter", "_released")

    def __init__(self, counter: Counter) -> None:
        counter._inc()
        self._counter = counter
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Decrement the counter; further calls do nothing."""
        if self._released:
            return
        self._released = True
        self._counter._dec()

    def __enter__(self) -> CounterGuard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"CounterGuard(released={self._released})"