"""Single-slot wakeup registration for one consumer task."""

from __future__ import annotations

from collections.abc import Callable

Waker = Callable[[], object]


class LocalWaker:
    """Keeps the most recently registered waker and calls it on :meth:`wake`.

    Consumers register before checking for a result; producers wake after
    producing one. Waking before anything is registered does nothing.
    """

    __slots__ = ("_waker",)

    def __init__(self) -> None:
        self._waker: Waker | None = None

    def register(self, waker: Waker) -> bool:
        """Store ``waker``; return True if a waker was already registered."""
        previous = self._waker
        self._waker = waker
        return previous is not None

    def wake(self) -> None:
        """Call and forget the last registered waker, if any."""
        waker = self.take()
        if waker is not None:
            waker()

    def take(self) -> Waker | None:
        """Remove and return the registered waker, or None."""
        waker, self._waker = self._waker, None
        return waker

    def __repr__(self) -> str:
        return "LocalWaker"