"""Immutable UTF-8 string stored as bytes, with cheap sub-slicing."""

from __future__ import annotations

from functools import total_ordering
from typing import Any


class _Storage:
    """Backing buffer shared by a byte string and every slice taken from it."""

    __slots__ = ("data",)

    def __init__(self, data: bytes) -> None:
        self.data = data


@total_ordering
class ByteString:
    """An immutable UTF-8 string kept as bytes.

    Compares equal to, hashes like and orders like the ``str`` it holds.
    ``len()`` gives the length in bytes.
    """

    __slots__ = ("_storage", "_start", "_end")

    def __init__(self, value: str = "") -> None:
        if not isinstance(value, str):
            raise TypeError(
                f"ByteString() takes a str, not {type(value).__name__}; use try_from for bytes"
            )
        data = value.encode("utf-8")
        self._storage = _Storage(data)
        self._start = 0
        self._end = len(data)

    @classmethod
    def _view(cls, storage: _Storage, start: int, end: int) -> ByteString:
        obj = cls.__new__(cls)
        obj._storage = storage
        obj._start = start
        obj._end = end
        return obj

    @classmethod
    def _owned(cls, data: bytes) -> ByteString:
        return cls._view(_Storage(data), 0, len(data))

    @classmethod
    def from_static(cls, src: str) -> ByteString:
        """Create a byte string from a str."""
        return cls(src)

    @classmethod
    def from_bytes_unchecked(cls, src: bytes | bytearray | memoryview) -> ByteString:
        """Wrap ``src`` without checking that it is valid UTF-8.

        Invalid sequences show up as replacement characters when read as text.
        """
        return cls._owned(bytes(src))

    @classmethod
    def try_from(cls, value: Any) -> ByteString:
        """Build from a str, a bytes-like object or an iterable of byte values.

        Raises UnicodeDecodeError if the bytes are not valid UTF-8.
        """
        if isinstance(value, ByteString):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, int):
            raise TypeError("cannot build a ByteString from an int")
        data = bytes(value)
        data.decode("utf-8")
        return cls._owned(data)

    @property
    def _data(self) -> bytes:
        return self._storage.data[self._start:self._end]

    def as_bytes(self) -> bytes:
        """The UTF-8 bytes of this string."""
        return self._data

    def into_bytes(self) -> bytes:
        """The UTF-8 bytes of this string."""
        return self._data

    def strip(self) -> ByteString:
        """A slice of this string without leading and trailing whitespace."""
        text = str(self)
        left = text.lstrip()
        lead = len(text) - len(left)
        core = left.rstrip()
        trail = len(left) - len(core)
        start = self._start + len(text[:lead].encode("utf-8"))
        end = self._end - len(text[len(text) - trail:].encode("utf-8"))
        if start >= end:
            return ByteString()
        return ByteString._view(self._storage, start, end)

    def slice_ref(self, subset: ByteString | str) -> ByteString:
        """Return ``subset`` as a slice of this byte string.

        ``subset`` must have been sliced from this byte string (for example
        by :meth:`strip`); an equal but separately built string raises
        ValueError. An empty subset always gives an empty byte string.
        """
        if isinstance(subset, (str, ByteString)) and len(subset) == 0:
            return ByteString()
        if (
            not isinstance(subset, ByteString)
            or subset._storage is not self._storage
            or subset._start < self._start
            or subset._end > self._end
        ):
            raise ValueError("subset is not a sub-slice of this byte string")
        return ByteString._view(self._storage, subset._start, subset._end)

    def __str__(self) -> str:
        return self._data.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return repr(str(self))

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return self._end - self._start

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (str, ByteString)):
            return str(item) in str(self)
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteString):
            return self._data == other._data
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, ByteString):
            return self._data < other._data
        if isinstance(other, str):
            return self._data < other.encode("utf-8")
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))