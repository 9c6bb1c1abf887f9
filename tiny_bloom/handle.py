"""
Handle-based interface for tiny-bloom filters.

Foreign-function wrappers cannot hold Python objects directly, so this module
hands out opaque integer handles instead. Each handle owns exactly one filter
until it is freed. Handle ``0`` plays the role of a null pointer: it is what
the constructors return when the parameters are rejected, and it is never a
valid handle.

Example:
    handle = bloom_filter_from_fpp(0.0001, 64)
    bloom_filter_insert(handle, b"a\\0")
    bloom_filter_contains(handle, b"a\\0")  # True
    bloom_filter_free(handle)

    # Or with guaranteed release
    with FilterHandle.from_fpp(0.0001, 64) as fh:
        fh.insert(b"a")
"""

import itertools
import logging
from typing import Any, Callable, Dict, Iterator, Optional, Union

from tiny_bloom.algorithms.bloom.base import BloomFilter
from tiny_bloom.algorithms.bloom.scalable import ScalableBloomFilter
from tiny_bloom.core.errors import InvalidHandleError, InvalidParameterError

logger = logging.getLogger(__name__)

NULL_HANDLE = 0

Filter = Union[BloomFilter, ScalableBloomFilter]
Key = Union[bytes, bytearray, memoryview, str]


def _key_bytes(key: Key) -> bytes:
    """Read a key the way a C string is read: up to the first NUL byte."""
    if isinstance(key, str):
        key = key.encode("utf-8")
    elif not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError(f"handle keys must be bytes or str, not {type(key).__name__}")
    data = bytes(key)
    end = data.find(b"\0")
    return data if end < 0 else data[:end]


class HandleTable:
    """
    Registry of live filters keyed by handle.

    Handles are never reused, so a stale handle cannot silently reach a
    filter created after it was freed. The table does no locking; callers
    sharing it between threads must serialize access themselves.
    """

    def __init__(self) -> None:
        self._filters: Dict[int, Filter] = {}
        self._next_handle: Iterator[int] = itertools.count(1)

    def register(self, bloom: Filter) -> int:
        handle = next(self._next_handle)
        self._filters[handle] = bloom
        logger.debug("Created handle %d for %r", handle, bloom)
        return handle

    def get(self, handle: int) -> Filter:
        """
        Look up the filter owned by a handle.

        Raises:
            InvalidHandleError: If the handle is null, freed or unknown.
        """
        if handle == NULL_HANDLE:
            raise InvalidHandleError("Null filter handle")
        try:
            return self._filters[handle]
        except KeyError:
            raise InvalidHandleError(
                f"Filter handle {handle} is not live (freed or never created)"
            ) from None

    def release(self, handle: int) -> None:
        """
        Free a handle and drop its filter.

        Raises:
            InvalidHandleError: If the handle is null, already freed or unknown.
        """
        self.get(handle)
        del self._filters[handle]
        logger.debug("Freed handle %d", handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._filters

    def __len__(self) -> int:
        return len(self._filters)


_table = HandleTable()


def _create(factory: Callable[[], Filter], description: str) -> int:
    try:
        bloom = factory()
    except InvalidParameterError as exc:
        logger.warning("Rejected %s: %s", description, exc)
        return NULL_HANDLE
    return _table.register(bloom)


def bloom_filter_from_fpp(p: float, n: int) -> int:
    """
    Create a Bloom filter for ``n`` items at false positive rate ``p``.

    Returns:
        A non-zero handle, or NULL_HANDLE if the parameters are invalid.
    """
    return _create(
        lambda: BloomFilter.from_fpp(p, n), f"bloom filter (p={p!r}, n={n!r})"
    )


def scalable_bloom_filter_new(p: float, n: int) -> int:
    """
    Create a scalable Bloom filter with default growth settings.

    Returns:
        A non-zero handle, or NULL_HANDLE if the parameters are invalid.
    """
    return _create(
        lambda: ScalableBloomFilter(p, n),
        f"scalable bloom filter (p={p!r}, n={n!r})",
    )


def bloom_filter_insert(handle: int, key: Key) -> bool:
    """Insert a key; return whether it was possibly present already."""
    return _table.get(handle).insert(_key_bytes(key))


def bloom_filter_contains(handle: int, key: Key) -> bool:
    """Return whether a key is possibly present."""
    return _table.get(handle).contains(_key_bytes(key))


def bloom_filter_free(handle: int) -> None:
    """Release a handle. Any later use of it raises InvalidHandleError."""
    _table.release(handle)


def live_handles() -> int:
    """Number of handles created and not yet freed."""
    return len(_table)


class FilterHandle:
    """
    Owner of a single handle with guaranteed release.

    Use as a context manager; the handle is freed on exit even when the
    block raises. close() may also be called directly and is idempotent.
    """

    def __init__(self, handle: int):
        if handle == NULL_HANDLE or handle not in _table:
            raise InvalidHandleError(f"Cannot take ownership of handle {handle}")
        self._handle: Optional[int] = handle

    @classmethod
    def from_fpp(cls, p: float, n: int) -> "FilterHandle":
        """
        Raises:
            InvalidParameterError: If the parameters are invalid.
        """
        handle = bloom_filter_from_fpp(p, n)
        if handle == NULL_HANDLE:
            raise InvalidParameterError(
                f"Invalid bloom filter parameters: p={p!r}, n={n!r}"
            )
        return cls(handle)

    @classmethod
    def scalable(cls, p: float, n: int) -> "FilterHandle":
        handle = scalable_bloom_filter_new(p, n)
        if handle == NULL_HANDLE:
            raise InvalidParameterError(
                f"Invalid scalable bloom filter parameters: p={p!r}, n={n!r}"
            )
        return cls(handle)

    @property
    def handle(self) -> int:
        if self._handle is None:
            raise InvalidHandleError("Filter handle has been released")
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    def insert(self, key: Key) -> bool:
        return bloom_filter_insert(self.handle, key)

    def contains(self, key: Key) -> bool:
        return bloom_filter_contains(self.handle, key)

    def __contains__(self, key: Key) -> bool:
        return self.contains(key)

    def close(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            bloom_filter_free(handle)

    def __enter__(self) -> "FilterHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._handle is None else f"handle={self._handle}"
        return f"{self.__class__.__name__}({state})"
