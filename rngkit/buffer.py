"""
rngkit.buffer
=============

`BufferCache` owns the reusable secure byte region behind a generator.

Layout invariant::

    0 <= cursor <= capacity
    [0, cursor)          consumed / stale bytes, never handed out again
    [cursor, capacity)   fresh bytes straight from the secure source

Callers reserve bytes with :meth:`BufferCache.ensure` and then take them with
:meth:`BufferCache.consume` *within the same critical section*. ``ensure``
refills the whole region in place whenever fewer than ``k`` fresh bytes
remain; a request larger than the capacity fails with `CapacityExceeded`.

The cache is not thread-safe on its own. Its owner (`rngkit.generator.Generator`)
holds one lock around every ensure/consume sequence.
"""

from __future__ import annotations

import logging
from typing import Optional

from .constants import DEFAULT_BUFFER_SIZE, WARNING_INVALID_BUFFER_SIZE
from .errors import BufferCapacityWarning, BufferStateError, CapacityExceeded, advise
from .metrics import METRICS, Metrics
from .source import SecureByteSource, default_source

logger = logging.getLogger(__name__)


def normalize_capacity(
    capacity: Optional[int], *, metrics: Optional[Metrics] = None, stacklevel: int = 1
) -> int:
    """
    Return a usable capacity. ``None`` means the default; non-positive values
    are replaced by the default with a `BufferCapacityWarning`.

    *stacklevel* picks the frame the advisory is attributed to: 1 is the
    caller of this function, 2 its caller, and so on.
    """
    if capacity is None:
        return DEFAULT_BUFFER_SIZE
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise TypeError(f"buffer capacity must be an int, got {type(capacity).__name__}")
    if capacity <= 0:
        advise(
            f"{WARNING_INVALID_BUFFER_SIZE} (requested={capacity})",
            BufferCapacityWarning,
            logger=logger,
            stacklevel=stacklevel + 2,
        )
        (metrics or METRICS).record_advisory("buffer_capacity")
        return DEFAULT_BUFFER_SIZE
    return capacity


class BufferCache:
    """
    Fixed-capacity secure byte region plus a consumption cursor.

    Args:
        capacity: Region size in bytes. ``None`` or a non-positive value means
            `DEFAULT_BUFFER_SIZE` (the latter with an advisory).
        source: Secure byte source; defaults to the process default source.
        metrics: Metrics sink; defaults to the shared `METRICS`.
        stacklevel: Frame a capacity advisory is attributed to; 1 is the code
            constructing the cache. Owners that wrap the cache pass 2.
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        *,
        source: Optional[SecureByteSource] = None,
        metrics: Optional[Metrics] = None,
        stacklevel: int = 1,
    ) -> None:
        self._metrics = metrics or METRICS
        self._capacity = normalize_capacity(
            capacity, metrics=self._metrics, stacklevel=stacklevel + 1
        )
        self._source = source if source is not None else default_source()
        self._buf = bytearray(self._capacity)
        self._cursor = self._capacity
        self._filled = False
        self._refills = 0

    # ----- Introspection -------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        """Fresh bytes left before the next refill (0 if never filled)."""
        return self._capacity - self._cursor if self._filled else 0

    @property
    def filled(self) -> bool:
        return self._filled

    @property
    def refills(self) -> int:
        return self._refills

    @property
    def source(self) -> SecureByteSource:
        return self._source

    # ----- Core operations ------------------------------------------------------

    def refill(self) -> None:
        """Overwrite the whole region with fresh secure bytes and rewind the cursor."""
        self._source.fill(memoryview(self._buf))
        self._cursor = 0
        self._filled = True
        self._refills += 1
        self._metrics.record_refill(self._capacity)
        logger.debug("refilled %d-byte buffer (refill #%d)", self._capacity, self._refills)

    def ensure(self, k: int) -> None:
        """
        Guarantee at least *k* fresh bytes are available, refilling if needed.

        Raises:
            CapacityExceeded: if *k* exceeds the region capacity.
        """
        if k <= 0:
            raise ValueError(f"byte count must be positive, got {k}")
        if k > self._capacity:
            raise CapacityExceeded(requested=k, capacity=self._capacity)
        if not self._filled or self._capacity - self._cursor < k:
            self.refill()

    def consume(self, k: int) -> bytes:
        """
        Return the next *k* fresh bytes and advance the cursor past them.

        The result is an independent copy: later refills never alter it.
        """
        if k <= 0:
            raise ValueError(f"byte count must be positive, got {k}")
        if self.remaining < k:
            raise BufferStateError(requested=k, remaining=self.remaining)
        start = self._cursor
        self._cursor = start + k
        return bytes(self._buf[start:self._cursor])

    def take(self, k: int) -> bytes:
        """`ensure` then `consume`; the caller must already hold the owner's lock."""
        self.ensure(k)
        return self.consume(k)

    def wipe(self) -> None:
        """Zero the region and mark it unfilled; the next request refills it."""
        self._buf[:] = bytes(self._capacity)
        self._cursor = self._capacity
        self._filled = False

    def __repr__(self) -> str:
        return (
            f"BufferCache(capacity={self._capacity}, cursor={self._cursor}, "
            f"filled={self._filled}, source={self._source!r})"
        )


__all__ = ["BufferCache", "normalize_capacity"]
