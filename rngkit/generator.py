"""
rngkit.generator
================

`Generator` is the public facade: one instance owns one secure buffer and one
lock, and every operation runs entirely inside that lock. Concurrent callers
sharing an instance therefore serialise; independent instances never contend.

    from rngkit import Generator

    with Generator() as rng:
        rng.generate_boolean()
        rng.generate_int(1, 6)          # inclusive range, like a die
        rng.generate_long(10**12)       # [0, 10**12]
        rng.generate_double()           # [0, 1)
        rng.generate_byte_array(32)
        rng.generate_string(20)
        rng.generate_string(8, "0123456789abcdef")

Integer bounds follow ``range()``-style arity: no argument draws the whole
unsigned domain, one argument is the maximum, two are ``(minimum, maximum)``.

Negative bounds
---------------
Callers may pass negative bounds. They are folded by `fold_signed`: each bound
is replaced by its magnitude and the pair is swapped if that leaves it
inverted. ``generate_int(-10, 5)`` therefore draws from ``[5, 10]``, not from
the literal signed interval. Non-negative pairs are passed through untouched,
so ``generate_int(9999, 999)`` still raises `InvalidRange`.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Tuple, overload

from .buffer import BufferCache
from .charset import DEFAULT as DEFAULT_CHARSET
from .charset import CharacterSet, Charset
from .constants import WIDTH_32, WIDTH_64
from .errors import InvalidLength
from .metrics import METRICS, Metrics
from .sampler import UnbiasedSampler
from .source import SecureByteSource, source_from_config

logger = logging.getLogger(__name__)


def fold_signed(minimum: int, maximum: int) -> Tuple[int, int]:
    """
    Map a possibly-signed pair onto unsigned bounds.

    If either bound is negative, both are replaced by their absolute values and
    swapped when the result has ``minimum > maximum``.
    """
    if minimum >= 0 and maximum >= 0:
        return minimum, maximum
    lo, hi = abs(minimum), abs(maximum)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


def fold_length(length: int) -> int:
    """Signed lengths fold to their magnitude; zero is a determinable request."""
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError(f"length must be an int, got {type(length).__name__}")
    n = abs(length)
    if n == 0:
        raise InvalidLength(length=length)
    return n


class Generator:
    """
    Secure pseudorandom value generator.

    Args:
        buffer_size: Capacity of the shared buffer, i.e. the most bytes a single
            operation may draw. ``None`` means 1024; zero or negative values
            also fall back to 1024 with a `BufferCapacityWarning`.
        source: Secure byte source. Defaults to the process default source.
        max_rejections: Optional ceiling for rejection sampling retries.
        metrics: Metrics sink; defaults to the shared `METRICS`.
    """

    def __init__(
        self,
        buffer_size: Optional[int] = None,
        *,
        source: Optional[SecureByteSource] = None,
        max_rejections: Optional[int] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._metrics = metrics or METRICS
        self._lock = threading.Lock()
        self._buffer = BufferCache(
            buffer_size, source=source, metrics=self._metrics, stacklevel=2
        )
        self._sampler = UnbiasedSampler(
            self._buffer, max_rejections=max_rejections, metrics=self._metrics
        )
        logger.debug("generator ready: %r", self._buffer)

    @classmethod
    def from_config(cls, cfg, *, metrics: Optional[Metrics] = None) -> "Generator":
        """Build a generator from a validated `rngkit.config.GeneratorConfig`."""
        cfg.validate()
        return cls(
            cfg.buffer_size,
            source=source_from_config(cfg),
            max_rejections=cfg.max_rejections,
            metrics=metrics,
        )

    # ----- Introspection -------------------------------------------------------

    @property
    def buffer_size(self) -> int:
        return self._buffer.capacity

    @property
    def bytes_remaining(self) -> int:
        with self._lock:
            return self._buffer.remaining

    @property
    def refills(self) -> int:
        with self._lock:
            return self._buffer.refills

    # ----- Booleans / fractions -------------------------------------------------

    def generate_boolean(self) -> bool:
        with self._lock:
            value = self._sampler.boolean()
        self._metrics.record_draw("bool")
        return value

    def generate_float(self) -> float:
        """Single-precision value in ``[0, 1)``."""
        with self._lock:
            value = self._sampler.fraction32()
        self._metrics.record_draw("float")
        return value

    def generate_double(self) -> float:
        """Double-precision value in ``[0, 1)``."""
        with self._lock:
            value = self._sampler.fraction64()
        self._metrics.record_draw("double")
        return value

    # ----- Integers -------------------------------------------------------------

    @overload
    def generate_int(self) -> int: ...
    @overload
    def generate_int(self, maximum: int) -> int: ...
    @overload
    def generate_int(self, minimum: int, maximum: int) -> int: ...

    def generate_int(self, *bounds: int) -> int:
        """Integer from the unsigned 32-bit domain; see the module docstring for arity."""
        value = self._integer(WIDTH_32, bounds, "generate_int")
        self._metrics.record_draw("int32")
        return value

    @overload
    def generate_long(self) -> int: ...
    @overload
    def generate_long(self, maximum: int) -> int: ...
    @overload
    def generate_long(self, minimum: int, maximum: int) -> int: ...

    def generate_long(self, *bounds: int) -> int:
        """Integer from the unsigned 64-bit domain; see the module docstring for arity."""
        value = self._integer(WIDTH_64, bounds, "generate_long")
        self._metrics.record_draw("int64")
        return value

    def _integer(self, width: int, bounds: Tuple[int, ...], name: str) -> int:
        if len(bounds) > 2:
            raise TypeError(f"{name}() takes at most 2 bounds ({len(bounds)} given)")
        for b in bounds:
            if isinstance(b, bool) or not isinstance(b, int):
                raise TypeError(f"{name}() bounds must be int, got {type(b).__name__}")
        if not bounds:
            with self._lock:
                return self._sampler.uniform(width)
        if len(bounds) == 1:
            minimum, maximum = fold_signed(0, bounds[0])
        else:
            minimum, maximum = fold_signed(bounds[0], bounds[1])
        with self._lock:
            return self._sampler.bounded(minimum, maximum, width)

    # ----- Bytes / strings ------------------------------------------------------

    def generate_byte_array(self, length: int) -> bytes:
        """Exactly ``abs(length)`` fresh secure bytes."""
        n = fold_length(length)
        with self._lock:
            value = self._buffer.take(n)
        self._metrics.record_draw("bytes")
        return value

    def generate_string(
        self,
        length: int,
        charset: CharacterSet = DEFAULT_CHARSET.symbols,
        remove_duplicates: bool = True,
    ) -> str:
        """
        A string of ``abs(length)`` symbols drawn from *charset*.

        WARNING: if 256 is not a multiple of the alphabet size (after optional
        de-duplication) the output is slightly skewed; an `EntropySkewWarning`
        is emitted but generation proceeds.
        """
        n = fold_length(length)
        alphabet = charset if isinstance(charset, Charset) else Charset.build(
            charset, remove_duplicates=remove_duplicates
        )
        alphabet.advise(self._metrics)
        with self._lock:
            raw = self._buffer.take(n)
        self._metrics.record_draw("string")
        return alphabet.assemble(raw)

    # ----- Lifecycle ------------------------------------------------------------

    def close(self) -> None:
        """Wipe the buffer. The generator stays usable and refills on next use."""
        with self._lock:
            self._buffer.wipe()

    def __enter__(self) -> "Generator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Generator(buffer_size={self._buffer.capacity}, source={self._buffer.source!r})"


__all__ = ["Generator", "fold_signed", "fold_length"]
