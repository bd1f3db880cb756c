"""
rngkit.sampler
==============

Unbiased integer, boolean and fraction derivation on top of a `BufferCache`.

Rejection sampling
------------------
Reducing a raw ``width``-bit value ``r`` with ``r % size`` favours small
results whenever ``size`` does not divide ``2**width``. `UnbiasedSampler.bounded`
removes that bias by only accepting draws below the largest multiple of
``size`` that fits in the raw domain:

    span  = 2**width
    size  = maximum - minimum + 1
    limit = span - (span % size)
    accept r  iff  r < limit        ->  minimum + r % size

Every accepted ``r`` maps onto each of the ``size`` results exactly
``limit // size`` times. A draw is rejected with probability
``(span % size) / span < 1/2``, so the expected number of draws is below two.

Python integers do not overflow, so ``size`` may equal ``span`` (the full
domain), in which case nothing is ever rejected.

The sampler only reasons about unsigned ranges. Signed convenience handling
lives in `rngkit.generator.fold_signed`.
"""

from __future__ import annotations

import logging
import struct
from typing import Optional

from .buffer import BufferCache
from .constants import SUPPORTED_WIDTHS, WIDTH_32
from .errors import DeterminableOutput, EntropyExhausted, InvalidRange
from .metrics import METRICS, Metrics

logger = logging.getLogger(__name__)

# 2**32 as a float: fraction64 divides a 32-bit draw by this.
_FRACTION_DIVISOR = float(1 << WIDTH_32)
# Largest IEEE-754 binary32 value strictly below 1.0.
_FLOAT32_BELOW_ONE = 1.0 - 2.0 ** -24

_F32 = struct.Struct("<f")


def _check_width(width: int) -> None:
    if width not in SUPPORTED_WIDTHS:
        raise ValueError(f"unsupported integer width {width}; expected one of {SUPPORTED_WIDTHS}")


def check_range(minimum: int, maximum: int, width: int) -> None:
    """
    Validate an unsigned ``[minimum, maximum]`` request for *width* bits.

    Raises:
        InvalidRange: a bound lies outside ``[0, 2**width - 1]`` or ``minimum > maximum``.
        DeterminableOutput: ``minimum == maximum``.
    """
    _check_width(width)
    top = (1 << width) - 1
    for bound in (minimum, maximum):
        if not 0 <= bound <= top:
            raise InvalidRange(
                minimum=minimum,
                maximum=maximum,
                reason=f"Bound {bound} is outside the unsigned {width}-bit domain [0, {top}]",
            )
    if minimum > maximum:
        raise InvalidRange(minimum=minimum, maximum=maximum)
    if minimum == maximum:
        raise DeterminableOutput()


def to_float32(value: float) -> float:
    """Round *value* to the nearest IEEE-754 binary32 and return it as a Python float."""
    return _F32.unpack(_F32.pack(value))[0]


class UnbiasedSampler:
    """
    Draws integers, booleans and fractions from a `BufferCache`.

    Args:
        buffer: The byte region to draw from. The caller serialises access.
        max_rejections: Optional ceiling on consecutive rejected draws in
            `bounded`; exceeding it raises `EntropyExhausted`. ``None`` means
            no ceiling.
        metrics: Metrics sink; defaults to the shared `METRICS`.
    """

    def __init__(
        self,
        buffer: BufferCache,
        *,
        max_rejections: Optional[int] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        if max_rejections is not None and max_rejections <= 0:
            raise ValueError("max_rejections must be positive or None")
        self._buffer = buffer
        self._max_rejections = max_rejections
        self._metrics = metrics or METRICS

    @property
    def max_rejections(self) -> Optional[int]:
        return self._max_rejections

    def uniform(self, width: int = WIDTH_32) -> int:
        """Return a uniform unsigned integer in ``[0, 2**width - 1]``."""
        _check_width(width)
        raw = self._buffer.take(width // 8)
        return int.from_bytes(raw, "little")

    def bounded(self, minimum: int, maximum: int, width: int = WIDTH_32) -> int:
        """
        Return an integer uniformly distributed over ``[minimum, maximum]``
        (both inclusive), using rejection sampling.
        """
        check_range(minimum, maximum, width)
        span = 1 << width
        size = maximum - minimum + 1
        limit = span - (span % size)

        rejected = 0
        while True:
            r = self.uniform(width)
            if r < limit:
                return minimum + r % size
            rejected += 1
            self._metrics.record_rejection(width)
            if self._max_rejections is not None and rejected >= self._max_rejections:
                logger.error(
                    "rejection ceiling hit: %d draws over [%d, %d] (width=%d)",
                    rejected, minimum, maximum, width,
                )
                raise EntropyExhausted(attempts=rejected, width=width)

    def below(self, maximum: int, width: int = WIDTH_32) -> int:
        """Shorthand for ``bounded(0, maximum, width)``."""
        return self.bounded(0, maximum, width)

    def boolean(self) -> bool:
        """True when the low bit of a fresh 32-bit draw is zero."""
        return self.uniform(WIDTH_32) % 2 == 0

    def fraction64(self) -> float:
        """A double in ``[0, 1)`` with 32 bits of resolution."""
        return self.uniform(WIDTH_32) / _FRACTION_DIVISOR

    def fraction32(self) -> float:
        """
        `fraction64` narrowed to single precision. Values that would round up
        to 1.0 are clamped to the largest single below 1.0.
        """
        value = to_float32(self.fraction64())
        if value >= 1.0:
            return _FLOAT32_BELOW_ONE
        return value


__all__ = ["UnbiasedSampler", "check_range", "to_float32"]
