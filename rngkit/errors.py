"""
rngkit errors and advisories.

This module defines a small, typed hierarchy of exceptions raised by the
generator (buffer → sampler → charset). Callers can catch the base `RNGError`
to handle every failure, or catch the concrete subclasses for more granular
control. Each concrete error also derives from the closest builtin
(`ValueError` for bad inputs, `RuntimeError` for runtime failures) so generic
handlers keep working.

Every error is raised synchronously, before any secure byte is consumed.

Advisories (entropy skew, capacity normalisation) are *not* errors: they are
emitted on the `warnings` channel using the `RNGWarning` categories below and
mirrored to the `rngkit` logger. They never interrupt control flow unless the
caller turns them into errors with a warnings filter.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Type

from .constants import (
    ERROR_BYTES_EXCEEDS_BUFFER,
    ERROR_DETERMINABLE_OUTPUT,
    ERROR_MINIMUM_EXCEEDS_MAXIMUM,
)


class RNGError(Exception):
    """Base class for all rngkit errors."""

    def __post_init__(self) -> None:
        # dataclass subclasses do not call Exception.__init__; keep args populated
        Exception.__init__(self, str(self))


@dataclass(eq=False)
class InvalidRange(RNGError, ValueError):
    """
    Raised when a bounded request has ``minimum > maximum`` or a bound lies
    outside the unsigned domain of the requested width.

    Attributes:
        minimum: The (already folded) lower bound.
        maximum: The (already folded) upper bound.
        reason: Human-readable explanation.
    """
    minimum: int
    maximum: int
    reason: str = ERROR_MINIMUM_EXCEEDS_MAXIMUM

    def __str__(self) -> str:
        return f"{self.reason} (minimum={self.minimum}, maximum={self.maximum})"


@dataclass(eq=False)
class DeterminableOutput(RNGError, ValueError):
    """
    Raised when the result of a request would carry no entropy: a single-valued
    range, a zero-length output, or an alphabet with one distinct symbol.
    """
    reason: str = ERROR_DETERMINABLE_OUTPUT

    def __str__(self) -> str:
        return self.reason


@dataclass(eq=False)
class InvalidAlphabet(DeterminableOutput):
    """
    Raised when a charset cannot produce unpredictable output.

    Attributes:
        distinct: Number of distinct symbols found in the supplied alphabet.
    """
    distinct: int = 0

    def __str__(self) -> str:
        return f"{self.reason} (distinct symbols: {self.distinct})"


@dataclass(eq=False)
class InvalidLength(DeterminableOutput):
    """Raised when a byte array or string of length zero is requested."""
    length: int = 0

    def __str__(self) -> str:
        return f"{self.reason} (length={self.length})"


@dataclass(eq=False)
class CapacityExceeded(RNGError, ValueError):
    """
    Raised when a single operation needs more bytes than the buffer holds.
    This is a configuration problem: re-create the generator with a larger
    buffer. It is never retried.
    """
    requested: int
    capacity: int

    def __str__(self) -> str:
        return f"{ERROR_BYTES_EXCEEDS_BUFFER} (requested={self.requested}, capacity={self.capacity})"


@dataclass(eq=False)
class EntropyExhausted(RNGError, RuntimeError):
    """
    Raised when rejection sampling exceeds the configured retry ceiling.
    With a healthy secure source this does not happen in practice.
    """
    attempts: int
    width: Optional[int] = None

    def __str__(self) -> str:
        return f"rejection sampling gave up after {self.attempts} draws (width={self.width})"


@dataclass(eq=False)
class SourceNotAvailable(RNGError, RuntimeError):
    """Raised when a secure byte source cannot deliver the requested bytes."""
    reason: str = "secure byte source unavailable"

    def __str__(self) -> str:
        return self.reason


@dataclass(eq=False)
class BufferStateError(RNGError, RuntimeError):
    """Raised when bytes are consumed without a matching `ensure` call."""
    requested: int
    remaining: int

    def __str__(self) -> str:
        return (
            f"consume({self.requested}) with only {self.remaining} fresh bytes; "
            "call ensure() first"
        )


# -----------------------------
# Advisory channel
# -----------------------------


class RNGWarning(UserWarning):
    """Base category for non-fatal rngkit advisories."""


class EntropySkewWarning(RNGWarning):
    """The alphabet size does not evenly divide 256; output is slightly skewed."""


class BufferCapacityWarning(RNGWarning):
    """A non-positive buffer capacity was replaced by the default."""


def advise(
    message: str,
    category: Type[RNGWarning],
    *,
    logger: Optional[logging.Logger] = None,
    stacklevel: int = 3,
) -> None:
    """Emit an advisory on the warnings channel and mirror it to *logger*."""
    (logger or logging.getLogger("rngkit")).warning("%s: %s", category.__name__, message)
    warnings.warn(message, category, stacklevel=stacklevel)


__all__ = [
    "RNGError",
    "InvalidRange",
    "DeterminableOutput",
    "InvalidAlphabet",
    "InvalidLength",
    "CapacityExceeded",
    "EntropyExhausted",
    "SourceNotAvailable",
    "BufferStateError",
    "RNGWarning",
    "EntropySkewWarning",
    "BufferCapacityWarning",
    "advise",
]
