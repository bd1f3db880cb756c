"""
rngkit: unbiased values from a secure byte stream.

A `Generator` draws booleans, bounded integers, fractions, byte arrays and
strings from a cryptographically secure byte source without favouring any
output value:

- integers use rejection sampling instead of a biased modulo,
- secure bytes are fetched in buffer-sized batches and never handed out twice,
- one lock per generator makes a shared instance safe across threads.

Only light, stable exports are surfaced here.
"""

from __future__ import annotations

from .charset import Charset
from .config import GeneratorConfig
from .errors import (
    BufferCapacityWarning,
    CapacityExceeded,
    DeterminableOutput,
    EntropyExhausted,
    EntropySkewWarning,
    InvalidAlphabet,
    InvalidLength,
    InvalidRange,
    RNGError,
    RNGWarning,
    SourceNotAvailable,
)
from .generator import Generator
from .version import __version__

__all__ = [
    "__version__",
    "Generator",
    "GeneratorConfig",
    "Charset",
    "RNGError",
    "InvalidRange",
    "DeterminableOutput",
    "InvalidAlphabet",
    "InvalidLength",
    "CapacityExceeded",
    "EntropyExhausted",
    "SourceNotAvailable",
    "RNGWarning",
    "EntropySkewWarning",
    "BufferCapacityWarning",
]
