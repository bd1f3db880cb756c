"""
rngkit constants.

This module centralizes:
- Buffer sizing defaults for the shared secure byte region
- Integer widths understood by the sampler
- The default string alphabet
- User-facing error and advisory messages

Code that needs stable compile-time defaults can import from here; runtime
knobs live in `rngkit.config.GeneratorConfig`.
"""

from __future__ import annotations

# -----------------------------
# Buffer sizing
# -----------------------------
# Capacity of the per-generator secure buffer (bytes). A single operation can
# never draw more than this many bytes.
DEFAULT_BUFFER_SIZE: int = 1024

# Chunk size used by file/device sources; keep power-of-two for efficiency.
FILE_IO_CHUNK_SIZE: int = 64 * 1024     # 64 KiB

# -----------------------------
# Integer widths (bits)
# -----------------------------
WIDTH_32: int = 32
WIDTH_64: int = 64
SUPPORTED_WIDTHS: tuple[int, ...] = (WIDTH_32, WIDTH_64)

UINT32_MAX: int = (1 << WIDTH_32) - 1
UINT64_MAX: int = (1 << WIDTH_64) - 1

# Number of distinct values a single raw byte can take; string symbols are
# selected with one byte each.
BYTE_SPAN: int = 256

# -----------------------------
# Strings
# -----------------------------
DEFAULT_CHARSET: str = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890-_"

# -----------------------------
# Messages
# -----------------------------
ERROR_BYTES_EXCEEDS_BUFFER: str = (
    "Number of bytes required exceeds the size of the shared buffer. "
    "Re-initialise the generator with a larger buffer size."
)
ERROR_MINIMUM_EXCEEDS_MAXIMUM: str = "Minimum cannot exceed maximum"
ERROR_DETERMINABLE_OUTPUT: str = "Only one output is possible - output is determinable from inputs"

WARNING_INVALID_BUFFER_SIZE: str = (
    f"Invalid buffer size requested. Initialising generator with {DEFAULT_BUFFER_SIZE}-byte buffer."
)
WARNING_ENTROPY_COMPROMISED: str = (
    "The number of valid characters supplied cannot be evenly divided by 256. "
    "The entropy of the output is compromised."
)

__all__ = [
    # Buffers
    "DEFAULT_BUFFER_SIZE",
    "FILE_IO_CHUNK_SIZE",
    # Widths
    "WIDTH_32",
    "WIDTH_64",
    "SUPPORTED_WIDTHS",
    "UINT32_MAX",
    "UINT64_MAX",
    "BYTE_SPAN",
    # Strings
    "DEFAULT_CHARSET",
    # Messages
    "ERROR_BYTES_EXCEEDS_BUFFER",
    "ERROR_MINIMUM_EXCEEDS_MAXIMUM",
    "ERROR_DETERMINABLE_OUTPUT",
    "WARNING_INVALID_BUFFER_SIZE",
    "WARNING_ENTROPY_COMPROMISED",
]
