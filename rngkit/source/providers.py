"""
rngkit.source.providers
=======================

Concrete implementations of the `SecureByteSource` protocol defined in
`rngkit.source`.

Available sources
-----------------
- SystemSource : The operating system CSPRNG (``os.urandom``).
- FileSource   : Read bytes from a file-like source (e.g. a device node or FIFO).
- DeviceSource : Thin wrapper around FileSource with device-centric defaults.

All implementations fill the caller's buffer in place:

    def fill(self, buffer: bytearray | memoryview) -> None

Trust
-----
- FileSource trusts whatever the path yields. Point it only at a vetted
  entropy device; a regular file is useful for tests and replay, not secrecy.
"""

from __future__ import annotations

import io
import logging
import os
import threading
from typing import Optional

from ..constants import FILE_IO_CHUNK_SIZE
from ..errors import SourceNotAvailable
from . import Writable

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------#
# Utilities
# -----------------------------------------------------------------------------#


def _readinto_exact(f: io.BufferedReader, view: memoryview, *, path: str) -> None:
    """
    Fill *view* completely from *f*, raising SourceNotAvailable on EOF.
    """
    done = 0
    total = len(view)
    while done < total:
        n = f.readinto(view[done:])
        if not n:
            raise SourceNotAvailable(f"unexpected EOF on {path}: needed {total - done} more bytes")
        done += n


# -----------------------------------------------------------------------------#
# System provider
# -----------------------------------------------------------------------------#


class SystemSource:
    """
    The operating system CSPRNG. Stateless, so concurrent fills are safe.
    """

    def fill(self, buffer: Writable) -> None:
        n = len(buffer)
        if n == 0:
            return
        buffer[:] = os.urandom(n)

    def __repr__(self) -> str:
        return "SystemSource()"


# -----------------------------------------------------------------------------#
# File-backed provider
# -----------------------------------------------------------------------------#


class FileSource:
    """
    Secure bytes read from a path, typically a device node or a replay file.

    Args:
        path: Where to read from.
        reopen_each_call: True (default) opens the path afresh for every `fill`,
            so each fill starts at offset 0. False keeps one handle open and
            reads onward from it under a lock.
        block_size: Buffering size for the underlying reader.
    """

    def __init__(
        self, path: Optional[str], *, reopen_each_call: bool = True, block_size: int = FILE_IO_CHUNK_SIZE
    ):
        if not path or not isinstance(path, str):
            raise ValueError("path must be a non-empty string")
        if block_size <= 0:
            raise ValueError("block_size must be positive")
        self._path = path
        self._reopen = reopen_each_call
        self._block = block_size
        self._lock = threading.Lock()
        self._fh: Optional[io.BufferedReader] = None  # kept only if reopen_each_call=False

    @property
    def path(self) -> str:
        return self._path

    def _open(self) -> io.BufferedReader:
        try:
            return open(self._path, "rb", buffering=self._block)  # type: ignore[return-value]
        except OSError as e:
            raise SourceNotAvailable(f"cannot open {self._path}: {e}") from e

    def fill(self, buffer: Writable) -> None:
        view = memoryview(buffer).cast("B")
        if len(view) == 0:
            return
        if self._reopen:
            with self._open() as fh:
                _readinto_exact(fh, view, path=self._path)
            return
        # Shared-handle path
        with self._lock:
            if self._fh is None:
                self._fh = self._open()
            try:
                _readinto_exact(self._fh, view, path=self._path)
            except Exception:
                # drop the handle so the next call can recover
                try:
                    self._fh.close()
                finally:
                    self._fh = None
                logger.debug("dropped shared handle for %s after failed read", self._path)
                raise

    def close(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path!r})"


# -----------------------------------------------------------------------------#
# Device provider (thin wrapper)
# -----------------------------------------------------------------------------#


class DeviceSource(FileSource):
    """
    Device-centric provider. Keeps one handle open across calls and reads in
    smaller blocks, which suits character devices such as ``/dev/hwrng``.

    NOTE: This class does *not* set O_NONBLOCK. Devices that can stall will
    block the calling generator (and every thread waiting on it).
    """

    def __init__(
        self,
        device_path: Optional[str],
        *,
        reopen_each_call: bool = False,
        block_size: int = 1 << 12,
    ):
        super().__init__(device_path, reopen_each_call=reopen_each_call, block_size=block_size)


__all__ = [
    "SystemSource",
    "FileSource",
    "DeviceSource",
]
