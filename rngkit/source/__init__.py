"""
rngkit.source
=============

The secure byte source seam. Everything in rngkit consumes randomness through
one capability:

    def fill(self, buffer: bytearray | memoryview) -> None

which overwrites every byte of *buffer* in place with independently uniform
secure bytes. rngkit never generates entropy itself; it only shapes what a
source hands it.

A tiny process-wide registry lets applications swap the default source
(e.g. a hardware RNG device) without threading it through every call:

    from rngkit.source import register_source, use_source
    from rngkit.source.providers import DeviceSource

    register_source("hwrng", DeviceSource("/dev/hwrng"))
    use_source("hwrng")

Generators created afterwards without an explicit ``source=`` pick it up.
Sources must be safe for concurrent ``fill`` calls: one instance is shared by
every generator in the process.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol, Union

from ..errors import SourceNotAvailable

Writable = Union[bytearray, memoryview]


class SecureByteSource(Protocol):
    """Minimal secure byte source protocol."""

    def fill(self, buffer: Writable) -> None:  # pragma: no cover - protocol
        """Overwrite all of *buffer* with secure random bytes, or raise."""
        ...


# --- Registry --------------------------------------------------------------------

_lock = threading.Lock()
_registry: Dict[str, SecureByteSource] = {}
_current_name: Optional[str] = None


def register_source(name: str, source: SecureByteSource) -> None:
    """
    Register a source instance under a name.

    Re-registering the same name replaces the previous instance.
    """
    if not name or not isinstance(name, str):
        raise ValueError("source name must be a non-empty string")
    if not callable(getattr(source, "fill", None)):
        raise TypeError(f"{type(source).__name__} does not implement fill(buffer)")
    with _lock:
        _registry[name] = source


def use_source(name: Optional[str]) -> None:
    """Select the process default source by name. Pass None to restore the system source."""
    global _current_name
    with _lock:
        if name is not None and name not in _registry:
            raise KeyError(f"secure byte source '{name}' is not registered")
        _current_name = name


def current_source() -> Optional[SecureByteSource]:
    """Return the explicitly selected source, or None if unset."""
    with _lock:
        if _current_name is None:
            return None
        return _registry.get(_current_name)


def system_source() -> SecureByteSource:
    """Return the shared operating-system source registered as ``"system"``."""
    with _lock:
        system = _registry.get("system")
    if system is None:
        raise SourceNotAvailable("no secure byte source registered")
    return system


def default_source() -> SecureByteSource:
    """Return the selected source, falling back to the shared system source."""
    src = current_source()
    if src is not None:
        return src
    return system_source()


def source_from_config(cfg) -> SecureByteSource:
    """
    Build the source named by a `GeneratorConfig`.

    ``system`` is always the OS CSPRNG, whatever `use_source` selected. A
    ``file`` source keeps one handle and reads onward, so a regular file is
    consumed once and raises `SourceNotAvailable` at EOF rather than replaying
    its leading bytes on every refill.
    """
    from .providers import DeviceSource, FileSource

    kind = cfg.source
    if kind == "system":
        return system_source()
    if kind == "file":
        return FileSource(cfg.source_path, reopen_each_call=False)
    if kind == "device":
        return DeviceSource(cfg.source_path)
    raise ValueError(f"unknown source kind: {kind!r}")


def _register_system() -> None:
    from .providers import SystemSource

    register_source("system", SystemSource())


_register_system()


__all__ = [
    "SecureByteSource",
    "Writable",
    "register_source",
    "use_source",
    "current_source",
    "default_source",
    "system_source",
    "source_from_config",
]
