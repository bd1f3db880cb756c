"""
rngkit configuration.

Typed configuration for building generators outside of code:
- buffer capacity
- an optional rejection-sampling retry ceiling
- which secure byte source to use (system CSPRNG, a file, or a device)

Loaders:
- environment variables (prefix configurable, default ``RNGKIT_``)
- a JSON or YAML file (YAML via PyYAML)

The buffer capacity is deliberately *not* rejected here: a non-positive value
is normalised to the default by the buffer itself, with an advisory.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .constants import DEFAULT_BUFFER_SIZE

SOURCE_KINDS = ("system", "file", "device")


@dataclass
class GeneratorConfig:
    """
    buffer_size:    bytes in the shared secure buffer (largest single request)
    max_rejections: ceiling on rejected draws per bounded sample (None: no ceiling)
    source:         "system" | "file" | "device"
    source_path:    path for file/device sources
    """

    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_rejections: Optional[int] = None
    source: str = "system"
    source_path: Optional[str] = None

    def validate(self) -> None:
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ValueError("buffer_size must be an integer")
        if self.max_rejections is not None and self.max_rejections <= 0:
            raise ValueError("max_rejections must be > 0 when set")
        if self.source not in SOURCE_KINDS:
            raise ValueError(f"source must be one of {SOURCE_KINDS}, got {self.source!r}")
        if self.source in ("file", "device") and not self.source_path:
            raise ValueError(f"source_path is required for source={self.source!r}")

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "RNGKIT_") -> "GeneratorConfig":
        """
        Build a config from environment variables; unset or empty ones keep their default.

          - RNGKIT_BUFFER_SIZE=4096
          - RNGKIT_MAX_REJECTIONS=64
          - RNGKIT_SOURCE=device
          - RNGKIT_SOURCE_PATH=/dev/hwrng
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None or raw == "":
                return default
            try:
                return cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = GeneratorConfig(
            buffer_size=_get("BUFFER_SIZE", int, DEFAULT_BUFFER_SIZE),
            max_rejections=_get("MAX_REJECTIONS", int, None),
            source=_get("SOURCE", str, "system"),
            source_path=_get("SOURCE_PATH", str, None),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "GeneratorConfig":
        """
        Load configuration from a JSON or YAML file. Example (YAML):

            buffer_size: 4096
            max_rejections: 64
            source: device
            source_path: /dev/hwrng
        """
        text = _read_text(path)
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")
        unknown = set(data) - {"buffer_size", "max_rejections", "source", "source_path"}
        if unknown:
            raise ValueError(f"unknown config keys in {path!r}: {sorted(unknown)}")

        cfg = GeneratorConfig(
            buffer_size=data.get("buffer_size", DEFAULT_BUFFER_SIZE),
            max_rejections=data.get("max_rejections"),
            source=data.get("source", "system"),
            source_path=data.get("source_path"),
        )
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    import yaml

    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


DEFAULT: GeneratorConfig = GeneratorConfig()


__all__ = [
    "GeneratorConfig",
    "SOURCE_KINDS",
    "DEFAULT",
]
