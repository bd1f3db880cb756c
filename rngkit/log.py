"""
rngkit.log: logging setup for command-line use
===============================================

Library modules only call ``logging.getLogger(__name__)``; nothing is
configured on import. Applications (and the ``rngkit`` CLI) call
:func:`setup_logging` once to attach a stderr handler, either plain text or
newline-delimited JSON.

Environment variables
---------------------
RNGKIT_LOG_LEVEL  : DEBUG|INFO|WARNING|ERROR (default: WARNING)
RNGKIT_LOG_FORMAT : plain|json (default: plain)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = ["setup_logging", "JsonFormatter"]

_PLAIN_FMT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_HANDLER_TAG = "_rngkit_handler"


def _default_record_keys() -> set:
    dummy = logging.LogRecord(
        name="x", level=logging.INFO, pathname=__file__, lineno=1, msg="m", args=(), exc_info=None
    )
    keys = set(dummy.__dict__.keys())
    keys.update({"message", "asctime"})
    return keys


_DEFAULT_KEYS = _default_record_keys()


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record; ``extra={...}`` fields are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k not in _DEFAULT_KEYS and not k.startswith("_"):
                payload[k] = v
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``rngkit`` logger. Idempotent: handlers installed by an
    earlier call are replaced, foreign handlers are left alone.
    """
    level = (level or os.getenv("RNGKIT_LOG_LEVEL") or "WARNING").upper()
    fmt = (fmt or os.getenv("RNGKIT_LOG_FORMAT") or "plain").lower()
    if fmt not in ("plain", "json"):
        raise ValueError(f"log format must be 'plain' or 'json', got {fmt!r}")

    root = logging.getLogger("rngkit")
    root.setLevel(level)
    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG, False):
            root.removeHandler(h)
            h.close()

    formatter: logging.Formatter = JsonFormatter() if fmt == "json" else logging.Formatter(_PLAIN_FMT)
    handlers: list = [logging.StreamHandler(sys.stderr)]
    if file:
        handlers.append(logging.FileHandler(file, encoding="utf-8"))
    for h in handlers:
        h.setFormatter(formatter)
        setattr(h, _HANDLER_TAG, True)
        root.addHandler(h)
    return root
