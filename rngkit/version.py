"""
Version helpers for rngkit.

Resolution order:
1) importlib.metadata (when the distribution is installed),
2) `git describe --tags --long --dirty --match "v*"` from a source checkout,
3) BASE_VERSION with a "+unknown" local tag.

Whatever the route, the result is a PEP 440 string.
"""
from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path
from typing import Optional

# Used only when neither package metadata nor a tagged checkout is available.
BASE_VERSION = "0.3.0"

_DIST_NAME = "rngkit"


@dataclass(frozen=True)
class GitInfo:
    tag: str
    distance: int
    commit: str
    dirty: bool


_DESCRIBE_RE = re.compile(
    r"^v(?P<tag>\d+\.\d+\.\d+(?:[abrc]\d+)?)-(?P<distance>\d+)-g(?P<commit>[0-9a-fA-F]+)(?P<dirty>-dirty)?$"
)


def _checkout_root(start: Path) -> Optional[Path]:
    for cur in (start, *start.parents):
        if (cur / ".git").exists():
            return cur
    return None


@lru_cache(maxsize=1)
def _describe() -> Optional[GitInfo]:
    root = _checkout_root(Path(__file__).resolve().parent)
    if root is None:
        return None
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "describe", "--tags", "--long", "--dirty", "--match", "v*"],
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.CalledProcessError):
        return None
    m = _DESCRIBE_RE.match(out)
    if not m:
        return None
    return GitInfo(
        tag=m.group("tag"),
        distance=int(m.group("distance")),
        commit=m.group("commit"),
        dirty=bool(m.group("dirty")),
    )


def pep440_from_git(info: GitInfo) -> str:
    """
    Exact clean tag -> ``1.2.3``; otherwise ``1.2.3.post{distance}+g{commit}[.dirty]``.
    """
    if info.distance == 0 and not info.dirty:
        return info.tag
    local = f"+g{info.commit}" + (".dirty" if info.dirty else "")
    return f"{info.tag}.post{info.distance}{local}"


@lru_cache(maxsize=1)
def get_version() -> str:
    try:
        return _dist_version(_DIST_NAME)
    except PackageNotFoundError:
        pass
    info = _describe()
    if info is not None:
        return pep440_from_git(info)
    return f"{BASE_VERSION}+unknown"


__version__ = get_version()
__all__ = ["__version__", "get_version", "pep440_from_git", "GitInfo", "BASE_VERSION"]
