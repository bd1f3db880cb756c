"""
rngkit.bench
------------

Benchmark scripts for generator throughput. Each script is runnable as a
module, e.g.:
    python -m rngkit.bench.throughput --buffer-sizes 64,1k,16k
"""

from __future__ import annotations

__all__: list[str] = []
