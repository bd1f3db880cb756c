#!/usr/bin/env python3
"""
Generator throughput benchmark.

Measures how the shared buffer capacity amortises secure-source calls across
operations. For each buffer size and each operation kind the script times a
fixed number of calls and reports ops/sec, refills and bytes/sec.

Examples:
  python -m rngkit.bench.throughput --buffer-sizes 64,1k,16k --ops 100k
  python -m rngkit.bench.throughput --kinds int,string --csv out.csv
"""
from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict

from prometheus_client import CollectorRegistry

from rngkit.generator import Generator
from rngkit.metrics import Metrics

# Bytes drawn from the buffer per accepted call (rejections excluded).
_KINDS: Dict[str, tuple[int, Callable[[Generator], object]]] = {
    "bool": (4, lambda g: g.generate_boolean()),
    "int": (4, lambda g: g.generate_int(0, 999_999)),
    "long": (8, lambda g: g.generate_long(0, 10**15)),
    "double": (4, lambda g: g.generate_double()),
    "bytes32": (32, lambda g: g.generate_byte_array(32)),
    "string16": (16, lambda g: g.generate_string(16)),
}


_SUFFIXES = {"k": 1_000, "m": 1_000_000}


def _parse_num_list(s: str) -> list[int]:
    """Comma-separated integers; a trailing k or m multiplies by 1e3 or 1e6."""
    values: list[int] = []
    for token in (p.strip().lower() for p in s.split(",")):
        if not token:
            continue
        scale = _SUFFIXES.get(token[-1], 1)
        if scale != 1:
            token = token[:-1]
        values.append(int(float(token) * scale))
    return values


@dataclass
class BenchPoint:
    kind: str
    buffer_size: int
    ops: int
    seconds: float
    ops_per_sec: float
    refills: int
    mb_per_sec: float

    def to_row(self) -> list[str | int]:
        return [
            self.kind,
            self.buffer_size,
            self.ops,
            f"{self.seconds:.4f}",
            f"{self.ops_per_sec:.0f}",
            self.refills,
            f"{self.mb_per_sec:.2f}",
        ]


_HEADERS = ["kind", "buffer_B", "ops", "seconds", "ops/s", "refills", "MB/s"]


def _fmt_table(points: list[BenchPoint]) -> str:
    grid = [list(_HEADERS)] + [[str(c) for c in p.to_row()] for p in points]
    widths = [max(len(row[col]) for row in grid) for col in range(len(_HEADERS))]
    lines = ["  ".join(cell.rjust(w) for cell, w in zip(row, widths)) for row in grid]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


def bench_one(kind: str, buffer_size: int, ops: int) -> BenchPoint:
    nbytes, call = _KINDS[kind]
    gen = Generator(buffer_size, metrics=Metrics(registry=CollectorRegistry()))
    t0 = time.perf_counter()
    for _ in range(ops):
        call(gen)
    dt = time.perf_counter() - t0
    ops_per_sec = ops / dt if dt > 0 else float("inf")
    return BenchPoint(
        kind=kind,
        buffer_size=buffer_size,
        ops=ops,
        seconds=dt,
        ops_per_sec=ops_per_sec,
        refills=gen.refills,
        mb_per_sec=(nbytes * ops_per_sec) / (1024 * 1024),
    )


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Time generator operations across buffer sizes.")
    ap.add_argument("--buffer-sizes", type=str, default="64,1k,16k", help="Comma-separated sizes, k/m suffixes ok.")
    ap.add_argument("--ops", type=str, default="50k", help="Calls per (kind, buffer size) point.")
    ap.add_argument("--kinds", type=str, default=",".join(_KINDS), help=f"Subset of: {','.join(_KINDS)}")
    ap.add_argument("--csv", type=str, default="", help="Optional path to write CSV results.")
    ap.add_argument("--json", type=str, default="", help="Optional path to write JSON results.")
    args = ap.parse_args(argv)

    kinds = [k.strip() for k in args.kinds.split(",") if k.strip()]
    bad = [k for k in kinds if k not in _KINDS]
    if bad:
        print(f"unknown kinds: {', '.join(bad)}", file=sys.stderr)
        return 2
    ops = _parse_num_list(args.ops)[0]

    points: list[BenchPoint] = []
    for size in _parse_num_list(args.buffer_sizes):
        for kind in kinds:
            points.append(bench_one(kind, size, ops))

    print(_fmt_table(points))

    if args.csv:
        with open(args.csv, "w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["kind", "buffer_size", "ops", "seconds", "ops_per_sec", "refills", "mb_per_sec"])
            for p in points:
                w.writerow([p.kind, p.buffer_size, p.ops, f"{p.seconds:.6f}",
                            f"{p.ops_per_sec:.3f}", p.refills, f"{p.mb_per_sec:.6f}"])
        print(f"\nWrote CSV: {args.csv}")

    if args.json:
        with open(args.json, "w") as f:
            json.dump([asdict(p) for p in points], f, indent=2)
        print(f"Wrote JSON: {args.json}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
