"""
Prometheus metrics for rngkit generators.

This module defines counters for the generation pipeline:
  • draws_total       : completed generation operations per kind
  • rejections_total  : raw draws discarded by rejection sampling, per width
  • refills_total     : times a buffer was refilled from its secure source
  • bytes_drawn_total : secure bytes requested from sources by refills
  • advisories_total  : non-fatal advisories emitted, per kind

Design notes
------------
- Label cardinality is intentionally low: `kind` and `width` come from small,
  fixed vocabularies. Unknown values collapse to "other".
- Counters are process-wide by default. Tests and embedders that need
  isolation construct their own `Metrics` with a private registry.

Usage
-----
    from rngkit.metrics import METRICS

    METRICS.record_draw("int32")
    METRICS.record_rejection(32)
    METRICS.record_refill(1024)
"""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter


# --------- Vocabularies (kept small for bounded cardinality) ---------

_DRAW_KINDS = (
    "bool",
    "int32",
    "int64",
    "float",
    "double",
    "bytes",
    "string",
)

_ADVISORY_KINDS = (
    "entropy_skew",
    "buffer_capacity",
)

_WIDTHS = ("32", "64")


class Metrics:
    """
    Container for all rngkit Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem (inserted between namespace and name).
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "rngkit",
        subsystem: str = "generator",
        registry=REGISTRY,
    ) -> None:
        self.registry = registry
        self.draws_total = Counter(
            "draws_total",
            "Number of completed generation operations, labeled by kind.",
            labelnames=("kind",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.rejections_total = Counter(
            "rejections_total",
            "Raw draws discarded by rejection sampling, labeled by integer width.",
            labelnames=("width",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.refills_total = Counter(
            "refills_total",
            "Number of times a generator buffer was refilled from its source.",
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.bytes_drawn_total = Counter(
            "bytes_drawn_total",
            "Secure bytes requested from sources by buffer refills.",
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.advisories_total = Counter(
            "advisories_total",
            "Non-fatal advisories emitted, labeled by kind.",
            labelnames=("kind",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_draw(self, kind: str) -> None:
        if kind not in _DRAW_KINDS:
            kind = "other"
        self.draws_total.labels(kind=kind).inc()

    def record_rejection(self, width: int) -> None:
        label = str(width)
        if label not in _WIDTHS:
            label = "other"
        self.rejections_total.labels(width=label).inc()

    def record_refill(self, nbytes: int) -> None:
        self.refills_total.inc()
        self.bytes_drawn_total.inc(nbytes)

    def record_advisory(self, kind: str) -> None:
        if kind not in _ADVISORY_KINDS:
            kind = "other"
        self.advisories_total.labels(kind=kind).inc()


# Singleton used by generators that are not handed their own instance
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
]
