"""
Prometheus metrics for the DC adjuster.

Exported metrics
----------------
``pwl_entities_adjusted_total``       counter   — entities changed, by path (import/bulk)
``pwl_fields_adjusted_total``         counter   — individual field updates, by kind (text/numeric/embedded)
``pwl_batch_runs_total``              counter   — bulk runs by outcome
``pwl_batch_items_total``             counter   — bulk worklist items by outcome (ok/failed)
``pwl_adjustment_latency_seconds``    histogram — latency per named component (seconds)
"""
from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

#: Number of entities whose fields were changed, labelled by path.
ENTITIES_ADJUSTED = Counter(
    "pwl_entities_adjusted_total",
    "Entities whose DCs were adjusted, by path (import/bulk)",
    labelnames=["path"],
)

#: Number of individual field updates, labelled by field kind.
FIELDS_ADJUSTED = Counter(
    "pwl_fields_adjusted_total",
    "Individual field updates proposed, by kind (text/numeric/embedded)",
    labelnames=["kind"],
)

#: Count of bulk runs, labelled by outcome.
BATCH_RUNS = Counter(
    "pwl_batch_runs_total",
    "Bulk flatten runs by outcome (completed/declined/nothing_to_do/failed)",
    labelnames=["outcome"],
)

#: Count of bulk worklist items, labelled by commit outcome.
BATCH_ITEMS = Counter(
    "pwl_batch_items_total",
    "Bulk worklist items processed, by commit outcome (ok/failed)",
    labelnames=["outcome"],
)

#: Latency (seconds) per named component.
ADJUSTMENT_LATENCY = Histogram(
    "pwl_adjustment_latency_seconds",
    "Per-component adjustment latency in seconds",
    labelnames=["component"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
)


# ---------------------------------------------------------------------------
# Helper: context manager for timing a block
# ---------------------------------------------------------------------------


class _Timer:
    """Simple context manager that records elapsed time and emits Prometheus metric."""

    def __init__(self, component: str) -> None:
        self._component = component
        self._start: float = 0.0
        self.elapsed_ms: float = 0.0

    def __enter__(self) -> "_Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        ADJUSTMENT_LATENCY.labels(component=self._component).observe(
            self.elapsed_ms / 1000
        )


def timer(component: str) -> _Timer:
    """Return a context manager that times a component and records latency."""
    return _Timer(component)


def record_updates(updates: Mapping[str, Any], path: str) -> None:
    """Record entity / field counters for one committed update map."""
    if not updates:
        return
    ENTITIES_ADJUSTED.labels(path=path).inc()
    for field_path, value in updates.items():
        if field_path == "items":
            kind = "embedded"
        elif isinstance(value, str):
            kind = "text"
        else:
            kind = "numeric"
        FIELDS_ADJUSTED.labels(kind=kind).inc()
