"""Prometheus run metrics for the enrichment pipeline.

Metrics live on a private CollectorRegistry so several runs (or tests) in one
process do not collide with the global default registry.
"""
from __future__ import annotations

import functools
import time
from typing import Callable

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

REGISTRY = CollectorRegistry()

ITEMS_TOTAL = Counter(
    "enricher_items_total",
    "Items seen by the enrichment pipeline, by outcome",
    ["outcome"],
    registry=REGISTRY,
)
ANALYZER_ERRORS = Counter(
    "enricher_analyzer_errors_total",
    "Analyzer faults degraded to a default annotation",
    ["analyzer"],
    registry=REGISTRY,
)
ITEM_LATENCY = Histogram(
    "enricher_item_latency_seconds",
    "Per-item processing latency in seconds",
    registry=REGISTRY,
)

OUTCOMES = ("emitted", "rejected", "skipped", "failed")


def count_item(outcome: str) -> None:
    if outcome not in OUTCOMES:
        raise ValueError(f"unknown outcome {outcome!r}")
    ITEMS_TOTAL.labels(outcome=outcome).inc()


def count_analyzer_error(analyzer: str) -> None:
    ANALYZER_ERRORS.labels(analyzer=analyzer).inc()


def measure_item(fn: Callable):
    """Record wall time of each call in ITEM_LATENCY, including failed calls."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return fn(*args, **kwargs)
        finally:
            ITEM_LATENCY.observe(time.perf_counter() - start)

    return wrapper


def metrics_text() -> bytes:
    return generate_latest(REGISTRY)


def metric_value(name: str, labels: dict | None = None) -> float:
    value = REGISTRY.get_sample_value(name, labels or {})
    return float(value or 0.0)


__all__ = [
    "REGISTRY",
    "count_item",
    "count_analyzer_error",
    "measure_item",
    "metrics_text",
    "metric_value",
]
