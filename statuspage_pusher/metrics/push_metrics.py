"""Prometheus metrics for push outcomes.

The registry is owned by one PushMetrics instance and injected where needed,
so tests get an isolated registry and nothing registers at import time.
prometheus_client metric children are safe for concurrent use, which lets the
internal HTTP thread scrape while the scheduler increments.
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
)

PUSHES_METRIC = "statuspage_pusher_pushes"
NEXT_PUSH_METRIC = "statuspage_pusher_next_push_seconds"

# Label used when the request never produced an HTTP status.
TRANSPORT_ERROR = "error"


class PushMetrics:
    """Push counters plus the per-metric wait gauge."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        # process_*, python_info and python_gc_* like the default registry
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)
        self._pushes = Counter(
            PUSHES_METRIC,
            "Responses for the various calls",
            ["metric_id", "response_code"],
            registry=self.registry,
        )
        self._next_push = Gauge(
            NEXT_PUSH_METRIC,
            "Seconds until the next push attempt for a metric",
            ["metric_id"],
            registry=self.registry,
        )

    def record_push(self, metric_id: str, response_code: str) -> None:
        self._pushes.labels(metric_id=metric_id, response_code=response_code).inc()

    def record_next_push(self, metric_id: str, seconds: float) -> None:
        self._next_push.labels(metric_id=metric_id).set(seconds)

    def push_count(self, metric_id: str, response_code: str) -> float:
        value = self.registry.get_sample_value(
            PUSHES_METRIC + "_total",
            {"metric_id": metric_id, "response_code": response_code},
        )
        return value or 0.0


class PushRecorder:
    """Increment-only view of PushMetrics handed to the pusher."""

    def __init__(self, metrics: PushMetrics):
        self._metrics = metrics

    def __call__(self, metric_id: str, response_code: str) -> None:
        self._metrics.record_push(metric_id, response_code)
