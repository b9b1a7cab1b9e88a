"""Observability state shared between the scheduler and the internal API."""

from .push_metrics import PushMetrics, PushRecorder, TRANSPORT_ERROR

__all__ = [
    "PushMetrics",
    "PushRecorder",
    "TRANSPORT_ERROR",
]
