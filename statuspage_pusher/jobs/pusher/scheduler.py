"""Per-metric query -> extract -> push -> backoff cycle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

from ...common.errors import ExtractionError
from ...metrics.push_metrics import PushMetrics
from ...push.models import PushOutcome
from ...queries.extractor import extract_scalar
from ...queries.loader import MetricQuerySpec
from ...queries.prometheus import QueryResponse
from ...resilience.backoff import BackoffPolicy, BackoffState

logger = logging.getLogger(__name__)


class QueryBackend(Protocol):
    def query(self, expression: str, timestamp: float) -> QueryResponse: ...


class Pusher(Protocol):
    def push(self, metric_id: str, value: float, timestamp: float) -> PushOutcome: ...


@dataclass
class ScheduleEntry:
    metric_id: str
    query: str
    next_fire: float
    backoff: BackoffState


class MetricScheduler:
    """Runs the push cycle for every configured metric on its own timer.

    Times are read from ``clock`` (monotonic, drives the schedule) and
    ``wall_clock`` (epoch seconds, sent to the backend and the push API).
    Query and extraction errors propagate: they mean the configuration is
    wrong, so the run stops.
    """

    def __init__(
        self,
        queries: MetricQuerySpec,
        query_client: QueryBackend,
        pusher: Pusher,
        policy: BackoffPolicy,
        metrics: Optional[PushMetrics] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        self._query_client = query_client
        self._pusher = pusher
        self._policy = policy
        self._metrics = metrics
        self._clock = clock
        self._wall_clock = wall_clock

        first_fire = clock() + policy.config.base_interval
        self._entries: Dict[str, ScheduleEntry] = {
            metric_id: ScheduleEntry(
                metric_id=metric_id,
                query=query,
                next_fire=first_fire,
                backoff=policy.new_state(),
            )
            for metric_id, query in queries.items()
        }

    @property
    def metric_ids(self) -> List[str]:
        return list(self._entries)

    def next_fire(self, metric_id: str) -> float:
        return self._entries[metric_id].next_fire

    def backoff_state(self, metric_id: str) -> BackoffState:
        return self._entries[metric_id].backoff

    def seconds_until_next(self) -> float:
        if not self._entries:
            return self._policy.config.base_interval
        earliest = min(entry.next_fire for entry in self._entries.values())
        return max(0.0, earliest - self._clock())

    def run_due(self) -> int:
        """Process every metric whose timer has elapsed. Returns how many ran."""
        now = self._clock()
        timestamp = self._wall_clock()
        due = [entry for entry in self._entries.values() if entry.next_fire <= now]
        for entry in due:
            self._run_entry(entry, timestamp)
        return len(due)

    def _run_entry(self, entry: ScheduleEntry, timestamp: float) -> None:
        response = self._query_client.query(entry.query, timestamp)
        try:
            result = extract_scalar(response)
        except ExtractionError as e:
            raise e.for_metric(entry.metric_id) from e

        logger.debug("Query evaluated metric=%s value=%r", entry.metric_id, result.value)
        outcome = self._pusher.push(entry.metric_id, result.value, timestamp)

        wait = self._policy.advance(entry.backoff, outcome, now=self._clock())
        entry.next_fire = self._clock() + wait
        if self._metrics is not None:
            self._metrics.record_next_push(entry.metric_id, wait)

        if not outcome.ok:
            logger.info(
                "Backing off metric=%s response_code=%s failures=%d next_push_in=%.1fs",
                entry.metric_id, outcome.response_code,
                entry.backoff.consecutive_failures, wait,
            )
        else:
            logger.debug("Next push metric=%s in=%.1fs", entry.metric_id, wait)
