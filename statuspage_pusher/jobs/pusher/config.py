"""Pusher runner configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ...push.models import StatusPageTarget
from ...resilience.backoff import BackoffConfig

DEFAULT_BACKOFF_MAX_INTERVAL = 300.0


@dataclass(frozen=True)
class RunnerConfig:
    """Pusher settings resolved from flags and environment."""
    prom_url: str
    target: StatusPageTarget
    config_path: Path
    push_interval: float
    internal_metrics_addr: str
    debug: bool = False
    backoff_multiplier: float = 1.5
    backoff_max_interval: Optional[float] = None
    backoff_jitter: float = 0.0
    backoff_max_elapsed: Optional[float] = None
    query_timeout: float = 30.0
    push_timeout: float = 10.0

    def resolved_max_interval(self) -> float:
        """Explicit max, or the default cap raised to the push interval."""
        if self.backoff_max_interval is not None:
            return self.backoff_max_interval
        return max(DEFAULT_BACKOFF_MAX_INTERVAL, self.push_interval)

    def backoff_config(self) -> BackoffConfig:
        return BackoffConfig(
            base_interval=self.push_interval,
            multiplier=self.backoff_multiplier,
            max_interval=self.resolved_max_interval(),
            jitter=self.backoff_jitter,
            max_elapsed=self.backoff_max_elapsed,
        )
