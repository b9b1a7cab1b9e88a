"""Pusher job package.

Modules:
- config: RunnerConfig dataclass
- scheduler: per-metric query -> extract -> push -> backoff cycle
- runner: RunLoop (timer vs. cancellation)
- cli: CLI entry point (main)
"""

from .config import RunnerConfig
from .scheduler import MetricScheduler, ScheduleEntry
from .runner import RunLoop
from .cli import main, run

__all__ = ["RunnerConfig", "MetricScheduler", "ScheduleEntry", "RunLoop", "main", "run"]
