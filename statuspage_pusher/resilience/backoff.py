"""Per-metric exponential backoff for push failures.

Each metric owns a BackoffState. BackoffPolicy.advance() is the only thing
that mutates it:

    NOMINAL     current == base. A success keeps it there.
    BACKING_OFF current > base. Each failure waits ``current`` and then
                grows it by ``multiplier`` up to ``max_interval``.
                A success drops straight back to NOMINAL.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..push.models import PushOutcome

logger = logging.getLogger(__name__)


class BackoffPhase(str, Enum):
    NOMINAL = "nominal"
    BACKING_OFF = "backing_off"


@dataclass(frozen=True)
class BackoffConfig:
    """Backoff parameters shared by every metric."""

    base_interval: float = 30.0  # seconds
    multiplier: float = 1.5
    max_interval: float = 300.0  # seconds
    jitter: float = 0.0  # fraction of the interval, 0 disables randomization
    max_elapsed: Optional[float] = None  # seconds, None = never exhausted

    def __post_init__(self) -> None:
        for name in ("base_interval", "multiplier", "max_interval", "jitter", "max_elapsed"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.base_interval <= 0:
            raise ValueError(f"base_interval must be positive, got {self.base_interval}")
        if self.multiplier <= 1:
            raise ValueError(f"multiplier must be greater than 1, got {self.multiplier}")
        if self.max_interval < self.base_interval:
            raise ValueError(
                f"max_interval ({self.max_interval}) must be >= base_interval ({self.base_interval})"
            )
        if not 0 <= self.jitter < 1:
            raise ValueError(f"jitter must be in [0, 1), got {self.jitter}")
        if self.max_elapsed is not None and self.max_elapsed <= 0:
            raise ValueError(f"max_elapsed must be positive, got {self.max_elapsed}")


@dataclass
class BackoffState:
    base_interval: float
    current_interval: float
    streak_started_at: Optional[float] = None
    consecutive_failures: int = 0
    exhausted: bool = False

    @property
    def phase(self) -> BackoffPhase:
        if self.current_interval > self.base_interval:
            return BackoffPhase.BACKING_OFF
        return BackoffPhase.NOMINAL


class BackoffPolicy:
    """Computes the wait before a metric's next push attempt.

    Usage:
        policy = BackoffPolicy(BackoffConfig(base_interval=30, multiplier=2))
        state = policy.new_state()
        wait = policy.advance(state, outcome, now=time.monotonic())
    """

    def __init__(self, config: BackoffConfig, rng: Optional[random.Random] = None):
        self._config = config
        self._rng = rng or random.Random()

    @property
    def config(self) -> BackoffConfig:
        return self._config

    def new_state(self) -> BackoffState:
        base = self._config.base_interval
        return BackoffState(base_interval=base, current_interval=base)

    def advance(self, state: BackoffState, outcome: PushOutcome, now: float) -> float:
        """Record ``outcome`` and return the seconds to wait before the next attempt."""
        if outcome.ok:
            if state.phase == BackoffPhase.BACKING_OFF:
                logger.info(
                    "BACKOFF_RESET failures=%d interval=%.1fs",
                    state.consecutive_failures, state.base_interval,
                )
            state.current_interval = state.base_interval
            state.streak_started_at = None
            state.consecutive_failures = 0
            state.exhausted = False
            return state.base_interval

        if state.streak_started_at is None:
            state.streak_started_at = now
        state.consecutive_failures += 1

        if self._streak_exhausted(state, now):
            if not state.exhausted:
                logger.error(
                    "BACKOFF_EXHAUSTED failures=%d elapsed=%.1fs, pinning to %.1fs",
                    state.consecutive_failures,
                    now - state.streak_started_at,
                    self._config.max_interval,
                )
            state.exhausted = True
            state.current_interval = self._config.max_interval
            return self._config.max_interval

        wait = self._randomize(state.current_interval)
        state.current_interval = min(
            state.current_interval * self._config.multiplier,
            self._config.max_interval,
        )
        return wait

    def _streak_exhausted(self, state: BackoffState, now: float) -> bool:
        if self._config.max_elapsed is None or state.streak_started_at is None:
            return False
        return now - state.streak_started_at > self._config.max_elapsed

    def _randomize(self, interval: float) -> float:
        if self._config.jitter:
            # ±jitter, clamped to [base, max]
            delta = interval * self._config.jitter
            interval += self._rng.uniform(-delta, delta)
        return min(max(interval, self._config.base_interval), self._config.max_interval)
