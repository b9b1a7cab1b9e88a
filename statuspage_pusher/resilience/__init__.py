"""Pusher resilience.

Contains:
- BackoffPolicy: per-metric exponential backoff driven by push outcomes
- BackoffConfig / BackoffState: its parameters and per-metric state
"""

from .backoff import BackoffConfig, BackoffPhase, BackoffPolicy, BackoffState

__all__ = [
    "BackoffConfig",
    "BackoffPhase",
    "BackoffPolicy",
    "BackoffState",
]
