"""Error taxonomy for the pusher.

Every error defined here is fatal: the CLI logs it and exits non-zero.
Push API failures are not exceptions; they are reported as PushOutcome
values and absorbed by the backoff policy.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class PusherError(Exception):
    """Base class for fatal pusher errors."""


class ConfigError(PusherError):
    """Invalid process configuration or query config file."""


class QueryError(PusherError):
    """The query backend could not evaluate a query."""

    def __init__(self, message: str, query: Optional[str] = None):
        self.query = query
        super().__init__(message)


class ErrorKind(str, Enum):
    """Why a query result could not be reduced to one scalar."""
    UNEXPECTED_RESULT_TYPE = "unexpected_result_type"
    AMBIGUOUS_RESULT = "ambiguous_result"


class ExtractionError(PusherError):
    """A query result was not exactly one vector sample."""

    def __init__(self, kind: ErrorKind, message: str, metric_id: Optional[str] = None):
        self.kind = kind
        self.metric_id = metric_id
        super().__init__(message)

    def for_metric(self, metric_id: str) -> "ExtractionError":
        """Copy of this error tagged with the metric it was raised for."""
        return ExtractionError(self.kind, f"metric={metric_id}: {self}", metric_id=metric_id)
