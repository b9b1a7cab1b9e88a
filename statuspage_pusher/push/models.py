"""Models for push attempts.

Extracted from statuspage.py so the backoff policy can depend on outcomes
without importing the HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PushStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class PushOutcome:
    """Result of one push attempt.

    ``response_code`` is the HTTP status as a string, or the synthetic
    ``"error"`` label when no response was received.
    """
    status: PushStatus
    response_code: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == PushStatus.SUCCESS

    @classmethod
    def success(cls, response_code: str) -> "PushOutcome":
        return cls(PushStatus.SUCCESS, response_code)

    @classmethod
    def failure(cls, response_code: str, error: Optional[str] = None) -> "PushOutcome":
        return cls(PushStatus.FAILURE, response_code, error)


@dataclass(frozen=True)
class StatusPageTarget:
    """Where pushes go: API root, page id and OAuth token."""
    domain: str
    page_id: str
    token: str

    def metric_data_url(self, metric_id: str) -> str:
        return f"{self.domain.rstrip('/')}/v1/pages/{self.page_id}/metrics/{metric_id}/data.json"

    def __repr__(self) -> str:
        return f"StatusPageTarget(domain={self.domain!r}, page_id={self.page_id!r}, token='***')"
