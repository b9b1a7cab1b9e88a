"""Fixtures compartidas de los tests del pusher."""

from __future__ import annotations

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from statuspage_pusher.metrics import PushMetrics
from statuspage_pusher.push import StatusPageTarget
from statuspage_pusher.queries import QueryResponse


class FakeClock:
    """Reloj que se avanza a mano, invocable como time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def vector(*values: float, labels: Dict[str, str] | None = None) -> QueryResponse:
    """Respuesta vector con una muestra por valor."""
    result: List[Dict[str, Any]] = [
        {"metric": dict(labels or {"__name__": "up", "idx": str(i)}), "value": [1700000000.0, repr(float(v))]}
        for i, v in enumerate(values)
    ]
    return QueryResponse(result_type="vector", result=result)


def http_response(status_code: int) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    return resp


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics() -> PushMetrics:
    """Registro aislado por test."""
    return PushMetrics()


@pytest.fixture
def target() -> StatusPageTarget:
    return StatusPageTarget(domain="https://api.statuspage.io", page_id="page123", token="secret-token")


@pytest.fixture
def mock_session() -> MagicMock:
    session = MagicMock()
    session.post.return_value = http_response(200)
    return session


@pytest.fixture
def make_vector():
    return vector


@pytest.fixture
def make_response():
    return http_response
