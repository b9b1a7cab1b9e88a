"""Client for the Prometheus instant-query HTTP API.

Only ``GET /api/v1/query`` is used. The backend is assumed to be local and
always available, so every failure surfaces as a QueryError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlparse

import requests

from ..common.errors import ConfigError, QueryError

logger = logging.getLogger(__name__)

QUERY_PATH = "/api/v1/query"


@dataclass(frozen=True)
class QueryResponse:
    """Raw ``data`` section of a successful query response."""
    result_type: str
    result: Any
    warnings: List[str] = field(default_factory=list)


class PrometheusQueryClient:
    """Evaluates instant queries against a Prometheus-compatible backend.

    Usage:
        client = PrometheusQueryClient("http://127.0.0.1:9090")
        response = client.query("up", timestamp=time.time())
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"invalid query backend address: {base_url!r}")

        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def query(self, expression: str, timestamp: float) -> QueryResponse:
        """Evaluate ``expression`` at ``timestamp`` (seconds since epoch).

        Raises:
            QueryError: transport failure, non-JSON body, or an error status
                reported by the backend.
        """
        url = self._base_url + QUERY_PATH
        try:
            resp = self._session.get(
                url,
                params={"query": expression, "time": f"{timestamp:.3f}"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise QueryError(f"failed to query prometheus: {e}", query=expression) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise QueryError(
                f"failed to query prometheus: status={resp.status_code} non-JSON response",
                query=expression,
            ) from e
        finally:
            resp.close()

        if not isinstance(payload, dict) or payload.get("status") != "success":
            error_type = payload.get("errorType", "unknown") if isinstance(payload, dict) else "unknown"
            error = payload.get("error", "") if isinstance(payload, dict) else ""
            raise QueryError(
                f"failed to query prometheus: status={resp.status_code} "
                f"error_type={error_type} error={error}",
                query=expression,
            )

        warnings = payload.get("warnings") or []
        for warning in warnings:
            logger.warning("Prometheus query warning query=%r warning=%s", expression, warning)

        data = payload.get("data") or {}
        logger.debug("Prometheus query ok query=%r result_type=%s", expression, data.get("resultType"))
        return QueryResponse(
            result_type=str(data.get("resultType", "")),
            result=data.get("result"),
            warnings=list(warnings),
        )
