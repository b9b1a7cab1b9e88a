"""Statuspage metrics API client.

One call pushes one (metric id, value, timestamp) triple. Network failures
and non-2xx responses are both returned as a FAILURE outcome and never raised:
a failed push only extends that metric's backoff.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Callable, Optional

import requests

from ..metrics.push_metrics import TRANSPORT_ERROR
from .models import PushOutcome, StatusPageTarget

logger = logging.getLogger(__name__)

RecordPush = Callable[[str, str], None]


def format_value(value: float) -> str:
    """Shortest round-trippable decimal, never in scientific notation.

    repr() already yields the shortest digits; Decimal rewrites them
    positionally (1e+16 -> 10000000000000000, 1.0 -> 1).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(float(value))).normalize(), "f")


def build_form(value: float, timestamp: float) -> dict[str, str]:
    return {
        "data[timestamp]": str(int(timestamp)),
        "data[value]": format_value(value),
    }


class StatusPagePusher:
    """Pushes metric values to ``{domain}/v1/pages/{page}/metrics/{id}/data.json``."""

    def __init__(
        self,
        target: StatusPageTarget,
        record_push: RecordPush,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self._target = target
        self._record_push = record_push
        self._session = session or requests.Session()
        self._timeout = timeout

    def push(self, metric_id: str, value: float, timestamp: float) -> PushOutcome:
        url = self._target.metric_data_url(metric_id)
        try:
            resp = self._session.post(
                url,
                data=build_form(value, timestamp),
                headers={
                    "Authorization": f"OAuth {self._target.token}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            self._record_push(metric_id, TRANSPORT_ERROR)
            logger.warning("[PUSH] failed calling StatusPage API metric=%s err=%s", metric_id, e)
            return PushOutcome.failure(TRANSPORT_ERROR, error=str(e))

        status_code = resp.status_code
        resp.close()
        self._record_push(metric_id, str(status_code))

        if 200 <= status_code < 300:
            logger.info("[PUSH] 2xx response from StatusPage API status_code=%d metric=%s", status_code, metric_id)
            return PushOutcome.success(str(status_code))

        logger.warning("[PUSH] non-2xx response from StatusPage API status_code=%d metric=%s", status_code, metric_id)
        return PushOutcome.failure(str(status_code), error=f"HTTP {status_code}")
