"""Reduces a query response to exactly one scalar."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..common.errors import ErrorKind, ExtractionError
from .prometheus import QueryResponse

VECTOR = "vector"


@dataclass(frozen=True)
class Sample:
    labels: Dict[str, str] = field(default_factory=dict)
    value: float = 0.0
    timestamp: float = 0.0


@dataclass(frozen=True)
class QueryResult:
    value: float
    timestamp: float


def parse_vector(response: QueryResponse) -> List[Sample]:
    """Decode the samples of a vector response.

    Each element looks like ``{"metric": {...}, "value": [<ts>, "<value>"]}``;
    float() accepts the ``NaN``/``+Inf``/``-Inf`` spellings Prometheus uses.
    """
    if response.result_type != VECTOR or not isinstance(response.result, list):
        raise ExtractionError(
            ErrorKind.UNEXPECTED_RESULT_TYPE,
            f"expected a vector result, got {response.result_type or 'nothing'}",
        )

    samples = []
    for item in response.result:
        try:
            ts, raw_value = item["value"]
            samples.append(
                Sample(
                    labels=dict(item.get("metric") or {}),
                    value=float(raw_value),
                    timestamp=float(ts),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ExtractionError(
                ErrorKind.UNEXPECTED_RESULT_TYPE, f"malformed vector sample {item!r}"
            ) from e
    return samples


def extract_scalar(response: QueryResponse) -> QueryResult:
    """Return the single sample of a vector response.

    Raises:
        ExtractionError: UNEXPECTED_RESULT_TYPE when the response is not a
            vector, AMBIGUOUS_RESULT when it holds zero or several samples.
    """
    samples = parse_vector(response)
    if len(samples) != 1:
        raise ExtractionError(
            ErrorKind.AMBIGUOUS_RESULT,
            f"expected query to return a single value, got {len(samples)}",
        )
    sample = samples[0]
    return QueryResult(value=sample.value, timestamp=sample.timestamp)
