"""Query side of the pusher.

Modules:
- loader: metric_id -> query mapping from YAML
- prometheus: instant-query HTTP client
- extractor: single-scalar extraction from a query response
"""

from .loader import MetricQuerySpec, load_query_config, parse_query_config
from .prometheus import PrometheusQueryClient, QueryResponse
from .extractor import QueryResult, Sample, extract_scalar, parse_vector

__all__ = [
    "MetricQuerySpec",
    "load_query_config",
    "parse_query_config",
    "PrometheusQueryClient",
    "QueryResponse",
    "QueryResult",
    "Sample",
    "extract_scalar",
    "parse_vector",
]
