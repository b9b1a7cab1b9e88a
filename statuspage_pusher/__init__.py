"""Relay Prometheus query results to the Statuspage metrics API."""

__version__ = "0.1.0"
