from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from .. import __version__
from .endpoints import debug_router, health_router, metrics_router


def create_app(registry: CollectorRegistry) -> FastAPI:
    """Internal app exposing health, Prometheus metrics and debug routes."""
    app = FastAPI(title="statuspage-pusher internal", version=__version__, docs_url=None, redoc_url=None)
    app.state.registry = registry
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(debug_router)
    return app
