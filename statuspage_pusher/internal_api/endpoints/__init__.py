"""HTTP endpoints of the internal server."""

from .health import router as health_router
from .metrics import router as metrics_router
from .debug import router as debug_router

__all__ = [
    "health_router",
    "metrics_router",
    "debug_router",
]
