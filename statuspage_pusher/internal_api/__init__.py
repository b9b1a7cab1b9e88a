"""Internal observability HTTP endpoint (health, metrics, debug)."""

from .app import create_app
from .server import InternalServer

__all__ = ["create_app", "InternalServer"]
