"""Runs the internal app on a background uvicorn thread.

InternalServer is a context manager: the listener is bound on enter and
always released on exit, including when the run loop dies on a fatal error.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI

from ..common.config import parse_listen_address
from ..common.errors import ConfigError

logger = logging.getLogger(__name__)


class InternalServer:
    def __init__(self, app: FastAPI, addr: str, startup_timeout: float = 5.0):
        try:
            host, port = parse_listen_address(addr)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        self.addr = addr
        self._startup_timeout = startup_timeout
        self._server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=host,
                port=port,
                log_level="warning",
                access_log=False,
                lifespan="off",
            )
        )
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        self._thread = threading.Thread(target=self._server.run, name="internal-api", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + self._startup_timeout
        while not self._server.started:
            if not self._thread.is_alive():
                raise ConfigError(f"failed while serving prometheus: could not bind {self.addr}")
            if time.monotonic() > deadline:
                self.close()
                raise ConfigError(f"internal server did not start within {self._startup_timeout:.1f}s")
            time.sleep(0.05)

        logger.info("metrics and debug server listening addr=%s", self.addr)

    def close(self) -> None:
        if self._thread is None:
            return
        self._server.should_exit = True
        self._thread.join(timeout=self._startup_timeout)
        if self._thread.is_alive():
            logger.warning("internal server thread did not stop addr=%s", self.addr)
        else:
            logger.info("internal server stopped addr=%s", self.addr)
        self._thread = None

    def __enter__(self) -> "InternalServer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
