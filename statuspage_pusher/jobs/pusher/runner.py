"""Run loop: waits for the next metric timer or cancellation, whichever comes first."""

from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from typing import ContextManager, Optional

from .scheduler import MetricScheduler

logger = logging.getLogger(__name__)


class RunLoop:
    """Drives scheduler ticks until ``cancel`` is set.

    Cancellation is only observed between ticks; a push in flight finishes
    first. ``listener`` (the internal HTTP server) is entered before the
    first tick and exited on every way out of run().
    """

    def __init__(
        self,
        scheduler: MetricScheduler,
        cancel: threading.Event,
        listener: Optional[ContextManager] = None,
    ):
        self._scheduler = scheduler
        self._cancel = cancel
        self._listener = listener
        self.ticks = 0

    def run(self) -> None:
        with self._listener if self._listener is not None else nullcontext():
            logger.info(
                "began pushing metrics metrics=%d first_push_in=%.1fs",
                len(self._scheduler.metric_ids),
                self._scheduler.seconds_until_next(),
            )
            while not self._cancel.wait(timeout=self._scheduler.seconds_until_next()):
                self._scheduler.run_due()
                self.ticks += 1
            logger.info("cancellation received, stopping after %d ticks", self.ticks)
