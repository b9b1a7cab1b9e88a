"""Tests del RunLoop: ticks, cancelación y liberación del listener."""

import threading
from unittest.mock import MagicMock

import pytest

from statuspage_pusher.common.errors import QueryError
from statuspage_pusher.jobs.pusher import RunLoop


@pytest.fixture
def scheduler() -> MagicMock:
    scheduler = MagicMock()
    scheduler.metric_ids = ["uptime"]
    scheduler.seconds_until_next.return_value = 0.0
    return scheduler


@pytest.fixture
def listener() -> MagicMock:
    return MagicMock()


class TestRunLoop:

    def test_cancelled_before_first_tick(self, scheduler, listener):
        cancel = threading.Event()
        cancel.set()

        RunLoop(scheduler, cancel, listener=listener).run()

        scheduler.run_due.assert_not_called()
        listener.__enter__.assert_called_once()
        listener.__exit__.assert_called_once()

    def test_cancellation_between_ticks_stops_further_pushes(self, scheduler, listener):
        cancel = threading.Event()
        scheduler.run_due.side_effect = lambda: cancel.set()

        loop = RunLoop(scheduler, cancel, listener=listener)
        loop.run()

        scheduler.run_due.assert_called_once()
        assert loop.ticks == 1
        listener.__exit__.assert_called_once()

    def test_ticks_until_cancelled(self, scheduler):
        cancel = threading.Event()
        calls = []

        def _run_due():
            calls.append(1)
            if len(calls) == 3:
                cancel.set()

        scheduler.run_due.side_effect = _run_due

        RunLoop(scheduler, cancel).run()

        assert len(calls) == 3

    def test_waits_for_the_earliest_timer(self, scheduler):
        cancel = MagicMock()
        cancel.wait.side_effect = [False, True]
        scheduler.seconds_until_next.return_value = 12.5

        RunLoop(scheduler, cancel).run()

        assert cancel.wait.call_args_list[0].kwargs == {"timeout": 12.5}
        scheduler.run_due.assert_called_once()

    def test_fatal_error_releases_listener(self, scheduler, listener):
        scheduler.run_due.side_effect = QueryError("backend down")

        with pytest.raises(QueryError):
            RunLoop(scheduler, threading.Event(), listener=listener).run()

        listener.__exit__.assert_called_once()

    def test_cancel_from_another_thread(self, scheduler):
        cancel = threading.Event()
        scheduler.seconds_until_next.return_value = 60.0
        timer = threading.Timer(0.05, cancel.set)
        timer.start()

        RunLoop(scheduler, cancel).run()

        timer.join()
        scheduler.run_due.assert_not_called()
