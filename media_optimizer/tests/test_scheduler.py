#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the bounded worker pool and interrupt handling.
"""

import signal
import threading
import time

import pytest

from media_optimizer.errors import ConfigurationError
from media_optimizer.pipeline.scheduler import Scheduler, interrupt_cancels


class TestScheduler:
    """Tests for Scheduler submit/drain/cancel."""

    def test_runs_all_jobs(self):
        scheduler = Scheduler(workers=3)
        for i in range(20):
            assert scheduler.submit(lambda x=i: x * 2)
        results = scheduler.drain()

        assert sorted(results) == [i * 2 for i in range(20)]
        assert scheduler.completed == 20
        assert scheduler.skipped == 0

    def test_concurrency_is_bounded(self):
        """Never more than ``workers`` jobs run at once."""
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def job():
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.02)
            with lock:
                state["active"] -= 1

        with Scheduler(workers=2) as scheduler:
            for _ in range(10):
                scheduler.submit(job)

        assert state["peak"] <= 2
        assert scheduler.peak_active <= 2
        assert scheduler.completed == 10

    def test_on_complete_called_per_job(self):
        seen = []
        scheduler = Scheduler(workers=2, on_complete=seen.append)
        for i in range(5):
            scheduler.submit(lambda x=i: x)
        scheduler.drain()
        assert sorted(seen) == [0, 1, 2, 3, 4]

    def test_cancel_skips_queued_jobs(self):
        """In-flight work finishes; queued work is never started."""
        started = threading.Event()
        release = threading.Event()
        ran = []

        def blocker():
            started.set()
            release.wait(5)
            ran.append("blocker")

        scheduler = Scheduler(workers=1, buffer_size=10)
        scheduler.submit(blocker)
        assert started.wait(5)
        for i in range(3):
            scheduler.submit(lambda x=i: ran.append(x))

        scheduler.cancel()
        release.set()
        results = scheduler.drain()

        assert ran == ["blocker"]
        assert scheduler.skipped == 3
        assert results == [None]

    def test_submit_refused_after_cancel(self):
        scheduler = Scheduler(workers=1)
        scheduler.cancel()
        assert scheduler.submit(lambda: 1) is False
        assert scheduler.drain() == []

    def test_submit_after_drain_raises(self):
        scheduler = Scheduler(workers=1)
        scheduler.drain()
        with pytest.raises(RuntimeError):
            scheduler.submit(lambda: 1)

    def test_job_exception_is_counted(self):
        def bad():
            raise ValueError("bad job")

        scheduler = Scheduler(workers=2)
        scheduler.submit(bad)
        scheduler.submit(lambda: "ok")
        results = scheduler.drain()

        assert scheduler.errors == 1
        assert "ok" in results

    def test_context_manager_cancels_on_error(self):
        with pytest.raises(KeyError):
            with Scheduler(workers=1) as scheduler:
                raise KeyError("stop")
        assert scheduler.cancelled

    @pytest.mark.parametrize("workers", [0, -1, 33])
    def test_invalid_worker_count(self, workers):
        with pytest.raises(ConfigurationError):
            Scheduler(workers=workers)


class TestInterruptCancels:
    """Tests for signal routing to the cancel event."""

    def test_sigint_sets_event(self):
        event = threading.Event()
        with interrupt_cancels(event):
            signal.raise_signal(signal.SIGINT)
        assert event.is_set()

    def test_previous_handler_restored(self):
        before = signal.getsignal(signal.SIGINT)
        with interrupt_cancels(threading.Event()):
            assert signal.getsignal(signal.SIGINT) is not before
        assert signal.getsignal(signal.SIGINT) is before
