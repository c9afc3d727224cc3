#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Bounded worker pool for file transactions.

Jobs run on a ``ThreadPoolExecutor`` with ``workers`` threads, so at most that
many execute at once. Submission blocks only when the internal buffer is full.
Cancellation is cooperative: running jobs finish, queued jobs are skipped and
new submissions are refused.
"""

import contextlib
import logging
import signal
import threading
from concurrent.futures import ThreadPoolExecutor
from threading import BoundedSemaphore, Event, Lock
from typing import Any, Callable, List, Optional

from ..config import MAX_WORKERS, MIN_WORKERS
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_SKIPPED = object()


class Scheduler:
    """Run submitted callables with bounded concurrency."""

    def __init__(self, workers: int, buffer_size: Optional[int] = None,
                 cancel_event: Optional[Event] = None,
                 on_complete: Optional[Callable[[Any], None]] = None):
        if not MIN_WORKERS <= workers <= MAX_WORKERS:
            raise ConfigurationError(
                f"workers must be between {MIN_WORKERS} and {MAX_WORKERS}, got {workers}"
            )
        self.workers = workers
        self.cancel_event = cancel_event if cancel_event is not None else Event()
        self.on_complete = on_complete

        self._slots = BoundedSemaphore(buffer_size or workers * 4)
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="optimizer")
        self._futures = []
        self._lock = Lock()
        self._drained = False

        # Counters
        self.submitted = 0
        self.completed = 0
        self.skipped = 0
        self.errors = 0
        self.active = 0
        self.peak_active = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> bool:
        """
        Queue ``fn(*args, **kwargs)``.

        Returns:
            True if queued, False if the scheduler has been cancelled
        """
        if self._drained:
            raise RuntimeError("cannot submit to a drained scheduler")

        # Wait for a buffer slot, checking for cancellation while blocked
        while not self._slots.acquire(timeout=0.1):
            if self.cancelled:
                return False
        if self.cancelled:
            self._slots.release()
            return False

        future = self._executor.submit(self._run, fn, args, kwargs)
        with self._lock:
            self._futures.append(future)
            self.submitted += 1
        return True

    def cancel(self) -> None:
        """Stop starting new work; in-flight jobs run to completion."""
        self.cancel_event.set()

    def drain(self) -> List[Any]:
        """Block until all submitted work has finished or been skipped."""
        self._drained = True
        self._executor.shutdown(wait=True)
        results = []
        for future in self._futures:
            result = future.result()
            if result is not _SKIPPED:
                results.append(result)
        return results

    def _run(self, fn, args, kwargs):
        try:
            if self.cancelled:
                with self._lock:
                    self.skipped += 1
                return _SKIPPED

            with self._lock:
                self.active += 1
                self.peak_active = max(self.peak_active, self.active)
            try:
                result = fn(*args, **kwargs)
            except Exception:
                logger.exception("Job %r raised", fn)
                with self._lock:
                    self.errors += 1
                result = None
            finally:
                with self._lock:
                    self.active -= 1
                    self.completed += 1

            if self.on_complete is not None:
                try:
                    self.on_complete(result)
                except Exception:
                    logger.exception("Completion callback failed")
            return result
        finally:
            self._slots.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.cancel()
        self.drain()
        return False


@contextlib.contextmanager
def interrupt_cancels(cancel_event: Event, signals=(signal.SIGINT, signal.SIGTERM)):
    """
    Route interrupt signals to ``cancel_event`` for the duration of the block.

    Handlers can only be installed from the main thread; elsewhere this is a
    no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield cancel_event
        return

    def _handler(signum, frame):
        cancel_event.set()

    previous = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, _handler)
    try:
        yield cancel_event
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
