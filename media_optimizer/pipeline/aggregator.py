#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Thread-safe accumulation of per-file outcomes.
"""

from threading import Lock

from ..models.result import AggregateResult
from ..models.transaction import TransactionOutcome, TransactionState


class ResultAggregator:
    """Running totals shared by all workers of one run."""

    def __init__(self):
        self._lock = Lock()
        self._total_files = 0
        self._total_bytes_saved = 0
        self._counts = {state: 0 for state in TransactionState}
        self._skipped = 0
        self._cancelled = False

    def record(self, outcome: TransactionOutcome) -> None:
        """
        Account for one finished transaction.

        Only committed transactions that actually saved bytes add to the file
        and byte totals; reverts contribute zero.
        """
        with self._lock:
            self._counts[outcome.state] += 1
            if outcome.state is TransactionState.COMMITTED and outcome.bytes_saved > 0:
                self._total_files += 1
                self._total_bytes_saved += outcome.bytes_saved

    def record_restored(self) -> None:
        with self._lock:
            self._counts[TransactionState.COMMITTED] += 1
            self._total_files += 1

    def record_filtered(self) -> None:
        with self._lock:
            self._counts[TransactionState.FILTERED_OUT] += 1

    def record_skipped(self, count: int = 1) -> None:
        with self._lock:
            self._skipped += count

    def mark_cancelled(self) -> None:
        with self._lock:
            self._cancelled = True

    def snapshot(self) -> AggregateResult:
        with self._lock:
            return AggregateResult(
                total_files=self._total_files,
                total_bytes_saved=self._total_bytes_saved,
                committed=self._counts[TransactionState.COMMITTED],
                reverted=self._counts[TransactionState.REVERTED],
                failed=self._counts[TransactionState.FAILED],
                filtered_out=self._counts[TransactionState.FILTERED_OUT],
                skipped=self._skipped,
                cancelled=self._cancelled,
            )
