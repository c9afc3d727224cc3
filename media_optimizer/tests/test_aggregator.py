#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for the thread-safe result aggregator.
"""

import threading
from pathlib import Path

from media_optimizer.models.candidate import Candidate
from media_optimizer.models.transaction import TransactionOutcome, TransactionState
from media_optimizer.pipeline.aggregator import ResultAggregator

CANDIDATE = Candidate(relative_path="x.jpg", path=Path("/images/x.jpg"),
                      size=1000, mtime=0.0, atime=0.0)


def outcome(state, saved=0):
    return TransactionOutcome(candidate=CANDIDATE, state=state, output_path=CANDIDATE.path,
                              original_size=1000, new_size=1000 - saved, bytes_saved=saved)


class TestResultAggregator:
    """Tests for ResultAggregator totals."""

    def test_committed_with_savings_counts(self):
        aggregator = ResultAggregator()
        aggregator.record(outcome(TransactionState.COMMITTED, saved=300))
        aggregator.record(outcome(TransactionState.COMMITTED, saved=200))
        result = aggregator.snapshot()

        assert result.total_files == 2
        assert result.total_bytes_saved == 500
        assert result.committed == 2

    def test_reverted_and_failed_contribute_nothing(self):
        aggregator = ResultAggregator()
        aggregator.record(outcome(TransactionState.REVERTED))
        aggregator.record(outcome(TransactionState.FAILED))
        result = aggregator.snapshot()

        assert result.total_files == 0
        assert result.total_bytes_saved == 0
        assert result.reverted == 1
        assert result.failed == 1

    def test_zero_savings_commit_not_counted(self):
        aggregator = ResultAggregator()
        aggregator.record(outcome(TransactionState.COMMITTED, saved=0))
        result = aggregator.snapshot()

        assert result.committed == 1
        assert result.total_files == 0

    def test_restore_and_bookkeeping_counters(self):
        aggregator = ResultAggregator()
        aggregator.record_restored()
        aggregator.record_restored()
        aggregator.record_filtered()
        aggregator.record_skipped(3)
        aggregator.mark_cancelled()
        result = aggregator.snapshot()

        assert result.total_files == 2
        assert result.total_bytes_saved == 0
        assert result.filtered_out == 1
        assert result.skipped == 3
        assert result.cancelled
        assert result.to_dict()["total_files"] == 2

    def test_concurrent_records_are_not_lost(self):
        aggregator = ResultAggregator()
        per_thread = 500

        def worker():
            for _ in range(per_thread):
                aggregator.record(outcome(TransactionState.COMMITTED, saved=7))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        result = aggregator.snapshot()
        assert result.total_files == 8 * per_thread
        assert result.total_bytes_saved == 8 * per_thread * 7
