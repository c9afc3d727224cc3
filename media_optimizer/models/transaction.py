#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for per-file transactions in the Media Optimizer.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .candidate import Candidate


class TransactionState(Enum):
    """Lifecycle of a single file transaction."""
    PENDING = "pending"
    FILTERED_OUT = "filtered_out"
    RUNNING = "running"
    COMMITTED = "committed"
    REVERTED = "reverted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransactionState.COMMITTED, TransactionState.REVERTED,
                        TransactionState.FAILED, TransactionState.FILTERED_OUT)


@dataclass(frozen=True)
class TransactionOutcome:
    """Terminal result reported by every transaction."""
    candidate: Candidate
    state: TransactionState
    output_path: Path
    original_size: int = 0
    new_size: int = 0
    bytes_saved: int = 0
    backup_path: Optional[Path] = None
    original_mtime: Optional[float] = None
    error: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.state is TransactionState.COMMITTED

    @property
    def size_percent(self) -> float:
        """New size as a share of the original, for log lines."""
        if self.original_size <= 0:
            return 0.0
        return (self.new_size / self.original_size) * 100.0
