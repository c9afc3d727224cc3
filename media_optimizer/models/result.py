#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Aggregate run totals for the Media Optimizer.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class AggregateResult:
    """Snapshot of the result aggregator, read once for the final report."""
    total_files: int = 0
    total_bytes_saved: int = 0

    # Bookkeeping by terminal state
    committed: int = 0
    reverted: int = 0
    failed: int = 0
    filtered_out: int = 0
    skipped: int = 0
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for JSON output."""
        return asdict(self)
