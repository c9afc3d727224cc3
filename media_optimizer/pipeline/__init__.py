"""Job orchestration: transactions, scheduling, modes and accounting."""

from .aggregator import ResultAggregator
from .modes import CopyMode, Mode, OverwriteMode, RestoreMode, RunMode, build_mode
from .scheduler import Scheduler, interrupt_cancels
from .transaction import CopyTransaction, FileTransaction, OverwriteTransaction, RestoreTransaction

__all__ = [
    'ResultAggregator',
    'Mode',
    'RunMode',
    'OverwriteMode',
    'CopyMode',
    'RestoreMode',
    'build_mode',
    'Scheduler',
    'interrupt_cancels',
    'FileTransaction',
    'OverwriteTransaction',
    'CopyTransaction',
    'RestoreTransaction',
]
