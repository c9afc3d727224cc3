"""Data models for the Media Optimizer."""

from .candidate import Candidate
from .transaction import TransactionState, TransactionOutcome
from .result import AggregateResult

__all__ = ['Candidate', 'TransactionState', 'TransactionOutcome', 'AggregateResult']
