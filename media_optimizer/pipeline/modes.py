#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operating modes for the Media Optimizer.

``Mode`` is resolved once at startup into a strategy object that wires
discovery, the eligibility filter, file transactions and the scheduler
together. Overwrite and Copy stream candidates into the worker pool; Restore
walks the backup tree sequentially.
"""

import logging
import time
from enum import Enum
from pathlib import Path
from threading import Event
from typing import Callable, List, Optional

from ..config import Settings
from ..errors import ConfigurationError, MissingDirectoryError
from ..models.candidate import Candidate
from ..models.result import AggregateResult
from ..models.transaction import TransactionOutcome
from ..scanning.discovery import FileDiscovery
from ..scanning.eligibility import EligibilityFilter
from ..transform.adapter import PillowTransformer, Transformer
from ..utils.path import ensure_dir
from .aggregator import ResultAggregator
from .scheduler import Scheduler
from .transaction import CopyTransaction, FileTransaction, OverwriteTransaction, RestoreTransaction

logger = logging.getLogger(__name__)

OnComplete = Optional[Callable[[TransactionOutcome], None]]


class Mode(Enum):
    OVERWRITE = "overwrite"
    COPY = "copy"
    RESTORE = "restore"

    @classmethod
    def parse(cls, text: str) -> 'Mode':
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"mode must be one of {choices}, got {text!r}") from None


class RunMode:
    """Shared wiring for all modes."""

    mode: Mode

    def __init__(self, settings: Settings, transformer: Optional[Transformer] = None,
                 aggregator: Optional[ResultAggregator] = None,
                 clock: Callable[[], float] = time.time):
        self.settings = settings
        self.transformer = transformer or PillowTransformer()
        self.aggregator = aggregator or ResultAggregator()
        self.eligibility = EligibilityFilter(settings.eligibility, clock)

    def required_directories(self) -> List[Path]:
        return [self.settings.images_dir]

    def check_directories(self) -> None:
        """Fail before any work is scheduled if a required tree is missing."""
        for directory in self.required_directories():
            if not Path(directory).is_dir():
                raise MissingDirectoryError(directory)

    def chown_targets(self) -> List[Path]:
        """Directories written by this mode that need ownership normalized."""
        return []

    def run(self, cancel_event: Optional[Event] = None,
            on_complete: OnComplete = None) -> AggregateResult:
        raise NotImplementedError


class ScheduledMode(RunMode):
    """Discover, filter and dispatch transactions to the worker pool."""

    def prepare(self) -> None:
        """Create output locations before dispatch."""

    def excluded_directories(self) -> List[Path]:
        return []

    def build_transaction(self, candidate: Candidate,
                          original_mtime: Optional[float]) -> FileTransaction:
        raise NotImplementedError

    def run(self, cancel_event: Optional[Event] = None,
            on_complete: OnComplete = None) -> AggregateResult:
        self.check_directories()
        self.prepare()
        cancel_event = cancel_event if cancel_event is not None else Event()

        def completed(outcome):
            if outcome is None:
                return
            self.aggregator.record(outcome)
            if on_complete is not None:
                on_complete(outcome)

        discovery = FileDiscovery(self.settings.extensions, exclude=self.excluded_directories())
        scheduler = Scheduler(self.settings.workers, cancel_event=cancel_event,
                              on_complete=completed)
        logger.debug("Dispatching %s transactions with %d workers",
                     self.mode.value, self.settings.workers)

        try:
            for candidate in discovery.iter_files(self.settings.images_dir):
                if scheduler.cancelled:
                    break
                eligibility = self.eligibility.check(candidate)
                if not eligibility.eligible:
                    self.aggregator.record_filtered()
                    logger.debug("Skipping %s (not eligible)", candidate.relative_path)
                    continue
                transaction = self.build_transaction(candidate, eligibility.original_mtime)
                if not scheduler.submit(transaction.run):
                    break
        finally:
            scheduler.drain()

        if scheduler.skipped:
            self.aggregator.record_skipped(scheduler.skipped)
        if cancel_event.is_set():
            self.aggregator.mark_cancelled()
            logger.warning("Run cancelled: %d queued files were not started", scheduler.skipped)
        return self.aggregator.snapshot()


class OverwriteMode(ScheduledMode):
    """Optimize originals in place, keeping backups for restore."""

    mode = Mode.OVERWRITE

    def prepare(self) -> None:
        ensure_dir(self.settings.backup_dir)

    def excluded_directories(self) -> List[Path]:
        return [self.settings.backup_dir]

    def chown_targets(self) -> List[Path]:
        return [self.settings.backup_dir]

    def build_transaction(self, candidate, original_mtime):
        return OverwriteTransaction(candidate, self.settings.backup_dir, self.transformer,
                                    self.settings.transform, original_mtime)


class CopyMode(ScheduledMode):
    """Write optimized copies to a separate output tree."""

    mode = Mode.COPY

    def required_directories(self) -> List[Path]:
        return [self.settings.images_dir, self.settings.output_dir]

    def excluded_directories(self) -> List[Path]:
        return [self.settings.output_dir]

    def chown_targets(self) -> List[Path]:
        return [self.settings.output_dir]

    def build_transaction(self, candidate, original_mtime):
        return CopyTransaction(candidate, self.settings.output_dir, self.transformer,
                               self.settings.transform, original_mtime)


class RestoreMode(RunMode):
    """Copy backed-up originals over the source tree, one file at a time."""

    mode = Mode.RESTORE

    def required_directories(self) -> List[Path]:
        return [self.settings.images_dir, self.settings.backup_dir]

    def run(self, cancel_event: Optional[Event] = None,
            on_complete: OnComplete = None) -> AggregateResult:
        self.check_directories()
        cancel_event = cancel_event if cancel_event is not None else Event()
        discovery = FileDiscovery(self.settings.extensions)

        for backup in discovery.iter_files(self.settings.backup_dir):
            if cancel_event.is_set():
                self.aggregator.mark_cancelled()
                logger.warning("Restore cancelled")
                break

            transaction = RestoreTransaction(backup, self.settings.images_dir)
            if not transaction.has_destination:
                # Stale or partial backup: never create new files in the source tree
                logger.debug("No destination for %s, skipping", backup.relative_path)
                self.aggregator.record_skipped()
                continue

            outcome = transaction.run()
            if outcome.committed:
                self.aggregator.record_restored()
            else:
                self.aggregator.record(outcome)
            if on_complete is not None:
                on_complete(outcome)

        return self.aggregator.snapshot()


MODE_CLASSES = {
    Mode.OVERWRITE: OverwriteMode,
    Mode.COPY: CopyMode,
    Mode.RESTORE: RestoreMode,
}


def build_mode(settings: Settings, transformer: Optional[Transformer] = None,
               **kwargs) -> RunMode:
    """Resolve the configured mode into its strategy object."""
    return MODE_CLASSES[Mode.parse(settings.mode)](settings, transformer, **kwargs)
