#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Per-file transactions for the Media Optimizer.

Overwrite:  backup -> transform (in place) -> verify -> commit or revert,
            then restore the original timestamps.
Copy:       transform into a mirrored output tree.
Restore:    copy a backup over its counterpart in the source tree.

``run()`` never raises: every path ends in a ``TransactionOutcome``.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from ..config import TransformConfig
from ..models.candidate import Candidate
from ..models.transaction import TransactionOutcome, TransactionState
from ..storage.fs import (
    atomic_copy, atomic_move, file_size, remove_quietly, set_times, stage_copy,
)
from ..transform.adapter import Transformer
from ..utils.path import ensure_dir, mirror_path
from ..utils.size import get_kilobytes

logger = logging.getLogger(__name__)


class FileTransaction:
    """Common state handling for one candidate."""

    def __init__(self, candidate: Candidate, original_mtime: Optional[float] = None):
        self.candidate = candidate
        self.original_mtime = candidate.mtime if original_mtime is None else original_mtime
        self.state = TransactionState.PENDING
        self.outcome: Optional[TransactionOutcome] = None

    @property
    def output_path(self) -> Path:
        return self.candidate.path

    def run(self) -> TransactionOutcome:
        """Execute the transaction and log its outcome."""
        self.state = TransactionState.RUNNING
        try:
            outcome = self._execute()
        except Exception as e:
            logger.debug("Unexpected error in transaction for %s", self.candidate.path, exc_info=True)
            outcome = self._outcome(TransactionState.FAILED, error=f"{type(e).__name__}: {e}")
        self.state = outcome.state
        self.outcome = outcome
        self._log(outcome)
        return outcome

    def _execute(self) -> TransactionOutcome:
        raise NotImplementedError

    def _outcome(self, state: TransactionState, **kwargs) -> TransactionOutcome:
        kwargs.setdefault("output_path", self.output_path)
        kwargs.setdefault("original_size", self.candidate.size)
        kwargs.setdefault("original_mtime", self.original_mtime)
        return TransactionOutcome(candidate=self.candidate, state=state, **kwargs)

    def _restore_times(self, path: Path) -> None:
        set_times(path, self.candidate.atime, self.original_mtime)

    def _log(self, outcome: TransactionOutcome) -> None:
        name = self.candidate.relative_path
        if outcome.state is TransactionState.FAILED:
            logger.error("%s failed: %s", name, outcome.error)
            return
        line = "%s %skB → %skB (%d%%)"
        args = (name, get_kilobytes(outcome.original_size),
                get_kilobytes(outcome.new_size), int(outcome.size_percent))
        if outcome.state is TransactionState.REVERTED:
            logger.info(line + " larger than original, kept original", *args)
        else:
            logger.info(line, *args)


class OverwriteTransaction(FileTransaction):
    """In-place optimization guarded by a backup copy."""

    def __init__(self, candidate: Candidate, backup_dir: Path, transformer: Transformer,
                 config: TransformConfig, original_mtime: Optional[float] = None):
        super().__init__(candidate, original_mtime)
        self.backup_path = mirror_path(backup_dir, candidate.relative_path)
        # Backup, or a scratch copy beside it when an earlier backup is kept
        self.working_path = self.backup_path
        self.transformer = transformer
        self.config = config

    def _execute(self) -> TransactionOutcome:
        output = self.output_path

        # 1. Backup. An existing backup is the original from an earlier run and
        #    is never replaced; this run then works from a scratch copy.
        keep_existing = self.backup_path.is_file()
        try:
            staged = stage_copy(self.candidate.path, self.backup_path)
        except OSError as e:
            return self._outcome(TransactionState.FAILED, error=f"backup failed: {e}")
        if keep_existing:
            logger.debug("Keeping earlier backup of %s", self.candidate.relative_path)
            self.working_path = staged
        else:
            try:
                os.replace(staged, self.backup_path)
            except OSError as e:
                remove_quietly(staged)
                return self._outcome(TransactionState.FAILED, error=f"backup failed: {e}")
            self.working_path = self.backup_path
        original_size = file_size(self.working_path)

        # 2. Transform from the working copy into the original location
        result = self.transformer.transform(self.working_path, output, self.config)
        if not result.ok:
            remove_quietly(self.working_path)
            return self._outcome(TransactionState.FAILED, original_size=original_size,
                                 error=f"transform failed: {result.error}")

        # 3. Verify savings
        try:
            new_size = file_size(output)
        except OSError as e:
            return self._revert(original_size, 0, f"cannot stat output: {e}")
        bytes_saved = original_size - new_size

        if bytes_saved < 0:
            return self._revert(original_size, new_size)

        # 4. Restore metadata, 5. commit; the backup stays for restore runs
        self._restore_times(output)
        if self.working_path != self.backup_path:
            remove_quietly(self.working_path)
        return self._outcome(TransactionState.COMMITTED, original_size=original_size,
                             new_size=new_size, bytes_saved=bytes_saved,
                             backup_path=self.backup_path)

    def _revert(self, original_size: int, new_size: int,
                reason: Optional[str] = None) -> TransactionOutcome:
        """Put the working copy back in place with a single rename."""
        try:
            atomic_move(self.working_path, self.output_path)
            self._restore_times(self.output_path)
        except OSError as e:
            # Working copy is left on disk so the file can still be recovered
            return self._outcome(TransactionState.FAILED, original_size=original_size,
                                 new_size=new_size, backup_path=self.working_path,
                                 error=f"revert failed: {e}")
        if reason:
            return self._outcome(TransactionState.FAILED, original_size=original_size,
                                 error=reason)
        return self._outcome(TransactionState.REVERTED, original_size=original_size,
                             new_size=new_size)


class CopyTransaction(FileTransaction):
    """Optimize into a separate output tree; the source is read-only."""

    def __init__(self, candidate: Candidate, output_dir: Path, transformer: Transformer,
                 config: TransformConfig, original_mtime: Optional[float] = None):
        super().__init__(candidate, original_mtime)
        self.mirrored_path = mirror_path(output_dir, candidate.relative_path)
        # A format override renames the output so its extension matches the content
        if config.format:
            self._output_path = self.mirrored_path.with_suffix(f".{config.format}")
        else:
            self._output_path = self.mirrored_path
        self.transformer = transformer
        self.config = config

    @property
    def output_path(self) -> Path:
        return self._output_path

    def _execute(self) -> TransactionOutcome:
        output = self.output_path
        try:
            ensure_dir(output.parent)
        except OSError as e:
            return self._outcome(TransactionState.FAILED, error=f"cannot create {output.parent}: {e}")

        result = self.transformer.transform(self.candidate.path, output, self.config)
        if not result.ok:
            return self._outcome(TransactionState.FAILED, error=f"transform failed: {result.error}")

        new_size = file_size(output)
        bytes_saved = self.candidate.size - new_size
        if bytes_saved < 0:
            # Never let the output tree grow: ship the untouched source instead
            if output != self.mirrored_path:
                remove_quietly(output)
            atomic_copy(self.candidate.path, self.mirrored_path)
            self._restore_times(self.mirrored_path)
            return self._outcome(TransactionState.REVERTED, output_path=self.mirrored_path,
                                 new_size=new_size)

        self._restore_times(output)
        return self._outcome(TransactionState.COMMITTED, new_size=new_size,
                             bytes_saved=bytes_saved)


class RestoreTransaction(FileTransaction):
    """Copy one backup file over its counterpart in the source tree."""

    def __init__(self, backup: Candidate, images_dir: Path):
        super().__init__(backup)
        self._output_path = mirror_path(images_dir, backup.relative_path)

    @property
    def output_path(self) -> Path:
        return self._output_path

    @property
    def has_destination(self) -> bool:
        return self._output_path.is_file()

    def _execute(self) -> TransactionOutcome:
        current_size = file_size(self.output_path)
        atomic_copy(self.candidate.path, self.output_path)
        # original_size is the size being replaced, new_size the restored one
        return self._outcome(TransactionState.COMMITTED, original_size=current_size,
                             new_size=self.candidate.size)
