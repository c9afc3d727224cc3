#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Run command: the CLI-facing wrapper around a mode.

It prints the banner, routes interrupts to cancellation, drives the optional
progress bar, normalizes ownership once the run is over and prints the final
totals.
"""

import logging
import subprocess
import time
from threading import Event
from typing import Optional

from tqdm import tqdm

from ..config import Settings
from ..models.result import AggregateResult
from ..pipeline.modes import Mode, RunMode, build_mode
from ..pipeline.scheduler import interrupt_cancels
from ..storage.ownership import chown_recursive
from ..transform.adapter import Transformer
from ..utils.size import get_megabytes
from ..utils.time import format_elapsed, utc_now_str

logger = logging.getLogger(__name__)


class RunCommand:
    def __init__(self, settings: Settings, transformer: Optional[Transformer] = None,
                 mode: Optional[RunMode] = None):
        self.settings = settings
        self.mode = mode or build_mode(settings, transformer)

    def execute(self, as_json: bool = False) -> AggregateResult:
        """Run the configured mode to completion (or cancellation)."""
        self._log_header()

        # Fail fast on missing trees before any signal handling or progress output
        self.mode.check_directories()

        start_time = time.perf_counter()
        cancel_event = Event()
        with interrupt_cancels(cancel_event), tqdm(
            desc=self.mode.mode.value, unit="file",
            disable=not self.settings.progress or as_json,
        ) as progress:
            result = self.mode.run(cancel_event, on_complete=lambda _outcome: progress.update(1))

        if self.settings.owner:
            self._apply_owner()

        logger.info("Finished in %s", format_elapsed(time.perf_counter() - start_time))
        if not as_json:
            self._print_summary(result)
        return result

    def _apply_owner(self):
        """Hand written trees to the configured owner; failures do not void the run."""
        try:
            chown_recursive(self.settings.owner, self.mode.chown_targets())
        except subprocess.CalledProcessError as e:
            logger.error("Could not change owner to %s: %s %s", self.settings.owner, e,
                         (e.stderr or "").strip())
        except OSError as e:
            logger.error("Could not change owner to %s: %s", self.settings.owner, e)

    def _log_header(self):
        s = self.settings
        logger.info("Media optimizer %s run started at %s", s.mode, utc_now_str())
        logger.debug("Images: %s, backup: %s, output: %s", s.images_dir, s.backup_dir, s.output_dir)
        logger.debug("Extensions: %s", ",".join(s.extensions))
        logger.debug("Min size: %s bytes, max age: %s s", s.eligibility.min_size, s.eligibility.max_age)
        logger.debug("Transform: %s", s.transform)
        logger.debug("Workers: %d", s.workers)

    def _print_summary(self, result: AggregateResult):
        print()
        if self.mode.mode is Mode.RESTORE:
            print(f"Total: {result.total_files} images restored")
        elif result.total_bytes_saved and result.total_files:
            print(f"Total: {get_megabytes(result.total_bytes_saved)}MB saved "
                  f"from {result.total_files} images")
        else:
            print("Total: no images were optimized")

        if result.reverted:
            print(f"  - Kept original (optimized file was larger): {result.reverted:,}")
        if result.failed:
            print(f"  - Failed: {result.failed:,}")
        if result.cancelled:
            print(f"  - Interrupted: {result.skipped:,} queued files not started")
