#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File discovery logic for the Media Optimizer.
Handles recursive scanning of directories to find image files.
"""

import logging
import os
import re
import time
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from ..models.candidate import Candidate

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^}]*)\}")


def parse_extensions(text: str) -> Tuple[str, ...]:
    """
    Parse an extension list into a tuple of suffixes without dots.

    Accepts ``jpg,JPG,png``, ``.jpg .png`` and glob forms such as
    ``**/*.{jpg,png}``. Order is preserved and duplicates dropped; case is
    kept because matching is case-sensitive.
    """
    brace = _BRACE_RE.search(text)
    if brace:
        text = brace.group(1)
    seen = []
    for part in re.split(r"[,\s]+", text):
        part = part.strip().lstrip("*").lstrip(".")
        if part and part not in seen:
            seen.append(part)
    return tuple(seen)


class FileDiscovery:
    """Recursive, case-sensitive discovery of files by extension."""

    def __init__(self, extensions: Iterable[str], exclude: Iterable[Path] = ()):
        self.suffixes = tuple(f".{ext}" for ext in extensions)
        self.exclude: Set[Path] = set()
        for path in exclude:
            try:
                self.exclude.add(Path(path).resolve())
            except OSError:
                continue
        self.stats: Dict[str, int] = {}

    def matches(self, filename: str) -> bool:
        """Check if a filename ends with one of the configured extensions."""
        return filename.endswith(self.suffixes)

    def iter_files(self, root: Path) -> Iterator[Candidate]:
        """
        Lazily yield candidates under ``root``.

        Scanning is streamed so callers can start dispatching work before the
        walk completes. Symlinks are not followed; excluded and unreadable
        directories are skipped.
        """
        root = Path(root)
        self.stats = {'total_scanned': 0, 'matched': 0, 'permission_errors': 0}
        yield from self._scan_recursive(root, root)

    def discover(self, root: Path) -> List[Candidate]:
        """Full synchronous scan, sorted by relative path."""
        start_time = time.perf_counter()
        candidates = sorted(self.iter_files(root), key=lambda c: c.relative_path)
        elapsed = time.perf_counter() - start_time
        logger.debug("Discovered %d files in %s (%d scanned, %.1fs)",
                     len(candidates), root, self.stats['total_scanned'], elapsed)
        return candidates

    def _scan_recursive(self, root: Path, path: Path) -> Iterator[Candidate]:
        """Recursively scan directory for matching files."""
        try:
            with os.scandir(path) as entries:
                # Materialize so the directory handle is not held across yields
                entries = sorted(entries, key=lambda e: e.name)
        except (PermissionError, OSError) as e:
            self.stats['permission_errors'] += 1
            logger.warning("Cannot read directory %s: %s", path, e)
            return

        for entry in entries:
            self.stats['total_scanned'] += 1
            try:
                if entry.is_dir(follow_symlinks=False):
                    if self._is_excluded(entry.path):
                        logger.debug("Skipping excluded directory %s", entry.path)
                        continue
                    yield from self._scan_recursive(root, Path(entry.path))
                elif entry.is_file(follow_symlinks=False) and self.matches(entry.name):
                    candidate = Candidate.from_path(root, Path(entry.path))
                    self.stats['matched'] += 1
                    yield candidate
            except OSError as e:
                self.stats['permission_errors'] += 1
                logger.warning("Cannot stat %s: %s", entry.path, e)

    def _is_excluded(self, path: str) -> bool:
        if not self.exclude:
            return False
        return Path(path).resolve() in self.exclude


def discover_files(root: Path, extensions: Iterable[str], **kwargs) -> List[Candidate]:
    """Convenience function for a one-shot full scan."""
    return FileDiscovery(extensions, **kwargs).discover(root)
