#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data structures for discovered files in the Media Optimizer.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Candidate:
    """A discovered file, captured with a single stat call."""
    relative_path: str  # POSIX path inside the scanned tree
    path: Path
    size: int
    mtime: float
    atime: float

    @classmethod
    def from_path(cls, root: Path, path: Path) -> 'Candidate':
        """Stat ``path`` and build a candidate relative to ``root``."""
        st = os.stat(path)
        return cls(
            relative_path=Path(path).relative_to(root).as_posix(),
            path=Path(path),
            size=st.st_size,
            mtime=st.st_mtime,
            atime=st.st_atime,
        )

    @property
    def name(self) -> str:
        return self.path.name
