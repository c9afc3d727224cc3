#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path utility functions for the Media Optimizer.
"""

from pathlib import Path


def ensure_dir(p: Path) -> None:
    """Ensure directory exists, creating it if necessary."""
    p.mkdir(parents=True, exist_ok=True)


def mirror_path(root: Path, relative_path: str) -> Path:
    """Map a path relative to one tree onto another tree."""
    return Path(root) / Path(relative_path)
