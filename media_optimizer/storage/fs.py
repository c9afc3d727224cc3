#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Filesystem operations used by file transactions.

Every write that replaces an existing file goes through a temporary file in the
destination directory followed by ``os.replace`` so a crash never leaves a
half-written file behind.
"""

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Tuple

from ..utils.path import ensure_dir

logger = logging.getLogger(__name__)


def temp_path_for(dst: Path) -> Path:
    """Reserve a hidden temporary file next to ``dst``."""
    dst = Path(dst)
    fd, tmp = tempfile.mkstemp(prefix=f".{dst.name}.", suffix=".tmp", dir=dst.parent)
    os.close(fd)
    return Path(tmp)


def stage_copy(src: Path, dst: Path) -> Path:
    """
    Copy ``src`` into a fresh temporary file beside ``dst``.

    ``dst`` itself is never touched; on failure the temporary file is removed
    and the error propagates.
    """
    dst = Path(dst)
    ensure_dir(dst.parent)
    tmp = temp_path_for(dst)
    try:
        shutil.copy2(src, tmp)
    except BaseException:
        remove_quietly(tmp)
        raise
    return tmp


def atomic_copy(src: Path, dst: Path) -> Path:
    """Copy ``src`` over ``dst`` atomically."""
    dst = Path(dst)
    tmp = stage_copy(src, dst)
    try:
        os.replace(tmp, dst)
    except BaseException:
        remove_quietly(tmp)
        raise
    return dst


def atomic_move(src: Path, dst: Path) -> Path:
    """
    Move ``src`` over ``dst`` in one step.

    A plain rename when both live on the same filesystem; otherwise an atomic
    copy followed by removal of ``src``.
    """
    dst = Path(dst)
    try:
        os.replace(src, dst)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug("Cross-device move %s -> %s, copying instead", src, dst)
        atomic_copy(src, dst)
        os.unlink(src)
    return dst


def file_size(path: Path) -> int:
    return os.stat(path).st_size


def get_times(path: Path) -> Tuple[float, float]:
    """Return (atime, mtime) of ``path``."""
    st = os.stat(path)
    return st.st_atime, st.st_mtime


def set_times(path: Path, atime: float, mtime: float) -> None:
    os.utime(path, (atime, mtime))


def remove_quietly(path: Path) -> bool:
    """Delete ``path`` if present; log instead of raising on failure."""
    try:
        Path(path).unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
