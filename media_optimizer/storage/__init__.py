"""Filesystem and ownership helpers for the Media Optimizer."""

from .fs import (
    atomic_copy, atomic_move, file_size, get_times, remove_quietly,
    set_times, stage_copy, temp_path_for,
)
from .ownership import chown_recursive

__all__ = [
    'atomic_copy',
    'atomic_move',
    'file_size',
    'get_times',
    'remove_quietly',
    'set_times',
    'stage_copy',
    'temp_path_for',
    'chown_recursive',
]
