"""Utility functions for the Media Optimizer."""

from .time import format_elapsed, utc_now_str
from .path import ensure_dir, mirror_path
from .size import get_kilobytes, get_megabytes

__all__ = ['utc_now_str', 'format_elapsed', 'ensure_dir', 'mirror_path', 'get_kilobytes', 'get_megabytes']
