#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Human-readable byte counts for log lines and the final report.
"""


def get_kilobytes(num_bytes: int) -> str:
    """Whole kilobytes with thousands separators, e.g. ``1,000``."""
    return f"{int(num_bytes / 1024):,}"


def get_megabytes(num_bytes: int) -> str:
    """Megabytes with at most two decimals, e.g. ``1.5``."""
    text = f"{num_bytes / 1024 / 1024:,.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text
