#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for report formatting helpers.
"""

from pathlib import Path

import pytest

from media_optimizer.utils import format_elapsed, get_kilobytes, get_megabytes, mirror_path


class TestSizeFormatting:

    @pytest.mark.parametrize("num_bytes,expected", [
        (0, "0"), (1023, "0"), (700 * 1024, "700"), (1000 * 1024, "1,000"),
    ])
    def test_kilobytes(self, num_bytes, expected):
        assert get_kilobytes(num_bytes) == expected

    @pytest.mark.parametrize("num_bytes,expected", [
        (0, "0"), (512 * 1024, "0.5"), (3 * 1024 * 1024, "3"), (1288490, "1.23"),
    ])
    def test_megabytes(self, num_bytes, expected):
        assert get_megabytes(num_bytes) == expected


class TestElapsed:

    @pytest.mark.parametrize("seconds,expected", [
        (4.0, "4.0s"), (65, "1m 05s"), (3725, "1h 02m 05s"),
    ])
    def test_format_elapsed(self, seconds, expected):
        assert format_elapsed(seconds) == expected


def test_mirror_path_keeps_nesting():
    assert mirror_path(Path("/backup"), "a/b/c.jpg") == Path("/backup/a/b/c.jpg")
