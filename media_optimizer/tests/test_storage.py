#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for filesystem helpers and ownership normalization.
"""

import errno
import os
from unittest.mock import patch

import pytest

from media_optimizer.storage.fs import (
    atomic_copy, atomic_move, get_times, remove_quietly, set_times, stage_copy,
)
from media_optimizer.storage.ownership import chown_recursive
from media_optimizer.tests.fixtures.tree_setup import FIXED_ATIME, FIXED_MTIME, write_file


class TestFileOperations:

    def test_stage_copy_leaves_destination_alone(self, tmp_path):
        data = write_file(tmp_path / "src.jpg", 64)
        existing = write_file(tmp_path / "a" / "dst.jpg", 10)
        staged = stage_copy(tmp_path / "src.jpg", tmp_path / "a" / "dst.jpg")

        assert staged.parent == tmp_path / "a"
        assert staged.suffix == ".tmp"
        assert staged.read_bytes() == data
        assert staged.stat().st_mtime == FIXED_MTIME
        assert (tmp_path / "a" / "dst.jpg").read_bytes() == existing

    def test_stage_copy_creates_parents(self, tmp_path):
        write_file(tmp_path / "src.jpg", 8)
        staged = stage_copy(tmp_path / "src.jpg", tmp_path / "x" / "y" / "dst.jpg")
        assert staged.parent == tmp_path / "x" / "y"

    def test_stage_copy_failure_leaves_no_temp(self, tmp_path):
        (tmp_path / "out").mkdir()
        with pytest.raises(FileNotFoundError):
            stage_copy(tmp_path / "missing.jpg", tmp_path / "out" / "dst.jpg")
        assert list((tmp_path / "out").iterdir()) == []

    def test_atomic_copy_replaces_existing(self, tmp_path):
        data = write_file(tmp_path / "src.jpg", 64)
        write_file(tmp_path / "dst.jpg", 10)
        atomic_copy(tmp_path / "src.jpg", tmp_path / "dst.jpg")
        assert (tmp_path / "dst.jpg").read_bytes() == data
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dst.jpg", "src.jpg"]

    def test_atomic_move_renames(self, tmp_path):
        data = write_file(tmp_path / "src.jpg", 64)
        write_file(tmp_path / "dst.jpg", 10)
        atomic_move(tmp_path / "src.jpg", tmp_path / "dst.jpg")
        assert (tmp_path / "dst.jpg").read_bytes() == data
        assert not (tmp_path / "src.jpg").exists()

    def test_atomic_move_cross_device_fallback(self, tmp_path):
        data = write_file(tmp_path / "src.jpg", 64)
        real_replace = os.replace
        calls = []

        def replace(src, dst):
            calls.append(src)
            if len(calls) == 1:
                raise OSError(errno.EXDEV, "Invalid cross-device link")
            return real_replace(src, dst)

        with patch("media_optimizer.storage.fs.os.replace", side_effect=replace):
            atomic_move(tmp_path / "src.jpg", tmp_path / "dst.jpg")

        assert (tmp_path / "dst.jpg").read_bytes() == data
        assert not (tmp_path / "src.jpg").exists()

    def test_atomic_move_other_errors_propagate(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            atomic_move(tmp_path / "missing.jpg", tmp_path / "dst.jpg")

    def test_times_round_trip(self, tmp_path):
        write_file(tmp_path / "x.jpg", 1)
        assert get_times(tmp_path / "x.jpg") == (FIXED_ATIME, FIXED_MTIME)
        set_times(tmp_path / "x.jpg", FIXED_ATIME + 5, FIXED_MTIME + 5)
        assert get_times(tmp_path / "x.jpg") == (FIXED_ATIME + 5, FIXED_MTIME + 5)

    def test_remove_quietly(self, tmp_path):
        write_file(tmp_path / "x.jpg", 1)
        assert remove_quietly(tmp_path / "x.jpg")
        assert not remove_quietly(tmp_path / "x.jpg")


class TestChown:

    @patch("media_optimizer.storage.ownership.subprocess.run")
    def test_runs_chown_on_existing_dirs(self, mock_run, tmp_path):
        (tmp_path / "backup").mkdir()
        targets = chown_recursive("1000:1000", [tmp_path / "backup", tmp_path / "absent"])

        assert targets == [str(tmp_path / "backup")]
        mock_run.assert_called_once_with(
            ["chown", "-R", "1000:1000", str(tmp_path / "backup")],
            check=True, capture_output=True, text=True,
        )

    @patch("media_optimizer.storage.ownership.subprocess.run")
    def test_nothing_to_do(self, mock_run, tmp_path):
        assert chown_recursive("1000", [tmp_path / "absent"]) == []
        mock_run.assert_not_called()
