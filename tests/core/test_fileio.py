"""Tests for slotrun.core.fileio atomic writes."""

from unittest.mock import patch

import pytest

from slotrun.core.fileio import atomic_write_bytes, atomic_write_text


class TestAtomicWrite:
    def test_creates_file(self, tmp_path):
        target = tmp_path / "out.csv"
        atomic_write_text(target, "a,b\n")
        assert target.read_text() == "a,b\n"

    def test_overwrites_existing(self, tmp_path):
        target = tmp_path / "out.csv"
        target.write_bytes(b"old")
        atomic_write_bytes(target, b"new")
        assert target.read_bytes() == b"new"

    def test_no_temp_files_left_behind(self, tmp_path):
        atomic_write_text(tmp_path / "out.csv", "x")
        assert [p.name for p in tmp_path.iterdir()] == ["out.csv"]

    def test_failed_replace_keeps_old_content_and_cleans_up(self, tmp_path):
        target = tmp_path / "out.csv"
        target.write_text("old")
        with patch("slotrun.core.fileio.os.replace", side_effect=OSError("nope")):
            with pytest.raises(OSError):
                atomic_write_text(target, "new")
        assert target.read_text() == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["out.csv"]

    def test_missing_parent_raises(self, tmp_path):
        with pytest.raises(OSError):
            atomic_write_text(tmp_path / "missing" / "out.csv", "x")
