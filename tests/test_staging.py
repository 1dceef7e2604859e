"""
Tests for gnuplot_bridge.staging: the staged-file registry.

Run with: python -m pytest tests/test_staging.py -v
"""

import os

import pytest

from gnuplot_bridge.errors import TempFileCreateError, TooManyTempFilesError
from gnuplot_bridge.staging import StagedFileRegistry


def _create_closed(registry):
    fd, path = registry.create()
    os.close(fd)
    return path


class TestCreate:
    def test_creates_prefixed_file_in_directory(self, tmp_path):
        registry = StagedFileRegistry(max_files=4, directory=str(tmp_path))
        path = _create_closed(registry)

        assert os.path.dirname(path) == str(tmp_path)
        assert os.path.basename(path).startswith("gnuplot-i-")
        assert os.path.exists(path)
        assert path in registry
        assert len(registry) == 1

    def test_names_are_unique(self, tmp_path):
        registry = StagedFileRegistry(max_files=10, directory=str(tmp_path))
        paths = {_create_closed(registry) for _ in range(5)}
        assert len(paths) == 5

    def test_order_is_preserved(self, tmp_path):
        registry = StagedFileRegistry(max_files=10, directory=str(tmp_path))
        paths = [_create_closed(registry) for _ in range(3)]
        assert registry.paths == paths
        assert list(registry) == paths

    def test_tmpdir_env_used_when_no_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TMPDIR", str(tmp_path))
        registry = StagedFileRegistry(max_files=4)
        path = _create_closed(registry)
        assert os.path.dirname(path) == str(tmp_path)

    def test_missing_directory_raises(self, tmp_path):
        registry = StagedFileRegistry(max_files=4, directory=str(tmp_path / "missing"))
        with pytest.raises(TempFileCreateError):
            registry.create()
        assert len(registry) == 0


class TestCapacity:
    def test_holds_at_most_max_minus_one(self, tmp_path):
        registry = StagedFileRegistry(max_files=3, directory=str(tmp_path))
        _create_closed(registry)
        _create_closed(registry)
        assert registry.is_full

        with pytest.raises(TooManyTempFilesError) as excinfo:
            registry.create()
        assert excinfo.value.limit == 3
        assert len(registry) == 2
        assert len(list(tmp_path.iterdir())) == 2

    def test_capacity_freed_by_clear(self, tmp_path):
        registry = StagedFileRegistry(max_files=2, directory=str(tmp_path))
        _create_closed(registry)
        registry.clear()
        assert not registry.is_full
        _create_closed(registry)

    def test_too_small_capacity_rejected(self):
        with pytest.raises(ValueError):
            StagedFileRegistry(max_files=1)


class TestRemoval:
    def test_clear_deletes_files(self, tmp_path):
        registry = StagedFileRegistry(max_files=8, directory=str(tmp_path))
        for _ in range(3):
            _create_closed(registry)

        assert registry.clear() == 3
        assert len(registry) == 0
        assert list(tmp_path.iterdir()) == []

    def test_clear_tolerates_already_deleted_files(self, tmp_path):
        registry = StagedFileRegistry(max_files=8, directory=str(tmp_path))
        path = _create_closed(registry)
        os.remove(path)
        assert registry.clear() == 1
        assert len(registry) == 0

    def test_discard_one(self, tmp_path):
        registry = StagedFileRegistry(max_files=8, directory=str(tmp_path))
        keep = _create_closed(registry)
        drop = _create_closed(registry)

        registry.discard(drop)
        assert registry.paths == [keep]
        assert not os.path.exists(drop)
        assert os.path.exists(keep)
