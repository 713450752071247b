"""Tests for the shared filesystem helpers."""
import os
import shutil
import stat

import pytest

from clearance.cleaners.fs import _clear_readonly, is_in_use, remove_path

fd_based_rmtree = pytest.mark.skipif(
    not shutil.rmtree.avoids_symlink_attacks, reason="rmtree only opens directories with os.open here"
)


class TestRemovePath:
    def test_removes_nested_directory(self, cache_dir):
        remove_path(cache_dir)
        assert not cache_dir.exists()

    def test_removes_file(self, tmp_path):
        target = tmp_path / "report.wer"
        target.write_text("data")
        remove_path(target)
        assert not target.exists()

    def test_removes_read_only_entries(self, tmp_path):
        root = tmp_path / "ro"
        root.mkdir()
        locked = root / "locked.tmp"
        locked.write_text("data")
        os.chmod(locked, stat.S_IREAD)
        remove_path(root)
        assert not root.exists()

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            remove_path(tmp_path / "gone")

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need extra rights on Windows")
    def test_directory_symlink_removes_link_only(self, tmp_path, cache_dir):
        link = tmp_path / "link"
        link.symlink_to(cache_dir, target_is_directory=True)
        remove_path(link)
        assert not link.exists()
        assert cache_dir.exists()

    @fd_based_rmtree
    def test_unreadable_subdirectory_raises_permission_error(self, cache_dir, deny_dir_open):
        mode = (cache_dir / "index-v5").stat().st_mode
        with deny_dir_open("index-v5"):
            with pytest.raises(PermissionError):
                remove_path(cache_dir)
        assert (cache_dir / "index-v5").stat().st_mode == mode


class TestClearReadonly:
    def test_retries_denied_unlink(self, tmp_path):
        target = tmp_path / "locked.tmp"
        target.write_text("data")
        os.chmod(target, stat.S_IREAD)

        _clear_readonly(os.unlink, str(target), PermissionError("denied"))

        assert not target.exists()

    def test_accepts_exc_info_tuple(self, tmp_path):
        target = tmp_path / "locked.tmp"
        target.write_text("data")
        error = PermissionError("denied")

        _clear_readonly(os.remove, str(target), (PermissionError, error, None))

        assert not target.exists()

    def test_reraises_failures_it_cannot_retry(self, tmp_path):
        error = PermissionError("denied")
        with pytest.raises(PermissionError) as exc_info:
            _clear_readonly(os.open, str(tmp_path), error)
        assert exc_info.value is error

    def test_reraises_non_permission_errors(self, tmp_path):
        target = tmp_path / "busy.tmp"
        target.write_text("data")
        mode = target.stat().st_mode
        with pytest.raises(OSError):
            _clear_readonly(os.unlink, str(target), OSError("device busy"))
        assert target.stat().st_mode == mode


class TestIsInUse:
    def test_free_file(self, tmp_path):
        target = tmp_path / "free.tmp"
        target.write_text("data")
        assert is_in_use(target) is False

    def test_directories_are_never_in_use(self, cache_dir):
        assert is_in_use(cache_dir) is False

    def test_unopenable_file_counts_as_in_use(self, tmp_path):
        assert is_in_use(tmp_path / "vanished.tmp") is True
