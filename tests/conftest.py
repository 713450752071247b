import errno
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

# Add parent directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from clearance.process import CommandResult, CommandRunner


@pytest.fixture
def runner():
    """CommandRunner double: every tool is on PATH and every command succeeds."""
    mock = MagicMock(spec=CommandRunner)
    mock.which.side_effect = lambda name: f"/usr/bin/{name}"
    mock.run.side_effect = lambda command, **kwargs: CommandResult(command=list(command), returncode=0)
    return mock


@pytest.fixture
def cache_dir(tmp_path):
    """A small cache tree with nested content."""
    root = tmp_path / "cache"
    (root / "content-v2" / "sha512").mkdir(parents=True)
    (root / "content-v2" / "sha512" / "blob").write_bytes(b"x" * 2048)
    (root / "index-v5").mkdir()
    (root / "index-v5" / "entry").write_bytes(b"y" * 100)
    return root


@pytest.fixture
def deny_dir_open():
    """Return a patcher that makes ``os.open`` fail with EACCES for paths ending in ``name``.

    This is what rmtree sees for a directory it cannot descend into.
    """
    real_open = os.open

    def patcher(name):
        def fake_open(path, flags, *args, **kwargs):
            if os.fspath(path).endswith(name):
                raise PermissionError(errno.EACCES, "Permission denied", os.fspath(path))
            return real_open(path, flags, *args, **kwargs)

        return patch("os.open", side_effect=fake_open)

    return patcher
