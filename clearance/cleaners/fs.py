"""Filesystem primitives shared by the directory-backed cleaners."""

import os
import shutil
import stat
import sys
from pathlib import Path


# Only these take a bare path and can succeed once the read-only bit is cleared
_RETRYABLE = {os.unlink, os.remove, os.rmdir}


def _clear_readonly(func, path, exc) -> None:
    """rmtree error handler: clear the read-only bit and retry the removal once.

    ``exc`` is the exception itself (``onexc``) or an ``exc_info`` tuple
    (``onerror``). Anything other than a denied unlink/rmdir is re-raised.
    """
    error = exc[1] if isinstance(exc, tuple) else exc
    if func not in _RETRYABLE or not isinstance(error, PermissionError):
        raise error
    # Add the write bit only; read and search bits stay as they were
    os.chmod(path, os.lstat(path).st_mode | stat.S_IWRITE)
    func(path)


def remove_path(path: Path) -> None:
    """Recursively delete ``path``, whether it is a directory, file or symlink.

    Raises:
        FileNotFoundError: The entry no longer exists.
        PermissionError: The entry (or something below it) is protected.
        OSError: Any other removal failure.
    """
    if path.is_dir() and not path.is_symlink():
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_clear_readonly)
        else:
            shutil.rmtree(path, onerror=_clear_readonly)
    else:
        path.unlink()


def is_in_use(path: Path) -> bool:
    """Best-effort check whether a regular file is held open by another process.

    Opens the file read-write and closes it straight away; on Windows that fails
    for files locked by a running program. Directories are never reported as
    in use. The answer can be stale by the time the caller acts on it.
    """
    if path.is_dir() or path.is_symlink():
        return False
    try:
        with open(path, "r+b"):
            pass
    except OSError:
        return True
    return False
