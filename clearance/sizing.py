"""
Size probing for cache directories.

Sizes are summed from ``lstat`` results of every non-directory entry under a
path and rendered with binary (1024) unit steps. Probes never raise for the
expected special cases; they return one of the sentinel labels below instead.
"""

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"
NOT_APPLICABLE = "N/A"
NOT_INSTALLED = "Not installed"
DOCKER_NOT_RUNNING = "Docker not running"
SIZE_QUERY_FAILED = "Error getting size"
SIZE_ERROR = "Error"

_UNIT = 1024
_UNIT_LETTERS = "KMGTPE"

# Sentinels that mean "nothing to measure" rather than "measuring broke"
_INFO_SENTINELS = {NOT_FOUND, NOT_APPLICABLE, NOT_INSTALLED, DOCKER_NOT_RUNNING}
_ERROR_SENTINELS = {SIZE_ERROR, SIZE_QUERY_FAILED}

PathLike = Union[str, "os.PathLike[str]"]


def format_size(size: int) -> str:
    """Render a byte count as a human-readable label.

    Examples:
        >>> format_size(1023)
        '1023 B'
        >>> format_size(1536)
        '1.5 KB'
    """
    if size < _UNIT:
        return f"{size} B"
    div, exp = _UNIT, 0
    n = size // _UNIT
    while n >= _UNIT:
        div *= _UNIT
        exp += 1
        n //= _UNIT
    return f"{size / div:.1f} {_UNIT_LETTERS[exp]}B"


def _raise_walk_error(error: OSError) -> None:
    raise error


def dir_size(path: PathLike) -> int:
    """Sum the sizes of every non-directory entry reachable under ``path``.

    Directory symlinks are not followed; the link itself is counted like any
    other non-directory entry. Walk errors propagate as ``OSError``.
    """
    root = Path(path)
    root_stat = root.lstat()
    if not root.is_dir() or root.is_symlink():
        return root_stat.st_size

    total = 0
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        for name in filenames:
            total += os.lstat(os.path.join(dirpath, name)).st_size
        for name in dirnames:
            full_path = os.path.join(dirpath, name)
            if os.path.islink(full_path):
                total += os.lstat(full_path).st_size
    return total


def size_label(path: PathLike) -> str:
    """Return the formatted size of ``path`` or a sentinel label."""
    if not os.path.lexists(path):
        return NOT_FOUND
    try:
        return format_size(dir_size(path))
    except OSError as e:
        logger.warning("Could not measure %s: %s", path, e)
        return SIZE_ERROR


def is_sentinel(label: str) -> bool:
    """True for labels that stand in for a size (missing, N/A, tool absent)."""
    return label in _INFO_SENTINELS


def is_error_label(label: str) -> bool:
    return label in _ERROR_SENTINELS
