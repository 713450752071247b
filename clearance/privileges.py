"""
Privilege checks gating a cleanup run.

The question the cleaners actually need answered is "may this process delete
from OS-protected cache directories". Each platform answers it differently,
so the check sits behind a small interface with one implementation per
platform. When no reliable signal exists the process is assumed unprivileged.
"""

import ctypes
import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional

from clearance.config import is_windows
from clearance.errors import AdminRequired

logger = logging.getLogger(__name__)

ADMIN_MESSAGE = "this program requires administrator privileges"

# Raw disk handles only open for elevated processes
RAW_DEVICE_PATH = "\\\\.\\PHYSICALDRIVE0"


class PrivilegeGate(ABC):
    @abstractmethod
    def is_elevated(self) -> bool:
        """Return True when the process can touch OS-protected caches."""

    def check(self) -> None:
        """Raise AdminRequired unless the process is elevated."""
        if not self.is_elevated():
            raise AdminRequired(ADMIN_MESSAGE)


class NullPrivilegeGate(PrivilegeGate):
    """Platforms where none of the cleaners need elevation."""

    def is_elevated(self) -> bool:
        return True


class WindowsPrivilegeGate(PrivilegeGate):
    """Administrator check for Windows.

    Asks ``shell32.IsUserAnAdmin`` first and falls back to opening the first
    physical drive, which only succeeds for elevated processes.
    """

    def is_elevated(self) -> bool:
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError) as e:
            logger.debug("IsUserAnAdmin unavailable (%s), trying raw device access", e)
        return self._can_open_raw_device()

    def _can_open_raw_device(self) -> bool:
        try:
            with open(RAW_DEVICE_PATH, "rb"):
                return True
        except OSError:
            return False


def default_privilege_gate(platform: Optional[str] = None) -> PrivilegeGate:
    if is_windows(platform or sys.platform):
        return WindowsPrivilegeGate()
    return NullPrivilegeGate()
