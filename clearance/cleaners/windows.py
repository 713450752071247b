"""
Windows temp and error-report cleaners.

Three cache kinds share one policy shape:
    winsxs     %WINDIR%\\WinSxS\\Temp (servicing stack scratch space)
    wintemp    the user's temp directory
    winchunks  %LOCALAPPDATA%\\Microsoft\\Windows\\WER\\ReportQueue

For winsxs and winchunks an elevated PowerShell pass runs first; its failure
is only logged. A manual pass over the direct children always follows and
decides the outcome. Entries held by Windows are expected to survive, so a
run that removes some but not all entries still succeeds.
"""

import logging
import os
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional

from clearance.cleaners.base import CacheCleaner, CacheKind, CleanOutcome
from clearance.cleaners.fs import is_in_use, remove_path
from clearance.config import is_windows
from clearance.errors import CleanupFailed, CommandError, NotSupported
from clearance.process import CommandRunner
from clearance.sizing import NOT_APPLICABLE, size_label
from clearance.ui.console import console

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TempPolicy:
    """Per-kind knobs for the shared cleanup routine."""

    label: str
    protected: FrozenSet[str] = frozenset()
    use_script: bool = False
    check_in_use: bool = False
    missing_ok: bool = False
    partial_note: str = ""


POLICIES = {
    CacheKind.WINSXS: TempPolicy(
        label="WinSxS Temp folder",
        protected=frozenset({"inflight", "pendingdeletes", "pendingrenames"}),
        use_script=True,
        partial_note=(
            "Some files could not be deleted due to system protection. "
            "This is normal for active Windows Update operations."
        ),
    ),
    CacheKind.WINTEMP: TempPolicy(
        label="Windows temp folder",
        check_in_use=True,
        partial_note="Some files could not be deleted as they are currently in use.",
    ),
    CacheKind.WINCHUNKS: TempPolicy(
        label="Windows error reporting queue",
        use_script=True,
        missing_ok=True,
        partial_note="Some files could not be deleted due to system protection.",
    ),
}

_SCRIPT_TEMPLATE = """
$ErrorActionPreference = 'Stop'
$target = '{target}'
$protected = @({protected})
if (Test-Path -LiteralPath $target) {{
    Get-ChildItem -LiteralPath $target -Force |
        Where-Object {{ $protected -notcontains $_.Name }} |
        Remove-Item -Force -Recurse
}}
"""


def _ps_quote(value: str) -> str:
    return value.replace("'", "''")


def build_cleanup_script(target: Path, protected: FrozenSet[str]) -> str:
    """PowerShell that empties ``target`` except for the protected names."""
    names = ", ".join(f"'{_ps_quote(name)}'" for name in sorted(protected))
    return _SCRIPT_TEMPLATE.format(target=_ps_quote(str(target)), protected=names)


@dataclass
class _Tally:
    total: int = 0
    failed: int = 0
    skipped: int = 0


class WindowsCleaner(CacheCleaner):
    """Cleaner for one of the Windows temp/report locations."""

    def __init__(
        self,
        kind: CacheKind,
        target: Path,
        runner: Optional[CommandRunner] = None,
        platform: Optional[str] = None,
        powershell: str = "powershell",
    ):
        if kind not in POLICIES:
            raise ValueError(f"unknown Windows cleaner type: {kind.value}")
        self.kind = kind
        self.target = Path(target)
        self.runner = runner or CommandRunner()
        self.platform = platform or sys.platform
        self.powershell = powershell

    @property
    def policy(self) -> TempPolicy:
        return POLICIES[self.kind]

    def clean(self, cancel: Optional[threading.Event] = None) -> CleanOutcome:
        if not is_windows(self.platform):
            raise NotSupported(f"{self.name} cleanup", "only available on Windows")

        policy = self.policy
        console.tagged(self.name, f"Attempting to clean {policy.label}...")
        if policy.missing_ok and not self.target.exists():
            console.tagged(self.name, f"{policy.label} not found, nothing to clean.", "success")
            return CleanOutcome(self.name, "nothing", message=f"{self.target} does not exist")

        if policy.use_script:
            self._run_script(cancel)

        console.tagged(self.name, "Attempting manual cleanup...")
        tally = self._manual_pass()
        return self._conclude(tally)

    def get_size(self, cancel: Optional[threading.Event] = None) -> str:
        if not is_windows(self.platform):
            return NOT_APPLICABLE
        return size_label(self.target)

    def _run_script(self, cancel: Optional[threading.Event]) -> None:
        console.tagged(self.name, "Attempting to clean using PowerShell...")
        script = build_cleanup_script(self.target, self.policy.protected)
        try:
            self.runner.run(
                [self.powershell, "-NoProfile", "-NonInteractive", "-Command", script],
                cancel=cancel,
            )
        except CommandError as e:
            console.tagged(self.name, f"PowerShell cleanup encountered issues: {e}", "warning")
            logger.warning("PowerShell pass for %s failed: %s", self.name, e)

    def _manual_pass(self) -> _Tally:
        policy = self.policy
        try:
            with os.scandir(self.target) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise CleanupFailed(self.name, f"failed to read {policy.label}: {e}") from e

        tally = _Tally()
        for entry in entries:
            path = Path(entry.path)
            if entry.name.casefold() in policy.protected:
                tally.skipped += 1
                console.tagged(self.name, f"Skipping system-protected folder: {entry.name}", "secondary")
                continue

            tally.total += 1
            if policy.check_in_use and is_in_use(path):
                tally.failed += 1
                logger.debug("Skipping in-use file: %s", path)
                continue

            try:
                remove_path(path)
            except FileNotFoundError:
                # Removed by someone else between listing and deletion
                tally.failed += 1
                logger.debug("Entry vanished before removal: %s", path)
            except PermissionError:
                tally.failed += 1
                logger.debug("Access denied for %s (expected for protected or in-use files)", path)
            except OSError as e:
                tally.failed += 1
                console.tagged(self.name, f"Failed to remove: {path} ({e})", "warning")
                logger.warning("Failed to remove %s: %s", path, e)
            else:
                logger.debug("Removed %s", path)
        return tally

    def _conclude(self, tally: _Tally) -> CleanOutcome:
        policy = self.policy
        outcome = CleanOutcome(
            self.name, "manual", total=tally.total, failed=tally.failed, skipped=tally.skipped
        )
        if tally.failed == 0:
            outcome.message = f"{policy.label} cleaned successfully"
            console.tagged(self.name, f"{outcome.message}.", "success")
            return outcome

        if tally.failed < tally.total:
            outcome.message = f"{outcome.removed} of {tally.total} items removed"
            console.tagged(
                self.name,
                f"Partial cleanup complete. {outcome.removed} of {tally.total} items removed successfully.",
                "warning",
            )
            console.secondary(policy.partial_note)
            return outcome

        raise CleanupFailed(self.name, f"failed to clean any files in {policy.label}")
