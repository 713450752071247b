"""
Package-manager cache cleaners (npm, yarn).

Both follow the same two-phase policy:
    1. Remove the cache directory directly.
    2. Only if that raised, run the package manager's own clean command.

The outcome is binary; there is no partial success for these caches.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from clearance.cleaners.base import CacheCleaner, CacheKind, CleanOutcome
from clearance.cleaners.fs import remove_path
from clearance.errors import CleanupFailed, CommandError
from clearance.process import CommandRunner
from clearance.sizing import size_label
from clearance.ui.console import console

logger = logging.getLogger(__name__)

NPM_CLEAN_ARGS = ["cache", "clean", "--force"]
YARN_CLEAN_ARGS = ["cache", "clean"]


class PackageCacheCleaner(CacheCleaner):
    """Directory-first, CLI-fallback cleaner for a package-manager cache."""

    def __init__(
        self,
        kind: CacheKind,
        cache_dir: Path,
        command: Sequence[str],
        runner: Optional[CommandRunner] = None,
    ):
        """
        Args:
            kind: CacheKind.NPM or CacheKind.YARN.
            cache_dir: Cache root removed in phase one.
            command: Executable name followed by its cache-clean arguments.
            runner: Child process runner, a default CommandRunner if omitted.
        """
        self.kind = kind
        self.cache_dir = Path(cache_dir)
        self.command: List[str] = list(command)
        self.runner = runner or CommandRunner()

    def clean(self, cancel: Optional[threading.Event] = None) -> CleanOutcome:
        console.tagged(self.name, f"Attempting to remove {self.name} cache folder...")
        try:
            existed = self._remove_cache_dir()
        except OSError as e:
            dir_error = str(e)
            console.tagged(self.name, f"Folder removal failed: {e}", "warning")
            logger.info("Direct removal of %s failed: %s", self.cache_dir, e)
        else:
            if not existed:
                console.tagged(self.name, "Cache folder not found, nothing to remove.", "success")
                return CleanOutcome(self.name, "nothing", message=f"{self.cache_dir} does not exist")
            console.tagged(self.name, "Folder removed successfully.", "success")
            return CleanOutcome(self.name, "directory", message=f"removed {self.cache_dir}")

        cli_error = self._clean_with_cli(cancel)
        if cli_error is None:
            return CleanOutcome(self.name, "cli", message=f"'{self._command_line()}' succeeded")

        raise CleanupFailed(
            self.name,
            f"failed to clean {self.name} cache using both direct deletion and {self.name} CLI "
            f"(direct deletion: {dir_error}; CLI: {cli_error})",
        )

    def get_size(self, cancel: Optional[threading.Event] = None) -> str:
        return size_label(self.cache_dir)

    def _remove_cache_dir(self) -> bool:
        if not self.cache_dir.exists() and not self.cache_dir.is_symlink():
            return False
        remove_path(self.cache_dir)
        return True

    def _clean_with_cli(self, cancel: Optional[threading.Event]) -> Optional[str]:
        """Run the package manager's clean command; return an error text or None."""
        console.tagged(self.name, f"Fallback: running '{self._command_line()}'...")
        executable = self.runner.which(self.command[0])
        if executable is None:
            console.tagged(self.name, f"{self.command[0]} not found in PATH.", "warning")
            return f"{self.command[0]} not found in PATH"

        try:
            self.runner.run([executable, *self.command[1:]], cancel=cancel)
        except CommandError as e:
            console.tagged(self.name, f"{self.name} CLI cache clean failed: {e}", "warning")
            return str(e)

        console.tagged(self.name, f"{self.name} CLI cache clean succeeded.", "success")
        return None

    def _command_line(self) -> str:
        return " ".join(self.command)


def npm_cleaner(cache_dir: Path, runner: Optional[CommandRunner] = None, executable: str = "npm") -> PackageCacheCleaner:
    return PackageCacheCleaner(CacheKind.NPM, cache_dir, [executable, *NPM_CLEAN_ARGS], runner)


def yarn_cleaner(cache_dir: Path, runner: Optional[CommandRunner] = None, executable: str = "yarn") -> PackageCacheCleaner:
    return PackageCacheCleaner(CacheKind.YARN, cache_dir, [executable, *YARN_CLEAN_ARGS], runner)
