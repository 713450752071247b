"""
Docker cache cleaner.

Docker keeps its caches behind the daemon, so there is no directory to delete;
cleanup and sizing both go through the docker CLI.
"""

import logging
import threading
from typing import List, Optional, Tuple

from clearance.cleaners.base import CacheCleaner, CacheKind, CleanOutcome
from clearance.errors import CleanupFailed, CommandError
from clearance.process import CommandRunner
from clearance.sizing import DOCKER_NOT_RUNNING, NOT_INSTALLED, SIZE_QUERY_FAILED
from clearance.ui.console import console

logger = logging.getLogger(__name__)

# Run in order; a failure stops the sequence since later prunes depend on
# the daemon state the earlier ones left behind.
PRUNE_COMMANDS: List[Tuple[List[str], str]] = [
    (["system", "prune", "--all", "-f"], "system prune"),
    (["volume", "prune", "-f"], "volume prune"),
    (["builder", "prune", "--all", "-f"], "builder prune"),
]


class DockerCleaner(CacheCleaner):
    """Prunes images, volumes and build cache through the docker CLI."""

    kind = CacheKind.DOCKER

    def __init__(self, runner: Optional[CommandRunner] = None, executable: str = "docker"):
        self.runner = runner or CommandRunner()
        self.executable = executable

    def clean(self, cancel: Optional[threading.Event] = None) -> CleanOutcome:
        console.tagged(self.name, "Running Docker cleanup commands...")
        docker = self.runner.which(self.executable)
        if docker is None:
            console.tagged(self.name, "Docker not found in PATH.", "warning")
            raise CleanupFailed(self.name, f"{self.executable} not found in PATH")

        if not self._daemon_running(docker, cancel):
            raise CleanupFailed(self.name, "docker daemon is not running")

        for args, description in PRUNE_COMMANDS:
            try:
                self.runner.run([docker, *args], cancel=cancel)
            except CommandError as e:
                console.tagged(self.name, f"Failed to run {description}: {e}", "error")
                raise CleanupFailed(self.name, f"failed to run {description}: {e}") from e

        console.tagged(self.name, "Docker cleanup completed.", "success")
        return CleanOutcome(self.name, "prune", message="system, volume and builder caches pruned")

    def get_size(self, cancel: Optional[threading.Event] = None) -> str:
        docker = self.runner.which(self.executable)
        if docker is None:
            return NOT_INSTALLED
        if not self._daemon_running(docker, cancel):
            return DOCKER_NOT_RUNNING
        try:
            result = self.runner.run(
                [docker, "system", "df", "--format", "{{.Size}}"], cancel=cancel, capture=True
            )
        except CommandError as e:
            logger.warning("docker system df failed: %s", e)
            return SIZE_QUERY_FAILED
        return result.stdout.strip()

    def _daemon_running(self, docker: str, cancel: Optional[threading.Event]) -> bool:
        try:
            self.runner.run([docker, "info"], cancel=cancel, quiet=True)
        except CommandError as e:
            logger.debug("docker info failed: %s", e)
            return False
        return True
