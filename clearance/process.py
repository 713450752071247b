"""
Child process execution for cleaners.

Every external tool (npm, yarn, docker, powershell) runs through
``CommandRunner`` so that cancellation, timeouts and error wrapping behave the
same way for all of them. Only one child runs at a time; ``run`` blocks until
the child exits, times out, or the cancel event is set.
"""

import logging
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from clearance.errors import CommandError, OperationCancelled

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Exit status and (when captured) output of a finished child process."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner:
    """Runs external commands with inherited or captured output.

    Example:
        runner = CommandRunner()
        if runner.which("docker"):
            runner.run(["docker", "volume", "prune", "-f"])
    """

    # Seconds between cancel-event checks while a child is running
    POLL_INTERVAL = 0.1
    # Seconds to wait after terminate() before falling back to kill()
    TERMINATE_GRACE = 5.0

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Default per-command timeout in seconds, ``None`` for no limit.
        """
        self.timeout = timeout

    def which(self, name: str) -> Optional[str]:
        """Locate an executable on PATH."""
        return shutil.which(name)

    def run(
        self,
        command: Sequence[str],
        cancel: Optional[threading.Event] = None,
        capture: bool = False,
        quiet: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run ``command`` and wait for it.

        Args:
            command: Program and arguments.
            cancel: Event that, once set, terminates the child.
            capture: Collect stdout/stderr instead of inheriting them.
            quiet: Discard output (ignored when ``capture`` is set).
            timeout: Overrides the runner's default timeout.

        Returns:
            CommandResult for a zero exit status.

        Raises:
            CommandError: The child could not start, timed out or exited non-zero.
            OperationCancelled: ``cancel`` was set before or during the run.
        """
        cmd = list(command)
        cmd_str = " ".join(cmd)
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(cmd_str)

        if capture:
            stdout = stderr = subprocess.PIPE
        elif quiet:
            stdout = stderr = subprocess.DEVNULL
        else:
            stdout = stderr = None

        logger.debug("Running: %s", cmd_str)
        try:
            process = subprocess.Popen(cmd, stdout=stdout, stderr=stderr, text=True)
        except OSError as e:
            raise CommandError(cmd, stderr=str(e)) from e

        limit = timeout if timeout is not None else self.timeout
        try:
            out, err = self._wait(process, cmd, cancel, limit)
        except KeyboardInterrupt:
            self._stop(process)
            raise

        out = out or ""
        err = err or ""
        if process.returncode != 0:
            logger.debug("%s exited with %s", cmd_str, process.returncode)
            raise CommandError(cmd, process.returncode, err)
        return CommandResult(command=cmd, returncode=process.returncode, stdout=out, stderr=err)

    def _wait(
        self,
        process: subprocess.Popen,
        cmd: List[str],
        cancel: Optional[threading.Event],
        timeout: Optional[float],
    ) -> Tuple[Optional[str], Optional[str]]:
        started = time.monotonic()
        while True:
            try:
                return process.communicate(timeout=self.POLL_INTERVAL)
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.is_set():
                    logger.info("Cancelling %s", " ".join(cmd))
                    self._stop(process)
                    raise OperationCancelled(" ".join(cmd))
                if timeout is not None and time.monotonic() - started > timeout:
                    self._stop(process)
                    raise CommandError(cmd, stderr=f"timed out after {timeout:g}s")

    def _stop(self, process: subprocess.Popen) -> None:
        if process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=self.TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
