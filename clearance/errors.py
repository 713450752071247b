"""Exception hierarchy for Clearance.

Strategies wrap low-level failures (OSError, child-process errors) into these
types so the orchestrator and the CLI only ever deal with ClearanceError.
"""

from typing import List, Optional, Sequence


class ClearanceError(Exception):
    """Base class for every error raised by Clearance."""


class AdminRequired(ClearanceError):
    """Raised when the privilege gate finds no administrator rights."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"administrator privileges required: {message}")


class CleanupFailed(ClearanceError):
    """A single cache cleaner exhausted every deletion path."""

    def __init__(self, cleaner_name: str, reason: str):
        self.cleaner_name = cleaner_name
        self.reason = reason
        super().__init__(f"cleanup failed for {cleaner_name}: {reason}")


class NotSupported(ClearanceError):
    """The requested operation cannot run here (bad selection, wrong platform)."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"operation not supported: {operation} - {reason}")


class OperationCancelled(ClearanceError):
    """The in-flight child process was cancelled by the caller."""

    def __init__(self, command: Optional[str] = None):
        self.command = command
        message = f"operation cancelled: {command}" if command else "operation cancelled"
        super().__init__(message)


class CommandError(ClearanceError):
    """A child process could not be started or exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: Optional[int] = None, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        cmd = " ".join(self.command)
        if returncode is None:
            message = f"could not run '{cmd}'"
        else:
            message = f"'{cmd}' exited with status {returncode}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class ConfigError(ClearanceError):
    """The configuration file exists but cannot be used."""


class CleanupIncomplete(ClearanceError):
    """Aggregate error for a run where at least one cleaner failed."""

    def __init__(self, failures: List[BaseException]):
        self.failures = list(failures)
        count = len(self.failures)
        super().__init__(f"completed with {count} error(s)")
