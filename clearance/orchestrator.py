"""
Cleanup orchestration.

Turns a CleanOptions selection into either a read-only size report or a
sequential cleanup run:

    selection -> resolve cleaners -> privilege gate -> clean each, in order

A failing cleaner is recorded and the loop moves on; only a failed privilege
gate or an empty selection stops a run before it starts. Cancellation stops
the current child process; every cleaner still queued is recorded as
cancelled without running.
"""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from clearance.cleaners.base import CacheCleaner, CacheKind, CleanOutcome
from clearance.errors import (
    ClearanceError,
    CleanupIncomplete,
    NotSupported,
    OperationCancelled,
)
from clearance.privileges import PrivilegeGate
from clearance.selection import CleanOptions
from clearance.sizing import SIZE_ERROR

logger = logging.getLogger(__name__)


@dataclass
class CleanResult:
    """Record of one cleaner's run."""

    cleaner_name: str
    error: Optional[BaseException] = None
    outcome: Optional[CleanOutcome] = None
    size_before: Optional[str] = None
    size_after: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Aggregate result handed to the presentation layer."""

    results: List[CleanResult] = field(default_factory=list)
    sizes: Dict[str, str] = field(default_factory=dict)
    report_only: bool = False
    cancelled: bool = False

    @property
    def failures(self) -> List[BaseException]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def error_count(self) -> int:
        return len(self.failures)

    @property
    def succeeded(self) -> bool:
        return self.error_count == 0 and not self.cancelled

    @property
    def error(self) -> Optional[CleanupIncomplete]:
        if self.succeeded:
            return None
        return CleanupIncomplete(self.failures)


ProgressCallback = Callable[[int, int, CleanResult], None]


class CleanupOrchestrator:
    """Runs the selected cleaners one after another.

    Example:
        orchestrator = CleanupOrchestrator(build_cleaners(), default_privilege_gate())
        summary = orchestrator.run(parse_selection("npm,docker"))
        if summary.error:
            print(summary.error)
    """

    def __init__(
        self,
        cleaners: Mapping[CacheKind, CacheCleaner],
        privilege_gate: PrivilegeGate,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            cleaners: Every known cleaner; iteration order is the report order.
            privilege_gate: Checked once before any cleaner runs.
            progress_callback: Called as (current, total, result) after each cleaner.
        """
        self.cleaners = dict(cleaners)
        self.privilege_gate = privilege_gate
        self.progress_callback = progress_callback

    def run(self, options: CleanOptions, cancel: Optional[threading.Event] = None) -> RunSummary:
        """Execute a selection.

        Raises:
            NotSupported: Nothing in the selection maps to a cleaner.
            AdminRequired: The privilege gate failed; no cleaner has run.
        """
        if options.exit_requested:
            logger.debug("Exit requested, nothing to run")
            return RunSummary()

        if options.report_size:
            return RunSummary(sizes=self.report_sizes(cancel), report_only=True)

        selected = self._resolve(options)
        if not selected:
            raise NotSupported("cleanup", "no valid cleanup options specified")

        self.privilege_gate.check()
        return self._clean_all(selected, options.measure_sizes, cancel)

    def report_sizes(self, cancel: Optional[threading.Event] = None) -> Dict[str, str]:
        """Size label of every known cache, keyed by display name."""
        sizes = {}
        for cleaner in self.cleaners.values():
            sizes[cleaner.display_name] = self._safe_size(cleaner, cancel)
        return sizes

    def _resolve(self, options: CleanOptions) -> List[CacheCleaner]:
        selected = []
        for kind in options.kinds:
            cleaner = self.cleaners.get(kind)
            if cleaner is None:
                logger.warning("No cleaner registered for %s", kind.value)
                continue
            selected.append(cleaner)
        return selected

    def _clean_all(
        self,
        selected: List[CacheCleaner],
        measure_sizes: bool,
        cancel: Optional[threading.Event],
    ) -> RunSummary:
        summary = RunSummary()
        total = len(selected)
        for index, cleaner in enumerate(selected, start=1):
            if summary.cancelled or (cancel is not None and cancel.is_set()):
                # Skipped cleaners count as cancelled failures
                summary.cancelled = True
                summary.results.append(CleanResult(cleaner.name, error=OperationCancelled()))
                logger.info("Run cancelled, skipped %s", cleaner.name)
                continue

            result = self._clean_one(cleaner, measure_sizes, cancel)
            summary.results.append(result)
            if self.progress_callback:
                self.progress_callback(index, total, result)
            if isinstance(result.error, OperationCancelled):
                summary.cancelled = True

        logger.info(
            "Cleanup finished: %d cleaner(s) run, %d error(s)", len(summary.results), summary.error_count
        )
        return summary

    def _clean_one(
        self, cleaner: CacheCleaner, measure_sizes: bool, cancel: Optional[threading.Event]
    ) -> CleanResult:
        result = CleanResult(cleaner_name=cleaner.name)
        if measure_sizes:
            result.size_before = self._safe_size(cleaner, cancel)

        logger.debug("Cleaning %s", cleaner.name)
        try:
            result.outcome = cleaner.clean(cancel)
        except ClearanceError as e:
            logger.info("%s failed: %s", cleaner.name, e)
            result.error = e
        except OSError as e:
            logger.warning("%s raised an unexpected filesystem error: %s", cleaner.name, e)
            result.error = e

        cancelled = isinstance(result.error, OperationCancelled) or (cancel is not None and cancel.is_set())
        if measure_sizes and not cancelled:
            result.size_after = self._safe_size(cleaner, cancel)
        return result

    def _safe_size(self, cleaner: CacheCleaner, cancel: Optional[threading.Event]) -> str:
        try:
            return cleaner.get_size(cancel)
        except OperationCancelled:
            raise
        except ClearanceError as e:
            logger.warning("Size query for %s failed: %s", cleaner.name, e)
            return SIZE_ERROR
