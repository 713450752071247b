import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CacheKind(Enum):
    """The fixed set of cleanup targets. Values double as cleaner names."""

    NPM = "npm"
    YARN = "yarn"
    DOCKER = "docker"
    WINSXS = "winsxs"
    WINTEMP = "wintemp"
    WINCHUNKS = "winchunks"


DISPLAY_NAMES = {
    CacheKind.NPM: "npm cache",
    CacheKind.YARN: "yarn cache",
    CacheKind.DOCKER: "Docker cache",
    CacheKind.WINSXS: "WinSxS temp files",
    CacheKind.WINTEMP: "Windows temporary files",
    CacheKind.WINCHUNKS: "Windows error reporting chunks",
}


@dataclass
class CleanOutcome:
    """What a successful ``clean`` did.

    ``total`` counts attempted entries only; protected entries that were
    skipped are reported in ``skipped``.
    """

    cleaner_name: str
    method: str
    total: int = 0
    failed: int = 0
    skipped: int = 0
    message: str = ""

    @property
    def removed(self) -> int:
        return self.total - self.failed

    @property
    def partial(self) -> bool:
        return 0 < self.failed < self.total


class CacheCleaner(ABC):
    """Deletion and sizing policy for one cache kind.

    Implementations keep no mutable state between calls, so one instance can
    serve any number of runs.
    """

    kind: CacheKind

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self.kind]

    @abstractmethod
    def clean(self, cancel: Optional[threading.Event] = None) -> CleanOutcome:
        """Remove the cache. Raises a ClearanceError when nothing could be done."""

    @abstractmethod
    def get_size(self, cancel: Optional[threading.Event] = None) -> str:
        """Return a size label or a sentinel. Must not modify anything."""
