"""
User selection parsing.

A selection is parsed once into an immutable ``CleanOptions`` value that is
then handed to the orchestrator; nothing else holds selection state.
Accepted input is a comma-separated list of menu numbers or names, e.g.
``"1,3"``, ``"npm, docker"``, ``"all"`` or ``"exit"``.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from clearance.cleaners.base import CacheKind

REPORT = "report"
EXIT = "exit"
ALL = "all"


@dataclass(frozen=True)
class MenuOption:
    key: str
    name: str
    label: str


MENU_OPTIONS: List[MenuOption] = [
    MenuOption("1", CacheKind.NPM.value, "Clean npm cache"),
    MenuOption("2", CacheKind.YARN.value, "Clean yarn cache"),
    MenuOption("3", CacheKind.DOCKER.value, "Clean Docker cache"),
    MenuOption("4", CacheKind.WINSXS.value, "Clean WinSxS temp files"),
    MenuOption("5", CacheKind.WINTEMP.value, "Clean Windows temporary files"),
    MenuOption("6", CacheKind.WINCHUNKS.value, "Clean Windows error reporting chunks"),
    MenuOption("7", REPORT, "Show cache sizes"),
    MenuOption("8", EXIT, "Exit"),
]

# token -> canonical name, for both "1" and "npm" style input
_TOKENS: Dict[str, str] = {}
for _option in MENU_OPTIONS:
    _TOKENS[_option.key] = _option.name
    _TOKENS[_option.name] = _option.name

CLEANUP_KINDS: Tuple[CacheKind, ...] = tuple(CacheKind)


@dataclass(frozen=True)
class CleanOptions:
    """What the operator asked for.

    ``kinds`` keeps selection order with duplicates removed. ``unknown`` holds
    tokens that matched nothing so the caller can warn about them.
    """

    kinds: Tuple[CacheKind, ...] = ()
    clean_all: bool = False
    report_size: bool = False
    exit_requested: bool = False
    measure_sizes: bool = False
    unknown: Tuple[str, ...] = ()

    @property
    def clean_npm(self) -> bool:
        return CacheKind.NPM in self.kinds

    @property
    def clean_yarn(self) -> bool:
        return CacheKind.YARN in self.kinds

    @property
    def clean_docker(self) -> bool:
        return CacheKind.DOCKER in self.kinds

    @property
    def clean_winsxs(self) -> bool:
        return CacheKind.WINSXS in self.kinds

    @property
    def clean_windows_temp(self) -> bool:
        return CacheKind.WINTEMP in self.kinds

    @property
    def clean_windows_chunks(self) -> bool:
        return CacheKind.WINCHUNKS in self.kinds

    @property
    def has_cleanup(self) -> bool:
        return bool(self.kinds)

    @property
    def is_empty(self) -> bool:
        return not (self.kinds or self.report_size or self.exit_requested)


def _dedupe(kinds: List[CacheKind]) -> Tuple[CacheKind, ...]:
    seen = []
    for kind in kinds:
        if kind not in seen:
            seen.append(kind)
    return tuple(seen)


def parse_selection(text: str, measure_sizes: bool = False) -> CleanOptions:
    """Parse menu or command-line input into CleanOptions.

    Examples:
        >>> parse_selection("3, npm").kinds
        (<CacheKind.DOCKER: 'docker'>, <CacheKind.NPM: 'npm'>)
        >>> parse_selection("all").clean_all
        True
    """
    kinds: List[CacheKind] = []
    unknown: List[str] = []
    clean_all = report_size = exit_requested = False

    for raw in (text or "").split(","):
        token = raw.strip().lower()
        if not token:
            continue
        if token == ALL:
            clean_all = True
            kinds.extend(CLEANUP_KINDS)
            continue
        name = _TOKENS.get(token)
        if name is None:
            unknown.append(raw.strip())
        elif name == REPORT:
            report_size = True
        elif name == EXIT:
            exit_requested = True
        else:
            kinds.append(CacheKind(name))

    return CleanOptions(
        kinds=_dedupe(kinds),
        clean_all=clean_all,
        report_size=report_size,
        exit_requested=exit_requested,
        measure_sizes=measure_sizes,
        unknown=tuple(unknown),
    )


def options_from_flags(
    npm: bool = False,
    yarn: bool = False,
    docker: bool = False,
    winsxs: bool = False,
    wintemp: bool = False,
    winchunks: bool = False,
    clean_all: bool = False,
    report_size: bool = False,
    measure_sizes: bool = False,
) -> CleanOptions:
    """Build CleanOptions from boolean command-line flags."""
    if clean_all:
        kinds = CLEANUP_KINDS
    else:
        flags = {
            CacheKind.NPM: npm,
            CacheKind.YARN: yarn,
            CacheKind.DOCKER: docker,
            CacheKind.WINSXS: winsxs,
            CacheKind.WINTEMP: wintemp,
            CacheKind.WINCHUNKS: winchunks,
        }
        kinds = tuple(kind for kind in CLEANUP_KINDS if flags[kind])
    return CleanOptions(
        kinds=kinds,
        clean_all=clean_all,
        report_size=report_size,
        measure_sizes=measure_sizes,
    )


def merge_options(first: CleanOptions, second: CleanOptions) -> CleanOptions:
    """Combine two selections, keeping ``first``'s order."""
    return CleanOptions(
        kinds=_dedupe(list(first.kinds) + list(second.kinds)),
        clean_all=first.clean_all or second.clean_all,
        report_size=first.report_size or second.report_size,
        exit_requested=first.exit_requested or second.exit_requested,
        measure_sizes=first.measure_sizes or second.measure_sizes,
        unknown=first.unknown + second.unknown,
    )
