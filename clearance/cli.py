import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

from clearance import __version__
from clearance.cleaners import build_cleaners
from clearance.config import ClearanceConfig, load_config, load_env
from clearance.errors import AdminRequired, ClearanceError, NotSupported
from clearance.orchestrator import CleanResult, CleanupOrchestrator
from clearance.privileges import default_privilege_gate
from clearance.selection import CleanOptions, merge_options, options_from_flags, parse_selection
from clearance.ui import console, read_selection, show_error, show_warning, spinner, wait_for_enter
from clearance.ui import panels

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: ClearanceConfig, verbose: bool = False) -> None:
    """Route log records to stderr and, when configured, to a log file."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.WARNING)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


class ClearanceCLI:
    def __init__(
        self,
        config: Optional[ClearanceConfig] = None,
        verbose: bool = False,
        orchestrator: Optional[CleanupOrchestrator] = None,
    ):
        self.config = config or ClearanceConfig()
        self.verbose = verbose
        self.cancel = threading.Event()
        self.orchestrator = orchestrator or CleanupOrchestrator(
            build_cleaners(self.config),
            default_privilege_gate(),
            progress_callback=self._on_progress,
        )

    def _debug(self, message: str) -> None:
        """Print debug info only in verbose mode"""
        if self.verbose:
            console.print(f"[secondary]↳ {message}[/]")

    def _on_progress(self, current: int, total: int, result: CleanResult) -> None:
        if result.error is not None:
            show_error(result.error)
        else:
            console.step(f"{result.cleaner_name} done", current, total)
        console.blank()

    def execute(self, options: CleanOptions) -> int:
        """Run one selection and render the outcome.

        Returns:
            int: 0 when everything selected succeeded (partial cleanups included),
                1 when a cleaner failed or the run could not start.
        """
        for token in options.unknown:
            console.warning(f"Ignoring unknown option: {token}")

        if options.exit_requested:
            panels.goodbye()
            return 0

        if options.report_size:
            with spinner("Measuring cache sizes..."):
                summary = self.orchestrator.run(options, self.cancel)
            panels.size_report(summary.sizes)
            return 0

        if options.has_cleanup:
            panels.selected_options(options)
            panels.cleanup_start()

        try:
            summary = self.orchestrator.run(options, self.cancel)
        except AdminRequired as e:
            show_error(e)
            panels.admin_warning()
            return 1
        except NotSupported as e:
            show_error(e)
            return 1

        self._debug(f"{len(summary.results)} cleaner(s) ran, {summary.error_count} failed")
        panels.partial_warnings(summary)
        panels.size_changes(summary)
        if summary.cancelled:
            show_warning("Cleanup cancelled", "Caches that had not started yet were skipped.")
        panels.cleanup_complete(summary.error_count)
        return 0 if summary.succeeded else 1

    def interactive(self) -> int:
        """Menu loop: show options, read a selection, run it, repeat."""
        console.set_title(panels.APP_TITLE)
        while True:
            panels.menu(__version__)
            text = read_selection()
            if text is None:
                panels.goodbye()
                return 0

            options = parse_selection(text)
            if options.exit_requested:
                panels.goodbye()
                return 0
            if not (options.has_cleanup or options.report_size):
                console.error("Invalid option. Please try again.")
                wait_for_enter()
                continue

            try:
                self.execute(options)
            except ClearanceError as e:
                show_error(e)
            if self.cancel.is_set():
                # Cancelled by SIGTERM
                panels.goodbye()
                return 1
            wait_for_enter()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clearance",
        description="A lightweight CLI tool to clean up development caches",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Selections:
  1 / npm        npm cache
  2 / yarn       yarn cache
  3 / docker     Docker images, volumes and build cache
  4 / winsxs     WinSxS temp files (Windows)
  5 / wintemp    Windows temporary files (Windows)
  6 / winchunks  Windows error reporting chunks (Windows)
  7 / report     Show cache sizes
  8 / exit       Exit
  all            Every cleanup option

Examples:
  clearance                  # Interactive menu
  clearance 1,3              # Clean npm and Docker caches
  clearance --report         # Show cache sizes
  clearance all --sizes      # Clean everything, showing sizes before and after

Environment Variables:
  CLEARANCE_CONFIG     Path to config.yaml (default: ~/.clearance/config.yaml)
  CLEARANCE_LOG_LEVEL  Logging level (DEBUG, INFO, WARNING, ERROR)
        """,
    )
    parser.add_argument("--version", "-V", action="store_true", help="Show version information")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output")
    parser.add_argument("--config", metavar="PATH", help="Path to a config.yaml file")
    parser.add_argument(
        "selection", nargs="?", help="Comma-separated options, e.g. '1,3' or 'npm,docker' or 'all'"
    )

    group = parser.add_argument_group("cleanup options")
    group.add_argument("--npm", action="store_true", help="Clean npm cache")
    group.add_argument("--yarn", action="store_true", help="Clean yarn cache")
    group.add_argument("--docker", action="store_true", help="Clean Docker cache")
    group.add_argument("--winsxs", action="store_true", help="Clean WinSxS temp files")
    group.add_argument("--wintemp", action="store_true", help="Clean Windows temporary files")
    group.add_argument("--winchunks", action="store_true", help="Clean Windows error reporting chunks")
    group.add_argument("--all", dest="clean_all", action="store_true", help="Clean all caches")
    group.add_argument("--report", action="store_true", help="Report cache sizes")
    group.add_argument(
        "--sizes", action="store_true", help="Measure each cache before and after cleaning"
    )
    return parser


def options_from_args(args: argparse.Namespace) -> CleanOptions:
    from_text = parse_selection(args.selection or "", measure_sizes=args.sizes)
    from_flags = options_from_flags(
        npm=args.npm,
        yarn=args.yarn,
        docker=args.docker,
        winsxs=args.winsxs,
        wintemp=args.wintemp,
        winchunks=args.winchunks,
        clean_all=args.clean_all,
        report_size=args.report,
        measure_sizes=args.sizes,
    )
    return merge_options(from_text, from_flags)


def main(argv: Optional[list[str]] = None) -> int:
    # .env must be loaded before the config reads the environment
    load_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        panels.version_panel(__version__)
        return 0

    try:
        config = load_config(Path(args.config).expanduser() if args.config else None)
    except ClearanceError as e:
        show_error(e)
        return 1
    configure_logging(config, verbose=args.verbose)

    cli = ClearanceCLI(config, verbose=args.verbose)
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, lambda signum, frame: cli.cancel.set())

    try:
        options = options_from_args(args)
        if options.is_empty and not options.unknown:
            return cli.interactive()
        return cli.execute(options)
    except KeyboardInterrupt:
        print("\n❌ Operation cancelled", file=sys.stderr)
        return 130
    except ClearanceError as e:
        show_error(e)
        return 1
    except OSError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
