"""Clearance Panels - Menu, report and summary rendering."""

import platform
from typing import Dict, List

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from clearance.cleaners.base import CacheKind, DISPLAY_NAMES
from clearance.orchestrator import RunSummary
from clearance.selection import EXIT, MENU_OPTIONS, REPORT, CleanOptions
from clearance.sizing import is_error_label, is_sentinel

from .console import console
from .theme import OPTION_ICONS, PANEL_STYLES, SYMBOLS

APP_TITLE = "Clearance - Cache Cleanup Tool"


def header(version: str) -> None:
    console.print(
        Panel(f"[brand]Clearance v{escape(version)}[/]", border_style="brand", padding=(0, 2), expand=False)
    )


def instructions() -> None:
    lines = [
        "[highlight]Select cleanup options:[/]",
        f"  [muted]{SYMBOLS['bullet']}[/] Enter numbers separated by commas (e.g., 1,3,5)",
        f"  [muted]{SYMBOLS['bullet']}[/] Type 'all' to select all options",
        f"  [muted]{SYMBOLS['bullet']}[/] Type 'exit' or '8' to quit",
    ]
    console.print("\n".join(lines))


def menu(version: str) -> None:
    """Clear the screen and draw the full interactive menu."""
    console.clear()
    header(version)
    console.blank()
    instructions()
    console.print("\n[highlight]Available Options:[/]")
    for option in MENU_OPTIONS:
        if option.name == REPORT:
            style = "info"
        elif option.name == EXIT:
            style = "error"
        else:
            style = "success"
        icon = OPTION_ICONS.get(option.name, " ")
        console.print(f"  [highlight]{option.key}.[/] {icon} [{style}]{option.label}[/]")


def selected_options(options: CleanOptions) -> None:
    console.print("\n[info]Selected options:[/]")
    for kind in options.kinds:
        console.print(f"  [success]{SYMBOLS['bullet']} {DISPLAY_NAMES[kind]}[/]")
    if options.report_size:
        console.print(f"  [info]{SYMBOLS['bullet']} Cache size report[/]")
    console.blank()


def size_report(sizes: Dict[str, str]) -> None:
    table = Table(title="Cache Size Report", show_header=True, header_style="bold cyan", box=None)
    table.add_column("Cache", style="primary")
    table.add_column("Size", justify="right")
    for name, label in sizes.items():
        if is_error_label(label):
            style = "error"
        elif is_sentinel(label):
            style = "warning"
        else:
            style = "success"
        table.add_row(escape(name), f"[{style}]{escape(label)}[/]")
    console.blank()
    console.print(table)


def size_changes(summary: RunSummary) -> None:
    """Before/after sizes, shown only when the run measured them."""
    rows = [r for r in summary.results if r.size_before is not None]
    if not rows:
        return
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Cache")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right")
    for result in rows:
        name = DISPLAY_NAMES[CacheKind(result.cleaner_name)]
        table.add_row(escape(name), escape(result.size_before or ""), escape(result.size_after or "-"))
    console.blank()
    console.print(table)


def cleanup_start() -> None:
    console.print("[highlight]Starting cleanup process...[/]")
    console.blank()


def cleanup_complete(error_count: int) -> None:
    if error_count > 0:
        console.print(
            f"\n[error]{SYMBOLS['warning']}  Clearance completed with {error_count} error(s). "
            "Some operations may have failed.[/]"
        )
    else:
        console.blank()
        console.success("Clearance finished successfully!")


def partial_warnings(summary: RunSummary) -> None:
    for result in summary.results:
        if result.outcome is not None and result.outcome.partial:
            console.warning(f"{result.cleaner_name}: {result.outcome.message}")


def admin_warning() -> None:
    lines: List[str] = [
        "[warning]This tool requires administrator privileges to clean system caches.[/]",
        "[warning]Please run this tool as administrator.[/]",
    ]
    console.print(
        Panel(
            "\n".join(lines),
            title="[error]─ Administrator Privileges Required [/]",
            **PANEL_STYLES["error"],
        )
    )


def version_panel(version: str) -> None:
    lines = [
        f"[brand]Clearance v{escape(version)}[/]",
        f"[muted]OS/Arch:[/] {platform.system().lower()}/{platform.machine().lower()}",
        f"[muted]Python:[/] {platform.python_version()}",
    ]
    console.print(Panel("\n".join(lines), expand=False, **PANEL_STYLES["default"]))


def goodbye() -> None:
    console.print("\n[brand]Thank you for using Clearance![/]")
