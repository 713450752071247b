"""Clearance Errors - One-line error rendering."""

from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel

from .console import console
from .theme import PANEL_STYLES, SYMBOLS


def show_error(error: BaseException) -> None:
    """Print ``[error] <message>`` for a failure."""
    console.print(f"[error]{escape('[error]')} {escape(str(error))}[/]")


def show_warning(title: str, message: str, details: Optional[List[str]] = None) -> None:
    lines = [f"[warning]{SYMBOLS['warning']}  {escape(title)}[/]", "", f"[primary]{escape(message)}[/]"]
    if details:
        lines.append("")
        for detail in details:
            lines.append(f"  [secondary]{SYMBOLS['bullet']} {escape(detail)}[/]")
    console.print(Panel("\n".join(lines), **PANEL_STYLES["warning"]))
