"""Clearance Prompts - Reading menu selections from the operator."""

from typing import Optional

from .console import console
from .theme import SYMBOLS


def read_selection() -> Optional[str]:
    """Read one line of menu input; None when stdin is closed or interrupted."""
    try:
        return console.input(f"\n[highlight]{SYMBOLS['prompt']}[/] Enter your choice: ").strip()
    except (EOFError, KeyboardInterrupt):
        console.blank()
        return None


def wait_for_enter() -> None:
    try:
        console.input("\n[info]Press Enter to continue...[/]")
    except (EOFError, KeyboardInterrupt):
        console.blank()
