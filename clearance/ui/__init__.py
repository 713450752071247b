"""Clearance UI - Terminal presentation components."""

from .console import ClearanceConsole, console
from .errors import show_error, show_warning
from .progress import spinner
from .prompts import read_selection, wait_for_enter
from .theme import CLEARANCE_THEME, COLORS, OPTION_ICONS, PANEL_STYLES, SYMBOLS

__all__ = [
    "console", "ClearanceConsole", "COLORS", "SYMBOLS", "OPTION_ICONS", "CLEARANCE_THEME", "PANEL_STYLES",
    "show_error", "show_warning",
    "spinner",
    "read_selection", "wait_for_enter",
]
