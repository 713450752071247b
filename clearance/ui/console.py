"""Clearance Console - Themed console singleton with semantic message methods."""

from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape

from .theme import CLEARANCE_THEME, SYMBOLS


class ClearanceConsole:
    """Themed console with semantic message methods."""

    _instance: Optional['ClearanceConsole'] = None

    def __new__(cls) -> 'ClearanceConsole':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._console = RichConsole(theme=CLEARANCE_THEME)
        return cls._instance

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        self._console.print(*args, **kwargs)

    def success(self, message: str) -> None:
        self._console.print(f"[success_symbol]{SYMBOLS['success']}[/] [success]{escape(message)}[/]")

    def error(self, message: str, details: Optional[str] = None) -> None:
        self._console.print(f"[error_symbol]{SYMBOLS['error']}[/] [error]{escape(message)}[/]")
        if details:
            self._console.print(f"  [secondary]{escape(details)}[/]")

    def warning(self, message: str) -> None:
        self._console.print(f"[warning_symbol]{SYMBOLS['warning']}[/]  [warning]{escape(message)}[/]")

    def step(self, message: str, current: int, total: int) -> None:
        self._console.print(
            f"[info_symbol]{SYMBOLS['step']}[/] [info]{escape(message)}[/] [secondary]({current}/{total})[/]"
        )

    def tagged(self, tag: str, message: str, style: str = "primary") -> None:
        """Print a ``[tag] message`` progress line, e.g. ``[npm] Folder removed``."""
        self._console.print(f"[secondary]{escape(f'[{tag}]')}[/] [{style}]{escape(message)}[/]")

    def secondary(self, message: str) -> None:
        self._console.print(f"  [secondary]{escape(message)}[/]")

    def blank(self) -> None:
        self._console.print()

    def clear(self) -> None:
        self._console.clear()

    def set_title(self, title: str) -> bool:
        return self._console.set_window_title(title)

    def input(self, prompt: str = "") -> str:
        return self._console.input(prompt)


console = ClearanceConsole()
