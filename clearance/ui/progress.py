"""Clearance Progress - Spinner for slow, silent operations such as size queries."""

from contextlib import contextmanager

from rich.progress import Progress, SpinnerColumn, TextColumn

from .console import console


@contextmanager
def spinner(message: str):
    progress = Progress(
        SpinnerColumn(style="brand"),
        TextColumn("[info]{task.description}[/]"),
        console=console.rich,
        transient=True,
    )
    with progress:
        progress.add_task(message, total=None)
        yield progress
