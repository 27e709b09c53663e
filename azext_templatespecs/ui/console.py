"""Rich-based console utilities for styled CLI output.

Output goes to stderr: command results are returned to the Azure CLI
and printed on stdout by its formatter, so anything written here must
not interleave with them.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.theme import Theme

THEME = Theme({
    "dim": "#888888",
    "content": "bright_white",
    "success": "bright_green",
    "error": "bright_red",
    "warning": "bright_yellow",
    "info": "bright_cyan",
    "accent": "bright_magenta",
    "progress.description": "bright_white",
})


class Console:
    """Styled console output for the templatespecs extension.

    Messages are printed literally: square brackets in them (exception
    text, template spec names) are not read as rich markup.
    """

    def __init__(self, stderr: bool = True):
        self._console = RichConsole(theme=THEME, highlight=False, stderr=stderr)

    def print_dim(self, message: str):
        """Print dimmed/secondary text."""
        self._console.print(escape(message), style="dim")

    def print_warning(self, message: str):
        """Print a warning message (yellow)."""
        self._console.print(f"[warning]![/warning] {escape(message)}")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Show a transient spinner, then a completion line with elapsed time."""
        start = time.monotonic()
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )
        with progress:
            progress.add_task(escape(message), total=None)
            yield
        elapsed = time.monotonic() - start
        self._console.print(f"[success]✓[/success] {escape(message)} completed. ({elapsed:.1f}s)", style="dim")


console = Console()
