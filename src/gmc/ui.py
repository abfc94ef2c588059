"""Terminal output for gmc."""

from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape


class Reporter:
    """Severity tagged status lines.

    Color is configured per instance so callers (and tests) control it
    without touching global state.
    """

    def __init__(
        self,
        verbose: bool = False,
        color: bool = True,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ) -> None:
        self.verbose = verbose
        self.console = console or Console(no_color=not color, highlight=False, soft_wrap=True)
        self.error_console = error_console or Console(stderr=True, no_color=not color, highlight=False, soft_wrap=True)

    def _emit(self, console: Console, symbol: str, style: str, fmt: str, args: tuple) -> None:
        message = fmt % args if args else fmt
        console.print(f"[{style}]{symbol} {escape(message)}[/{style}]")

    def success(self, fmt: str, *args: object) -> None:
        """Print a success line."""
        self._emit(self.console, "✓", "bold green", fmt, args)

    def info(self, fmt: str, *args: object) -> None:
        """Print an informational line."""
        self._emit(self.console, "ℹ", "blue", fmt, args)

    def warning(self, fmt: str, *args: object) -> None:
        """Print a warning line."""
        self._emit(self.console, "⚠", "yellow", fmt, args)

    def error(self, fmt: str, *args: object) -> None:
        """Print an error line to the error console."""
        self._emit(self.error_console, "✗", "bold red", fmt, args)

    def detail(self, fmt: str, *args: object) -> None:
        """Print an indented narration line in verbose mode only."""
        if self.verbose:
            message = fmt % args if args else fmt
            self.console.print(f"  {escape(message)}", style="dim")

    def branch_list(self, branches: Iterable[str]) -> None:
        """Print one indented line per branch name."""
        for branch in branches:
            self.console.print(f"  - [cyan]{escape(branch)}[/cyan]")
