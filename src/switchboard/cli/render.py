"""CLI renderer for switchboard."""

from __future__ import annotations

import threading

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console(highlight=False)
        self._print_lock = threading.Lock()

    def info(self, message: str) -> None:
        """Render an info message."""
        self._print(escape(message))

    def warning(self, message: str) -> None:
        """Render a warning message."""
        self._print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Render an error message."""
        self._print(f"[bold red]Error:[/bold red] {escape(message)}")

    def usage_error(self, message: str, usage: str | None = None) -> None:
        """Render a usage error followed by the command's usage block."""
        self.error(message)
        if usage:
            self._print("\n[bold]USAGE[/bold]")
            self._print(f"  {escape(usage.strip())}")

    def interrupt_marker(self) -> None:
        self._print("^C")

    def interrupt_notice(self) -> None:
        self._print("[dim]Interrupt received. Waiting for the command to finish; press Ctrl+C again to force quit.[/dim]")

    def welcome(self, bin_name: str, version: str) -> None:
        """Render welcome message."""
        self._print(f"[bold blue]{escape(bin_name)}[/bold blue] [dim]v{escape(version)}[/dim] interactive mode")
        self._print("[dim]Type 'help' to list commands, TAB to complete, 'exit' to quit.[/dim]")

    def confirm(self, message: str) -> bool:
        return Confirm.ask(escape(message), console=self.console, default=True)

    def _print(self, message: str) -> None:
        with self._print_lock:
            self.console.print(message)
