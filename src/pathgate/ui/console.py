"""Rich-powered console output for pathgate."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table


class Console:
    """Terminal output for pathgate using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()
        # Log lines go to stderr so stdout stays machine-readable
        self.err_console = RichConsole(stderr=True)

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def log_handler(self, level: int = logging.INFO) -> RichHandler:
        """A logging handler that writes through this console."""
        handler = RichHandler(
            console=self.err_console,
            level=level,
            show_time=False,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def show_matches(self, result: dict[str, bool]) -> None:
        """Print the per-rule verdicts, one ``<rule>: <bool>`` line each."""
        self.console.print("Matches:", markup=False, highlight=False)
        for rule_id, is_match in result.items():
            self.console.print(
                f"{rule_id}: {'true' if is_match else 'false'}",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )

    def show_matched_files(self, matched: dict[str, list[str]]) -> None:
        """Display which changed files each rule picked up."""
        table = Table(title="Matched Files", border_style="cyan")
        table.add_column("Rule", style="bold")
        table.add_column("Files", style="cyan")

        for rule_id, files in matched.items():
            table.add_row(escape(rule_id), escape("\n".join(files)) if files else "[dim]-[/dim]")

        self.console.print(table)
