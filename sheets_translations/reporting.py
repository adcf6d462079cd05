"""Result tables printed after a pull or push."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .sync import PullResult, PushResult


class Reporter:
    """Prints sync results with rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_pull_summary(self, result: PullResult) -> None:
        """One row per language: file, key count and status."""
        if not result.results:
            self.console.print("[yellow]No translations found in the sheet, nothing written[/yellow]")
            return

        table = Table(title="PULL SUMMARY", show_header=True, header_style="bold magenta")
        table.add_column("Language", style="cyan", no_wrap=True)
        table.add_column("File", style="white")
        table.add_column("Keys", justify="right", style="green")
        table.add_column("Status")

        for item in result.results:
            status = "[green]saved[/green]" if item.success else f"[red]{escape(item.error or 'failed')}[/red]"
            table.add_row(escape(item.language), escape(str(item.path)), str(item.keys) if item.success else "-", status)

        self.console.print(table)

        failures = result.failures
        if failures:
            self.console.print(f"\n[red]{len(failures)} of {len(result.results)} language file(s) failed[/red]")

    def print_push_summary(self, result: PushResult) -> None:
        table = Table(title="PUSH SUMMARY", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", justify="right", style="green")

        table.add_row("Languages", escape(", ".join(result.languages)))
        table.add_row("Keys", str(result.keys))
        table.add_row("Range", escape(result.range))
        if result.updated_cells is not None:
            table.add_row("Updated cells", str(result.updated_cells))

        self.console.print(table)
