"""Rich-powered console output for diffsage."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from diffsage import __version__
from diffsage.analysis.orchestrator import AnalysisResult
from diffsage.budget.truncator import DiffStats
from diffsage.diff.filter import DiffDocument


class Console:
    """Terminal output for diffsage using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def banner(self) -> None:
        """Show the diffsage banner."""
        self.console.print(
            Panel(
                f"[bold cyan]diffsage[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Side-effect analysis for git diffs[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def markdown(self, text: str) -> None:
        """Render markdown text."""
        self.console.print(Markdown(text))

    def show_diff_stats(self, doc: DiffDocument, stats: DiffStats, tokens: int) -> None:
        """Display what survived filtering in a table."""
        table = Table(title="Diff Summary", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="cyan")

        table.add_row("Files kept", str(len(doc.kept_sections)))
        table.add_row("Files excluded", str(len(doc.excluded_paths)))
        table.add_row("Added lines", str(stats.additions))
        table.add_row("Removed lines", str(stats.removals))
        table.add_row("Estimated tokens", f"{tokens:,}")

        excluded = doc.excluded_paths
        if excluded:
            table.add_section()
            for path in excluded[:10]:
                table.add_row(f"  [dim]{escape(path)}[/dim]", "[dim]excluded[/dim]")
            if len(excluded) > 10:
                table.add_row(f"  [dim]... {len(excluded) - 10} more[/dim]", "")

        self.console.print(table)

    def show_result(self, result: AnalysisResult) -> None:
        """Display the analysis outcome."""
        color = "yellow" if result.fell_back else "green"
        self.console.print(
            Panel(
                f"[bold]Model:[/bold] {result.model}\n"
                f"[bold]Tier:[/bold] [{color}]{result.state.value}[/{color}]\n"
                f"[bold]Requests:[/bold] {result.requests}\n"
                f"[bold]Content tokens:[/bold] ~{result.content_tokens:,}"
                + (" (truncated)" if result.truncated else ""),
                title="[bold]Analysis[/bold]",
                border_style=color,
            )
        )
