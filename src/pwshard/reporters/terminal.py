"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from pwshard.models.shard import ShardAssignment

console = Console()
err_console = Console(stderr=True)


_SECONDS_PER_MINUTE = 60.0
_MS_PER_SECOND = 1000.0

# Spread (as a fraction of the heaviest shard) above which the split is flagged
_IMBALANCE_WARN_RATIO = 0.25


def _format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string."""
    if seconds >= _SECONDS_PER_MINUTE:
        return f"{seconds / _SECONDS_PER_MINUTE:.1f}m"
    return f"{seconds:.1f}s"


def _shard_total_ms(split: ShardAssignment) -> int:
    return sum(entry.duration for entry in split.files)


class CLIReporter:
    """Rich terminal output reporter for splitting and lookup."""

    def __init__(self, output: Console | None = None) -> None:
        """Initialize the CLI reporter."""
        self.console = output or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_shard_summary(self, splits: list[ShardAssignment]) -> None:
        """Print one row per shard with test count and estimated duration."""
        table = Table(title="Shards", title_style="bold cyan")
        table.add_column("Shard", style="bold", justify="right")
        table.add_column("Tests", justify="right")
        table.add_column("Spec Files", justify="right")
        table.add_column("Duration", justify="right")
        table.add_column("Minutes", justify="right")

        for index, split in enumerate(splits):
            total_ms = _shard_total_ms(split)
            table.add_row(
                str(index + 1),
                str(len(split.files)),
                str(len({entry.file for entry in split.files})),
                _format_duration(total_ms / _MS_PER_SECOND) if split.files else "-",
                str(split.total_duration_minutes),
            )

        self.console.print(table)

        totals = [_shard_total_ms(split) for split in splits]
        if not totals or max(totals) == 0:
            return

        spread_ms = max(totals) - min(totals)
        spread = _format_duration(spread_ms / _MS_PER_SECOND)
        if spread_ms / max(totals) > _IMBALANCE_WARN_RATIO:
            self.print_warning(f"Shard spread is {spread}; a single long test dominates a shard")
        else:
            self.print_info(f"Shard spread: {spread}")


# Singleton instances for easy import; err_reporter writes to stderr
reporter = CLIReporter()
err_reporter = CLIReporter(err_console)
