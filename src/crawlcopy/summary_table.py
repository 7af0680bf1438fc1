from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from .models import CrawlResult

# Color constants for status indicators
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"
DIM_COLOR = "dim"

SUCCESS_SYMBOL = "✓"
ERROR_SYMBOL = "✗"

DEFAULT_FAILURE_LIMIT = 10


def format_bytes(size: int) -> str:
    """Return a human readable byte count, e.g. ``1.5 KiB``."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KiB", "MiB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


class SummaryTableRenderer:
    """Renders a crawl result as Rich tables with color-coded counts."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)

    @staticmethod
    def _colorize_count(value: int, *, is_error: bool = False) -> str:
        if value == 0:
            return f"[{DIM_COLOR}]{value}[/{DIM_COLOR}]"
        if is_error:
            return f"[{ERROR_COLOR}]{ERROR_SYMBOL} {value}[/{ERROR_COLOR}]"
        return f"[{SUCCESS_COLOR}]{SUCCESS_SYMBOL} {value}[/{SUCCESS_COLOR}]"

    def build_summary_table(self, result: CrawlResult) -> Table:
        table = Table(title="Crawl Summary", show_header=True, header_style="bold cyan")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", justify="right")

        table.add_row("Matched files", self._colorize_count(result.matched))
        table.add_row("Copy jobs", str(len(result.jobs)))
        table.add_row("Copied", self._colorize_count(len(result.pool.completed)))
        table.add_row("Failed", self._colorize_count(len(result.pool.failures), is_error=True))
        table.add_row("Bytes copied", format_bytes(result.pool.bytes_copied))

        if result.walk_completed:
            walk_status = f"[{SUCCESS_COLOR}]complete[/{SUCCESS_COLOR}]"
        else:
            walk_status = f"[{WARNING_COLOR}]aborted[/{WARNING_COLOR}]"
        table.add_row("Walk", walk_status)
        if result.csv_path is not None:
            table.add_row("CSV", str(result.csv_path))
        table.add_row("Elapsed", f"{result.elapsed:.2f}s")
        return table

    def build_failure_table(self, result: CrawlResult, *, limit: int = DEFAULT_FAILURE_LIMIT) -> Optional[Table]:
        failures = result.pool.failures
        if not failures:
            return None

        table = Table(title="Copy Failures", show_header=True, header_style=f"bold {ERROR_COLOR}")
        table.add_column("Source", overflow="fold")
        table.add_column("Error", style=ERROR_COLOR, overflow="fold")
        ordered = sorted(failures, key=lambda failure: str(failure.job.source))
        for failure in ordered[:limit]:
            table.add_row(str(failure.job.source), failure.message)
        remaining = len(ordered) - limit
        if remaining > 0:
            table.add_row(f"[{DIM_COLOR}]... {remaining} more (see run log)[/{DIM_COLOR}]", "")
        return table

    def render(self, result: CrawlResult) -> None:
        self.console.print(self.build_summary_table(result))
        failure_table = self.build_failure_table(result)
        if failure_table is not None:
            self.console.print(failure_table)
