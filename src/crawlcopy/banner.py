from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import CrawlerSettings
from .version import __version__


@dataclass
class BannerInfo:
    version: str
    root_dir: str
    file_types: str
    to_dir: str
    copy_files: bool
    echo_files: bool
    to_csv: bool
    workers: int
    log_file: str


def build_banner_info(settings: CrawlerSettings) -> BannerInfo:
    """Build a BannerInfo instance from resolved settings."""
    return BannerInfo(
        version=__version__,
        root_dir=settings.root_dir or "(unset)",
        file_types=settings.file_types,
        to_dir=str(settings.to_dir),
        copy_files=settings.copy_files,
        echo_files=settings.echo_files,
        to_csv=settings.to_csv,
        workers=settings.workers,
        log_file=str(settings.log_file),
    )


def print_startup_banner(info: BannerInfo, console: Console) -> None:
    """Print a styled startup banner showing version and configuration."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="cyan bold", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Version", f"[bold]{info.version}[/bold]")

    mode_parts = []
    if info.copy_files:
        mode_parts.append("[green]COPY[/green]")
    if info.echo_files:
        mode_parts.append("[cyan]ECHO[/cyan]")
    if info.to_csv:
        mode_parts.append("[cyan]CSV[/cyan]")
    table.add_row("Mode", " ".join(mode_parts) if mode_parts else "[dim]scan only[/dim]")

    table.add_row("Root", info.root_dir)
    table.add_row("File Types", info.file_types)
    if info.copy_files:
        table.add_row("Output", info.to_dir)
        table.add_row("Workers", str(info.workers))
    table.add_row("Run Log", info.log_file)

    console.print(Panel(table, title="[bold]crawlcopy[/bold]", border_style="cyan", expand=False))
