from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console

from .banner import build_banner_info, print_startup_banner
from .command_help import CRAWL_COMMAND_HELP
from .config import CrawlerSettings, load_settings
from .crawler import Crawler
from .errors import ConfigError
from .help_formatter import formatter_for
from .logging_utils import configure_logging
from .summary_table import SummaryTableRenderer
from .utils import home_directory
from .version import __version__

LOGGER = logging.getLogger(__name__)
CONSOLE = Console(stderr=True)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2

_OVERRIDE_KEYS = ("root_dir", "file_types", "to_dir", "copy_files", "echo_files", "to_csv", "workers", "csv_path", "log_file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crawlcopy",
        description=(
            "Walk a directory tree, report files matching a list of extensions "
            "and optionally copy them into one directory using parallel workers."
        ),
        formatter_class=formatter_for(CRAWL_COMMAND_HELP),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Optional YAML file with crawler settings")
    parser.add_argument("--root-dir", dest="root_dir", help="Root directory to crawl (default: home directory)")
    parser.add_argument("--file-types", dest="file_types", help="Comma-separated extensions to find (default: .py)")
    parser.add_argument("--to-dir", dest="to_dir", type=Path, help="Directory to copy files into (default: temp dir)")
    parser.add_argument(
        "--copy",
        dest="copy_files",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Copy matched files into --to-dir (default: off)",
    )
    parser.add_argument(
        "--echo",
        dest="echo_files",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print matched files to stdout (default: on)",
    )
    parser.add_argument(
        "--csv",
        dest="to_csv",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write matched files to a CSV file (default: off)",
    )
    parser.add_argument("--csv-path", dest="csv_path", type=Path, help="CSV output path (default: ./output.csv)")
    parser.add_argument("--workers", type=int, help="Number of concurrent copy workers (default: 4)")
    parser.add_argument("--log-file", dest="log_file", type=Path, help="Run log path (default: ./crawler_log.txt)")
    parser.add_argument("--log-level", default="INFO", help="Minimum level written to the run log")
    parser.add_argument("--console-level", default="WARNING", help="Minimum level shown on stderr")
    parser.add_argument("--verbose", action="store_true", help="Log DEBUG output to the run log and stderr")
    parser.add_argument("--quiet", action="store_true", help="Hide the startup banner and run summary")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def resolve_default_root() -> str:
    """Return the home directory, or "" after reporting why it is unavailable."""
    try:
        return str(home_directory())
    except RuntimeError as exc:
        print(f"Error:  {exc}")
        return ""


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {key: getattr(args, key, None) for key in _OVERRIDE_KEYS}


def _setup_logging(settings: CrawlerSettings, args: argparse.Namespace) -> None:
    level = "DEBUG" if args.verbose else args.log_level
    console_level = "DEBUG" if args.verbose else args.console_level
    try:
        configure_logging(settings.log_file, level=level, console_level=console_level, console=CONSOLE)
    except OSError as exc:
        configure_logging(None, level=level, console_level=console_level, console=CONSOLE)
        LOGGER.warning("Could not open run log %s: %s", settings.log_file, exc)
    else:
        LOGGER.info("This log is written to %s", settings.log_file)


def run_crawl(args: argparse.Namespace) -> int:
    default_root = resolve_default_root()
    try:
        settings = load_settings(args.config, _cli_overrides(args), default_root=default_root)
        _setup_logging(settings, args)
    except (ConfigError, ValueError) as exc:
        CONSOLE.print(f"[bold red]Configuration error:[/bold red] {exc}", highlight=False)
        return EXIT_CONFIG_ERROR

    if not args.quiet:
        print_startup_banner(build_banner_info(settings), CONSOLE)

    crawler = Crawler(settings, console=CONSOLE, show_progress=CONSOLE.is_terminal and not args.quiet)
    result = crawler.run()
    sys.stdout.flush()

    if not args.quiet:
        SummaryTableRenderer(CONSOLE).render(result)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    return run_crawl(args)


if __name__ == "__main__":
    sys.exit(main())
