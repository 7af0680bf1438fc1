from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class CommandHelp:
    """
    Structured help content for a CLI command.

    Provides examples, environment variable documentation, and helpful tips
    for use with the RichHelpFormatter.
    """

    examples: List[Tuple[str, str]] = field(default_factory=list)
    """List of (description, command) tuples showing usage examples."""

    env_vars: List[Tuple[str, str]] = field(default_factory=list)
    """List of (variable_name, description) tuples documenting environment variables."""

    tips: List[str] = field(default_factory=list)
    """List of helpful tips and best practices."""


CRAWL_COMMAND_HELP = CommandHelp(
    examples=[
        (
            "List every Python file under your home directory",
            "crawlcopy",
        ),
        (
            "Copy Python and text files from a project into /tmp/out with 8 workers",
            "crawlcopy --root-dir ~/src/project --file-types .py,.txt --copy --to-dir /tmp/out --workers 8",
        ),
        (
            "Export matches to output.csv without printing them",
            "crawlcopy --root-dir /data --file-types .csv,.parquet --no-echo --csv",
        ),
        (
            "Match files without an extension (note the trailing comma)",
            "crawlcopy --root-dir /etc --file-types .conf,",
        ),
        (
            "Read settings from a YAML file and override one of them",
            "crawlcopy --config ./crawlcopy.yaml --workers 2",
        ),
    ],
    env_vars=[
        ("CRAWLCOPY_ROOT_DIR", "Root directory to crawl"),
        ("CRAWLCOPY_FILE_TYPES", "Comma-separated extensions to match"),
        ("CRAWLCOPY_TO_DIR", "Directory receiving copies"),
        ("CRAWLCOPY_COPY_FILES", "Copy matched files (true/false)"),
        ("CRAWLCOPY_ECHO_FILES", "Print matches to stdout (true/false)"),
        ("CRAWLCOPY_TO_CSV", "Write matches to output.csv (true/false)"),
        ("CRAWLCOPY_WORKERS", "Number of concurrent copy workers"),
        ("BUILD_VERSION", "Version string reported by --version"),
    ],
    tips=[
        "Copies are named <uid>_<name>; the UID column of the report identifies each copy.",
        "Walk and copy errors never change the exit code; check crawler_log.txt.",
        "Command-line flags override environment variables, which override the YAML file.",
    ],
)
