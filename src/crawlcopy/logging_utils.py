"""Log configuration and multi-line field block rendering.

Events with several attributes are logged as a titled block::

    Copy Failed
    -----------
        Source      : /home/me/a.py
        Error       : [Errno 13] Permission denied

The run log is a plain file truncated at the start of every run; a Rich
handler mirrors warnings and errors to stderr so stdout stays reserved for
the tab-separated report.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from textwrap import wrap
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_WRAP_WIDTH = 110
DEFAULT_LABEL_WIDTH = 22
DEFAULT_INDENT = "    "
DEFAULT_LOG_FILE = "crawler_log.txt"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)


def _wrap_lines(text: str, width: int) -> list[str]:
    lines: list[str] = []
    for raw_line in text.splitlines() or [""]:
        lines.extend(wrap(raw_line, width=width, break_long_words=False, break_on_hyphens=False) or [""])
    return lines


class LogBlockBuilder:
    def __init__(
        self,
        title: str,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
        label_width: int = DEFAULT_LABEL_WIDTH,
        indent: str = DEFAULT_INDENT,
        pad_top: bool = True,
    ) -> None:
        self.wrap_width = wrap_width
        self.label_width = label_width
        self.indent = indent
        self.lines: list[str] = [""] if pad_top else []
        self.lines.extend([title, "-" * len(title)])

    def add_fields(self, fields: FieldMapping | None) -> None:
        if not fields:
            return
        items = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
        if not items:
            return

        widest = max(len(str(key)) for key, _ in items)
        label_width = max(min(widest, self.label_width), 8)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 4, 32)

        for key, value in items:
            first, *rest = _wrap_lines(_stringify(value), value_width)
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {first}")
            for continuation in rest:
                self.lines.append(f"{self.indent}{'':<{label_width}}  {continuation}")

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping, *, pad_top: bool = True) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    return builder.render()


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    log_file: Path | None = Path(DEFAULT_LOG_FILE),
    *,
    level: int | str = logging.INFO,
    console_level: int | str = logging.WARNING,
    console: Console | None = None,
) -> logging.Logger:
    """Route crawlcopy logging to the run log file and a stderr console.

    Handlers installed by a previous call are replaced, so repeated runs in
    one process do not duplicate output.

    Args:
        log_file: Run log path, truncated on open; None disables the file
        level: Minimum level written to the run log
        console_level: Minimum level shown on stderr
        console: Rich console for the stderr handler

    Returns:
        The configured package logger
    """
    file_level = _coerce_level(level)
    stderr_level = _coerce_level(console_level)

    logger = logging.getLogger("crawlcopy")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(min(file_level, stderr_level))
    logger.propagate = False

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8", errors="backslashreplace")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        level=stderr_level,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(console_handler)
    return logger
