"""Tab-separated stdout report and CSV export of matched records."""

from __future__ import annotations

import csv
import logging
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from .logging_utils import render_fields_block
from .models import FileRecord

LOGGER = logging.getLogger(__name__)

ECHO_HEADER = ("UID", "Name", "Extension", "ModDate", "IsDir", "Size(B)", "FilePath", "IsRegularfile")
CSV_HEADER = ("UID", "Name", "Extension", "ModDate", "IsDir", "Size(B)", "FilePath", "IsRegularFile")


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _display(value: str | Path) -> str:
    # Undecodable name bytes are held as surrogates; show them as \xNN escapes
    return os.fsencode(value).decode("utf-8", "backslashreplace")


def record_fields(record: FileRecord) -> list[str]:
    """Return the report columns for *record* as strings."""
    return [
        str(record.uid),
        _display(record.name),
        _display(record.ext),
        str(record.mod_time),
        _flag(record.is_dir),
        str(record.size),
        _display(record.path),
        _flag(record.is_regular),
    ]


class TabularReporter:
    """Streams matched records to a text stream as tab-separated lines."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write_header(self) -> None:
        self.stream.write("\t".join(ECHO_HEADER) + "\n")

    def write_record(self, record: FileRecord) -> None:
        self.stream.write("\t".join(record_fields(record)) + "\n")


def write_csv(records: Iterable[FileRecord], path: Path) -> int:
    """Write *records* to *path* as CSV with a header row.

    Returns:
        Number of data rows written

    Raises:
        OSError: if the file cannot be created or written
    """
    count = 0
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow(record_fields(record))
            count += 1
    LOGGER.info(render_fields_block("CSV Written", {"Path": path, "Rows": count}, pad_top=False))
    return count
