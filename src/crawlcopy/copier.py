"""Blocking single-file copy and copy-destination naming."""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path

from .errors import CopyError
from .models import CopyJob, FileRecord

COPY_CHUNK_SIZE = 1024 * 1024


def destination_for(record: FileRecord, to_dir: Path) -> Path:
    """Return ``<to_dir>/<uid>_<name>`` for a matched record."""
    if not record.matched:
        raise ValueError(f"Record has no identifier: {record.path}")
    return to_dir / f"{record.uid}_{record.name}"


def build_copy_job(record: FileRecord, to_dir: Path) -> CopyJob:
    return CopyJob(source=record.path, destination=destination_for(record, to_dir))


def copy_file(source: Path, destination: Path) -> int:
    """Copy the bytes of *source* into *destination*.

    The destination is created or truncated. Nothing but content is carried
    over: no permissions, timestamps or ownership.

    Args:
        source: File to read; symlinks are followed
        destination: File to create

    Returns:
        Number of bytes written

    Raises:
        CopyError: if the source is not a regular file
        OSError: if the source cannot be opened or the destination created
    """
    info = os.stat(source)
    if not stat.S_ISREG(info.st_mode):
        raise CopyError(f"{source} is not a regular file")

    with open(source, "rb") as reader, open(destination, "wb") as writer:
        shutil.copyfileobj(reader, writer, COPY_CHUNK_SIZE)
        return writer.tell()
