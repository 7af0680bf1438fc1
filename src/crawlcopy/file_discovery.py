"""Recursive directory traversal producing file metadata records.

The walk visits the root itself and every entry below it in lexical order,
reporting entries with ``lstat`` so symbolic links are listed but never
followed. Any failing filesystem query aborts the walk with a ``WalkError``.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from .errors import WalkError
from .extensions import extension_of
from .models import FileRecord

LOGGER = logging.getLogger(__name__)


def record_from_stat(path: str, info: os.stat_result) -> FileRecord:
    """Build an unmatched FileRecord for *path* from its stat result.

    Args:
        path: Filesystem path of the entry
        info: Result of ``os.lstat`` on the entry

    Returns:
        FileRecord without an identifier
    """
    name = os.path.basename(path) or path
    return FileRecord(
        name=name,
        ext=extension_of(name),
        mod_time=dt.datetime.fromtimestamp(info.st_mtime).astimezone(),
        size=info.st_size,
        path=Path(path),
        is_regular=stat.S_ISREG(info.st_mode),
        is_dir=stat.S_ISDIR(info.st_mode),
    )


def _lstat(path: str) -> os.stat_result:
    try:
        return os.lstat(path)
    except OSError as exc:
        raise WalkError(path, exc) from exc


def _list_children(path: str) -> list[str]:
    try:
        with os.scandir(path) as entries:
            names = sorted(entry.name for entry in entries)
    except OSError as exc:
        raise WalkError(path, exc) from exc
    return [os.path.join(path, name) for name in names]


def walk_tree(root: str | os.PathLike[str]) -> Iterator[FileRecord]:
    """Yield a FileRecord for the root and every entry beneath it.

    Traversal is depth-first and pre-order, with siblings in lexical order.
    Directories are descended into. An empty root is not replaced by the
    working directory; it fails like any other missing path.

    Args:
        root: Directory (or file) to start from

    Yields:
        FileRecord for each visited entry, with an absolute path

    Raises:
        WalkError: if an entry cannot be queried or a directory cannot be listed
    """
    root_text = os.fspath(root)
    if root_text:
        root_text = os.path.abspath(root_text)

    pending = [root_text]
    while pending:
        path = pending.pop()
        info = _lstat(path)
        yield record_from_stat(path, info)
        if stat.S_ISDIR(info.st_mode):
            LOGGER.debug("Descending into %s", path)
            pending.extend(reversed(_list_children(path)))
