"""Accumulation of matched records and identifier assignment."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .copier import build_copy_job
from .extensions import ExtensionFilter
from .models import CopyJob, FileRecord

LOGGER = logging.getLogger(__name__)

MatchCallback = Callable[[FileRecord], None]


class MetadataCollector:
    """Keeps the matched records of a single crawl.

    Identifiers start at 0 and advance once per matched file, never per
    visited entry. The same identifier prefixes the copy destination so a
    report row can be traced to the copied artifact.
    """

    def __init__(
        self,
        extension_filter: ExtensionFilter,
        *,
        to_dir: Path | None = None,
        on_match: MatchCallback | None = None,
    ) -> None:
        """Create a collector.

        Args:
            extension_filter: Filter deciding which records are kept
            to_dir: Copy destination; copy jobs are only built when set
            on_match: Called with each stamped record in discovery order
        """
        self.extension_filter = extension_filter
        self.to_dir = to_dir
        self.on_match = on_match
        self.records: list[FileRecord] = []
        self.jobs: list[CopyJob] = []
        self.visited = 0
        self._next_uid = 0

    def offer(self, record: FileRecord) -> FileRecord | None:
        """Stamp and keep *record* if it matches; return it, else None."""
        self.visited += 1
        if not self.extension_filter.matches(record):
            return None

        stamped = dataclasses.replace(record, uid=self._next_uid)
        self._next_uid += 1
        self.records.append(stamped)
        LOGGER.debug("Matched %s (uid %d)", stamped.path, stamped.uid)
        if self.to_dir is not None:
            self.jobs.append(build_copy_job(stamped, self.to_dir))
        if self.on_match is not None:
            self.on_match(stamped)
        return stamped

    def collect(self, records: Iterable[FileRecord]) -> None:
        """Offer every record from *records*.

        Exceptions raised by the iterable propagate; records collected before
        the failure are kept.
        """
        for record in records:
            self.offer(record)
