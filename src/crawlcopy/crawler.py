"""Orchestration of a single crawl: walk, report, copy, export."""

from __future__ import annotations

import logging
import time
from typing import TextIO

from rich.console import Console
from rich.progress import Progress

from .collector import MetadataCollector
from .config import CrawlerSettings
from .errors import WalkError
from .extensions import ExtensionFilter
from .file_discovery import walk_tree
from .logging_utils import render_fields_block
from .models import CopyJob, CopyPoolResult, CrawlResult
from .reporting import TabularReporter, write_csv
from .utils import ensure_directory
from .worker_pool import CopyWorkerPool

LOGGER = logging.getLogger(__name__)


class Crawler:
    def __init__(
        self,
        settings: CrawlerSettings,
        *,
        stdout: TextIO | None = None,
        console: Console | None = None,
        show_progress: bool = False,
    ) -> None:
        self.settings = settings
        self.stdout = stdout
        self.console = console or Console(stderr=True)
        self.show_progress = show_progress
        self.extension_filter = ExtensionFilter.from_string(settings.file_types, settings.separator)

    def run(self) -> CrawlResult:
        """Walk the tree, then copy and export what matched.

        The walk finishes before any copy is dispatched. Walk, copy and CSV
        failures are logged and reflected in the result; none of them raise.
        """
        settings = self.settings
        started = time.perf_counter()
        LOGGER.info(render_fields_block("Crawler Started", settings.as_log_fields()))

        reporter = TabularReporter(self.stdout) if settings.echo_files else None
        if reporter is not None:
            reporter.write_header()

        collector = MetadataCollector(
            self.extension_filter,
            to_dir=settings.to_dir if settings.copy_files else None,
            on_match=reporter.write_record if reporter is not None else None,
        )

        result = CrawlResult()
        try:
            collector.collect(walk_tree(settings.root_dir))
        except WalkError as exc:
            result.walk_error = exc
            LOGGER.error(
                render_fields_block(
                    "Error Walking The Directory",
                    {"Path": exc.path or "(empty)", "Error": exc.reason},
                )
            )

        result.records = collector.records
        result.jobs = collector.jobs
        LOGGER.info(
            render_fields_block(
                "Walk Finished",
                {
                    "Visited": collector.visited,
                    "Matched": len(result.records),
                    "Copy Jobs": len(result.jobs),
                },
            )
        )

        if result.jobs:
            result.pool = self._copy(result.jobs)

        if settings.to_csv:
            try:
                write_csv(result.records, settings.csv_path)
            except (OSError, UnicodeError) as exc:
                LOGGER.error(
                    render_fields_block(
                        "Could Not Create CSV File",
                        {"Path": settings.csv_path, "Error": exc},
                    )
                )
            else:
                result.csv_path = settings.csv_path

        result.elapsed = time.perf_counter() - started
        return result

    def _copy(self, jobs: list[CopyJob]) -> CopyPoolResult:
        to_dir = self.settings.to_dir
        try:
            ensure_directory(to_dir)
        except OSError as exc:
            # Each job still runs and reports its own failure
            LOGGER.error(
                render_fields_block(
                    "Could Not Create Output Directory",
                    {"Path": to_dir, "Error": exc},
                )
            )

        with Progress(console=self.console, disable=not self.show_progress, transient=True) as progress:
            task_id = progress.add_task("Copying", total=len(jobs))
            pool = CopyWorkerPool(
                self.settings.workers,
                on_progress=lambda _job: progress.advance(task_id, 1),
            )
            return pool.run(jobs)
