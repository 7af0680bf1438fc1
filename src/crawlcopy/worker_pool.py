"""Bounded pool of copy workers fed from a shared job queue.

Workers pull jobs first-come-first-served from one queue and report failures
to a second queue that a single drain thread logs. A failed copy is recorded
and the worker moves on, so one bad file never stalls its siblings. The job
queue's unfinished-task count acts as the completion counter: ``run`` blocks
until every job has been copied or reported as failed, then closes the job
queue and the error channel in that order.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from .copier import copy_file
from .logging_utils import render_fields_block
from .models import CopyFailure, CopyJob, CopyOutcome, CopyPoolResult

LOGGER = logging.getLogger(__name__)

DEFAULT_WORKERS = 4

CopyFunc = Callable[[Path, Path], int]
ProgressCallback = Callable[[CopyJob], None]

# Queue sentinel marking a closed channel
_CLOSED = object()


class CopyWorkerPool:
    """Run copy jobs across a fixed number of worker threads."""

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        *,
        copy_func: CopyFunc = copy_file,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the pool.

        Args:
            workers: Number of concurrent copy workers, at least 1
            copy_func: Blocking copy primitive, ``(source, destination) -> bytes``
            on_progress: Called from a worker thread after each job finishes,
                whether it succeeded or failed
        """
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}")
        self.workers = workers
        self.copy_func = copy_func
        self.on_progress = on_progress

    def run(self, jobs: Sequence[CopyJob]) -> CopyPoolResult:
        """Execute every job exactly once and wait for all of them.

        Args:
            jobs: Full job list, known before dispatch

        Returns:
            CopyPoolResult with completed jobs and failures, in no particular order
        """
        result = CopyPoolResult()
        if not jobs:
            LOGGER.debug("No copy jobs to dispatch")
            return result

        job_queue: queue.Queue[CopyJob | object] = queue.Queue(maxsize=len(jobs))
        error_queue: queue.Queue[CopyFailure | object] = queue.Queue(maxsize=len(jobs) + 1)
        completed_lock = threading.Lock()

        LOGGER.info("Initialising %d workers", self.workers)
        workers = [
            threading.Thread(
                target=self._work,
                args=(job_queue, error_queue, result, completed_lock),
                name=f"copy-worker-{index}",
                daemon=True,
            )
            for index in range(self.workers)
        ]
        for worker in workers:
            worker.start()

        for job in jobs:
            job_queue.put(job)

        drain = threading.Thread(
            target=self._drain_errors,
            args=(error_queue, result),
            name="copy-error-drain",
            daemon=True,
        )
        drain.start()

        job_queue.join()

        for _ in workers:
            job_queue.put(_CLOSED)
        for worker in workers:
            worker.join()

        error_queue.put(_CLOSED)
        drain.join()

        LOGGER.info(
            render_fields_block(
                "Copy Workers Finished",
                {
                    "Jobs": len(jobs),
                    "Copied": len(result.completed),
                    "Failed": len(result.failures),
                },
                pad_top=False,
            )
        )
        return result

    def _work(
        self,
        job_queue: queue.Queue[CopyJob | object],
        error_queue: queue.Queue[CopyFailure | object],
        result: CopyPoolResult,
        completed_lock: threading.Lock,
    ) -> None:
        while True:
            job = job_queue.get()
            try:
                if job is _CLOSED:
                    return
                self._run_job(job, error_queue, result, completed_lock)
            finally:
                job_queue.task_done()

    def _run_job(
        self,
        job: CopyJob,
        error_queue: queue.Queue[CopyFailure | object],
        result: CopyPoolResult,
        completed_lock: threading.Lock,
    ) -> None:
        LOGGER.info("Copying %s to %s", job.source, job.destination)
        try:
            copied = self.copy_func(job.source, job.destination)
        except Exception as exc:  # noqa: BLE001 - reported through the error channel
            error_queue.put(CopyFailure(job=job, error=exc))
        else:
            with completed_lock:
                result.completed.append(CopyOutcome(job=job, bytes_copied=copied))

        if self.on_progress is not None:
            try:
                self.on_progress(job)
            except Exception:  # noqa: BLE001 - progress display only
                LOGGER.exception("Progress callback failed for %s", job.source)

    @staticmethod
    def _drain_errors(error_queue: queue.Queue[CopyFailure | object], result: CopyPoolResult) -> None:
        while True:
            failure = error_queue.get()
            if failure is _CLOSED:
                return
            LOGGER.error(
                render_fields_block(
                    "Copy Failed",
                    {
                        "Source": failure.job.source,
                        "Destination": failure.job.destination,
                        "Error": failure.message,
                    },
                    pad_top=False,
                )
            )
            result.failures.append(failure)
