from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import WalkError


@dataclass(frozen=True, slots=True)
class FileRecord:
    name: str
    ext: str
    mod_time: dt.datetime
    size: int
    path: Path
    is_regular: bool
    is_dir: bool
    uid: int = -1

    @property
    def matched(self) -> bool:
        return self.uid >= 0


@dataclass(frozen=True, slots=True)
class CopyJob:
    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class CopyOutcome:
    job: CopyJob
    bytes_copied: int


@dataclass(frozen=True, slots=True)
class CopyFailure:
    job: CopyJob
    error: BaseException

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass(slots=True)
class CopyPoolResult:
    completed: List[CopyOutcome] = field(default_factory=list)
    failures: List[CopyFailure] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.completed) + len(self.failures)

    @property
    def bytes_copied(self) -> int:
        return sum(outcome.bytes_copied for outcome in self.completed)


@dataclass(slots=True)
class CrawlResult:
    records: List[FileRecord] = field(default_factory=list)
    jobs: List[CopyJob] = field(default_factory=list)
    pool: CopyPoolResult = field(default_factory=CopyPoolResult)
    walk_error: Optional[WalkError] = None
    csv_path: Optional[Path] = None
    elapsed: float = 0.0

    @property
    def matched(self) -> int:
        return len(self.records)

    @property
    def walk_completed(self) -> bool:
        return self.walk_error is None
