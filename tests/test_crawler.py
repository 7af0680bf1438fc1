from __future__ import annotations

import csv
import io
import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

import pytest
from rich.console import Console

from crawlcopy.config import CrawlerSettings
from crawlcopy.crawler import Crawler
from crawlcopy.errors import WalkError
from crawlcopy.file_discovery import record_from_stat
from crawlcopy.models import FileRecord


def _build_tree(root: Path) -> None:
    (root / "sub").mkdir(parents=True)
    (root / "a.py").write_bytes(b"0123456789")
    (root / "b.txt").write_bytes(b"01234")
    (root / "sub" / "c.py").write_bytes(b"abc")


def _crawler(settings: CrawlerSettings, stdout: TextIO | None = None) -> Crawler:
    console = Console(file=io.StringIO(), width=120)
    return Crawler(settings, stdout=stdout or io.StringIO(), console=console)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    _build_tree(root)
    return root


class TestScanOnly:
    """Crawls without copying."""

    def test_matches_py_files_in_discovery_order(self, tree: Path) -> None:
        stdout = io.StringIO()
        settings = CrawlerSettings(root_dir=str(tree), file_types=".py")

        result = _crawler(settings, stdout).run()

        assert [(record.uid, record.name) for record in result.records] == [(0, "a.py"), (1, "c.py")]
        assert result.jobs == []
        assert result.walk_completed is True
        lines = stdout.getvalue().splitlines()
        assert lines[0].startswith("UID\tName")
        assert [line.split("\t")[1] for line in lines[1:]] == ["a.py", "c.py"]
        assert "b.txt" not in stdout.getvalue()

    def test_echo_disabled_writes_nothing(self, tree: Path) -> None:
        stdout = io.StringIO()
        settings = CrawlerSettings(root_dir=str(tree), echo_files=False)

        result = _crawler(settings, stdout).run()

        assert stdout.getvalue() == ""
        assert result.matched == 2

    def test_case_insensitive_extension(self, tmp_path: Path) -> None:
        (tmp_path / "a.PY").write_text("", encoding="utf-8")
        settings = CrawlerSettings(root_dir=str(tmp_path), file_types=".py")

        result = _crawler(settings).run()

        assert [record.name for record in result.records] == ["a.PY"]

    def test_trailing_separator_matches_extensionless_files(self, tmp_path: Path) -> None:
        (tmp_path / "Makefile").write_text("all:\n", encoding="utf-8")
        (tmp_path / "setup.py").write_text("", encoding="utf-8")
        settings = CrawlerSettings(root_dir=str(tmp_path), file_types=".py,")

        result = _crawler(settings).run()

        assert sorted(record.name for record in result.records) == ["Makefile", "setup.py"]


class TestCopying:
    """Crawls that dispatch copy jobs."""

    def test_copies_matches_with_uid_prefix(self, tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        settings = CrawlerSettings(root_dir=str(tree), to_dir=out, copy_files=True, workers=2)

        result = _crawler(settings).run()

        assert len(result.jobs) == result.matched == 2
        assert (out / "0_a.py").read_bytes() == b"0123456789"
        assert (out / "1_c.py").read_bytes() == b"abc"
        assert sorted(path.name for path in out.iterdir()) == ["0_a.py", "1_c.py"]
        assert len(result.pool.completed) == 2

    def test_output_directory_is_created(self, tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "deep" / "out"
        settings = CrawlerSettings(root_dir=str(tree), to_dir=out, copy_files=True)

        _crawler(settings).run()

        assert (out / "0_a.py").exists()

    def test_five_files_with_three_workers(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        (root / "nested").mkdir(parents=True)
        for name in ("one.py", "two.txt", "three.PY"):
            (root / name).write_text(name, encoding="utf-8")
        for name in ("four.txt", "five.py"):
            (root / "nested" / name).write_text(name, encoding="utf-8")
        out = tmp_path / "out"
        settings = CrawlerSettings(
            root_dir=str(root), file_types=".py,.txt", to_dir=out, copy_files=True, workers=3
        )

        result = _crawler(settings).run()

        assert len(result.pool.completed) == 5
        copied = {path.name.split("_", 1)[1]: path.read_text(encoding="utf-8") for path in out.iterdir()}
        assert copied == {name: name for name in ("one.py", "two.txt", "three.PY", "four.txt", "five.py")}

    def test_same_name_in_different_directories(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        for folder in ("x", "y"):
            (root / folder).mkdir(parents=True)
            (root / folder / "util.py").write_text(folder, encoding="utf-8")
        out = tmp_path / "out"
        settings = CrawlerSettings(root_dir=str(root), to_dir=out, copy_files=True)

        _crawler(settings).run()

        assert (out / "0_util.py").read_text(encoding="utf-8") == "x"
        assert (out / "1_util.py").read_text(encoding="utf-8") == "y"

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes unsupported")
    def test_named_pipe_failure_is_isolated(self, tree: Path, tmp_path: Path) -> None:
        os.mkfifo(tree / "b_pipe.py")
        out = tmp_path / "out"
        settings = CrawlerSettings(root_dir=str(tree), to_dir=out, copy_files=True, workers=2)

        result = _crawler(settings).run()

        assert result.matched == 3
        assert len(result.pool.failures) == 1
        assert result.pool.failures[0].job.source == tree / "b_pipe.py"
        assert "not a regular file" in result.pool.failures[0].message
        assert (out / "0_a.py").exists()
        assert (out / "2_c.py").exists()

    def test_walk_error_still_runs_collected_jobs(self, tree: Path, tmp_path: Path, monkeypatch) -> None:
        def partial_walk(root: str) -> Iterator[FileRecord]:
            path = os.path.join(root, "a.py")
            yield record_from_stat(path, os.lstat(path))
            raise WalkError(os.path.join(root, "sub"), PermissionError(13, "Permission denied"))

        monkeypatch.setattr("crawlcopy.crawler.walk_tree", partial_walk)
        out = tmp_path / "out"
        settings = CrawlerSettings(root_dir=str(tree), to_dir=out, copy_files=True)

        result = _crawler(settings).run()

        assert result.walk_completed is False
        assert isinstance(result.walk_error, WalkError)
        assert (out / "0_a.py").read_bytes() == b"0123456789"


class TestWalkFailures:
    """Walk errors are reported but never raised."""

    def test_missing_root(self, tmp_path: Path) -> None:
        settings = CrawlerSettings(root_dir=str(tmp_path / "missing"), copy_files=True, to_dir=tmp_path / "out")

        result = _crawler(settings).run()

        assert result.walk_error is not None
        assert result.records == []
        assert result.pool.attempted == 0

    def test_empty_root(self) -> None:
        result = _crawler(CrawlerSettings(root_dir="")).run()

        assert result.walk_error is not None


class TestCsvExport:
    """CSV export after copying."""

    def test_writes_csv_when_enabled(self, tree: Path, tmp_path: Path) -> None:
        csv_path = tmp_path / "output.csv"
        settings = CrawlerSettings(root_dir=str(tree), to_csv=True, csv_path=csv_path, echo_files=False)

        result = _crawler(settings).run()

        with csv_path.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
        assert result.csv_path == csv_path
        assert [row[:2] for row in rows[1:]] == [["0", "a.py"], ["1", "c.py"]]

    def test_csv_failure_is_not_fatal(self, tree: Path, tmp_path: Path) -> None:
        csv_path = tmp_path / "missing" / "output.csv"
        settings = CrawlerSettings(root_dir=str(tree), to_csv=True, csv_path=csv_path)

        result = _crawler(settings).run()

        assert result.csv_path is None
        assert result.matched == 2

    def test_csv_not_written_by_default(self, tree: Path, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

        _crawler(CrawlerSettings(root_dir=str(tree))).run()

        assert not (tmp_path / "output.csv").exists()


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="needs arbitrary file name bytes")
class TestUndecodableNames:
    """File names that are not valid UTF-8 are reported, copied and exported."""

    @pytest.fixture
    def odd_tree(self, tmp_path: Path) -> Path:
        root = tmp_path / "root"
        root.mkdir()
        (root / "a.py").write_bytes(b"a")
        (root / os.fsdecode(b"\xff.py")).write_bytes(b"ff")
        return root

    def test_echo_copy_and_csv_complete(self, odd_tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        csv_path = tmp_path / "output.csv"
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        settings = CrawlerSettings(
            root_dir=str(odd_tree),
            to_dir=out,
            copy_files=True,
            to_csv=True,
            csv_path=csv_path,
        )

        result = _crawler(settings, stdout).run()

        stdout.flush()
        echoed = stdout.buffer.getvalue().decode("utf-8")
        assert "\t\\xff.py\t" in echoed
        assert result.pool.failures == []
        assert (out / os.fsdecode(b"1_\xff.py")).read_bytes() == b"ff"
        assert result.csv_path == csv_path
        with csv_path.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
        assert [row[1] for row in rows[1:]] == ["a.py", "\\xff.py"]
