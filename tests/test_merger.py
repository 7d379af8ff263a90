"""Tests for pwshard.sharding.merger."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from pwshard.models.report import ReportFormatError
from pwshard.models.test_case import TestCase
from pwshard.sharding.extractor import extract_tests, read_report
from pwshard.sharding.merger import build_merged_report, merge_reports, write_merged_report


def _report(file: str, *tests: tuple[str, str, int]) -> dict[str, Any]:
    """Build a one-suite report; *tests* are ``(title, status, duration)`` tuples."""
    return {
        "suites": [
            {
                "title": file,
                "file": file,
                "specs": [
                    {
                        "title": title,
                        "file": file,
                        "tests": [
                            {
                                "title": title,
                                "ok": status == "passed",
                                "tags": [],
                                "results": [
                                    {
                                        "workerIndex": 0,
                                        "status": status,
                                        "duration": duration,
                                        "startTime": "2024-05-01T10:00:00.000Z",
                                        "steps": [],
                                    }
                                ],
                            }
                        ],
                    }
                    for title, status, duration in tests
                ],
            }
        ]
    }


def _write(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestMergeReports:
    def test_concatenates_in_filename_order(self, tmp_path: Path) -> None:
        reports = tmp_path / "reports"
        reports.mkdir()
        _write(reports / "b.json", _report("b.spec.ts", ("b1", "passed", 10), ("b2", "passed", 20)))
        _write(reports / "a.json", _report("a.spec.ts", ("a1", "passed", 30)))

        tests = merge_reports(reports, base_dir=tmp_path)
        assert [t.title for t in tests] == ["a1", "b1", "b2"]

    def test_ignores_non_report_files(self, tmp_path: Path) -> None:
        reports = tmp_path / "reports"
        reports.mkdir()
        _write(reports / "a.json", _report("a.spec.ts", ("a1", "passed", 30)))
        (reports / "notes.txt").write_text("not a report", encoding="utf-8")
        (reports / "nested.json").mkdir()

        tests = merge_reports(reports, base_dir=tmp_path)
        assert [t.title for t in tests] == ["a1"]

    def test_failed_only_applies_to_every_report(self, tmp_path: Path) -> None:
        reports = tmp_path / "reports"
        reports.mkdir()
        _write(reports / "1.json", _report("a.spec.ts", ("ok", "passed", 1), ("bad", "failed", 2)))
        _write(reports / "2.json", _report("b.spec.ts", ("flaky", "timedOut", 3)))

        tests = merge_reports(reports, failed_only=True, base_dir=tmp_path)
        assert [t.title for t in tests] == ["bad", "flaky"]

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert merge_reports(tmp_path) == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert merge_reports(tmp_path / "missing") == []

    def test_malformed_report_fails_merge(self, tmp_path: Path) -> None:
        _write(tmp_path / "a.json", _report("a.spec.ts", ("a1", "passed", 30)))
        _write(tmp_path / "b.json", {"suites": "broken"})

        with pytest.raises(ReportFormatError):
            merge_reports(tmp_path)


class TestBuildMergedReport:
    def test_one_spec_per_test(self, tmp_path: Path) -> None:
        tests = extract_tests(
            _report("a.spec.ts", ("a1", "passed", 10), ("a2", "failed", 20)), base_dir=tmp_path
        )

        report = build_merged_report(tests, base_dir=tmp_path)

        [suite] = report["suites"]
        assert [spec["file"] for spec in suite["specs"]] == ["a.spec.ts", "a.spec.ts"]
        assert all(len(spec["tests"]) == 1 for spec in suite["specs"])
        assert suite["specs"][1]["tests"][0] is tests[1].raw

    def test_merged_report_reads_back_identically(self, tmp_path: Path) -> None:
        tests = extract_tests(
            _report("e2e/a.spec.ts", ("a1", "passed", 10), ("a2", "failed", 20)),
            base_dir=tmp_path,
        )

        again = extract_tests(build_merged_report(tests, base_dir=tmp_path), base_dir=tmp_path)

        assert [(t.title, t.file_path, t.duration_ms, t.statuses) for t in again] == [
            (t.title, t.file_path, t.duration_ms, t.statuses) for t in tests
        ]

    def test_synthesizes_record_without_raw(self, tmp_path: Path) -> None:
        test = TestCase(
            title="built",
            file_path=str(tmp_path / "x.spec.ts"),
            duration_ms=1234,
            statuses=["failed", "passed"],
        )

        [again] = extract_tests(build_merged_report([test], base_dir=tmp_path), base_dir=tmp_path)

        assert again.duration_ms == 1234
        assert again.statuses == ["failed", "passed"]
        assert again.file_path == test.file_path

    def test_empty_corpus(self) -> None:
        report = build_merged_report([])
        assert report["suites"][0]["specs"] == []


class TestWriteMergedReport:
    def test_writes_readable_report(self, tmp_path: Path) -> None:
        tests = extract_tests(_report("a.spec.ts", ("a1", "passed", 10)), base_dir=tmp_path)
        output = tmp_path / "out" / "merged.json"

        write_merged_report(tests, output, base_dir=tmp_path)

        assert output.exists()
        assert [t.title for t in read_report(output, base_dir=tmp_path)] == ["a1"]
