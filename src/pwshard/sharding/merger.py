"""Merge several Playwright reports into one test corpus."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pwshard.models.test_case import TestCase
from pwshard.sharding.extractor import read_report

logger = logging.getLogger(__name__)

REPORT_SUFFIX = ".json"


def merge_reports(
    report_dir: Path,
    *,
    failed_only: bool = False,
    base_dir: Path | None = None,
) -> list[TestCase]:
    """Read every ``*.json`` report in *report_dir* and concatenate the tests.

    Reports are processed in filename order so the merged corpus is the same
    on every run.  A missing or empty directory yields no tests; a malformed
    report raises and aborts the whole merge.
    """
    if not report_dir.is_dir():
        logger.warning("Report directory %s does not exist, no tests to merge", report_dir)
        return []

    report_files = sorted(
        p for p in report_dir.iterdir() if p.is_file() and p.name.endswith(REPORT_SUFFIX)
    )

    all_tests: list[TestCase] = []
    for report_path in report_files:
        all_tests.extend(read_report(report_path, failed_only=failed_only, base_dir=base_dir))

    logger.debug("Merged %d tests from %d reports", len(all_tests), len(report_files))
    return all_tests


def build_merged_report(
    tests: list[TestCase],
    *,
    base_dir: Path | None = None,
) -> dict[str, Any]:
    """Build a synthetic report holding one spec per test.

    The result has the regular report shape, so it can be fed back through
    :func:`pwshard.sharding.extractor.read_report`.
    """
    root = base_dir or Path.cwd()
    specs = [
        {
            "title": test.title,
            "file": os.path.relpath(test.file_path, root),
            "tests": [test.raw or _synthesize_test_record(test)],
        }
        for test in tests
    ]
    return {"suites": [{"title": "", "file": "", "suites": [], "specs": specs}]}


def write_merged_report(
    tests: list[TestCase],
    output_path: Path,
    *,
    base_dir: Path | None = None,
) -> None:
    """Serialize the merged report to *output_path*."""
    data = build_merged_report(tests, base_dir=base_dir)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.debug("Wrote merged report with %d tests to %s", len(tests), output_path)


def _synthesize_test_record(test: TestCase) -> dict[str, Any]:
    """Rebuild a minimal test record for cases constructed without raw data."""
    first_status = test.statuses[0] if test.statuses else "passed"
    return {
        "title": test.title,
        "ok": test.passed,
        "tags": list(test.tags),
        "results": [{"status": first_status, "duration": test.duration_ms}]
        + [{"status": status, "duration": 0} for status in test.statuses[1:]],
    }
