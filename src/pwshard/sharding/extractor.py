"""Flatten a Playwright JSON report into a list of timed test cases."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pwshard.models.report import ReportFormatError, parse_report
from pwshard.models.test_case import TestCase

if TYPE_CHECKING:
    from pwshard.models.report import Report, ReportSpec, ReportSuite

logger = logging.getLogger(__name__)


def read_report(
    report_path: Path,
    *,
    failed_only: bool = False,
    base_dir: Path | None = None,
) -> list[TestCase]:
    """Read a report file and return its flattened test cases.

    Args:
        report_path: Path to a Playwright JSON report.
        failed_only: Keep only tests with at least one non-passing attempt.
        base_dir: Directory spec files are resolved against (default: cwd).

    Raises:
        ReportFormatError: If the file is not UTF-8 JSON or not a report.
    """
    source = str(report_path)
    try:
        data = json.loads(report_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ReportFormatError(f"not UTF-8 encoded ({e})", source) from e
    except json.JSONDecodeError as e:
        raise ReportFormatError(f"invalid JSON ({e})", source) from e

    tests = extract_tests(
        parse_report(data, source), failed_only=failed_only, base_dir=base_dir
    )
    logger.debug(
        "Read %d tests from %s with failed_only=%s", len(tests), report_path, failed_only
    )
    return tests


def extract_tests(
    report: Report | dict[str, Any],
    *,
    failed_only: bool = False,
    base_dir: Path | None = None,
) -> list[TestCase]:
    """Walk the suite tree in pre-order and collect test cases.

    Each suite's nested suites are visited before its own specs, and the
    resulting order is part of the contract (merged reports rely on it).
    """
    if isinstance(report, dict):
        report = parse_report(report)

    root = base_dir or Path.cwd()
    tests: list[TestCase] = []

    def _walk_suite(suite: ReportSuite) -> None:
        for nested in suite.suites:
            _walk_suite(nested)
        for spec in suite.specs:
            _collect_spec(spec)

    def _collect_spec(spec: ReportSpec) -> None:
        # Tests carry no location of their own; the spec's file is authoritative.
        file_path = os.path.abspath(os.path.join(root, spec.file))
        for test in spec.tests:
            case = TestCase(
                title=test.title,
                file_path=file_path,
                duration_ms=test.results[0].duration,
                statuses=[result.status for result in test.results],
                tags=list(test.tags),
                raw=test.raw,
            )
            if failed_only and not case.has_failure:
                continue
            tests.append(case)

    for suite in report.suites:
        _walk_suite(suite)

    return tests
