"""Typed view of the Playwright JSON reporter document.

Only the fields needed for splitting are lifted into attributes.  Every test
record keeps its original ``raw`` mapping so that a merged report can be
written back out without losing retries, steps, annotations, etc.

Playwright's JSON reporter format (abridged):
{
  "suites": [
    {
      "title": "auth.spec.ts",
      "file": "auth.spec.ts",
      "suites": [...],
      "specs": [
        {
          "title": "should login",
          "file": "auth.spec.ts",
          "tests": [
            {
              "title": "should login",
              "ok": true,
              "tags": [],
              "results": [{"status": "passed", "duration": 1250, ...}]
            }
          ]
        }
      ]
    }
  ]
}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


class ReportFormatError(ValueError):
    """Raised when a report document does not have the expected shape."""

    def __init__(self, message: str, source: str = "") -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


@dataclass
class ReportResult:
    """One execution attempt of a test."""

    status: str
    """Playwright status (``passed``, ``failed``, ``timedOut``, ``skipped``, ...)."""

    duration: int
    """Wall-clock duration of the attempt in milliseconds."""


@dataclass
class ReportTest:
    """A single test record inside a spec."""

    title: str
    results: list[ReportResult]
    """Execution attempts; the first one is the original run, the rest are retries."""

    tags: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)
    """The untouched JSON object this record was parsed from."""


@dataclass
class ReportSpec:
    """A ``test()`` declaration bound to its source file."""

    title: str
    file: str
    """Spec file path, relative to the Playwright ``rootDir``."""

    tests: list[ReportTest] = field(default_factory=list)


@dataclass
class ReportSuite:
    """A file-level or ``describe()`` suite."""

    title: str = ""
    file: str = ""
    suites: list[ReportSuite] = field(default_factory=list)
    specs: list[ReportSpec] = field(default_factory=list)


@dataclass
class Report:
    """Root of a Playwright JSON report."""

    suites: list[ReportSuite] = field(default_factory=list)


# ── Parsing ──────────────────────────────────────────────────────


def parse_report(data: Any, source: str = "") -> Report:
    """Parse a decoded JSON document into a :class:`Report`.

    Raises:
        ReportFormatError: If any required field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise ReportFormatError("report root must be an object", source)
    suites = _require_list(data, "suites", "report", source)
    return Report(
        suites=[
            _parse_suite(suite, f"suites[{i}]", source) for i, suite in enumerate(suites)
        ]
    )


def _parse_suite(data: Any, where: str, source: str) -> ReportSuite:
    if not isinstance(data, dict):
        raise ReportFormatError(f"{where} must be an object", source)

    # Nested suites and specs are both optional in Playwright output.
    nested = _optional_list(data, "suites", where, source)
    specs = _optional_list(data, "specs", where, source)
    return ReportSuite(
        title=str(data.get("title", "")),
        file=str(data.get("file", "")),
        suites=[
            _parse_suite(child, f"{where}.suites[{i}]", source) for i, child in enumerate(nested)
        ],
        specs=[_parse_spec(spec, f"{where}.specs[{i}]", source) for i, spec in enumerate(specs)],
    )


def _parse_spec(data: Any, where: str, source: str) -> ReportSpec:
    if not isinstance(data, dict):
        raise ReportFormatError(f"{where} must be an object", source)

    file = data.get("file")
    if not isinstance(file, str) or not file:
        raise ReportFormatError(f"{where}.file is missing", source)

    tests = _require_list(data, "tests", where, source)
    return ReportSpec(
        title=str(data.get("title", "")),
        file=file,
        tests=[_parse_test(test, f"{where}.tests[{i}]", source) for i, test in enumerate(tests)],
    )


def _parse_test(data: Any, where: str, source: str) -> ReportTest:
    if not isinstance(data, dict):
        raise ReportFormatError(f"{where} must be an object", source)

    results = _require_list(data, "results", where, source)
    if not results:
        raise ReportFormatError(f"{where}.results is empty", source)

    tags = data.get("tags", [])
    if not isinstance(tags, list):
        raise ReportFormatError(f"{where}.tags must be a list", source)

    return ReportTest(
        title=str(data.get("title", "")),
        results=[
            _parse_result(result, f"{where}.results[{i}]", source)
            for i, result in enumerate(results)
        ],
        tags=[str(tag) for tag in tags],
        raw=data,
    )


def _parse_result(data: Any, where: str, source: str) -> ReportResult:
    if not isinstance(data, dict):
        raise ReportFormatError(f"{where} must be an object", source)

    status = data.get("status")
    if not isinstance(status, str):
        raise ReportFormatError(f"{where}.status is missing", source)

    duration = data.get("duration")
    # bool is an int subclass; a boolean duration is still malformed.
    if isinstance(duration, bool) or not isinstance(duration, int | float):
        raise ReportFormatError(f"{where}.duration must be a number, got {duration!r}", source)
    if not math.isfinite(duration) or duration < 0:
        raise ReportFormatError(
            f"{where}.duration must be a finite number >= 0, got {duration}", source
        )

    return ReportResult(status=status, duration=int(duration))


def _require_list(data: dict[str, Any], key: str, where: str, source: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ReportFormatError(f"{where}.{key} must be a list", source)
    return value


def _optional_list(data: dict[str, Any], key: str, where: str, source: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ReportFormatError(f"{where}.{key} must be a list", source)
    return value
