"""Tests for pwshard.models.report."""

from __future__ import annotations

from typing import Any

import pytest

from pwshard.models.report import ReportFormatError, parse_report


def _result(status: str = "passed", duration: Any = 100) -> dict[str, Any]:
    return {
        "workerIndex": 0,
        "status": status,
        "duration": duration,
        "startTime": "2024-05-01T10:00:00.000Z",
        "steps": [],
    }


def _report_with_result(result: dict[str, Any]) -> dict[str, Any]:
    return {
        "suites": [
            {
                "title": "login.spec.ts",
                "file": "login.spec.ts",
                "specs": [
                    {
                        "title": "logs in",
                        "file": "login.spec.ts",
                        "tests": [{"title": "logs in", "tags": ["@smoke"], "results": [result]}],
                    }
                ],
            }
        ]
    }


class TestParseReport:
    def test_parses_nested_tree(self) -> None:
        data = {
            "suites": [
                {
                    "title": "cart.spec.ts",
                    "file": "cart.spec.ts",
                    "suites": [
                        {
                            "title": "checkout",
                            "file": "cart.spec.ts",
                            "specs": [
                                {
                                    "title": "pays",
                                    "file": "cart.spec.ts",
                                    "tests": [
                                        {
                                            "title": "pays",
                                            "ok": True,
                                            "tags": ["@slow"],
                                            "results": [_result("failed", 300), _result("passed", 250)],
                                        }
                                    ],
                                }
                            ],
                        }
                    ],
                    "specs": [],
                }
            ]
        }

        report = parse_report(data)

        assert len(report.suites) == 1
        nested = report.suites[0].suites[0]
        assert nested.title == "checkout"
        test = nested.specs[0].tests[0]
        assert test.tags == ["@slow"]
        assert [r.status for r in test.results] == ["failed", "passed"]
        assert test.results[0].duration == 300
        assert test.raw is data["suites"][0]["suites"][0]["specs"][0]["tests"][0]

    def test_missing_nested_suites_and_specs_are_empty(self) -> None:
        report = parse_report({"suites": [{"title": "empty"}]})
        assert report.suites[0].suites == []
        assert report.suites[0].specs == []

    def test_float_duration_is_truncated_to_int(self) -> None:
        report = parse_report(_report_with_result(_result(duration=120.9)))
        assert report.suites[0].specs[0].tests[0].results[0].duration == 120

    def test_root_must_be_object(self) -> None:
        with pytest.raises(ReportFormatError, match="report root must be an object"):
            parse_report([])

    def test_missing_suites(self) -> None:
        with pytest.raises(ReportFormatError, match=r"report\.suites must be a list"):
            parse_report({"config": {}})

    def test_spec_without_file(self) -> None:
        data = {"suites": [{"specs": [{"title": "x", "tests": []}]}]}
        with pytest.raises(ReportFormatError, match=r"suites\[0\]\.specs\[0\]\.file is missing"):
            parse_report(data)

    def test_spec_without_tests(self) -> None:
        data = {"suites": [{"specs": [{"title": "x", "file": "x.spec.ts"}]}]}
        with pytest.raises(ReportFormatError, match="tests must be a list"):
            parse_report(data)

    def test_test_without_results(self) -> None:
        data = {
            "suites": [
                {"specs": [{"file": "x.spec.ts", "tests": [{"title": "t", "results": []}]}]}
            ]
        }
        with pytest.raises(ReportFormatError, match="results is empty"):
            parse_report(data)

    def test_non_numeric_duration(self) -> None:
        with pytest.raises(ReportFormatError, match="duration must be a number"):
            parse_report(_report_with_result(_result(duration="fast")))

    def test_boolean_duration_is_rejected(self) -> None:
        with pytest.raises(ReportFormatError, match="duration must be a number"):
            parse_report(_report_with_result(_result(duration=True)))

    def test_negative_duration(self) -> None:
        with pytest.raises(ReportFormatError, match="duration must be a finite number >= 0"):
            parse_report(_report_with_result(_result(duration=-5)))

    def test_infinite_duration(self) -> None:
        with pytest.raises(ReportFormatError, match="finite number"):
            parse_report(_report_with_result(_result(duration=float("inf"))))

    def test_missing_status(self) -> None:
        result = _result()
        del result["status"]
        with pytest.raises(ReportFormatError, match="status is missing"):
            parse_report(_report_with_result(result))

    def test_error_message_includes_source(self) -> None:
        with pytest.raises(ReportFormatError) as exc_info:
            parse_report({}, source="reports/run-1.json")
        assert exc_info.value.source == "reports/run-1.json"
        assert str(exc_info.value).startswith("reports/run-1.json: ")

    def test_is_a_value_error(self) -> None:
        assert issubclass(ReportFormatError, ValueError)
