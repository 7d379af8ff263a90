"""Data models for pwshard."""

from pwshard.models.report import Report, ReportFormatError, parse_report
from pwshard.models.shard import ShardAssignment, ShardFileEntry
from pwshard.models.test_case import TestCase

__all__ = [
    "Report",
    "ReportFormatError",
    "ShardAssignment",
    "ShardFileEntry",
    "TestCase",
    "parse_report",
]
