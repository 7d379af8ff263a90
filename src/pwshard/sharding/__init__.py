"""Report extraction and duration-balanced test sharding."""

from pwshard.sharding.extractor import extract_tests, read_report
from pwshard.sharding.lookup import get_test_match, get_test_match_from_env
from pwshard.sharding.merger import build_merged_report, merge_reports, write_merged_report
from pwshard.sharding.partitioner import assign_to_shards, split_tests
from pwshard.sharding.split_files import read_split_file, write_split_files

__all__ = [
    "assign_to_shards",
    "build_merged_report",
    "extract_tests",
    "get_test_match",
    "get_test_match_from_env",
    "merge_reports",
    "read_report",
    "read_split_file",
    "split_tests",
    "write_merged_report",
    "write_split_files",
]
