"""Duration-balanced shard partitioning.

Uses the longest-processing-time-first heuristic: tests are sorted by
descending duration and each one goes to the shard with the smallest running
total.  The spread between the heaviest and lightest shard never exceeds the
duration of the single longest test.
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pwshard.models.shard import ShardAssignment, ShardFileEntry

if TYPE_CHECKING:
    from pwshard.models.test_case import TestCase

logger = logging.getLogger(__name__)

_MS_PER_MINUTE = 60_000


def assign_to_shards(tests: list[TestCase], num_splits: int) -> list[list[TestCase]]:
    """Assign tests to *num_splits* shards, longest first.

    Ties in duration keep their input order, and ties in shard load go to the
    lowest shard index, so the same input always gives the same shards.

    Raises:
        ValueError: If *num_splits* is less than 1.
    """
    if num_splits < 1:
        msg = f"num_splits must be >= 1, got {num_splits}"
        raise ValueError(msg)

    # sorted() is stable with reverse=True, equal durations keep input order
    ordered = sorted(tests, key=lambda t: t.duration_ms, reverse=True)
    shards: list[list[TestCase]] = [[] for _ in range(num_splits)]
    totals = [0] * num_splits

    for test in ordered:
        target = totals.index(min(totals))
        shards[target].append(test)
        totals[target] += test.duration_ms

    return shards


def split_tests(
    tests: list[TestCase],
    num_splits: int,
    *,
    base_dir: Path | None = None,
) -> list[ShardAssignment]:
    """Partition *tests* into *num_splits* shard assignments.

    Args:
        tests: Flattened test corpus.
        num_splits: Number of shards (>= 1).
        base_dir: Directory file paths are made relative to (default: cwd).

    Returns:
        One ``ShardAssignment`` per shard, in shard order.  Shards that
        received no tests are present with zero duration and no files.
    """
    root = base_dir or Path.cwd()
    assignments: list[ShardAssignment] = []

    for index, shard in enumerate(assign_to_shards(tests, num_splits)):
        total_ms = sum(test.duration_ms for test in shard)
        logger.debug(
            "Split %d: %d tests, total duration: %dms", index + 1, len(shard), total_ms
        )
        assignments.append(
            ShardAssignment(
                total_duration_minutes=round_minutes(total_ms),
                files=[
                    ShardFileEntry(
                        file=os.path.relpath(test.file_path, root),
                        duration=test.duration_ms,
                    )
                    for test in shard
                ],
            )
        )

    return assignments


def round_minutes(duration_ms: int) -> int:
    """Convert milliseconds to whole minutes, rounding halves up."""
    return math.floor(duration_ms / _MS_PER_MINUTE + 0.5)
