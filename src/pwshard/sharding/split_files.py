"""Persist shard assignments as ``split-<n>.json`` documents."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pwshard.models.shard import ShardAssignment

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def split_file_path(output_dir: Path, shard_number: int) -> Path:
    """Return the path of the document for the 1-based *shard_number*."""
    return output_dir / f"split-{shard_number}.json"


def write_split_files(splits: list[ShardAssignment], output_dir: Path) -> list[Path]:
    """Write one JSON document per shard into *output_dir*.

    Returns:
        Paths written, in shard order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for index, split in enumerate(splits):
        path = split_file_path(output_dir, index + 1)
        path.write_text(json.dumps(split.to_dict(), indent=2), encoding="utf-8")
        logger.debug("Saved split %d to %s", index + 1, path)
        written.append(path)
    return written


def read_split_file(path: Path) -> ShardAssignment:
    """Read a shard assignment document.

    Raises:
        ValueError: If the file is not valid JSON or not a shard assignment.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        msg = f"{path}: shard assignment must be a JSON object"
        raise ValueError(msg)
    return ShardAssignment.from_dict(data)
