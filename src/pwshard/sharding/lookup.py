"""Resolve the spec files a CI shard should run."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pwshard.config import LookupConfig
from pwshard.sharding.split_files import read_split_file, split_file_path

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def parse_shard_index(value: int | str | None) -> int | None:
    """Parse a 1-based shard index, returning ``None`` when it is unusable."""
    if value is None:
        return None
    if isinstance(value, int):
        index = value
    else:
        try:
            index = int(value.strip())
        except ValueError:
            return None
    return index if index >= 1 else None


def get_test_match(
    shard_index: int | str | None,
    output_dir: Path | str,
    *,
    base_dir: Path | None = None,
) -> list[str]:
    """Return absolute spec file paths assigned to *shard_index*.

    An invalid index or a missing ``split-<n>.json`` gives an empty list;
    whether that is acceptable is up to the caller.  Paths are returned once
    per test entry, so a file holding several tests appears several times.
    """
    index = parse_shard_index(shard_index)
    split_path = split_file_path(Path(output_dir), index) if index is not None else None

    if split_path is None or not split_path.is_file():
        logger.debug("No valid split file found for index %r in %s", shard_index, output_dir)
        return []

    root = base_dir or Path.cwd()
    split = read_split_file(split_path)
    logger.debug("Loaded test match from %s", split_path)
    return [os.path.abspath(os.path.join(root, entry.file)) for entry in split.files]


def get_test_match_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    config: LookupConfig | None = None,
    base_dir: Path | None = None,
) -> list[str]:
    """Resolve the test match from ``SPLIT_INDEX1`` / ``OUTPUT_DIR``.

    Variable names and the default output directory come from *config*.
    """
    env = os.environ if environ is None else environ
    lookup = config or LookupConfig()

    output_dir = env.get(lookup.output_env) or lookup.default_output
    return get_test_match(env.get(lookup.index_env), output_dir, base_dir=base_dir)
