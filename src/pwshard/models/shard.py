"""Shard assignment models and their JSON document form."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ShardFileEntry:
    """One test's entry in a shard assignment."""

    file: str
    """Spec file path relative to the project root."""

    duration: int
    """Test duration in milliseconds."""


@dataclass
class ShardAssignment:
    """Tests assigned to one shard, in assignment order."""

    total_duration_minutes: int = 0
    """Estimated shard runtime, rounded to whole minutes."""

    files: list[ShardFileEntry] = field(default_factory=list)
    """One entry per test (a spec file with several tests appears several times)."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted ``split-<n>.json`` shape."""
        return {
            "totalDurationMinutes": self.total_duration_minutes,
            "files": [{"file": entry.file, "duration": entry.duration} for entry in self.files],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShardAssignment:
        """Build from a decoded ``split-<n>.json`` document.

        Raises:
            ValueError: If the document is not a shard assignment.
        """
        files = data.get("files")
        if not isinstance(files, list):
            msg = "shard assignment is missing a 'files' list"
            raise ValueError(msg)
        entries: list[ShardFileEntry] = []
        for i, entry in enumerate(files):
            if not isinstance(entry, dict) or not isinstance(entry.get("file"), str):
                msg = f"files[{i}] must be an object with a 'file' string"
                raise ValueError(msg)
            duration = _number(entry.get("duration", 0), f"files[{i}].duration")
            entries.append(ShardFileEntry(file=entry["file"], duration=duration))

        return cls(
            total_duration_minutes=_number(
                data.get("totalDurationMinutes", 0), "totalDurationMinutes"
            ),
            files=entries,
        )


def _number(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{where} must be a number, got {type(value).__name__}"
        raise ValueError(msg)
    if not math.isfinite(value):
        msg = f"{where} must be finite, got {value}"
        raise ValueError(msg)
    return int(value)
