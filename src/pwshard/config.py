"""Configuration parsing from ``.pwshard.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".pwshard.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


@dataclass
class SplitConfig:
    """Defaults for the ``split`` command."""

    report: str = ""
    """Playwright JSON report to read, or merged report to write."""

    splits: int = 0
    """Number of shards (0 = must be given on the command line)."""

    output: str = "splits"
    """Directory receiving ``split-<n>.json`` files."""

    merge: str = ""
    """Directory of reports to merge (empty = no merge)."""

    failed_only: bool = False
    """Only split tests with at least one non-passing attempt."""


@dataclass
class LookupConfig:
    """Environment contract used by CI runners to pick their shard."""

    index_env: str = "SPLIT_INDEX1"
    """Variable holding the 1-based shard index."""

    output_env: str = "OUTPUT_DIR"
    """Variable holding the directory with ``split-<n>.json`` files."""

    default_output: str = "splits"
    """Directory used when *output_env* is unset or empty."""


@dataclass
class PwshardConfig:
    """Top-level configuration."""

    root: str
    """Project root; spec paths are made relative to it."""

    split: SplitConfig = field(default_factory=SplitConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def _parse_split_config(raw: dict[str, Any]) -> SplitConfig:
    default = SplitConfig()
    return SplitConfig(
        report=str(raw.get("report") or default.report),
        splits=int(raw.get("splits") or default.splits),
        output=str(raw.get("output") or default.output),
        merge=str(raw.get("merge") or default.merge),
        failed_only=_parse_bool(raw.get("failed_only", default.failed_only)),
    )


def _parse_lookup_config(raw: dict[str, Any]) -> LookupConfig:
    default = LookupConfig()
    return LookupConfig(
        index_env=str(raw.get("index_env", default.index_env)),
        output_env=str(raw.get("output_env", default.output_env)),
        default_output=str(raw.get("default_output", default.default_output)),
    )


def load_config(root: str | Path) -> PwshardConfig:
    """Load ``.pwshard.yml`` from *root*.

    Falls back to defaults when the file is missing or a section is not a
    mapping.

    Raises:
        ValueError: If a numeric field cannot be converted.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        else:
            logger.warning("Ignoring %s: top level is not a mapping", config_file)

    return PwshardConfig(
        root=str(root_path),
        split=_parse_split_config(_section(raw, "split")),
        lookup=_parse_lookup_config(_section(raw, "lookup")),
    )


def validate_config(config: PwshardConfig) -> list[str]:
    """Return a list of human-readable configuration errors."""
    errors: list[str] = []

    if config.split.splits < 0:
        errors.append(f"split.splits must be >= 1 when set, got {config.split.splits}")

    if not config.lookup.index_env:
        errors.append("lookup.index_env must not be empty")
    if not config.lookup.output_env:
        errors.append("lookup.output_env must not be empty")

    return errors
