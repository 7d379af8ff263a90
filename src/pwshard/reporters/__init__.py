"""Reporters for terminal output."""

from __future__ import annotations

from pwshard.reporters.terminal import CLIReporter, reporter

__all__ = [
    "CLIReporter",
    "reporter",
]
