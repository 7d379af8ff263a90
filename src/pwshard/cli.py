"""pwshard CLI: top-level command group."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from pwshard import __version__
from pwshard.config import PwshardConfig, load_config, validate_config
from pwshard.models.report import ReportFormatError
from pwshard.reporters.terminal import err_reporter, reporter
from pwshard.sharding.extractor import read_report
from pwshard.sharding.lookup import get_test_match_from_env
from pwshard.sharding.merger import merge_reports, write_merged_report
from pwshard.sharding.partitioner import split_tests
from pwshard.sharding.split_files import write_split_files

logger = logging.getLogger(__name__)

_SPLIT_EXAMPLES = """
\b
Examples:
  $ pwshard split --report path/to/report.json --splits 3 --output splits
  $ pwshard split --report path/to/report.json --splits 3 --output splits --failed-tests
  $ pwshard split --merge path/to/reports --report path/to/merged-report.json \\
      --splits 3 --output splits
"""


def _debug_from_env() -> bool:
    return os.environ.get("DEBUG", "").strip().lower() == "true"


def _configure_logging(*, debug: bool) -> None:
    """Route log records through rich on stderr, keeping stdout for results."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_validated_config(config_dir: str) -> PwshardConfig:
    try:
        config = load_config(config_dir)
    except (OSError, ValueError, yaml.YAMLError) as e:
        err_reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            err_reporter.print_error(error)
        raise click.Abort
    return config


def _get_config(ctx: click.Context) -> PwshardConfig:
    """Load and validate the config on first use by a command."""
    ctx.ensure_object(dict)
    if "config" in ctx.obj:
        config: PwshardConfig = ctx.obj["config"]
        return config

    if "config_dir" not in ctx.obj:
        # Command invoked standalone, without the group callback.
        _configure_logging(debug=_debug_from_env())
    config = _load_validated_config(ctx.obj.get("config_dir", "."))
    ctx.obj["config"] = config
    return config


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging (also enabled by DEBUG=true).",
)
@click.option(
    "--config-dir",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Directory containing .pwshard.yml; spec paths are relative to it.",
)
@click.version_option(version=__version__, prog_name="pwshard")
@click.pass_context
def cli(ctx: click.Context, *, debug: bool, config_dir: str) -> None:
    """Split Playwright tests into duration-balanced shards."""
    _configure_logging(debug=debug or _debug_from_env())
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


@cli.command(epilog=_SPLIT_EXAMPLES)
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the Playwright report JSON file or merged report file.",
)
@click.option(
    "--splits",
    "num_splits",
    type=click.IntRange(min=1),
    default=None,
    help="Number of splits to divide the tests into.",
)
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to save the split files.",
)
@click.option(
    "--merge",
    "merge_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory containing Playwright report JSON files to merge.",
)
@click.option(
    "--failed-tests",
    "failed_only",
    is_flag=True,
    help="Only split the failed tests.",
)
@click.pass_context
def split(
    ctx: click.Context,
    report_path: str | None,
    num_splits: int | None,
    output_dir: str | None,
    merge_dir: str | None,
    *,
    failed_only: bool,
) -> None:
    """Split tests into shards balanced by recorded duration.

    With --merge, every report in the directory is merged first and the
    merged report is written to --report.
    """
    config = _get_config(ctx)
    report_path = report_path or config.split.report or None
    num_splits = num_splits or config.split.splits or None
    output_dir = output_dir or config.split.output or None
    merge_dir = merge_dir or config.split.merge or None
    failed_only = failed_only or config.split.failed_only

    if report_path is None:
        raise click.UsageError("Missing option '--report'.")
    if num_splits is None:
        raise click.UsageError("Missing option '--splits'.")
    if output_dir is None:
        raise click.UsageError("Missing option '--output'.")

    base_dir = Path(config.root)
    logger.debug(
        "Splitting report=%s merge=%s splits=%d output=%s failed_only=%s",
        report_path,
        merge_dir,
        num_splits,
        output_dir,
        failed_only,
    )

    try:
        if merge_dir:
            tests = merge_reports(Path(merge_dir), failed_only=failed_only, base_dir=base_dir)
            write_merged_report(tests, Path(report_path), base_dir=base_dir)
            reporter.print_info(f"Merged reports and saved to {report_path}")
        else:
            tests = read_report(Path(report_path), failed_only=failed_only, base_dir=base_dir)
    except ReportFormatError as e:
        err_reporter.print_error(f"Malformed report: {e}")
        raise click.Abort from e
    except OSError as e:
        err_reporter.print_error(f"Failed to read report: {e}")
        raise click.Abort from e

    scope = "failed tests" if failed_only else "tests"
    reporter.print_info(f"Found {len(tests)} {scope}")
    if not tests:
        reporter.print_warning("No tests found; every shard will be empty")

    splits = split_tests(tests, num_splits, base_dir=base_dir)
    try:
        write_split_files(splits, Path(output_dir))
    except OSError as e:
        err_reporter.print_error(f"Failed to write split files: {e}")
        raise click.Abort from e

    reporter.print_shard_summary(splits)
    reporter.print_success(
        f"Tests have been split into {num_splits} parts and saved to {output_dir}"
    )


@cli.command()
@click.option(
    "--index",
    "shard_index",
    type=str,
    default=None,
    help="1-based shard index (default: value of the configured index variable).",
)
@click.option(
    "--output",
    "output_dir",
    type=str,
    default=None,
    help="Directory holding split files (default: value of the configured output variable).",
)
@click.option("--json-output", "as_json", is_flag=True, help="Print a JSON array of paths.")
@click.pass_context
def match(
    ctx: click.Context,
    shard_index: str | None,
    output_dir: str | None,
    *,
    as_json: bool,
) -> None:
    """Print the spec files assigned to one shard.

    An invalid index or a missing split file prints nothing and exits 0.
    """
    config = _get_config(ctx)
    lookup = config.lookup

    env = dict(os.environ)
    if shard_index is not None:
        env[lookup.index_env] = shard_index
    if output_dir is not None:
        env[lookup.output_env] = output_dir

    try:
        paths = get_test_match_from_env(env, config=lookup, base_dir=Path(config.root))
    except ValueError as e:
        err_reporter.print_error(f"Corrupt split file: {e}")
        raise click.Abort from e

    if as_json:
        click.echo(json.dumps(paths))
        return
    for path in paths:
        click.echo(path)
