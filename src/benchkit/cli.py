"""Command-line interface for benchkit.

Subcommands:
    benchkit run       Benchmark functions from Python files
    benchkit show      Display results saved with ``run --export``
    benchkit export    Convert saved results to CSV or Markdown
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import click
import yaml

from benchkit import __version__
from benchkit.config import (
    DEFAULT_CALL_COUNT,
    DEFAULT_GC_INTERVAL,
    DEFAULT_PREHEAT_COUNT,
    GC_STRATEGIES,
    load_profile,
    options_from_profile,
    validate_options,
)
from benchkit.display import format_results
from benchkit.export import (
    default_export_filename,
    export_csv,
    export_csv_summary,
    export_json,
    export_markdown,
    load_json,
)
from benchkit.loader import LoaderError, collect_all
from benchkit.logging import get_logger, setup_logging
from benchkit.runner import DEFAULT_NAME, Benchmark

log = get_logger("cli")


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """benchkit — Compare the speed of Python functions."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-r",
    "--runs",
    type=int,
    default=None,
    help=f"Calls per test per cycle (default: {DEFAULT_CALL_COUNT}).",
)
@click.option("-c", "--cool-down", type=float, default=None, help="Pause between calls, in ms.")
@click.option("--cycles", type=int, default=None, help="Number of test cycles (default: 1).")
@click.option(
    "-p",
    "--preheat",
    type=int,
    default=None,
    help=f"Preheat calls per test, 0 to skip (default: {DEFAULT_PREHEAT_COUNT}).",
)
@click.option("-n", "--name", type=str, default=None, help="Custom name for the benchmark suite.")
@click.option(
    "-v",
    "--verbosity",
    type=click.IntRange(0, 2),
    default=None,
    help="0=silent, 1=basic, 2=detailed (default: 1).",
)
@click.option("-e", "--export", "do_export", is_flag=True, help="Export results to JSON.")
@click.option(
    "--export-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file to export to (implies --export).",
)
@click.option(
    "--gc-strategy",
    type=click.Choice(GC_STRATEGIES),
    default=None,
    help="Garbage collection strategy (default: periodic).",
)
@click.option(
    "--gc-interval",
    type=int,
    default=None,
    help=f"Calls between collections for the periodic strategy (default: {DEFAULT_GC_INTERVAL}).",
)
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML profile with default run settings.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also log everything (DEBUG) to this file.",
)
def run(
    files: tuple[Path, ...],
    runs: int | None,
    cool_down: float | None,
    cycles: int | None,
    preheat: int | None,
    name: str | None,
    verbosity: int | None,
    do_export: bool,
    export_path: Path | None,
    gc_strategy: str | None,
    gc_interval: int | None,
    profile_path: Path | None,
    log_file: Path | None,
) -> None:
    """Benchmark the functions found in FILES against each other."""
    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        call_count, preheat_count, options = options_from_profile(
            profile_data,
            cli_overrides={
                "name": name,
                "runs": runs,
                "preheat": preheat,
                "cycles": cycles,
                "cool_down": cool_down,
                "verbosity": verbosity,
                "gc_strategy": gc_strategy,
                "gc_interval": gc_interval,
            },
        )
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise click.UsageError(str(exc)) from exc

    setup_logging(quiet=options.verbosity == 0, log_file=log_file)

    errors = validate_options(call_count, options, preheat_count=preheat_count)
    if errors:
        raise click.UsageError("; ".join(f"{e.field}: {e.message}" for e in errors))

    if options.verbosity > 0:
        noun = "file" if len(files) == 1 else "files"
        log.info("Loading %d %s for benchmarking...", len(files), noun)
    try:
        tests = collect_all(list(files))
    except LoaderError as exc:
        raise click.ClickException(str(exc)) from exc

    # The name labels the suite, not an individual run.
    suite = Benchmark(options.name or DEFAULT_NAME)
    options = dataclasses.replace(options, name=None)
    for test_name, fn in tests:
        suite.test(test_name, fn)

    if preheat_count:
        suite.preheat(preheat_count, options)
    suite.run(call_count, options)

    if do_export or export_path is not None:
        path = export_path or Path(default_export_filename(files))
        export_json(path, suite.name, suite.results)

    if not suite.succeeded:
        sys.exit(1)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command()
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(result_file: Path) -> None:
    """Display results saved in RESULT_FILE."""
    try:
        suite_name, results = load_json(result_file)
    except ValueError as exc:
        raise click.ClickException(f"Cannot read {result_file}: {exc}") from exc
    click.echo(format_results(suite_name, results))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@main.command()
@click.argument("result_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "csv-summary", "markdown"]),
    default="markdown",
    show_default=True,
    help="Output format.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
def export(result_file: Path, fmt: str, output: Path | None) -> None:
    """Convert results saved in RESULT_FILE to CSV or Markdown."""
    try:
        suite_name, results = load_json(result_file)
    except ValueError as exc:
        raise click.ClickException(f"Cannot read {result_file}: {exc}") from exc

    if fmt == "csv":
        text = export_csv(suite_name, results)
    elif fmt == "csv-summary":
        text = export_csv_summary(suite_name, results)
    else:
        text = export_markdown(suite_name, results)

    if output is not None:
        output.write_text(text)
        click.echo(f"Wrote {output}")
    else:
        click.echo(text, nl=False)
