"""Export benchmark results to JSON, CSV and Markdown.

JSON format: ``{"name": ..., "results": [...]}`` — the suite name and
every TestResult as plain data, including the raw samples.

CSV format: one row per test per sample (long format for pandas/R).

Markdown format: a summary table suitable for reports, README files
and GitHub issues.
"""

from __future__ import annotations

import csv
import io
import logging
import time
from pathlib import Path
from typing import Sequence

from benchkit.display import rank_results
from benchkit.results import TestResult, load_results, save_results

log = logging.getLogger("benchkit")


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def default_export_filename(files: Sequence[str | Path], timestamp: int | None = None) -> str:
    """Pick a JSON file name for exported results.

    A single benchmarked file gives ``<stem>-<timestamp>.json``;
    several give ``benchmark-suite-<timestamp>.json``.  The timestamp
    is in milliseconds since the epoch.
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    if len(files) == 1:
        return f"{Path(files[0]).stem}-{timestamp}.json"
    return f"benchmark-suite-{timestamp}.json"


def export_json(path: Path, name: str, results: Sequence[TestResult]) -> Path:
    """Write results to *path* as JSON and return the path."""
    save_results(path, name, list(results))
    log.info("Benchmark data exported to %s", path)
    return path


def load_json(path: Path) -> tuple[str, list[TestResult]]:
    """Read results previously written by :func:`export_json`."""
    return load_results(path)


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(name: str, results: Sequence[TestResult]) -> str:
    """Export results as CSV (long format).

    One row per test x sample, in registration order.

    Columns:
        suite, test, sample, time_ms
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["suite", "test", "sample", "time_ms"])

    for r in results:
        for i, sample in enumerate(r.samples, start=1):
            writer.writerow([name, r.name, i, f"{sample:.6f}"])

    return output.getvalue()


def export_csv_summary(name: str, results: Sequence[TestResult]) -> str:
    """Export summary statistics as CSV, one row per test."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(
        [
            "suite",
            "test",
            "runs",
            "total_ms",
            "mean_ms",
            "ops_per_sec",
            "stdev_ms",
            "margin_ms",
        ]
    )

    def _cell(value: float | None) -> str:
        return "" if value is None else f"{value:.6f}"

    for r in results:
        writer.writerow(
            [
                name,
                r.name,
                r.runs,
                f"{r.total_time:.6f}",
                _cell(r.mean_time),
                _cell(r.ops_per_second),
                _cell(r.std_deviation),
                _cell(r.margin_of_error),
            ]
        )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(name: str, results: Sequence[TestResult]) -> str:
    """Export a Markdown summary table, fastest test first."""
    lines = [f"## {name}", ""]
    if not results:
        lines.append("No tests were run.")
        return "\n".join(lines) + "\n"

    lines.append("| # | Test | Runs | Total (ms) | Mean (ms) | Ops/sec | ± (%) |")
    lines.append("|--:|------|-----:|-----------:|----------:|--------:|------:|")

    for i, r in enumerate(rank_results(results), start=1):
        mean = f"{r.mean_time:.6f}" if r.mean_time is not None else "N/A"
        ops = f"{r.ops_per_second:,.2f}" if r.ops_per_second is not None else "N/A"
        margin = r.relative_margin
        pct = f"{margin * 100:.2f}" if margin is not None else ""
        lines.append(
            f"| {i} | {r.name} | {r.runs:,} | {r.total_time:.4f} | {mean} | {ops} | {pct} |"
        )

    total = sum(r.total_time for r in results)
    lines.append("")
    lines.append(f"Total time: {total:.6f} ms")
    return "\n".join(lines) + "\n"
