"""Terminal display formatting for benchmark results.

Produces the results table shown after a run: tests sorted by total
time (fastest first), with runs, total and mean time, operations per
second and the relative margin of error, followed by the aggregate
total time.
"""

from __future__ import annotations

from typing import Sequence

from benchkit.formatting import format_number, format_percent, format_table
from benchkit.results import TestResult

FASTEST_MARKER = "\U0001f3c6"  # trophy


def rank_results(results: Sequence[TestResult]) -> list[TestResult]:
    """Return results sorted by total time, leaving the input untouched."""
    return sorted(results, key=lambda r: r.total_time)


def _mean_cell(result: TestResult) -> str:
    if result.mean_time is not None:
        return format_number(result.mean_time, decimals=6)
    if result.samples:
        return format_number(result.total_time / len(result.samples), decimals=6)
    return "N/A"


def format_results(name: str, results: Sequence[TestResult]) -> str:
    """Format a suite's results as a ranked table plus total time.

    Args:
        name: Suite name, used as the title.
        results: TestResults in any order.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = [name, "─" * len(name)]

    if not results:
        lines.append("  No tests were run.")
        return "\n".join(lines)

    ranked = rank_results(results)
    many = len(ranked) > 1

    headers = ["#", "Test", "Runs", "Total (ms)", "Mean (ms)", "Ops/sec", "± (%)"]
    rows: list[list[str]] = []
    for i, r in enumerate(ranked):
        label = r.name
        if many and i == 0:
            label = f"{label} {FASTEST_MARKER}"
        margin = r.relative_margin
        rows.append(
            [
                str(i + 1) if many else "",
                label,
                format_number(r.runs, decimals=0),
                format_number(r.total_time, decimals=4),
                _mean_cell(r),
                format_number(r.ops_per_second, decimals=2) if r.ops_per_second else "N/A",
                format_percent(margin) if margin is not None else "",
            ]
        )

    lines.append(
        format_table(
            headers,
            rows,
            alignments=["r", "l", "r", "r", "r", "r", "r"],
        )
    )

    total = sum(r.total_time for r in results)
    lines.append("")
    lines.append(f"Total time: {format_number(total, decimals=6, trailing_zeros=False)} ms")
    return "\n".join(lines)


def format_comparison(results: Sequence[TestResult]) -> str:
    """One line per test giving its slowdown relative to the fastest.

    Tests without a mean time are skipped.  Returns an empty string
    when fewer than two tests have statistics.
    """
    timed = [r for r in rank_results(results) if r.mean_time]
    if len(timed) < 2:
        return ""
    fastest = min(timed, key=lambda r: r.mean_time or 0.0)
    base = fastest.mean_time or 0.0
    lines = [f"Relative to {fastest.name}:"]
    for r in timed:
        if r is fastest:
            continue
        ratio = (r.mean_time or 0.0) / base
        lines.append(f"  {r.name}: {ratio:.2f}x slower")
    return "\n".join(lines)
