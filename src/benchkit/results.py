"""Benchmark result data structures and serialization.

Hierarchy::

    suite (name + results, see :class:`benchkit.runner.Benchmark`)
      → results: list[TestResult]   (one per registered test, registration order)
        → samples: list[float]      (per-call elapsed time in ms)
        → mean_time / ops_per_second / std_deviation / margin_of_error

Files produced::

    <name>.json   — {"name": ..., "results": [TestResult, ...]}
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from benchkit.stats import summarize

log = logging.getLogger("benchkit")


# ---------------------------------------------------------------------------
# Per-test result
# ---------------------------------------------------------------------------


@dataclass
class TestResult:
    """Timing samples and derived statistics for one test in one run."""

    __test__ = False  # Not a pytest test class.

    name: str
    samples: list[float] = field(default_factory=list)
    total_time: float = 0.0  # Running sum of samples (ms)
    # Populated by compute_stats():
    mean_time: float | None = None
    ops_per_second: float | None = None
    std_deviation: float | None = None  # Only when len(samples) > 1
    margin_of_error: float | None = None  # Only when len(samples) > 1

    def add_sample(self, elapsed_ms: float) -> None:
        """Record one call's elapsed time, keeping total_time in step."""
        self.samples.append(elapsed_ms)
        self.total_time += elapsed_ms

    def compute_stats(self) -> None:
        """Compute summary statistics from the samples.

        Call this after the run finishes (or aborts). Results with no
        samples are left untouched; a single sample gets a mean and
        ops/sec but no standard deviation or margin of error.
        """
        stats = summarize(self.samples, self.total_time)
        if stats is None:
            return
        self.mean_time = stats.mean_time
        self.ops_per_second = stats.ops_per_second
        self.std_deviation = stats.std_deviation
        self.margin_of_error = stats.margin_of_error

    @property
    def runs(self) -> int:
        """Number of completed calls."""
        return len(self.samples)

    @property
    def relative_margin(self) -> float | None:
        """Margin of error as a fraction of the mean, if available."""
        if not self.mean_time or self.margin_of_error is None:
            return None
        return self.margin_of_error / self.mean_time

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict.

        Sparse: statistics that are unset or not finite (all-zero
        samples give infinite ops/sec) are omitted, since standard JSON
        has no representation for infinity.
        """
        d: dict[str, Any] = {
            "name": self.name,
            "samples": list(self.samples),
            "total_time": self.total_time,
        }
        for key in ("mean_time", "ops_per_second", "std_deviation", "margin_of_error"):
            value = getattr(self, key)
            if value is not None and math.isfinite(value):
                d[key] = value
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestResult:
        """Deserialize from a dict, ignoring unknown fields."""
        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}
        filtered["samples"] = [float(s) for s in filtered.get("samples", [])]
        return cls(**filtered)


def empty_results(names: list[str]) -> list[TestResult]:
    """Fresh, empty results in the given order."""
    return [TestResult(name=name) for name in names]


# ---------------------------------------------------------------------------
# Suite-level serialization
# ---------------------------------------------------------------------------


def suite_to_dict(name: str, results: list[TestResult]) -> dict[str, Any]:
    """Plain-data form of a suite: no callables, JSON round-trippable."""
    return {
        "name": name,
        "results": [r.to_dict() for r in results],
    }


def suite_from_dict(data: dict[str, Any]) -> tuple[str, list[TestResult]]:
    """Inverse of :func:`suite_to_dict`."""
    if not isinstance(data, dict) or "results" not in data:
        raise ValueError("Result data must be a mapping with a 'results' list")
    name = data.get("name", "Benchmark")
    results = [TestResult.from_dict(r) for r in data["results"]]
    return name, results


def save_results(path: Path, name: str, results: list[TestResult]) -> Path:
    """Write a suite's results to *path* as JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(suite_to_dict(name, results), allow_nan=False))
    log.debug("Wrote %d results to %s", len(results), path)
    return path


def load_results(path: Path) -> tuple[str, list[TestResult]]:
    """Load a suite's results from a JSON file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a results document.
    """
    if not path.exists():
        raise FileNotFoundError(f"No results file at {path}")
    return suite_from_dict(json.loads(path.read_text()))
