"""benchkit: compare the speed of Python functions.

Registers competing test functions, calls them many times in random
interleaved order, and reports mean time, operations per second,
standard deviation and a 95% margin of error for each.
"""

from __future__ import annotations

from benchkit.config import RunOptions
from benchkit.results import TestResult
from benchkit.runner import Benchmark, BenchmarkError, ValidationFailure, benchmark
from benchkit.stats import t_critical_95

__version__ = "0.1.0"

__all__ = [
    "Benchmark",
    "BenchmarkError",
    "RunOptions",
    "TestResult",
    "ValidationFailure",
    "__version__",
    "benchmark",
    "t_critical_95",
]
