"""Benchmark execution engine.

Orchestrates:
1. Test registration
2. Optional preheat runs (same engine, silent)
3. Cycles of randomly interleaved, individually timed calls
4. Forced garbage collection according to a strategy
5. Result validation and early abort
6. Statistics computation and reporting

Scheduling: within a cycle, every test owes ``call_count`` calls.  The
next call is drawn uniformly at random from the tests still owing
calls, so neither call order nor adjacency favours a particular test.
Calls never overlap; asynchronous tests are awaited before the next
pick.
"""

from __future__ import annotations

import asyncio
import gc
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable

from benchkit.config import (
    DEFAULT_CALL_COUNT,
    GC_NEVER,
    GC_PER_CYCLE,
    GC_PER_TEST,
    GC_PERIODIC,
    RunOptions,
    check_options,
    resolve_options,
)
from benchkit.display import format_comparison, format_results
from benchkit.results import TestResult, empty_results
from benchkit.timing import prepare_value, timed_call

log = logging.getLogger("benchkit")

DEFAULT_NAME = "Benchmark"

TestCallable = Callable[..., Any]
GCHook = Callable[[], Any]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class BenchmarkError(Exception):
    """Base class for errors raised inside a benchmark run."""


class ValidationFailure(BenchmarkError):
    """A validator rejected a test's result."""

    DEFAULT_MESSAGE = "Validation failed"

    def __init__(self, message: str = DEFAULT_MESSAGE, *, test_name: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.test_name = test_name

    def __str__(self) -> str:
        if self.test_name:
            return f"{self.test_name}: {self.message}"
        return self.message


def check_result(validate: Callable[[Any, Any], Any], result: Any, value: Any, name: str) -> None:
    """Run a validator; anything but ``True`` raises ValidationFailure."""
    outcome = validate(result, value)
    if outcome is True:
        return
    if isinstance(outcome, str) and outcome:
        raise ValidationFailure(outcome, test_name=name)
    raise ValidationFailure(test_name=name)


# ---------------------------------------------------------------------------
# Registered tests and the execution queue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TestFunction:
    """A named unit of work."""

    __test__ = False  # Not a pytest test class.

    name: str
    fn: TestCallable


@dataclass
class QueueEntry:
    """A test still owing calls in the current cycle."""

    fn: TestCallable
    result: TestResult
    calls: int = 0


# ---------------------------------------------------------------------------
# Benchmark
# ---------------------------------------------------------------------------


class Benchmark:
    """A suite of competing test functions.

    Usage::

        suite = Benchmark("concat")
        suite.test("join", lambda: "".join(parts))
        suite.test("plus", concat_with_plus)
        suite.preheat(1_000)
        suite.run(100_000, cycles=3)
        for result in suite.results:
            print(result.name, result.mean_time, result.margin_of_error)

    Args:
        name: Suite name shown in reports.
        gc_hook: Zero-argument callable that forces a garbage
            collection.  Defaults to :func:`gc.collect`; pass None to
            run without forced collections.
    """

    def __init__(self, name: str = DEFAULT_NAME, *, gc_hook: GCHook | None = gc.collect) -> None:
        self.name = name
        self.gc_hook = gc_hook
        self.results: list[TestResult] = []
        self.error: BaseException | None = None
        self._tests: list[TestFunction] = []
        self._running = False
        self._gc_warned = False

    @property
    def tests(self) -> list[TestFunction]:
        """Registered tests, in registration order."""
        return list(self._tests)

    @property
    def succeeded(self) -> bool:
        """True unless the most recent run was aborted by an error."""
        return self.error is None

    def test(self, name: str | TestCallable, fn: TestCallable | None = None) -> Benchmark:
        """Register a test.

        Either ``test("name", fn)`` or ``test(fn)``; in the latter case
        the test is named ``"Test {n}"`` after its registration order.
        Returns the suite for chaining.
        """
        if fn is None:
            if not callable(name):
                raise TypeError("test() needs a callable")
            fn = name
            name = f"Test {len(self._tests) + 1}"
        self._tests.append(TestFunction(name=str(name), fn=fn))
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain-data snapshot of the suite's latest results."""
        return {"name": self.name, "results": [r.to_dict() for r in self.results]}

    # -- preheat ------------------------------------------------------------

    def preheat(
        self, call_count: int, options: RunOptions | None = None, **overrides: Any
    ) -> Benchmark:
        """Warm up the interpreter by running every test *call_count* times.

        Delegates to :meth:`run` with verbosity forced to 0, forwarding
        only ``value``, ``gc_strategy`` and ``gc_interval``.
        """
        return asyncio.run(self.apreheat(call_count, options, **overrides))

    async def apreheat(
        self, call_count: int, options: RunOptions | None = None, **overrides: Any
    ) -> Benchmark:
        """Coroutine form of :meth:`preheat`."""
        opts = resolve_options(options, **overrides)
        if opts.verbosity > 0:
            log.info(
                "%s: Preheating %d %s %d times each...",
                self.name,
                len(self._tests),
                "test" if len(self._tests) == 1 else "tests",
                call_count,
            )
        return await self.arun(call_count, opts.preheat_options())

    # -- run ----------------------------------------------------------------

    def run(
        self,
        call_count: int = DEFAULT_CALL_COUNT,
        options: RunOptions | None = None,
        **overrides: Any,
    ) -> Benchmark:
        """Run every test *call_count* times per cycle.

        Blocking wrapper around :meth:`arun`; use ``await suite.arun()``
        from inside a running event loop.

        Returns:
            The suite, with ``results`` populated.  If a test raised or
            a validator failed, the run stops early, the error is logged
            and stored in ``error``, and partial results are kept.

        Raises:
            ValueError: If the options are invalid.
            RuntimeError: If a run is already in progress on this suite.
        """
        return asyncio.run(self.arun(call_count, options, **overrides))

    async def arun(
        self,
        call_count: int = DEFAULT_CALL_COUNT,
        options: RunOptions | None = None,
        **overrides: Any,
    ) -> Benchmark:
        """Coroutine form of :meth:`run`."""
        opts = resolve_options(options, **overrides)
        check_options(call_count, opts)
        if self._running:
            raise RuntimeError(f"{self.name}: a run is already in progress")

        self._running = True
        try:
            await self._execute(call_count, opts)
        finally:
            self._running = False
        return self

    async def _execute(self, call_count: int, opts: RunOptions) -> None:
        has_gc = self.gc_hook is not None
        verbose = opts.verbosity > 0

        if opts.gc_strategy != GC_NEVER and not has_gc and not self._gc_warned:
            self._gc_warned = True
            log.warning("%s: No GC hook available; forced collection is disabled.", self.name)
        if verbose:
            self._log_header(call_count, opts)

        self.error = None
        self.results = empty_results([t.name for t in self._tests])

        call_counter = 0
        try:
            for cycle in range(1, opts.cycles + 1):
                if verbose and opts.cycles > 1:
                    log.info("Cycle %d/%d", cycle, opts.cycles)

                if has_gc and opts.gc_strategy == GC_PER_CYCLE:
                    self._collect()

                queue = [
                    QueueEntry(fn=test.fn, result=result)
                    for test, result in zip(self._tests, self.results)
                ]

                while queue:
                    i = random.randrange(len(queue))
                    entry = queue[i]
                    args = () if opts.value is None else (prepare_value(opts.value),)

                    timed = await timed_call(entry.fn, *args)
                    entry.result.add_sample(timed.elapsed_ms)
                    call_counter += 1

                    entry.calls += 1
                    test_completed = entry.calls >= call_count
                    if test_completed:
                        queue.pop(i)

                    if opts.validate is not None:
                        check_result(opts.validate, timed.result, opts.value, entry.result.name)

                    if has_gc:
                        self._apply_gc_strategy(
                            opts.gc_strategy,
                            test_completed=test_completed,
                            call_counter=call_counter,
                            gc_interval=opts.gc_interval,
                        )

                    if opts.cool_down:
                        await asyncio.sleep(opts.cool_down / 1000)
        except Exception as exc:  # noqa: BLE001
            self.error = exc
            log.error(
                "%s failed: %s",
                self.name,
                exc,
                exc_info=not isinstance(exc, ValidationFailure),
            )

        for result in self.results:
            result.compute_stats()

        if verbose:
            self.print_results()
            if opts.verbosity > 1:
                comparison = format_comparison(self.results)
                if comparison:
                    log.info("%s", comparison)

    def _log_header(self, call_count: int, opts: RunOptions) -> None:
        title = self.name
        if opts.name:
            title += f" - {opts.name}"
        if opts.cycles > 1:
            title += f" ({opts.cycles} cycles)"
        n_tests = len(self._tests)
        log.info("%s", title)
        log.info(
            "Running %d %s of %d %s %d times each...",
            opts.cycles,
            "cycle" if opts.cycles == 1 else "cycles",
            n_tests,
            "test" if n_tests == 1 else "tests",
            call_count,
        )
        if opts.verbosity > 1:
            if opts.gc_strategy == GC_PERIODIC:
                log.info("GC Strategy: %s (every %d calls)", opts.gc_strategy, opts.gc_interval)
            else:
                log.info("GC Strategy: %s", opts.gc_strategy)
            if opts.value is not None:
                log.info("Value: %r", opts.value)

    def _apply_gc_strategy(
        self,
        strategy: str,
        *,
        test_completed: bool,
        call_counter: int,
        gc_interval: int,
    ) -> None:
        """Force a collection after a call, if the strategy asks for one.

        ``per-cycle`` collections happen at the start of each cycle, not
        here; ``never`` does nothing.
        """
        if strategy == GC_PER_TEST and test_completed:
            self._collect()
        elif strategy == GC_PERIODIC and call_counter % gc_interval == 0:
            self._collect()

    def _collect(self) -> None:
        if self.gc_hook is not None:
            self.gc_hook()

    # -- reporting ----------------------------------------------------------

    def print_results(self) -> None:
        """Log the results table at INFO level."""
        log.info("\n%s\n", format_results(self.name, self.results))


def benchmark(name: str = DEFAULT_NAME, *, gc_hook: GCHook | None = gc.collect) -> Benchmark:
    """Create a new benchmark suite."""
    return Benchmark(name, gc_hook=gc_hook)
