"""Timing capture for benchmark calls.

Measures the wall-clock time of a single call with
:func:`time.perf_counter`.  Awaitable results are awaited inside the
timed region, so asynchronous tests are measured to completion.
"""

from __future__ import annotations

import copy
import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable

# Values passed to tests as-is; anything else is deep-copied per call.
_SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes)


@dataclass
class TimedCall:
    """Result of one timed test call."""

    result: Any
    elapsed_ms: float


def is_composite(value: Any) -> bool:
    """True if *value* is a mutable/structured value that needs copying."""
    return not isinstance(value, _SCALAR_TYPES)


def prepare_value(value: Any) -> Any:
    """Return the value to pass to one call.

    Composite values are deep-copied so a test that mutates its input
    cannot affect any other call.
    """
    return copy.deepcopy(value) if is_composite(value) else value


async def timed_call(fn: Callable[..., Any], *args: Any) -> TimedCall:
    """Call *fn* with *args*, awaiting the result if needed, and time it."""
    start = time.perf_counter()
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    elapsed = time.perf_counter() - start
    return TimedCall(result=result, elapsed_ms=elapsed * 1000)
