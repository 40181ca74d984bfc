"""Run options and benchmark profile loading.

Handles:
- The :class:`RunOptions` value passed to a run.
- Validating options before execution.
- Merging keyword overrides into a base set of options.
- Loading run options from YAML profiles and merging CLI values.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

log = logging.getLogger("benchkit")


# ---------------------------------------------------------------------------
# GC strategies
# ---------------------------------------------------------------------------

GC_NEVER = "never"
GC_PER_CYCLE = "per-cycle"
GC_PER_TEST = "per-test"
GC_PERIODIC = "periodic"

GC_STRATEGIES = (GC_NEVER, GC_PER_CYCLE, GC_PER_TEST, GC_PERIODIC)

DEFAULT_CALL_COUNT = 100_000
DEFAULT_PREHEAT_COUNT = 1_000
DEFAULT_GC_INTERVAL = 1000

# Signature of a result validator: (result, value) -> True | False | message.
Validator = Callable[[Any, Any], Any]


# ---------------------------------------------------------------------------
# RunOptions
# ---------------------------------------------------------------------------


@dataclass
class RunOptions:
    """Options for a single benchmark run."""

    name: str | None = None  # Label shown in the run header
    cycles: int = 1  # Full passes over every test
    cool_down: float | None = None  # Pause between calls (ms)
    verbosity: int = 1  # 0 = silent, 1 = basic, 2 = detailed
    gc_strategy: str = GC_PERIODIC
    gc_interval: int = DEFAULT_GC_INTERVAL  # Calls between collections (periodic)
    value: Any = None  # Input passed to every call; None means no argument
    validate: Validator | None = None

    def preheat_options(self) -> RunOptions:
        """The subset of options forwarded to a preheat run."""
        return RunOptions(
            verbosity=0,
            value=self.value,
            gc_strategy=self.gc_strategy,
            gc_interval=self.gc_interval,
        )


_OPTION_FIELDS = {f.name for f in dataclasses.fields(RunOptions)}


def resolve_options(options: RunOptions | None = None, **overrides: Any) -> RunOptions:
    """Merge keyword overrides into *options* (or the defaults).

    Raises:
        TypeError: For an unknown option name.
    """
    unknown = sorted(set(overrides) - _OPTION_FIELDS)
    if unknown:
        raise TypeError(f"Unknown run option(s): {', '.join(unknown)}")
    base = options if options is not None else RunOptions()
    return dataclasses.replace(base, **overrides) if overrides else base


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class OptionError:
    """A single option validation error."""

    field: str
    message: str


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_options(
    call_count: int,
    options: RunOptions,
    *,
    preheat_count: int | None = None,
) -> list[OptionError]:
    """Validate a call count and run options.

    *preheat_count*, when given, must be a non-negative integer (0
    skips preheating).  Values may come straight from a YAML profile,
    so every check tolerates the wrong type.

    Returns a list of errors.  Empty list means valid.
    """
    errors: list[OptionError] = []

    if not _is_int(call_count) or call_count < 1:
        errors.append(
            OptionError(
                field="call_count",
                message=f"Call count must be a positive integer (got {call_count!r}).",
            )
        )

    if preheat_count is not None and (not _is_int(preheat_count) or preheat_count < 0):
        errors.append(
            OptionError(
                field="preheat",
                message=f"Preheat count must be a non-negative integer (got {preheat_count!r}).",
            )
        )

    if not _is_int(options.cycles) or options.cycles < 1:
        errors.append(
            OptionError(
                field="cycles",
                message=f"Cycles must be a positive integer (got {options.cycles!r}).",
            )
        )

    if options.gc_strategy not in GC_STRATEGIES:
        errors.append(
            OptionError(
                field="gc_strategy",
                message=(
                    f"Unknown GC strategy {options.gc_strategy!r}. "
                    f"Choose one of: {', '.join(GC_STRATEGIES)}."
                ),
            )
        )

    if not _is_int(options.gc_interval) or options.gc_interval < 1:
        errors.append(
            OptionError(
                field="gc_interval",
                message=f"GC interval must be a positive integer (got {options.gc_interval!r}).",
            )
        )

    cool_down = options.cool_down
    if cool_down is not None and (
        not isinstance(cool_down, (int, float)) or isinstance(cool_down, bool) or cool_down < 0
    ):
        errors.append(
            OptionError(
                field="cool_down",
                message=f"Cool-down must be a non-negative number of ms (got {cool_down!r}).",
            )
        )

    if options.verbosity not in (0, 1, 2):
        errors.append(
            OptionError(
                field="verbosity",
                message=f"Verbosity must be 0, 1 or 2 (got {options.verbosity!r}).",
            )
        )

    if options.validate is not None and not callable(options.validate):
        errors.append(OptionError(field="validate", message="Validator must be callable."))

    return errors


def check_options(call_count: int, options: RunOptions) -> None:
    """Raise ValueError if the options are invalid."""
    errors = validate_options(call_count, options)
    if errors:
        messages = [f"  {e.field}: {e.message}" for e in errors]
        raise ValueError("Invalid run options:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load run settings from a YAML file.

    Profile format::

        name: "string concat"
        runs: 100000
        preheat: 1000
        cycles: 3
        cool_down: 0.5
        verbosity: 1
        gc_strategy: per-cycle
        gc_interval: 1000
        value:
          words: ["a", "b", "c"]

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


_PROFILE_KEYS = {
    "name",
    "runs",
    "preheat",
    "cycles",
    "cool_down",
    "verbosity",
    "gc_strategy",
    "gc_interval",
    "value",
}


def options_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> tuple[int, int, RunOptions]:
    """Build run settings from a parsed profile.

    CLI overrides take precedence over profile values whenever they are
    not None.  Keys match the profile keys above.

    Returns:
        Tuple of (runs, preheat, RunOptions).
    """
    unknown = sorted(set(profile_data) - _PROFILE_KEYS)
    for key in unknown:
        log.warning("Ignoring unknown profile key '%s'", key)

    cli = cli_overrides or {}

    def pick(key: str, default: Any) -> Any:
        if cli.get(key) is not None:
            return cli[key]
        return profile_data.get(key, default)

    options = RunOptions(
        name=pick("name", None),
        cycles=pick("cycles", 1),
        cool_down=pick("cool_down", None),
        verbosity=pick("verbosity", 1),
        gc_strategy=pick("gc_strategy", GC_PERIODIC),
        gc_interval=pick("gc_interval", DEFAULT_GC_INTERVAL),
        value=pick("value", None),
    )
    return pick("runs", DEFAULT_CALL_COUNT), pick("preheat", DEFAULT_PREHEAT_COUNT), options
