"""Load benchmark functions from Python source files.

A file contributes tests in the first form that applies:

1. a function named ``benchmark``: one test named after the file;
2. a function named ``test``: one test named after the file;
3. every public function defined in the file: one test per
   function, named ``"<file stem>#<function name>"``.

Functions merely imported into the file are ignored in every form, so
``from benchkit import benchmark`` does not shadow the file's own tests.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable

log = logging.getLogger("benchkit")

_ENTRY_POINT_NAMES = ("benchmark", "test")


class LoaderError(Exception):
    """A benchmark file could not be loaded or holds no functions."""


def load_module(path: Path) -> ModuleType:
    """Import a Python file by path and return the module.

    The module is registered in ``sys.modules`` under a private name
    so that dataclasses and pickling inside it work.

    Raises:
        LoaderError: If the file is missing or fails to import.
    """
    path = Path(path).resolve()
    if not path.is_file():
        raise LoaderError(f"File not found: {path}")

    module_name = f"_benchkit_{path.stem}_{abs(hash(str(path))):x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoaderError(f"Cannot import {path}: not a Python module")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise LoaderError(f"Error loading {path}: {exc}") from exc

    log.debug("Loaded benchmark module %s from %s", module_name, path)
    return module


def _defined_in(obj: Any, module: ModuleType) -> bool:
    """True if *obj* is a function written in *module*, not imported into it."""
    return inspect.isfunction(obj) and obj.__module__ == module.__name__


def collect_tests(
    path: Path,
    module: ModuleType | None = None,
) -> list[tuple[str, Callable[..., Any]]]:
    """Return the ``(name, function)`` pairs a file contributes.

    Args:
        path: The benchmark file.
        module: An already-loaded module for *path*; loaded if None.

    Raises:
        LoaderError: If the file contains no functions to benchmark.
    """
    path = Path(path)
    if module is None:
        module = load_module(path)
    stem = path.stem

    for entry in _ENTRY_POINT_NAMES:
        fn = getattr(module, entry, None)
        if _defined_in(fn, module):
            return [(stem, fn)]

    tests: list[tuple[str, Callable[..., Any]]] = []
    for key, value in vars(module).items():
        if not key.startswith("_") and _defined_in(value, module):
            tests.append((f"{stem}#{key}", value))

    if not tests:
        raise LoaderError(
            f"No functions found to benchmark in {path}. "
            "Expected a function named 'benchmark' or 'test', "
            "or at least one public function."
        )
    return tests


def collect_all(paths: list[Path]) -> list[tuple[str, Callable[..., Any]]]:
    """Collect tests from several files, preserving file order."""
    tests: list[tuple[str, Callable[..., Any]]] = []
    for path in paths:
        tests.extend(collect_tests(path))
    return tests
