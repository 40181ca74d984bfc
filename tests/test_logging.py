"""Tests for benchkit.logging — logger configuration."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from benchkit.logging import get_logger, setup_logging


def _reset() -> None:
    logger = logging.getLogger("benchkit")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogging(unittest.TestCase):
    def tearDown(self) -> None:
        _reset()

    def test_console_levels(self) -> None:
        cases = [
            ({}, logging.INFO),
            ({"verbose": True}, logging.DEBUG),
            ({"quiet": True}, logging.WARNING),
            ({"verbose": True, "quiet": True}, logging.DEBUG),
        ]
        for kwargs, level in cases:
            with self.subTest(kwargs=kwargs):
                logger = setup_logging(**kwargs)
                self.assertEqual(logger.name, "benchkit")
                self.assertEqual(len(logger.handlers), 1)
                self.assertEqual(logger.handlers[0].level, level)

    def test_reconfigure_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)

    def test_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bench.log"
            logger = setup_logging(quiet=True, log_file=path)
            self.assertEqual(len(logger.handlers), 2)
            get_logger("cli").debug("detail message")
            for handler in logger.handlers:
                handler.flush()
            self.assertIn("detail message", path.read_text())
            _reset()

    def test_console_format(self) -> None:
        logger = setup_logging()
        formatter = logger.handlers[0].formatter
        assert formatter is not None
        info = logging.LogRecord("benchkit", logging.INFO, "", 0, "table", None, None)
        warning = logging.LogRecord("benchkit", logging.WARNING, "", 0, "careful", None, None)
        self.assertEqual(formatter.format(info), "table")
        self.assertEqual(formatter.format(warning), "warning: careful")


class TestGetLogger(unittest.TestCase):
    def test_child_of_benchkit(self) -> None:
        self.assertEqual(get_logger("runner").name, "benchkit.runner")
        self.assertIs(get_logger("runner").parent, logging.getLogger("benchkit"))


if __name__ == "__main__":
    unittest.main()
