"""Tests for benchkit.results — result data structures and serialization."""

from __future__ import annotations

import json
import math
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import make_result

from benchkit.results import (
    TestResult,
    empty_results,
    load_results,
    save_results,
    suite_from_dict,
    suite_to_dict,
)


class TestTestResult(unittest.TestCase):
    """Tests for TestResult accumulation and statistics."""

    def test_add_sample_keeps_total(self) -> None:
        result = TestResult(name="t")
        for sample in (0.1, 0.2, 0.3, 0.7):
            result.add_sample(sample)
            self.assertEqual(result.total_time, sum(result.samples))
        self.assertEqual(result.runs, 4)

    def test_empty_result_has_no_stats(self) -> None:
        result = TestResult(name="t")
        result.compute_stats()
        self.assertIsNone(result.mean_time)
        self.assertIsNone(result.ops_per_second)
        self.assertIsNone(result.std_deviation)
        self.assertIsNone(result.margin_of_error)

    def test_single_sample(self) -> None:
        result = make_result("t", [2.5])
        self.assertEqual(result.mean_time, 2.5)
        self.assertEqual(result.ops_per_second, 400.0)
        self.assertIsNone(result.std_deviation)
        self.assertIsNone(result.margin_of_error)
        self.assertIsNone(result.relative_margin)

    def test_multiple_samples(self) -> None:
        result = make_result("t", [1.0, 2.0, 3.0])
        self.assertAlmostEqual(result.mean_time or 0.0, 2.0)
        self.assertAlmostEqual(result.std_deviation or 0.0, 1.0)
        self.assertAlmostEqual(result.margin_of_error or 0.0, 4.303 / math.sqrt(3))
        self.assertAlmostEqual(result.relative_margin or 0.0, 4.303 / math.sqrt(3) / 2.0)

    def test_compute_stats_idempotent(self) -> None:
        result = make_result("t", [0.4, 0.5, 0.45])
        first = result.to_dict()
        result.compute_stats()
        self.assertEqual(result.to_dict(), first)

    def test_to_dict_sparse(self) -> None:
        d = make_result("t", [1.0]).to_dict()
        self.assertEqual(d["name"], "t")
        self.assertEqual(d["samples"], [1.0])
        self.assertIn("mean_time", d)
        self.assertNotIn("std_deviation", d)
        self.assertNotIn("margin_of_error", d)

    def test_to_dict_is_plain_data(self) -> None:
        d = make_result("t", [1.0, 1.5]).to_dict()
        self.assertEqual(json.loads(json.dumps(d)), d)

    def test_to_dict_omits_infinite_ops(self) -> None:
        result = make_result("instant", [0.0, 0.0, 0.0])
        self.assertTrue(math.isinf(result.ops_per_second or 0.0))
        d = result.to_dict()
        self.assertNotIn("ops_per_second", d)
        self.assertEqual(d["mean_time"], 0.0)
        self.assertEqual(d["std_deviation"], 0.0)
        # Strict JSON: no Infinity/NaN literals.
        self.assertEqual(json.loads(json.dumps(d, allow_nan=False)), d)
        self.assertIsNone(TestResult.from_dict(d).ops_per_second)

    def test_from_dict_round_trip(self) -> None:
        original = make_result("t", [1.0, 1.25, 1.5])
        restored = TestResult.from_dict(original.to_dict())
        self.assertEqual(restored, original)

    def test_from_dict_ignores_unknown(self) -> None:
        restored = TestResult.from_dict({"name": "t", "samples": [1], "extra": 42})
        self.assertEqual(restored.samples, [1.0])
        self.assertEqual(restored.total_time, 0.0)


class TestSuiteSerialization(unittest.TestCase):
    """Tests for suite-level dicts and JSON files."""

    def test_empty_results(self) -> None:
        results = empty_results(["a", "b"])
        self.assertEqual([r.name for r in results], ["a", "b"])
        self.assertTrue(all(r.samples == [] and r.total_time == 0.0 for r in results))

    def test_suite_dict_round_trip(self) -> None:
        results = [make_result("a", [1.0, 2.0]), make_result("b", [3.0])]
        name, restored = suite_from_dict(suite_to_dict("S", results))
        self.assertEqual(name, "S")
        self.assertEqual(restored, results)

    def test_suite_from_dict_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            suite_from_dict({"name": "S"})
        with self.assertRaises(ValueError):
            suite_from_dict([])  # type: ignore[arg-type]

    def test_save_and_load(self) -> None:
        results = [make_result("a", [0.1, 0.2, 0.3])]
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "out.json"
            save_results(path, "S", results)
            data = json.loads(path.read_text())
            self.assertEqual(data["name"], "S")
            name, loaded = load_results(path)
        self.assertEqual(name, "S")
        self.assertEqual(loaded, results)

    def test_save_all_zero_samples_is_strict_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out.json"
            save_results(path, "S", [make_result("instant", [0.0, 0.0])])
            text = path.read_text()
            self.assertNotIn("Infinity", text)
            _, loaded = load_results(path)
        self.assertEqual(loaded[0].samples, [0.0, 0.0])

    def test_load_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                load_results(Path(tmp) / "missing.json")


if __name__ == "__main__":
    unittest.main()
