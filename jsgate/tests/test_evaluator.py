#!/usr/bin/env python3
"""
Tests for gate evaluation.

These tests validate:
- Change-kind and vendor filtering before any check runs
- Pass/Fail verdicts and rendered failures
- Candidate-order aggregation with parallel workers
- Containment of per-file errors
- Timeout with partial results
"""

import os
import shutil
import tempfile
import threading
import time
import unittest
from typing import Optional

from jsgate.evaluator import INTERNAL_ERROR_TAG, TIMEOUT_TAG, GateEvaluator
from jsgate.exceptions import FileReadError
from jsgate.issues import CandidateFile, ChangeKind, FallbackResult, Issue
from jsgate.validator import FileValidator


class RecordingPrimary:
    """Primary check returning canned issues per file base name."""

    name = "recording-primary"

    def __init__(self, issues_by_name: Optional[dict[str, list[tuple[int, str]]]] = None):
        self.issues_by_name = issues_by_name or {}
        self.paths: list[str] = []
        self._lock = threading.Lock()

    def check(self, text: str, path: str) -> list[Issue]:
        with self._lock:
            self.paths.append(path)
        return [
            Issue(file_path="", line=line, column=-1, source_tag="rule", message=message)
            for line, message in self.issues_by_name.get(os.path.basename(path), [])
        ]


class RecordingFallback:
    name = "recording-fallback"

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def check(self, text: str, allow_eval: bool) -> FallbackResult:
        with self._lock:
            self.calls += 1
        return FallbackResult(passed=True)


class GateEvaluatorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def make_file(self, relative: str, content: str = "var x = 1;\n") -> str:
        path = os.path.join(self.temp_dir, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def make_evaluator(
        self,
        primary: RecordingPrimary,
        fallback: Optional[RecordingFallback] = None,
        **kwargs,
    ) -> GateEvaluator:
        validator = FileValidator(primary, fallback or RecordingFallback())
        return GateEvaluator(validator, **kwargs)


class TestScenarios(GateEvaluatorTestCase):
    """End-to-end gate runs with stubbed engines"""

    def test_vendor_file_skipped_and_app_file_fails(self) -> None:
        jquery = self.make_file("lib/jquery-1.9.js")
        main = self.make_file("app/main.js")
        primary = RecordingPrimary({"main.js": [(3, "Missing semicolon.")]})
        fallback = RecordingFallback()

        verdict = self.make_evaluator(primary, fallback).evaluate(
            [
                CandidateFile(jquery, ChangeKind.EDITED),
                CandidateFile(main, ChangeKind.EDITED),
            ]
        )

        self.assertFalse(verdict.passed)
        self.assertEqual(len(verdict.failures), 1)
        self.assertTrue(verdict.failures[0].startswith(f"{main}(3): "))
        self.assertEqual(primary.paths, [main])
        self.assertEqual(fallback.calls, 0)
        self.assertEqual(verdict.checked, (main,))

    def test_clean_added_file_passes(self) -> None:
        ok = self.make_file("app/ok.js")
        fallback = RecordingFallback()
        verdict = self.make_evaluator(RecordingPrimary(), fallback).evaluate(
            [CandidateFile(ok, ChangeKind.ADDED)]
        )
        self.assertTrue(verdict.passed)
        self.assertEqual(verdict.failures, ())
        self.assertEqual(fallback.calls, 1)

    def test_other_change_kinds_not_checked(self) -> None:
        bad = self.make_file("app/bad.js")
        primary = RecordingPrimary({"bad.js": [(1, "bad")]})
        verdict = self.make_evaluator(primary).evaluate(
            [CandidateFile(bad, ChangeKind.OTHER)]
        )
        self.assertTrue(verdict.passed)
        self.assertEqual(primary.paths, [])

    def test_no_candidates_passes(self) -> None:
        verdict = self.make_evaluator(RecordingPrimary()).evaluate([])
        self.assertTrue(verdict.passed)

    def test_custom_template(self) -> None:
        main = self.make_file("main.js")
        primary = RecordingPrimary({"main.js": [(5, "Unexpected token")]})
        verdict = self.make_evaluator(primary).evaluate(
            [CandidateFile(main, ChangeKind.EDITED)], "{1}:{2}:{3}"
        )
        self.assertEqual(verdict.failures, ("5:rule:Unexpected token",))

    def test_invalid_template_uses_default(self) -> None:
        main = self.make_file("main.js")
        primary = RecordingPrimary({"main.js": [(5, "Unexpected token")]})
        verdict = self.make_evaluator(primary).evaluate(
            [CandidateFile(main, ChangeKind.EDITED)], "{9}"
        )
        self.assertEqual(verdict.failures, (f"{main}(5): (rule) Unexpected token ",))

    def test_template_failing_on_issue_values_does_not_abort(self) -> None:
        main = self.make_file("main.js")
        primary = RecordingPrimary({"main.js": [(2, "m"), (3, "unexpected")]})
        verdict = self.make_evaluator(primary).evaluate(
            [CandidateFile(main, ChangeKind.EDITED)], "{3[6]}"
        )
        self.assertFalse(verdict.passed)
        self.assertEqual(verdict.failures, (f"{main}(2): (rule) m ", "c"))

    def test_repeated_evaluation_is_identical(self) -> None:
        files = [self.make_file(f"src/file{i}.js") for i in range(5)]
        primary = RecordingPrimary(
            {"file1.js": [(4, "a"), (2, "b")], "file3.js": [(1, "c")]}
        )
        evaluator = self.make_evaluator(primary, max_workers=3)
        candidates = [CandidateFile(f, ChangeKind.EDITED) for f in files]
        first = evaluator.evaluate(candidates)
        second = evaluator.evaluate(candidates)
        self.assertEqual(first.failures, second.failures)
        self.assertEqual(len(first.failures), 3)


class SlowPrimary(RecordingPrimary):
    """Finishes files in reverse order of submission."""

    def __init__(self, delays: dict[str, float], issues_by_name):
        super().__init__(issues_by_name)
        self.delays = delays

    def check(self, text: str, path: str) -> list[Issue]:
        time.sleep(self.delays.get(os.path.basename(path), 0.0))
        return super().check(text, path)


class TestOrdering(GateEvaluatorTestCase):
    """Aggregation follows candidate order, not completion order"""

    def test_parallel_results_in_candidate_order(self) -> None:
        names = ["a.js", "b.js", "c.js"]
        paths = [self.make_file(n) for n in names]
        primary = SlowPrimary(
            delays={"a.js": 0.3, "b.js": 0.15, "c.js": 0.0},
            issues_by_name={n: [(2, n), (1, n)] for n in names},
        )
        verdict = self.make_evaluator(primary, max_workers=3).evaluate(
            [CandidateFile(p, ChangeKind.EDITED) for p in paths]
        )

        self.assertEqual(
            [(i.file_path, i.line) for i in verdict.issues],
            [
                (paths[0], 1),
                (paths[0], 2),
                (paths[1], 1),
                (paths[1], 2),
                (paths[2], 1),
                (paths[2], 2),
            ],
        )


class BrokenValidator:
    """Validator stand-in raising for selected files."""

    def __init__(self, errors: dict[str, Exception]):
        self.errors = errors

    def validate(self, path: str) -> list[Issue]:
        error = self.errors.get(os.path.basename(path))
        if error is not None:
            raise error
        return [Issue(file_path=path, line=1, column=-1, source_tag="rule", message="found")]


class TestErrorContainment(GateEvaluatorTestCase):
    """One file's failure never stops the others"""

    def test_unreadable_file_skipped(self) -> None:
        gone = self.make_file("gone.js")
        kept = self.make_file("kept.js")
        evaluator = GateEvaluator(
            BrokenValidator({"gone.js": FileReadError(gone, "permission denied")})  # type: ignore[arg-type]
        )
        verdict = evaluator.evaluate(
            [CandidateFile(gone, ChangeKind.EDITED), CandidateFile(kept, ChangeKind.EDITED)]
        )
        self.assertEqual([i.file_path for i in verdict.issues], [kept])

    def test_unexpected_error_reported_for_file(self) -> None:
        bad = self.make_file("bad.js")
        good = self.make_file("good.js")
        evaluator = GateEvaluator(
            BrokenValidator({"bad.js": RuntimeError("boom")}),  # type: ignore[arg-type]
            max_workers=2,
        )
        verdict = evaluator.evaluate(
            [CandidateFile(bad, ChangeKind.EDITED), CandidateFile(good, ChangeKind.EDITED)]
        )
        self.assertFalse(verdict.passed)
        self.assertEqual(verdict.issues[0].file_path, bad)
        self.assertEqual(verdict.issues[0].source_tag, INTERNAL_ERROR_TAG)
        self.assertIn("RuntimeError: boom", verdict.issues[0].message)
        self.assertEqual(verdict.issues[1].file_path, good)


class BlockingPrimary(RecordingPrimary):
    """Blocks on one file until released."""

    def __init__(self, blocked_name: str, release: threading.Event, issues_by_name):
        super().__init__(issues_by_name)
        self.blocked_name = blocked_name
        self.release = release

    def check(self, text: str, path: str) -> list[Issue]:
        if os.path.basename(path) == self.blocked_name:
            self.release.wait(timeout=10)
        return super().check(text, path)


class TestTimeout(GateEvaluatorTestCase):
    """Overall timeout keeps the results collected so far"""

    def test_timeout_returns_partial_results(self) -> None:
        fast = self.make_file("fast.js")
        slow = self.make_file("slow.js")
        release = threading.Event()
        primary = BlockingPrimary("slow.js", release, {"fast.js": [(3, "fast problem")]})
        evaluator = self.make_evaluator(primary, max_workers=2, timeout=0.5)

        try:
            verdict = evaluator.evaluate(
                [CandidateFile(slow, ChangeKind.EDITED), CandidateFile(fast, ChangeKind.EDITED)]
            )
        finally:
            release.set()

        self.assertFalse(verdict.passed)
        self.assertEqual(len(verdict.issues), 2)
        self.assertEqual(verdict.issues[0].file_path, fast)
        self.assertEqual(verdict.issues[0].message, "fast problem")
        self.assertEqual(verdict.issues[1].source_tag, TIMEOUT_TAG)
        self.assertEqual(verdict.issues[1].file_path, slow)
        self.assertIn(slow, verdict.issues[1].message)
        self.assertEqual(verdict.checked, (fast,))

    def test_fast_run_within_timeout_passes(self) -> None:
        ok = self.make_file("ok.js")
        verdict = self.make_evaluator(RecordingPrimary(), timeout=10.0).evaluate(
            [CandidateFile(ok, ChangeKind.ADDED)]
        )
        self.assertTrue(verdict.passed)


if __name__ == "__main__":
    unittest.main()
