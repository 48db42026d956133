#!/usr/bin/env python3
"""
Gate evaluation: decide whether a set of staged files may be checked in.

Candidates are filtered by change kind and by the ignore rules, validated
(optionally in parallel), and the resulting issues are rendered in
candidate order. Per-file failures never abort the run.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional, Sequence

from typeguard import typechecked

from jsgate.exceptions import FileReadError
from jsgate.formatter import render_issue, resolve_template
from jsgate.ignore import IgnoreMatcher
from jsgate.issues import NO_COLUMN, NO_LINE, CandidateFile, GateVerdict, Issue
from jsgate.validator import FileValidator


logger = logging.getLogger(__name__)

INTERNAL_ERROR_TAG = "internal"
TIMEOUT_TAG = "timeout"


class GateEvaluator:
    """
    Orchestrates one gate run.

    Handles:
    - Change-kind and ignore filtering
    - Parallel per-file validation with ThreadPoolExecutor
    - Reassembly in candidate order
    - Overall timeout with partial results
    """

    def __init__(
        self,
        validator: FileValidator,
        ignore_matcher: Optional[IgnoreMatcher] = None,
        max_workers: int = 1,
        timeout: Optional[float] = None,
    ) -> None:
        self.validator = validator
        self.ignore_matcher = ignore_matcher or IgnoreMatcher()
        self.max_workers = max(1, max_workers)
        self.timeout = timeout

    @typechecked
    def select(self, candidates: Sequence[CandidateFile]) -> list[str]:
        """Return the paths that are in scope, in candidate order."""
        selected: list[str] = []
        for candidate in candidates:
            if not candidate.is_added_or_edited:
                continue
            if self.ignore_matcher.should_ignore(candidate.path):
                continue
            selected.append(candidate.path)
        return selected

    @typechecked
    def evaluate(
        self, candidates: Sequence[CandidateFile], template: Optional[str] = None
    ) -> GateVerdict:
        """
        Evaluate the gate for the staged files.

        Args:
            candidates: Staged files in host enumeration order
            template: Output format for failure messages (default when empty)

        Returns:
            Pass when no issues were found, otherwise Fail with rendered messages
        """
        active_template = resolve_template(template)
        paths = self.select(candidates)
        logger.info(f"Checking {len(paths)} of {len(candidates)} candidate file(s)")

        start = time.time()
        if self.max_workers == 1 and self.timeout is None:
            per_file = [self._validate_one(path) for path in paths]
            timed_out: list[str] = []
        else:
            per_file, timed_out = self._validate_parallel(paths)
        logger.info(f"Validation finished in {time.time() - start:.2f}s")

        issues: list[Issue] = []
        for file_issues in per_file:
            issues.extend(file_issues)
        if timed_out:
            issues.append(self._timeout_issue(timed_out))

        checked = tuple(p for p in paths if p not in timed_out)
        if not issues:
            return GateVerdict.pass_(checked=checked)

        failures = tuple(render_issue(issue, active_template) for issue in issues)
        return GateVerdict.fail(failures, tuple(issues), checked=checked)

    def _validate_parallel(
        self, paths: list[str]
    ) -> tuple[list[list[Issue]], list[str]]:
        """Validate files on a thread pool; returns finished results and unfinished paths."""
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, max(1, len(paths)))
        )
        try:
            futures: list[Future[list[Issue]]] = [
                executor.submit(self._validate_one, path) for path in paths
            ]
            done, _ = wait(futures, timeout=self.timeout)

            results: list[list[Issue]] = []
            timed_out: list[str] = []
            for path, future in zip(paths, futures):
                if future in done:
                    results.append(future.result())
                else:
                    timed_out.append(path)
            return results, timed_out
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _validate_one(self, path: str) -> list[Issue]:
        try:
            return self.validator.validate(path)
        except FileReadError as e:
            logger.warning(f"Skipping {path}: {e.message}")
            return []
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while checking {path}")
            return [
                Issue(
                    file_path=path,
                    line=NO_LINE,
                    column=NO_COLUMN,
                    source_tag=INTERNAL_ERROR_TAG,
                    message=f"{type(e).__name__}: {e}",
                )
            ]

    def _timeout_issue(self, unfinished: list[str]) -> Issue:
        logger.warning(
            f"Gate timed out after {self.timeout}s with {len(unfinished)} file(s) unchecked"
        )
        return Issue(
            file_path=unfinished[0],
            line=NO_LINE,
            column=NO_COLUMN,
            source_tag=TIMEOUT_TAG,
            message=(
                f"check timed out after {self.timeout}s; "
                f"not checked: {', '.join(unfinished)}"
            ),
        )
