#!/usr/bin/env python3
"""
Two-stage validation of a single JavaScript file.

The primary check (style/rule engine) always runs. The fallback check
(structural integrity) runs only when the primary check found nothing, so
files with style problems are not reported twice for the same defect.
"""

import dataclasses
import logging

from jsgate.engines.base import FallbackCheck, PrimaryCheck
from jsgate.exceptions import CheckEngineError, FileReadError
from jsgate.issues import NO_COLUMN, NO_LINE, Issue


logger = logging.getLogger(__name__)

ENGINE_ERROR_TAG = "engine"


def read_source(path: str) -> str:
    """Read a source file, tolerating a UTF-8 byte order mark."""
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e)) from e


def engine_error_issue(path: str, error: CheckEngineError) -> Issue:
    """Synthetic issue standing in for an engine that could not run."""
    return Issue(
        file_path=path,
        line=NO_LINE,
        column=NO_COLUMN,
        source_tag=ENGINE_ERROR_TAG,
        message=error.message,
    )


def sort_by_line(issues: list[Issue]) -> list[Issue]:
    # sorted() is stable: issues on the same line keep the order they were reported in
    return sorted(issues, key=lambda issue: issue.line)


class FileValidator:
    """Runs the primary and, when clean, the fallback check on one file."""

    def __init__(
        self,
        primary: PrimaryCheck,
        fallback: FallbackCheck,
        run_fallback: bool = True,
        allow_eval: bool = True,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.run_fallback = run_fallback
        self.allow_eval = allow_eval

    def validate(self, path: str) -> list[Issue]:
        """
        Check one file.

        Args:
            path: File to read and check

        Returns:
            Issues for this file sorted by line

        Raises:
            FileReadError: if the file cannot be read
        """
        text = read_source(path)

        try:
            issues = self._stamp(self.primary.check(text, path), path)
        except CheckEngineError as e:
            logger.warning(f"{path}: {e.message}")
            return [engine_error_issue(path, e)]

        if not issues and self.run_fallback:
            try:
                result = self.fallback.check(text, self.allow_eval)
            except CheckEngineError as e:
                logger.warning(f"{path}: {e.message}")
                return [engine_error_issue(path, e)]
            if not result.passed:
                issues = self._stamp(result.issues, path)

        return sort_by_line(issues)

    @staticmethod
    def _stamp(issues, path: str) -> list[Issue]:
        return [dataclasses.replace(issue, file_path=path) for issue in issues]
