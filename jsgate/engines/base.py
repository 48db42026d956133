"""Interfaces for the external check engines."""

from typing import Protocol

from jsgate.issues import FallbackResult, Issue


class PrimaryCheck(Protocol):
    """Style/structure rule engine run against every in-scope file."""

    name: str

    def check(self, text: str, path: str) -> list[Issue]:
        """Lint `text` and return its issues; an empty list means clean.

        Raises:
            CheckEngineError: if the engine could not process the input
        """
        ...


class FallbackCheck(Protocol):
    """Structural-integrity validator run only on files the primary check passed."""

    name: str

    def check(self, text: str, allow_eval: bool) -> FallbackResult:
        """Validate `text` and return pass/fail with the issues found.

        Raises:
            CheckEngineError: if the engine could not process the input
        """
        ...
