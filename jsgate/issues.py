#!/usr/bin/env python3
"""Value types shared by the gate pipeline."""

from dataclasses import dataclass
from enum import Enum, auto

from typeguard import typechecked


# Line number used when an issue does not point at a specific source line
NO_LINE = 0

# Column value used when an issue does not point at a specific character
NO_COLUMN = -1


class ChangeKind(Enum):
    """Kind of pending change reported by the host for a staged file"""

    ADDED = auto()
    EDITED = auto()
    OTHER = auto()


@typechecked
@dataclass(frozen=True)
class CandidateFile:
    """One staged file offered to the gate."""

    path: str
    change_kind: ChangeKind

    @property
    def is_added_or_edited(self) -> bool:
        return self.change_kind in (ChangeKind.ADDED, ChangeKind.EDITED)


@typechecked
@dataclass(frozen=True)
class Issue:
    """
    A single problem reported by one of the checks.

    Attributes:
        file_path: File the issue belongs to
        line: 1-based source line, or NO_LINE when not line-addressed
        column: Character position as reported by the check, NO_COLUMN if none
        source_tag: Short label for the category (rule id, check phase)
        message: Human-readable description
    """

    file_path: str
    line: int
    column: int
    source_tag: str
    message: str

    def __post_init__(self):
        if self.line < 0:
            raise ValueError(f"line must be non-negative, got {self.line}")


@typechecked
@dataclass(frozen=True)
class FallbackResult:
    """Outcome of the structural-integrity check."""

    passed: bool
    issues: tuple[Issue, ...] = ()


@typechecked
@dataclass(frozen=True)
class GateVerdict:
    """Result of one gate evaluation."""

    failures: tuple[str, ...] = ()
    issues: tuple[Issue, ...] = ()
    checked: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return len(self.failures) == 0

    @classmethod
    def pass_(cls, checked: tuple[str, ...] = ()) -> "GateVerdict":
        return cls(failures=(), issues=(), checked=checked)

    @classmethod
    def fail(
        cls,
        failures: tuple[str, ...],
        issues: tuple[Issue, ...],
        checked: tuple[str, ...] = (),
    ) -> "GateVerdict":
        if not failures:
            raise ValueError("a failing verdict needs at least one failure")
        return cls(failures=failures, issues=issues, checked=checked)
