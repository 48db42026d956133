"""JavaScript check-in gate."""

from jsgate.evaluator import GateEvaluator
from jsgate.formatter import DEFAULT_OUTPUT_FORMAT, format_issue
from jsgate.ignore import VENDOR_PATTERNS, IgnoreMatcher
from jsgate.issues import CandidateFile, ChangeKind, GateVerdict, Issue
from jsgate.validator import FileValidator


__all__ = [
    "DEFAULT_OUTPUT_FORMAT",
    "VENDOR_PATTERNS",
    "CandidateFile",
    "ChangeKind",
    "FileValidator",
    "GateEvaluator",
    "GateVerdict",
    "IgnoreMatcher",
    "Issue",
    "format_issue",
]
