#!/usr/bin/env python3
"""
Fallback check: structural integrity of a script.

Parses the file with esprima in tolerant mode. Files that the style engine
accepted can still fail to parse as a whole program (unbalanced blocks,
stray tokens, reserved words as identifiers), which would also break
minification. With `allow_eval` off, direct `eval(...)` calls are reported
too since they prevent safe identifier renaming.
"""

import logging
import re
from typing import Any, Mapping

import esprima

from jsgate.exceptions import CheckEngineError
from jsgate.issues import NO_COLUMN, NO_LINE, FallbackResult, Issue


logger = logging.getLogger(__name__)

INTEGRITY_TAG = "integrity"
EVAL_TAG = "eval"

ERROR_PREFIX = "Error: "
LINE_PREFIX_RE = re.compile(r"^Line \d+: ")


class EsprimaIntegrityCheck:
    """Parses scripts with esprima and reports anything that breaks the parse."""

    name = "esprima"

    def check(self, text: str, allow_eval: bool) -> FallbackResult:
        issues: list[Issue] = []
        eval_calls: list[Issue] = []

        def find_eval(node: Any, metadata: Any) -> None:
            if allow_eval or getattr(node, "type", None) != "CallExpression":
                return
            callee = getattr(node, "callee", None)
            if getattr(callee, "type", None) == "Identifier" and callee.name == "eval":
                start = (getattr(node, "loc", None) or metadata).start
                eval_calls.append(
                    Issue(
                        file_path="",
                        line=start.line,
                        column=start.column,
                        source_tag=EVAL_TAG,
                        message="eval is not allowed; it prevents safe minification",
                    )
                )

        try:
            program = esprima.parseScript(
                text, {"tolerant": True, "loc": True}, find_eval
            )
        except esprima.Error as e:
            issues.append(_error_to_issue(e))
        except RecursionError as e:
            raise CheckEngineError(self.name, "input nested too deeply") from e
        except Exception as e:
            raise CheckEngineError(self.name, f"{type(e).__name__}: {e}") from e
        else:
            for error in getattr(program, "errors", None) or []:
                issues.append(_error_to_issue(error))

        issues.extend(eval_calls)
        if issues:
            logger.debug(f"{self.name} reported {len(issues)} issue(s)")
        return FallbackResult(passed=not issues, issues=tuple(issues))


def _error_field(error: Any, name: str) -> Any:
    # Tolerant-mode errors come back as plain dicts; fatal ones as esprima.Error
    if isinstance(error, Mapping):
        return error.get(name)
    return getattr(error, name, None)


def _error_message(error: Any) -> str:
    text = _error_field(error, "description") or _error_field(error, "message")
    text = str(text or error)
    if text.startswith(ERROR_PREFIX):
        text = text[len(ERROR_PREFIX):]
    return LINE_PREFIX_RE.sub("", text, count=1)


def _error_to_issue(error: Any) -> Issue:
    line = _error_field(error, "lineNumber")
    column = _error_field(error, "column")
    return Issue(
        file_path="",
        line=line if isinstance(line, int) and line > 0 else NO_LINE,
        column=column if isinstance(column, int) else NO_COLUMN,
        source_tag=INTEGRITY_TAG,
        message=_error_message(error),
    )
