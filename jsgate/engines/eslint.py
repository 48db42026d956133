#!/usr/bin/env python3
"""Primary check: ESLint run as a subprocess with JSON output."""

import json
import logging
import subprocess
from typing import Any, Optional, Sequence

from jsgate.exceptions import CheckEngineError
from jsgate.issues import NO_COLUMN, NO_LINE, Issue


logger = logging.getLogger(__name__)

# ESLint exit codes: 0 = clean, 1 = lint problems, 2 = config or internal error
ESLINT_OK_EXIT_CODES = (0, 1)

PARSE_ERROR_TAG = "parse"


class EslintCheck:
    """Runs ESLint over file text passed on stdin."""

    name = "eslint"

    def __init__(
        self,
        executable: str = "eslint",
        extra_args: Optional[Sequence[str]] = None,
        timeout: float = 60.0,
        cwd: Optional[str] = None,
    ) -> None:
        self.executable = executable
        self.extra_args = list(extra_args or [])
        self.timeout = timeout
        self.cwd = cwd

    def build_command(self, path: str) -> list[str]:
        return [
            self.executable,
            "--format",
            "json",
            "--stdin",
            "--stdin-filename",
            path,
            *self.extra_args,
        ]

    def check(self, text: str, path: str) -> list[Issue]:
        cmd = self.build_command(path)
        logger.debug(f"Running {subprocess.list2cmdline(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                cwd=self.cwd,
                check=False,
            )
        except FileNotFoundError as e:
            raise CheckEngineError(
                self.name, f"executable not found: {self.executable}"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise CheckEngineError(
                self.name, f"timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise CheckEngineError(self.name, str(e)) from e

        if result.returncode not in ESLINT_OK_EXIT_CODES:
            detail = (result.stderr or result.stdout).strip().splitlines()
            reason = detail[0] if detail else "no output"
            raise CheckEngineError(
                self.name, f"exit code {result.returncode}: {reason}"
            )

        return parse_eslint_output(result.stdout, path)


def parse_eslint_output(output: str, path: str) -> list[Issue]:
    """
    Convert ESLint's JSON formatter output into issues.

    Args:
        output: stdout of `eslint --format json`
        path: File the output belongs to

    Returns:
        Issues in the order ESLint reported them
    """
    try:
        results: Any = json.loads(output or "[]")
    except json.JSONDecodeError as e:
        raise CheckEngineError(EslintCheck.name, f"unreadable output: {e}") from e

    if not isinstance(results, list):
        raise CheckEngineError(EslintCheck.name, "unexpected output structure")

    issues: list[Issue] = []
    for file_result in results:
        if not isinstance(file_result, dict):
            continue
        for message in file_result.get("messages") or []:
            issues.append(_message_to_issue(message, path))
    return issues


def _message_to_issue(message: dict[str, Any], path: str) -> Issue:
    rule_id = message.get("ruleId")
    if rule_id:
        tag = str(rule_id)
    elif message.get("fatal"):
        tag = PARSE_ERROR_TAG
    else:
        tag = EslintCheck.name

    line = message.get("line")
    column = message.get("column")
    return Issue(
        file_path=path,
        line=int(line) if isinstance(line, int) and line > 0 else NO_LINE,
        column=int(column) if isinstance(column, int) else NO_COLUMN,
        source_tag=tag,
        message=str(message.get("message", "")).strip(),
    )
