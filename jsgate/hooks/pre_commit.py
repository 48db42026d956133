#!/usr/bin/env python3
"""
Git pre-commit hook for the JavaScript gate.

Reads the staged changes from the index, evaluates the gate on them and
blocks the commit when any file fails.

Install by linking or copying into .git/hooks/pre-commit, or call
`jsgate --staged` from an existing hook.

Exit codes:
- 0: Allow commit
- 1: Block commit (failures printed)
- 2: Hook could not run (not a git repository, git missing)
"""

import logging
import subprocess
import sys
from pathlib import Path

from jsgate.exceptions import GateError
from jsgate.issues import CandidateFile, ChangeKind


logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30.0

# Rename/copy similarity at which the content is considered unchanged
UNCHANGED_SIMILARITY = 100


class GitError(GateError):
    """git could not report the staged changes"""


def _git(args: list[str], cwd: Path | None = None) -> str:
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=GIT_TIMEOUT,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"'{' '.join(cmd)}' timed out after {GIT_TIMEOUT}s") from e

    if result.returncode != 0:
        raise GitError(f"'{' '.join(cmd)}' failed: {result.stderr.strip()}")
    return result.stdout


def find_repo_root(start: Path | None = None) -> Path:
    """Return the top level of the git work tree containing `start`."""
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=start).strip())


def change_kind_for_status(status: str) -> ChangeKind:
    """
    Map a `git diff --name-status` status to a change kind.

    Examples:
        "A" -> ADDED, "C075" -> ADDED, "M" -> EDITED,
        "R087" -> EDITED, "R100" -> OTHER, "D" -> OTHER
    """
    letter = status[:1]
    if letter in ("A", "C"):
        return ChangeKind.ADDED
    if letter == "M":
        return ChangeKind.EDITED
    if letter == "R":
        score = status[1:]
        if score.isdigit() and int(score) >= UNCHANGED_SIMILARITY:
            return ChangeKind.OTHER
        return ChangeKind.EDITED
    return ChangeKind.OTHER


def parse_name_status(output: str, root: Path) -> list[CandidateFile]:
    """
    Parse NUL-separated `git diff --name-status -z` output.

    Renames and copies carry two paths; the destination is the staged file.
    """
    fields = output.split("\0")
    if fields and fields[-1] == "":
        fields.pop()

    candidates: list[CandidateFile] = []
    i = 0
    while i < len(fields):
        status = fields[i]
        width = 3 if status[:1] in ("R", "C") else 2
        if i + width > len(fields):
            logger.warning(f"Truncated git status entry: {status}")
            break
        path = fields[i + width - 1]
        i += width
        candidates.append(
            CandidateFile(
                path=str(root / path),
                change_kind=change_kind_for_status(status),
            )
        )
    return candidates


def staged_candidates(start: Path | None = None) -> list[CandidateFile]:
    """Return the staged changes of the repository containing `start`."""
    root = find_repo_root(start)
    output = _git(
        ["diff", "--cached", "--name-status", "-z", "-M"],
        cwd=root,
    )
    candidates = parse_name_status(output, root)
    logger.info(f"{len(candidates)} staged change(s) in {root}")
    return candidates


def main() -> int:
    """Hook entry point: evaluate the staged changes of the current repository."""
    from jsgate.cli import main as cli_main

    return cli_main(["--staged", *sys.argv[1:]])


if __name__ == "__main__":
    sys.exit(main())
