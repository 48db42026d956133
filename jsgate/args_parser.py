"""Argument parsing for the jsgate command."""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class GateArgs:
    """Parsed command-line arguments for a gate run."""

    staged: bool = False
    output_format: Optional[str] = None
    jobs: Optional[int] = None
    timeout: Optional[float] = None
    eslint: Optional[str] = None
    no_fallback: bool = False
    config: Optional[Path] = None
    verbose: int = 0
    files: list[str] = field(default_factory=lambda: list[str]())


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def parse_gate_args(argv: list[str] | None = None) -> GateArgs:
    """
    Parse command-line arguments for the gate.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        GateArgs object with parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="jsgate",
        description="JavaScript check-in gate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Each staged .js file (generated variants and known vendor libraries are
skipped) is linted with ESLint. Files ESLint accepts are then parsed in
full to catch structural problems such as unbalanced blocks.

Examples:
  jsgate                          # Check staged changes of the current repo
  jsgate app/main.js lib/util.js  # Check specific files
  jsgate --jobs 1 --timeout 30    # Sequential, give up after 30 seconds
  jsgate --format "{0}:{1}: {3}"  # Custom message layout

Format slots: {0} path, {1} line, {2} source tag, {3} message,
{4} "at character N" (empty when there is no column).
""",
    )

    parser.add_argument(
        "--staged",
        action="store_true",
        help="Check the files staged in git (default when no files are given)",
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        default=None,
        help='Failure message template (default: "{0}({1}): ({2}) {3} {4}")',
    )

    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        default=None,
        help="Number of files to check in parallel (default: CPU count)",
    )

    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Overall time limit in seconds; also caps the per-file ESLint timeout",
    )

    parser.add_argument(
        "--eslint",
        default=None,
        help="ESLint executable to run (default: eslint)",
    )

    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Skip the structural integrity check on files ESLint accepts",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [tool.jsgate] table (default: pyproject.toml)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-vv for debug output)",
    )

    parser.add_argument(
        "files",
        nargs="*",
        default=[],
        help="Optional: specific file(s) to check",
    )

    if argv is None:
        argv = sys.argv[1:]

    args = parser.parse_args(argv)

    return GateArgs(
        staged=args.staged or not args.files,
        output_format=args.output_format,
        jobs=args.jobs,
        timeout=args.timeout,
        eslint=args.eslint,
        no_fallback=args.no_fallback,
        config=args.config,
        verbose=args.verbose,
        files=[str(Path(f).resolve()) for f in args.files],
    )
