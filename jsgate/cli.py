#!/usr/bin/env python3
"""
jsgate command-line entry point.

Collects candidate files (staged git changes and/or explicit paths), runs
the gate and prints every failure. The exit code is what a pre-commit hook
needs: 0 allows the commit, 1 blocks it, 2 means the gate could not run.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from jsgate.args_parser import GateArgs, parse_gate_args
from jsgate.config import GateConfig, load_config
from jsgate.engines import EslintCheck, EsprimaIntegrityCheck
from jsgate.evaluator import GateEvaluator
from jsgate.exceptions import GateError
from jsgate.hooks.pre_commit import find_repo_root, staged_candidates
from jsgate.ignore import IgnoreMatcher
from jsgate.issues import CandidateFile, ChangeKind, GateVerdict
from jsgate.util.color_output import ColorOutput
from jsgate.validator import FileValidator


logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130

FIX_HINT = "Please fix all JS errors for your check-in."

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: int = 0) -> None:
    """Configure the root logger; warnings only unless -v is given."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def build_config(args: GateArgs, root: Optional[Path]) -> GateConfig:
    config = load_config(root=root, config_file=args.config)
    return config.override(
        output_format=args.output_format,
        jobs=args.jobs,
        timeout=args.timeout,
        eslint=args.eslint,
        run_fallback=False if args.no_fallback else None,
    )


def build_evaluator(config: GateConfig, cwd: Optional[Path] = None) -> GateEvaluator:
    """Wire the engines, validator and ignore rules described by `config`."""
    # Worker threads outlive a gate timeout and the interpreter joins them on
    # exit, so a single ESLint run may not take longer than the whole gate.
    eslint_timeout = config.eslint_timeout
    if config.timeout is not None:
        eslint_timeout = min(eslint_timeout, config.timeout)

    primary = EslintCheck(
        executable=config.eslint,
        extra_args=config.eslint_args,
        timeout=eslint_timeout,
        cwd=str(cwd) if cwd else None,
    )
    validator = FileValidator(
        primary=primary,
        fallback=EsprimaIntegrityCheck(),
        run_fallback=config.run_fallback,
        allow_eval=config.allow_eval,
    )
    return GateEvaluator(
        validator=validator,
        ignore_matcher=IgnoreMatcher(extra_patterns=config.ignore_patterns),
        max_workers=config.jobs,
        timeout=config.timeout,
    )


def collect_candidates(args: GateArgs, root: Optional[Path]) -> list[CandidateFile]:
    candidates: list[CandidateFile] = []
    if args.staged:
        candidates.extend(staged_candidates(root))
    seen = {c.path for c in candidates}
    for path in args.files:
        if path not in seen:
            candidates.append(CandidateFile(path=path, change_kind=ChangeKind.EDITED))
            seen.add(path)
    return candidates


def report(verdict: GateVerdict, output: ColorOutput) -> None:
    for failure in verdict.failures:
        output.print_failure(failure)
    if not verdict.passed:
        output.print_yellow(FIX_HINT)
    output.print_verdict(verdict.passed, len(verdict.failures), len(verdict.checked))


def run(args: GateArgs, output: Optional[ColorOutput] = None) -> int:
    """Run the gate for parsed arguments and return the exit code."""
    output = output or ColorOutput()
    root = find_repo_root() if args.staged else None

    config = build_config(args, root)
    candidates = collect_candidates(args, root)
    evaluator = build_evaluator(config, cwd=root)

    verdict = evaluator.evaluate(candidates, config.output_format)
    report(verdict, output)
    return EXIT_PASS if verdict.passed else EXIT_FAIL


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for jsgate."""
    args = parse_gate_args(argv)
    setup_logging(args.verbose)

    try:
        return run(args)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except GateError as e:
        logger.error(e.message)
        return EXIT_ERROR
    except Exception:
        logger.exception("jsgate failed unexpectedly")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
