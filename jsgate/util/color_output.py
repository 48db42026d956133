#!/usr/bin/env python3
"""
Colored terminal output for gate results.

Uses the Rich library so the same output works in Windows consoles,
git GUIs that capture hook output, and plain terminals.
"""

from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text


class ColorOutput:
    """Prints gate messages with consistent styling."""

    def __init__(
        self, force_terminal: Optional[bool] = None, file: Optional[TextIO] = None
    ):
        """
        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None)
            file: Stream to write to (defaults to stdout)
        """
        self.console = Console(force_terminal=force_terminal, file=file)

    def _print(self, message: str, style: str, prefix: str = "") -> None:
        text = Text()
        if prefix:
            text.append(prefix, style=f"{style} bold")
        # Text.append does not interpret markup, so file paths like a[0].js print verbatim
        text.append(message, style=style)
        self.console.print(text, soft_wrap=True, highlight=False)

    def print_yellow(self, message: str) -> None:
        self._print(message, "yellow")

    def print_failure(self, message: str) -> None:
        """Print one rendered gate failure."""
        self._print(message, "red")

    def print_verdict(self, passed: bool, failure_count: int, checked_count: int) -> None:
        """Print the summary line for a gate run."""
        if passed:
            self._print(
                f"JavaScript gate passed ({checked_count} file(s) checked)",
                "bright_green",
                "✓ ",
            )
        else:
            self._print(
                f"JavaScript gate failed with {failure_count} problem(s)",
                "red",
                "✗ ",
            )
