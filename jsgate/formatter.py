#!/usr/bin/env python3
"""Render issues into the messages shown to the person checking in."""

import logging
from typing import Optional

from jsgate.exceptions import ConfigError
from jsgate.issues import Issue


logger = logging.getLogger(__name__)

# Slots: {0} path, {1} line, {2} source tag, {3} message, {4} character suffix
DEFAULT_OUTPUT_FORMAT = "{0}({1}): ({2}) {3} {4}"

# Errors str.format raises for a template that does not fit the slot values
TEMPLATE_ERRORS = (IndexError, KeyError, ValueError, AttributeError, TypeError)


def character_suffix(column: int) -> str:
    """Return the trailing character position text for a column."""
    if column < 0:
        return ""
    return f"at character {column}"


def format_issue(issue: Issue, template: Optional[str] = None) -> str:
    """
    Render one issue using a positional template.

    Args:
        issue: Issue to render
        template: Format string with slots {0}..{4}; empty or None uses the default

    Returns:
        The rendered failure message
    """
    return (template or DEFAULT_OUTPUT_FORMAT).format(
        issue.file_path,
        issue.line,
        issue.source_tag,
        issue.message,
        character_suffix(issue.column),
    )


def validate_template(template: str) -> None:
    """Raise ConfigError if `template` cannot render an issue."""
    try:
        template.format("file.js", 1, "tag", "message", "at character 1")
    except TEMPLATE_ERRORS as e:
        raise ConfigError(f"Invalid output format {template!r}: {e}") from e


def resolve_template(template: Optional[str]) -> str:
    """Return the template to use for this run, falling back to the default."""
    if not template:
        return DEFAULT_OUTPUT_FORMAT
    try:
        validate_template(template)
    except ConfigError as e:
        logger.warning(f"{e.message} - using default {DEFAULT_OUTPUT_FORMAT!r}")
        return DEFAULT_OUTPUT_FORMAT
    return template


def render_issue(issue: Issue, template: str) -> str:
    """
    Render one issue, using the default template if `template` fails on it.

    A template can pass validate_template and still fail on real values,
    e.g. "{3[40]}" with a short message.
    """
    try:
        return format_issue(issue, template)
    except TEMPLATE_ERRORS as e:
        logger.warning(
            f"Output format {template!r} failed for {issue.file_path}: {e} - using default"
        )
        return format_issue(issue, DEFAULT_OUTPUT_FORMAT)
