#!/usr/bin/env python3
"""
Decide which staged files are exempt from the JavaScript gate.

Rules are applied in order, first match wins:

1. Only `.js` files are checked (case-insensitive).
2. Generated and tooling variants are skipped (`.min.js`, `.debug.js`,
   `.intellisense.js`, `_references.js`, `-vsdoc.js`).
3. Paths that no longer exist on disk are skipped.
4. Well-known third-party libraries are skipped by base name.
"""

import logging
import os
import re
from typing import Iterable, Optional


logger = logging.getLogger(__name__)

JS_EXTENSION = ".js"

GENERATED_SUFFIXES = (
    ".min.js",
    ".debug.js",
    ".intellisense.js",
    "_references.js",
)

GENERATED_SUBSTRINGS = ("-vsdoc.js",)

# Searched (not anchored) against the lower-cased base name of a file
VENDOR_PATTERNS: tuple[str, ...] = (
    r"_references\.js",
    r"amplify\.js",
    r"angular\.js",
    r"backbone\.js",
    r"bootstrap\.js",
    r"dojo\.js",
    r"ember\.js",
    r"ext-core\.js",
    r"handlebars.*",
    r"highlight\.js",
    r"history\.js",
    r"jquery-([0-9\.]+)\.js",
    r"jquery.blockui.*",
    r"jquery.validate.*",
    r"jquery.unobtrusive.*",
    r"jquery-ui-([0-9\.]+)\.js",
    r"json2\.js",
    r"knockout-([0-9\.]+)\.js",
    r"MicrosoftAjax([a-z]+)\.js",
    r"modernizr-([0-9\.]+)\.js",
    r"mustache.*",
    r"prototype\.js",
    r"qunit-([0-9a-z\.]+)\.js",
    r"require\.js",
    r"respond\.js",
    r"sammy\.js",
    r"scriptaculous\.js",
    r"swfobject\.js",
    r"underscore\.js",
    r"webfont\.js",
    r"yepnope\.js",
    r"zepto\.js",
)


def compile_patterns(patterns: Iterable[str]) -> "re.Pattern[str]":
    """Join name patterns into one case-insensitive alternation."""
    sources = list(patterns)
    if not sources:
        # Matches nothing
        return re.compile(r"(?!)")
    return re.compile("(" + ")|(".join(sources) + ")", re.IGNORECASE)


class IgnoreMatcher:
    """Path predicate for files the gate should not check."""

    def __init__(
        self,
        vendor_patterns: Iterable[str] = VENDOR_PATTERNS,
        extra_patterns: Iterable[str] = (),
    ) -> None:
        self.vendor_patterns: tuple[str, ...] = tuple(vendor_patterns) + tuple(
            extra_patterns
        )
        self._vendor_regex = compile_patterns(self.vendor_patterns)

    def should_ignore(self, path: str) -> bool:
        """Return True if the file at `path` must not be checked."""
        reason = self.explain(path)
        if reason is not None:
            logger.debug(f"Ignoring {path}: {reason}")
            return True
        return False

    def explain(self, path: str) -> Optional[str]:
        """
        Return why `path` is ignored, or None if it should be checked.

        Args:
            path: Absolute or repo-relative file path

        Returns:
            Short reason string for the first rule that matched
        """
        lowered = path.lower()

        if os.path.splitext(lowered)[1] != JS_EXTENSION:
            return "not a .js file"

        for suffix in GENERATED_SUFFIXES:
            if lowered.endswith(suffix):
                return f"generated file ({suffix})"
        for fragment in GENERATED_SUBSTRINGS:
            if fragment in lowered:
                return f"generated file ({fragment})"

        if not os.path.isfile(path):
            return "file does not exist"

        name = os.path.basename(path)
        match = self._vendor_regex.search(name)
        if match:
            return f"vendor library ({match.group(0)})"

        return None
