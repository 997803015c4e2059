# readerly/services/extraction/patterns.py
"""
Classification patterns matched against a node's lowercased ``"class id"``.

The table is an immutable value: ``DEFAULT_PATTERNS`` is compiled once at
import and handed to every component that classifies nodes.  Callers that
want different keywords build their own with ``PatternLibrary.compile``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern

from loguru import logger

from readerly.exceptions import PatternCompilationFailure


DEFAULT_PATTERN_SOURCES: Dict[str, str] = {
    "unlikely_candidates": (
        r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|extra|"
        r"footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|sidebar|"
        r"skyscraper|social|sponsor|supplemental|ad-break|agegate|pagination|pager|popup|"
        r"yom-remote"
    ),
    "ok_maybe_its_a_candidate": r"and|article|body|column|content|main|shadow",
    "positive": (
        r"article|body|content|entry|hentry|h-entry|main|page|pagination|post|text|blog|story"
    ),
    "negative": (
        r"-ad-|hidden|^hid$| hid$| hid |^hid |banner|combx|comment|com-|contact|foot|footer|"
        r"footnote|gdpr|masthead|media|meta|outbrain|promo|related|scroll|share|shoutbox|"
        r"sidebar|skyscraper|sponsor|shopping|tags|tool|widget"
    ),
    "byline": r"byline|author|dateline|writtenby|p-author",
}


def compile_pattern(name: str, source: str) -> Pattern:
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise PatternCompilationFailure(name, source, str(exc)) from exc


@dataclass(frozen=True)
class PatternLibrary:
    """
    Compiled, case-insensitive classification patterns.

    A pattern that failed to compile is stored as ``None`` and never matches;
    matching is a pure membership test.
    """

    patterns: Dict[str, Optional[Pattern]] = field(default_factory=dict)

    @classmethod
    def compile(cls, **overrides: str) -> "PatternLibrary":
        """Build a library from the defaults, replacing any named sources."""
        unknown = set(overrides) - set(DEFAULT_PATTERN_SOURCES)
        if unknown:
            raise KeyError(f"Unknown pattern name(s): {sorted(unknown)}")

        compiled: Dict[str, Optional[Pattern]] = {}
        for name, source in {**DEFAULT_PATTERN_SOURCES, **overrides}.items():
            try:
                compiled[name] = compile_pattern(name, source)
            except PatternCompilationFailure as exc:
                logger.warning(f"{exc}; '{name}' will never match")
                compiled[name] = None
        return cls(patterns=compiled)

    def matches(self, name: str, text: str) -> bool:
        pattern = self.patterns.get(name)
        if pattern is None:
            return False
        return pattern.search(text) is not None

    # ------------------------------------------------------------------
    # Shorthands used throughout the pipeline
    # ------------------------------------------------------------------
    def is_unlikely(self, match_string: str) -> bool:
        """Unlikely to be content, and not rescued by an ok-candidate keyword."""
        return self.matches("unlikely_candidates", match_string) and not self.matches(
            "ok_maybe_its_a_candidate", match_string
        )

    def is_byline(self, match_string: str) -> bool:
        return self.matches("byline", match_string)


DEFAULT_PATTERNS = PatternLibrary.compile()
