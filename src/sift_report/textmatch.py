"""Table-driven text-matching primitives for section titles and content.

Pure text operations; the tables themselves live in report_tables.
"""
from __future__ import annotations

from collections.abc import Iterable

from sift_report.report_types import JunkPattern, KnownSectionMarker


def match_marker_title(
    content: str,
    markers: Iterable[KnownSectionMarker],
) -> str | None:
    """Return the canonical title of the first marker that prefixes *content*.

    Args:
        content: Section body, already trimmed.
        markers: Ordered marker table; the first match wins.

    Returns:
        The marker's title, or None if no marker matches.
    """
    for entry in markers:
        if entry.matches(content):
            return entry.title
    return None


def first_matching_pattern(
    content: str,
    patterns: Iterable[JunkPattern],
) -> JunkPattern | None:
    """Return the first junk pattern found in *content*, stopping at the first hit."""
    for pattern in patterns:
        if pattern.matches(content):
            return pattern
    return None


def title_contains(title: str, phrases: Iterable[str]) -> str | None:
    """Return the first phrase that occurs verbatim in *title*, or None."""
    for phrase in phrases:
        if phrase in title:
            return phrase
    return None
