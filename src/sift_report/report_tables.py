"""Static configuration tables for report segmentation.

All tables are built once at import and never mutated. New report templates
are added by data: either append to KNOWN_SECTION_MARKERS here or load an
extra marker table from JSON with ``load_marker_table``.
"""
from __future__ import annotations

import re
from pathlib import Path

from sift_report.io_utils import load_json
from sift_report.report_types import JunkPattern, KnownSectionMarker


# ---------------------------------------------------------------------------
# Canonical titles
# ---------------------------------------------------------------------------

REPORT_INFORMATION_TITLE = "Report Information"
MISCELLANEOUS_TITLE = "Miscellaneous"
UNTITLED_TITLE = "Untitled Section"
# Rendered by the source sidebar, never as a report section
SOURCE_RELIABILITY_PHRASE = "Assessment of Source Reliability"
REVISED_SUMMARY_PHRASE = "Revised Summary"


# ---------------------------------------------------------------------------
# Heading glyphs
# ---------------------------------------------------------------------------

# check-mark, warning, wrench, pin, red-circle, scroll, trophy, bulb
SECTION_GLYPHS: tuple[str, ...] = (
    "✅", "⚠", "🛠", "📌", "🔴", "📜", "🏆", "💡",
)

# Models emit the warning and wrench glyphs with or without U+FE0F
GLYPH_PATTERN = "(?:" + "|".join(
    re.escape(g) + "\\ufe0f?" for g in SECTION_GLYPHS
) + ")"


# ---------------------------------------------------------------------------
# Known table-header markers -> canonical titles
# ---------------------------------------------------------------------------

SOURCE_TABLE_MARKER = "| Source | Usefulness Assessment | Notes | Rating (1-5) |"

KNOWN_SECTION_MARKERS: tuple[KnownSectionMarker, ...] = (
    KnownSectionMarker(
        marker="| Statement | Plausibility | Path for Investigation |",
        title="📌 Potential Leads",
    ),
    KnownSectionMarker(
        marker="| Statement | Status | Clarification & Correction | Confidence (1-5) |",
        title="✅ Verified Facts",
    ),
    KnownSectionMarker(
        marker="| Statement | Issue | Correction | Correction Confidence (1-5) |",
        title="⚠️ Errors and Corrections",
    ),
    KnownSectionMarker(
        marker=SOURCE_TABLE_MARKER,
        title=f"🔴 {SOURCE_RELIABILITY_PHRASE}",
    ),
)


# ---------------------------------------------------------------------------
# Junk patterns -- generator output that is not report prose
# ---------------------------------------------------------------------------
# Anchored patterns use ^ without MULTILINE, so they test the start of the
# section content only. The __main__ guard is unanchored.

_DOTALL_I = re.DOTALL | re.IGNORECASE

JUNK_PATTERNS: tuple[JunkPattern, ...] = (
    JunkPattern(
        re.compile(r"^\s*#include\s*<iostream>.*using\s*namespace\s*std;", _DOTALL_I),
        "C++ console program skeleton",
    ),
    JunkPattern(
        re.compile(
            r"^\s*```(?:python)?\s*"
            r"(?:from\s*flask\s*import|from\s*django\.|import\s*uvicorn)",
            _DOTALL_I,
        ),
        "Python web framework boilerplate",
    ),
    JunkPattern(
        re.compile(
            r"if\s*__name__\s*==\s*['\"]__main__['\"]:\s*app\.run\(", _DOTALL_I,
        ),
        "Python web app entry-point guard",
    ),
    JunkPattern(
        re.compile(r"^\s*<!DOCTYPE\s*html>.*<head>.*<title>", _DOTALL_I),
        "raw HTML document skeleton",
    ),
    JunkPattern(
        re.compile(
            r"^\s*```(?:javascript)?\s*"
            r"const\s*express\s*=\s*require\('express'\);.*app\.listen\(",
            _DOTALL_I,
        ),
        "Node.js Express boilerplate",
    ),
    JunkPattern(
        re.compile(
            r"^\|\s*Statement\s*\|\s*Plausibility\s*\|\s*Path\s*for\s*Investigation"
            r"\s*return\s*render_template",
            re.IGNORECASE,
        ),
        "malformed table header run into template call",
    ),
    JunkPattern(
        re.compile(
            r"^\s*```(?:jsx|javascript)\s*"
            r"import\s*React\s*from\s*['\"]react['\"];.*export\s*default",
            _DOTALL_I,
        ),
        "React component boilerplate",
    ),
)


# ---------------------------------------------------------------------------
# Loading extra markers
# ---------------------------------------------------------------------------

def load_marker_table(path: Path) -> tuple[KnownSectionMarker, ...]:
    """Load extra section markers from a JSON file.

    Expected shape::

        {"markers": [{"marker": "| Claim | Verdict |", "title": "Claims"}]}

    A bare list of marker objects is accepted too.

    Raises:
        ValueError: if the payload is not a list of marker objects with
            non-empty ``marker`` and ``title`` strings.
    """
    payload = load_json(path)
    entries = payload.get("markers") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise ValueError(f"{path}: expected a 'markers' list")

    markers: list[KnownSectionMarker] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: marker #{i} is not an object")
        marker = entry.get("marker")
        title = entry.get("title")
        if not isinstance(marker, str) or not isinstance(title, str):
            raise ValueError(f"{path}: marker #{i} needs string 'marker' and 'title'")
        try:
            markers.append(KnownSectionMarker(marker=marker, title=title))
        except ValueError as exc:
            raise ValueError(f"{path}: marker #{i}: {exc}") from exc
    return tuple(markers)
