"""Render pipeline: annotate once, then segment structured reports.

``render_report`` is what a message view calls on every refresh. It is
memoized per (text, assessments, report type); the cache is a performance
shortcut only and never changes results.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache

from sift_report.citations import annotate
from sift_report.report_tables import (
    KNOWN_SECTION_MARKERS,
    MISCELLANEOUS_TITLE,
    REPORT_INFORMATION_TITLE,
    REVISED_SUMMARY_PHRASE,
)
from sift_report.report_types import (
    KnownSectionMarker,
    ReportType,
    Section,
    SourceAssessment,
)
from sift_report.segmenter import segment

_RENDER_CACHE_SIZE = 128

# "## 1. " / "##" / "### " at the start of a raw heading line
_HEADING_PREFIX_RE = re.compile(r"^(###\s*|##\s*\d*\.?\s*)")


@dataclass(frozen=True, slots=True)
class RenderedReport:
    """Display forms of one report message.

    ``annotated_text`` feeds the display and the clipboard;
    ``original_text`` is what gets exported.
    """
    original_text: str
    annotated_text: str
    sections: tuple[Section, ...]
    report_type: ReportType

    @property
    def structured(self) -> bool:
        """False means: render ``annotated_text`` as plain Markdown."""
        return bool(self.sections)


def render_report(
    text: str,
    assessments: Sequence[SourceAssessment],
    report_type: ReportType = ReportType.FULL_CHECK,
    *,
    markers: Sequence[KnownSectionMarker] = KNOWN_SECTION_MARKERS,
) -> RenderedReport:
    """Annotate *text* once and segment it when the report type is structured.

    Args:
        text: Raw report text as generated.
        assessments: Known sources for citation markers.
        report_type: Only ``ReportType.FULL_CHECK`` reports are segmented.
        markers: Table-header markers for blank-title inference.
    """
    return _render_cached(text, tuple(assessments), report_type, tuple(markers))


@lru_cache(maxsize=_RENDER_CACHE_SIZE)
def _render_cached(
    text: str,
    assessments: tuple[SourceAssessment, ...],
    report_type: ReportType,
    markers: tuple[KnownSectionMarker, ...],
) -> RenderedReport:
    annotated = annotate(text, assessments)
    sections: tuple[Section, ...] = ()
    if report_type is ReportType.FULL_CHECK:
        sections = tuple(segment(annotated, markers=markers))
    return RenderedReport(
        original_text=text,
        annotated_text=annotated,
        sections=sections,
        report_type=report_type,
    )


def clear_render_cache() -> None:
    _render_cached.cache_clear()


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

def default_section_index(sections: Sequence[Section]) -> int:
    """Index of the tab to open first: "Revised Summary" if present, else 0."""
    for i, section in enumerate(sections):
        if REVISED_SUMMARY_PHRASE in section.title:
            return i
    return 0


def heading_prefix(section: Section) -> str:
    """Markdown heading prefix shown before a section's title.

    Pseudo-sections (level 0, "Report Information", "Miscellaneous") get no
    prefix. Headed sections reuse the ``## N.`` / ``###`` prefix of their
    raw heading line, falling back to ``## `` / ``### `` by level.
    """
    if section.level == 0 or section.title in (REPORT_INFORMATION_TITLE, MISCELLANEOUS_TITLE):
        return ""
    m = _HEADING_PREFIX_RE.match(section.raw_title_line)
    if m is not None:
        return m.group(1)
    return "## " if section.level == 2 else "### "


def sections_to_markdown(sections: Sequence[Section]) -> str:
    """Re-render sections as one Markdown document."""
    blocks: list[str] = []
    for section in sections:
        prefix = heading_prefix(section)
        if prefix:
            # Inferred titles are not in the raw line; rebuild the heading
            heading = f"{prefix.rstrip()} {section.title}"
        else:
            heading = f"**{section.title}**"
        blocks.append(f"{heading}\n\n{section.content}".rstrip())
    return "\n\n".join(blocks)
