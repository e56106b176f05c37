"""Report segmenter for LLM-generated fact-check reports.

Splits a Markdown report into a preamble plus ordered, titled sections,
inferring titles when the model left a heading blank and dropping sections
that are generator hallucinations rather than report prose.

Pipeline:
    1. Normalize line endings; trim.
    2. Extract the "Generated ... / AI-Generated: ..." preamble.
    3. Split before every ``##`` / ``###`` heading line.
    4. Classify chunks: heading -> new section, orphan text -> continuation
       of the previous section (or "Miscellaneous" if none exists yet).
    5. Infer blank titles from known table-header markers.
    6. Drop junk sections (code scaffolds, broken table headers).
    7. Drop the source-reliability section (rendered by the sidebar).
    8. Drop empty sections, except "Report Information".

The segmenter never raises on string input. An empty result means "render
the text unstructured"; it is not an error.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from sift_report.report_tables import (
    GLYPH_PATTERN,
    JUNK_PATTERNS,
    KNOWN_SECTION_MARKERS,
    MISCELLANEOUS_TITLE,
    REPORT_INFORMATION_TITLE,
    SOURCE_RELIABILITY_PHRASE,
    UNTITLED_TITLE,
)
from sift_report.report_types import JunkPattern, KnownSectionMarker, Section
from sift_report.textmatch import (
    first_matching_pattern,
    match_marker_title,
    title_contains,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Preamble: "Generated <date>" then "AI-Generated: <flag>", then blank lines.
# Greedy [^\n]* keeps each capture to exactly one full line.
_PREAMBLE_RE = re.compile(
    r"^(Generated [^\n]*)\n(AI-Generated:[^\n]*)\n*",
    re.IGNORECASE,
)

# Zero-width split point before each "##" / "###" line ("####" excluded).
_CHUNK_SPLIT_RE = re.compile(
    r"^(?=[ \t]*#{2,3}(?!#)[ \t]*(?:" + GLYPH_PATTERN + r"|\d+\.)?)",
    re.MULTILINE,
)

# Heading line: hashes, optional "N." ordinal, optional glyph + title,
# optional trailing colon. Applied to the first line of a chunk only.
_HEADING_RE = re.compile(
    r"^[ \t]*(#{2,3})(?!#)[ \t]*"
    r"(?:\d+\.[ \t]*)?"
    r"((?:" + GLYPH_PATTERN + r")?[^\n]*?)"
    r"[ \t]*:?[ \t]*$"
)

# A title that carries no words, e.g. "## 2. ✅"
_GLYPH_ONLY_RE = re.compile(r"^(?:" + GLYPH_PATTERN + r")?\s*$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def segment(
    text: str,
    *,
    markers: Sequence[KnownSectionMarker] = KNOWN_SECTION_MARKERS,
    junk_patterns: Sequence[JunkPattern] = JUNK_PATTERNS,
) -> list[Section]:
    """Segment a report into ordered, titled sections.

    Args:
        text: Report Markdown, usually already citation-annotated.
        markers: Ordered table-header markers used to infer blank titles.
        junk_patterns: Ordered junk signatures; a hit drops the section.

    Returns:
        Sections in first-appearance order. Empty if *text* is blank.
    """
    remaining = normalize_text(text)
    if not remaining:
        return []

    # Phase 2: preamble
    sections: list[Section] = []
    preamble, remaining = _extract_preamble(remaining)
    if preamble is not None:
        sections.append(preamble)

    # Phases 3-5: chunk and classify
    sections = _fold_chunks(split_chunks(remaining), sections, markers)

    # Phases 6-8: filtering
    return _filter_sections(sections, junk_patterns)


def normalize_text(text: str) -> str:
    """Convert line endings to ``\\n`` and trim the whole text."""
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def split_chunks(text: str) -> list[str]:
    """Split *text* before every heading line; blank chunks are discarded."""
    return [
        chunk.strip() for chunk in _CHUNK_SPLIT_RE.split(text)
        if chunk.strip()
    ]


# ---------------------------------------------------------------------------
# Internal: Phase 2 -- preamble
# ---------------------------------------------------------------------------

def _extract_preamble(text: str) -> tuple[Section | None, str]:
    """Consume the two-line generation preamble, if present."""
    m = _PREAMBLE_RE.match(text)
    if m is None:
        return None, text
    preamble = Section(
        title=REPORT_INFORMATION_TITLE,
        raw_title_line=REPORT_INFORMATION_TITLE,
        content=f"{m.group(1)}\n{m.group(2)}",
        level=0,
    )
    return preamble, text[m.end():].strip()


# ---------------------------------------------------------------------------
# Internal: Phases 3-5 -- classification
# ---------------------------------------------------------------------------

def _fold_chunks(
    chunks: Iterable[str],
    sections: list[Section],
    markers: Sequence[KnownSectionMarker],
) -> list[Section]:
    """Fold chunks into sections, carrying the current section forward.

    Orphan text (a chunk with no heading line) continues the current
    section. Before any section exists it opens a level-0 Miscellaneous one.
    """
    current = sections[-1] if sections else None
    for chunk in chunks:
        section = _classify_chunk(chunk, markers)
        if section is not None:
            sections.append(section)
            current = section
        elif current is not None:
            # current is always the tail of sections
            current = current.continued(chunk)
            sections[-1] = current
        else:
            current = Section(
                title=MISCELLANEOUS_TITLE,
                raw_title_line=MISCELLANEOUS_TITLE,
                content=chunk,
                level=0,
            )
            sections.append(current)
    return sections


def _classify_chunk(
    chunk: str,
    markers: Sequence[KnownSectionMarker],
) -> Section | None:
    """Build a Section from a chunk that opens with a heading line, else None."""
    first_line, _, rest = chunk.partition("\n")
    m = _HEADING_RE.match(first_line)
    if m is None:
        return None

    content = rest.strip()
    title = m.group(2).strip()
    if _needs_inference(title):
        title = infer_title(content, markers)

    return Section(
        title=title,
        raw_title_line=first_line.strip(),
        content=content,
        level=2 if m.group(1) == "##" else 3,
    )


def _needs_inference(title: str) -> bool:
    return (
        _GLYPH_ONLY_RE.match(title) is not None
        or title.lower() == UNTITLED_TITLE.lower()
    )


def infer_title(
    content: str,
    markers: Sequence[KnownSectionMarker] = KNOWN_SECTION_MARKERS,
) -> str:
    """Title for a blank heading, from the table header its content opens with."""
    title = match_marker_title(content.strip(), markers)
    if title is None:
        return UNTITLED_TITLE
    log.debug("Inferred section title %r from table header", title)
    return title


# ---------------------------------------------------------------------------
# Internal: Phases 6-8 -- filtering
# ---------------------------------------------------------------------------

def _filter_sections(
    sections: list[Section],
    junk_patterns: Sequence[JunkPattern],
) -> list[Section]:
    kept: list[Section] = []
    for section in sections:
        content = section.content.strip()

        junk = first_matching_pattern(content, junk_patterns)
        if junk is not None:
            log.warning(
                "Filtering section %r: content matches junk pattern (%s)",
                section.title, junk.reason,
            )
            continue

        if title_contains(section.title, (SOURCE_RELIABILITY_PHRASE,)):
            log.debug("Dropping section %r: rendered by the source sidebar", section.title)
            continue

        if not content and section.title != REPORT_INFORMATION_TITLE:
            continue

        kept.append(section)
    return kept
