"""Citation annotation for report Markdown.

Two operations:
- ``annotate`` — append ``[N]`` after every inline link whose target is a
  known source URL.
- ``parse_source_assessments`` — recover the indexed source list from the
  report's own "Assessment of Source Reliability" table.

``annotate`` is NOT idempotent: running it twice on the same text appends a
second marker after each matched link. Annotate the raw text exactly once
per render; export the raw text, not the annotated copy.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

from sift_report.report_tables import SOURCE_RELIABILITY_PHRASE, SOURCE_TABLE_MARKER
from sift_report.report_types import SourceAssessment


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Inline link "[label](target)". Labels may be empty and hold no brackets;
# targets hold no parentheses, so a match attempt stops at the next one and
# unclosed runs stay linear. The look-behind keeps image links "![alt](src)" out.
_LINK_RE = re.compile(r"(?<!!)\[[^\[\]]*\]\(([^()]*)\)")

# First link inside a table cell
_CELL_LINK_RE = re.compile(r"\[(.*?)\]\((.*?)\)")

_HEADING_LINE_RE = re.compile(r"^[ \t]*#{2,3}(?!#)[^\n]*$", re.MULTILINE)

_SOURCE_HEADING_RE = re.compile(
    r"^[ \t]*#{2,3}(?!#)[^\n]*" + re.escape(SOURCE_RELIABILITY_PHRASE) + r"[^\n]*$",
    re.MULTILINE,
)

_SOURCE_MARKER_RE = re.compile(
    r"^[ \t]*" + re.escape(SOURCE_TABLE_MARKER), re.MULTILINE,
)


# ---------------------------------------------------------------------------
# Annotation
# ---------------------------------------------------------------------------

def build_url_index(assessments: Sequence[SourceAssessment]) -> dict[str, int]:
    """Map trimmed source URL -> citation index.

    Assessments with a blank URL are skipped. On duplicate URLs the later
    assessment wins.
    """
    url_to_index: dict[str, int] = {}
    for a in assessments:
        url = a.url.strip()
        if url:
            url_to_index[url] = a.index
    return url_to_index


def annotate(text: str, assessments: Sequence[SourceAssessment]) -> str:
    """Append a ``[N]`` citation marker after each link to a known source.

    Links whose target is unknown, and all image links, are left
    byte-for-byte untouched. Output is never shorter than the input.

    Args:
        text: Raw report Markdown.
        assessments: Known sources; index N is taken from the matching entry.

    Returns:
        The annotated text, or *text* itself when there is nothing to match.
    """
    if not assessments:
        return text

    url_to_index = build_url_index(assessments)
    if not url_to_index:
        return text

    def _mark(m: re.Match[str]) -> str:
        index = url_to_index.get(m.group(1).strip())
        if index is None:
            return m.group(0)
        return f"{m.group(0)}[{index}]"

    return _LINK_RE.sub(_mark, text)


# ---------------------------------------------------------------------------
# Source table parsing
# ---------------------------------------------------------------------------

def _source_table_block(text: str) -> str | None:
    """Return the text of the source-reliability section, heading excluded.

    Falls back to the bare table (located by its header marker) when the
    model left the section heading blank.
    """
    m = _SOURCE_HEADING_RE.search(text)
    if m is not None:
        start = m.end()
    else:
        marker = _SOURCE_MARKER_RE.search(text)
        if marker is None:
            return None
        start = marker.start()

    next_heading = _HEADING_LINE_RE.search(text, start + 1)
    end = next_heading.start() if next_heading is not None else len(text)
    return text[start:end]


def parse_source_assessments(text: str) -> list[SourceAssessment]:
    """Extract indexed source assessments from a report's source table.

    Table rows are ``| [name](url) | assessment | notes | rating |``. The
    header and separator rows are skipped, rows with fewer than four
    columns or without a link in the first column are ignored, and bold
    markers are stripped from the name. Indices run 1..N in table order.

    Returns:
        The assessments, or an empty list if the report has no source table.
    """
    block = _source_table_block(text.replace("\r\n", "\n"))
    if block is None:
        return []

    rows = [
        line.strip() for line in block.split("\n")
        if line.strip().startswith("|") and line.strip().endswith("|")
    ]

    assessments: list[SourceAssessment] = []
    # rows[0] is the header, rows[1] the |---| separator
    for row in rows[2:]:
        columns = [col.strip() for col in row.split("|")[1:-1]]
        if len(columns) < 4:
            continue
        link = _CELL_LINK_RE.search(columns[0])
        if link is None:
            continue
        name = link.group(1).replace("**", "").strip()
        url = link.group(2).strip()
        if not name or not url:
            continue
        assessments.append(SourceAssessment(
            url=url,
            index=len(assessments) + 1,
            name=name,
            assessment=columns[1],
            notes=columns[2],
            rating=columns[3],
        ))
    return assessments
