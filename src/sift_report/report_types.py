"""Core types for the report rendering pipeline.

Every stage shares these types. All dataclasses use slots=True and all
are frozen: the built-in tables are module-level constants and rendered
sections live in a process-wide cache.

Type hierarchy:
  ReportType         — Kind of report a message carries (only Full Check is sectioned)
  Section            — Titled unit of a segmented report
  SourceAssessment   — Known information source (url -> citation index)
  GroundingSource    — Web grounding chunk listed in exports
  KnownSectionMarker — Table-header prefix that implies a canonical title
  JunkPattern        — Content signature of generator hallucination
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

# Levels a Section may carry: 0 = preamble / orphan text, 2 = "##", 3 = "###"
SECTION_LEVELS: frozenset[int] = frozenset({0, 2, 3})


class ReportType(Enum):
    FULL_CHECK = "Full Check"
    CONTEXT_REPORT = "Context Report"
    COMMUNITY_NOTE = "Community Note"

    @classmethod
    def parse(cls, value: str) -> ReportType:
        """Resolve a report type from its label ("Full Check") or name ("FULL_CHECK")."""
        cleaned = value.strip()
        for member in cls:
            if cleaned.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown report type: {value!r}")


# ---------------------------------------------------------------------------
# Section — segmenter output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    """A titled unit of a segmented report.

    Frozen: rendered sections are memoized and shared between callers.
    Continuation text yields a new Section via ``continued``.

    Invariants (enforced in __post_init__):
        - level in {0, 2, 3}
    """
    title: str
    raw_title_line: str  # Heading line as matched, or a synthetic label
    content: str         # Markdown body, heading line excluded
    level: int

    def __post_init__(self) -> None:
        if self.level not in SECTION_LEVELS:
            raise ValueError(
                f"Section.level must be one of {sorted(SECTION_LEVELS)}, got {self.level}"
            )

    def continued(self, text: str) -> Section:
        """Copy of this section with orphan *text* appended to its content."""
        return replace(self, content=f"{self.content}\n\n{text}")

    def as_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "raw_title_line": self.raw_title_line,
            "content": self.content,
            "level": self.level,
        }


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SourceAssessment:
    """A source the report assessed, with the citation index shown in the UI.

    Only ``url`` and ``index`` take part in citation annotation; the other
    columns mirror the report's source-reliability table.

    Invariants (enforced in __post_init__):
        - index >= 1
    """
    url: str
    index: int
    name: str = ""
    assessment: str = ""
    notes: str = ""
    rating: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise ValueError(
                f"SourceAssessment.index must be an int, got {type(self.index).__name__}"
            )
        if self.index < 1:
            raise ValueError(
                f"SourceAssessment.index must be >= 1, got {self.index}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceAssessment:
        """Build from a JSON object; ``url`` and ``index`` are required."""
        return cls(
            url=str(data["url"]),
            index=data["index"],
            name=str(data.get("name", "")),
            assessment=str(data.get("assessment", "")),
            notes=str(data.get("notes", "")),
            rating=str(data.get("rating", "")),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "index": self.index,
            "name": self.name,
            "assessment": self.assessment,
            "notes": self.notes,
            "rating": self.rating,
        }


@dataclass(frozen=True, slots=True)
class GroundingSource:
    """A web grounding chunk returned alongside a report."""
    uri: str
    title: str = ""


# ---------------------------------------------------------------------------
# Configuration-table entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class KnownSectionMarker:
    """Table-header prefix that identifies a section when its heading is blank."""
    marker: str  # Exact leading substring of the section content
    title: str   # Canonical title to assign

    def __post_init__(self) -> None:
        if not self.marker:
            raise ValueError("KnownSectionMarker.marker must be non-empty")
        if not self.title:
            raise ValueError("KnownSectionMarker.title must be non-empty")

    def matches(self, content: str) -> bool:
        return content.startswith(self.marker)


@dataclass(frozen=True, slots=True)
class JunkPattern:
    """Signature of unrelated generator output (code scaffolds, broken tables)."""
    pattern: re.Pattern[str]
    reason: str

    def matches(self, content: str) -> bool:
        return self.pattern.search(content) is not None
