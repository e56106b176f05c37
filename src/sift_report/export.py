"""Markdown export document for a report message.

The export always carries the *unannotated* report text: citation markers
are a display aid and are not written to files.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from sift_report.report_types import GroundingSource, ReportType

EXPORT_TITLE = "# SIFT Report Export"
CACHE_NOTE = "**Note:** This report was loaded from local cache."


@dataclass(frozen=True, slots=True)
class ExportMetadata:
    generated_at: datetime
    report_type: ReportType
    model_id: str | None = None
    from_cache: bool = False
    grounding_sources: tuple[GroundingSource, ...] = field(default_factory=tuple)


def _grounding_block(sources: tuple[GroundingSource, ...]) -> str:
    items = [
        f"  - [{s.title or s.uri}]({s.uri})"
        for s in sources if s.uri
    ]
    if not items:
        return "**Grounding Sources:** N/A"
    return "**Grounding Sources:**\n" + "\n".join(items)


def build_export_document(text: str, metadata: ExportMetadata) -> str:
    """Prefix the raw report text with a metadata header.

    Args:
        text: The original report text, NOT the annotated copy.
        metadata: Generation details shown in the header.
    """
    lines = [
        EXPORT_TITLE,
        "",
        f"**Generated:** {metadata.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Report Type:** {metadata.report_type.value}",
        f"**Model Used:** {metadata.model_id or 'N/A'}",
    ]
    if metadata.from_cache:
        lines.append(CACHE_NOTE)
    lines.append(_grounding_block(metadata.grounding_sources))
    lines.append("---")
    header = "\n".join(lines) + "\n\n"
    return header + text


def export_filename(report_type: ReportType, generated_at: datetime) -> str:
    """File name like ``SIFT_Report_Full_Check_2024-01-31.md``."""
    type_label = re.sub(r"\s+", "_", report_type.value)
    return f"SIFT_Report_{type_label}_{generated_at.strftime('%Y-%m-%d')}.md"
