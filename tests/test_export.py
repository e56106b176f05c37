"""Tests for sift_report.export module."""
from datetime import datetime

from sift_report.citations import annotate
from sift_report.export import ExportMetadata, build_export_document, export_filename
from sift_report.report_types import GroundingSource, ReportType, SourceAssessment


WHEN = datetime(2024, 1, 31, 14, 5, 9)


class TestBuildExportDocument:
    def test_minimal_header(self) -> None:
        meta = ExportMetadata(generated_at=WHEN, report_type=ReportType.FULL_CHECK)
        assert build_export_document("BODY", meta) == (
            "# SIFT Report Export\n\n"
            "**Generated:** 2024-01-31 14:05:09\n"
            "**Report Type:** Full Check\n"
            "**Model Used:** N/A\n"
            "**Grounding Sources:** N/A\n"
            "---\n\n"
            "BODY"
        )

    def test_full_header(self) -> None:
        meta = ExportMetadata(
            generated_at=WHEN,
            report_type=ReportType.COMMUNITY_NOTE,
            model_id="gemini-2.5-pro",
            from_cache=True,
            grounding_sources=(
                GroundingSource(uri="https://a.example", title="A"),
                GroundingSource(uri="https://b.example"),
                GroundingSource(uri="", title="no uri"),
            ),
        )
        doc = build_export_document("BODY", meta)
        assert "**Model Used:** gemini-2.5-pro\n" in doc
        assert "**Note:** This report was loaded from local cache.\n" in doc
        assert (
            "**Grounding Sources:**\n"
            "  - [A](https://a.example)\n"
            "  - [https://b.example](https://b.example)\n"
            "---\n\nBODY"
        ) in doc
        assert "no uri" not in doc

    def test_exports_unannotated_text(self) -> None:
        raw = "See [A](https://a.example)."
        assessments = [SourceAssessment(url="https://a.example", index=1)]
        annotated = annotate(raw, assessments)
        meta = ExportMetadata(generated_at=WHEN, report_type=ReportType.FULL_CHECK)
        doc = build_export_document(raw, meta)
        assert doc.endswith(raw)
        assert annotated not in doc


class TestExportFilename:
    def test_full_check(self) -> None:
        assert export_filename(ReportType.FULL_CHECK, WHEN) == "SIFT_Report_Full_Check_2024-01-31.md"

    def test_multi_word_type(self) -> None:
        assert export_filename(ReportType.COMMUNITY_NOTE, WHEN) == (
            "SIFT_Report_Community_Note_2024-01-31.md"
        )
