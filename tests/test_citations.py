"""Tests for sift_report.citations module."""
import time

import pytest

from sift_report.citations import annotate, build_url_index, parse_source_assessments
from sift_report.report_types import SourceAssessment


BBC = "https://bbc.com/news/a"
AP = "https://apnews.com/b"

ASSESSMENTS = [
    SourceAssessment(url=BBC, index=2),
    SourceAssessment(url=AP, index=7),
]


class TestBuildUrlIndex:
    def test_maps_url_to_index(self) -> None:
        assert build_url_index(ASSESSMENTS) == {BBC: 2, AP: 7}

    def test_trims_urls(self) -> None:
        index = build_url_index([SourceAssessment(url=f"  {BBC} ", index=1)])
        assert index == {BBC: 1}

    def test_skips_blank_urls(self) -> None:
        assert build_url_index([SourceAssessment(url="  ", index=1)]) == {}

    def test_duplicate_url_last_wins(self) -> None:
        index = build_url_index([
            SourceAssessment(url=BBC, index=1),
            SourceAssessment(url=BBC, index=4),
        ])
        assert index == {BBC: 4}


class TestAnnotate:
    def test_no_assessments_returns_input(self) -> None:
        text = f"See [BBC]({BBC})."
        assert annotate(text, []) is text

    def test_text_without_links_unchanged(self) -> None:
        text = "No links here, just [brackets] and (parens)."
        assert annotate(text, ASSESSMENTS) == text

    def test_known_link_gets_marker(self) -> None:
        text = f"See [BBC]({BBC}) for details."
        assert annotate(text, ASSESSMENTS) == f"See [BBC]({BBC})[2] for details."

    def test_unknown_link_untouched(self) -> None:
        text = "See [Other](https://example.org/x)."
        assert annotate(text, ASSESSMENTS) == text

    def test_image_link_untouched(self) -> None:
        text = f"![chart]({BBC})"
        assert annotate(text, ASSESSMENTS) == text

    def test_image_next_to_link(self) -> None:
        text = f"![chart]({BBC}) and [AP]({AP})"
        assert annotate(text, ASSESSMENTS) == f"![chart]({BBC}) and [AP]({AP})[7]"

    def test_empty_label(self) -> None:
        assert annotate(f"[]({BBC})", ASSESSMENTS) == f"[]({BBC})[2]"

    def test_target_whitespace_trimmed_for_lookup(self) -> None:
        text = f"[BBC]( {BBC} )"
        assert annotate(text, ASSESSMENTS) == f"[BBC]( {BBC} )[2]"

    def test_multiple_links(self) -> None:
        text = f"[a]({BBC}), [b]({AP}), [c](https://x.y)"
        assert annotate(text, ASSESSMENTS) == (
            f"[a]({BBC})[2], [b]({AP})[7], [c](https://x.y)"
        )

    def test_link_inside_table_cell(self) -> None:
        text = f"| [Reuters]({AP}) | High |"
        assert annotate(text, ASSESSMENTS) == f"| [Reuters]({AP})[7] | High |"

    def test_only_appends_characters(self) -> None:
        text = f"Intro [BBC]({BBC}) middle [AP]({AP}) end"
        result = annotate(text, ASSESSMENTS)
        assert len(result) >= len(text)
        assert result.replace("[2]", "").replace("[7]", "") == text

    def test_all_blank_urls_returns_input(self) -> None:
        text = f"[BBC]({BBC})"
        assert annotate(text, [SourceAssessment(url="", index=1)]) == text

    def test_not_idempotent(self) -> None:
        text = f"[BBC]({BBC})"
        once = annotate(text, ASSESSMENTS)
        twice = annotate(once, ASSESSMENTS)
        assert once == f"[BBC]({BBC})[2]"
        assert twice == f"[BBC]({BBC})[2][2]"

    def test_stray_open_bracket_before_link(self) -> None:
        text = f"[a [b]({BBC})"
        assert annotate(text, ASSESSMENTS) == f"[a [b]({BBC})[2]"

    @pytest.mark.parametrize("unit", ["[", "[](", "[x]("])
    def test_unclosed_runs_stay_fast(self, unit: str) -> None:
        text = unit * 200_000
        start = time.perf_counter()
        assert annotate(text, ASSESSMENTS) == text
        assert time.perf_counter() - start < 2.0


REPORT_WITH_SOURCES = f"""## 4. 📌 Potential Leads
| Statement | Plausibility | Path for Investigation |
|---|---|---|
| [Ignored](https://leads.example) | low | n/a |

## 5. 🔴 Assessment of Source Reliability:
| Source | Usefulness Assessment | Notes | Rating (1-5) |
|---|---|---|---|
| [**Reuters**](https://reuters.com/x) | High | Wire service | 5 |
| [AP News]({AP}) | Medium | Syndicated | 4 |
| No link here | Low | n/a | 1 |
| [Short](https://short.example) | too few |

## 6. Revised Summary
| [Not a source](https://n.example) | a | b | c |
"""


class TestParseSourceAssessments:
    def test_rows_in_order(self) -> None:
        assessments = parse_source_assessments(REPORT_WITH_SOURCES)
        assert [a.url for a in assessments] == ["https://reuters.com/x", AP]
        assert [a.index for a in assessments] == [1, 2]

    def test_columns(self) -> None:
        first = parse_source_assessments(REPORT_WITH_SOURCES)[0]
        assert first.name == "Reuters"
        assert first.assessment == "High"
        assert first.notes == "Wire service"
        assert first.rating == "5"

    def test_blank_heading_falls_back_to_marker(self) -> None:
        text = (
            "## 5.\n| Source | Usefulness Assessment | Notes | Rating (1-5) |\n"
            "|---|---|---|---|\n| [BBC](https://bbc.com/z) | High | ok | 5 |"
        )
        assessments = parse_source_assessments(text)
        assert len(assessments) == 1
        assert assessments[0].name == "BBC"

    def test_no_source_section(self) -> None:
        assert parse_source_assessments("## A\ntext") == []

    def test_empty_text(self) -> None:
        assert parse_source_assessments("") == []

    def test_feeds_annotate(self) -> None:
        assessments = parse_source_assessments(REPORT_WITH_SOURCES)
        annotated = annotate(f"Per [AP]({AP}).", assessments)
        assert annotated == f"Per [AP]({AP})[2]."
