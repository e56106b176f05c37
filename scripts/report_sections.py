#!/usr/bin/env python3
"""Segment a generated report and annotate its citations.

Reads a Markdown report, annotates links to known sources with ``[N]``,
segments Full Check reports into titled sections, and prints the result
as JSON. Optionally writes the Markdown export document.

Usage:
    # Sections + annotated text, sources parsed from the report itself
    python3 scripts/report_sections.py report.md --parse-sources

    # Known sources from a JSON list, extra title markers from a table
    python3 scripts/report_sections.py report.md \
      --assessments sources.json --markers markers.json

    # Context report (not sectioned) plus an export file
    python3 scripts/report_sections.py report.md --report-type "Context Report" \
      --export out/ --model-id gemini-2.5-pro
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import NoReturn

import orjson

from sift_report.citations import parse_source_assessments
from sift_report.export import ExportMetadata, build_export_document, export_filename
from sift_report.io_utils import load_assessments, read_report_text, sections_payload
from sift_report.report_tables import KNOWN_SECTION_MARKERS, load_marker_table
from sift_report.report_types import GroundingSource, ReportType, SourceAssessment
from sift_report.rendering import default_section_index, render_report

log = logging.getLogger("report_sections")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Segment a generated report and annotate its citations."
    )
    parser.add_argument("report", type=Path, help="Path to the report Markdown")
    sources = parser.add_mutually_exclusive_group()
    sources.add_argument(
        "--assessments",
        type=Path,
        default=None,
        help="JSON list of {url, index, ...} source assessments.",
    )
    sources.add_argument(
        "--parse-sources",
        action="store_true",
        help="Take sources from the report's source-reliability table.",
    )
    parser.add_argument(
        "--report-type",
        default=ReportType.FULL_CHECK.value,
        help="Report type label (default: 'Full Check'). Only Full Check is sectioned.",
    )
    parser.add_argument(
        "--markers",
        type=Path,
        default=None,
        help="JSON marker table appended to the built-in title markers.",
    )
    parser.add_argument(
        "--export",
        type=Path,
        default=None,
        help="Directory to write the Markdown export document into.",
    )
    parser.add_argument("--model-id", default=None, help="Model identifier for the export header")
    parser.add_argument(
        "--from-cache",
        action="store_true",
        help="Mark the export as loaded from cache.",
    )
    parser.add_argument(
        "--grounding-source",
        action="append",
        default=[],
        metavar="URI",
        help="Grounding source URI listed in the export header (repeatable).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.report.exists():
        _fail(f"report not found: {args.report}")

    try:
        report_type = ReportType.parse(args.report_type)
    except ValueError as exc:
        _fail(str(exc))

    assessments: list[SourceAssessment] = []
    markers = KNOWN_SECTION_MARKERS
    try:
        text = read_report_text(args.report)
        if args.assessments is not None:
            assessments = load_assessments(args.assessments)
        elif args.parse_sources:
            assessments = parse_source_assessments(text)
        if args.markers is not None:
            markers = KNOWN_SECTION_MARKERS + load_marker_table(args.markers)
    except (OSError, ValueError) as exc:
        _fail(str(exc))

    log.info("Loaded %d source assessments, %d title markers", len(assessments), len(markers))

    rendered = render_report(text, assessments, report_type, markers=markers)
    if report_type is ReportType.FULL_CHECK and not rendered.structured:
        log.info("No sections recovered; falling back to plain rendering")

    if args.export is not None:
        generated_at = datetime.now()
        metadata = ExportMetadata(
            generated_at=generated_at,
            report_type=report_type,
            model_id=args.model_id,
            from_cache=args.from_cache,
            grounding_sources=tuple(GroundingSource(uri=u) for u in args.grounding_source),
        )
        out_path = args.export / export_filename(report_type, generated_at)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(build_export_document(text, metadata), encoding="utf-8")
        log.info("Wrote export to %s", out_path)

    dump_json({
        "report_type": report_type.value,
        "structured": rendered.structured,
        "annotated_text": rendered.annotated_text,
        "sections": sections_payload(rendered.sections),
        "default_section_index": default_section_index(rendered.sections),
        "assessments": [a.as_dict() for a in assessments],
    })


if __name__ == "__main__":
    main()
