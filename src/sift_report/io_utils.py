"""I/O utilities for JSON and report text files.

orjson-backed JSON load/save plus the loaders for assessment lists and
section dumps used by the command-line tools.
"""
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from sift_report.report_types import Section, SourceAssessment


def load_json(path: Path) -> Any:
    """Load JSON from a file.

    Raises:
        ValueError: if the file is not valid JSON (orjson.JSONDecodeError
            is a ValueError subclass).
    """
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 if pretty else 0
    path.write_bytes(orjson.dumps(obj, option=opts))


def read_report_text(path: Path) -> str:
    """Read a Markdown report, replacing undecodable bytes."""
    return path.read_bytes().decode("utf-8", errors="replace")


def load_assessments(path: Path) -> list[SourceAssessment]:
    """Load a JSON list of source assessments.

    Each object needs ``url`` and ``index``; ``name``, ``assessment``,
    ``notes`` and ``rating`` are optional.

    Raises:
        ValueError: on a non-list payload or an invalid entry.
    """
    payload = load_json(path)
    if not isinstance(payload, list):
        raise ValueError(f"{path}: expected a list of assessments")
    assessments: list[SourceAssessment] = []
    for i, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: assessment #{i} is not an object")
        try:
            assessments.append(SourceAssessment.from_dict(entry))
        except KeyError as exc:
            raise ValueError(f"{path}: assessment #{i} is missing {exc}") from exc
        except ValueError as exc:
            raise ValueError(f"{path}: assessment #{i}: {exc}") from exc
    return assessments


def sections_payload(sections: Iterable[Section]) -> list[dict[str, Any]]:
    """Convert sections to JSON-ready dicts, preserving order."""
    return [s.as_dict() for s in sections]
