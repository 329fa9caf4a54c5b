from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


SourceMap = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    json_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(source_map: Optional[SourceMap], json_path: Optional[str]) -> SourceLocation:
    """Find the line/column of *json_path*, falling back to the closest ancestor.

    A missing field has no location of its own; its parent object does.
    """
    if not source_map or json_path is None:
        return SourceLocation(json_path=json_path)

    candidate = json_path
    while True:
        entry = source_map.get(candidate)
        if entry:
            return SourceLocation(json_path=json_path, line=entry.get("line"), column=entry.get("column"))
        if not candidate:
            return SourceLocation(json_path=json_path)
        candidate = candidate.rsplit("/", 1)[0]


def _format_file_path(path: Path, root: Optional[Path]) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def format_source(loc: Optional[SourceLocation], root: Optional[Path] = None) -> str:
    if not loc:
        return ""

    parts = []
    if loc.file_path is not None:
        file_path = _format_file_path(loc.file_path, root)
        if loc.line is not None and loc.column is not None:
            parts.append(f"source= {file_path}:{loc.line}:{loc.column} ")
        elif loc.line is not None:
            parts.append(f"source= {file_path}:{loc.line} ")
        else:
            parts.append(f"source= {file_path} ")

    if loc.json_path:
        parts.append(f"json_path={loc.json_path}")

    if not parts:
        return ""

    return " (" + " ".join(parts) + ")"
