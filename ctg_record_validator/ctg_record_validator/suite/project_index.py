"""Project index reader.

The dataset keeps one index file mapping each record id to the directory that
holds it::

    {"3f2a...": {"path": "/projects/mena/"}}

so the record lives at ``<root>/projects/mena/3f2a....json``.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import RecordLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexEntry:
    record_id: str
    file_path: Path


def load_project_index(index_path: Union[str, Path], data_root: Optional[Union[str, Path]] = None) -> List[IndexEntry]:
    """Read the project index and resolve the file of every record.

    Args:
        index_path: Path to the index JSON file
        data_root: Directory the index paths are relative to (default: the index's directory)

    Raises:
        RecordLoadError: If the index cannot be read or has an unexpected shape
    """
    path = Path(index_path)
    root = Path(data_root) if data_root is not None else path.parent

    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RecordLoadError(f"Project index not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise RecordLoadError(f"Failed to read project index {path}: {exc}") from exc

    if not isinstance(content, dict):
        raise RecordLoadError(f"Project index must be an object of record id to details: {path}")

    entries: List[IndexEntry] = []
    for record_id, details in content.items():
        rel_dir = details.get("path") if isinstance(details, dict) else None
        if not isinstance(rel_dir, str):
            raise RecordLoadError(f"Index entry '{record_id}' has no 'path' string: {path}")
        entries.append(IndexEntry(record_id=record_id, file_path=root / rel_dir.strip("/") / f"{record_id}.json"))

    logger.info(f"Project index lists {len(entries)} record(s): {path}")
    return entries
