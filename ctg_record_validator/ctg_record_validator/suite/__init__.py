# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Validation suite over a set of record files."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from ..exceptions import RecordValidatorError
from ..file_io.record_loader import RecordLoader, record_loader
from ..file_io.source_location import SourceLocation, SourceMap, format_source, lookup_source
from ..schema.specs import ObjectSpec, Rule
from ..schema.template import fill_record_template
from ..schema.validation import validate_against_schema
from ..utils.format_version import check_schema_version
from .report import RecordReport

__all__ = ['validate_files', 'validate_record_file', 'check_template', 'RecordReport']

logger = logging.getLogger(__name__)


def _report_record(
    data: Any,
    source_map: Optional[SourceMap],
    schema: ObjectSpec,
    report: RecordReport,
) -> None:
    result = validate_against_schema(data, schema)
    for issue in result.issues:
        loc = lookup_source(source_map, issue.pointer)
        src = SourceLocation(file_path=report.file_path, json_path=loc.json_path, line=loc.line, column=loc.column)
        report.add_error(
            f"{issue.message}{format_source(src)}",
            rule=issue.rule,
            line=loc.line,
            column=loc.column,
            json_path=loc.json_path,
        )
        if issue.rule == Rule.LITERAL_MISMATCH and issue.path == ("schema_version",):
            report.add_warning(
                check_schema_version(issue.value).message,
                line=loc.line,
                column=loc.column,
                json_path=loc.json_path,
            )

    if result.ok:
        logger.debug(f"Accepted {report.file_path}")
    else:
        details = "\n".join(f"  - [{e['rule']}] {e['message']}" for e in report.errors)
        logger.warning(f"Rejected {report.file_path} with {len(report.errors)} issue(s):\n{details}")


def validate_record_file(
    file_path: Path,
    schema: ObjectSpec,
    *,
    record_id: Optional[str] = None,
    loader: Optional[RecordLoader] = None,
) -> RecordReport:
    """Load one record file and validate it; never raises for bad records."""
    loader = loader or record_loader
    report = RecordReport(Path(file_path), record_id=record_id)
    try:
        data, source_map = loader.load_record_with_source(file_path)
    except RecordValidatorError as e:
        logger.error(str(e))
        report.add_error(str(e))
        return report

    _report_record(data, source_map, schema, report)
    return report


def validate_files(
    file_paths: Sequence[Any],
    schema: ObjectSpec,
    *,
    jobs: int = 1,
    loader: Optional[RecordLoader] = None,
) -> List[RecordReport]:
    """Validate record files, one report per file in input order.

    Args:
        file_paths: Paths, or (record_id, path) pairs from the project index
        schema: Record descriptor tree (shared read-only across workers)
        jobs: Number of worker threads
        loader: Record loader to use (default: shared loader)

    Returns:
        List of RecordReport objects
    """
    items: List[Tuple[Optional[str], Path]] = []
    for entry in file_paths:
        if isinstance(entry, tuple):
            items.append((entry[0], Path(entry[1])))
        else:
            items.append((None, Path(entry)))

    def _run(item: Tuple[Optional[str], Path]) -> RecordReport:
        record_id, path = item
        try:
            return validate_record_file(path, schema, record_id=record_id, loader=loader)
        except Exception as e:
            # One broken record must not stop the batch.
            logger.exception(f"Unexpected error while validating {path}")
            report = RecordReport(path, record_id=record_id)
            report.add_error(f"Unexpected error during validation: {str(e)}")
            return report

    if jobs <= 1 or len(items) <= 1:
        return [_run(item) for item in items]

    with ThreadPoolExecutor(max_workers=jobs) as pool:
        return list(pool.map(_run, items))


def check_template(
    template_path: Path,
    schema: ObjectSpec,
    *,
    loader: Optional[RecordLoader] = None,
    created_by: str = "",
) -> RecordReport:
    """Fill the blank record template and check that it validates.

    The template ships without uuid, creation date and entity type; those are
    filled in before validation, exactly as an editor would when starting a
    new record.
    """
    loader = loader or record_loader
    report = RecordReport(Path(template_path), record_id="template")
    try:
        template = loader.load_record(template_path)
    except RecordValidatorError as e:
        logger.error(str(e))
        report.add_error(str(e))
        return report

    if not isinstance(template, dict):
        report.add_error("Record template must be a JSON object", rule=Rule.TYPE_MISMATCH, json_path="")
        return report

    _report_record(fill_record_template(template, created_by=created_by), None, schema, report)
    return report
