#!/usr/bin/env python3
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

"""CLI entry point for validating project record files."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import SCHEMA_VERSION
from ..config import ValidatorConfig
from ..exceptions import RecordLoadError, VocabularyError
from ..file_io.record_loader import RecordLoader
from ..schema.json_schema_export import check_json_schema, to_json_schema
from ..schema.project_record import build_project_schema
from ..schema.template import build_record_template
from ..schema.vocabulary import load_keyword_vocabulary
from . import RecordReport, check_template, validate_files
from .project_index import load_project_index

logger = logging.getLogger(__name__)


def find_record_files(paths: List[str]) -> List[Path]:
    """Find all record JSON files in given paths."""
    record_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            if path.suffix == '.json':
                record_files.append(path)
            else:
                logger.warning(f"File is not a JSON record: {path}")
        elif path.is_dir():
            record_files.extend(path.rglob('*.json'))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(record_files))


def _write_json(path: Path, content) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(content, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info(f"Wrote {path}")


def print_reports(reports: List[RecordReport], output_format: str) -> None:
    """Print reports in the requested format."""
    if output_format == 'json':
        output = {
            'schema_version': SCHEMA_VERSION,
            'records': len(reports),
            'rejected': sum(1 for r in reports if not r.ok),
            'errors': sum(len(r.errors) for r in reports),
            'warnings': sum(len(r.warnings) for r in reports),
            'results': [r.to_dict() for r in reports],
        }
        print(json.dumps(output, indent=2, default=str))
    elif output_format == 'github-actions':
        for report in reports:
            for error in report.errors:
                print(f"::error file={report.file_path},line={error.get('line', 1)}::{error['message']}")
            for warning in report.warnings:
                print(f"::warning file={report.file_path},line={warning.get('line', 1)}::{warning['message']}")
    else:  # human-readable
        for report in reports:
            if report.errors or report.warnings:
                print(f"\n{report.file_path}:")
                for error in report.errors:
                    line_info = f":{error['line']}" if 'line' in error else ""
                    rule = f" [{error['rule']}]" if 'rule' in error else ""
                    print(f"  ERROR{line_info}{rule}: {error['message']}")
                for warning in report.warnings:
                    line_info = f":{warning['line']}" if 'line' in warning else ""
                    print(f"  WARNING{line_info}: {warning['message']}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f'Validate project record files against schema {SCHEMA_VERSION}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        help='Record files or directories to validate',
    )
    parser.add_argument(
        '--data-root',
        help='Dataset checkout that relative paths resolve against (env: CTG_VALIDATOR_DATA_ROOT)',
    )
    parser.add_argument(
        '--keywords',
        help='Keyword vocabulary file (default: KEYWORDS/KEYWORDS.json under the data root)',
    )
    parser.add_argument(
        '--index',
        nargs='?',
        const='',
        default=None,
        help='Validate every record listed in the project index (default: PROJECTS.json under the data root)',
    )
    parser.add_argument(
        '--template',
        nargs='?',
        const='',
        default=None,
        help='Fill and validate the blank record template (default: TEMPLATES/project.json under the data root)',
    )
    parser.add_argument(
        '--jobs',
        type=int,
        default=None,
        help='Number of worker threads (default: 1)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument(
        '--export-json-schema',
        metavar='FILE',
        help='Write the record schema as JSON Schema to FILE',
    )
    parser.add_argument(
        '--write-template',
        metavar='FILE',
        help='Write a blank record template to FILE',
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the validation CLI."""
    args = build_parser().parse_args(argv)

    config = ValidatorConfig.from_env()
    if args.data_root:
        config.data_root = args.data_root
    if args.keywords:
        config.keywords_file = args.keywords
    if args.index:
        config.index_file = args.index
    if args.template:
        config.template_file = args.template
    if args.jobs is not None:
        config.jobs = max(1, args.jobs)
    config.set_logging(machine_output=args.format != 'human')

    # The vocabulary is checked once, before any record is looked at.
    try:
        vocabulary = load_keyword_vocabulary(config.keywords_path)
    except VocabularyError as e:
        logger.error(str(e))
        sys.exit(2)

    schema = build_project_schema(vocabulary)

    did_export = False
    if args.export_json_schema:
        json_schema = to_json_schema(schema, title=f"Project record (schema {SCHEMA_VERSION})")
        check_json_schema(json_schema)
        _write_json(Path(args.export_json_schema), json_schema)
        did_export = True
    if args.write_template:
        _write_json(Path(args.write_template), build_record_template(schema))
        did_export = True

    targets: list = list(find_record_files(args.paths))
    if args.index is not None:
        try:
            entries = load_project_index(config.index_path, data_root=Path(config.data_root))
        except RecordLoadError as e:
            logger.error(str(e))
            sys.exit(2)
        targets.extend((entry.record_id, entry.file_path) for entry in entries)

    loader = RecordLoader(cache_enabled=config.cache_enabled)
    reports: List[RecordReport] = []
    if args.template is not None:
        reports.append(check_template(config.template_path, schema, loader=loader))

    if not targets and not reports:
        if did_export:
            sys.exit(0)
        print("No record files found.", file=sys.stderr)
        sys.exit(1)

    reports.extend(validate_files(targets, schema, jobs=config.jobs, loader=loader))
    print_reports(reports, args.format)

    # Exit with error code if any record was rejected
    rejected = sum(1 for r in reports if not r.ok)
    if rejected > 0:
        if args.format == 'human':
            print(f"\n{rejected} of {len(reports)} record(s) rejected.")
        sys.exit(1)
    if args.format == 'human':
        print(f"All {len(reports)} record(s) accepted.")
    sys.exit(0)


if __name__ == '__main__':
    main()
