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

"""Per-record reporting for the validation suite."""

from pathlib import Path
from typing import Any, Dict, List, Optional


class RecordReport:
    """Container for the validation outcome of a single record file."""

    def __init__(self, file_path: Path, record_id: Optional[str] = None):
        """Initialize the report.

        Args:
            file_path: Path to the record being validated
            record_id: Identifier from the project index, if known
        """
        self.file_path = file_path
        self.record_id = record_id
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    @property
    def ok(self) -> bool:
        return not self.errors

    @staticmethod
    def _entry(
        message: str,
        rule: Optional[str],
        line: Optional[int],
        column: Optional[int],
        json_path: Optional[str],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {'message': message}
        if rule is not None:
            entry['rule'] = rule
        if line is not None:
            entry['line'] = line
        if column is not None:
            entry['column'] = column
        if json_path is not None:
            entry['json_path'] = json_path
        return entry

    def add_error(
        self,
        message: str,
        rule: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        json_path: Optional[str] = None,
    ):
        """Add an error; any error means the record is rejected."""
        self.errors.append(self._entry(message, rule, line, column, json_path))

    def add_warning(
        self,
        message: str,
        rule: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        json_path: Optional[str] = None,
    ):
        """Add a warning; warnings never reject a record."""
        self.warnings.append(self._entry(message, rule, line, column, json_path))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'file': str(self.file_path)}
        if self.record_id is not None:
            out['id'] = self.record_id
        out['errors'] = self.errors
        out['warnings'] = self.warnings
        return out
