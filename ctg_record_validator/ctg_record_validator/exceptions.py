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

"""Custom exceptions for the record validator."""


class RecordValidatorError(Exception):
    """Base exception for record-validator related errors."""
    pass


class RecordValidationError(RecordValidatorError):
    """Exception raised when a record is rejected by its schema.

    Carries every issue found, not only the first one.
    """

    def __init__(self, issues, message: str = None):
        self.issues = list(issues)
        if message is None:
            lines = [f"  - {i.pointer or '/'}: {i.message}" for i in self.issues]
            message = f"Record rejected with {len(self.issues)} issue(s):\n" + "\n".join(lines)
        super().__init__(message)


class VocabularyError(RecordValidatorError):
    """Exception raised when the keyword vocabulary cannot be used."""
    pass


class RecordLoadError(RecordValidatorError):
    """Exception raised when a record or index file cannot be read."""
    pass


class SchemaVersionError(RecordValidatorError):
    """Exception raised when a schema version string cannot be parsed."""
    pass
