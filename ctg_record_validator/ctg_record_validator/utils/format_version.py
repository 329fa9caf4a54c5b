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

"""Schema version utilities for project records.

The ``schema_version`` field of a record declares which schema release it was
written for (e.g. ``0.1.8``). Validation accepts only the exact pinned
release; this module only explains a mismatch (older or newer record).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from .. import SCHEMA_VERSION
from ..exceptions import SchemaVersionError


# ---- version string → tuple ------------------------------------------------

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A parsed semantic version (major, minor, patch)."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_schema_version(raw: Any) -> SemanticVersion:
    """Parse a version string like ``0.1.8`` (with or without 'v' prefix).

    Raises:
        SchemaVersionError: If the value cannot be parsed.
    """
    if not isinstance(raw, str):
        raise SchemaVersionError(
            f"Schema version must be a string, got {type(raw).__name__}: {raw!r}"
        )

    m = _VERSION_RE.match(raw.strip())
    if m is None:
        raise SchemaVersionError(
            f"Invalid schema version string: '{raw}'. "
            "Expected 'MAJOR.MINOR.PATCH' (e.g. '0.1.8')."
        )
    return SemanticVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def get_supported_schema_version() -> SemanticVersion:
    return parse_schema_version(SCHEMA_VERSION)


# ---- comparison -------------------------------------------------------------


@dataclass(frozen=True)
class VersionCheckResult:
    """Result of comparing a record's schema version with the pinned one."""

    compatible: bool
    message: str
    record_version: Optional[SemanticVersion] = None
    supported_version: Optional[SemanticVersion] = None
    older: bool = False
    newer: bool = False


def check_schema_version(raw_version: Any) -> VersionCheckResult:
    """Compare *raw_version* with :data:`SCHEMA_VERSION`.

    Only an exact match is compatible. For parsable mismatches the result
    tells whether the record predates or postdates the supported release,
    so the reader knows whether to migrate the record or upgrade the tool.
    """
    supported = get_supported_schema_version()

    if raw_version is None:
        return VersionCheckResult(
            compatible=False,
            message=f"Missing 'schema_version' field. Records must declare 'schema_version: {supported}'.",
            supported_version=supported,
        )

    if raw_version == SCHEMA_VERSION:
        return VersionCheckResult(
            compatible=True,
            message=f"Schema version {supported} matches the supported version.",
            record_version=supported,
            supported_version=supported,
        )

    try:
        record_ver = parse_schema_version(raw_version)
    except SchemaVersionError as exc:
        return VersionCheckResult(compatible=False, message=str(exc), supported_version=supported)

    if record_ver == supported:
        # Same release written differently, e.g. "v0.1.8" or " 0.1.8 ".
        return VersionCheckResult(
            compatible=False,
            message=f"'{raw_version}' is not the exact pinned string '{SCHEMA_VERSION}'.",
            record_version=record_ver,
            supported_version=supported,
        )

    if record_ver < supported:
        return VersionCheckResult(
            compatible=False,
            older=True,
            message=(
                f"Record was written for schema {record_ver}, older than the supported {supported}. "
                f"Migrate the record and set 'schema_version' to {supported}."
            ),
            record_version=record_ver,
            supported_version=supported,
        )

    return VersionCheckResult(
        compatible=False,
        newer=True,
        message=(
            f"Record was written for schema {record_ver}, newer than the supported {supported}. "
            f"Consider upgrading ctg_record_validator."
        ),
        record_version=record_ver,
        supported_version=supported,
    )
