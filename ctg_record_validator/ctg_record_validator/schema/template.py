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

import copy
import datetime as dt
import logging
import uuid
from typing import Any, Dict, Optional

from .specs import (
    BooleanSpec,
    DateSpec,
    EnumSpec,
    IntegerSpec,
    ListSpec,
    LiteralSpec,
    NumberSpec,
    ObjectSpec,
    OptionalSpec,
    SchemaSpec,
    StringSpec,
    UnionSpec,
)

logger = logging.getLogger(__name__)


def build_record_template(spec: SchemaSpec) -> Any:
    """Generate the blank skeleton of a record from its descriptor tree.

    Text, dates and enums become ``""``, lists become ``[]``, nullable
    booleans ``None`` and literals their pinned value. Optional fields are
    left out. The blank template is not valid on its own: identifiers,
    creation date and enums still have to be filled in.
    """
    if isinstance(spec, (StringSpec, DateSpec, NumberSpec, EnumSpec)):
        return ""
    if isinstance(spec, IntegerSpec):
        return spec.minimum if spec.minimum is not None else 0
    if isinstance(spec, BooleanSpec):
        return None if spec.nullable else False
    if isinstance(spec, LiteralSpec):
        return spec.expected
    if isinstance(spec, UnionSpec):
        # Prefer the "unknown" sentinel when there is one.
        for opt in spec.options:
            if isinstance(opt, LiteralSpec):
                return opt.expected
        return build_record_template(spec.options[0])
    if isinstance(spec, ListSpec):
        return []
    if isinstance(spec, ObjectSpec):
        return {
            name: build_record_template(field_spec)
            for name, field_spec in spec.fields.items()
            if not isinstance(field_spec, OptionalSpec)
        }
    if isinstance(spec, OptionalSpec):
        return build_record_template(spec.inner)
    raise TypeError(f"Unknown schema spec: {type(spec).__name__}")


def fill_record_template(
    template: Dict[str, Any],
    *,
    created_by: str = "",
    entity_type: str = "project",
    today: Optional[dt.date] = None,
    record_uuid: Optional[str] = None,
) -> Dict[str, Any]:
    """Return a copy of *template* with the fields every new record needs.

    Sets a fresh uuid, today's creation date and the entity type; the input
    template is left untouched.
    """
    record = copy.deepcopy(template)
    metadata = record.setdefault("record_metadata", {})
    if isinstance(metadata, dict):
        metadata["uuid"] = record_uuid or str(uuid.uuid4())
        metadata["record_created_on"] = (today or dt.date.today()).isoformat()
        if created_by:
            metadata["record_created_by"] = created_by
        logger.debug(f"Filled record template with uuid {metadata['uuid']}")
    project = record.setdefault("project", {})
    # Malformed sections are left for validation to report.
    if isinstance(project, dict):
        project["type"] = entity_type
    return record


def new_project_record(spec: ObjectSpec, **kwargs: Any) -> Dict[str, Any]:
    """Blank template of *spec* filled in by :func:`fill_record_template`."""
    return fill_record_template(build_record_template(spec), **kwargs)
