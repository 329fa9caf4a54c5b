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

"""JSON Schema export of a descriptor tree.

Record producers outside this package can check their output with any JSON
Schema tool. The export is a faithful but weaker rendition: date minimums and
number coercion have no JSON Schema keyword and are only noted in ``$comment``.
"""

from typing import Any, Dict, List

import jsonschema

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
    Rule,
    SchemaIssue,
    SchemaSpec,
    StringSpec,
    UnionSpec,
)
from .validation import UUID_RE


JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

# jsonschema validator keyword -> rule identifier
_KEYWORD_RULES = {
    "type": Rule.TYPE_MISMATCH,
    "enum": Rule.ENUM_NOT_ALLOWED,
    "const": Rule.LITERAL_MISMATCH,
    "additionalProperties": Rule.UNRECOGNIZED_KEY,
    "required": Rule.MISSING_REQUIRED_FIELD,
    "pattern": Rule.PATTERN_MISMATCH,
    "maxLength": Rule.TOO_LONG,
    "minimum": Rule.OUT_OF_RANGE,
    "maximum": Rule.OUT_OF_RANGE,
    "exclusiveMinimum": Rule.OUT_OF_RANGE,
    "anyOf": Rule.UNION_NO_MATCH,
    "format": Rule.INVALID_FORMAT,
}


def _anchored(pattern: str) -> str:
    return f"^(?:{pattern})$"


def _spec_to_json_schema(spec: SchemaSpec) -> Dict[str, Any]:
    if isinstance(spec, OptionalSpec):
        out = _spec_to_json_schema(spec.inner)
        if spec.description:
            out["description"] = spec.description
        return out

    out: Dict[str, Any]
    if isinstance(spec, StringSpec):
        out = {"type": "string"}
        if spec.max_length is not None:
            out["maxLength"] = spec.max_length
        if spec.pattern is not None:
            out["pattern"] = _anchored(spec.pattern.pattern)
        if spec.fmt == "url":
            out["format"] = "uri"
        elif spec.fmt == "uuid":
            out["format"] = "uuid"
            out["pattern"] = _anchored(UUID_RE.pattern)
    elif isinstance(spec, IntegerSpec):
        out = {"type": "integer"}
        if spec.minimum is not None:
            out["minimum"] = spec.minimum
        if spec.maximum is not None:
            out["maximum"] = spec.maximum
    elif isinstance(spec, BooleanSpec):
        out = {"type": ["boolean", "null"] if spec.nullable else "boolean"}
    elif isinstance(spec, DateSpec):
        out = {"type": "string", "format": "date"}
        if spec.minimum is not None:
            out["$comment"] = f"on or after {spec.minimum.isoformat()}"
    elif isinstance(spec, NumberSpec):
        out = {"type": "number"}
        if spec.minimum is not None:
            out["minimum"] = spec.minimum
        if spec.maximum is not None:
            out["maximum"] = spec.maximum
        if spec.positive:
            out["exclusiveMinimum"] = 0
    elif isinstance(spec, LiteralSpec):
        out = {"const": spec.expected}
    elif isinstance(spec, EnumSpec):
        out = {"type": "string", "enum": sorted(spec.allowed)}
    elif isinstance(spec, UnionSpec):
        out = {"anyOf": [_spec_to_json_schema(opt) for opt in spec.options]}
    elif isinstance(spec, ListSpec):
        out = {"type": "array", "items": _spec_to_json_schema(spec.item)}
    elif isinstance(spec, ObjectSpec):
        out = {
            "type": "object",
            "properties": {name: _spec_to_json_schema(field) for name, field in spec.fields.items()},
            "required": [name for name, field in spec.fields.items() if not isinstance(field, OptionalSpec)],
            "additionalProperties": not spec.strict,
        }
    else:
        raise TypeError(f"Unknown schema spec: {type(spec).__name__}")

    if spec.description:
        out["description"] = spec.description
    return out


def to_json_schema(spec: SchemaSpec, *, title: str = None) -> Dict[str, Any]:
    """Render a descriptor tree as a Draft 2020-12 JSON Schema document."""
    schema = {"$schema": JSON_SCHEMA_DIALECT}
    if title:
        schema["title"] = title
    schema.update(_spec_to_json_schema(spec))
    return schema


def check_json_schema(schema: Dict[str, Any]) -> None:
    """Raise ``jsonschema.exceptions.SchemaError`` if *schema* is not a valid schema."""
    jsonschema.Draft202012Validator.check_schema(schema)


def validate_with_json_schema(data: Any, schema: Dict[str, Any]) -> List[SchemaIssue]:
    """Validate raw JSON data with the ``jsonschema`` library.

    Returns every error found, converted to :class:`SchemaIssue`.
    """
    validator = jsonschema.Draft202012Validator(schema)
    issues: List[SchemaIssue] = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path))):
        issues.append(
            SchemaIssue(
                message=error.message,
                path=tuple(error.absolute_path),
                rule=_KEYWORD_RULES.get(error.validator, error.validator),
                value=error.instance,
            )
        )
    return issues
