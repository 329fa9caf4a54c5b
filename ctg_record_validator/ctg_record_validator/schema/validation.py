from __future__ import annotations

import datetime as dt
import difflib
import math
import re
from typing import Any, List, Optional, Tuple
from urllib.parse import urlsplit

from ..exceptions import RecordValidationError
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
    Path,
    Rule,
    SchemaIssue,
    SchemaSpec,
    StringSpec,
    UnionSpec,
    ValidationResult,
)


# Versions 1-5, or the nil uuid.
UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    r"|00000000-0000-0000-0000-000000000000"
)
_URL_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_PARTIAL_DATE_RE = re.compile(r"([0-9]{4})(?:-([0-9]{2})(?:-([0-9]{2}))?)?")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Enum values are listed in messages only for small sets.
_ENUM_LIST_LIMIT = 10


def validate_against_schema(data: Any, schema: SchemaSpec) -> ValidationResult:
    """Validate data against a descriptor tree.

    The traversal never stops at the first problem: every issue found in
    nested objects and list items is collected and returned in one pass.

    Args:
        data: Parsed JSON value (dicts, lists, scalars)
        schema: Root descriptor

    Returns:
        An accepted result holding the normalized value, or a rejected
        result holding every issue found
    """
    value, issues = _validate_spec(schema, data, path=())
    if issues:
        return ValidationResult.rejected(issues)
    return ValidationResult.accepted(value)


def validate_or_raise(data: Any, schema: SchemaSpec) -> Any:
    """Return the normalized value or raise :class:`RecordValidationError`."""
    result = validate_against_schema(data, schema)
    if not result.ok:
        raise RecordValidationError(result.issues)
    return result.value


def describe_spec(spec: SchemaSpec) -> str:
    """Short type name of a descriptor, used in messages."""
    if isinstance(spec, StringSpec):
        return f"{spec.fmt} string" if spec.fmt else "string"
    if isinstance(spec, IntegerSpec):
        return "integer"
    if isinstance(spec, BooleanSpec):
        return "boolean | null" if spec.nullable else "boolean"
    if isinstance(spec, DateSpec):
        return "date"
    if isinstance(spec, NumberSpec):
        return "number"
    if isinstance(spec, LiteralSpec):
        return _literal_repr(spec.expected)
    if isinstance(spec, EnumSpec):
        return "string"
    if isinstance(spec, UnionSpec):
        return " | ".join(describe_spec(opt) for opt in spec.options)
    if isinstance(spec, ListSpec):
        return "array"
    if isinstance(spec, ObjectSpec):
        return "object"
    if isinstance(spec, OptionalSpec):
        return describe_spec(spec.inner)
    raise TypeError(f"Unknown schema spec: {type(spec).__name__}")


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, dt.date):
        return "date"
    return type(value).__name__


def _literal_repr(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    return repr(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_issue(expected: str, value: Any, path: Path) -> SchemaIssue:
    return SchemaIssue(
        message=f"Invalid type: expected {expected}, got {json_type_name(value)}",
        path=path,
        rule=Rule.TYPE_MISMATCH,
        value=value,
    )


def is_url(value: str) -> bool:
    """Whether value is an absolute URL (``scheme:`` plus a non-empty remainder)."""
    if not value or any(ch.isspace() for ch in value):
        return False
    scheme, sep, rest = value.partition(":")
    if not sep or not rest or not _URL_SCHEME_RE.fullmatch(scheme):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if rest.startswith("//"):
        return bool(parts.netloc)
    return True


def is_uuid(value: str) -> bool:
    return bool(UUID_RE.fullmatch(value))


def parse_date(raw: str) -> Optional[dt.date]:
    """Parse ``YYYY``, ``YYYY-MM``, ``YYYY-MM-DD`` or an ISO date-time."""
    text = raw.strip()
    m = _PARTIAL_DATE_RE.fullmatch(text)
    try:
        if m is not None:
            year, month, day = m.group(1), m.group(2), m.group(3)
            return dt.date(int(year), int(month or 1), int(day or 1))
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_number(raw: str) -> Optional[float]:
    text = raw.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def _validate_spec(spec: SchemaSpec, value: Any, *, path: Path) -> Tuple[Any, List[SchemaIssue]]:
    if isinstance(spec, StringSpec):
        if not isinstance(value, str):
            return value, [_type_issue(describe_spec(spec), value, path)]
        issues: List[SchemaIssue] = []
        if spec.max_length is not None and len(value) > spec.max_length:
            issues.append(
                SchemaIssue(
                    message=f"String must contain at most {spec.max_length} character(s), got {len(value)}",
                    path=path,
                    rule=Rule.TOO_LONG,
                    value=value,
                )
            )
        if spec.pattern is not None and not spec.pattern.fullmatch(value):
            issues.append(
                SchemaIssue(
                    message=f"String '{value}' does not match pattern '{spec.pattern.pattern}'",
                    path=path,
                    rule=Rule.PATTERN_MISMATCH,
                    value=value,
                )
            )
        if spec.fmt == "url" and not is_url(value):
            issues.append(SchemaIssue(message=f"Invalid url: '{value}'", path=path, rule=Rule.INVALID_FORMAT, value=value))
        elif spec.fmt == "uuid" and not is_uuid(value):
            issues.append(SchemaIssue(message=f"Invalid uuid: '{value}'", path=path, rule=Rule.INVALID_FORMAT, value=value))
        return value, issues

    if isinstance(spec, IntegerSpec):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not _is_int(value):
            return value, [_type_issue("integer", value, path)]
        too_low = spec.minimum is not None and value < spec.minimum
        too_high = spec.maximum is not None and value > spec.maximum
        if too_low or too_high:
            return value, [
                SchemaIssue(
                    message=f"Number {value} is out of range [{spec.minimum}, {spec.maximum}]",
                    path=path,
                    rule=Rule.OUT_OF_RANGE,
                    value=value,
                )
            ]
        return value, []

    if isinstance(spec, BooleanSpec):
        if isinstance(value, bool) or (value is None and spec.nullable):
            return value, []
        return value, [_type_issue(describe_spec(spec), value, path)]

    if isinstance(spec, DateSpec):
        if isinstance(value, dt.datetime):
            parsed = value.date()
        elif isinstance(value, dt.date):
            parsed = value
        elif isinstance(value, str):
            parsed = parse_date(value)
            if parsed is None:
                return value, [SchemaIssue(message=f"Invalid date: '{value}'", path=path, rule=Rule.INVALID_FORMAT, value=value)]
        else:
            return value, [_type_issue("date", value, path)]
        if spec.minimum is not None and parsed < spec.minimum:
            return value, [
                SchemaIssue(
                    message=f"Date {parsed.isoformat()} is before the minimum {spec.minimum.isoformat()}",
                    path=path,
                    rule=Rule.OUT_OF_RANGE,
                    value=value,
                )
            ]
        return parsed, []

    if isinstance(spec, NumberSpec):
        if _is_number(value):
            number = value
        elif isinstance(value, str):
            number = parse_number(value)
            if number is None:
                return value, [_type_issue("number", value, path)]
        else:
            return value, [_type_issue("number", value, path)]
        if isinstance(number, float):
            if not math.isfinite(number):
                return value, [_type_issue("number", value, path)]
            if number.is_integer():
                number = int(number)
        issues = []
        if spec.positive and number <= 0:
            issues.append(
                SchemaIssue(message=f"Number {number} must be greater than 0", path=path, rule=Rule.OUT_OF_RANGE, value=value)
            )
        too_low = spec.minimum is not None and number < spec.minimum
        too_high = spec.maximum is not None and number > spec.maximum
        if too_low or too_high:
            issues.append(
                SchemaIssue(
                    message=f"Number {number} is out of range [{spec.minimum}, {spec.maximum}]",
                    path=path,
                    rule=Rule.OUT_OF_RANGE,
                    value=value,
                )
            )
        return number, issues

    if isinstance(spec, LiteralSpec):
        if json_type_name(value) != json_type_name(spec.expected):
            return value, [_type_issue(_literal_repr(spec.expected), value, path)]
        if value != spec.expected:
            return value, [
                SchemaIssue(
                    message=f"Invalid literal value: expected {_literal_repr(spec.expected)}, got {_literal_repr(value)}",
                    path=path,
                    rule=Rule.LITERAL_MISMATCH,
                    value=value,
                )
            ]
        return value, []

    if isinstance(spec, EnumSpec):
        if not isinstance(value, str):
            return value, [_type_issue("string", value, path)]
        if value not in spec.allowed:
            message = f"Value '{value}' is not an allowed value"
            if len(spec.allowed) <= _ENUM_LIST_LIMIT:
                message += f"; expected one of: {', '.join(sorted(spec.allowed))}"
            return value, [SchemaIssue(message=message, path=path, rule=Rule.ENUM_NOT_ALLOWED, value=value)]
        return value, []

    if isinstance(spec, UnionSpec):
        # First matching option wins.
        option_issues: List[List[SchemaIssue]] = []
        for opt in spec.options:
            normalized, errs = _validate_spec(opt, value, path=path)
            if not errs:
                return normalized, []
            option_issues.append(errs)
        only_type_errors = all(
            issue.rule == Rule.TYPE_MISMATCH and issue.path == path
            for errs in option_issues
            for issue in errs
        )
        if only_type_errors:
            return value, [_type_issue(describe_spec(spec), value, path)]
        reasons = "; ".join(errs[0].message for errs in option_issues)
        return value, [
            SchemaIssue(
                message=f"Value does not match any allowed alternative ({reasons})",
                path=path,
                rule=Rule.UNION_NO_MATCH,
                value=value,
            )
        ]

    if isinstance(spec, ListSpec):
        if not isinstance(value, list):
            return value, [_type_issue("array", value, path)]
        items: List[Any] = []
        issues = []
        for idx, item in enumerate(value):
            normalized, errs = _validate_spec(spec.item, item, path=path + (idx,))
            items.append(normalized)
            issues.extend(errs)
        return items, issues

    if isinstance(spec, ObjectSpec):
        if not isinstance(value, dict):
            return value, [_type_issue("object", value, path)]
        result = {}
        issues = []
        for field_name, field_spec in spec.fields.items():
            if field_name not in value:
                if isinstance(field_spec, OptionalSpec):
                    continue
                issues.append(
                    SchemaIssue(
                        message=f"Missing required field '{field_name}'",
                        path=path + (field_name,),
                        rule=Rule.MISSING_REQUIRED_FIELD,
                    )
                )
                continue
            normalized, errs = _validate_spec(field_spec, value[field_name], path=path + (field_name,))
            result[field_name] = normalized
            issues.extend(errs)
        for field_name, field_value in value.items():
            if field_name in spec.fields:
                continue
            if not spec.strict:
                result[field_name] = field_value
                continue
            issues.append(
                SchemaIssue(
                    message=_unknown_field_message(field_name, spec),
                    path=path + (field_name,),
                    rule=Rule.UNRECOGNIZED_KEY,
                    value=field_value,
                )
            )
        return result, issues

    if isinstance(spec, OptionalSpec):
        return _validate_spec(spec.inner, value, path=path)

    raise TypeError(f"Unknown schema spec: {type(spec).__name__}")


def _unknown_field_message(field_name: str, spec: ObjectSpec) -> str:
    message = f"Unrecognized key '{field_name}'"
    if spec.description:
        message += f" in {spec.description[0].lower()}{spec.description[1:]}"
    close = difflib.get_close_matches(str(field_name), list(spec.fields), n=1)
    if close:
        message += f"; did you mean '{close[0]}'?"
    else:
        message += f"; allowed keys: {', '.join(spec.fields)}"
    return message
