from __future__ import annotations

import datetime as dt
import re
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Union


PathToken = Union[str, int]
Path = Tuple[PathToken, ...]
JsonPointer = str


class Rule:
    """Identifiers of the rule a value broke."""

    TYPE_MISMATCH = "type-mismatch"
    OUT_OF_RANGE = "out-of-range"
    TOO_LONG = "too-long"
    PATTERN_MISMATCH = "pattern-mismatch"
    INVALID_FORMAT = "invalid-format"
    ENUM_NOT_ALLOWED = "enum-not-allowed"
    LITERAL_MISMATCH = "literal-mismatch"
    UNRECOGNIZED_KEY = "unrecognized-key"
    UNION_NO_MATCH = "union-no-alternative-matched"
    MISSING_REQUIRED_FIELD = "missing-required-field"


_NO_VALUE = object()


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def to_pointer(path: Path) -> JsonPointer:
    """Render a path tuple as a JSON pointer (``""`` for the document root)."""
    return "".join(f"/{_jp_escape(str(token))}" for token in path)


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    path: Path = ()
    rule: str = Rule.TYPE_MISMATCH
    value: Any = field(default=_NO_VALUE, compare=False, repr=False)

    @property
    def pointer(self) -> JsonPointer:
        return to_pointer(self.path)

    @property
    def has_value(self) -> bool:
        return self.value is not _NO_VALUE


@dataclass(frozen=True)
class ValidationResult:
    """Either an accepted, normalized value or a non-empty list of issues."""

    value: Any = None
    issues: Tuple[SchemaIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    @classmethod
    def accepted(cls, value: Any) -> "ValidationResult":
        return cls(value=value)

    @classmethod
    def rejected(cls, issues) -> "ValidationResult":
        issues = tuple(issues)
        if not issues:
            raise ValueError("A rejected result needs at least one issue")
        return cls(issues=issues)


# -------------------------
# Descriptor variants
# -------------------------


@dataclass(frozen=True)
class StringSpec:
    max_length: Optional[int] = None
    # Must match the whole string.
    pattern: Optional[re.Pattern] = None
    # "url" | "uuid"
    fmt: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class IntegerSpec:
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class BooleanSpec:
    nullable: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class DateSpec:
    """Calendar date coerced from an ISO string."""

    minimum: Optional[dt.date] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class NumberSpec:
    """Number coerced from a JSON number or a numeric string."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None
    positive: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class LiteralSpec:
    expected: Any
    description: Optional[str] = None


@dataclass(frozen=True)
class EnumSpec:
    allowed: FrozenSet[str]
    description: Optional[str] = None


@dataclass(frozen=True)
class UnionSpec:
    options: Tuple["SchemaSpec", ...]
    description: Optional[str] = None


@dataclass(frozen=True)
class ListSpec:
    item: "SchemaSpec"
    description: Optional[str] = None


@dataclass(frozen=True)
class ObjectSpec:
    # Read-only view; field order is the order issues are reported in.
    fields: Mapping[str, "SchemaSpec"] = field(hash=False)
    strict: bool = True
    description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class OptionalSpec:
    inner: "SchemaSpec"
    description: Optional[str] = None


SchemaSpec = Union[
    StringSpec,
    IntegerSpec,
    BooleanSpec,
    DateSpec,
    NumberSpec,
    LiteralSpec,
    EnumSpec,
    UnionSpec,
    ListSpec,
    ObjectSpec,
    OptionalSpec,
]

SPEC_TYPES = (
    StringSpec,
    IntegerSpec,
    BooleanSpec,
    DateSpec,
    NumberSpec,
    LiteralSpec,
    EnumSpec,
    UnionSpec,
    ListSpec,
    ObjectSpec,
    OptionalSpec,
)


def enum_of(*values: str, description: Optional[str] = None) -> EnumSpec:
    return EnumSpec(allowed=frozenset(values), description=description)
