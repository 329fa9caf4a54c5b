"""Tests for the descriptor primitives and the validation algorithm."""

import datetime as dt
import re

import pytest

from ctg_record_validator.exceptions import RecordValidationError
from ctg_record_validator.schema.specs import (
    BooleanSpec,
    DateSpec,
    IntegerSpec,
    ListSpec,
    LiteralSpec,
    NumberSpec,
    ObjectSpec,
    OptionalSpec,
    Rule,
    SchemaIssue,
    StringSpec,
    UnionSpec,
    ValidationResult,
    enum_of,
    to_pointer,
)
from ctg_record_validator.schema.validation import (
    is_url,
    is_uuid,
    parse_date,
    validate_against_schema,
    validate_or_raise,
)


def _rules(result):
    return [issue.rule for issue in result.issues]


# ---------------------------------------------------------------------------
# Results and paths
# ---------------------------------------------------------------------------

class TestResultTypes:

    def test_rejected_requires_issues(self):
        with pytest.raises(ValueError):
            ValidationResult.rejected([])

    def test_pointer_escapes_tokens(self):
        assert to_pointer(()) == ""
        assert to_pointer(("project", "keywords", 2)) == "/project/keywords/2"
        assert to_pointer(("a/b", "c~d")) == "/a~1b/c~0d"

    def test_issue_value_is_optional(self):
        issue = SchemaIssue(message="Missing", path=("x",), rule=Rule.MISSING_REQUIRED_FIELD)
        assert not issue.has_value
        assert SchemaIssue(message="bad", value=None).has_value


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

class TestStringSpec:

    def test_accepts_text(self):
        result = validate_against_schema("hello", StringSpec())
        assert result.ok
        assert result.value == "hello"

    @pytest.mark.parametrize("value", [{}, [], 1, None, True])
    def test_rejects_non_text(self, value):
        result = validate_against_schema(value, StringSpec())
        assert _rules(result) == [Rule.TYPE_MISMATCH]

    def test_max_length(self):
        spec = StringSpec(max_length=16)
        assert validate_against_schema("x" * 16, spec).ok
        assert _rules(validate_against_schema("x" * 17, spec)) == [Rule.TOO_LONG]

    def test_pattern_must_match_whole_string(self):
        spec = StringSpec(pattern=re.compile(r"[a-z]{3}"))
        assert validate_against_schema("deu", spec).ok
        assert _rules(validate_against_schema("deut", spec)) == [Rule.PATTERN_MISMATCH]
        assert _rules(validate_against_schema("DEU", spec)) == [Rule.PATTERN_MISMATCH]
        assert _rules(validate_against_schema("deu\n", spec)) == [Rule.PATTERN_MISMATCH]

    def test_uuid_format(self):
        spec = StringSpec(fmt="uuid")
        assert validate_against_schema("5f0b6a64-6f37-4bd6-8a1e-0e8a5d0f7c21", spec).ok
        assert _rules(validate_against_schema("5f0b6a646f374bd68a1e0e8a5d0f7c21", spec)) == [Rule.INVALID_FORMAT]

    @pytest.mark.parametrize("value,ok", [
        ("0d3cbd2c-5a8e-4f6b-9f63-2c3e0e6c8e11", True),
        ("0D3CBD2C-5A8E-1F6B-9F63-2C3E0E6C8E11", True),
        ("00000000-0000-0000-0000-000000000000", True),
        ("0d3cbd2c-5a8e-0f6b-9f63-2c3e0e6c8e11", False),
        ("0d3cbd2c-5a8e-7f6b-9f63-2c3e0e6c8e11", False),
        ("0d3cbd2c-5a8e-4f6b-9f63-2c3e0e6c8e1", False),
    ])
    def test_uuid_version_nibble(self, value, ok):
        assert is_uuid(value) is ok
        assert _rules(validate_against_schema("", spec)) == [Rule.INVALID_FORMAT]

    def test_url_format(self):
        spec = StringSpec(fmt="url")
        assert validate_against_schema("https://example.org/a?b=c", spec).ok
        assert _rules(validate_against_schema("example.org", spec)) == [Rule.INVALID_FORMAT]


class TestIsUrl:

    @pytest.mark.parametrize("value", [
        "https://example.org",
        "http://localhost:8080/path",
        "mailto:someone@example.org",
        "urn:isbn:0451450523",
    ])
    def test_absolute_urls(self, value):
        assert is_url(value)

    @pytest.mark.parametrize("value", [
        "",
        "example.org",
        "/relative/path",
        "https://",
        "https://exa mple.org",
        "1http://example.org",
    ])
    def test_not_urls(self, value):
        assert not is_url(value)


class TestIntegerSpec:

    def test_inclusive_bounds(self):
        spec = IntegerSpec(minimum=0, maximum=3)
        assert validate_against_schema(0, spec).ok
        assert validate_against_schema(3, spec).ok
        result = validate_against_schema(4, spec)
        assert _rules(result) == [Rule.OUT_OF_RANGE]
        assert "[0, 3]" in result.issues[0].message

    def test_integral_float_normalizes_to_int(self):
        result = validate_against_schema(2.0, IntegerSpec(minimum=0, maximum=3))
        assert result.ok
        assert result.value == 2
        assert isinstance(result.value, int)

    @pytest.mark.parametrize("value", [2.5, "2", True, None])
    def test_rejects_non_integers(self, value):
        assert _rules(validate_against_schema(value, IntegerSpec(minimum=0, maximum=3))) == [Rule.TYPE_MISMATCH]


class TestBooleanSpec:

    def test_plain_boolean(self):
        assert validate_against_schema(False, BooleanSpec()).ok
        assert _rules(validate_against_schema(None, BooleanSpec())) == [Rule.TYPE_MISMATCH]

    def test_nullable_boolean(self):
        spec = BooleanSpec(nullable=True)
        assert validate_against_schema(None, spec).ok
        assert validate_against_schema(True, spec).ok
        assert _rules(validate_against_schema(0, spec)) == [Rule.TYPE_MISMATCH]
        assert _rules(validate_against_schema("true", spec)) == [Rule.TYPE_MISMATCH]


class TestDateSpec:

    def test_coerces_iso_string(self):
        result = validate_against_schema("2021-05-01", DateSpec(minimum=dt.date(1900, 1, 1)))
        assert result.ok
        assert result.value == dt.date(2021, 5, 1)

    def test_minimum(self):
        result = validate_against_schema("1899-12-31", DateSpec(minimum=dt.date(1900, 1, 1)))
        assert _rules(result) == [Rule.OUT_OF_RANGE]
        assert "1900-01-01" in result.issues[0].message

    def test_date_objects_pass_through(self):
        value = dt.date(2022, 3, 4)
        assert validate_against_schema(value, DateSpec()).value == value
        assert validate_against_schema(dt.datetime(2022, 3, 4, 10, 30), DateSpec()).value == value

    def test_numbers_are_not_dates(self):
        assert _rules(validate_against_schema(1950, DateSpec())) == [Rule.TYPE_MISMATCH]

    def test_unparsable_string(self):
        assert _rules(validate_against_schema("soon", DateSpec())) == [Rule.INVALID_FORMAT]
        assert _rules(validate_against_schema("2021-02-30", DateSpec())) == [Rule.INVALID_FORMAT]

    @pytest.mark.parametrize("raw,expected", [
        ("1950", dt.date(1950, 1, 1)),
        ("1950-07", dt.date(1950, 7, 1)),
        ("1950-07-14", dt.date(1950, 7, 14)),
        ("2023-02-14T09:30:00Z", dt.date(2023, 2, 14)),
        ("2023-02-14T09:30:00+02:00", dt.date(2023, 2, 14)),
        ("", None),
        ("14.07.1950", None),
    ])
    def test_parse_date(self, raw, expected):
        assert parse_date(raw) == expected


class TestNumberSpec:

    def test_coerces_numeric_string(self):
        result = validate_against_schema("1950", NumberSpec(minimum=1900, maximum=2100))
        assert result.ok
        assert result.value == 1950

    def test_range_and_positive(self):
        spec = NumberSpec(minimum=1900, maximum=2100, positive=True)
        assert _rules(validate_against_schema(2101, spec)) == [Rule.OUT_OF_RANGE]
        assert Rule.OUT_OF_RANGE in _rules(validate_against_schema(-5, spec))

    @pytest.mark.parametrize("value", ["abc", "", "nan", "1_950", {}, True])
    def test_rejects_non_numbers(self, value):
        assert _rules(validate_against_schema(value, NumberSpec())) == [Rule.TYPE_MISMATCH]


class TestLiteralSpec:

    def test_exact_match(self):
        assert validate_against_schema("0.1.8", LiteralSpec("0.1.8")).ok

    def test_mismatch_names_expected_and_actual(self):
        result = validate_against_schema("0.1.7", LiteralSpec("0.1.8"))
        assert _rules(result) == [Rule.LITERAL_MISMATCH]
        assert "0.1.8" in result.issues[0].message
        assert "0.1.7" in result.issues[0].message

    def test_other_type_is_type_mismatch(self):
        assert _rules(validate_against_schema({}, LiteralSpec("0.1.8"))) == [Rule.TYPE_MISMATCH]
        assert _rules(validate_against_schema(0, LiteralSpec(""))) == [Rule.TYPE_MISMATCH]


class TestEnumSpec:

    def test_membership_is_exact(self):
        spec = enum_of("organization", "project")
        assert validate_against_schema("project", spec).ok
        result = validate_against_schema("Project", spec)
        assert _rules(result) == [Rule.ENUM_NOT_ALLOWED]
        assert "organization, project" in result.issues[0].message

    def test_non_string(self):
        assert _rules(validate_against_schema(1, enum_of("a"))) == [Rule.TYPE_MISMATCH]


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------

FUZZY_DATE = UnionSpec(
    options=(
        DateSpec(minimum=dt.date(1900, 1, 1)),
        NumberSpec(minimum=1900, maximum=2100),
        LiteralSpec(""),
    )
)


class TestUnionSpec:

    def test_empty_string_sentinel(self):
        result = validate_against_schema("", FUZZY_DATE)
        assert result.ok
        assert result.value == ""

    def test_date_before_minimum_is_rejected(self):
        result = validate_against_schema("1899-12-31", FUZZY_DATE)
        assert _rules(result) == [Rule.UNION_NO_MATCH]

    def test_date_string_is_coerced(self):
        assert validate_against_schema("2021-05-01", FUZZY_DATE).value == dt.date(2021, 5, 1)

    def test_bare_year_is_a_number(self):
        result = validate_against_schema(1950, FUZZY_DATE)
        assert result.ok
        assert result.value == 1950

    def test_first_matching_alternative_wins(self):
        # "1950" parses as a date before the number alternative is tried.
        assert validate_against_schema("1950", FUZZY_DATE).value == dt.date(1950, 1, 1)

    def test_pure_type_failure_collapses_to_type_mismatch(self):
        result = validate_against_schema({}, FUZZY_DATE)
        assert _rules(result) == [Rule.TYPE_MISMATCH]
        assert "date | number | ''" in result.issues[0].message


class TestListSpec:

    def test_empty_list_is_valid(self):
        assert validate_against_schema([], ListSpec(StringSpec())).ok

    def test_issues_carry_index(self):
        result = validate_against_schema(["a", 1, "b", None], ListSpec(StringSpec()))
        assert [issue.path for issue in result.issues] == [(1,), (3,)]

    def test_not_a_list(self):
        assert _rules(validate_against_schema("a", ListSpec(StringSpec()))) == [Rule.TYPE_MISMATCH]


class TestObjectSpec:

    SPEC = ObjectSpec(
        fields={
            "name": StringSpec(),
            "role": IntegerSpec(minimum=0, maximum=3),
            "ref": OptionalSpec(ListSpec(StringSpec(fmt="url"))),
        },
        description="Contact of the project",
    )

    def test_accepts_without_optional_field(self):
        result = validate_against_schema({"name": "x", "role": 1}, self.SPEC)
        assert result.ok
        assert result.value == {"name": "x", "role": 1}

    def test_optional_field_still_validated_when_present(self):
        result = validate_against_schema({"name": "x", "role": 1, "ref": ["nope"]}, self.SPEC)
        assert [(i.path, i.rule) for i in result.issues] == [(("ref", 0), Rule.INVALID_FORMAT)]

    def test_missing_required_field(self):
        result = validate_against_schema({"name": "x"}, self.SPEC)
        assert [(i.path, i.rule) for i in result.issues] == [(("role",), Rule.MISSING_REQUIRED_FIELD)]

    def test_strict_rejects_each_unknown_key(self):
        result = validate_against_schema({"name": "x", "role": 1, "rol": 2, "extra": True}, self.SPEC)
        assert [(i.path, i.rule) for i in result.issues] == [
            (("rol",), Rule.UNRECOGNIZED_KEY),
            (("extra",), Rule.UNRECOGNIZED_KEY),
        ]
        assert "did you mean 'role'" in result.issues[0].message
        assert "contact of the project" in result.issues[1].message

    def test_non_strict_keeps_unknown_keys(self):
        spec = ObjectSpec(fields={"name": StringSpec()}, strict=False)
        result = validate_against_schema({"name": "x", "extra": 1}, spec)
        assert result.ok
        assert result.value == {"name": "x", "extra": 1}

    def test_collects_all_issues_in_one_pass(self):
        result = validate_against_schema({"name": 1, "role": 9, "x": 0}, self.SPEC)
        assert _rules(result) == [Rule.TYPE_MISMATCH, Rule.OUT_OF_RANGE, Rule.UNRECOGNIZED_KEY]

    def test_input_is_not_mutated(self):
        data = {"name": "x", "role": 1.0}
        result = validate_against_schema(data, self.SPEC)
        assert result.value["role"] == 1
        assert data == {"name": "x", "role": 1.0}
        assert isinstance(data["role"], float)

    def test_fields_are_read_only(self):
        with pytest.raises(TypeError):
            self.SPEC.fields["extra"] = StringSpec()
        assert "extra" not in self.SPEC.fields

    def test_spec_is_hashable(self):
        same = ObjectSpec(fields=dict(self.SPEC.fields), description="Contact of the project")
        assert same == self.SPEC
        assert hash(same) == hash(self.SPEC)

    def test_later_changes_to_source_mapping_do_not_leak(self):
        fields = {"name": StringSpec()}
        spec = ObjectSpec(fields=fields)
        fields["role"] = IntegerSpec()
        assert list(spec.fields) == ["name"]


class TestValidateOrRaise:

    def test_returns_normalized_value(self):
        assert validate_or_raise("2021-05-01", DateSpec()) == dt.date(2021, 5, 1)

    def test_raises_with_all_issues(self):
        spec = ObjectSpec(fields={"a": StringSpec(), "b": StringSpec()})
        with pytest.raises(RecordValidationError) as excinfo:
            validate_or_raise({"a": 1, "b": 2}, spec)
        assert len(excinfo.value.issues) == 2
        assert "/a" in str(excinfo.value)
