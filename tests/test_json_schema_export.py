import pytest
from jsonschema.exceptions import SchemaError

from ctg_record_validator.schema.json_schema_export import (
    JSON_SCHEMA_DIALECT,
    check_json_schema,
    to_json_schema,
    validate_with_json_schema,
)
from ctg_record_validator.schema.specs import Rule


@pytest.fixture
def json_schema(schema):
    return to_json_schema(schema, title="Project record")


class TestJsonSchemaExport:

    def test_export_is_a_valid_schema(self, json_schema):
        check_json_schema(json_schema)
        assert json_schema["$schema"] == JSON_SCHEMA_DIALECT
        assert json_schema["title"] == "Project record"

    def test_invalid_schema_is_reported(self):
        with pytest.raises(SchemaError):
            check_json_schema({"type": 12})

    def test_objects_are_closed(self, json_schema):
        project = json_schema["properties"]["project"]
        assert project["additionalProperties"] is False
        assert "stack" in project["required"]

    def test_optional_field_is_not_required(self, json_schema):
        repository = (
            json_schema["properties"]["project"]["properties"]["research_data"]
            ["properties"]["data"]["properties"]["raw"]["properties"]["repositories"]["items"]
        )
        assert "ref" in repository["properties"]
        assert "ref" not in repository["required"]

    def test_keywords_enum(self, json_schema):
        keywords = json_schema["properties"]["project"]["properties"]["keywords"]
        assert keywords["items"]["enum"][:3] == ["annotation", "arabic", "cyrillic"]

    def test_schema_version_const(self, json_schema):
        assert json_schema["properties"]["schema_version"]["const"] == "0.1.8"


class TestValidateWithJsonSchema:

    def test_valid_record(self, json_schema, valid_record):
        assert validate_with_json_schema(valid_record, json_schema) == []

    def test_minimal_record(self, json_schema, minimal_record):
        assert validate_with_json_schema(minimal_record, json_schema) == []

    def test_unknown_key(self, json_schema, valid_record):
        valid_record["project"]["stack"]["extra"] = 1
        issues = validate_with_json_schema(valid_record, json_schema)
        assert [(i.path, i.rule) for i in issues] == [(("project", "stack"), Rule.UNRECOGNIZED_KEY)]

    def test_keyword_outside_vocabulary(self, json_schema, valid_record):
        valid_record["project"]["keywords"].append("letterpress")
        issues = validate_with_json_schema(valid_record, json_schema)
        assert [(i.path, i.rule) for i in issues] == [(("project", "keywords", 3), Rule.ENUM_NOT_ALLOWED)]
