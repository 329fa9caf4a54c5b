import copy
import datetime as dt
import json
from pathlib import Path

import pytest

from ctg_record_validator.schema import vocabulary as vocabulary_module
from ctg_record_validator.schema.project_record import build_project_schema
from ctg_record_validator.schema.template import new_project_record
from ctg_record_validator.schema.vocabulary import load_keyword_vocabulary


FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clear_vocabulary_cache():
    vocabulary_module.clear_cache()
    yield
    vocabulary_module.clear_cache()


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def vocabulary():
    return load_keyword_vocabulary(FIXTURES / "KEYWORDS.json")


@pytest.fixture
def schema(vocabulary):
    return build_project_schema(vocabulary)


@pytest.fixture
def valid_record():
    """Fully populated record that the schema accepts."""
    return json.loads((FIXTURES / "valid_project.json").read_text(encoding="utf-8"))


@pytest.fixture
def minimal_record(schema):
    """Only required fields populated: empty lists, fresh uuid, today's date."""
    return new_project_record(schema, today=dt.date.today())


@pytest.fixture
def clone():
    return copy.deepcopy
