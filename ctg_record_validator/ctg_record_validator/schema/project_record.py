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

"""Descriptor tree of one project record.

Every object level is strict: keys that are not declared here are rejected.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

from .. import SCHEMA_VERSION
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
    StringSpec,
    UnionSpec,
    ValidationResult,
    enum_of,
)
from .validation import validate_against_schema
from .vocabulary import KeywordVocabulary


ISO_CODE = re.compile(r"[a-z]{3}")
LAT_LNG = re.compile(r"-?[0-9]{1,3}(\.[0-9]{1,5})?")

RECORD_MIN_DATE = dt.date(2020, 1, 1)
PERIOD_MIN_DATE = dt.date(1900, 1, 1)
PERIOD_MIN_YEAR = 1900
PERIOD_MAX_YEAR = 2100

ENTITY_TYPES = ("organization", "project")
RELATION_TYPES = ("parent", "sibling", "child", "cooperation")
REPOSITORY_TYPES = ("local", "remote")
ACCESSIBILITY = ("restricted", "open")

CONTACT_ROLES = {
    0: "Management",
    1: "Employee",
    2: "Student Employee",
    3: "Contractor or Honorary Staff",
}

TITLE_ABBR_MAX_LENGTH = 16
PROJECT_DESC_MAX_LENGTH = 750


# ---- shared shapes ----------------------------------------------------------


def _url_list(description: str) -> ListSpec:
    return ListSpec(StringSpec(fmt="url"), description=description)


def _text(description: Optional[str] = None) -> StringSpec:
    return StringSpec(description=description)


def _named_entity(text_description: str) -> ObjectSpec:
    """Free-text name plus authority file URIs (places, institutions, persons)."""
    return ObjectSpec(
        fields={
            "text": _text(text_description),
            "ref": _url_list("List of authority file URIs"),
        },
    )


def _record_date(description: str) -> DateSpec:
    return DateSpec(minimum=RECORD_MIN_DATE, description=description)


def _period_bound(positive: bool = False) -> UnionSpec:
    # Full date, bare year, or "" for unknown; tried in that order.
    return UnionSpec(
        options=(
            DateSpec(minimum=PERIOD_MIN_DATE),
            NumberSpec(minimum=PERIOD_MIN_YEAR, maximum=PERIOD_MAX_YEAR, positive=positive),
            LiteralSpec(""),
        ),
    )


def _percentage(description: str) -> IntegerSpec:
    return IntegerSpec(minimum=0, maximum=100, description=description)


def _research_data_stage(description: str) -> ObjectSpec:
    datatype = ObjectSpec(
        fields={
            "label": _text("Label for the datatype"),
            "licensing": ListSpec(_text(), description="List of licenses that apply to the datatype"),
            "open_access": _percentage("Approximate percentage of this datatype available open-access"),
        },
    )
    repository = ObjectSpec(
        fields={
            "type": enum_of(*REPOSITORY_TYPES),
            "accessibility": enum_of(
                *ACCESSIBILITY,
                description=(
                    "Information about the accessibility of the repository; "
                    "if local and open, please explain"
                ),
            ),
            "ref": OptionalSpec(_url_list("List of repository URLs (if applicable)")),
            "description": _text("Repository description, e.g. 'GitHub'"),
        },
    )
    return ObjectSpec(
        fields={
            "datatypes": ListSpec(
                datatype, description="List of datatypes contained in the project's research data"
            ),
            "repositories": ListSpec(
                repository, description="Information about local or remote repositories"
            ),
        },
        description=description,
    )


# ---- record sections --------------------------------------------------------


def _record_metadata_spec() -> ObjectSpec:
    return ObjectSpec(
        fields={
            "uuid": StringSpec(fmt="uuid", description="Universally unique identifier for the project"),
            "record_created_on": _record_date("Record creation date (YYYY-MM-DD)"),
            "record_created_by": _text("Name of the record's creator"),
            "last_edited_on": UnionSpec(
                options=(DateSpec(minimum=RECORD_MIN_DATE), LiteralSpec("")),
                description="Date of last modification of the record (YYYY-MM-DD)",
            ),
        },
        description="Metadata of the record file",
    )


def _research_data_spec() -> ObjectSpec:
    return ObjectSpec(
        fields={
            "lang": ListSpec(
                StringSpec(pattern=ISO_CODE),
                description="List of languages of the project's research data (ISO-639-3 codes)",
            ),
            "sustainability_plan": BooleanSpec(
                nullable=True,
                description=(
                    "Is there a plan to ensure the sustainability and reusability "
                    "of the project's research data and output?"
                ),
            ),
            "publications": ObjectSpec(
                fields={
                    "open_access": _percentage(
                        "Approximate percentage of publications that are available open-access"
                    ),
                    "licensing": ListSpec(_text(), description="List of licenses that apply to publications"),
                },
                description="Information about publication accessibility and licensing",
            ),
            "data": ObjectSpec(
                fields={
                    "raw": _research_data_stage("Information about raw research data"),
                    "refined": _research_data_stage("Information about refined research data"),
                    "final": _research_data_stage(
                        "Information about final and publication-ready research data"
                    ),
                },
                description="Information about research data",
            ),
        },
        description="Information about the project's research data",
    )


def _stack_spec() -> ObjectSpec:
    tool = ObjectSpec(
        fields={
            "label": _text("Name of the tool"),
            "self_developed": BooleanSpec(description="Is the tool developed within the project?"),
            "ref": _url_list("List of URLs for the tool and/or codebase"),
            "purpose": _text("Description of the purpose in the context of the project"),
        },
    )
    return ObjectSpec(
        fields={
            "database": ListSpec(_text(), description="List of database systems in use"),
            "backend": ListSpec(_text(), description="List of backend technologies in use"),
            "frontend": ListSpec(_text(), description="List of frontend technologies in use"),
            "languages": ListSpec(
                _text(), description="List of programming languages (defined broadly) in use"
            ),
            "tools": ListSpec(tool, description="List of tools that are used in the project"),
        },
        description="Information about the tech stack used in the project",
    )


def _project_spec(vocabulary: KeywordVocabulary) -> ObjectSpec:
    period = ObjectSpec(
        fields={
            "from": _period_bound(),
            "to": _period_bound(positive=True),
        },
    )
    place = ObjectSpec(
        fields={
            "place_name": _named_entity("Name of the place"),
            "coordinates": ObjectSpec(
                fields={
                    "lat": StringSpec(pattern=LAT_LNG, description="Latitude of the place"),
                    "lng": StringSpec(pattern=LAT_LNG, description="Longitude of the place"),
                },
            ),
        },
    )
    institution = ObjectSpec(
        fields={
            "org_name": _named_entity("Name of the institution"),
            "websites": _url_list("List of institutional website URLs"),
        },
    )
    relation = ObjectSpec(
        fields={
            "relation_type": enum_of(*RELATION_TYPES),
            "title": _text(),
            # Only the format is checked; the target record may live anywhere.
            "uuid": StringSpec(fmt="uuid"),
        },
    )
    roles = " | ".join(f"{code} = {label}" for code, label in CONTACT_ROLES.items())
    contact = ObjectSpec(
        fields={
            "pers_name": _named_entity("Name of the contact"),
            "role": IntegerSpec(minimum=0, maximum=3, description=f"Role of the contact: ({roles})"),
            "websites": _url_list("List of institutional and/or personal website URLs"),
        },
    )
    policy = ObjectSpec(
        fields={
            "description": _text("Description of the policy, e.g. 'Research Data Policy'"),
            "ref": _url_list("List of URLs relevant to the policy"),
        },
    )

    return ObjectSpec(
        fields={
            "title": _text("Official title of the project"),
            "abbr": StringSpec(
                max_length=TITLE_ABBR_MAX_LENGTH,
                description="Abbreviation of the project title (optional)",
            ),
            "type": enum_of(*ENTITY_TYPES, description="Entity type (organization | project)"),
            "ref": ListSpec(
                UnionSpec(options=(StringSpec(fmt="url"), LiteralSpec(""))),
                description="List of authority file URIs",
            ),
            "date": ListSpec(period, description="List of active periods (YYYY-MM-DD)"),
            "websites": _url_list("List of project website URLs"),
            "project_desc": StringSpec(
                max_length=PROJECT_DESC_MAX_LENGTH,
                description="Short description of the project",
            ),
            "places": ListSpec(place, description="Location(s) of the project"),
            "lang": ListSpec(
                StringSpec(pattern=ISO_CODE),
                description="List of languages used in the project's output (ISO-639-3 codes)",
            ),
            "host_institutions": ListSpec(
                institution,
                description="Universities or research organizations which host the project",
            ),
            "relations": ListSpec(relation, description="Entities that are related to the project"),
            "contacts": ListSpec(contact, description="Main contact(s) of the project"),
            "research_data": _research_data_spec(),
            "policies": ListSpec(
                policy,
                description=(
                    "Information about policies (e.g. RDP, RDM, OA) applicable to the project "
                    "and its publications and data"
                ),
            ),
            "stack": _stack_spec(),
            "keywords": ListSpec(
                EnumSpec(
                    allowed=vocabulary.allowed,
                    description="Use lowercase letters, with underscore as a separator where needed",
                ),
                description="List of keywords to describe the project",
            ),
            "comment": _text("Any commentary that doesn't fit elsewhere in the schema"),
        },
        description="Information about the project",
    )


def build_project_schema(vocabulary: KeywordVocabulary, schema_version: str = SCHEMA_VERSION) -> ObjectSpec:
    """Build the descriptor tree of a project record.

    Args:
        vocabulary: Allowed values of ``project.keywords``
        schema_version: Value ``schema_version`` is pinned to

    Returns:
        Root :class:`ObjectSpec`; read-only and safe to share between threads
    """
    return ObjectSpec(
        fields={
            "schema_version": LiteralSpec(schema_version, description="Version of the project JSON schema"),
            "record_metadata": _record_metadata_spec(),
            "project": _project_spec(vocabulary),
        },
        description=(
            "Project that deals in some way with the digital humanities, research data management, "
            "non-Latin scripts, or infrastructure"
        ),
    )


def validate_project_record(record: Any, vocabulary: KeywordVocabulary) -> ValidationResult:
    """Build the record schema for *vocabulary* and validate *record* against it."""
    return validate_against_schema(record, build_project_schema(vocabulary))

