"""Schema definitions and validation.

Nothing here imports the file or suite modules; validation is a pure
value-in / result-out computation.
"""

from .specs import (
    Rule,
    SchemaIssue,
    ValidationResult,
)
from .validation import validate_against_schema, validate_or_raise
from .vocabulary import KeywordVocabulary, load_keyword_vocabulary
from .project_record import build_project_schema, validate_project_record
