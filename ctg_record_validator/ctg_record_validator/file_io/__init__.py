"""Reading records and locating values inside record files."""

from .record_loader import RecordLoader, record_loader
from .source_location import SourceLocation, format_source, lookup_source
