"""dateline date resolution: parser, sources and priority resolver."""

from dateline.dates.git import GitError, GitRepository, SharedRepository
from dateline.dates.models import (
    DEFAULT_PRIORITY,
    DateSource,
    Document,
    FileTimes,
    ResolvedDates,
    normalize_priority,
)
from dateline.dates.parser import DateWarning, parse_date_string
from dateline.dates.resolver import DateResolver

__all__ = [
    "DEFAULT_PRIORITY",
    "DateResolver",
    "DateSource",
    "DateWarning",
    "Document",
    "FileTimes",
    "GitError",
    "GitRepository",
    "ResolvedDates",
    "SharedRepository",
    "normalize_priority",
    "parse_date_string",
]
