"""Domain models for date resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class DateSource(str, Enum):
    """Evidence sources a document's dates can be read from."""

    FRONTMATTER = "frontmatter"
    GIT = "git"
    FILESYSTEM = "filesystem"


DEFAULT_PRIORITY: tuple[DateSource, ...] = (
    DateSource.FRONTMATTER,
    DateSource.GIT,
    DateSource.FILESYSTEM,
)


def normalize_priority(values: Iterable[str | DateSource]) -> tuple[DateSource, ...]:
    """Return *values* as a tuple of distinct DateSource, first occurrence kept.

    Raises:
        ValueError: if *values* is a bare string or holds an unknown source.
    """
    if isinstance(values, str):
        raise ValueError(
            f"Source priority must be a list, not a string: '{values}'\n"
            "  Example:  priority: [frontmatter, git, filesystem]"
        )
    result: list[DateSource] = []
    for value in values:
        try:
            source = DateSource(value.strip() if isinstance(value, str) else value)
        except ValueError:
            allowed = ", ".join(s.value for s in DateSource)
            raise ValueError(
                f"Unknown date source '{value}'.\n"
                f"  Allowed sources: {allowed}"
            ) from None
        if source not in result:
            result.append(source)
    return tuple(result)


def parse_priority_list(text: str) -> tuple[DateSource, ...]:
    """Parse a comma-separated priority string ("git, filesystem")."""
    return normalize_priority([part for part in text.split(",") if part.strip()])


@dataclass(frozen=True)
class ResolvedDates:
    created: datetime
    modified: datetime
    published: datetime

    def as_dict(self) -> dict[str, str]:
        return {
            "created": self.created.isoformat(),
            "modified": self.modified.isoformat(),
            "published": self.published.isoformat(),
        }


@dataclass(frozen=True)
class FileTimes:
    """Storage-layer timestamps of a file, in epoch milliseconds."""

    birthtime_ms: float
    mtime_ms: float


@dataclass
class Document:
    """A content document as seen by the resolver.

    Attributes:
        path: File path as given by the pipeline; may be relative to *cwd*.
        cwd: Working directory relative paths are resolved against.
        frontmatter: Parsed frontmatter mapping, or None if the file has none.
        dates: Resolved dates, attached once by ``DateResolver.annotate()``.
    """

    path: Path
    cwd: Path = field(default_factory=Path.cwd)
    frontmatter: dict[str, Any] | None = None
    dates: ResolvedDates | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.cwd = Path(self.cwd)

    @property
    def full_path(self) -> Path:
        return self.path if self.path.is_absolute() else self.cwd / self.path

    def attach_dates(self, dates: ResolvedDates) -> None:
        if self.dates is not None:
            raise ValueError(f"Dates already attached to {self.path}")
        self.dates = dates
