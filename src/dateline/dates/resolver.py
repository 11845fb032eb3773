"""Priority-driven resolution of created / modified / published dates.

For each configured source, in order, every field that is still unset is
filled from that source; a field set by an earlier source is never
overwritten. Fields no source could provide default to "now".

    frontmatter   created   ← date
                  modified  ← lastmod, updated, last-modified (first wins)
                  published ← publishDate
    git           modified  ← latest commit touching the file
    filesystem    created   ← birth time
                  modified  ← modification time
"""

from __future__ import annotations

import asyncio
import warnings
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from dateline.dates.filesystem import stat_file_times
from dateline.dates.git import GitError, SharedRepository
from dateline.dates.models import (
    DEFAULT_PRIORITY,
    DateSource,
    Document,
    FileTimes,
    ResolvedDates,
    normalize_priority,
)
from dateline.dates.parser import DateWarning, from_millis, local_now, parse_date_string

CREATED_KEY = "date"
MODIFIED_KEYS: tuple[str, ...] = ("lastmod", "updated", "last-modified")
PUBLISHED_KEY = "publishDate"


@dataclass
class _Accumulator:
    created: datetime | None = None
    modified: datetime | None = None
    published: datetime | None = None


class DateResolver:
    """Resolve the three dates of a document from prioritised sources.

    Args:
        priority: Source identifiers in precedence order. Duplicates are
            ignored after their first occurrence.
        cwd: Working directory used for git discovery when no *repository*
            is given. Defaults to the process CWD.
        repository: Shared git handle; pass the same instance to every
            resolver in the process so discovery happens once.
        stat: Storage-layer lookup returning a file's FileTimes.
        clock: Source of "now" for fields no source could fill.

    Raises:
        ValueError: if *priority* contains an unknown source.
    """

    def __init__(
        self,
        priority: Iterable[str | DateSource] = DEFAULT_PRIORITY,
        *,
        cwd: Path | str | None = None,
        repository: SharedRepository | None = None,
        stat: Callable[[Path], Awaitable[FileTimes]] = stat_file_times,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.priority = normalize_priority(priority)
        if repository is None:
            repository = SharedRepository(cwd if cwd is not None else Path.cwd())
        self.repository = repository
        self._stat = stat
        self._clock = clock

    async def resolve(self, document: Document) -> ResolvedDates:
        """Return the resolved dates for *document*.

        Raises:
            OSError: if the filesystem source is configured and the file
                cannot be stat'ed.
            GitError: if the git source is configured and no repository
                encloses the working directory.
        """
        acc = _Accumulator()
        fp = str(document.path)
        full_path = document.full_path

        for source in self.priority:
            if source is DateSource.FRONTMATTER:
                self._from_frontmatter(acc, fp, document.frontmatter)
            elif source is DateSource.GIT:
                await self._from_git(acc, fp, full_path)
            elif source is DateSource.FILESYSTEM:
                times = await self._stat(full_path)
                acc.created = acc.created or from_millis(times.birthtime_ms)
                acc.modified = acc.modified or from_millis(times.mtime_ms)

        now = None
        if acc.created is None or acc.modified is None or acc.published is None:
            now = self._clock()
        return ResolvedDates(
            created=acc.created or now,
            modified=acc.modified or now,
            published=acc.published or now,
        )

    async def annotate(self, document: Document) -> Document:
        """Resolve *document* and attach the result to ``document.dates``."""
        document.attach_dates(await self.resolve(document))
        return document

    async def resolve_all(self, documents: Sequence[Document]) -> list[ResolvedDates]:
        """Resolve *documents* concurrently; results follow input order."""
        return list(await asyncio.gather(*(self.resolve(doc) for doc in documents)))

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    @staticmethod
    def _from_frontmatter(acc: _Accumulator, fp: str, frontmatter: dict | None) -> None:
        if frontmatter is None:
            return
        if acc.created is None:
            acc.created = parse_date_string(fp, frontmatter.get(CREATED_KEY), set_zone=True)
        for key in MODIFIED_KEYS:
            if acc.modified is not None:
                break
            acc.modified = parse_date_string(fp, frontmatter.get(key), set_zone=True)
        if acc.published is None:
            acc.published = parse_date_string(fp, frontmatter.get(PUBLISHED_KEY), set_zone=True)

    async def _from_git(self, acc: _Accumulator, fp: str, full_path: Path) -> None:
        # Discovery errors are fatal and propagate; per-file errors are not.
        await self.repository.get()
        if acc.modified is not None:
            return
        try:
            acc.modified = from_millis(await self.repository.latest_modified_ms(full_path))
        except GitError:
            warnings.warn(
                f"{fp} isn't yet tracked by git, last modification date is not available for this file",
                DateWarning,
                stacklevel=2,
            )
