"""Storage-layer timestamps."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from dateline.dates.models import FileTimes

_NS_PER_MS = 1_000_000


def _stat(path: Path) -> FileTimes:
    st = os.stat(path)
    # st_birthtime exists on macOS/BSD and Windows; Linux only exposes ctime.
    birthtime_ns = getattr(st, "st_birthtime_ns", None)
    if birthtime_ns is None:
        birthtime = getattr(st, "st_birthtime", None)
        birthtime_ns = int(birthtime * 1e9) if birthtime is not None else st.st_ctime_ns
    return FileTimes(
        birthtime_ms=birthtime_ns / _NS_PER_MS,
        mtime_ms=st.st_mtime_ns / _NS_PER_MS,
    )


async def stat_file_times(path: Path | str) -> FileTimes:
    """Return birth and modification times of *path*.

    Raises:
        OSError: if the file cannot be stat'ed (e.g. deleted mid-run).
    """
    return await asyncio.to_thread(_stat, Path(path))
