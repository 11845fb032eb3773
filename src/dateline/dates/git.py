"""Git history lookups for last-modified dates.

Security requirements:
- shell=False always (no command injection).
- Paths are passed after ``--`` so they are never read as options.
"""

from __future__ import annotations

import asyncio
import subprocess
from collections.abc import Callable
from pathlib import Path


class GitError(RuntimeError):
    """Raised when a git query cannot answer (no repository, untracked file)."""


def _run_git(args: list[str], cwd: Path) -> str:
    """Run git with *args* in *cwd* (shell=False). Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            shell=False,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise GitError(f"git could not be started in {cwd}: {exc}") from None
    except subprocess.CalledProcessError as exc:
        raise GitError(f"git {args[0]} failed in {cwd}: {(exc.stderr or '').strip()}") from None
    return result.stdout.strip()


class GitRepository:
    """A discovered git work tree.

    Use ``GitRepository.discover()`` rather than the constructor; discovery
    walks upward from the starting directory, so documents in nested
    directories or inside a submodule find their enclosing work tree.
    """

    def __init__(self, workdir: Path) -> None:
        self.workdir = Path(workdir)

    @classmethod
    def discover(cls, cwd: Path | str) -> GitRepository:
        """Return the repository enclosing *cwd*.

        Raises:
            GitError: if *cwd* is not inside a git work tree.
        """
        toplevel = _run_git(["rev-parse", "--show-toplevel"], Path(cwd))
        if not toplevel:
            raise GitError(f"Not a git repository: {cwd}")
        return cls(Path(toplevel))

    def latest_modified_ms(self, path: Path | str) -> int:
        """Return the commit time of the latest commit touching *path*, in epoch ms.

        Raises:
            GitError: if *path* is not tracked or the query fails.
        """
        out = _run_git(["log", "-1", "--format=%ct", "--", str(path)], self.workdir)
        if not out:
            raise GitError(f"{path} is not tracked by git")
        return int(out.splitlines()[0]) * 1000


class SharedRepository:
    """Process-wide, lazily discovered repository handle.

    Created once by the caller and handed to every resolver that needs git.
    Discovery runs at most once, in a worker thread, guarded by an
    ``asyncio.Lock``; concurrent callers all wait for that single attempt.
    A failed discovery is remembered and re-raised on every later ``get()``.
    """

    def __init__(
        self,
        cwd: Path | str,
        discover: Callable[[Path], GitRepository] = GitRepository.discover,
    ) -> None:
        self.cwd = Path(cwd)
        self._discover = discover
        self._lock = asyncio.Lock()
        self._repo: GitRepository | None = None
        self._error: GitError | None = None

    @property
    def is_open(self) -> bool:
        return self._repo is not None

    async def get(self) -> GitRepository:
        if self._repo is not None:
            return self._repo
        async with self._lock:
            if self._error is not None:
                raise self._error
            if self._repo is None:
                try:
                    self._repo = await asyncio.to_thread(self._discover, self.cwd)
                except GitError as exc:
                    self._error = exc
                    raise
        return self._repo

    async def latest_modified_ms(self, path: Path | str) -> int:
        repo = await self.get()
        return await asyncio.to_thread(repo.latest_modified_ms, path)
