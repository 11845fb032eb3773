"""Shared pytest fixtures."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's ~/.dateline/config.yaml and DATELINE_PRIORITY out of tests."""
    missing = tmp_path_factory.mktemp("global") / "config.yaml"
    monkeypatch.setattr("dateline.config._GLOBAL_CONFIG_PATH", missing)
    monkeypatch.delenv("DATELINE_PRIORITY", raising=False)


@pytest.fixture
def no_git(tmp_path, monkeypatch):
    """Stop git discovery from walking above tmp_path into an enclosing repo."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    return tmp_path


def git(repo: Path, *args: str, env: dict[str, str] | None = None) -> None:
    subprocess.run(
        ["git", "-C", str(repo), *args],
        check=True,
        capture_output=True,
        env={**os.environ, **(env or {})},
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A git repo with one tracked file, notes/tracked.md, committed at a fixed time."""
    repo = tmp_path / "repo"
    repo.mkdir()
    subprocess.run(["git", "init", str(repo)], check=True, capture_output=True)
    git(repo, "config", "user.email", "test@test.com")
    git(repo, "config", "user.name", "Test")
    (repo / "notes").mkdir()
    (repo / "notes" / "tracked.md").write_text("---\ntitle: Tracked\n---\nBody.\n")
    git(repo, "add", ".")
    git(
        repo,
        "commit",
        "-m",
        "Add tracked note",
        env={
            "GIT_AUTHOR_DATE": "2024-01-02T03:04:05+00:00",
            "GIT_COMMITTER_DATE": "2024-01-02T03:04:05+00:00",
        },
    )
    return repo
