"""Tests for dateline resolve."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dateline.cli.main import app

runner = CliRunner()

MTIME_NS = 1_710_000_000_000_000_000


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_doc(root: Path, rel: str, frontmatter: str = "", body: str = "Body.\n") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    text = f"---\n{frontmatter}---\n{body}" if frontmatter else body
    path.write_text(text, encoding="utf-8")
    os.utime(path, ns=(MTIME_NS, MTIME_NS))
    return path


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def _invoke(*args: str):
    return runner.invoke(app, ["resolve", *args])


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def test_resolve_frontmatter_dates_json(tmp_path: Path) -> None:
    _write_doc(
        tmp_path,
        "post.md",
        "date: 2024-09-09T00:00:00+02:00\n"
        "lastmod: 2024-09-10T12:30:00+02:00\n"
        "publishDate: 2024-10-01T08:00:00Z\n",
    )

    result = _invoke("post.md", "--cwd", str(tmp_path), "--priority", "frontmatter", "--json")
    assert result.exit_code == 0, result.output

    [row] = _json_lines(result.output)
    assert row["path"] == "post.md"
    assert row["created"] == "2024-09-09T00:00:00+02:00"
    assert row["modified"] == "2024-09-10T12:30:00+02:00"
    assert row["published"] == "2024-10-01T08:00:00+00:00"


def test_resolve_filesystem_mtime(tmp_path: Path) -> None:
    _write_doc(tmp_path, "plain.md")

    result = _invoke("plain.md", "--cwd", str(tmp_path), "--priority", "frontmatter,filesystem", "--json")
    assert result.exit_code == 0, result.output

    [row] = _json_lines(result.output)
    from datetime import datetime, timezone

    assert datetime.fromisoformat(row["modified"]) == datetime(2024, 3, 9, 16, tzinfo=timezone.utc)


def test_resolve_priority_from_config(tmp_path: Path) -> None:
    (tmp_path / "dateline.yaml").write_text("dates:\n  priority: [filesystem, frontmatter]\n")
    _write_doc(tmp_path, "post.md", "lastmod: 2020-01-01T00:00:00Z\n")

    result = _invoke("post.md", "--cwd", str(tmp_path), "--json")
    assert result.exit_code == 0, result.output

    [row] = _json_lines(result.output)
    assert not row["modified"].startswith("2020-01-01")


def test_priority_flag_overrides_config(tmp_path: Path) -> None:
    (tmp_path / "dateline.yaml").write_text("dates:\n  priority: [filesystem, frontmatter]\n")
    _write_doc(tmp_path, "post.md", "lastmod: 2020-01-01T00:00:00Z\n")

    result = _invoke("post.md", "--cwd", str(tmp_path), "-p", "frontmatter,filesystem", "--json")
    assert result.exit_code == 0, result.output

    [row] = _json_lines(result.output)
    assert row["modified"] == "2020-01-01T00:00:00+00:00"


def test_resolve_git_modified(git_repo: Path) -> None:
    result = _invoke("notes/tracked.md", "--cwd", str(git_repo), "--priority", "git", "--json")
    assert result.exit_code == 0, result.output

    [row] = _json_lines(result.output)
    from datetime import datetime, timezone

    assert datetime.fromisoformat(row["modified"]) == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_resolve_untracked_warns_and_falls_through(git_repo: Path) -> None:
    _write_doc(git_repo, "notes/draft.md")

    result = _invoke(
        "notes/draft.md", "--cwd", str(git_repo), "--priority", "git,filesystem", "--json"
    )
    assert result.exit_code == 0, result.output
    assert "Warning:" in result.output
    assert "tracked" in result.output

    [row] = _json_lines(result.output)
    from datetime import datetime, timezone

    assert datetime.fromisoformat(row["modified"]) == datetime(2024, 3, 9, 16, tzinfo=timezone.utc)


def test_invalid_date_warning_shown(tmp_path: Path) -> None:
    _write_doc(tmp_path, "post.md", "date: banana\n")

    result = _invoke("post.md", "--cwd", str(tmp_path), "--priority", "frontmatter", "--json")
    assert result.exit_code == 0, result.output
    assert "Warning:" in result.output
    assert "banana" in result.output
    assert len(_json_lines(result.output)) == 1


# ---------------------------------------------------------------------------
# Path expansion
# ---------------------------------------------------------------------------


def test_directory_expansion(tmp_path: Path) -> None:
    _write_doc(tmp_path, "content/a.md", "date: 2024-01-01\n")
    _write_doc(tmp_path, "content/notes.txt")
    _write_doc(tmp_path, "content/sub/b.markdown", "date: 2024-01-02\n")

    flat = _invoke("content", "--cwd", str(tmp_path), "-p", "frontmatter", "--json")
    assert flat.exit_code == 0, flat.output
    assert [r["path"] for r in _json_lines(flat.output)] == [str(Path("content/a.md"))]

    deep = _invoke("content", "--cwd", str(tmp_path), "-p", "frontmatter", "--json", "--recursive")
    assert deep.exit_code == 0, deep.output
    assert sorted(r["path"] for r in _json_lines(deep.output)) == [
        str(Path("content/a.md")),
        str(Path("content/sub/b.markdown")),
    ]


def test_same_file_listed_twice_resolved_once(tmp_path: Path) -> None:
    _write_doc(tmp_path, "a.md", "date: 2024-01-01\n")

    result = _invoke("a.md", "a.md", "--cwd", str(tmp_path), "-p", "frontmatter", "--json")
    assert result.exit_code == 0, result.output
    assert len(_json_lines(result.output)) == 1


def test_empty_directory(tmp_path: Path) -> None:
    (tmp_path / "empty").mkdir()
    result = _invoke("empty", "--cwd", str(tmp_path), "-p", "frontmatter")
    assert result.exit_code == 0
    assert "No documents found" in result.output


# ---------------------------------------------------------------------------
# Table output
# ---------------------------------------------------------------------------


def test_table_output(tmp_path: Path) -> None:
    _write_doc(tmp_path, "post.md", "date: 2024-09-09\n")

    result = _invoke("post.md", "--cwd", str(tmp_path), "-p", "frontmatter,filesystem")
    assert result.exit_code == 0, result.output
    assert "Document Dates" in result.output
    assert "1 document(s)" in result.output


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_no_paths_exits_1() -> None:
    result = _invoke()
    assert result.exit_code == 1
    assert "No documents specified" in result.output


def test_missing_path_exits_1(tmp_path: Path) -> None:
    result = _invoke("missing.md", "--cwd", str(tmp_path))
    assert result.exit_code == 1
    assert "Path not found" in result.output


def test_unknown_priority_exits_1(tmp_path: Path) -> None:
    _write_doc(tmp_path, "post.md")
    result = _invoke("post.md", "--cwd", str(tmp_path), "--priority", "frontmatter,bogus")
    assert result.exit_code == 1
    assert "bogus" in result.output


def test_invalid_config_exits_1(tmp_path: Path) -> None:
    (tmp_path / "dateline.yaml").write_text("dates:\n  priority: [frontmatter, bogus]\n")
    _write_doc(tmp_path, "post.md")
    result = _invoke("post.md", "--cwd", str(tmp_path))
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_malformed_config_yaml_exits_1(tmp_path: Path) -> None:
    (tmp_path / "dateline.yaml").write_text("dates:\n  priority: [git\n")
    _write_doc(tmp_path, "post.md")
    result = _invoke("post.md", "--cwd", str(tmp_path))
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_invalid_frontmatter_exits_1(tmp_path: Path) -> None:
    _write_doc(tmp_path, "bad.md", "title: [unclosed\n")
    result = _invoke("bad.md", "--cwd", str(tmp_path), "-p", "frontmatter")
    assert result.exit_code == 1
    assert "YAML" in result.output


def test_git_outside_repository_exits_1(no_git: Path) -> None:
    _write_doc(no_git, "post.md")
    result = _invoke("post.md", "--cwd", str(no_git), "-p", "git,filesystem")
    assert result.exit_code == 1
    assert "No git repository" in result.output


def test_git_outside_repository_ignored_when_not_configured(no_git: Path) -> None:
    _write_doc(no_git, "post.md")
    result = _invoke("post.md", "--cwd", str(no_git), "-p", "frontmatter,filesystem", "--json")
    assert result.exit_code == 0, result.output
