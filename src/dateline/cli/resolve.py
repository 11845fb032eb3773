"""dateline resolve: print created / modified / published dates for documents.

Path expansion:
  file          → resolved as-is (any extension)
  directory     → *.md / *.markdown files in it (--recursive for subdirs)

Relative paths are taken relative to --cwd, which is also where git
discovery starts and where dateline.yaml is looked up.
"""

from __future__ import annotations

import asyncio
import json
import warnings
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from dateline.cli.errors import (
    err_config,
    err_invalid_frontmatter,
    err_invalid_priority,
    err_no_paths,
    err_not_a_git_repo,
    err_path_not_found,
    err_stat_failed,
    warn_date,
)
from dateline.config import ConfigError, load_config, parse_priority
from dateline.dates.git import GitError, SharedRepository
from dateline.dates.models import DateSource, Document, ResolvedDates
from dateline.dates.resolver import DateResolver
from dateline.frontmatter import FrontmatterError, read_document

console = Console()
err_console = Console(stderr=True)

_MD_EXTS = {".md", ".markdown"}


def resolve_cmd(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(help="Documents or directories of Markdown documents."),
    ] = None,
    priority: Annotated[
        str | None,
        typer.Option(
            "--priority",
            "-p",
            help="Comma-separated source order, e.g. 'git,frontmatter,filesystem'.",
        ),
    ] = None,
    cwd: Annotated[
        Path,
        typer.Option("--cwd", help="Working directory for relative paths, git and config."),
    ] = Path("."),
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Recurse into subdirectories."),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print one JSON object per document instead of a table."),
    ] = False,
) -> None:
    """Resolve the created, modified and published dates of documents."""
    if not paths:
        err_console.print(err_no_paths())
        raise typer.Exit(1)

    cwd = cwd.resolve()
    order = _effective_priority(priority, cwd)

    try:
        files = _expand_paths(paths, cwd, recursive=recursive)
    except FileNotFoundError as exc:
        err_console.print(err_path_not_found(str(exc.args[0])))
        raise typer.Exit(1) from None

    if not files:
        err_console.print("[yellow]No documents found.[/]")
        raise typer.Exit(0)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        documents = _read_documents(files, cwd)
        results = _run(documents, order, cwd)

    for w in caught:
        err_console.print(warn_date(str(w.message)))

    if as_json:
        for doc, dates in zip(documents, results):
            typer.echo(json.dumps({"path": str(doc.path), **dates.as_dict()}))
    else:
        _print_table(documents, results)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _effective_priority(option: str | None, cwd: Path) -> tuple[DateSource, ...]:
    """--priority if given, else the configured order."""
    try:
        if option is not None:
            return parse_priority(option, "--priority")
        return load_config(project_dir=cwd).dates.priority
    except ConfigError as exc:
        msg = err_invalid_priority(str(exc)) if option is not None else err_config(str(exc))
        err_console.print(msg)
        raise typer.Exit(1) from None


def _expand_paths(paths: list[Path], cwd: Path, recursive: bool) -> list[Path]:
    """Expand directories into Markdown files; keep paths relative where given.

    Raises:
        FileNotFoundError: with the offending path if it does not exist.
    """
    files: list[Path] = []
    for p in paths:
        full = p if p.is_absolute() else cwd / p
        if full.is_file():
            files.append(p)
        elif full.is_dir():
            pattern = "**/*" if recursive else "*"
            for child in sorted(full.glob(pattern)):
                if child.is_file() and child.suffix.lower() in _MD_EXTS:
                    files.append(p / child.relative_to(full))
        else:
            raise FileNotFoundError(str(p))
    # Same file named twice (e.g. file + its directory) is resolved once.
    return list(dict.fromkeys(files))


def _read_documents(files: list[Path], cwd: Path) -> list[Document]:
    documents: list[Document] = []
    for f in files:
        try:
            documents.append(read_document(f, cwd=cwd))
        except FrontmatterError as exc:
            err_console.print(err_invalid_frontmatter(str(exc)))
            raise typer.Exit(1) from None
        except (OSError, UnicodeDecodeError) as exc:
            err_console.print(err_stat_failed(str(f), str(exc)))
            raise typer.Exit(1) from None
    return documents


def _run(documents: list[Document], order: tuple[DateSource, ...], cwd: Path) -> list[ResolvedDates]:
    """Resolve all documents concurrently against one shared repository handle."""
    resolver = DateResolver(order, repository=SharedRepository(cwd))
    try:
        return asyncio.run(resolver.resolve_all(documents))
    except GitError:
        err_console.print(err_not_a_git_repo(str(cwd)))
        raise typer.Exit(1) from None
    except OSError as exc:
        err_console.print(err_stat_failed(str(getattr(exc, "filename", "") or ""), str(exc)))
        raise typer.Exit(1) from None


def _print_table(documents: list[Document], results: list[ResolvedDates]) -> None:
    table = Table(title="Document Dates", show_header=True, header_style="bold")
    table.add_column("File", style="bold")
    table.add_column("Created")
    table.add_column("Modified")
    table.add_column("Published")

    for doc, dates in zip(documents, results):
        table.add_row(
            str(doc.path),
            dates.created.isoformat(timespec="minutes"),
            dates.modified.isoformat(timespec="minutes"),
            dates.published.isoformat(timespec="minutes"),
        )

    console.print(table)
    console.print(f"\n  {len(results)} document(s)")
