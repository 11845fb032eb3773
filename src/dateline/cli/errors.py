"""dateline rich error messages with actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from dateline.cli.errors import err_path_not_found
    console.print(err_path_not_found("content/missing.md"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape

from dateline.dates.models import DateSource


def err_no_paths() -> str:
    """No PATH arguments given."""
    return (
        "[red]Error:[/] No documents specified.\n"
        "  Run:  dateline resolve content/  (files or directories)"
    )


def err_path_not_found(path: str) -> str:
    """A PATH argument does not exist."""
    return (
        f"[red]Error:[/] Path not found: '{escape(path)}'\n"
        "  Check the path, or use --cwd to set the directory relative paths start from."
    )


def err_invalid_priority(detail: str) -> str:
    """Priority list contains an unknown source."""
    allowed = ",".join(s.value for s in DateSource)
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        f"  Use:  --priority {allowed}  (any order or subset)"
    )


def err_config(detail: str) -> str:
    """dateline.yaml / global config could not be loaded."""
    return (
        f"[red]Error:[/] Invalid configuration.\n  {escape(detail)}\n"
        "  Fix dateline.yaml, for example:\n"
        "    dates:\n"
        "      priority: [frontmatter, git, filesystem]"
    )


def err_not_a_git_repo(cwd: str) -> str:
    """git is in the priority list but no repository encloses *cwd*."""
    return (
        f"[red]Error:[/] No git repository found at or above '{escape(cwd)}'.\n"
        "  Run:  git init  (or remove 'git' from the priority)\n"
        "    --priority frontmatter,filesystem"
    )


def err_invalid_frontmatter(detail: str) -> str:
    """Frontmatter YAML could not be parsed."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        "  Fix the YAML between the '---' lines at the top of the file."
    )


def err_stat_failed(path: str, detail: str) -> str:
    """A document disappeared or became unreadable during resolution."""
    return (
        f"[red]Error:[/] Cannot read file times for '{escape(path)}': {escape(detail)}\n"
        "  Check that the file still exists and is readable, then re-run dateline resolve."
    )


def warn_date(message: str) -> str:
    """Advisory date warning; the document is still processed."""
    return f"[yellow]Warning:[/] {escape(message)}"
