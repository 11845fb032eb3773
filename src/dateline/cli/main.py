"""dateline CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from dateline.cli.resolve import resolve_cmd
from dateline.cli.sources import sources_cmd


def _installed_version() -> str:
    try:
        return importlib.metadata.version("dateline")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dateline {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="dateline",
    help=(
        "dateline: created / modified / published dates for content documents.\n\n"
        "  dateline resolve  Resolve dates from frontmatter, git history and the filesystem.\n"
        "  dateline sources  Show the configured source priority."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """dateline: created / modified / published dates for content documents."""


app.command("resolve")(resolve_cmd)
app.command("sources")(sources_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed dateline version."""
    typer.echo(f"dateline {_installed_version()}")


if __name__ == "__main__":
    app()
