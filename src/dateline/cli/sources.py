"""dateline sources: show the effective source priority and where it came from."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from dateline.cli.errors import err_config
from dateline.config import ConfigError, load_config

console = Console()

_FIELDS = {
    "frontmatter": "created, modified, published",
    "git": "modified",
    "filesystem": "created, modified",
}


def sources_cmd(
    cwd: Annotated[
        Path,
        typer.Option("--cwd", help="Directory to look for dateline.yaml in."),
    ] = Path("."),
) -> None:
    """Show the configured date source priority."""
    try:
        cfg = load_config(project_dir=cwd)
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from None

    table = Table(title="Date Sources", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Source", style="bold")
    table.add_column("Provides")

    for i, source in enumerate(cfg.dates.priority, start=1):
        table.add_row(str(i), source.value, _FIELDS[source.value])

    console.print(table)
    console.print(f"\n  [dim]from: {cfg.priority_origin}[/]")
