"""Init command implementation."""

from pathlib import Path
from typing import Annotated

import typer

from ..config import write_config_template
from ..constants import CONFIG_FILE_NAME
from ..output import get_output_context


def init(
    path: Annotated[
        Path,
        typer.Option("--path", help="Workspace root to write the config into"),
    ] = Path("."),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config"),
    ] = False,
) -> None:
    """Write a default .wsbump.toml into the workspace root."""
    ctx = get_output_context()
    config_path = path / CONFIG_FILE_NAME

    if not path.is_dir():
        ctx.error(f"Directory not found: {path}")
        raise typer.Exit(1)

    if config_path.exists() and not force:
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        return

    if ctx.dry_run:
        ctx.print(f"[cyan][DRY RUN][/cyan] Would create config: {config_path}")
        return

    write_config_template(path)
    ctx.success(f"Created config template: {config_path}", {"path": str(config_path)})
