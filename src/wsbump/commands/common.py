"""Helpers shared by wsbump commands."""

from pathlib import Path

import typer

from ..config import ConfigError, WsbumpConfig, load_config
from ..core import ParseError, Workspace, build_workspace
from ..output import OutputContext
from ..services import CargoError, run_cargo_metadata

# Exit codes
EXIT_INVALID_INPUT = 1
EXIT_CONFIG = 2
EXIT_CARGO = 3
EXIT_MANIFEST = 4
EXIT_GIT = 5
EXIT_PRECONDITION = 10


def load_workspace(
    ctx: OutputContext,
    manifest_path: Path | None,
) -> tuple[Workspace, WsbumpConfig]:
    """Load the workspace graph and its config, exiting on failure."""
    try:
        metadata = run_cargo_metadata(manifest_path=manifest_path)
    except CargoError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_CARGO) from None

    try:
        workspace = build_workspace(metadata)
    except ParseError as e:
        ctx.error(f"Invalid member version: {e}")
        raise typer.Exit(EXIT_CARGO) from None

    try:
        config = load_config(workspace.root)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_CONFIG) from None

    return workspace, config
