"""List command implementation."""

from pathlib import Path
from typing import Annotated

import typer

from ..core import find_changelog, member_label
from ..output import get_output_context
from .common import load_workspace


def list_members(
    manifest_path: Annotated[
        Path | None,
        typer.Option("--manifest-path", help="Path to the workspace Cargo.toml"),
    ] = None,
) -> None:
    """List workspace members with their dependencies and dependents."""
    ctx = get_output_context()
    workspace, config = load_workspace(ctx, manifest_path)

    entries = []
    for member in workspace.members:
        changelog = find_changelog(member.package_dir, config.changelog.file_names)
        entries.append(
            {
                "name": member.name,
                "version": str(member.version),
                "manifest_path": str(member.manifest_path),
                "dependencies": [
                    {"name": name, "req": req} for name, req in member.dependencies
                ],
                "dependents": [
                    {"name": dep.name, "req": dep.dependency.req} for dep in member.dependents
                ],
                "changelog": str(changelog) if changelog else None,
                "label": member_label(member, has_changelog=changelog is not None),
            }
        )

    if ctx.json_mode:
        ctx.print_json({"workspace_root": str(workspace.root), "members": entries})
        return

    if not entries:
        ctx.warn("No workspace members found")
        return

    ctx.print(f"[bold]Workspace:[/bold] {workspace.root}")
    for entry in entries:
        ctx.print(f"  {entry['label']}")
