"""Release command implementation.

Bumps one workspace member and reconciles the version requirements of the
members depending on it. Every choice can be given as an option for
CI/automation; missing choices are prompted for with arrow-key menus when
running on a terminal.
"""

from pathlib import Path
from typing import Annotated

import typer
from semver import Version
from simple_term_menu import TerminalMenu

from ..config import WsbumpConfig
from ..core import (
    Dependent,
    ManifestError,
    Member,
    ParseError,
    PreconditionViolation,
    ReleaseError,
    Workspace,
    apply_release,
    commit_release,
    extract_unreleased,
    find_changelog,
    member_label,
    read_changelog,
    validate_new_version,
)
from ..models import ReleaseReport
from ..output import OutputContext, get_output_context
from ..services import GitError, get_repo_root
from .common import (
    EXIT_GIT,
    EXIT_INVALID_INPUT,
    EXIT_MANIFEST,
    EXIT_PRECONDITION,
    load_workspace,
)


def release(
    package: Annotated[
        str | None,
        typer.Option("--package", "-p", help="Workspace member to release"),
    ] = None,
    new_version: Annotated[
        str | None,
        typer.Option("--new-version", "-n", help="Version to release"),
    ] = None,
    dependents: Annotated[
        list[str] | None,
        typer.Option(
            "--dependent",
            "-d",
            help="Dependent whose requirement should be updated (repeatable)",
        ),
    ] = None,
    all_dependents: Annotated[
        bool,
        typer.Option("--all-dependents", help="Update every dependent"),
    ] = False,
    commit: Annotated[
        bool,
        typer.Option("--commit", help="Commit the changed manifests"),
    ] = False,
    manifest_path: Annotated[
        Path | None,
        typer.Option("--manifest-path", help="Path to the workspace Cargo.toml"),
    ] = None,
) -> None:
    """Release a new version of a workspace member and update its dependents."""
    ctx = get_output_context()
    workspace, config = load_workspace(ctx, manifest_path)

    member = _choose_member(ctx, workspace, config, package)
    ctx.print(f"You chose: [bold]{member.name}[/bold]")

    changelog = read_changelog(member.package_dir, config.changelog.file_names)
    if changelog is not None:
        unreleased = extract_unreleased(
            changelog, str(member.version), config.changelog.unreleased_heading
        )
        if unreleased:
            ctx.panel(unreleased, title=f"Changes since {member.version}")

    version = _choose_version(ctx, member, new_version)
    selected = _choose_dependents(ctx, member, version, config, dependents, all_dependents)

    manifests = {m.name: m.manifest_path for m in workspace.members}
    try:
        report = apply_release(member, version, selected, manifests, config, dry_run=ctx.dry_run)
    except ManifestError as e:
        ctx.error(f"Could not update {member.manifest_path}: {e}")
        raise typer.Exit(EXIT_MANIFEST) from None
    except PreconditionViolation as e:
        ctx.error(f"Internal error: {e}")
        raise typer.Exit(EXIT_PRECONDITION) from None
    except ParseError as e:
        ctx.error(f"Invalid dependency requirement: {e}")
        raise typer.Exit(EXIT_INVALID_INPUT) from None

    _print_report(ctx, report)

    if (commit or config.git.commit) and not ctx.dry_run:
        try:
            sha = commit_release(report, get_repo_root(workspace.root))
        except GitError as e:
            ctx.error(f"Commit failed: {e}")
            raise typer.Exit(EXIT_GIT) from None
        ctx.print(f"[green]Committed:[/green] {sha[:8]} - {report.commit_message}")

    ctx.print_json(report.model_dump())


def _choose_member(
    ctx: OutputContext,
    workspace: Workspace,
    config: WsbumpConfig,
    package: str | None,
) -> Member:
    if package is not None:
        try:
            return workspace.get(package)
        except KeyError:
            ctx.error(
                f"{package} is not a workspace member",
                {"members": workspace.names},
            )
            raise typer.Exit(EXIT_INVALID_INPUT) from None

    if not ctx.interactive:
        ctx.error("--package is required when not running interactively")
        raise typer.Exit(EXIT_INVALID_INPUT)

    if not workspace.members:
        ctx.error("No workspace members found")
        raise typer.Exit(EXIT_INVALID_INPUT)

    labels = [
        member_label(
            m,
            has_changelog=find_changelog(m.package_dir, config.changelog.file_names) is not None,
        )
        for m in workspace.members
    ]
    menu = TerminalMenu(
        labels,
        title="What package do you want to bump?",
        clear_screen=False,
        cycle_cursor=True,
    )
    selection = menu.show()

    # show() returns int for single-select, None on escape/ctrl-c
    if not isinstance(selection, int):
        ctx.warn("Release cancelled.")
        raise typer.Exit(0)
    return workspace.members[selection]


def _choose_version(ctx: OutputContext, member: Member, new_version: str | None) -> Version:
    if new_version is not None:
        try:
            return validate_new_version(new_version, member.version)
        except (ParseError, ReleaseError) as e:
            ctx.error(str(e))
            raise typer.Exit(EXIT_INVALID_INPUT) from None

    if not ctx.interactive:
        ctx.error("--new-version is required when not running interactively")
        raise typer.Exit(EXIT_INVALID_INPUT)

    while True:
        text = typer.prompt(f"New version (current {member.version})")
        try:
            return validate_new_version(text, member.version)
        except (ParseError, ReleaseError) as e:
            ctx.print(f"[red]{e}[/red]")


def _choose_dependents(
    ctx: OutputContext,
    member: Member,
    version: Version,
    config: WsbumpConfig,
    names: list[str] | None,
    all_dependents: bool,
) -> list[Dependent]:
    if not member.dependents:
        return []

    if all_dependents:
        return list(member.dependents)

    if names:
        known = {dependent.name: dependent for dependent in member.dependents}
        unknown = [name for name in names if name not in known]
        if unknown:
            ctx.error(
                f"Not dependents of {member.name}: {', '.join(unknown)}",
                {"dependents": list(known)},
            )
            raise typer.Exit(EXIT_INVALID_INPUT)
        return [known[name] for name in dict.fromkeys(names)]

    if not ctx.interactive:
        return list(member.dependents) if config.release.select_all_dependents else []

    count = len(member.dependents)
    ctx.print(f"There are {count} workspace members that depend on {member.name}.")
    items = [f"{d.name} : {d.dependency.req}" for d in member.dependents]
    menu = TerminalMenu(
        items,
        title=(
            "Select the workspace members whose version requirement "
            f"should be updated to {version}:"
        ),
        multi_select=True,
        show_multi_select_hint=True,
        multi_select_select_on_accept=False,
        multi_select_empty_ok=True,
        preselected_entries=list(range(count)) if config.release.select_all_dependents else None,
        clear_screen=False,
    )
    selection = menu.show()

    if selection is None:
        ctx.warn("Release cancelled.")
        raise typer.Exit(0)
    return [member.dependents[i] for i in selection]


def _print_report(ctx: OutputContext, report: ReleaseReport) -> None:
    prefix = "[cyan][DRY RUN][/cyan] Would bump" if report.dry_run else "Bumped"
    ctx.print(
        f"{prefix} {report.package} {report.old_version} -> {report.new_version} "
        f"({report.severity})"
    )

    for update in report.dependents:
        if update.outcome == "skipped":
            ctx.print(f"  [dim]{update.dependent}: not selected[/dim]")
        elif update.outcome == "stale":
            ctx.print(
                f"  [yellow]{update.dependent}: {update.current_requirement} does not match "
                f"{report.old_version}, not touching it[/yellow]"
            )
        elif update.outcome == "still-valid":
            ctx.print(
                f"  [dim]{update.dependent}: {update.current_requirement} is compatible, "
                "leaving it alone[/dim]"
            )
        elif update.error:
            ctx.print(f"  [red]{update.dependent}: could not update manifest: {update.error}[/red]")
        else:
            ctx.print(
                f"  in {update.dependent} manifest, updating {report.package} from "
                f"{update.current_requirement} => {update.new_requirement}"
            )

    ctx.print(f"Recommended commit message: [bold]{report.commit_message}[/bold]")
