"""Policy commands: classify a bump and check a requirement against it."""

from typing import Annotated

import typer

from ..core import (
    ParseError,
    PreconditionViolation,
    RequirementNeedsUpdate,
    RequirementStale,
    UnsupportedOperator,
    VersionRequirement,
    classify,
    parse_version,
    reconcile,
    requirement_to_string,
)
from ..output import get_output_context
from .common import EXIT_INVALID_INPUT, EXIT_PRECONDITION


def classify_cmd(
    old: Annotated[str, typer.Argument(help="Current version")],
    new: Annotated[str, typer.Argument(help="New version")],
) -> None:
    """Classify the severity of a version bump."""
    ctx = get_output_context()

    try:
        old_version = parse_version(old)
        new_version = parse_version(new)
    except ParseError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_INVALID_INPUT) from None

    try:
        severity = classify(old_version, new_version)
    except PreconditionViolation as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_PRECONDITION) from None

    ctx.result(
        {"old": old, "new": new, "severity": severity.value},
        f"{old} -> {new}: [bold]{severity.value}[/bold]",
    )


def check_cmd(
    requirement: Annotated[str, typer.Argument(help="Dependent's version requirement")],
    old: Annotated[str, typer.Argument(help="Current version of the dependency")],
    new: Annotated[str, typer.Argument(help="New version of the dependency")],
) -> None:
    """Check whether a requirement must change for a bump."""
    ctx = get_output_context()

    try:
        req = VersionRequirement.parse(requirement)
        old_version = parse_version(old)
        new_version = parse_version(new)
    except UnsupportedOperator as e:
        ctx.error(str(e), {"operator": e.operator})
        raise typer.Exit(EXIT_INVALID_INPUT) from None
    except ParseError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_INVALID_INPUT) from None

    try:
        outcome = reconcile(req, old_version, new_version)
    except PreconditionViolation as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_PRECONDITION) from None

    if isinstance(outcome, RequirementStale):
        ctx.result(
            {"requirement": requirement, "outcome": "stale"},
            f"[yellow]{requirement} does not match {old}, requirement is stale[/yellow]",
        )
    elif isinstance(outcome, RequirementNeedsUpdate):
        new_requirement = requirement_to_string(outcome.new_requirement)
        ctx.result(
            {
                "requirement": requirement,
                "outcome": "needs-update",
                "new_requirement": new_requirement,
            },
            f"{requirement} => [bold]{new_requirement}[/bold]",
        )
    else:
        ctx.result(
            {"requirement": requirement, "outcome": "still-valid"},
            f"[green]{requirement} still admits {new}[/green]",
        )
