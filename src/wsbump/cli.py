"""wsbump CLI: release a workspace member and propagate it to dependents."""

import sys

import typer

from wsbump import __version__

from .commands import check_cmd, classify_cmd, init, list_members, release
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wsbump {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="wsbump",
    help="Release a Cargo workspace member and update the requirements of its dependents",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would change without writing any file",
    ),
) -> None:
    """wsbump - semver-aware releases for Cargo workspaces."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(
        OutputContext(
            console=console,
            json_mode=json_output,
            dry_run=dry_run,
            interactive=sys.stdin.isatty() and sys.stdout.isatty() and not json_output,
        )
    )


app.command()(init)
app.command("list")(list_members)
app.command()(release)
app.command("classify")(classify_cmd)
app.command("check")(check_cmd)


if __name__ == "__main__":
    app()
