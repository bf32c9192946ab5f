"""Output formatting for wsbump CLI."""

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


@dataclass
class OutputContext:
    """Context for output formatting.

    Attributes:
        console: Console for human-readable output
        json_mode: Emit machine-readable JSON on stdout instead of text
        dry_run: Commands decide everything but write nothing
        interactive: Menus and prompts may be shown
    """

    console: Console
    json_mode: bool = False
    dry_run: bool = False
    interactive: bool = True

    def print(self, message: str, style: str | None = None) -> None:
        """Print message unless in JSON mode."""
        if not self.json_mode:
            self.console.print(message, style=style)

    def panel(self, body: str, title: str) -> None:
        """Print a framed block of text unless in JSON mode."""
        if not self.json_mode:
            self.console.print(Panel(Text(body), title=title, title_align="left"))

    def warn(self, message: str) -> None:
        """Print a warning unless in JSON mode."""
        self.print(f"[yellow]{message}[/yellow]")

    def print_json(self, data: dict[str, Any]) -> None:
        """Print JSON data, only in JSON mode."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))

    def result(self, data: dict[str, Any], message: str = "") -> None:
        """Print JSON data in JSON mode, otherwise the message."""
        if self.json_mode:
            self.print_json(data)
        elif message:
            self.console.print(message)

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print error in appropriate format."""
        if self.json_mode:
            self.print_json({"error": message, **(data or {})})
        else:
            self.console.print(f"[red]Error: {message}[/red]")

    def success(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print success message in appropriate format."""
        if self.json_mode:
            self.print_json({"success": message, **(data or {})})
        else:
            self.console.print(f"[green]{message}[/green]")


# Set by the cli.py main callback
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Falls back to a non-interactive text context when the CLI callback has
    not run, as when commands are called directly.
    """
    if _ctx is None:
        return OutputContext(Console(), interactive=False)
    return _ctx


def set_output_context(ctx: OutputContext | None) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx
