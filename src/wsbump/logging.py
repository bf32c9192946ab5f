"""Logging configuration for wsbump CLI."""

import logging
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO = sys.stderr,
    debug: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=warnings and up, 1=info, 2+=debug)
        quiet: Only log errors (takes precedence over debug/verbosity)
        no_color: Disable colored output
        stream: Output stream for logs
        debug: Enable debug logging (equivalent to -vv, ignored if quiet is set)

    Returns:
        Console for user-facing output

    Note:
        Reconciliation warnings (stale requirements, unwritable manifests) are
        logged at WARNING so they show without -v.
    """
    if quiet:
        level = logging.ERROR
    elif debug or verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    log_console = Console(
        file=stream,
        force_terminal=False if no_color else None,
        no_color=no_color,
    )

    handler = RichHandler(
        console=log_console,
        show_time=debug or verbosity >= 2,
        show_path=debug or verbosity >= 2,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    return Console(no_color=no_color)
