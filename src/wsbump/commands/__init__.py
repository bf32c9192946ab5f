"""CLI command implementations for wsbump.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .check import check_cmd, classify_cmd
from .init import init
from .list_members import list_members
from .release import release

__all__ = [
    "check_cmd",
    "classify_cmd",
    "init",
    "list_members",
    "release",
]
