"""External service integrations for wsbump.

This package provides interfaces to external tools:
- cargo: Workspace metadata
- git: Staging and committing release changes
"""

from .cargo import CargoError, run_cargo_metadata
from .git import (
    GitError,
    commit,
    get_head_sha,
    get_repo_root,
    has_staged_changes,
    run_git,
    stage_files,
)

__all__ = [
    "CargoError",
    "GitError",
    "commit",
    "get_head_sha",
    "get_repo_root",
    "has_staged_changes",
    "run_cargo_metadata",
    "run_git",
    "stage_files",
]
