"""Git operations for wsbump."""

import subprocess
from pathlib import Path

from ..constants import GIT_TIMEOUT


class GitError(Exception):
    """Git command failed."""

    pass


def run_git(*args: str, cwd: Path | None = None, check: bool = True) -> str:
    """Run a git command and return its stripped stdout.

    Args:
        *args: Arguments passed to git
        cwd: Working directory
        check: Raise GitError on a non-zero exit code

    Raises:
        GitError: If the command fails (with check=True), times out or git is missing
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {args[0]} timed out after {GIT_TIMEOUT} seconds") from e
    except FileNotFoundError:
        raise GitError("git not found in PATH") from None

    if check and result.returncode != 0:
        raise GitError(f"git {' '.join(args)} failed: {result.stderr.strip()}")
    return result.stdout.strip()


def get_repo_root(cwd: Path | None = None) -> Path:
    """Get the repository root directory."""
    try:
        return Path(run_git("rev-parse", "--show-toplevel", cwd=cwd))
    except GitError:
        raise GitError("Not a git repository") from None


def get_head_sha(cwd: Path | None = None) -> str:
    """Get the full SHA of HEAD."""
    return run_git("rev-parse", "HEAD", cwd=cwd)


def stage_files(files: list[str], cwd: Path | None = None) -> None:
    """Stage the given paths."""
    if files:
        run_git("add", "--", *files, cwd=cwd)


def has_staged_changes(cwd: Path | None = None, paths: list[str] | None = None) -> bool:
    """Return True if the index differs from HEAD, limited to ``paths`` when given."""
    cmd = ["git", "diff", "--staged", "--quiet"]
    if paths:
        cmd.extend(["--", *paths])
    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        timeout=GIT_TIMEOUT,
    )
    return result.returncode != 0


def commit(message: str, cwd: Path | None = None, paths: list[str] | None = None) -> str:
    """Commit staged changes with ``message`` and return the new SHA.

    With ``paths``, only those paths are committed; anything else already
    staged stays in the index.

    Raises:
        GitError: If nothing is staged or the commit fails
    """
    if not has_staged_changes(cwd=cwd, paths=paths):
        raise GitError("No staged changes to commit")
    if paths:
        run_git("commit", "-m", message, "--only", "--", *paths, cwd=cwd)
    else:
        run_git("commit", "-m", message, cwd=cwd)
    return get_head_sha(cwd=cwd)
