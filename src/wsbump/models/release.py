"""Report models for release runs."""

from typing import Literal

from pydantic import BaseModel, Field

Outcome = Literal["stale", "still-valid", "needs-update", "skipped"]


class DependentUpdate(BaseModel):
    """What happened to one dependent's requirement.

    Attributes:
        dependent: Name of the dependent workspace member
        current_requirement: Requirement before the release
        outcome: Reconciliation outcome, or ``skipped`` when not selected
        new_requirement: Rewritten requirement, set for ``needs-update`` only
        manifest_path: Dependent manifest, set when it was written
        error: Why the manifest could not be edited, if it could not
    """

    dependent: str
    current_requirement: str
    outcome: Outcome
    new_requirement: str | None = None
    manifest_path: str | None = None
    error: str | None = None


class ReleaseReport(BaseModel):
    """Summary of a release run."""

    package: str
    old_version: str
    new_version: str
    severity: Literal["patch", "minor", "major"]
    dependents: list[DependentUpdate] = Field(default_factory=list)
    files_written: list[str] = Field(default_factory=list)
    commit_message: str
    commit_sha: str | None = None
    dry_run: bool = False
