"""Core logic for wsbump.

The semver policy engine is pure and has no I/O:
- version: Version parsing on top of python-semver
- requirement: Cargo-style requirement parsing, matching and rendering
- bump_kind: Severity classification of a version bump
- reconcile: Requirement reconciliation and minimal requirements

Around it sit the workspace helpers:
- workspace: Member graph built from cargo metadata
- manifest: Format-preserving Cargo.toml edits
- changelog: Unreleased section extraction
- release: The release flow tying everything together
"""

from .bump_kind import BumpSeverity, classify
from .changelog import extract_unreleased, find_changelog, read_changelog
from .errors import ParseError, PreconditionViolation, UnsupportedOperator, WsbumpError
from .manifest import (
    ManifestError,
    set_dependency_requirement,
    set_package_version,
    update_manifest_file,
)
from .reconcile import (
    ReconciliationOutcome,
    RequirementNeedsUpdate,
    RequirementStale,
    RequirementStillValid,
    minimal_requirement,
    reconcile,
)
from .release import (
    ReleaseError,
    apply_release,
    commit_release,
    plan_dependent,
    validate_new_version,
)
from .requirement import Comparator, Op, VersionRequirement, requirement_to_string
from .version import is_release, parse_version
from .workspace import Dependent, Member, Workspace, build_workspace, member_label

__all__ = [
    "BumpSeverity",
    "Comparator",
    "Dependent",
    "ManifestError",
    "Member",
    "Op",
    "ParseError",
    "PreconditionViolation",
    "ReconciliationOutcome",
    "ReleaseError",
    "RequirementNeedsUpdate",
    "RequirementStale",
    "RequirementStillValid",
    "UnsupportedOperator",
    "VersionRequirement",
    "Workspace",
    "WsbumpError",
    "apply_release",
    "build_workspace",
    "classify",
    "commit_release",
    "extract_unreleased",
    "find_changelog",
    "is_release",
    "member_label",
    "minimal_requirement",
    "parse_version",
    "plan_dependent",
    "read_changelog",
    "reconcile",
    "requirement_to_string",
    "set_dependency_requirement",
    "set_package_version",
    "update_manifest_file",
    "validate_new_version",
]
