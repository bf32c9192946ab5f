"""Decide how a dependent's version requirement follows a bump."""

from dataclasses import dataclass

from semver import Version

from .bump_kind import BumpSeverity, classify
from .errors import PreconditionViolation
from .requirement import Comparator, Op, VersionRequirement


@dataclass(frozen=True)
class RequirementStale:
    """The requirement did not match the current version before the bump.

    Either the workspace was already inconsistent or the dependent pins an
    older line on purpose. The requirement is left alone.
    """


@dataclass(frozen=True)
class RequirementStillValid:
    """The existing requirement keeps admitting the new version."""


@dataclass(frozen=True)
class RequirementNeedsUpdate:
    """The requirement must be rewritten to ``new_requirement``."""

    new_requirement: VersionRequirement


ReconciliationOutcome = RequirementStale | RequirementStillValid | RequirementNeedsUpdate


def reconcile(
    requirement: VersionRequirement,
    old_version: Version,
    new_version: Version,
) -> ReconciliationOutcome:
    """Reconcile a dependent's requirement with a bump from old to new version."""
    if not requirement.matches(old_version):
        return RequirementStale()

    if requirement.matches(new_version):
        return RequirementStillValid()

    severity = classify(old_version, new_version)
    if severity in (BumpSeverity.PATCH, BumpSeverity.MINOR):
        return RequirementStillValid()
    return RequirementNeedsUpdate(minimal_requirement(new_version))


def minimal_requirement(version: Version) -> VersionRequirement:
    """Build the shortest caret requirement pinned to ``version``.

    ``1.0.0`` gives ``1``, ``1.1.0`` gives ``1.1`` and ``1.0.1`` gives ``1.0.1``.

    Raises:
        PreconditionViolation: If the version is a pre-release
    """
    if version.prerelease is not None:
        raise PreconditionViolation(f"Pre-release versions are not supported: {version}")

    if version.minor == 0 and version.patch == 0:
        comparator = Comparator(Op.CARET, version.major)
    elif version.patch == 0:
        comparator = Comparator(Op.CARET, version.major, version.minor)
    else:
        comparator = Comparator(Op.CARET, version.major, version.minor, version.patch)
    return VersionRequirement((comparator,))
