"""Severity classification of version bumps.

Pre-1.0 versions carry no compatibility guarantee, so the policy here is
stricter than plain semver below 1.0.0.
"""

from enum import Enum

from semver import Version

from .errors import PreconditionViolation


class BumpSeverity(str, Enum):
    """How disruptive a version change is expected to be for dependents."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


def classify(old: Version, new: Version) -> BumpSeverity:
    """Classify the bump from ``old`` to ``new``.

    Args:
        old: Current version
        new: Proposed version, must be strictly greater than ``old``

    Returns:
        Severity of the bump

    Raises:
        PreconditionViolation: If ``new <= old``, or if the versions differ
            only in pre-release or build metadata
    """
    if not new > old:
        raise PreconditionViolation(
            f"New version must be higher than current version ({old} -> {new})"
        )

    if old.major == 0 and old.minor == 0:
        # 0.0.x -> anything is always breaking
        return BumpSeverity.MAJOR

    if old.major == 0:
        if new.major > 0:
            # stabilization, 0.x -> 1.x
            return BumpSeverity.MAJOR
        if new.minor > old.minor:
            # 0.x -> 0.y where y > x
            return BumpSeverity.MAJOR
        # 0.x.y -> 0.x.z is surfaced as minor
        return BumpSeverity.MINOR

    if new.major > old.major:
        return BumpSeverity.MAJOR
    if new.minor > old.minor:
        return BumpSeverity.MINOR
    if new.patch > old.patch:
        return BumpSeverity.PATCH

    raise PreconditionViolation(
        f"Bumps that only change pre-release or build metadata are not supported ({old} -> {new})"
    )
