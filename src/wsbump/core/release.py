"""Release flow: bump a member and reconcile its dependents."""

import logging
from pathlib import Path

from semver import Version

from ..config import WsbumpConfig
from ..models import DependentUpdate, ReleaseReport
from ..services import GitError, commit, stage_files
from .bump_kind import classify
from .errors import WsbumpError
from .manifest import (
    ManifestError,
    set_dependency_requirement,
    set_package_version,
    update_manifest_file,
)
from .reconcile import RequirementNeedsUpdate, RequirementStale, reconcile
from .requirement import VersionRequirement, requirement_to_string
from .version import is_release, parse_version
from .workspace import Dependent, Member

logger = logging.getLogger(__name__)


class ReleaseError(WsbumpError):
    """Release input was rejected."""

    pass


def validate_new_version(text: str, current: Version) -> Version:
    """Parse and check a proposed version for ``current``.

    Raises:
        ParseError: If the text is not valid semver
        ReleaseError: If the version is a pre-release, carries build
            metadata, or is not higher than ``current``
    """
    new_version = parse_version(text)
    if not is_release(new_version):
        raise ReleaseError("Pre-release and build metadata versions are not supported")
    if new_version <= current:
        raise ReleaseError("New version must be higher than current version")
    return new_version


def plan_dependent(dependent: Dependent, old_version: Version, new_version: Version) -> DependentUpdate:
    """Reconcile one dependent's requirement without touching any file."""
    current = dependent.dependency.req
    outcome = reconcile(VersionRequirement.parse(current), old_version, new_version)

    if isinstance(outcome, RequirementStale):
        logger.warning(
            "%s requires %s which does not match %s, not touching it",
            dependent.name,
            current,
            old_version,
        )
        return DependentUpdate(dependent=dependent.name, current_requirement=current, outcome="stale")

    if isinstance(outcome, RequirementNeedsUpdate):
        return DependentUpdate(
            dependent=dependent.name,
            current_requirement=current,
            outcome="needs-update",
            new_requirement=requirement_to_string(outcome.new_requirement),
        )

    logger.info("%s requirement %s is compatible with %s", dependent.name, current, new_version)
    return DependentUpdate(
        dependent=dependent.name, current_requirement=current, outcome="still-valid"
    )


def apply_release(
    member: Member,
    new_version: Version,
    selected: list[Dependent],
    manifests: dict[str, Path],
    config: WsbumpConfig,
    dry_run: bool = False,
) -> ReleaseReport:
    """Write the new version and update dependents that need it.

    Every selected dependent is planned before the first file is written, so
    an unparsable requirement leaves the workspace untouched.

    Args:
        member: Member being released
        new_version: Validated new version
        selected: Dependents whose requirements should be reconciled
        manifests: Manifest path of every workspace member, by name
        config: wsbump configuration
        dry_run: Decide everything but write nothing

    Returns:
        Report of every decision and written file

    Raises:
        ParseError: If a selected dependent's requirement cannot be parsed
        ManifestError: If the member's own version cannot be updated
    """
    report = ReleaseReport(
        package=member.name,
        old_version=str(member.version),
        new_version=str(new_version),
        severity=classify(member.version, new_version).value,
        commit_message=config.release.format_commit_message(member.name, str(new_version)),
        dry_run=dry_run,
    )

    selected_names = {dependent.name for dependent in selected}
    planned: list[tuple[Dependent, DependentUpdate]] = []
    for dependent in member.dependents:
        if dependent.name in selected_names:
            update = plan_dependent(dependent, member.version, new_version)
            planned.append((dependent, update))
        else:
            update = DependentUpdate(
                dependent=dependent.name,
                current_requirement=dependent.dependency.req,
                outcome="skipped",
            )
        report.dependents.append(update)

    if not dry_run:
        update_manifest_file(
            member.manifest_path, lambda text: set_package_version(text, str(new_version))
        )
        report.files_written.append(str(member.manifest_path))

    for dependent, update in planned:
        if update.outcome != "needs-update" or update.new_requirement is None:
            continue

        logger.info(
            "in %s manifest, updating %s from %s => %s",
            dependent.name,
            member.name,
            update.current_requirement,
            update.new_requirement,
        )
        if dry_run:
            continue

        manifest_path = manifests[dependent.name]
        dependency = dependent.dependency
        requirement = update.new_requirement
        try:
            update_manifest_file(
                manifest_path,
                lambda text: set_dependency_requirement(
                    text, dependency.manifest_key, requirement, table=dependency.table
                ),
            )
        except ManifestError as e:
            logger.warning("Could not update %s: %s", manifest_path, e)
            update.error = str(e)
            continue

        update.manifest_path = str(manifest_path)
        report.files_written.append(str(manifest_path))

    return report


def commit_release(report: ReleaseReport, repo_root: Path) -> str:
    """Stage the files a release wrote and commit only those.

    Changes the user staged beforehand stay in the index.

    Returns:
        SHA of the new commit

    Raises:
        GitError: If nothing was written, or staging or committing fails
    """
    if not report.files_written:
        raise GitError("Release wrote no files to commit")
    stage_files(report.files_written, cwd=repo_root)
    sha = commit(report.commit_message, cwd=repo_root, paths=report.files_written)
    report.commit_sha = sha
    return sha
