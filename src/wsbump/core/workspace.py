"""Workspace member graph built from cargo metadata."""

from dataclasses import dataclass, field
from pathlib import Path

from semver import Version

from ..models import CargoDependency, CargoMetadata
from .version import parse_version


@dataclass(frozen=True)
class Dependent:
    """A workspace member that depends on another member."""

    name: str
    dependency: CargoDependency


@dataclass
class Member:
    """A workspace member with its edges to other members.

    Attributes:
        name: Package name
        version: Current package version
        manifest_path: Path to the member's Cargo.toml
        dependencies: Normal path dependencies as (name, requirement) pairs
        dependents: Members that depend on this one
    """

    name: str
    version: Version
    manifest_path: Path
    dependencies: list[tuple[str, str]] = field(default_factory=list)
    dependents: list[Dependent] = field(default_factory=list)

    @property
    def package_dir(self) -> Path:
        """Directory holding the manifest."""
        return self.manifest_path.parent


@dataclass
class Workspace:
    """All members of a Cargo workspace, in workspace order."""

    root: Path
    members: list[Member] = field(default_factory=list)

    def get(self, name: str) -> Member:
        """Get a member by package name.

        Raises:
            KeyError: If no member has that name
        """
        for member in self.members:
            if member.name == name:
                return member
        raise KeyError(name)

    @property
    def names(self) -> list[str]:
        """Member names in workspace order."""
        return [member.name for member in self.members]


def build_workspace(metadata: CargoMetadata) -> Workspace:
    """Build the member graph from cargo metadata.

    Raises:
        ParseError: If a member's version is not valid semver
    """
    packages = {package.id: package for package in metadata.packages}
    member_packages = [packages[member_id] for member_id in metadata.workspace_members]

    members = []
    for package in member_packages:
        dependencies = [
            (dep.name, dep.req)
            for dep in package.dependencies
            if dep.path is not None and dep.kind is None
        ]

        dependents = []
        for other in member_packages:
            dep = next((d for d in other.dependencies if d.name == package.name), None)
            if dep is not None:
                dependents.append(Dependent(name=other.name, dependency=dep))

        members.append(
            Member(
                name=package.name,
                version=parse_version(package.version),
                manifest_path=Path(package.manifest_path),
                dependencies=dependencies,
                dependents=dependents,
            )
        )

    return Workspace(root=Path(metadata.workspace_root), members=members)


def member_label(member: Member, has_changelog: bool = False) -> str:
    """Render a one-line summary of a member for selection menus.

    Example: ``core 1.2.3 (dependencies: 1, dependents: 2, changelog)``
    """
    details = []
    if member.dependencies:
        details.append(f"dependencies: {len(member.dependencies)}")
    if member.dependents:
        details.append(f"dependents: {len(member.dependents)}")
    if has_changelog:
        details.append("changelog")

    label = f"{member.name} {member.version}"
    if details:
        label += f" ({', '.join(details)})"
    return label
