"""Models for the subset of ``cargo metadata`` output wsbump reads."""

from typing import Literal

from pydantic import BaseModel, Field


class CargoDependency(BaseModel):
    """A dependency entry of a package."""

    name: str
    req: str = "*"
    kind: Literal["dev", "build"] | None = None  # None is a normal dependency
    rename: str | None = None
    path: str | None = None  # Set for path dependencies only
    optional: bool = False

    @property
    def manifest_key(self) -> str:
        """Key of this dependency in the manifest table."""
        return self.rename or self.name

    @property
    def table(self) -> str:
        """Manifest table this dependency is declared in."""
        if self.kind is None:
            return "dependencies"
        return f"{self.kind}-dependencies"


class CargoPackage(BaseModel):
    """A package known to cargo."""

    id: str
    name: str
    version: str
    manifest_path: str
    dependencies: list[CargoDependency] = Field(default_factory=list)


class CargoMetadata(BaseModel):
    """Root of ``cargo metadata --format-version 1`` output."""

    packages: list[CargoPackage] = Field(default_factory=list)
    workspace_members: list[str] = Field(default_factory=list)
    workspace_root: str
