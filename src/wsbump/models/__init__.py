"""Pydantic data models for wsbump.

This package defines the data structures used by the I/O layer:
- ``cargo metadata`` output (CargoMetadata, CargoPackage, CargoDependency)
- Release run reports (ReleaseReport, DependentUpdate)

The semver policy engine in ``wsbump.core`` uses plain frozen values and
does not depend on these models.

Example:
    >>> from wsbump.models import CargoMetadata
    >>> CargoMetadata.model_validate_json(output).workspace_members
"""

from .metadata import CargoDependency, CargoMetadata, CargoPackage
from .release import DependentUpdate, ReleaseReport

__all__ = [
    "CargoDependency",
    "CargoMetadata",
    "CargoPackage",
    "DependentUpdate",
    "ReleaseReport",
]
