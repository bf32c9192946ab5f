"""Shared test fixtures for wsbump tests."""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wsbump.models import CargoMetadata

ENGINE_MANIFEST = """[package]
name = "engine"
version = "1.3.4" # keep in sync with the changelog
edition = "2021"
"""

APP_MANIFEST = """[package]
name = "app"
version = "0.2.0"
edition = "2021"

[dependencies]
# the engine crate
engine = { version = "1", path = "../engine" }
serde = "1"
"""

TOOL_MANIFEST = """[package]
name = "tool"
version = "0.1.0"
edition = "2021"

[dependencies.engine]
path = "../engine"
version = '1.3'

[dev-dependencies]
app = { path = "../app" }
"""

LEGACY_MANIFEST = """[package]
name = "legacy"
version = "0.0.1"
edition = "2021"

[dependencies]
engine-old = { package = "engine", version = "0.9", path = "../engine" }
"""

ENGINE_CHANGELOG = """# Changelog

## [Unreleased]

### Added
- Streaming API

## [1.3.4] - 2024-01-01

### Fixed
- Crash on empty input
"""


def _package(root: Path, name: str, version: str, dependencies: list[dict]) -> dict:
    return {
        "id": f"path+file://{root / name}#{name}@{version}",
        "name": name,
        "version": version,
        "manifest_path": str(root / name / "Cargo.toml"),
        "dependencies": dependencies,
    }


def make_metadata(root: Path) -> CargoMetadata:
    """Build the cargo metadata matching the workspace written by ``cargo_workspace``."""
    engine_path = str(root / "engine")
    packages = [
        _package(root, "engine", "1.3.4", []),
        _package(
            root,
            "app",
            "0.2.0",
            [
                {"name": "engine", "req": "^1", "kind": None, "path": engine_path},
                {"name": "serde", "req": "^1", "kind": None},
            ],
        ),
        _package(
            root,
            "tool",
            "0.1.0",
            [
                {"name": "engine", "req": "^1.3", "kind": None, "path": engine_path},
                {"name": "app", "req": "*", "kind": "dev", "path": str(root / "app")},
            ],
        ),
        _package(
            root,
            "legacy",
            "0.0.1",
            [
                {
                    "name": "engine",
                    "req": "^0.9",
                    "kind": None,
                    "rename": "engine-old",
                    "path": engine_path,
                },
            ],
        ),
    ]
    return CargoMetadata.model_validate(
        {
            "packages": packages,
            "workspace_members": [p["id"] for p in packages],
            "workspace_root": str(root),
        }
    )


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def cargo_workspace(tmp_path: Path) -> Path:
    """Write a four-member Cargo workspace to disk.

    ``engine`` is depended on by ``app`` (``1``), ``tool`` (``1.3``, sub-table
    form) and ``legacy`` (``0.9`` under the renamed key ``engine-old``).
    """
    (tmp_path / "Cargo.toml").write_text(
        '[workspace]\nmembers = ["engine", "app", "tool", "legacy"]\n'
    )
    for name, manifest in [
        ("engine", ENGINE_MANIFEST),
        ("app", APP_MANIFEST),
        ("tool", TOOL_MANIFEST),
        ("legacy", LEGACY_MANIFEST),
    ]:
        (tmp_path / name).mkdir()
        (tmp_path / name / "Cargo.toml").write_text(manifest)
    (tmp_path / "engine" / "CHANGELOG.md").write_text(ENGINE_CHANGELOG)
    return tmp_path


@pytest.fixture
def cargo_metadata(cargo_workspace: Path) -> CargoMetadata:
    """Cargo metadata for the ``cargo_workspace`` fixture."""
    return make_metadata(cargo_workspace)


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository.

    Initializes a git repo with user config and an initial commit.
    Changes cwd to the repo directory for the duration of the test.
    """
    for cmd in (
        ["git", "init"],
        ["git", "config", "user.email", "test@test.com"],
        ["git", "config", "user.name", "Test User"],
    ):
        subprocess.run(cmd, cwd=tmp_path, check=True, capture_output=True)

    (tmp_path / "README.md").write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, check=True, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"],
        cwd=tmp_path,
        check=True,
        capture_output=True,
    )

    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)
