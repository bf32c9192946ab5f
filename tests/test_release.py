"""Tests for the release flow."""

import logging
import subprocess
from pathlib import Path

import pytest

from wsbump.config import WsbumpConfig
from wsbump.core.errors import ParseError, UnsupportedOperator
from wsbump.core.release import (
    ReleaseError,
    apply_release,
    commit_release,
    plan_dependent,
    validate_new_version,
)
from wsbump.core.version import parse_version
from wsbump.core.workspace import Workspace, build_workspace
from wsbump.models import CargoMetadata, ReleaseReport
from wsbump.services import GitError


@pytest.fixture
def workspace(cargo_metadata: CargoMetadata) -> Workspace:
    """Member graph of the fixture workspace."""
    return build_workspace(cargo_metadata)


def manifests(workspace: Workspace) -> dict[str, Path]:
    return {member.name: member.manifest_path for member in workspace.members}


class TestValidateNewVersion:
    """Tests for validate_new_version."""

    def test_valid_version(self) -> None:
        """Higher release versions are accepted."""
        assert str(validate_new_version(" 2.0.0 ", parse_version("1.3.4"))) == "2.0.0"

    def test_invalid_text(self) -> None:
        """Non-semver text is a parse error."""
        with pytest.raises(ParseError):
            validate_new_version("2.0", parse_version("1.3.4"))

    def test_not_higher(self) -> None:
        """Equal and lower versions are rejected."""
        with pytest.raises(ReleaseError, match="higher"):
            validate_new_version("1.3.4", parse_version("1.3.4"))
        with pytest.raises(ReleaseError, match="higher"):
            validate_new_version("1.3.3", parse_version("1.3.4"))

    def test_prerelease_and_build(self) -> None:
        """Pre-release and build metadata are rejected."""
        with pytest.raises(ReleaseError, match="Pre-release"):
            validate_new_version("2.0.0-rc.1", parse_version("1.3.4"))
        with pytest.raises(ReleaseError, match="Pre-release"):
            validate_new_version("2.0.0+build", parse_version("1.3.4"))


class TestPlanDependent:
    """Tests for plan_dependent."""

    def test_outcomes(self, workspace: Workspace) -> None:
        """Each dependent gets its reconciliation outcome."""
        app, tool, legacy = workspace.get("engine").dependents
        old = parse_version("1.3.4")

        update = plan_dependent(app, old, parse_version("2.0.0"))
        assert update.outcome == "needs-update"
        assert update.new_requirement == "2"
        assert update.current_requirement == "^1"

        assert plan_dependent(tool, old, parse_version("1.4.0")).outcome == "still-valid"
        assert plan_dependent(legacy, old, parse_version("2.0.0")).outcome == "stale"

    def test_stale_is_logged(self, workspace: Workspace, caplog: pytest.LogCaptureFixture) -> None:
        """Stale requirements are reported as warnings."""
        caplog.set_level(logging.WARNING)
        legacy = workspace.get("engine").dependents[2]
        plan_dependent(legacy, parse_version("1.3.4"), parse_version("2.0.0"))
        assert "not touching it" in caplog.text


class TestApplyRelease:
    """Tests for apply_release."""

    def test_major_release_updates_dependents(
        self, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """A major bump rewrites every dependent that still matched the old version."""
        engine = workspace.get("engine")
        report = apply_release(
            engine,
            parse_version("2.0.0"),
            engine.dependents,
            manifests(workspace),
            WsbumpConfig(),
        )

        assert report.severity == "major"
        assert report.commit_message == "chore(engine): prepare release 2.0.0"
        assert [(u.dependent, u.outcome) for u in report.dependents] == [
            ("app", "needs-update"),
            ("tool", "needs-update"),
            ("legacy", "stale"),
        ]

        engine_text = (cargo_workspace / "engine" / "Cargo.toml").read_text()
        assert 'version = "2.0.0" # keep in sync with the changelog' in engine_text

        app_text = (cargo_workspace / "app" / "Cargo.toml").read_text()
        assert 'engine = { version = "2", path = "../engine" }' in app_text
        assert "# the engine crate" in app_text
        assert 'serde = "1"' in app_text

        tool_text = (cargo_workspace / "tool" / "Cargo.toml").read_text()
        assert "version = '2'" in tool_text

        legacy_text = (cargo_workspace / "legacy" / "Cargo.toml").read_text()
        assert 'version = "0.9"' in legacy_text

        assert report.files_written == [
            str(cargo_workspace / "engine" / "Cargo.toml"),
            str(cargo_workspace / "app" / "Cargo.toml"),
            str(cargo_workspace / "tool" / "Cargo.toml"),
        ]

    def test_minor_release_keeps_requirements(
        self, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """Compatible bumps only touch the released manifest."""
        engine = workspace.get("engine")
        report = apply_release(
            engine,
            parse_version("1.4.0"),
            engine.dependents,
            manifests(workspace),
            WsbumpConfig(),
        )

        assert report.severity == "minor"
        assert [u.outcome for u in report.dependents] == ["still-valid", "still-valid", "stale"]
        assert report.files_written == [str(cargo_workspace / "engine" / "Cargo.toml")]
        assert 'version = "1"' in (cargo_workspace / "app" / "Cargo.toml").read_text()

    def test_unselected_dependents_are_skipped(
        self, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """Only selected dependents are reconciled."""
        engine = workspace.get("engine")
        app = engine.dependents[0]
        report = apply_release(
            engine, parse_version("2.0.0"), [app], manifests(workspace), WsbumpConfig()
        )

        assert [u.outcome for u in report.dependents] == ["needs-update", "skipped", "skipped"]
        assert "version = '1.3'" in (cargo_workspace / "tool" / "Cargo.toml").read_text()

    def test_dry_run_writes_nothing(self, cargo_workspace: Path, workspace: Workspace) -> None:
        """Dry runs report decisions without editing files."""
        before = {
            name: (cargo_workspace / name / "Cargo.toml").read_text()
            for name in workspace.names
        }
        engine = workspace.get("engine")
        report = apply_release(
            engine,
            parse_version("2.0.0"),
            engine.dependents,
            manifests(workspace),
            WsbumpConfig(),
            dry_run=True,
        )

        assert report.dry_run
        assert report.files_written == []
        assert report.dependents[0].new_requirement == "2"
        for name, text in before.items():
            assert (cargo_workspace / name / "Cargo.toml").read_text() == text

    def test_unwritable_dependent_is_recorded(
        self, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """A dependent manifest that cannot be edited does not stop the release."""
        (cargo_workspace / "app" / "Cargo.toml").write_text(
            '[package]\nname = "app"\nversion = "0.2.0"\n\n'
            '[dependencies]\nengine = { path = "../engine" }\n'
        )
        engine = workspace.get("engine")
        report = apply_release(
            engine,
            parse_version("2.0.0"),
            engine.dependents,
            manifests(workspace),
            WsbumpConfig(),
        )

        app_update = report.dependents[0]
        assert app_update.outcome == "needs-update"
        assert app_update.error is not None
        assert "no version" in app_update.error
        assert app_update.manifest_path is None
        assert report.dependents[1].manifest_path == str(cargo_workspace / "tool" / "Cargo.toml")

    def test_unparsable_requirement_writes_nothing(
        self, cargo_workspace: Path, cargo_metadata: CargoMetadata
    ) -> None:
        """A dependent requirement that cannot be parsed aborts before any write."""
        cargo_metadata.packages[2].dependencies[0].req = "~>1.3"
        workspace = build_workspace(cargo_metadata)
        before = {
            name: (cargo_workspace / name / "Cargo.toml").read_text()
            for name in workspace.names
        }
        engine = workspace.get("engine")

        with pytest.raises(UnsupportedOperator):
            apply_release(
                engine,
                parse_version("2.0.0"),
                engine.dependents,
                manifests(workspace),
                WsbumpConfig(),
            )

        for name, text in before.items():
            assert (cargo_workspace / name / "Cargo.toml").read_text() == text

    def test_custom_commit_message(self, workspace: Workspace) -> None:
        """The commit message template comes from config."""
        config = WsbumpConfig.model_validate(
            {"release": {"commit_message": "release {name} v{version}"}}
        )
        engine = workspace.get("engine")
        report = apply_release(
            engine, parse_version("1.3.5"), [], manifests(workspace), config, dry_run=True
        )
        assert report.commit_message == "release engine v1.3.5"
        assert report.severity == "patch"


class TestCommitRelease:
    """Tests for commit_release."""

    def test_commits_written_files(
        self, temp_git_repo: Path, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """Written manifests are committed with the recommended message."""
        subprocess.run(["git", "add", "."], cwd=temp_git_repo, check=True, capture_output=True)
        subprocess.run(
            ["git", "commit", "-m", "Add workspace"],
            cwd=temp_git_repo,
            check=True,
            capture_output=True,
        )

        engine = workspace.get("engine")
        report = apply_release(
            engine,
            parse_version("2.0.0"),
            engine.dependents,
            manifests(workspace),
            WsbumpConfig(),
        )
        sha = commit_release(report, temp_git_repo)

        assert report.commit_sha == sha
        log = subprocess.run(
            ["git", "log", "-1", "--format=%s"],
            cwd=temp_git_repo,
            capture_output=True,
            text=True,
            check=True,
        )
        assert log.stdout.strip() == "chore(engine): prepare release 2.0.0"
        status = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=temp_git_repo,
            capture_output=True,
            text=True,
            check=True,
        )
        assert status.stdout.strip() == ""

    def test_leaves_unrelated_staged_changes_alone(
        self, temp_git_repo: Path, cargo_workspace: Path, workspace: Workspace
    ) -> None:
        """Files the user staged before the release are not part of its commit."""
        subprocess.run(["git", "add", "."], cwd=temp_git_repo, check=True, capture_output=True)
        subprocess.run(
            ["git", "commit", "-m", "Add workspace"],
            cwd=temp_git_repo,
            check=True,
            capture_output=True,
        )
        (temp_git_repo / "unrelated.txt").write_text("work in progress\n")
        subprocess.run(
            ["git", "add", "unrelated.txt"], cwd=temp_git_repo, check=True, capture_output=True
        )

        engine = workspace.get("engine")
        report = apply_release(
            engine, parse_version("1.3.5"), [], manifests(workspace), WsbumpConfig()
        )
        commit_release(report, temp_git_repo)

        committed = subprocess.run(
            ["git", "show", "--name-only", "--format=", "HEAD"],
            cwd=temp_git_repo,
            capture_output=True,
            text=True,
            check=True,
        )
        assert committed.stdout.split() == ["engine/Cargo.toml"]
        staged = subprocess.run(
            ["git", "diff", "--staged", "--name-only"],
            cwd=temp_git_repo,
            capture_output=True,
            text=True,
            check=True,
        )
        assert staged.stdout.split() == ["unrelated.txt"]

    def test_nothing_written(self, temp_git_repo: Path) -> None:
        """Dry-run reports have nothing to commit."""
        report = ReleaseReport(
            package="engine",
            old_version="1.3.4",
            new_version="1.3.5",
            severity="patch",
            commit_message="chore(engine): prepare release 1.3.5",
            dry_run=True,
        )
        with pytest.raises(GitError, match="no files"):
            commit_release(report, temp_git_repo)
