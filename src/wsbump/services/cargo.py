"""Cargo integration for wsbump."""

import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from ..constants import CARGO_METADATA_TIMEOUT
from ..models import CargoMetadata

logger = logging.getLogger(__name__)


class CargoError(Exception):
    """Cargo command failed or returned unusable output."""

    pass


def run_cargo_metadata(
    manifest_path: Path | None = None,
    cwd: Path | None = None,
    exec_path: str = "cargo",
) -> CargoMetadata:
    """Run ``cargo metadata`` without resolving dependencies.

    Args:
        manifest_path: Optional path to the workspace Cargo.toml
        cwd: Working directory
        exec_path: Cargo executable

    Returns:
        Parsed metadata

    Raises:
        CargoError: If cargo is missing, fails, times out or prints invalid JSON
    """
    cmd = [exec_path, "metadata", "--format-version", "1", "--no-deps"]
    if manifest_path is not None:
        cmd.extend(["--manifest-path", str(manifest_path)])

    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=CARGO_METADATA_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise CargoError(f"cargo metadata timed out after {CARGO_METADATA_TIMEOUT} seconds") from e
    except FileNotFoundError:
        raise CargoError(f"Command not found: {exec_path}") from None

    if result.returncode != 0:
        raise CargoError(f"cargo metadata failed: {result.stderr.strip()}")

    try:
        return CargoMetadata.model_validate_json(result.stdout)
    except ValidationError as e:
        raise CargoError(f"Unexpected cargo metadata output: {e}") from e
