"""Changelog discovery and unreleased section extraction."""

import re
from collections.abc import Iterable
from pathlib import Path

from ..constants import CHANGELOG_FILE_NAMES

_HEADING = re.compile(r"^\s*#+\s*(?P<title>.*?)\s*$")


def find_changelog(
    package_dir: Path,
    file_names: Iterable[str] = CHANGELOG_FILE_NAMES,
) -> Path | None:
    """Return the first changelog file that exists next to a manifest."""
    for name in file_names:
        path = package_dir / name
        if path.is_file():
            return path
    return None


def read_changelog(
    package_dir: Path,
    file_names: Iterable[str] = CHANGELOG_FILE_NAMES,
) -> str | None:
    """Read the package changelog, or None if there is none."""
    path = find_changelog(package_dir, file_names)
    if path is None:
        return None
    return path.read_text()


def extract_unreleased(
    content: str,
    version: str,
    heading: str = "Unreleased",
) -> str | None:
    """Extract the block between the unreleased heading and the current release.

    Args:
        content: Changelog text
        version: Current version; the block ends at the next heading naming it
        heading: Title of the unreleased heading, brackets optional

    Returns:
        The stripped block, or None if there is no unreleased heading
    """
    lines = content.splitlines()
    start = None
    for i, line in enumerate(lines):
        match = _HEADING.match(line)
        if match and match["title"].strip("[]").strip().endswith(heading):
            start = i + 1
            break

    if start is None:
        return None

    version_pattern = re.compile(rf"(?<![\d.]){re.escape(version)}(?![\d.])")
    block = []
    for line in lines[start:]:
        match = _HEADING.match(line)
        if match and version_pattern.search(match["title"]):
            break
        block.append(line)

    return "\n".join(block).strip()
