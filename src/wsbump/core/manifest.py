"""Format-preserving edits of single values in Cargo manifests.

Edits work on the manifest text line by line so comments, quoting and
whitespace survive untouched. The edited text is parsed back with tomllib
to make sure the result is still a valid manifest holding the new value.
"""

import logging
import re
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")

_HEADER = re.compile(r"^\s*\[(?P<name>[^\[\]]+)\]\s*(?:#.*)?$")
_ARRAY_HEADER = re.compile(r"^\s*\[\[")
_STRING = r"(?P<quote>[\"'])(?P<value>[^\"'\n]*)(?P=quote)"
_WORKSPACE_TRUE = re.compile(r"\bworkspace\s*=\s*true\b")


class ManifestError(Exception):
    """Manifest value could not be located or edited in place."""

    pass


def set_package_version(text: str, version: str) -> str:
    """Replace ``[package] version`` with ``version``.

    Raises:
        ManifestError: If the field is missing or inherited from the workspace
    """
    pattern = re.compile(rf"^(?P<prefix>\s*version\s*=\s*){_STRING}")
    inherited = re.compile(r"^\s*version\s*(?:\.\s*workspace\s*=\s*true|=\s*\{.*workspace)")

    lines = text.splitlines(keepends=True)
    for i, table in _scan(lines):
        if table != "package":
            continue
        if inherited.match(lines[i]):
            raise ManifestError("Package version is inherited from the workspace")
        match = pattern.match(lines[i])
        if match:
            lines[i] = _replace_value(lines[i], match, version)
            new_text = "".join(lines)
            if _load(new_text).get("package", {}).get("version") != version:
                raise ManifestError("Package version could not be updated in place")
            return new_text

    raise ManifestError("No [package] version field found")


def set_dependency_requirement(
    text: str,
    key: str,
    requirement: str,
    table: str = "dependencies",
) -> str:
    """Replace the version requirement of dependency ``key`` in ``table``.

    Supports the plain string form (``key = "1"``), the inline table form
    (``key = { version = "1", path = "../key" }``), dotted keys
    (``key.version = "1"``) and ``[dependencies.key]`` sub-tables.

    Raises:
        ManifestError: If the requirement is missing or inherited from the workspace
    """
    if table not in DEPENDENCY_TABLES:
        raise ManifestError(f"Unknown dependency table: {table}")

    quoted_key = rf"(?:\"{re.escape(key)}\"|'{re.escape(key)}'|{re.escape(key)})"
    plain = re.compile(rf"^(?P<prefix>\s*{quoted_key}\s*=\s*){_STRING}")
    dotted = re.compile(rf"^(?P<prefix>\s*{quoted_key}\s*\.\s*version\s*=\s*){_STRING}")
    dotted_workspace = re.compile(rf"^\s*{quoted_key}\s*\.\s*workspace\s*=\s*true\b")
    inline = re.compile(rf"^\s*{quoted_key}\s*=\s*\{{")
    inline_version = re.compile(rf"(?P<prefix>[{{,]\s*version\s*=\s*){_STRING}")
    sub_table_version = re.compile(rf"^(?P<prefix>\s*version\s*=\s*){_STRING}")
    sub_table_workspace = re.compile(r"^\s*workspace\s*=\s*true\b")

    sub_table = f"{table}.{key}"
    lines = text.splitlines(keepends=True)
    for i, current in _scan(lines):
        line = lines[i]
        match = None
        if current == table:
            if dotted_workspace.match(line) or (inline.match(line) and _WORKSPACE_TRUE.search(line)):
                raise ManifestError(f"Requirement on {key} is inherited from the workspace")
            match = plain.match(line) or dotted.match(line)
            if match is None and inline.match(line):
                match = inline_version.search(line)
                if match is None:
                    raise ManifestError(f"Dependency {key} has no version requirement")
        elif current == sub_table:
            if sub_table_workspace.match(line):
                raise ManifestError(f"Requirement on {key} is inherited from the workspace")
            match = sub_table_version.match(line)

        if match:
            lines[i] = _replace_value(line, match, requirement)
            new_text = "".join(lines)
            if _dependency_requirement(_load(new_text), table, key) != requirement:
                raise ManifestError(f"Requirement on {key} could not be updated in place")
            return new_text

    raise ManifestError(f"No version requirement for {key} found in [{table}]")


def update_manifest_file(path: Path, edit: Callable[[str], str]) -> None:
    """Apply a text edit to a manifest file and write it back."""
    text = path.read_text()
    new_text = edit(text)
    if new_text != text:
        path.write_text(new_text)
        logger.debug("Updated %s", path)


def _scan(lines: list[str]) -> Iterator[tuple[int, str | None]]:
    """Yield ``(index, table)`` for every key line outside multi-line strings."""
    table: str | None = None
    in_multiline: str | None = None
    for i, line in enumerate(lines):
        if in_multiline:
            if line.count(in_multiline) % 2 == 1:
                in_multiline = None
            continue

        header = _HEADER.match(line)
        if header:
            table = _normalize_table(header["name"])
            continue
        if _ARRAY_HEADER.match(line):
            table = None
            continue

        yield i, table

        for delimiter in ('"""', "'''"):
            if line.count(delimiter) % 2 == 1:
                in_multiline = delimiter
                break


def _normalize_table(name: str) -> str:
    parts = [part.strip().strip("\"'") for part in name.split(".")]
    return ".".join(parts)


def _replace_value(line: str, match: re.Match[str], value: str) -> str:
    return line[: match.start("value")] + value + line[match.end("value") :]


def _load(text: str) -> dict:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Edited manifest is not valid TOML: {e}") from e


def _dependency_requirement(doc: dict, table: str, key: str) -> str | None:
    entry = doc.get(table, {}).get(key)
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("version")
    return None
