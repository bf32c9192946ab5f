"""Cargo-style version requirements.

A requirement is a comma-separated conjunction of comparators such as
``>=1.2, <2`` or the bare caret form ``1.2``. Matching follows Cargo's
rules, including the pre-release opt-in: a pre-release version only
matches when some comparator names the same ``major.minor.patch`` with a
pre-release tag of its own.

Two renderings exist. ``str(requirement)`` gives the conventional form
(``^1.2``), while :func:`requirement_to_string` gives the form written to
manifests, where caret and wildcard comparators carry no sigil.
"""

import re
from dataclasses import dataclass
from enum import Enum

from semver import Version

from .errors import ParseError, UnsupportedOperator
from .version import compare_prerelease


class Op(str, Enum):
    """Comparator operators."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


_OPERATOR_SYMBOLS = {
    "=": Op.EXACT,
    ">": Op.GREATER,
    ">=": Op.GREATER_EQ,
    "<": Op.LESS,
    "<=": Op.LESS_EQ,
    "~": Op.TILDE,
    "^": Op.CARET,
}
_OPERATOR_CHARS = frozenset("=<>!~^")
_WILDCARDS = frozenset({"*", "x", "X"})
_NUMERIC = re.compile(r"0|[1-9][0-9]*")
_IDENTIFIERS = re.compile(r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*")
_COMPARATOR_VERSION = re.compile(
    r"(?P<major>[^.+-]+)"
    r"(?:\.(?P<minor>[^.+-]+))?"
    r"(?:\.(?P<patch>[^.+-]+))?"
    r"(?:-(?P<pre>[^+]*))?"
    r"(?:\+(?P<build>.*))?"
)

# Manifest form: caret is the implied default, so it is written bare.
_MANIFEST_SIGILS = {
    Op.EXACT: "=",
    Op.GREATER: ">",
    Op.GREATER_EQ: ">=",
    Op.LESS: "<",
    Op.LESS_EQ: "<=",
    Op.TILDE: "~",
    Op.CARET: "",
    Op.WILDCARD: "",
}
_CONVENTIONAL_SIGILS = {**_MANIFEST_SIGILS, Op.CARET: "^"}


@dataclass(frozen=True)
class Comparator:
    """A single operator applied to a partial version."""

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: str | None = None

    def matches(self, version: Version) -> bool:
        """Check the version against this comparator alone."""
        if self.op in (Op.EXACT, Op.WILDCARD):
            return self._matches_exact(version)
        if self.op is Op.GREATER:
            return self._matches_greater(version)
        if self.op is Op.GREATER_EQ:
            return self._matches_exact(version) or self._matches_greater(version)
        if self.op is Op.LESS:
            return self._matches_less(version)
        if self.op is Op.LESS_EQ:
            return self._matches_exact(version) or self._matches_less(version)
        if self.op is Op.TILDE:
            return self._matches_tilde(version)
        if self.op is Op.CARET:
            return self._matches_caret(version)
        raise UnsupportedOperator(str(self.op.value), str(self))

    def admits_prerelease_of(self, version: Version) -> bool:
        """Return True if this comparator opts the version's pre-release in."""
        return (
            self.pre is not None
            and self.major == version.major
            and self.minor == version.minor
            and self.patch == version.patch
        )

    def _matches_exact(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return False
        return version.prerelease == self.pre

    def _matches_greater(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major > self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor > self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch > self.patch
        return compare_prerelease(version.prerelease, self.pre) > 0

    def _matches_less(self, version: Version) -> bool:
        if version.major != self.major:
            return version.major < self.major
        if self.minor is None:
            return False
        if version.minor != self.minor:
            return version.minor < self.minor
        if self.patch is None:
            return False
        if version.patch != self.patch:
            return version.patch < self.patch
        return compare_prerelease(version.prerelease, self.pre) < 0

    def _matches_tilde(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is not None and version.minor != self.minor:
            return False
        if self.patch is not None and version.patch != self.patch:
            return version.patch > self.patch
        return compare_prerelease(version.prerelease, self.pre) >= 0

    def _matches_caret(self, version: Version) -> bool:
        if version.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            if self.major > 0:
                return version.minor >= self.minor
            return version.minor == self.minor

        if self.major > 0:
            if version.minor != self.minor:
                return version.minor > self.minor
            if version.patch != self.patch:
                return version.patch > self.patch
        elif self.minor > 0:
            if version.minor != self.minor:
                return False
            if version.patch != self.patch:
                return version.patch > self.patch
        elif version.minor != self.minor or version.patch != self.patch:
            return False

        return compare_prerelease(version.prerelease, self.pre) >= 0

    def __str__(self) -> str:
        return _render_comparator(self, _CONVENTIONAL_SIGILS)


@dataclass(frozen=True)
class VersionRequirement:
    """A conjunction of comparators. No comparators means any version."""

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "VersionRequirement":
        """Parse a requirement string such as ``"1.2"`` or ``">=1.2, <1.5"``.

        Raises:
            ParseError: If the requirement is malformed
            UnsupportedOperator: If a comparator uses an unknown operator
        """
        stripped = text.strip()
        if not stripped:
            raise ParseError("Empty version requirement")
        if stripped in _WILDCARDS:
            return cls()
        return cls(tuple(_parse_comparator(part, text) for part in stripped.split(",")))

    def matches(self, version: Version) -> bool:
        """Return True if the version satisfies every comparator."""
        if not all(comparator.matches(version) for comparator in self.comparators):
            return False
        if version.prerelease is None:
            return True
        return any(comparator.admits_prerelease_of(version) for comparator in self.comparators)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comparator) for comparator in self.comparators)


def requirement_to_string(requirement: VersionRequirement) -> str:
    """Render a requirement the way Cargo manifests write it.

    Caret and wildcard comparators are written without a sigil (``1.2``,
    ``1.*``); every other operator keeps its symbol.
    """
    if not requirement.comparators:
        return "*"
    return ", ".join(_render_comparator(c, _MANIFEST_SIGILS) for c in requirement.comparators)


def _render_comparator(comparator: Comparator, sigils: dict[Op, str]) -> str:
    try:
        sigil = sigils[comparator.op]
    except KeyError:
        raise UnsupportedOperator(str(comparator.op.value), repr(comparator)) from None

    parts = [sigil, str(comparator.major)]
    if comparator.minor is not None:
        parts.append(f".{comparator.minor}")
        if comparator.patch is not None:
            parts.append(f".{comparator.patch}")
            if comparator.pre:
                parts.append(f"-{comparator.pre}")
        elif comparator.op is Op.WILDCARD:
            parts.append(".*")
    elif comparator.op is Op.WILDCARD:
        parts.append(".*")
    return "".join(parts)


def _parse_comparator(text: str, requirement: str) -> Comparator:
    text = text.strip()
    if not text:
        raise ParseError(f"Empty comparator in requirement {requirement!r}")

    op_end = 0
    while op_end < len(text) and text[op_end] in _OPERATOR_CHARS:
        op_end += 1
    op_text = text[:op_end]
    if op_text and op_text not in _OPERATOR_SYMBOLS:
        raise UnsupportedOperator(op_text, requirement)
    op = _OPERATOR_SYMBOLS.get(op_text)

    rest = text[op_end:].strip()
    match = _COMPARATOR_VERSION.fullmatch(rest)
    if not rest or match is None:
        raise ParseError(f"Invalid comparator {text!r} in requirement {requirement!r}")

    numbers: list[int] = []
    wildcard = False
    for name in ("major", "minor", "patch"):
        value = match[name]
        if value is None:
            break
        if value in _WILDCARDS:
            wildcard = True
        elif wildcard:
            raise ParseError(
                f"Unexpected {name} version {value!r} after wildcard in {requirement!r}"
            )
        elif _NUMERIC.fullmatch(value):
            numbers.append(int(value))
        else:
            raise ParseError(f"Invalid {name} version {value!r} in requirement {requirement!r}")

    if not numbers:
        raise ParseError(f"Wildcard major version must stand alone, got {requirement!r}")

    pre = match["pre"]
    if pre is not None:
        if len(numbers) < 3:
            raise ParseError(f"Pre-release needs a full major.minor.patch in {requirement!r}")
        if not _IDENTIFIERS.fullmatch(pre):
            raise ParseError(f"Invalid pre-release {pre!r} in requirement {requirement!r}")
    build = match["build"]
    if build is not None and not _IDENTIFIERS.fullmatch(build):
        raise ParseError(f"Invalid build metadata {build!r} in requirement {requirement!r}")

    if wildcard and op is None:
        op = Op.WILDCARD
    elif op is None:
        op = Op.CARET

    minor = numbers[1] if len(numbers) > 1 else None
    patch = numbers[2] if len(numbers) > 2 else None
    return Comparator(op=op, major=numbers[0], minor=minor, patch=patch, pre=pre)
