"""Version parsing on top of python-semver."""

from semver import Version

from .errors import ParseError


def parse_version(text: str) -> Version:
    """Parse a strict ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` version string.

    Raises:
        ParseError: If the string is not a valid semantic version
    """
    try:
        return Version.parse(text.strip())
    except (ValueError, TypeError) as e:
        raise ParseError(f"{text!r} is not a valid SemVer string") from e


def is_release(version: Version) -> bool:
    """Return True if the version carries neither pre-release nor build metadata."""
    return version.prerelease is None and version.build is None


def compare_prerelease(left: str | None, right: str | None) -> int:
    """Compare two pre-release tags by semver precedence.

    A missing tag ranks above any tag, matching release-over-pre-release order.
    """
    return Version(0, 0, 0, left).compare(Version(0, 0, 0, right))
