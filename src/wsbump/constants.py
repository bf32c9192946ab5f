"""Constants for wsbump CLI."""

# Subprocess timeouts (seconds)
GIT_TIMEOUT = 30
CARGO_METADATA_TIMEOUT = 120

CONFIG_FILE_NAME = ".wsbump.toml"
CHANGELOG_FILE_NAMES = ("CHANGELOG.md", "RELEASES.md", "CHANGES.md")
COMMIT_MESSAGE_TEMPLATE = "chore({name}): prepare release {version}"
