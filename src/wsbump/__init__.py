"""wsbump: release a Cargo workspace member and update its dependents."""

__version__ = "0.1.0"
