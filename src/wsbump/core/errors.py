"""Errors raised by the semver policy engine."""


class WsbumpError(Exception):
    """Base exception for wsbump errors."""


class ParseError(WsbumpError, ValueError):
    """Raised when a version or requirement string is malformed."""


class UnsupportedOperator(ParseError):
    """Raised when a requirement comparator uses an operator wsbump does not model."""

    def __init__(self, operator: str, requirement: str):
        super().__init__(f"Unsupported operator {operator!r} in requirement {requirement!r}")
        self.operator = operator
        self.requirement = requirement


class PreconditionViolation(WsbumpError):
    """Raised when a caller breaks a documented precondition.

    This signals a bug in the caller rather than a recoverable condition.
    """
