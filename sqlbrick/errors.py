"""Custom exception hierarchy for sqlbrick.

All public errors inherit from SqlBrickError so callers can catch the base
class for any sqlbrick-specific failure.
"""
from __future__ import annotations

from typing import Any


class SqlBrickError(Exception):
    """Base exception for all sqlbrick errors."""


class InvalidArgumentError(SqlBrickError):
    """Raised when a builder or vocabulary call receives unusable arguments.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument, when known.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class InvalidOperatorError(InvalidArgumentError):
    """Raised when an operator is not in the comparison allow-list."""

    def __init__(self, operator: str, allowed: list[str]) -> None:
        super().__init__(
            f"Invalid operator: '{operator}'. Allowed: {', '.join(allowed)}.",
            argument="operator",
        )
        self.operator = operator
        self.allowed = allowed


class MissingSectionError(InvalidArgumentError):
    """Raised when a required clause section is empty at pipeline time.

    Args:
        message: Human-readable description.
        section: The clause keyword (e.g. ``FROM``) that was empty.
    """

    def __init__(self, message: str, section: str) -> None:
        super().__init__(message, argument=section)
        self.section = section


class InvalidBindingError(InvalidArgumentError):
    """Raised when a binding name or value has an unsupported shape."""

    def __init__(self, message: str, name: Any = None) -> None:
        super().__init__(message, argument="bindings")
        self.name = name


class ConfigurationError(SqlBrickError):
    """Raised when a dialect, quoting rule, or prototype is missing or unknown.

    Detected at construction time wherever possible; a dialect-bound decorator
    applied to a node without a dialect can only be detected at render.
    """


class UnsupportedFeatureError(SqlBrickError):
    """Raised when a statement uses a feature the active dialect lacks.

    Args:
        feature: The feature flag (e.g. ``returning``).
        dialect: The dialect name that does not support it.
    """

    def __init__(self, feature: str, dialect: str) -> None:
        super().__init__(f"Dialect '{dialect}' does not support '{feature}'.")
        self.feature = feature
        self.dialect = dialect

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error description."""
        return {
            "error": "UNSUPPORTED_FEATURE",
            "message": str(self),
            "details": {"feature": self.feature, "dialect": self.dialect},
        }
