"""Exception types raised by the extraction engine."""

from __future__ import annotations


class XtractError(Exception):
    """Base class for xtract errors."""


class InvalidPattern(XtractError, ValueError):
    """A field pattern failed pre-validation."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class ShapeMismatch(XtractError):
    """Resolved values do not fit the declared record shape."""


class ConfigError(XtractError):
    """Malformed configuration."""


__all__ = ["XtractError", "InvalidPattern", "ShapeMismatch", "ConfigError"]
