"""Exception types for regex-forge."""

from typing import Optional


class RegexForgeError(ValueError):
    """Base class for all regex-forge errors."""


class InvalidPatternError(RegexForgeError):
    """Raised when pattern text does not compile."""

    def __init__(self, pattern: str, reason: Optional[str] = None) -> None:
        self.pattern = pattern
        self.reason = reason
        message = f"Invalid regex pattern: {pattern!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidArgumentError(RegexForgeError):
    """Raised when an argument is outside its accepted range."""


class MissingInputError(RegexForgeError):
    """Raised when a required pattern, text or catalog is None."""
