"""
Error types for token import, value normalisation, and variable export.
"""

from dataclasses import dataclass
from typing import Optional


class TokenVarsError(Exception):
    """Base exception for all tokenvars errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class InvalidValue(TokenVarsError):
    """Raised when a raw value cannot be normalised for its declared type."""

    pass


class InvalidColorFormat(InvalidValue):
    """
    Raised when a colour string matches none of the recognised grammars.

    Examples:
    - "blue" (named colours are not supported)
    - "#12345" (hex of the wrong length)
    - "rgb(300, 0, 0)" (channel out of range)
    """

    pass


class InvalidNumberFormat(InvalidValue):
    """Raised when a FLOAT value cannot be read as a number."""

    pass


class UnsupportedLeafType(TokenVarsError):
    """Raised when a token leaf declares a $type that cannot become a variable."""

    pass


class AliasTargetUnresolved(TokenVarsError):
    """
    Raised when an alias never finds its target.

    Either the target key never existed, or the alias chain contains a cycle.
    """

    pass


class VariableNotFound(TokenVarsError):
    """Raised when the variable store has no variable with the requested id."""

    pass


class CollectionNotFound(TokenVarsError):
    """Raised when the variable store has no matching collection."""

    pass


class StoreUnavailable(TokenVarsError):
    """
    Raised when the variable store cannot be reached at all.

    This is the only error that aborts a whole import or export run.
    """

    pass


class ConfigError(TokenVarsError):
    """Raised when a configuration file or token document cannot be loaded."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, identifying the item being processed.

    Attributes:
        key: Token key or variable name
        item_id: Optional variable or collection id
        mode: Optional mode name
    """

    key: str
    item_id: str | None = None
    mode: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "color/primary (VariableID:1:2) [Dark]"
        """
        location = self.key
        if self.item_id:
            location += f" ({self.item_id})"
        if self.mode:
            location += f" [{self.mode}]"
        return location
