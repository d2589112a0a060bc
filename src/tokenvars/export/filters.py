"""
Exclusion policy for exported variables.

A variable is excluded when its name matches an exclusion pattern. An
alias to an excluded variable is excluded as well, so the output never
references a variable it dropped.
"""

from __future__ import annotations

from collections.abc import Iterable

from tokenvars.core.ir.variables import Variable
from tokenvars.core.naming import NamePatterns


class ExclusionPolicy:
    """Case-insensitive name exclusion with alias propagation."""

    def __init__(self, patterns: Iterable[str] = ()):
        self._patterns = NamePatterns(patterns)

    def excludes(self, name: str) -> bool:
        return self._patterns.matches(name)

    def reason(self, variable: Variable, target: Variable | None = None) -> str | None:
        """Why ``variable`` (optionally aliasing ``target``) is excluded, or None."""
        pattern = self._patterns.first_match(variable.name)
        if pattern is not None:
            return f"Name matches exclusion pattern {pattern!r}"
        if target is not None:
            pattern = self._patterns.first_match(target.name)
            if pattern is not None:
                return f"Aliases excluded variable {target.name!r} (pattern {pattern!r})"
        return None
