"""
Variable naming helpers shared by the importer and exporter.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_WHITESPACE_RE = re.compile(r"\s+")


class NamePatterns:
    """A set of case-insensitive name patterns.

    Each pattern is a regular expression matched with ``re.search``, so a
    plain word such as ``weight`` matches as a substring.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = list(patterns)
        self._compiled = [re.compile(p, re.IGNORECASE) for p in self.patterns]

    def matches(self, name: str) -> bool:
        return any(regex.search(name) for regex in self._compiled)

    def first_match(self, name: str) -> str | None:
        """Return the first pattern that matches ``name``, if any."""
        for pattern, regex in zip(self.patterns, self._compiled, strict=True):
            if regex.search(name):
                return pattern
        return None

    def __bool__(self) -> bool:
        return bool(self.patterns)


def css_variable_name(name: str) -> str:
    """``color/primary brand`` -> ``--color-primary-brand``."""
    return "--" + _WHITESPACE_RE.sub("-", name.replace("/", "-"))


def slugify(name: str) -> str:
    """Lower-case a mode or collection name and replace whitespace with hyphens."""
    return _WHITESPACE_RE.sub("-", name.strip().lower())


def alias_reference(name: str) -> str:
    """``color/primary`` -> ``{color.primary}`` (token document alias syntax)."""
    return "{" + name.replace("/", ".") + "}"
