"""
Rendered export documents: one per collection mode, entries in collection order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tokenvars.core.ir.variables import Collection, Mode, VariableType
from tokenvars.core.values import CanonicalValue


@dataclass(frozen=True)
class ExportEntry:
    """One variable rendered for one mode."""

    variable_id: str
    name: str
    css_name: str
    resolved_type: VariableType
    canonical: CanonicalValue
    css_value: str
    alias_target_id: str | None = None


@dataclass
class ModeDocument:
    """All entries of one collection for one mode."""

    collection: Collection
    mode: Mode
    entries: list[ExportEntry] = field(default_factory=list)
