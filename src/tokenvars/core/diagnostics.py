"""
Per-run diagnostics and result objects.

Every item skipped or failed during an import or export is recorded here
with a reason. Results are created fresh for each invocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class DiagnosticKind(StrEnum):
    """Why an item was skipped."""

    INVALID_COLOR = "invalid_color"
    INVALID_NUMBER = "invalid_number"
    INVALID_VALUE = "invalid_value"
    UNSUPPORTED_TYPE = "unsupported_type"
    ALIAS_UNRESOLVED = "alias_unresolved"
    VARIABLE_NOT_FOUND = "variable_not_found"
    COLLECTION_NOT_FOUND = "collection_not_found"
    MISSING_MODE_VALUE = "missing_mode_value"
    EXCLUDED = "excluded"
    DUPLICATE = "duplicate"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A single skipped or failed item."""

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    id: str
    name: str | None = None
    mode: str | None = None
    reason: str

    def format(self) -> str:
        label = self.name or self.id
        if self.mode:
            label += f" [{self.mode}]"
        return f"{label}: {self.reason}"


@dataclass
class DiagnosticLog:
    """Collects diagnostics for one run and logs them as they arrive."""

    items: list[Diagnostic] = field(default_factory=list)

    def record(
        self,
        kind: DiagnosticKind,
        item_id: str,
        reason: str,
        *,
        name: str | None = None,
        mode: str | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, id=item_id, name=name, mode=mode, reason=reason)
        self.items.append(diagnostic)
        logger.warning("Skipped %s", diagnostic.format())
        return diagnostic

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self.items.extend(diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class ImportResult:
    """Outcome of importing one token document."""

    collection_id: str
    mode_id: str
    created: dict[str, str] = field(default_factory=dict)  # token key -> variable id
    unresolved: dict[str, str] = field(default_factory=dict)  # alias key -> target key
    rounds: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)


@dataclass
class ExportResult:
    """Outcome of one export run.

    ``files`` holds CSS documents (file name -> body); ``data`` holds the
    structured JSON form. Only one of them is filled, depending on format.
    """

    files: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    processed: int = 0
    skipped: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
