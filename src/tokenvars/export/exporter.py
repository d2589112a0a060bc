"""
Variable export.

Walks every selected collection and mode, filters and normalises each
variable, and hands the rendered mode documents to the CSS or JSON
emitter. Per-variable failures are recorded as diagnostics and never
abort the run.

Two read strategies are supported:

- ``sequential``: fetch one variable (and its alias target) at a time.
- ``prefetch``: fetch every variable concurrently into an id index, then
  render synchronously against that snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from tokenvars.core.diagnostics import DiagnosticKind, DiagnosticLog, ExportResult
from tokenvars.core.errors import (
    InvalidColorFormat,
    InvalidNumberFormat,
    InvalidValue,
    StoreUnavailable,
)
from tokenvars.core.ir.config import ExportConfig, ExportFormat, ExportStrategy
from tokenvars.core.ir.variables import Collection, Mode, Variable, VariableAlias
from tokenvars.core.naming import css_variable_name
from tokenvars.core.values import AliasRef, ValueNormalizer
from tokenvars.store.base import VariableStore

from .css_generator import generate_css_files
from .documents import ExportEntry, ModeDocument
from .filters import ExclusionPolicy
from .json_export import generate_json_export

logger = logging.getLogger(__name__)

_VALUE_ERROR_KINDS: list[tuple[type[InvalidValue], DiagnosticKind]] = [
    (InvalidColorFormat, DiagnosticKind.INVALID_COLOR),
    (InvalidNumberFormat, DiagnosticKind.INVALID_NUMBER),
    (InvalidValue, DiagnosticKind.INVALID_VALUE),
]


# =============================================================================
# Per-mode rendering
# =============================================================================


class _ModeBuilder:
    """
    Accumulates the entries of one collection mode.

    Variables are rendered as they arrive; ``finish`` then settles output
    names (first occurrence wins) and drops every alias whose target in
    the same collection did not make it into the document, following
    alias chains until nothing else drops.
    """

    def __init__(
        self,
        collection: Collection,
        mode: Mode,
        normalizer: ValueNormalizer,
        policy: ExclusionPolicy,
        log: DiagnosticLog,
    ):
        self.document = ModeDocument(collection=collection, mode=mode)
        self.normalizer = normalizer
        self.policy = policy
        self.log = log
        self.skipped = 0
        self._members = set(collection.variable_ids)
        self._excluded: set[str] = set()
        self._candidates: list[ExportEntry] = []

    def alias_target_id(self, variable: Variable | None) -> str | None:
        """Id of the variable this mode's value aliases, if it is an alias."""
        if variable is None:
            return None
        value = variable.values_by_mode.get(self.document.mode.mode_id)
        return value.id if isinstance(value, VariableAlias) else None

    def _skip(
        self, kind: DiagnosticKind, variable_id: str, reason: str, name: str | None = None
    ) -> None:
        self.skipped += 1
        if kind == DiagnosticKind.EXCLUDED:
            self._excluded.add(variable_id)
        self.log.record(kind, variable_id, reason, name=name, mode=self.document.mode.name)

    def fail(self, variable_id: str, error: Exception) -> None:
        """Record a read failure for one variable."""
        self._skip(DiagnosticKind.ERROR, variable_id, f"Failed to read variable: {error}")

    def add(self, variable_id: str, variable: Variable | None, target: Variable | None) -> None:
        if variable is None:
            self._skip(DiagnosticKind.VARIABLE_NOT_FOUND, variable_id, "Variable not found")
            return

        name = variable.name
        value = variable.values_by_mode.get(self.document.mode.mode_id)
        alias_target_missing = isinstance(value, VariableAlias) and target is None

        reason = self.policy.reason(variable, target)
        if reason is not None:
            self._skip(DiagnosticKind.EXCLUDED, variable_id, reason, name)
            return
        if value is None:
            self._skip(DiagnosticKind.MISSING_MODE_VALUE, variable_id, "No value for mode", name)
            return
        if alias_target_missing:
            self._skip(
                DiagnosticKind.VARIABLE_NOT_FOUND,
                variable_id,
                f"Alias target {value.id} not found",
                name,
            )
            return

        try:
            canonical = self.normalizer.canonicalize(variable, value, target)
            css_value = self.normalizer.render_css(name, canonical)
        except InvalidValue as e:
            kind = next(k for cls, k in _VALUE_ERROR_KINDS if isinstance(e, cls))
            self._skip(kind, variable_id, e.message, name)
            return
        except Exception as e:
            logger.debug("Unexpected error rendering %s", name, exc_info=True)
            self._skip(DiagnosticKind.ERROR, variable_id, f"Failed to render: {e}", name)
            return

        self._candidates.append(
            ExportEntry(
                variable_id=variable.id,
                name=name,
                css_name=css_variable_name(name),
                resolved_type=variable.resolved_type,
                canonical=canonical,
                css_value=css_value,
                alias_target_id=value.id if isinstance(value, VariableAlias) else None,
            )
        )

    def finish(self) -> ModeDocument:
        """Settle duplicates and dangling aliases, then return the document."""
        entries = self._drop_duplicates(self._candidates)
        self.document.entries = self._drop_dangling_aliases(entries)
        return self.document

    def _drop_duplicates(self, entries: list[ExportEntry]) -> list[ExportEntry]:
        seen: set[str] = set()
        kept: list[ExportEntry] = []
        for entry in entries:
            if entry.css_name in seen:
                self._skip(
                    DiagnosticKind.DUPLICATE,
                    entry.variable_id,
                    f"Duplicate output name {entry.css_name}",
                    entry.name,
                )
                continue
            seen.add(entry.css_name)
            kept.append(entry)
        return kept

    def _drop_dangling_aliases(self, entries: list[ExportEntry]) -> list[ExportEntry]:
        # Targets outside this collection live in another document and are not checked here
        while True:
            present = {entry.variable_id for entry in entries}
            kept: list[ExportEntry] = []
            for entry in entries:
                target_id = entry.alias_target_id
                if target_id is None or target_id in present or target_id not in self._members:
                    kept.append(entry)
                else:
                    self._skip_dangling(entry, target_id)
            if len(kept) == len(entries):
                return kept
            entries = kept

    def _skip_dangling(self, entry: ExportEntry, target_id: str) -> None:
        canonical = entry.canonical
        target_name = canonical.target_name if isinstance(canonical, AliasRef) else target_id
        if target_id in self._excluded:
            self._skip(
                DiagnosticKind.EXCLUDED,
                entry.variable_id,
                f"Aliases excluded variable {target_name!r}",
                entry.name,
            )
        else:
            self._skip(
                DiagnosticKind.ALIAS_UNRESOLVED,
                entry.variable_id,
                f"Alias target {target_name!r} was not exported",
                entry.name,
            )


# =============================================================================
# Collection traversal
# =============================================================================


@dataclass
class CollectedExport:
    """Mode documents plus the bookkeeping of the run that produced them."""

    documents: list[ModeDocument] = field(default_factory=list)
    log: DiagnosticLog = field(default_factory=DiagnosticLog)
    processed: int = 0
    skipped: int = 0


@dataclass
class VariableIndex:
    """Snapshot of prefetched variables keyed by id."""

    variables: dict[str, Variable | None] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)

    def get(self, variable_id: str | None) -> Variable | None:
        if variable_id is None:
            return None
        return self.variables.get(variable_id)


async def prefetch_variables(
    store: VariableStore, collections: list[Collection]
) -> VariableIndex:
    """Fetch every variable of every collection concurrently."""
    ids = list(dict.fromkeys(vid for c in collections for vid in c.variable_ids))
    results = await asyncio.gather(
        *(store.get_variable_by_id(vid) for vid in ids), return_exceptions=True
    )
    index = VariableIndex()
    for variable_id, outcome in zip(ids, results, strict=True):
        if isinstance(outcome, Exception):
            index.errors[variable_id] = outcome
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            index.variables[variable_id] = outcome
    logger.debug("Prefetched %d variable(s), %d failed", len(ids), len(index.errors))
    return index


class Exporter:
    """Renders the variables of a store into per-mode documents."""

    def __init__(self, store: VariableStore, config: ExportConfig | None = None):
        self.store = store
        self.config = config or ExportConfig()
        self.normalizer = ValueNormalizer(self.config)
        self.policy = ExclusionPolicy(self.config.exclusion_patterns)

    async def collect(self) -> CollectedExport:
        """
        Render every selected collection mode.

        Raises:
            StoreUnavailable: If the collections cannot be listed.
        """
        try:
            collections = await self.store.list_collections()
        except Exception as e:
            raise StoreUnavailable(f"Cannot list variable collections: {e}") from e

        run = CollectedExport()
        selected = self._select_collections(collections, run.log)

        index: VariableIndex | None = None
        if self.config.strategy == ExportStrategy.PREFETCH:
            index = await prefetch_variables(self.store, collections)

        for collection in selected:
            for mode in collection.modes:
                if not self.config.wants_mode(mode.name):
                    continue
                builder = _ModeBuilder(collection, mode, self.normalizer, self.policy, run.log)
                if index is not None:
                    self._render_from_index(builder, collection, index)
                else:
                    await self._render_sequential(builder, collection)
                document = builder.finish()
                run.documents.append(document)
                run.processed += len(document.entries)
                run.skipped += builder.skipped

        logger.info(
            "Exported %d value(s) across %d mode document(s), %d skipped",
            run.processed,
            len(run.documents),
            run.skipped,
        )
        return run

    def _select_collections(
        self, collections: list[Collection], log: DiagnosticLog
    ) -> list[Collection]:
        if not self.config.selected_collections:
            return collections
        names = {c.name for c in collections}
        for wanted in self.config.selected_collections:
            if wanted not in names:
                log.record(
                    DiagnosticKind.COLLECTION_NOT_FOUND,
                    wanted,
                    "Collection not found",
                    name=wanted,
                )
        return [c for c in collections if self.config.wants_collection(c.name)]

    async def _render_sequential(self, builder: _ModeBuilder, collection: Collection) -> None:
        for variable_id in collection.variable_ids:
            try:
                variable = await self.store.get_variable_by_id(variable_id)
                target_id = builder.alias_target_id(variable)
                target = await self.store.get_variable_by_id(target_id) if target_id else None
            except Exception as e:
                builder.fail(variable_id, e)
                continue
            builder.add(variable_id, variable, target)

    def _render_from_index(
        self, builder: _ModeBuilder, collection: Collection, index: VariableIndex
    ) -> None:
        for variable_id in collection.variable_ids:
            error = index.errors.get(variable_id)
            if error is not None:
                builder.fail(variable_id, error)
                continue
            variable = index.get(variable_id)
            builder.add(variable_id, variable, index.get(builder.alias_target_id(variable)))


# =============================================================================
# Entry points
# =============================================================================


async def export_variables(
    store: VariableStore,
    config: ExportConfig | None = None,
    output_format: ExportFormat = ExportFormat.CSS,
) -> ExportResult:
    """
    Export store variables as CSS files or structured JSON.

    Args:
        store: Variable store to read.
        config: Filtering, rendering and scheduling options.
        output_format: ``css`` fills ``files``; ``json`` fills ``data``.

    Returns:
        ExportResult with output, counts, and diagnostics.

    Raises:
        StoreUnavailable: If the store cannot be reached at all.
    """
    exporter = Exporter(store, config)
    run = await exporter.collect()

    result = ExportResult(
        processed=run.processed,
        skipped=run.skipped,
        diagnostics=list(run.log.items),
    )
    if output_format == ExportFormat.JSON:
        result.data = generate_json_export(run.documents, exporter.normalizer)
    else:
        result.files = generate_css_files(run.documents, exporter.config)
    return result


async def export_css(store: VariableStore, config: ExportConfig | None = None) -> ExportResult:
    """Export variables as one CSS file per mode."""
    return await export_variables(store, config, ExportFormat.CSS)


async def export_json(store: VariableStore, config: ExportConfig | None = None) -> ExportResult:
    """Export variables as ``collection -> mode -> variable -> {type, value}``."""
    return await export_variables(store, config, ExportFormat.JSON)
