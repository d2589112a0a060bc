"""
In-memory variable store with JSON snapshot persistence.

Ids follow the design tool's shape (``VariableCollectionId:1:0``,
``VariableID:1:2``, mode ``1:0``). Reads return copies, so callers never
observe later writes through an object they already hold.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from tokenvars.core.colors import coerce_color
from tokenvars.core.errors import (
    CollectionNotFound,
    ConfigError,
    ErrorContext,
    InvalidValue,
    VariableNotFound,
)
from tokenvars.core.ir.variables import (
    RGBA,
    Collection,
    Mode,
    Variable,
    VariableAlias,
    VariableType,
    VariableValue,
)

from .base import VariableStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class InMemoryVariableStore(VariableStore):
    """
    Variable store held in memory.

    Features:
    - Optional per-call latency, to model a remote store
    - Snapshot to and from JSON for CLI round trips
    - Type checks on every value written
    """

    def __init__(self, latency: float = 0.0):
        """
        Initialize the store.

        Args:
            latency: Seconds to sleep on every read, 0 for none.
        """
        self.latency = latency
        self._collections: dict[str, Collection] = {}
        self._variables: dict[str, Variable] = {}
        self._next_id = 0
        self.read_count = 0

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def _read_delay(self) -> None:
        self.read_count += 1
        if self.latency:
            await asyncio.sleep(self.latency)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_collections(self) -> list[Collection]:
        await self._read_delay()
        return [c.model_copy(deep=True) for c in self._collections.values()]

    async def get_collection_by_id(self, collection_id: str) -> Collection | None:
        await self._read_delay()
        collection = self._collections.get(collection_id)
        return collection.model_copy(deep=True) if collection else None

    async def get_variable_by_id(self, variable_id: str) -> Variable | None:
        await self._read_delay()
        variable = self._variables.get(variable_id)
        return variable.model_copy(deep=True) if variable else None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_collection(self, name: str) -> Collection:
        number = self._new_id()
        collection = Collection(
            id=f"VariableCollectionId:{number}:0",
            name=name,
            modes=[Mode(mode_id=f"{number}:0", name="Mode 1")],
        )
        self._collections[collection.id] = collection
        logger.debug("Created collection %s (%s)", name, collection.id)
        return collection.model_copy(deep=True)

    async def add_mode(self, collection_id: str, name: str) -> str:
        collection = self._require_collection(collection_id)
        mode = Mode(mode_id=f"{collection_id.split(':')[1]}:{len(collection.modes)}", name=name)
        collection.modes.append(mode)
        return mode.mode_id

    async def rename_mode(self, collection_id: str, mode_id: str, name: str) -> None:
        collection = self._require_collection(collection_id)
        for index, mode in enumerate(collection.modes):
            if mode.mode_id == mode_id:
                collection.modes[index] = Mode(mode_id=mode_id, name=name)
                return
        raise CollectionNotFound(f"Mode {mode_id} not found in collection {collection_id}")

    async def create_variable(
        self, name: str, collection_id: str, resolved_type: VariableType
    ) -> Variable:
        collection = self._require_collection(collection_id)
        number = self._new_id()
        variable = Variable(
            id=f"VariableID:{collection_id.split(':')[1]}:{number}",
            name=name,
            collection_id=collection_id,
            resolved_type=resolved_type,
        )
        self._variables[variable.id] = variable
        collection.variable_ids.append(variable.id)
        return variable.model_copy(deep=True)

    async def set_value_for_mode(
        self, variable_id: str, mode_id: str, value: VariableValue
    ) -> None:
        variable = self._variables.get(variable_id)
        if variable is None:
            raise VariableNotFound(f"Variable {variable_id} not found")
        collection = self._require_collection(variable.collection_id)
        if collection.get_mode(mode_id) is None:
            raise InvalidValue(
                f"Mode {mode_id} does not belong to collection {collection.name}",
                ErrorContext(key=variable.name, item_id=variable.id),
            )
        variable.values_by_mode[mode_id] = _check_value(variable, value)

    def _require_collection(self, collection_id: str) -> Collection:
        collection = self._collections.get(collection_id)
        if collection is None:
            raise CollectionNotFound(f"Collection {collection_id} not found")
        return collection

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "next_id": self._next_id,
            "collections": [c.model_dump(mode="json") for c in self._collections.values()],
            "variables": [v.model_dump(mode="json") for v in self._variables.values()],
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any], latency: float = 0.0) -> InMemoryVariableStore:
        store = cls(latency=latency)
        try:
            for raw in data.get("collections", []):
                collection = Collection.model_validate(raw)
                store._collections[collection.id] = collection
            for raw in data.get("variables", []):
                variable = Variable.model_validate(raw)
                store._variables[variable.id] = variable
        except ValueError as e:
            raise ConfigError(f"Invalid store snapshot: {e}") from e
        store._next_id = int(data.get("next_id", len(store._variables) + len(store._collections)))
        return store

    @classmethod
    def load(cls, path: Path) -> InMemoryVariableStore:
        """Load a store from a JSON snapshot; a missing file gives an empty store."""
        if not path.exists():
            logger.debug("No store snapshot at %s, starting empty", path)
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
        return cls.from_snapshot(data)

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_snapshot(), indent=2), encoding="utf-8")
        return path


def _check_value(variable: Variable, value: VariableValue) -> VariableValue:
    """Ensure a concrete value matches the variable's resolved type."""
    if isinstance(value, VariableAlias):
        return value
    match variable.resolved_type:
        case VariableType.COLOR:
            if isinstance(value, RGBA):
                return value
            return coerce_color(value)
        case VariableType.FLOAT:
            if isinstance(value, int | float) and not isinstance(value, bool):
                return float(value)
        case VariableType.STRING:
            if isinstance(value, str):
                return value
        case VariableType.BOOLEAN:
            if isinstance(value, bool):
                return value
    raise InvalidValue(
        f"Value {value!r} does not match type {variable.resolved_type}",
        ErrorContext(key=variable.name, item_id=variable.id),
    )
