"""
Variable store interface.

The importer writes through and the exporter reads from this interface;
the concrete store may be a design tool's variable API, a remote service,
or the in-memory snapshot store used by the CLI and tests. Every method
is a suspension point.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tokenvars.core.ir.variables import Collection, Variable, VariableType, VariableValue


class VariableStore(ABC):
    """Abstract variable store."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_collections(self) -> list[Collection]:
        """Return all local collections in store order."""
        pass

    @abstractmethod
    async def get_collection_by_id(self, collection_id: str) -> Collection | None:
        """Return a collection, or None if it does not exist."""
        pass

    @abstractmethod
    async def get_variable_by_id(self, variable_id: str) -> Variable | None:
        """Return a variable, or None if it does not exist."""
        pass

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @abstractmethod
    async def create_collection(self, name: str) -> Collection:
        """Create a collection with one default mode.

        Returns:
            The new collection; ``default_mode_id`` identifies its mode.
        """
        pass

    @abstractmethod
    async def add_mode(self, collection_id: str, name: str) -> str:
        """Add a mode to a collection and return its mode id."""
        pass

    @abstractmethod
    async def rename_mode(self, collection_id: str, mode_id: str, name: str) -> None:
        pass

    @abstractmethod
    async def create_variable(
        self, name: str, collection_id: str, resolved_type: VariableType
    ) -> Variable:
        """Create a variable in a collection."""
        pass

    @abstractmethod
    async def set_value_for_mode(
        self, variable_id: str, mode_id: str, value: VariableValue
    ) -> None:
        """Set a variable's value (or alias) for one mode."""
        pass

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def find_collection(self, name: str) -> Collection | None:
        """Find a collection by name."""
        for collection in await self.list_collections():
            if collection.name == name:
                return collection
        return None
