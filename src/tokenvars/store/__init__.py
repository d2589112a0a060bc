"""Variable stores: the abstract interface and an in-memory implementation."""

from .base import VariableStore
from .memory import InMemoryVariableStore

__all__ = ["VariableStore", "InMemoryVariableStore"]
