"""
Variable store IR types.

Mirrors the shape of a design tool's local variables: collections own an
ordered list of modes and variable ids, and each variable maps mode ids to
either a concrete value or an alias to another variable.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class VariableType(StrEnum):
    """Resolved type of a variable."""

    COLOR = "COLOR"
    FLOAT = "FLOAT"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"


ALIAS_TYPE = "VARIABLE_ALIAS"


# =============================================================================
# Values
# =============================================================================


class RGBA(BaseModel):
    """A colour with float channels in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    r: float = Field(ge=0.0, le=1.0)
    g: float = Field(ge=0.0, le=1.0)
    b: float = Field(ge=0.0, le=1.0)
    a: float = Field(default=1.0, ge=0.0, le=1.0)


class VariableAlias(BaseModel):
    """A mode value that points at another variable instead of holding a value."""

    model_config = ConfigDict(frozen=True)

    type: Literal["VARIABLE_ALIAS"] = ALIAS_TYPE
    id: str


VariableValue = RGBA | VariableAlias | bool | float | str


def is_alias(value: object) -> bool:
    """Check whether a stored mode value is an alias reference."""
    return isinstance(value, VariableAlias)


# =============================================================================
# Collections and variables
# =============================================================================


class Mode(BaseModel):
    """A named variant axis within a collection (Light, Dark, Brand A...)."""

    model_config = ConfigDict(frozen=True)

    mode_id: str
    name: str


class Collection(BaseModel):
    """A named group of variables sharing a set of modes."""

    id: str
    name: str
    modes: list[Mode] = Field(default_factory=list)
    variable_ids: list[str] = Field(default_factory=list)

    @property
    def default_mode_id(self) -> str:
        """The first mode is the default one."""
        return self.modes[0].mode_id

    def get_mode(self, mode_id: str) -> Mode | None:
        for mode in self.modes:
            if mode.mode_id == mode_id:
                return mode
        return None

    def find_mode(self, name: str) -> Mode | None:
        """Find a mode by name."""
        for mode in self.modes:
            if mode.name == name:
                return mode
        return None


class Variable(BaseModel):
    """A design variable owned by a collection."""

    id: str
    name: str
    collection_id: str
    resolved_type: VariableType
    values_by_mode: dict[str, VariableValue] = Field(default_factory=dict)
