"""
Token document IR types.

Tokens and aliases are transient: they exist between flattening a token
document and writing variables into a store.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from .variables import RGBA, VariableType

# Token $type -> variable type. Anything else is an unsupported leaf.
TOKEN_TYPE_MAP: dict[str, VariableType] = {
    "color": VariableType.COLOR,
    "number": VariableType.FLOAT,
    "dimension": VariableType.FLOAT,
    "fontWeight": VariableType.FLOAT,
    "duration": VariableType.FLOAT,
    "string": VariableType.STRING,
    "fontFamily": VariableType.STRING,
    "boolean": VariableType.BOOLEAN,
}


class Token(BaseModel):
    """
    A materialised leaf ready to become a variable.

    Concrete tokens carry a normalised ``value``. Alias tokens carry
    ``target_key`` and inherit ``variable_type`` from their target.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    type: str | None
    raw_value: Any
    variable_type: VariableType
    is_alias_ref: bool = False
    value: RGBA | bool | float | str | None = None
    target_key: str | None = None


class Alias(BaseModel):
    """An alias whose target has not been materialised yet."""

    model_config = ConfigDict(frozen=True)

    key: str
    target_key: str
    declared_type: str | None = None
    raw_value: str = ""


def normalize_alias_target(value: str) -> str:
    """Turn ``{color.primary}`` into ``color/primary``."""
    return value.strip().replace(".", "/").replace("{", "").replace("}", "")


def is_alias_value(value: Any) -> bool:
    """A value is an alias iff, once trimmed, it starts with ``{``."""
    if value is None or isinstance(value, bool | dict | list):
        return False
    return str(value).strip().startswith("{")
