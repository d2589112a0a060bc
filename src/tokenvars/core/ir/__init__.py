"""
tokenvars Intermediate Representation (IR) types.

All types are re-exported from this package.
"""

from .config import ExportConfig, ExportFormat, ExportStrategy, ImportConfig
from .tokens import (
    TOKEN_TYPE_MAP,
    Alias,
    Token,
    is_alias_value,
    normalize_alias_target,
)
from .variables import (
    ALIAS_TYPE,
    RGBA,
    Collection,
    Mode,
    Variable,
    VariableAlias,
    VariableType,
    VariableValue,
    is_alias,
)

__all__ = [
    # Variables
    "ALIAS_TYPE",
    "RGBA",
    "Collection",
    "Mode",
    "Variable",
    "VariableAlias",
    "VariableType",
    "VariableValue",
    "is_alias",
    # Tokens
    "TOKEN_TYPE_MAP",
    "Alias",
    "Token",
    "is_alias_value",
    "normalize_alias_target",
    # Config
    "ExportConfig",
    "ExportFormat",
    "ExportStrategy",
    "ImportConfig",
]
