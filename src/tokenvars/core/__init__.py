"""Core tokenvars functionality: IR, colour and value normalisation, token flattening, alias resolution."""

from . import ir
from .aliases import AliasResolver, ResolutionResult, resolve_aliases
from .colors import coerce_color, hsl_to_rgb, parse_color, render_color
from .config_loader import ProjectConfig, load_config, load_token_document
from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLog,
    ExportResult,
    ImportResult,
)
from .errors import (
    AliasTargetUnresolved,
    CollectionNotFound,
    ConfigError,
    ErrorContext,
    InvalidColorFormat,
    InvalidNumberFormat,
    InvalidValue,
    StoreUnavailable,
    TokenVarsError,
    UnsupportedLeafType,
    VariableNotFound,
)
from .token_tree import FlattenResult, flatten_tokens
from .values import ValueNormalizer

__all__ = [
    "ir",
    # Errors
    "TokenVarsError",
    "ErrorContext",
    "InvalidValue",
    "InvalidColorFormat",
    "InvalidNumberFormat",
    "UnsupportedLeafType",
    "AliasTargetUnresolved",
    "VariableNotFound",
    "CollectionNotFound",
    "StoreUnavailable",
    "ConfigError",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
    "ExportResult",
    "ImportResult",
    # Engine
    "AliasResolver",
    "ResolutionResult",
    "resolve_aliases",
    "FlattenResult",
    "flatten_tokens",
    "ValueNormalizer",
    "coerce_color",
    "hsl_to_rgb",
    "parse_color",
    "render_color",
    # Config
    "ProjectConfig",
    "load_config",
    "load_token_document",
]
