"""
Token document flattening.

Walks a nested W3C-style token document (``$type`` / ``$value``) and
produces flat, slash-keyed leaves. Concrete leaves are normalised into
store values on the way; alias leaves whose target has not been seen yet
are deferred for the alias resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .colors import coerce_color
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog
from .errors import (
    ConfigError,
    InvalidColorFormat,
    InvalidNumberFormat,
    InvalidValue,
    UnsupportedLeafType,
)
from .ir.tokens import TOKEN_TYPE_MAP, Alias, Token, is_alias_value, normalize_alias_target
from .ir.variables import RGBA, VariableType
from .values import parse_boolean, parse_number

logger = logging.getLogger(__name__)

METADATA_SIGIL = "$"

_ERROR_KINDS: dict[type[Exception], DiagnosticKind] = {
    InvalidColorFormat: DiagnosticKind.INVALID_COLOR,
    InvalidNumberFormat: DiagnosticKind.INVALID_NUMBER,
    UnsupportedLeafType: DiagnosticKind.UNSUPPORTED_TYPE,
    InvalidValue: DiagnosticKind.INVALID_VALUE,
}


@dataclass
class FlattenResult:
    """Leaves of one token document, in document order."""

    materialized: dict[str, Token] = field(default_factory=dict)
    deferred: dict[str, Alias] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def flatten_tokens(document: Mapping[str, Any]) -> FlattenResult:
    """
    Flatten a token document into materialised leaves and deferred aliases.

    A node is a leaf iff it carries ``$value``; every other mapping is a
    group whose children are joined to its key with ``/``. Keys starting
    with ``$`` are metadata and never become tokens. A leaf's type is its
    own ``$type``, else the nearest ancestor's, else the document's.

    Args:
        document: Parsed token document.

    Returns:
        FlattenResult with materialised tokens, deferred aliases, and
        diagnostics for every dropped leaf.

    Raises:
        ConfigError: If the document is not a mapping.
    """
    if not isinstance(document, Mapping):
        raise ConfigError(f"Token document must be an object, got {type(document).__name__}")

    result = FlattenResult()
    log = DiagnosticLog(result.diagnostics)
    root_type = document.get("$type")

    # Explicit stack, children pushed in reverse so leaves come out in document order
    stack: list[tuple[str, Any, str | None]] = [
        (key, node, root_type) for key, node in reversed(list(document.items())) if not _is_meta(key)
    ]
    while stack:
        key, node, inherited_type = stack.pop()
        if not isinstance(node, Mapping):
            log.record(
                DiagnosticKind.INVALID_VALUE,
                key,
                f"Expected a token or group, got {type(node).__name__}",
                name=key,
            )
            continue

        own_type = node.get("$type")
        effective_type = own_type if own_type is not None else inherited_type

        if "$value" in node:
            _add_leaf(result, log, key, node["$value"], effective_type)
            continue

        children = [
            (f"{key}/{child_key}", child, effective_type)
            for child_key, child in node.items()
            if not _is_meta(child_key)
        ]
        stack.extend(reversed(children))

    logger.debug(
        "Flattened %d token(s), %d deferred alias(es), %d dropped",
        len(result.materialized),
        len(result.deferred),
        len(result.diagnostics),
    )
    return result


def _is_meta(key: str) -> bool:
    return key.startswith(METADATA_SIGIL)


def _add_leaf(
    result: FlattenResult,
    log: DiagnosticLog,
    key: str,
    raw_value: Any,
    token_type: str | None,
) -> None:
    if key in result.materialized or key in result.deferred:
        log.record(DiagnosticKind.DUPLICATE, key, "Duplicate token key, first wins", name=key)
        return

    if is_alias_value(raw_value):
        target_key = normalize_alias_target(str(raw_value))
        target = result.materialized.get(target_key)
        if target is not None:
            result.materialized[key] = Token(
                key=key,
                type=token_type,
                raw_value=raw_value,
                variable_type=target.variable_type,
                is_alias_ref=True,
                target_key=target_key,
            )
        else:
            result.deferred[key] = Alias(
                key=key,
                target_key=target_key,
                declared_type=token_type,
                raw_value=str(raw_value),
            )
        return

    try:
        variable_type = _variable_type(token_type)
        value = normalize_leaf_value(variable_type, raw_value)
    except (InvalidValue, UnsupportedLeafType) as e:
        log.record(_ERROR_KINDS.get(type(e), DiagnosticKind.ERROR), key, e.message, name=key)
        return

    result.materialized[key] = Token(
        key=key,
        type=token_type,
        raw_value=raw_value,
        variable_type=variable_type,
        value=value,
    )


def _variable_type(token_type: str | None) -> VariableType:
    if token_type is None:
        raise UnsupportedLeafType("Token has no $type")
    variable_type = TOKEN_TYPE_MAP.get(token_type)
    if variable_type is None:
        raise UnsupportedLeafType(f"Unsupported token type {token_type!r}")
    return variable_type


def normalize_leaf_value(variable_type: VariableType, raw_value: Any) -> RGBA | float | str | bool:
    """Convert an authored ``$value`` into the value stored on a variable."""
    if variable_type == VariableType.COLOR:
        return coerce_color(raw_value)
    if variable_type == VariableType.FLOAT:
        return parse_number(raw_value)
    if variable_type == VariableType.BOOLEAN:
        return parse_boolean(raw_value)
    if isinstance(raw_value, list):
        return ", ".join(str(item) for item in raw_value)
    if isinstance(raw_value, Mapping):
        raise InvalidValue(f"Composite value not supported for text token: {dict(raw_value)!r}")
    return str(raw_value)
