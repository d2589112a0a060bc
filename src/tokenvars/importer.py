"""
Token document import.

Flattens a token document, resolves its aliases, and writes the result into
a variable store collection: concrete tokens become variables with values,
alias tokens become variables that alias their target.

Usage::

    store = InMemoryVariableStore()
    result = await import_tokens(store, document, ImportConfig(collection_name="brand"))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tokenvars.core.aliases import AliasResolver
from tokenvars.core.diagnostics import DiagnosticKind, DiagnosticLog, ImportResult
from tokenvars.core.errors import StoreUnavailable, TokenVarsError
from tokenvars.core.ir.config import ImportConfig
from tokenvars.core.ir.tokens import Token
from tokenvars.core.ir.variables import Collection, VariableAlias
from tokenvars.core.token_tree import flatten_tokens
from tokenvars.store.base import VariableStore

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Tokens"


async def import_tokens(
    store: VariableStore,
    document: Mapping[str, Any],
    config: ImportConfig | None = None,
) -> ImportResult:
    """
    Import a token document into a variable store.

    Creates the target collection when it does not exist. When ``mode_name``
    is given, values are written into that mode (added to the collection if
    missing) and variables already present under the same name are reused,
    so several documents can populate one collection as modes.

    Args:
        store: Target variable store.
        document: Parsed token document.
        config: Collection and mode selection.

    Returns:
        ImportResult with the created variables, unresolved aliases, and
        diagnostics.

    Raises:
        StoreUnavailable: If the target collection cannot be created or read.
    """
    config = config or ImportConfig()
    collection_name = config.collection_name or DEFAULT_COLLECTION_NAME

    flattened = flatten_tokens(document)
    resolution = AliasResolver().resolve(flattened.deferred, flattened.materialized)

    collection, mode_id, existing = await _prepare_collection(
        store, collection_name, config.mode_name
    )
    result = ImportResult(collection_id=collection.id, mode_id=mode_id, rounds=resolution.rounds)
    log = DiagnosticLog(result.diagnostics)
    log.extend(flattened.diagnostics)
    log.extend(resolution.diagnostics)
    result.unresolved = {alias.key: alias.target_key for alias in resolution.unresolved}

    # Targets always precede their aliases in materialisation order
    for key, token in resolution.materialized.items():
        try:
            variable_id = await _write_token(store, collection, mode_id, token, result, existing)
        except TokenVarsError as e:
            log.record(DiagnosticKind.ERROR, key, e.message, name=key)
            continue
        except Exception as e:
            logger.debug("Unexpected error writing %s", key, exc_info=True)
            log.record(DiagnosticKind.ERROR, key, f"Failed to write variable: {e}", name=key)
            continue
        if variable_id is not None:
            result.created[key] = variable_id
        else:
            log.record(
                DiagnosticKind.ALIAS_UNRESOLVED,
                key,
                f"Alias target {token.target_key!r} was not created",
                name=key,
            )

    logger.info(
        "Imported %d variable(s) into %s, %d unresolved alias(es), %d diagnostic(s)",
        result.created_count,
        collection_name,
        len(result.unresolved),
        len(result.diagnostics),
    )
    return result


async def _prepare_collection(
    store: VariableStore, name: str, mode_name: str | None
) -> tuple[Collection, str, dict[str, str]]:
    """Open the target collection and mode and index the variables already in it.

    Raises:
        StoreUnavailable: If any of the store calls involved fails.
    """
    try:
        collection, mode_id = await _open_collection(store, name, mode_name)
        existing = await _existing_variables(store, collection)
    except TokenVarsError:
        raise
    except Exception as e:
        raise StoreUnavailable(f"Cannot prepare collection {name!r}: {e}") from e
    return collection, mode_id, existing


async def _open_collection(
    store: VariableStore, name: str, mode_name: str | None
) -> tuple[Collection, str]:
    collection = await store.find_collection(name)
    if collection is None:
        collection = await store.create_collection(name)
        if mode_name:
            await store.rename_mode(collection.id, collection.default_mode_id, mode_name)
        return collection, collection.default_mode_id

    if not mode_name:
        return collection, collection.default_mode_id
    mode = collection.find_mode(mode_name)
    if mode is not None:
        return collection, mode.mode_id
    return collection, await store.add_mode(collection.id, mode_name)


async def _existing_variables(store: VariableStore, collection: Collection) -> dict[str, str]:
    """Name -> id for variables already in the collection."""
    existing: dict[str, str] = {}
    for variable_id in collection.variable_ids:
        variable = await store.get_variable_by_id(variable_id)
        if variable is not None:
            existing[variable.name] = variable.id
    return existing


async def _write_token(
    store: VariableStore,
    collection: Collection,
    mode_id: str,
    token: Token,
    result: ImportResult,
    existing: dict[str, str],
) -> str | None:
    if token.is_alias_ref:
        target_id = result.created.get(token.target_key or "")
        if target_id is None:
            return None
        value: Any = VariableAlias(id=target_id)
    else:
        value = token.value

    variable_id = existing.get(token.key)
    if variable_id is None:
        variable = await store.create_variable(token.key, collection.id, token.variable_type)
        variable_id = variable.id
        existing[token.key] = variable_id
    await store.set_value_for_mode(variable_id, mode_id, value)
    return variable_id
