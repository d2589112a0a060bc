"""
Structured JSON export.

Produces ``collection -> mode -> variable -> {type, value}`` for consumers
that want machine-readable variables rather than CSS text. Values are
JSON-native; aliases use the token document alias syntax
(``{color.primary}``) so the output can be read back by the importer's
conventions.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tokenvars.core.values import ValueNormalizer

from .documents import ModeDocument


def generate_json_export(
    documents: list[ModeDocument], normalizer: ValueNormalizer | None = None
) -> dict[str, Any]:
    """Nest rendered entries by collection and mode name."""
    normalizer = normalizer or ValueNormalizer()
    data: dict[str, Any] = {}
    for document in documents:
        modes = data.setdefault(document.collection.name, {})
        variables = modes.setdefault(document.mode.name, {})
        for entry in document.entries:
            variables[entry.name] = {
                "type": str(entry.resolved_type),
                "value": normalizer.to_json(entry.canonical),
            }
    return data


def write_json_export(data: dict[str, Any], output_path: Path) -> Path:
    """Write a structured export to a JSON file.

    Returns:
        Path to the written file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return output_path
