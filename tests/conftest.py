"""Shared pytest fixtures for tokenvars tests."""

from typing import Any

import pytest

from tokenvars.store.memory import InMemoryVariableStore

LIGHT = "1:0"
DARK = "1:1"
THEME_ID = "VariableCollectionId:1:0"


def rgba(r: float, g: float, b: float, a: float = 1.0) -> dict[str, float]:
    return {"r": r, "g": g, "b": b, "a": a}


def alias(variable_id: str) -> dict[str, str]:
    return {"type": "VARIABLE_ALIAS", "id": variable_id}


def make_variable(
    variable_id: str, name: str, resolved_type: str, values: dict[str, Any]
) -> dict[str, Any]:
    return {
        "id": variable_id,
        "name": name,
        "collection_id": THEME_ID,
        "resolved_type": resolved_type,
        "values_by_mode": values,
    }


def make_store(variables: list[dict[str, Any]], **kwargs: Any) -> InMemoryVariableStore:
    """Build a store holding one "Theme" collection (Light, Dark Mode) with ``variables``."""
    snapshot = {
        "collections": [
            {
                "id": THEME_ID,
                "name": "Theme",
                "modes": [
                    {"mode_id": LIGHT, "name": "Light"},
                    {"mode_id": DARK, "name": "Dark Mode"},
                ],
                "variable_ids": [v["id"] for v in variables],
            }
        ],
        "variables": variables,
        "next_id": 100,
    }
    return InMemoryVariableStore.from_snapshot(snapshot, **kwargs)


@pytest.fixture
def theme_variables() -> list[dict[str, Any]]:
    """A small theme covering every variable type, aliases, and an internal token."""
    return [
        make_variable("V:1", "color/primary", "COLOR", {LIGHT: rgba(1, 0, 0), DARK: rgba(0, 0, 1)}),
        make_variable("V:2", "spacing/small", "FLOAT", {LIGHT: 8, DARK: 8}),
        make_variable("V:3", "font/weight/bold", "FLOAT", {LIGHT: 700, DARK: 700}),
        make_variable("V:4", "internal/ux-token", "COLOR", {LIGHT: rgba(0, 1, 0), DARK: rgba(0, 1, 0)}),
        make_variable("V:5", "button/bg", "COLOR", {LIGHT: alias("V:1"), DARK: alias("V:1")}),
        make_variable("V:6", "button/ghost", "COLOR", {LIGHT: alias("V:4"), DARK: alias("V:4")}),
        make_variable(
            "V:7", "overlay/clear", "COLOR", {LIGHT: rgba(0, 0, 0, 0), DARK: rgba(0, 0, 0, 0.5)}
        ),
        make_variable("V:8", "font/family/body", "STRING", {LIGHT: "Inter", DARK: "Inter"}),
        make_variable("V:9", "layout/visible", "BOOLEAN", {LIGHT: True, DARK: False}),
    ]


@pytest.fixture
def theme_store(theme_variables: list[dict[str, Any]]) -> InMemoryVariableStore:
    return make_store(theme_variables)


@pytest.fixture
def token_document() -> dict[str, Any]:
    """A token document with nested groups, inherited types and alias chains."""
    return {
        "$type": "color",
        "$description": "Brand tokens",
        "color": {
            "brand": {
                "primary": {"$value": "#16CB7F"},
                "secondary": {"$value": "rgb(0, 128, 255)"},
            },
            "action": {"$value": "{color.brand.primary}"},
            "hover": {"$value": "{color.action}"},
        },
        "spacing": {
            "$type": "number",
            "small": {"$value": 8},
            "large": {"$value": "{spacing.small}"},
        },
    }
