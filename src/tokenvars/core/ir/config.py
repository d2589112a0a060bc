"""
Import and export configuration.

All naming and filtering policy lives here rather than in the engine:
which names are excluded, which numbers stay unitless, which strings are
quoted, how booleans and fully transparent colours render, and which
values a brand overrides outright.
"""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExportStrategy(StrEnum):
    """How the exporter schedules reads against the variable store."""

    SEQUENTIAL = "sequential"
    PREFETCH = "prefetch"


class ExportFormat(StrEnum):
    CSS = "css"
    JSON = "json"


def _check_patterns(patterns: list[str]) -> list[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid name pattern {pattern!r}: {e}") from e
    return patterns


class ExportConfig(BaseModel):
    """Options recognised by the exporter.

    Name patterns are case-insensitive regular expressions matched with
    ``re.search``, so a plain word behaves as a substring match.
    """

    model_config = ConfigDict(frozen=True)

    selected_modes: list[str] = Field(
        default_factory=list, description="Mode names to export (empty = all)"
    )
    selected_collections: list[str] = Field(
        default_factory=list, description="Collection names to export (empty = all)"
    )
    exclusion_patterns: list[str] = Field(
        default_factory=lambda: ["ux"],
        description="Names matching any pattern are dropped, along with aliases to them",
    )
    unit_exempt_patterns: list[str] = Field(
        default_factory=lambda: ["weight", "bold", "regular", "visibility"],
        description="FLOAT names that render without a unit suffix",
    )
    unit: str = Field(default="px", description="Unit suffix for FLOAT values")
    quoted_string_patterns: list[str] = Field(
        default_factory=list, description="STRING names whose value is wrapped in quotes"
    )
    boolean_render_map: dict[str, tuple[str, str]] = Field(
        default_factory=dict,
        description="Name pattern -> (true_text, false_text) for BOOLEAN variables",
    )
    alpha_zero_keyword: str | None = Field(
        default=None, description="Literal used for colours with alpha exactly 0"
    )
    alpha_precision: int = Field(default=4, ge=0, le=10)
    value_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Variable name -> literal, replacing the rendered value",
    )
    strategy: ExportStrategy = ExportStrategy.SEQUENTIAL
    selector: str = ":root"
    indent: int = Field(default=4, ge=0)

    @field_validator("exclusion_patterns", "unit_exempt_patterns", "quoted_string_patterns")
    @classmethod
    def _validate_patterns(cls, value: list[str]) -> list[str]:
        return _check_patterns(value)

    @field_validator("boolean_render_map")
    @classmethod
    def _validate_boolean_patterns(
        cls, value: dict[str, tuple[str, str]]
    ) -> dict[str, tuple[str, str]]:
        _check_patterns(list(value))
        return value

    def wants_mode(self, mode_name: str) -> bool:
        return not self.selected_modes or mode_name in self.selected_modes

    def wants_collection(self, collection_name: str) -> bool:
        return not self.selected_collections or collection_name in self.selected_collections


class ImportConfig(BaseModel):
    """Options recognised by the importer."""

    model_config = ConfigDict(frozen=True)

    collection_name: str | None = Field(
        default=None, description="Target collection (default: token file stem)"
    )
    mode_name: str | None = Field(
        default=None,
        description="Mode to write values into; added to an existing collection if missing",
    )
