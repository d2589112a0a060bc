"""
Canonical values and the value normaliser.

Stored variable values come in several shapes (RGBA models, colour
strings, numbers authored as text, booleans, aliases). The normaliser
turns each into a canonical value, then renders it as CSS text or as a
JSON-native value. All naming policy comes from ``ExportConfig``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from .colors import coerce_color, render_color
from .errors import InvalidNumberFormat, InvalidValue
from .ir.config import ExportConfig
from .ir.variables import RGBA, Variable, VariableType, is_alias
from .naming import NamePatterns, alias_reference, css_variable_name

logger = logging.getLogger(__name__)

_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


# =============================================================================
# Canonical values
# =============================================================================


@dataclass(frozen=True)
class ColorValue:
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_rgba(cls, color: RGBA) -> ColorValue:
        return cls(r=color.r, g=color.g, b=color.b, a=color.a)

    def to_rgba(self) -> RGBA:
        return RGBA(r=self.r, g=self.g, b=self.b, a=self.a)


@dataclass(frozen=True)
class NumberValue:
    value: float
    unit_eligible: bool = True


@dataclass(frozen=True)
class TextValue:
    value: str


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class AliasRef:
    target_name: str


CanonicalValue = ColorValue | NumberValue | TextValue | BoolValue | AliasRef


# =============================================================================
# Number helpers
# =============================================================================


def parse_number(value: Any) -> float:
    """Read a number the way authoring tools do: the leading numeric part wins.

    ``8`` -> 8.0, ``"1.5rem"`` -> 1.5, ``"abc"`` -> error.

    Raises:
        InvalidNumberFormat: If no finite number can be read.
    """
    if isinstance(value, bool):
        raise InvalidNumberFormat(f"Expected a number, got boolean {value!r}")
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str) and (match := _LEADING_NUMBER_RE.match(value)):
        number = float(match.group(0))
    else:
        raise InvalidNumberFormat(f"Not a number: {value!r}")
    if not math.isfinite(number):
        raise InvalidNumberFormat(f"Not a finite number: {value!r}")
    return number


def format_number(value: float) -> str:
    """Shortest text for a number: ``8.0`` -> ``8``, ``1.5`` -> ``1.5``."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidValue(f"Not a boolean: {value!r}")


# =============================================================================
# Normaliser
# =============================================================================


class ValueNormalizer:
    """Canonicalises and renders variable values under an ``ExportConfig``."""

    def __init__(self, config: ExportConfig | None = None):
        self.config = config or ExportConfig()
        self._unit_exempt = NamePatterns(self.config.unit_exempt_patterns)
        self._quoted = NamePatterns(self.config.quoted_string_patterns)
        self._boolean_patterns = NamePatterns(self.config.boolean_render_map)

    def canonicalize(
        self,
        variable: Variable,
        value: Any,
        target: Variable | None = None,
    ) -> CanonicalValue:
        """Normalise one mode value of ``variable``.

        Args:
            variable: The variable that owns the value.
            value: The raw mode value.
            target: The referenced variable, when ``value`` is an alias.

        Raises:
            InvalidValue: If the value does not fit the variable's type.
        """
        if is_alias(value):
            if target is None:
                raise InvalidValue(f"Alias {value.id} has no target variable")
            return AliasRef(target_name=target.name)

        match variable.resolved_type:
            case VariableType.COLOR:
                return ColorValue.from_rgba(coerce_color(value))
            case VariableType.FLOAT:
                return NumberValue(
                    value=parse_number(value),
                    unit_eligible=not self._unit_exempt.matches(variable.name),
                )
            case VariableType.BOOLEAN:
                return BoolValue(value=parse_boolean(value))
            case _:
                if isinstance(value, dict | list):
                    raise InvalidValue(f"Expected text, got {type(value).__name__}")
                return TextValue(value=str(value))

    def render_css(self, name: str, value: CanonicalValue) -> str:
        """Render a canonical value as CSS text for the variable ``name``."""
        override = self.config.value_overrides.get(name)
        if override is not None:
            return override
        return self._render(name, value)

    def _render(self, name: str, value: CanonicalValue) -> str:
        if isinstance(value, ColorValue):
            return render_color(
                value.to_rgba(),
                alpha_precision=self.config.alpha_precision,
                alpha_zero_keyword=self.config.alpha_zero_keyword,
            )
        if isinstance(value, NumberValue):
            text = format_number(value.value)
            return text + self.config.unit if value.unit_eligible else text
        if isinstance(value, BoolValue):
            pattern = self._boolean_patterns.first_match(name)
            if pattern is not None:
                true_text, false_text = self.config.boolean_render_map[pattern]
                return true_text if value.value else false_text
            return "true" if value.value else "false"
        if isinstance(value, AliasRef):
            return f"var({css_variable_name(value.target_name)})"
        if self._quoted.matches(name):
            escaped = value.value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return value.value

    def to_json(self, value: CanonicalValue) -> Any:
        """JSON-native form of a canonical value (no unit suffixes)."""
        if isinstance(value, ColorValue):
            return render_color(value.to_rgba(), alpha_precision=self.config.alpha_precision)
        if isinstance(value, NumberValue):
            return int(value.value) if value.value.is_integer() else value.value
        if isinstance(value, AliasRef):
            return alias_reference(value.target_name)
        return value.value
