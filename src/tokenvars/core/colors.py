"""
Colour parsing and rendering.

Parses the colour notations found in token documents into float RGBA
channels, and renders stored colours back to CSS. No external colour
libraries required.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from .errors import InvalidColorFormat
from .ir.variables import RGBA

_NUM = r"(\d+(?:\.\d+)?|\.\d+)"
_HUE = r"([-+]?(?:\d+(?:\.\d+)?|\.\d+))"

_RGB_RE = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")
_RGBA_RE = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*" + _NUM + r"\s*\)$"
)
_HSL_RE = re.compile(r"^hsl\(\s*" + _HUE + r"\s*,\s*" + _NUM + r"%\s*,\s*" + _NUM + r"%\s*\)$")
_HSLA_RE = re.compile(
    r"^hsla\(\s*" + _HUE + r"\s*,\s*" + _NUM + r"%\s*,\s*" + _NUM + r"%\s*,\s*" + _NUM + r"\s*\)$"
)
_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{3}){1,2}$")
_FLOAT_OBJECT_RE = re.compile(
    r'^\{\s*"?r"?\s*:\s*' + _NUM + r'\s*,\s*"?g"?\s*:\s*' + _NUM + r'\s*,\s*"?b"?\s*:\s*' + _NUM
    + r'\s*(?:,\s*"?(?:opacity|a)"?\s*:\s*' + _NUM + r"\s*)?\}$"
)


# =============================================================================
# Parsing
# =============================================================================


def parse_color(color: str) -> RGBA:
    """Parse a colour string into float RGBA channels.

    Accepts ``rgb()``, ``rgba()``, ``hsl()``, ``hsla()``, 3- or 6-digit
    ``#hex`` and the float-object form ``{r: .., g: .., b: .., opacity: ..}``.

    Args:
        color: Colour text as authored.

    Returns:
        RGBA with every channel in [0, 1].

    Raises:
        InvalidColorFormat: If the text matches none of the grammars, or a
            channel is out of range.
    """
    text = color.strip()

    if match := _RGB_RE.match(text):
        r, g, b = (_byte_channel(v, color) for v in match.groups())
        return RGBA(r=r, g=g, b=b)

    if match := _RGBA_RE.match(text):
        r, g, b = (_byte_channel(v, color) for v in match.groups()[:3])
        return RGBA(r=r, g=g, b=b, a=_unit(match.group(4), color))

    if match := _HSL_RE.match(text):
        h, s, lum = match.groups()
        return hsl_to_rgb(float(h), _percent(s, color), _percent(lum, color))

    if match := _HSLA_RE.match(text):
        h, s, lum, a = match.groups()
        rgb = hsl_to_rgb(float(h), _percent(s, color), _percent(lum, color))
        return rgb.model_copy(update={"a": _unit(a, color)})

    if _HEX_RE.match(text):
        digits = text[1:]
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return RGBA(
            r=int(digits[0:2], 16) / 255,
            g=int(digits[2:4], 16) / 255,
            b=int(digits[4:6], 16) / 255,
        )

    if match := _FLOAT_OBJECT_RE.match(text):
        r, g, b, a = match.groups()
        channels = [_unit(v, color) for v in (r, g, b)]
        alpha = _unit(a, color) if a is not None else 1.0
        return RGBA(r=channels[0], g=channels[1], b=channels[2], a=alpha)

    raise InvalidColorFormat(f"Invalid color format: {color!r}")


def coerce_color(value: Any) -> RGBA:
    """Turn a stored colour value (RGBA, mapping, or text) into RGBA."""
    if isinstance(value, RGBA):
        return value
    if isinstance(value, Mapping):
        if not all(channel in value for channel in ("r", "g", "b")):
            raise InvalidColorFormat(f"Color object is missing channels: {dict(value)!r}")
        alpha = value.get("a", value.get("opacity", 1.0))
        try:
            return RGBA(r=value["r"], g=value["g"], b=value["b"], a=alpha)
        except ValueError as e:
            raise InvalidColorFormat(f"Invalid color object {dict(value)!r}: {e}") from e
    if isinstance(value, str):
        return parse_color(value)
    raise InvalidColorFormat(f"Unsupported color value: {value!r}")


def hsl_to_rgb(h: float, s: float, lum: float) -> RGBA:
    """Convert HSL to float RGB.

    Args:
        h: Hue in degrees (wrapped into 0-360).
        s: Saturation (0-1).
        lum: Lightness (0-1).

    Returns:
        RGBA with alpha 1.
    """
    if s == 0:
        return RGBA(r=lum, g=lum, b=lum)

    hue = (h % 360) / 360
    q = lum * (1 + s) if lum < 0.5 else lum + s - lum * s
    p = 2 * lum - q

    return RGBA(
        r=_clamp(_hue_to_rgb(p, q, (hue + 1 / 3) % 1)),
        g=_clamp(_hue_to_rgb(p, q, hue)),
        b=_clamp(_hue_to_rgb(p, q, (hue - 1 / 3) % 1)),
    )


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def _byte_channel(text: str, color: str) -> float:
    value = int(text)
    if value > 255:
        raise InvalidColorFormat(f"Channel {value} out of range 0-255 in {color!r}")
    return value / 255


def _percent(text: str, color: str) -> float:
    value = float(text)
    if value > 100:
        raise InvalidColorFormat(f"Percentage {text}% out of range in {color!r}")
    return value / 100


def _unit(text: str, color: str) -> float:
    value = float(text)
    if value > 1:
        raise InvalidColorFormat(f"Value {text} out of range 0-1 in {color!r}")
    return value


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


# =============================================================================
# Rendering
# =============================================================================


def to_byte(channel: float) -> int:
    """Quantise a [0, 1] channel to 0-255, rounding halves up."""
    return int(math.floor(channel * 255 + 0.5))


def render_color(
    color: RGBA,
    *,
    alpha_precision: int = 4,
    alpha_zero_keyword: str | None = None,
) -> str:
    """Render a colour as CSS.

    Args:
        color: Colour to render.
        alpha_precision: Decimal places for the alpha of ``rgba()`` output.
        alpha_zero_keyword: Literal to emit for alpha exactly 0
            (e.g. ``transparent``); ``None`` keeps ``rgba()``.

    Returns:
        ``#rrggbb`` for opaque colours, ``rgba(R, G, B, A)`` otherwise.
    """
    if color.a == 0 and alpha_zero_keyword:
        return alpha_zero_keyword
    r, g, b = to_byte(color.r), to_byte(color.g), to_byte(color.b)
    if color.a != 1:
        return f"rgba({r}, {g}, {b}, {color.a:.{alpha_precision}f})"
    return f"#{r:02x}{g:02x}{b:02x}"
