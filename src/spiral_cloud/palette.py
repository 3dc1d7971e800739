"""Color palettes generated from a base hue, a scheme and a variation."""

from __future__ import annotations

import colorsys
import random
from typing import Dict, List, Sequence, Tuple

from .config import PaletteRequest
from .errors import ConfigurationError

RGB = Tuple[int, int, int]

SCHEME_OFFSETS: Dict[str, Tuple[float, ...]] = {
    "mono": (0.0,),
    "complement": (0.0, 180.0),
    "triad": (0.0, 150.0, 210.0),
    "tetrad": (0.0, 30.0, 180.0, 210.0),
    "analogic": (0.0, -30.0, 30.0),
}

# (saturation, value) for the four shades each hue contributes.
VARIATION_SHADES: Dict[str, Tuple[Tuple[float, float], ...]] = {
    "default": ((1.00, 1.00), (1.00, 0.70), (0.50, 1.00), (0.75, 0.85)),
    "pastel": ((0.40, 1.00), (0.30, 0.90), (0.20, 1.00), (0.35, 0.80)),
    "light": ((0.60, 1.00), (0.45, 1.00), (0.30, 1.00), (0.55, 0.95)),
    "dark": ((1.00, 0.55), (0.90, 0.40), (0.70, 0.60), (0.85, 0.30)),
    "pale": ((0.20, 0.95), (0.15, 0.85), (0.10, 1.00), (0.18, 0.75)),
}


def _to_rgb(hue: float, saturation: float, value: float) -> RGB:
    r, g, b = colorsys.hsv_to_rgb((hue % 360.0) / 360.0, saturation, value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def generate_palette(hue: float, scheme: str = "analogic", variation: str = "default") -> List[RGB]:
    """Return the RGB colors for ``hue`` under ``scheme`` and ``variation``.

    Each hue of the scheme contributes four shades, so a mono palette has four
    colors and a tetrad sixteen.
    """

    if scheme not in SCHEME_OFFSETS:
        raise ConfigurationError(f"Unknown color scheme '{scheme}'")
    if variation not in VARIATION_SHADES:
        raise ConfigurationError(f"Unknown color variation '{variation}'")
    if not 0.0 <= hue < 360.0:
        raise ConfigurationError("hue must be in [0, 360)")

    colors: List[RGB] = []
    for offset in SCHEME_OFFSETS[scheme]:
        for saturation, value in VARIATION_SHADES[variation]:
            colors.append(_to_rgb(hue + offset, saturation, value))
    return colors


def resolve_hue(request: PaletteRequest, rng: random.Random) -> float:
    if request.hue is not None:
        return float(request.hue)
    return rng.uniform(0.0, 359.0)


def palette_for_request(request: PaletteRequest, rng: random.Random) -> Tuple[float, List[RGB]]:
    """Return the resolved hue and the colors to draw with.

    Explicit ``request.colors`` replace the generated palette; the hue is
    still resolved so the random stream is the same either way.
    """

    hue = resolve_hue(request, rng)
    if request.colors:
        return hue, [hex_to_rgb(color) for color in request.colors]
    return hue, generate_palette(hue, request.scheme, request.variation)


def hex_to_rgb(value: str) -> RGB:
    """Convert ``#rrggbb`` (leading ``#`` optional) to an RGB triple."""

    digits = value.strip().lstrip("#")
    if len(digits) != 6:
        raise ConfigurationError(f"expected a 6-digit hex color, got '{value}'")
    try:
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
    except ValueError as exc:
        raise ConfigurationError(f"invalid hex color '{value}'") from exc


def pick_color(palette: Sequence[RGB], rng: random.Random) -> RGB:
    if not palette:
        raise ConfigurationError("palette must contain at least one color")
    return palette[rng.randrange(len(palette))]


__all__ = [
    "SCHEME_OFFSETS",
    "VARIATION_SHADES",
    "generate_palette",
    "hex_to_rgb",
    "palette_for_request",
    "pick_color",
    "resolve_hue",
]
