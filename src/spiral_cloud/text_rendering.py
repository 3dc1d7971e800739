"""Canvases that measure and draw words for the layout engine.

The default implementation relies on Pillow for glyph metrics and
rasterization, while exposing a small protocol so layouts can also be computed
without a raster (see :class:`DryRunCanvas`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import numpy as np
from loguru import logger

try:  # Pillow is the baseline renderer.
    from PIL import Image, ImageDraw, ImageFont
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "Pillow is required for text rendering. "
        "Install it via `pip install Pillow`."
    ) from exc

from .geometry import BoundingBox, points_to_pixels

RGB = tuple[int, int, int]

GLYPH_WIDTH_FACTOR = 0.55
ASCENT_FACTOR = 0.8
DESCENT_FACTOR = 0.2


@runtime_checkable
class LayoutCanvas(Protocol):
    """Protocol implemented by every surface the engine can lay words onto.

    Boxes returned by :meth:`measure_text` are relative to the draw origin,
    which sits at the text's lower-left corner on the baseline.
    """

    name: str
    width: int
    height: int

    def measure_text(self, word: str, font: str, size: float) -> BoundingBox:
        """Return the box ``word`` occupies when drawn at origin ``(0, 0)``."""

    def draw_text(self, word: str, font: str, size: float, x: float, y: float, color: Any) -> BoundingBox:
        """Draw ``word`` with its origin at ``(x, y)`` and return the drawn box."""

    def allocate_color(self, r: int, g: int, b: int) -> Any:
        """Return a color handle usable by :meth:`draw_text`."""


def _font_pixels(size: float) -> int:
    return max(1, int(round(points_to_pixels(size))))


def _check_rgb(r: int, g: int, b: int) -> RGB:
    for channel in (r, g, b):
        if not 0 <= int(channel) <= 255:
            raise ValueError(f"color channel out of range: {channel}")
    return (int(r), int(g), int(b))


class PillowCanvas:
    """RGB raster canvas backed by Pillow's ImageDraw and FreeType fonts."""

    name = "pillow"

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: RGB = (40, 40, 40),
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("canvas dimensions must be positive")
        self.width = int(width)
        self.height = int(height)
        self.background = _check_rgb(*background)
        self.image = Image.new("RGB", (self.width, self.height), color=self.background)
        self._draw = ImageDraw.Draw(self.image)
        self._fonts: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}

    def _font(self, font: str, size: float) -> ImageFont.FreeTypeFont:
        key = (str(font), _font_pixels(size))
        cached = self._fonts.get(key)
        if cached is None:
            cached = ImageFont.truetype(key[0], key[1])
            self._fonts[key] = cached
        return cached

    def measure_text(self, word: str, font: str, size: float) -> BoundingBox:
        left, top, right, bottom = self._font(font, size).getbbox(word, anchor="ls")
        return BoundingBox(float(left), float(top), float(right - left), float(bottom - top))

    def draw_text(self, word: str, font: str, size: float, x: float, y: float, color: Any) -> BoundingBox:
        typeface = self._font(font, size)
        self._draw.text((x, y), word, font=typeface, fill=color, anchor="ls")
        left, top, right, bottom = self._draw.textbbox((x, y), word, font=typeface, anchor="ls")
        return BoundingBox(float(left), float(top), float(right - left), float(bottom - top))

    def allocate_color(self, r: int, g: int, b: int) -> RGB:
        return _check_rgb(r, g, b)

    def ink_bounds(self) -> BoundingBox | None:
        """Return the tight box around every non-background pixel, or ``None``."""

        pixels = np.asarray(self.image, dtype=np.uint8)
        mask = np.any(pixels != np.array(self.background, dtype=np.uint8), axis=2)
        ys, xs = np.where(mask)
        if len(xs) == 0:
            return None
        min_x, max_x = int(xs.min()), int(xs.max())
        min_y, max_y = int(ys.min()), int(ys.max())
        return BoundingBox(min_x, min_y, max_x - min_x + 1, max_y - min_y + 1)

    def save(self, path: Path | str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        image = self.image
        if target.suffix.lower() in {".jpg", ".jpeg"}:
            image.save(target, quality=95)
        else:
            image.save(target)
        logger.info(f"Saved word cloud image to {target}")
        return target


@dataclass(slots=True)
class DrawCall:
    """One recorded :meth:`DryRunCanvas.draw_text` invocation."""

    word: str
    font: str
    size: float
    x: float
    y: float
    color: Any
    box: BoundingBox


@dataclass
class DryRunCanvas:
    """Canvas that estimates glyph boxes instead of rasterizing them.

    Width is ``len(word) * pixel_size * glyph_width_factor``; height is the
    ascent plus descent of the pixel size. Useful for computing positions
    without font files.
    """

    width: int
    height: int
    glyph_width_factor: float = GLYPH_WIDTH_FACTOR
    font_scale: dict[str, float] = field(default_factory=dict)
    calls: list[DrawCall] = field(default_factory=list)
    name: str = "dry-run"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas dimensions must be positive")

    def measure_text(self, word: str, font: str, size: float) -> BoundingBox:
        pixels = points_to_pixels(size) * self.font_scale.get(font, 1.0)
        glyphs = max(len(word), 1)
        ascent = pixels * ASCENT_FACTOR
        return BoundingBox(0.0, -ascent, glyphs * pixels * self.glyph_width_factor, ascent + pixels * DESCENT_FACTOR)

    def draw_text(self, word: str, font: str, size: float, x: float, y: float, color: Any) -> BoundingBox:
        box = self.measure_text(word, font, size).translated(x, y)
        self.calls.append(DrawCall(word=word, font=font, size=size, x=x, y=y, color=color, box=box))
        return box

    def allocate_color(self, r: int, g: int, b: int) -> RGB:
        return _check_rgb(r, g, b)


__all__ = [
    "DrawCall",
    "DryRunCanvas",
    "LayoutCanvas",
    "PillowCanvas",
]
