"""Spiral placement engine and the end-to-end layout pass."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, List, Literal, Sequence

from loguru import logger

from .config import CloudConfig
from .fonts import FontSource, as_font_source
from .geometry import BoundingBox, collides_with_any, lowest_edge
from .palette import RGB, palette_for_request, pick_color
from .sizing import assign_size, compute_max_font_size, min_font_size
from .spiral import TheodorusSpiral
from .text_rendering import LayoutCanvas
from .words import Word, longest_word

OverflowReason = Literal["bounds", "collision_budget"]


@dataclass(frozen=True, slots=True)
class PlacementOverflow:
    """Non-fatal report that a word was committed outside the ideal region."""

    word: str
    box: BoundingBox
    reason: OverflowReason

    def message(self) -> str:
        if self.reason == "collision_budget":
            return f"'{self.word}' found no free spot within the collision budget; parked below the cloud"
        return f"'{self.word}' extends beyond the canvas after exhausting the bounds-retry budget"


@dataclass(frozen=True, slots=True)
class Placement:
    """Draw origin (lower-left, on the baseline) plus the box it produces."""

    x: float
    y: float
    box: BoundingBox
    in_bounds: bool
    iterations: int = 0


@dataclass(frozen=True, slots=True)
class PlacedWord:
    word: Word
    size: float
    font: str
    x: float
    y: float
    box: BoundingBox
    drawn_box: BoundingBox
    color: RGB
    in_bounds: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.word.text,
            "rank": self.word.rank,
            "count": self.word.count,
            "size": self.size,
            "font": self.font,
            "origin": {"x": self.x, "y": self.y},
            "bbox": self.box.as_dict(),
            "drawn_bbox": self.drawn_box.as_dict(),
            "color": list(self.color),
            "in_bounds": self.in_bounds,
        }


@dataclass
class CloudLayout:
    """Result of one layout pass."""

    width: int
    height: int
    max_font_size: float
    min_font_size: float
    hue: float
    palette: List[RGB] = field(default_factory=list)
    placed: List[PlacedWord] = field(default_factory=list)
    warnings: List[PlacementOverflow] = field(default_factory=list)
    spiral_candidates: int = 0

    @property
    def boxes(self) -> List[BoundingBox]:
        return [placed.box for placed in self.placed]

    def size_of(self, text: str) -> float:
        for placed in self.placed:
            if placed.word.text == text:
                return placed.size
        raise KeyError(text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "canvas": {"width": self.width, "height": self.height},
            "max_font_size": self.max_font_size,
            "min_font_size": self.min_font_size,
            "hue": self.hue,
            "palette": [list(color) for color in self.palette],
            "words": [placed.to_dict() for placed in self.placed],
            "spiral_candidates": self.spiral_candidates,
            "warnings": [
                {"word": w.word, "reason": w.reason, "bbox": w.box.as_dict(), "message": w.message()}
                for w in self.warnings
            ],
        }


def _random_int_between(rng: random.Random, low: float, high: float) -> int:
    lo, hi = sorted((low, high))
    lo_i, hi_i = math.ceil(lo), math.floor(hi)
    if lo_i >= hi_i:
        return int(lo_i)
    return rng.randint(lo_i, hi_i)


class SpiralPlacementEngine:
    """Places word boxes one by one around the canvas center.

    The first word is jittered near the center; every later word walks a
    Theodorus spiral outward until its box is inside the canvas and clear of
    every committed box. The engine never raises for placement problems:
    exhausted budgets produce :class:`PlacementOverflow` records instead.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        config: CloudConfig | None = None,
        rng: random.Random | None = None,
        spiral: TheodorusSpiral | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("canvas dimensions must be positive")
        self.width = float(width)
        self.height = float(height)
        self.config = config or CloudConfig(image_size=(int(width), int(height)))
        self.rng = rng or random.Random()
        self.spiral = spiral or TheodorusSpiral()
        self.placed: List[BoundingBox] = []
        self.warnings: List[PlacementOverflow] = []
        self.spiral_candidates = 0
        self._jitter_extent: tuple[float, float] | None = None

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2.0, self.height / 2.0

    def place_first(self, word: str, extent: BoundingBox) -> Placement:
        """Jitter the anchor word around the center until it fits the canvas."""

        cx, cy = self.center
        base_x = cx - extent.width / 2.0
        base_y = cy + extent.height / 4.0
        span_x = self.width * self.config.init_jitter_ratio
        span_y = self.height * self.config.init_jitter_ratio

        x, y = base_x, base_y
        box = extent.translated(x, y)
        for attempt in range(1, self.config.init_attempts + 1):
            x = base_x + _random_int_between(self.rng, -span_x, span_x)
            y = base_y + _random_int_between(self.rng, -span_y, span_y)
            box = extent.translated(x, y)
            if box.inside(self.width, self.height):
                return Placement(x, y, box, True, attempt)

        self._overflow(word, box, "bounds")
        return Placement(x, y, box, False, self.config.init_attempts)

    def _spiral_candidate(self, iteration: int, extent: BoundingBox) -> Placement:
        sx, sy = self.spiral.n_to_xy(iteration * self.config.spiral_step)
        x, y = float(int(sx)), float(int(sy))
        bound_w, bound_h = self._jitter_extent or (extent.width, extent.height)
        ratio = self.config.spiral_jitter_ratio
        x += _random_int_between(self.rng, -bound_w * ratio, bound_w * ratio)
        y += _random_int_between(self.rng, -bound_h * ratio, bound_h * ratio)
        cx, cy = self.center
        x += cx
        y += cy
        self.spiral_candidates += 1
        return Placement(x, y, extent.translated(x, y), True, iteration)

    def _reach(self, extent: BoundingBox) -> float:
        """Spiral radius beyond which no candidate box can lie inside the canvas."""

        bound_w, bound_h = self._jitter_extent or (extent.width, extent.height)
        ratio = self.config.spiral_jitter_ratio
        limit_x = self.width / 2.0 + bound_w * ratio + max(abs(extent.x), abs(extent.right)) + 1.0
        limit_y = self.height / 2.0 + bound_h * ratio + max(abs(extent.y), abs(extent.bottom)) + 1.0
        return math.hypot(limit_x, limit_y) + 2.0

    def _next_in_bounds(self, iteration: int, extent: BoundingBox) -> tuple[Placement, int]:
        reach = self._reach(extent)
        candidate = self._spiral_candidate(iteration, extent)
        for _ in range(self.config.bounds_retry_limit - 1):
            if candidate.box.inside(self.width, self.height):
                return candidate, iteration
            if math.sqrt(iteration * self.config.spiral_step) > reach:
                # The spiral only moves outward from here; stop retrying.
                break
            iteration += 1
            candidate = self._spiral_candidate(iteration, extent)
        if candidate.box.inside(self.width, self.height):
            return candidate, iteration
        return (
            Placement(candidate.x, candidate.y, candidate.box, False, iteration),
            iteration,
        )

    def place(self, word: str, extent: BoundingBox) -> Placement:
        """Search the spiral for a spot that is in bounds and collision free."""

        if not self.placed:
            return self.place_first(word, extent)

        iteration = 1
        for _ in range(self.config.collision_retry_limit):
            candidate, iteration = self._next_in_bounds(iteration, extent)
            if not collides_with_any(candidate.box, self.placed):
                if not candidate.in_bounds:
                    self._overflow(word, candidate.box, "bounds")
                return candidate
            iteration += 1

        return self._park(word, extent, iteration)

    def _park(self, word: str, extent: BoundingBox, iteration: int) -> Placement:
        # One pixel below the lowest committed box can never collide with it.
        x = self.center[0] - extent.width / 2.0 - extent.x
        y = lowest_edge(self.placed) + 1.0 - extent.y
        box = extent.translated(x, y)
        self._overflow(word, box, "collision_budget")
        return Placement(x, y, box, box.inside(self.width, self.height), iteration)

    def commit(self, box: BoundingBox) -> None:
        if not self.placed:
            self._jitter_extent = (box.width, box.height)
        self.placed.append(box)

    def _overflow(self, word: str, box: BoundingBox, reason: OverflowReason) -> None:
        overflow = PlacementOverflow(word=word, box=box, reason=reason)
        self.warnings.append(overflow)
        logger.warning(overflow.message())


def placement_order(words: Sequence[Word], rng: random.Random) -> List[Word]:
    """Best-ranked word first, every other word shuffled."""

    ranked = sorted(words, key=lambda word: word.rank)
    if not ranked:
        return []
    rest = ranked[1:]
    rng.shuffle(rest)
    return [ranked[0], *rest]


def layout_words(
    words: Sequence[Word],
    canvas: LayoutCanvas,
    fonts: FontSource | Sequence[str] | str,
    *,
    config: CloudConfig | None = None,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> CloudLayout:
    """Size, place and draw ``words`` on ``canvas``.

    Raises :class:`~spiral_cloud.errors.ConfigurationError` when no font is
    usable. Placement problems are returned in ``CloudLayout.warnings``.
    """

    config = config or CloudConfig(image_size=(canvas.width, canvas.height))
    rng = rng or random.Random(seed)
    source = as_font_source(fonts)
    all_fonts = source.all_fonts()

    width, height = canvas.width, canvas.height
    max_size = compute_max_font_size(width, height, longest_word(words), all_fonts, canvas)
    min_size = min_font_size(height, config.min_font_ratio)

    hue, palette = palette_for_request(config.palette, rng)
    layout = CloudLayout(
        width=width,
        height=height,
        max_font_size=max_size,
        min_font_size=min_size,
        hue=hue,
        palette=palette,
    )
    if not words:
        logger.info("No words to lay out; returning an empty cloud")
        return layout

    handles = {color: canvas.allocate_color(*color) for color in palette}
    engine = SpiralPlacementEngine(width, height, config=config, rng=rng)
    logger.info(f"Laying out {len(words)} words on {width}x{height} (max {max_size:.1f}pt, min {min_size:.1f}pt)")

    for word in placement_order(words, rng):
        color = pick_color(palette, rng)
        font = source.choose(rng)
        size = assign_size(word.rank, max_size, min_size, factor=config.size_rank_factor)
        extent = canvas.measure_text(word.text, font, size)

        placement = engine.place(word.text, extent)
        engine.commit(placement.box)
        drawn = canvas.draw_text(word.text, font, size, placement.x, placement.y, handles[color])
        logger.debug(
            f"Placed '{word.text}' at ({placement.x:.0f}, {placement.y:.0f}) "
            f"size={size:.1f}pt after {placement.iterations} iterations"
        )
        layout.placed.append(
            PlacedWord(
                word=word,
                size=size,
                font=font,
                x=placement.x,
                y=placement.y,
                box=placement.box,
                drawn_box=drawn,
                color=color,
                in_bounds=placement.in_bounds,
            )
        )

    layout.warnings.extend(engine.warnings)
    layout.spiral_candidates = engine.spiral_candidates
    logger.info(f"Placed {len(layout.placed)} words with {len(layout.warnings)} warnings")
    return layout


__all__ = [
    "CloudLayout",
    "PlacedWord",
    "Placement",
    "PlacementOverflow",
    "SpiralPlacementEngine",
    "layout_words",
    "placement_order",
]
