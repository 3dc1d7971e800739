"""Font scale for the whole cloud and per-word sizes derived from rank."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from .config import MAX_FONT_HEIGHT_RATIO, MIN_FONT_HEIGHT_RATIO, MIN_FONT_POINTS, SIZE_RANK_FACTOR
from .errors import ConfigurationError
from .geometry import pixels_to_points
from .text_rendering import LayoutCanvas


def initial_max_font_size(canvas_height: float) -> float:
    return pixels_to_points(canvas_height * MAX_FONT_HEIGHT_RATIO)


def min_font_size(canvas_height: float, ratio: float = MIN_FONT_HEIGHT_RATIO) -> float:
    return pixels_to_points(canvas_height) * ratio


def compute_max_font_size(
    canvas_width: float,
    canvas_height: float,
    longest_word: str,
    fonts: Sequence[str],
    metrics: LayoutCanvas,
) -> float:
    """Return the largest size at which ``longest_word`` fits the width in every font.

    Candidates start at a quarter of the canvas height (in points) and shrink
    one point at a time. When nothing down to :data:`MIN_FONT_POINTS` fits,
    :data:`MIN_FONT_POINTS` is returned.
    """

    if not fonts:
        raise ConfigurationError("no usable font: cannot compute a maximum font size")

    size = initial_max_font_size(canvas_height)
    if not longest_word:
        return max(size, MIN_FONT_POINTS)

    while size >= MIN_FONT_POINTS:
        too_big = any(metrics.measure_text(longest_word, font, size).width > canvas_width for font in fonts)
        if not too_big:
            return size
        size -= 1.0

    logger.warning(
        f"'{longest_word}' is wider than {canvas_width}px even at the smallest size; "
        f"falling back to {MIN_FONT_POINTS}pt"
    )
    return MIN_FONT_POINTS


def assign_size(
    rank: int,
    max_font_size: float,
    min_font_size: float,
    *,
    factor: float = SIZE_RANK_FACTOR,
) -> float:
    """Hyperbolic decay by rank, clamped to ``[min_font_size, max_font_size]``.

    If ``min_font_size`` exceeds ``max_font_size`` the lower bound collapses
    to the maximum.
    """

    if rank < 1:
        raise ValueError("rank must be >= 1")
    lower = min(min_font_size, max_font_size)
    size = factor / rank * max_font_size
    return min(max(size, lower), max_font_size)


__all__ = [
    "assign_size",
    "compute_max_font_size",
    "initial_max_font_size",
    "min_font_size",
]
