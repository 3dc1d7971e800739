"""Axis-aligned boxes, canvas bounds checks and unit conversions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .config import PIXELS_PER_INCH, POINTS_PER_INCH


def pixels_to_points(pixels: float) -> float:
    return pixels * POINTS_PER_INCH / PIXELS_PER_INCH


def points_to_pixels(points: float) -> float:
    return points * PIXELS_PER_INCH / POINTS_PER_INCH


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Upper-left anchored rectangle in canvas pixel coordinates."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("BoundingBox width and height must not be negative")

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def translated(self, dx: float, dy: float) -> BoundingBox:
        return BoundingBox(self.x + dx, self.y + dy, self.width, self.height)

    def collides(self, other: BoundingBox) -> bool:
        """Return ``True`` unless ``other`` lies entirely left, right, above or below.

        Touching edges count as a collision.
        """

        return not (
            other.x > self.right
            or other.right < self.x
            or other.y > self.bottom
            or other.bottom < self.y
        )

    def inside(self, width: float, height: float) -> bool:
        return self.x >= 0 and self.y >= 0 and self.right <= width and self.bottom <= height

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.width, "h": self.height}


def collides_with_any(box: BoundingBox, placed: Iterable[BoundingBox]) -> bool:
    """Inlined form of :meth:`BoundingBox.collides` for the hot search loop."""

    left, top, right, bottom = box.x, box.y, box.right, box.bottom
    for other in placed:
        if not (
            left > other.x + other.width
            or right < other.x
            or top > other.y + other.height
            or bottom < other.y
        ):
            return True
    return False


def lowest_edge(placed: Iterable[BoundingBox]) -> float:
    """Return the largest ``bottom`` among ``placed`` (0.0 when empty)."""

    return max((box.bottom for box in placed), default=0.0)


__all__ = [
    "BoundingBox",
    "collides_with_any",
    "lowest_edge",
    "pixels_to_points",
    "points_to_pixels",
]
