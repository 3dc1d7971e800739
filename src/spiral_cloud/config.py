"""Layout configuration and the tuning constants behind its defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .errors import ConfigurationError

Scheme = Literal["analogic", "complement", "triad", "tetrad", "mono"]
Variation = Literal["default", "pastel", "light", "dark", "pale"]

# ----- Canvas -----
DEFAULT_IMAGE_SIZE: tuple[int, int] = (400, 400)
DEFAULT_WORD_COUNT: int = 70
DEFAULT_BACKGROUND: tuple[int, int, int] = (40, 40, 40)

# ----- Units -----
POINTS_PER_INCH: float = 72.0
PIXELS_PER_INCH: float = 96.0

# ----- Font sizing -----
MAX_FONT_HEIGHT_RATIO: float = 0.25
"""Initial max-size candidate as a fraction of the canvas height."""

MIN_FONT_HEIGHT_RATIO: float = 0.0175
"""Smallest size any word is rendered at, as a fraction of canvas height in points."""

MIN_FONT_POINTS: float = 1.0
"""Boundary value returned when even the smallest size overflows the canvas."""

SIZE_RANK_FACTOR: float = 1.75

# ----- Placement -----
INIT_ATTEMPTS: int = 50
INIT_JITTER_RATIO: float = 0.1
SPIRAL_STEP: int = 100
SPIRAL_JITTER_RATIO: float = 0.25
BOUNDS_RETRY_LIMIT: int = 10_000
COLLISION_RETRY_LIMIT: int = 5_000


@dataclass(frozen=True, slots=True)
class PaletteRequest:
    """Hue/scheme/variation triple handed to the palette provider.

    ``hue=None`` means "pick one at random for this layout call". Non-empty
    ``colors`` (``#rrggbb`` strings) are used as the palette as given.
    """

    hue: float | None = None
    scheme: Scheme = "analogic"
    variation: Variation = "default"
    colors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CloudConfig:
    """Everything a single layout call needs besides the words and fonts."""

    image_size: tuple[int, int] = DEFAULT_IMAGE_SIZE
    word_count: int = DEFAULT_WORD_COUNT
    background: tuple[int, int, int] = DEFAULT_BACKGROUND
    prune_stop_words: bool = True
    palette: PaletteRequest = field(default_factory=PaletteRequest)
    size_rank_factor: float = SIZE_RANK_FACTOR
    min_font_ratio: float = MIN_FONT_HEIGHT_RATIO
    init_attempts: int = INIT_ATTEMPTS
    init_jitter_ratio: float = INIT_JITTER_RATIO
    spiral_step: int = SPIRAL_STEP
    spiral_jitter_ratio: float = SPIRAL_JITTER_RATIO
    bounds_retry_limit: int = BOUNDS_RETRY_LIMIT
    collision_retry_limit: int = COLLISION_RETRY_LIMIT

    def __post_init__(self) -> None:
        width, height = self.image_size
        if width <= 0 or height <= 0:
            raise ConfigurationError("image_size must be positive in both dimensions")
        if self.word_count < 0:
            raise ConfigurationError("word_count must not be negative")
        for name in ("init_attempts", "spiral_step", "bounds_retry_limit", "collision_retry_limit"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1")
        if self.size_rank_factor <= 0:
            raise ConfigurationError("size_rank_factor must be positive")
        if self.init_jitter_ratio < 0 or self.spiral_jitter_ratio < 0:
            raise ConfigurationError("jitter ratios must not be negative")

    @property
    def width(self) -> int:
        return int(self.image_size[0])

    @property
    def height(self) -> int:
        return int(self.image_size[1])


__all__ = [
    "CloudConfig",
    "PaletteRequest",
    "Scheme",
    "Variation",
    "MIN_FONT_POINTS",
]
