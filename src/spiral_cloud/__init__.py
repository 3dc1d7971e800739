"""spiral_cloud package."""

from loguru import logger

from .api import build_word_cloud, save_word_cloud
from .config import CloudConfig, PaletteRequest
from .errors import ConfigurationError, WordCloudError
from .fonts import NamedFont, RandomFromSet, SingleFile, resolve_font_source
from .geometry import BoundingBox
from .layout import CloudLayout, PlacedWord, PlacementOverflow, SpiralPlacementEngine, layout_words
from .palette import generate_palette
from .sizing import assign_size, compute_max_font_size
from .text_rendering import DryRunCanvas, PillowCanvas
from .words import Word, rank_text, rank_words

__all__ = [
	"BoundingBox",
	"CloudConfig",
	"CloudLayout",
	"ConfigurationError",
	"DryRunCanvas",
	"NamedFont",
	"PaletteRequest",
	"PillowCanvas",
	"PlacedWord",
	"PlacementOverflow",
	"RandomFromSet",
	"SingleFile",
	"SpiralPlacementEngine",
	"Word",
	"WordCloudError",
	"assign_size",
	"build_word_cloud",
	"compute_max_font_size",
	"generate_palette",
	"layout_words",
	"rank_text",
	"rank_words",
	"resolve_font_source",
	"save_word_cloud",
]
__version__ = "0.1.0"

logger.disable(__name__)
