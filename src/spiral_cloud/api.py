"""High-level APIs: text in, word cloud image and JSON summary out."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Mapping, Sequence

from loguru import logger
from PIL import ImageDraw

from .config import CloudConfig
from .errors import ConfigurationError
from .fonts import FontSource, as_font_source
from .layout import CloudLayout, layout_words
from .text_rendering import PillowCanvas
from .words import DEFAULT_STOP_WORDS, Word, count_words, rank_words, tokenize


def prepare_words(
    source: str | Sequence[str] | Mapping[str, int] | Sequence[Word],
    *,
    config: CloudConfig,
    stop_words: frozenset[str] | set[str] | None = None,
) -> list[Word]:
    """Turn raw text, a token list, a count mapping or ranked words into ranked words.

    Count mappings are taken as-is apart from stop-word pruning.
    """

    if stop_words is None:
        stop_words = DEFAULT_STOP_WORDS if config.prune_stop_words else frozenset()

    if isinstance(source, str):
        counts = count_words(tokenize(source), stop_words=stop_words)
    elif isinstance(source, Mapping):
        counts = dict(source)
    else:
        items = list(source)
        if items and all(isinstance(item, Word) for item in items):
            return sorted(items, key=lambda word: word.rank)[: config.word_count]
        counts = count_words(tokenize(" ".join(str(item) for item in items)), stop_words=stop_words)
    return rank_words(counts, word_count=config.word_count, stop_words=stop_words)


def build_word_cloud(
    source: str | Sequence[str] | Mapping[str, int] | Sequence[Word],
    fonts: FontSource | Sequence[Path | str] | Path | str,
    *,
    config: CloudConfig | None = None,
    stop_words: frozenset[str] | set[str] | None = None,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> tuple[PillowCanvas, CloudLayout]:
    """Rank ``source`` and lay it out on a fresh Pillow canvas.

    Parameters
    ----------
    source:
        Raw text, a list of tokens, a ``{word: count}`` mapping, or an already
        ranked list of :class:`~spiral_cloud.words.Word`.
    fonts:
        A :data:`~spiral_cloud.fonts.FontSource`, a single font path, or a list
        of font paths to pick from at random.
    config:
        Canvas size, word count, background, palette and engine tuning.
    stop_words:
        Words excluded from ranking. Defaults to the English list when
        ``config.prune_stop_words`` is set.
    seed / rng:
        Source of randomness. A fixed seed makes the whole layout reproducible.
    """

    config = config or CloudConfig()
    font_source = as_font_source(fonts)
    words = prepare_words(source, config=config, stop_words=stop_words)
    canvas = PillowCanvas(config.width, config.height, background=config.background)
    layout = layout_words(words, canvas, font_source, config=config, rng=rng or random.Random(seed))
    return canvas, layout


def draw_box_outlines(canvas: PillowCanvas, layout: CloudLayout, *, color: tuple[int, int, int] = (255, 0, 0)) -> None:
    """Stroke each committed bounding box, for inspecting placements."""

    draw = ImageDraw.Draw(canvas.image)
    for placed in layout.placed:
        box = placed.box
        draw.rectangle((box.x, box.y, box.right, box.bottom), outline=color)


def save_word_cloud(
    source: str | Sequence[str] | Mapping[str, int] | Sequence[Word],
    fonts: FontSource | Sequence[Path | str] | Path | str,
    output_path: Path | str,
    *,
    config: CloudConfig | None = None,
    stop_words: frozenset[str] | set[str] | None = None,
    seed: int | None = None,
    write_summary: bool = True,
    debug_boxes: bool = False,
) -> dict[str, Any]:
    """Build a word cloud, write the image, and return (and optionally write) a JSON summary.

    The summary lands next to the image as ``<stem>.json``.
    """

    target = Path(output_path)
    if target.suffix.lower() not in {".png", ".jpg", ".jpeg"}:
        raise ConfigurationError(f"Unsupported image format '{target.suffix}'; use .png or .jpg")

    canvas, layout = build_word_cloud(source, fonts, config=config, stop_words=stop_words, seed=seed)
    if debug_boxes:
        draw_box_outlines(canvas, layout)
    canvas.save(target)

    summary: dict[str, Any] = {
        "image_path": str(target),
        "renderer": canvas.name,
        "seed": seed,
        **layout.to_dict(),
    }
    if write_summary:
        summary_path = target.with_suffix(".json")
        summary["summary_path"] = str(summary_path)
        summary_path.write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info(f"Wrote layout summary to {summary_path}")
    return summary


__all__ = ["build_word_cloud", "draw_box_outlines", "prepare_words", "save_word_cloud"]
