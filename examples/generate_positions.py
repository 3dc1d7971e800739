"""Compute word positions without rasterizing and dump them as JSON.

Uses the approximate glyph metrics of ``DryRunCanvas``, so no font files are
needed. Handy for checking how the spiral fills a canvas of a given shape.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from spiral_cloud import CloudConfig, DryRunCanvas, layout_words, rank_text

OUTPUT_PATH = Path(__file__).with_name("positions.json")

SAMPLE_TEXT = """
Call me Ishmael. Some years ago, never mind how long precisely, having little or no money in my purse,
and nothing particular to interest me on shore, I thought I would sail about a little and see the watery
part of the world. It is a way I have of driving off the spleen and regulating the circulation. Whenever I
find myself growing grim about the mouth; whenever it is a damp, drizzly November in my soul; whenever I
find myself involuntarily pausing before coffin warehouses, and bringing up the rear of every funeral I
meet; then, I account it high time to get to sea as soon as I can. The sea, the sea, the whale, the whale.
"""


def run_layout(width: int = 400, height: int = 400, *, seed: int = 1337, word_count: int = 70) -> dict:
    config = CloudConfig(image_size=(width, height), word_count=word_count)
    words = rank_text(SAMPLE_TEXT, word_count=word_count)
    canvas = DryRunCanvas(width, height)
    layout = layout_words(words, canvas, ["dry-run"], config=config, seed=seed)
    return layout.to_dict()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--width", type=int, default=400)
    parser.add_argument("--height", type=int, default=400)
    parser.add_argument("--seed", type=int, default=1337)
    parser.add_argument("--output", type=Path, default=OUTPUT_PATH)
    args = parser.parse_args()

    payload = run_layout(args.width, args.height, seed=args.seed)
    args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Saved {len(payload['words'])} placements to {args.output}")


if __name__ == "__main__":
    main()
