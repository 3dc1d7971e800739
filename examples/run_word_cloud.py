"""CLI helper to render a word cloud PNG (plus JSON summary) from a text file."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from spiral_cloud import CloudConfig, PaletteRequest, resolve_font_source, save_word_cloud
from spiral_cloud.palette import SCHEME_OFFSETS, VARIATION_SHADES


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("text", type=Path, help="Plain-text file to build the cloud from.")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/word_cloud.png"),
        help="Destination image (.png or .jpg, default: output/word_cloud.png).",
    )
    parser.add_argument("--width", type=int, default=400, help="Image width in pixels (default: 400)")
    parser.add_argument("--height", type=int, default=400, help="Image height in pixels (default: 400)")
    parser.add_argument("--word-count", type=int, default=70, help="Number of words to show (default: 70)")
    parser.add_argument("--font-file", type=Path, help="Use this .ttf for every word.")
    parser.add_argument("--font", help="Font name, looked up in --font-dir or the system font path.")
    parser.add_argument("--font-dir", type=Path, help="Directory scanned for .ttf files.")
    parser.add_argument("--hue", type=float, help="Base hue in [0, 360); random when omitted.")
    parser.add_argument("--scheme", choices=sorted(SCHEME_OFFSETS), default="analogic")
    parser.add_argument("--variation", choices=sorted(VARIATION_SHADES), default="default")
    parser.add_argument(
        "--color",
        action="append",
        default=[],
        metavar="HEX",
        help="Explicit palette color as #rrggbb; repeat to add more (overrides --scheme).",
    )
    parser.add_argument(
        "--background",
        type=int,
        nargs=3,
        default=[40, 40, 40],
        metavar=("R", "G", "B"),
        help="Background color (default: 40 40 40).",
    )
    parser.add_argument("--keep-stop-words", action="store_true", help="Do not prune English stop words.")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible layout.")
    parser.add_argument("--debug-boxes", action="store_true", help="Outline every placed bounding box.")
    parser.add_argument("--verbose", action="store_true", help="Log per-word placement details.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CloudConfig:
    return CloudConfig(
        image_size=(args.width, args.height),
        word_count=args.word_count,
        background=tuple(args.background),  # type: ignore[arg-type]
        prune_stop_words=not args.keep_stop_words,
        palette=PaletteRequest(
            hue=args.hue,
            scheme=args.scheme,
            variation=args.variation,
            colors=tuple(args.color),
        ),
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")
    logger.enable("spiral_cloud")

    fonts = resolve_font_source(font_file=args.font_file, font=args.font, font_dir=args.font_dir)
    text = args.text.read_text(encoding="utf-8")
    summary = save_word_cloud(
        text,
        fonts,
        args.output,
        config=build_config(args),
        seed=args.seed,
        debug_boxes=args.debug_boxes,
    )
    print(json.dumps({key: summary[key] for key in ("image_path", "summary_path")}, indent=2))


if __name__ == "__main__":
    main()
