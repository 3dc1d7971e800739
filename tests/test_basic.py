import math
import random

import pytest
from loguru import logger

from spiral_cloud import (
    BoundingBox,
    CloudConfig,
    ConfigurationError,
    DryRunCanvas,
    SpiralPlacementEngine,
    Word,
    assign_size,
    compute_max_font_size,
    layout_words,
)
from spiral_cloud.config import MIN_FONT_POINTS, PaletteRequest
from spiral_cloud.fonts import NamedFont, RandomFromSet, SingleFile, as_font_source, resolve_font_source
from spiral_cloud.geometry import collides_with_any, pixels_to_points, points_to_pixels
from spiral_cloud.layout import placement_order
from spiral_cloud.palette import generate_palette, hex_to_rgb, palette_for_request, pick_color
from spiral_cloud.sizing import min_font_size
from spiral_cloud.spiral import THEODORUS_CONSTANT, TheodorusSpiral
from spiral_cloud.words import count_words, longest_word, rank_text, rank_words, tokenize


def _assert_no_overlap(boxes: list[BoundingBox]) -> None:
    for i, a in enumerate(boxes):
        for b in boxes[i + 1 :]:
            assert not a.collides(b), f"{a} overlaps {b}"


def test_collision_predicate_counts_touching_edges() -> None:
    a = BoundingBox(0, 0, 10, 10)
    assert a.collides(BoundingBox(5, 5, 10, 10))
    assert a.collides(BoundingBox(10, 0, 5, 5))  # shared edge
    assert not a.collides(BoundingBox(10.5, 0, 5, 5))
    assert not a.collides(BoundingBox(0, -6, 5, 5))
    assert collides_with_any(BoundingBox(2, 2, 1, 1), [BoundingBox(50, 50, 1, 1), a])
    assert not collides_with_any(BoundingBox(2, 2, 1, 1), [])


def test_bounding_box_bounds_and_validation() -> None:
    box = BoundingBox(0, 0, 400, 400)
    assert box.inside(400, 400)
    assert not box.translated(0.5, 0).inside(400, 400)
    with pytest.raises(ValueError):
        BoundingBox(0, 0, -1, 5)


def test_unit_conversion_roundtrip() -> None:
    assert pixels_to_points(96) == 72
    assert points_to_pixels(72) == 96
    assert min_font_size(400) == pytest.approx(0.0175 * 300)


def test_spiral_distance_grows_as_square_root() -> None:
    spiral = TheodorusSpiral()
    assert spiral.n_to_xy(0) == (0.0, 0.0)
    x1, y1 = spiral.n_to_xy(1)
    assert math.isclose(x1, 1.0) and math.isclose(y1, 0.0, abs_tol=1e-12)
    assert math.isclose(spiral.angle(2), math.pi / 4)
    for n in (5, 100, 2_500, 250_000):
        x, y = spiral.n_to_xy(n)
        assert math.isclose(math.hypot(x, y), math.sqrt(n), rel_tol=1e-9)


def test_spiral_asymptotic_angle_matches_table() -> None:
    small = TheodorusSpiral(table_size=200)
    full = TheodorusSpiral()
    for n in (500, 5_000, 9_999):
        assert math.isclose(small.angle(n), full.angle(n), abs_tol=1e-4)
    assert full.angle(10**8) == pytest.approx(2 * 10**4 + THEODORUS_CONSTANT, abs=1e-3)


def test_compute_max_font_size_fits_longest_word() -> None:
    canvas = DryRunCanvas(400, 400)
    size = compute_max_font_size(400, 400, "lighthouse", ["font"], canvas)
    # 10 glyphs * 72px * 0.55 = 396px <= 400px, while 55pt would overflow.
    assert size == 54.0
    assert canvas.measure_text("lighthouse", "font", size).width <= 400
    assert canvas.measure_text("lighthouse", "font", size + 1).width > 400


def test_compute_max_font_size_is_monotonic_in_width() -> None:
    canvas = DryRunCanvas(1000, 400)
    sizes = [compute_max_font_size(width, 400, "monotonic", ["font"], canvas) for width in range(50, 1000, 25)]
    assert sizes == sorted(sizes)
    assert sizes[-1] == 75.0  # capped by a quarter of the height


def test_compute_max_font_size_considers_every_font() -> None:
    canvas = DryRunCanvas(400, 400, font_scale={"wide": 1.5})
    narrow_only = compute_max_font_size(400, 400, "lighthouse", ["narrow"], canvas)
    both = compute_max_font_size(400, 400, "lighthouse", ["narrow", "wide"], canvas)
    assert both < narrow_only
    assert canvas.measure_text("lighthouse", "wide", both).width <= 400


def test_compute_max_font_size_degenerate_canvas() -> None:
    canvas = DryRunCanvas(5, 400)
    size = compute_max_font_size(5, 400, "lighthouse", ["font"], canvas)
    assert size == MIN_FONT_POINTS
    assert size > 0


def test_compute_max_font_size_requires_fonts() -> None:
    with pytest.raises(ConfigurationError):
        compute_max_font_size(400, 400, "word", [], DryRunCanvas(400, 400))


def test_assign_size_clamps_and_decays() -> None:
    max_size, min_size = 54.0, 5.25
    assert assign_size(1, max_size, min_size) == max_size
    sizes = [assign_size(rank, max_size, min_size) for rank in range(1, 200)]
    assert all(min_size <= size <= max_size for size in sizes)
    assert sizes == sorted(sizes, reverse=True)
    assert assign_size(2, max_size, min_size) == pytest.approx(1.75 / 2 * max_size)
    assert sizes[-1] == min_size
    # Minimum above maximum collapses onto the maximum.
    assert assign_size(50, 1.0, 5.0) == 1.0


def test_lighthouse_keeper_scenario() -> None:
    words = [Word("lighthouse", 1, 9), Word("keeper", 2, 4)]
    in_bounds_runs = 0
    runs = 200
    for seed in range(runs):
        canvas = DryRunCanvas(400, 400)
        layout = layout_words(words, canvas, ["font"], seed=seed)
        assert layout.size_of("lighthouse") > layout.size_of("keeper")
        _assert_no_overlap(layout.boxes)
        if all(box.inside(400, 400) for box in layout.boxes):
            in_bounds_runs += 1
    # "lighthouse" spans most of the width, so few init jitters keep it inside.
    assert in_bounds_runs >= 0.8 * runs


def test_layout_is_deterministic_for_a_seed() -> None:
    words = rank_text("the sea the whale the sea ship sail whale whale harpoon captain ahab ship sea", word_count=10)
    first = layout_words(words, DryRunCanvas(400, 400), ["font"], seed=42).to_dict()
    second = layout_words(words, DryRunCanvas(400, 400), ["font"], seed=42).to_dict()
    assert first == second
    assert len(first["words"]) == len(words)


def test_single_word_skips_spiral_search() -> None:
    layout = layout_words([Word("solo", 1)], DryRunCanvas(400, 400), ["font"], seed=3)
    assert len(layout.placed) == 1
    assert layout.spiral_candidates == 0
    assert layout.placed[0].in_bounds


def test_empty_word_list_is_not_an_error() -> None:
    layout = layout_words([], DryRunCanvas(400, 400), ["font"], seed=3)
    assert layout.placed == []
    assert layout.warnings == []


def test_layout_without_fonts_fails_fast() -> None:
    with pytest.raises(ConfigurationError):
        layout_words([Word("word", 1)], DryRunCanvas(400, 400), [], seed=1)


def test_seventy_equal_words_terminate_without_overlap() -> None:
    words = [Word(f"w{i:02d}", 1) for i in range(70)]
    canvas = DryRunCanvas(400, 400)
    layout = layout_words(words, canvas, ["font"], seed=7)
    assert len(layout.placed) == 70
    assert len(canvas.calls) == 70
    assert len({placed.size for placed in layout.placed}) == 1
    _assert_no_overlap(layout.boxes)
    assert {warning.reason for warning in layout.warnings} <= {"bounds", "collision_budget"}
    # Words that did not fit are reported, not raised.
    assert len(layout.warnings) >= sum(1 for placed in layout.placed if not placed.in_bounds)


def test_placement_order_keeps_best_rank_first() -> None:
    words = [Word(f"w{rank}", rank) for rank in range(10, 0, -1)]
    order = placement_order(words, random.Random(5))
    assert order[0].text == "w1"
    assert sorted(word.text for word in order) == sorted(word.text for word in words)


def test_first_word_falls_back_when_it_cannot_fit() -> None:
    engine = SpiralPlacementEngine(100, 100, rng=random.Random(0))
    placement = engine.place_first("wide", BoundingBox(0, -50, 300, 60))
    assert not placement.in_bounds
    assert [warning.reason for warning in engine.warnings] == ["bounds"]


def test_collision_budget_parks_word_below_cloud() -> None:
    config = CloudConfig(image_size=(400, 400), collision_retry_limit=1)
    engine = SpiralPlacementEngine(400, 400, config=config, rng=random.Random(1))
    engine.commit(BoundingBox(0, 0, 400, 400))
    extent = BoundingBox(0, -20, 40, 25)
    placement = engine.place("crowded", extent)
    assert placement.box.y > 400
    assert not collides_with_any(placement.box, engine.placed)
    assert [warning.reason for warning in engine.warnings] == ["collision_budget"]


def test_spiral_placements_stay_clear_of_anchor() -> None:
    engine = SpiralPlacementEngine(400, 400, rng=random.Random(11))
    anchor = engine.place("anchor", BoundingBox(0, -40, 200, 50))
    engine.commit(anchor.box)
    for i in range(8):
        placement = engine.place(f"w{i}", BoundingBox(0, -12, 50, 15))
        assert placement.in_bounds
        engine.commit(placement.box)
    _assert_no_overlap(engine.placed)
    assert engine.spiral_candidates > 0


def test_bounds_retry_is_capped_per_collision_step() -> None:
    config = CloudConfig(image_size=(400, 400), bounds_retry_limit=5)
    engine = SpiralPlacementEngine(400, 400, config=config, rng=random.Random(2))
    engine.commit(BoundingBox(100, 100, 200, 200))
    # Wider than the canvas: no candidate is ever in bounds.
    placement = engine.place("banner", BoundingBox(0, -10, 500, 12))
    assert not placement.in_bounds
    assert engine.spiral_candidates % 5 == 0
    # The first step collides with the committed box, so the search moved on.
    assert engine.spiral_candidates > 5
    assert not collides_with_any(placement.box, engine.placed)
    assert [warning.reason for warning in engine.warnings] == ["bounds"]


def test_spiral_jitter_scales_with_first_word() -> None:
    engine = SpiralPlacementEngine(400, 400, rng=random.Random(3))
    engine.commit(BoundingBox(180, 190, 40, 20))
    large = BoundingBox(0, -100, 300, 120)
    offsets = []
    for iteration in range(1, 200):
        candidate = engine._spiral_candidate(iteration, large)
        sx, sy = engine.spiral.n_to_xy(iteration * engine.config.spiral_step)
        offsets.append((candidate.x - 200 - int(sx), candidate.y - 200 - int(sy)))
    assert all(abs(dx) <= 10 and abs(dy) <= 5 for dx, dy in offsets)
    assert len({dx for dx, _ in offsets}) > 1


def test_palette_sizes_and_ranges() -> None:
    expected = {"mono": 4, "complement": 8, "triad": 12, "tetrad": 16, "analogic": 12}
    for scheme, count in expected.items():
        for variation in ("default", "pastel", "light", "dark", "pale"):
            colors = generate_palette(200.0, scheme, variation)
            assert len(colors) == count
            assert all(0 <= channel <= 255 for color in colors for channel in color)
    assert generate_palette(0.0, "mono")[0] == (255, 0, 0)
    with pytest.raises(ConfigurationError):
        generate_palette(10.0, "rainbow")
    with pytest.raises(ConfigurationError):
        generate_palette(360.0)
    assert hex_to_rgb("#ff8000") == (255, 128, 0)


def test_fixed_hue_palette_is_used_for_colors() -> None:
    config = CloudConfig(palette=PaletteRequest(hue=120.0, scheme="mono"))
    words = [Word("alpha", 1), Word("beta", 2), Word("gamma", 3)]
    layout = layout_words(words, DryRunCanvas(400, 400), ["font"], config=config, seed=9)
    assert layout.hue == 120.0
    assert all(placed.color in layout.palette for placed in layout.placed)


def test_explicit_palette_colors_replace_generated_palette() -> None:
    config = CloudConfig(palette=PaletteRequest(hue=40.0, colors=("#ff8000", "0000FF")))
    words = [Word("alpha", 1), Word("beta", 2), Word("gamma", 3), Word("delta", 4)]
    canvas = DryRunCanvas(400, 400)
    layout = layout_words(words, canvas, ["font"], config=config, seed=4)
    assert layout.palette == [(255, 128, 0), (0, 0, 255)]
    assert [call.color for call in canvas.calls] == [placed.color for placed in layout.placed]
    assert all(placed.color in layout.palette for placed in layout.placed)

    hue, colors = palette_for_request(PaletteRequest(scheme="mono"), random.Random(1))
    assert 0.0 <= hue <= 359.0
    assert colors == generate_palette(hue, "mono")
    with pytest.raises(ConfigurationError):
        palette_for_request(PaletteRequest(colors=("#12",)), random.Random(1))
    with pytest.raises(ConfigurationError):
        hex_to_rgb("#zzzzzz")
    with pytest.raises(ConfigurationError):
        pick_color([], random.Random(1))


def test_tokenize_and_rank_words() -> None:
    tokens = tokenize("The whale! The WHALE's wake, and <b>the</b> sea-foam.")
    assert "whales" in tokens
    assert "seafoam" in tokens
    counts = count_words(tokens + ["sea", "sea"], stop_words={"the", "and"})
    assert "the" not in counts
    ranked = rank_words({"b": 2, "a": 2, "c": 5, "d": 1}, word_count=3)
    assert [(w.text, w.rank) for w in ranked] == [("c", 1), ("a", 2), ("b", 3)]
    assert rank_words({"a": 1}, word_count=0) == []
    assert longest_word([Word("long", 2), Word("tall", 1), Word("s", 3)]) == "tall"


def test_rank_text_prunes_stop_words() -> None:
    ranked = rank_text("It is the sea, it is the sea, and we're at sea", word_count=5)
    assert ranked[0].text == "sea"
    assert ranked[0].count == 3
    assert all(word.text not in {"it", "is", "the", "were"} for word in ranked)


def test_word_validation() -> None:
    with pytest.raises(ValueError):
        Word("x", 0)
    with pytest.raises(ValueError):
        Word("", 1)


def test_config_validation() -> None:
    with pytest.raises(ConfigurationError):
        CloudConfig(image_size=(0, 400))
    with pytest.raises(ConfigurationError):
        CloudConfig(bounds_retry_limit=0)


def test_font_sources(tmp_path) -> None:
    fonts_dir = tmp_path / "fonts"
    (fonts_dir / "nested").mkdir(parents=True)
    for name in ("b.ttf", "a.ttf", "nested/c.ttf", "readme.txt"):
        (fonts_dir / name).write_bytes(b"")

    source = resolve_font_source(font_dir=fonts_dir)
    assert isinstance(source, RandomFromSet)
    assert [p.name for p in source.paths] == ["a.ttf", "b.ttf", "c.ttf"]
    assert source.choose(random.Random(1)) in source.all_fonts()

    named = resolve_font_source(font="a.ttf", font_dir=fonts_dir)
    assert isinstance(named, NamedFont)
    assert named.all_fonts() == [str(fonts_dir / "a.ttf")]

    single = resolve_font_source(font_file=fonts_dir / "b.ttf", font="a.ttf", font_dir=fonts_dir)
    assert single == SingleFile(fonts_dir / "b.ttf")

    assert isinstance(as_font_source(["x.ttf", "y.ttf"]), RandomFromSet)
    with pytest.raises(ConfigurationError):
        resolve_font_source(font_dir=tmp_path / "missing")
    with pytest.raises(ConfigurationError):
        as_font_source([])


def test_named_font_needs_existing_font_dir(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        resolve_font_source(font="a.ttf", font_dir=tmp_path / "missing")
    assert resolve_font_source(font="DejaVuSans.ttf") == NamedFont("DejaVuSans.ttf")


def test_package_logging_is_silent_until_enabled() -> None:
    messages: list[str] = []
    sink_id = logger.add(messages.append, level="DEBUG")
    try:
        engine = SpiralPlacementEngine(100, 100, rng=random.Random(0))
        engine.place_first("wide", BoundingBox(0, -50, 300, 60))
        assert messages == []

        logger.enable("spiral_cloud")
        engine.place_first("wide", BoundingBox(0, -50, 300, 60))
        assert any("'wide'" in message for message in messages)
    finally:
        logger.disable("spiral_cloud")
        logger.remove(sink_id)
