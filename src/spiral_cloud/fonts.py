"""Font sources: a single file, a named font, or a random pick from a set."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from loguru import logger

from .errors import ConfigurationError

FONT_GLOB = "*.ttf"


@dataclass(frozen=True, slots=True)
class SingleFile:
    """Every word uses the font file at ``path``."""

    path: Path

    def all_fonts(self) -> list[str]:
        return [str(self.path)]

    def choose(self, rng: random.Random) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class NamedFont:
    """A font looked up by name, optionally inside ``font_dir``."""

    name: str
    font_dir: Path | None = None

    def _identifier(self) -> str:
        if self.font_dir is not None:
            candidate = Path(self.font_dir) / self.name
            if candidate.is_file():
                return str(candidate)
        return self.name

    def all_fonts(self) -> list[str]:
        return [self._identifier()]

    def choose(self, rng: random.Random) -> str:
        return self._identifier()


@dataclass(frozen=True, slots=True)
class RandomFromSet:
    """Each word draws its font uniformly at random from ``paths``."""

    paths: tuple[Path, ...]

    def __post_init__(self) -> None:
        if not self.paths:
            raise ConfigurationError("RandomFromSet needs at least one font path")

    def all_fonts(self) -> list[str]:
        return [str(path) for path in self.paths]

    def choose(self, rng: random.Random) -> str:
        return str(self.paths[rng.randrange(len(self.paths))])


FontSource = Union[SingleFile, NamedFont, RandomFromSet]


def discover_fonts(font_dir: Path | str) -> list[Path]:
    """Return every TrueType file below ``font_dir`` in sorted order."""

    root = Path(font_dir)
    if not root.is_dir():
        return []
    return sorted(path for path in root.rglob(FONT_GLOB) if path.is_file())


def as_font_source(fonts: FontSource | Sequence[Path | str] | Path | str) -> FontSource:
    """Coerce a path, a list of paths or an existing source into a :data:`FontSource`."""

    if isinstance(fonts, (SingleFile, NamedFont, RandomFromSet)):
        return fonts
    if isinstance(fonts, (str, Path)):
        return SingleFile(Path(fonts))
    paths = tuple(Path(font) for font in fonts)
    if not paths:
        raise ConfigurationError("no usable font: the font list is empty")
    if len(paths) == 1:
        return SingleFile(paths[0])
    return RandomFromSet(paths)


def resolve_font_source(
    *,
    font_file: Path | str | None = None,
    font: str | None = None,
    font_dir: Path | str | None = None,
) -> FontSource:
    """Pick a font source with precedence ``font_file`` > ``font`` > ``font_dir`` scan.

    ``font`` is skipped when ``font_dir`` is given but is not a directory.
    Raises :class:`ConfigurationError` when nothing usable is found.
    """

    if font_file:
        path = Path(font_file)
        if not path.is_file():
            logger.warning(f"Specified font file '{path}' not found")
        return SingleFile(path)

    directory = Path(font_dir) if font_dir else None
    if directory is not None and not directory.is_dir():
        logger.warning(f"Specified font path '{directory}' not found")
        if font:
            logger.warning(f"Ignoring font '{font}' without a usable font path")
        directory = None
    elif font:
        return NamedFont(font, directory)

    if directory is not None:
        found = discover_fonts(directory)
        if found:
            logger.debug(f"Discovered {len(found)} fonts under {directory}")
            return RandomFromSet(tuple(found))

    raise ConfigurationError("no usable font: pass font_file, font, or a font_dir containing .ttf files")


__all__ = [
    "FontSource",
    "NamedFont",
    "RandomFromSet",
    "SingleFile",
    "as_font_source",
    "discover_fonts",
    "resolve_font_source",
]
