"""Exception types raised by the layout pipeline."""

from __future__ import annotations


class WordCloudError(Exception):
    """Base class for every error raised by :mod:`spiral_cloud`."""


class ConfigurationError(WordCloudError, ValueError):
    """Raised when the layout cannot start, e.g. no usable font is available."""


__all__ = ["WordCloudError", "ConfigurationError"]
