"""Square-root (Theodorus) spiral used to propose placement centers.

Point ``n`` sits at distance ``sqrt(n)`` from the origin. Its angle is the sum
of ``atan(1 / sqrt(k))`` for ``k`` in ``1 .. n - 1``; the sum is tabulated with
numpy for small ``n`` and continued with the asymptotic expansion
``2 sqrt(n) + K + 1 / (6 sqrt(n))`` beyond the table.
"""

from __future__ import annotations

import math

import numpy as np

THEODORUS_CONSTANT = -2.157782996659446
"""Limit of ``angle(n) - 2 sqrt(n)``."""

DEFAULT_TABLE_SIZE = 10_000


class TheodorusSpiral:
    """Maps a non-negative integer index to an ``(x, y)`` point on the spiral."""

    def __init__(self, table_size: int = DEFAULT_TABLE_SIZE) -> None:
        if table_size < 2:
            raise ValueError("table_size must be at least 2")
        k = np.arange(1, table_size, dtype=np.float64)
        steps = np.arctan(1.0 / np.sqrt(k))
        # angles[n] is the angle of point n; point 0 is the origin, point 1 lies on +x.
        self._angles = np.concatenate(([0.0, 0.0], np.cumsum(steps)))
        self._table_size = table_size

    def angle(self, n: int) -> float:
        if n < 0:
            raise ValueError("spiral index must not be negative")
        if n <= self._table_size:
            return float(self._angles[n])
        root = math.sqrt(n)
        return 2.0 * root + THEODORUS_CONSTANT + 1.0 / (6.0 * root)

    def n_to_xy(self, n: int) -> tuple[float, float]:
        if n == 0:
            return 0.0, 0.0
        radius = math.sqrt(n)
        theta = self.angle(n)
        return radius * math.cos(theta), radius * math.sin(theta)


__all__ = ["TheodorusSpiral", "THEODORUS_CONSTANT"]
