"""
Perpendicular bisectors and their sampling across the drawable area.

A bisector is kept in implicit form ``a*x + b*y = c``. Sampling steps one
unit along the axis whose coefficient is smaller in magnitude, so each step
moves the solved coordinate by at most one unit and no division ever blows
up on near-vertical or near-horizontal lines.
"""

from itertools import combinations
from typing import Iterator, NamedTuple, Sequence, Tuple

import numpy as np
import structlog

from .sites import Site

logger = structlog.get_logger()


class Line(NamedTuple):
    """Implicit line a*x + b*y = c."""
    a: float
    b: float
    c: float

    @property
    def is_degenerate(self) -> bool:
        return self.a == 0 and self.b == 0

    def contains(self, x: float, y: float, eps: float = 1e-9) -> bool:
        return abs(self.a * x + self.b * y - self.c) <= eps * max(1.0, abs(self.c))


def bisector(p: Site, q: Site) -> Line:
    """
    Perpendicular bisector of segment pq.

    The direction q - p is the line's normal, and the midpoint lies on it.
    Coincident points give the degenerate line (0, 0, 0).
    """
    a = q.x - p.x
    b = q.y - p.y
    mx = (p.x + q.x) / 2
    my = (p.y + q.y) / 2
    return Line(a, b, a * mx + b * my)


def sample_line(line: Line, width: int, height: int) -> np.ndarray:
    """
    Sample a line at every integer step across the drawable area.

    Iterates x over [0, width) when |b| >= |a|, else y over [0, height), and
    solves for the other coordinate. The solved coordinate is not clipped:
    a boundary that only clips the area still gets samples, and painting
    discards the ones that fall off the image.

    Args:
        line: Line to sample
        width: Drawable width
        height: Drawable height

    Returns:
        Array of [x, y] samples, shape (n, 2); empty for a degenerate line
    """
    if line.is_degenerate:
        logger.warning("Skipping degenerate bisector", line=tuple(line))
        return np.empty((0, 2))

    a, b, c = line
    if abs(b) >= abs(a):
        xs = np.arange(width, dtype=np.float64)
        ys = (c - a * xs) / b
    else:
        ys = np.arange(height, dtype=np.float64)
        xs = (c - b * ys) / a

    return np.column_stack([xs, ys])


def site_pairs(sites: Sequence[Site]) -> Iterator[Tuple[Site, Site]]:
    """Every unordered pair of sites, once, in index order."""
    return combinations(sites, 2)
