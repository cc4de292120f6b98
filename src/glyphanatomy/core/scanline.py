"""Scanline helpers built on the ray casting primitive.

Horizontal rays start left of the glyph at ``min_x - overshoot * offset``
and run rightwards for ``overshoot`` units; vertical rays start below the
glyph and run upwards. Consecutive hits pair up as filled spans under the
even-odd rule.
"""

import math

from glyphanatomy.core.geometry import FlattenedPath, ray_hits
from glyphanatomy.domain import Point

Span = tuple[float, float]

ORIGIN_OFFSET = 0.1


def pair_spans(values: list[float]) -> list[Span]:
    """Pair sorted crossing coordinates (2i, 2i+1) into filled spans.

    Zero-width pairs are dropped; a trailing unpaired value is ignored.
    """
    spans: list[Span] = []
    for i in range(0, len(values) - 1, 2):
        lo, hi = values[i], values[i + 1]
        if hi > lo:
            spans.append((lo, hi))
    return spans


def horizontal_hits(
    shape: FlattenedPath,
    y: float,
    min_x: float,
    overshoot: float,
) -> list[Point]:
    """Crossings of a left-to-right ray at height ``y``."""
    origin = Point(min_x - overshoot * ORIGIN_OFFSET, y)
    return ray_hits(shape, origin, 0.0, overshoot)


def horizontal_spans(
    shape: FlattenedPath,
    y: float,
    min_x: float,
    overshoot: float,
) -> list[Span]:
    """Filled (x_start, x_end) spans at height ``y``, left to right."""
    return pair_spans([p.x for p in horizontal_hits(shape, y, min_x, overshoot)])


def vertical_hits(
    shape: FlattenedPath,
    x: float,
    min_y: float,
    overshoot: float,
) -> list[Point]:
    """Crossings of a bottom-to-top ray at ``x``, lowest first."""
    origin = Point(x, min_y - overshoot * ORIGIN_OFFSET)
    return ray_hits(shape, origin, math.pi / 2, overshoot)


def vertical_spans(
    shape: FlattenedPath,
    x: float,
    min_y: float,
    overshoot: float,
) -> list[Span]:
    """Filled (y_start, y_end) spans at ``x``, bottom to top."""
    return pair_spans([p.y for p in vertical_hits(shape, x, min_y, overshoot)])


def span_containing(spans: list[Span], value: float, tolerance: float = 0.0) -> Span | None:
    """Return the span that covers ``value`` (with optional slack)."""
    for lo, hi in spans:
        if lo - tolerance <= value <= hi + tolerance:
            return (lo, hi)
    return None
