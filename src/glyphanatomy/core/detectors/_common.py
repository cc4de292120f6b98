"""Shared scanline and sweep helpers for the feature detectors.

Not intended for public use.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.geometry import is_inside, ray_hits
from glyphanatomy.core.scanline import (
    Span,
    horizontal_hits,
    horizontal_spans,
    span_containing,
    vertical_hits,
    vertical_spans,
)
from glyphanatomy.domain import Point

T = TypeVar("T")

# Compass directions used to confirm that a seed point is enclosed
ENCLOSURE_ANGLES = tuple(i * math.pi / 4 for i in range(8))


def spans_at(cache: GeometryCache, y: float) -> list[Span]:
    """Filled horizontal spans at height ``y``."""
    return horizontal_spans(cache.shape, y, cache.glyph.bbox.min_x, cache.scale.overshoot)


def hits_at(cache: GeometryCache, y: float) -> list[Point]:
    return horizontal_hits(cache.shape, y, cache.glyph.bbox.min_x, cache.scale.overshoot)


def vspans_at(cache: GeometryCache, x: float) -> list[Span]:
    """Filled vertical spans at ``x``, bottom to top."""
    return vertical_spans(cache.shape, x, cache.glyph.bbox.min_y, cache.scale.overshoot)


def vhits_at(cache: GeometryCache, x: float) -> list[Point]:
    return vertical_hits(cache.shape, x, cache.glyph.bbox.min_y, cache.scale.overshoot)


def inside(cache: GeometryCache, point: Point) -> bool:
    return is_inside(cache.shape, point)


def vertical_extent(cache: GeometryCache, x: float, y: float) -> Span | None:
    """The filled vertical span through (x, y), if the point is filled."""
    return span_containing(vspans_at(cache, x), y)


def reference_heights(cache: GeometryCache) -> tuple[float, float, float]:
    """Baseline, x-height and cap-height, with fallbacks for missing metrics.

    Fonts without OS/2 heights report zero; the x-height then falls back to
    half the em and the cap-height to 70% of it.
    """
    metrics = cache.metrics
    upm = metrics.units_per_em or 1000
    baseline = metrics.baseline
    x_height = metrics.x_height if metrics.x_height > baseline else baseline + upm * 0.5
    cap_height = metrics.cap_height if metrics.cap_height > baseline else baseline + upm * 0.7
    return baseline, x_height, cap_height


def italic_slope(cache: GeometryCache) -> float:
    """Horizontal shift per unit of height for the font's italic angle.

    Italic angles are negative for right-leaning fonts, so the slope is
    positive when strokes lean right.
    """
    if not cache.context.is_italic:
        return 0.0
    return math.tan(math.radians(-cache.italic_angle))


def centroid(points: Sequence[Point]) -> Point:
    if not points:
        return Point(0.0, 0.0)
    return Point(
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def std_dev(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


def dedupe_by_distance(
    candidates: Iterable[T],
    point_of: Callable[[T], Point],
    radius: float,
) -> list[T]:
    """Keep candidates in order, dropping any within ``radius`` of a kept one."""
    kept: list[T] = []
    for candidate in candidates:
        p = point_of(candidate)
        if all(p.distance_to(point_of(k)) >= radius for k in kept):
            kept.append(candidate)
    return kept


def is_enclosed(cache: GeometryCache, point: Point) -> bool:
    """True when rays in all eight compass directions meet the outline."""
    return all(
        ray_hits(cache.shape, point, angle, cache.scale.overshoot)
        for angle in ENCLOSURE_ANGLES
    )


def find_enclosed_seed(
    cache: GeometryCache,
    levels: Iterable[float],
    min_gap: float,
    max_gap: float | None = None,
    min_y: float | None = None,
    max_y: float | None = None,
) -> Point | None:
    """Find an empty point enclosed by the outline.

    Scans the given absolute heights for a gap between two consecutive
    filled spans, then accepts the gap midpoint if it is unfilled and
    surrounded by the outline in every direction.

    Args:
        cache: Geometry snapshot
        levels: Heights to scan, in search order
        min_gap: Gaps must be wider than this
        max_gap: Gaps must be narrower than this, if given
        min_y: Skip levels at or below this height
        max_y: Skip levels at or above this height

    Returns:
        Seed point, or None when no enclosed gap exists
    """
    for y in levels:
        if min_y is not None and y <= min_y:
            continue
        if max_y is not None and y >= max_y:
            continue

        spans = spans_at(cache, y)
        for (_, gap_start), (gap_end, _) in zip(spans, spans[1:]):
            gap = gap_end - gap_start
            if gap <= min_gap or (max_gap is not None and gap >= max_gap):
                continue

            seed = Point((gap_start + gap_end) / 2, y)
            if not inside(cache, seed) and is_enclosed(cache, seed):
                return seed
    return None


def radial_sweep(
    cache: GeometryCache,
    center: Point,
    step_degrees: float,
    pick: Callable[[list[Point]], Point | None],
) -> list[Point]:
    """Cast rays all around ``center`` and collect one boundary point per ray.

    Args:
        cache: Geometry snapshot
        center: Sweep origin
        step_degrees: Angular step
        pick: Chooses the boundary point from a ray's ordered hits

    Returns:
        Boundary points in angular order
    """
    points: list[Point] = []
    steps = max(1, int(round(360.0 / step_degrees)))
    for i in range(steps):
        angle = math.radians(i * step_degrees)
        hits = ray_hits(cache.shape, center, angle, cache.scale.overshoot)
        if not hits:
            continue
        chosen = pick(hits)
        if chosen is not None:
            points.append(chosen)
    return points


def nearest_hit(hits: list[Point]) -> Point | None:
    return hits[0] if hits else None


def farthest_hit(hits: list[Point]) -> Point | None:
    return hits[-1] if hits else None


def stroke_outer_hit(hits: list[Point]) -> Point | None:
    """Second crossing from an interior point: the outer edge of the stroke."""
    if len(hits) >= 2:
        return hits[1]
    return hits[-1] if hits else None
