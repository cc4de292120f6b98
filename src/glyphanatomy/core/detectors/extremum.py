"""Apex and vertex detection.

An apex is where two strokes meet at the top of a glyph (A, W); a vertex is
the same meeting point at the bottom (V, v). Both are found by casting two
diagonal rays from probe points just inside the extreme band and checking
whether the rays land close together on the outline.
"""

import math
from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import dedupe_by_distance
from glyphanatomy.core.geometry import ray_hits
from glyphanatomy.domain import FeatureInstance, LineShape, Point, PointShape


@dataclass(frozen=True, slots=True)
class _Corner:
    left: Point
    right: Point
    sharp: bool

    @property
    def center(self) -> Point:
        return Point((self.left.x + self.right.x) / 2, (self.left.y + self.right.y) / 2)


def detect_apex(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect apexes at the top of the glyph."""
    return _detect_extremum(cache, config, at_top=True)


def detect_vertex(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect vertices at the bottom of the glyph."""
    return _detect_extremum(cache, config, at_top=False)


def _detect_extremum(
    cache: GeometryCache,
    config: DetectionConfig,
    at_top: bool,
) -> list[FeatureInstance]:
    settings = config.extremum
    scale = cache.scale
    bbox = cache.glyph.bbox
    width, height = scale.bbox_w, scale.bbox_h
    if width <= 0 or height <= 0:
        return []

    offset = math.radians(cache.italic_angle) if cache.context.is_italic else 0.0
    if at_top:
        extreme = bbox.max_y
        angles = (3 * math.pi / 4 + offset, math.pi / 4 + offset)
        band = (extreme - height * settings.band_depth, extreme + height * settings.band_overshoot)
        sign = -1
    else:
        extreme = bbox.min_y
        angles = (5 * math.pi / 4 + offset, 7 * math.pi / 4 + offset)
        band = (extreme - height * settings.band_overshoot, extreme + height * settings.band_depth)
        sign = 1

    converge = max(scale.eps * settings.converge_eps, height * settings.converge_height)
    sharp_limit = max(scale.eps * settings.sharp_eps, width * settings.sharp_width)
    ridge_limit = width * settings.ridge_width
    ray_length = height * settings.ray_length

    corners: list[_Corner] = []
    for depth in settings.probe_depths:
        y = extreme + sign * height * depth
        for ratio in settings.probe_x_ratios:
            origin = Point(bbox.min_x + width * ratio, y)
            left = _extreme_hit(cache, origin, angles[0], ray_length, band, at_top)
            right = _extreme_hit(cache, origin, angles[1], ray_length, band, at_top)
            if left is None or right is None:
                continue
            if abs(left.y - right.y) >= converge:
                continue

            spread = abs(left.x - right.x)
            if spread < sharp_limit:
                corners.append(_Corner(left, right, sharp=True))
            elif spread < ridge_limit:
                corners.append(_Corner(left, right, sharp=False))

    # Sharp corners take precedence over ridges found around them
    corners.sort(key=lambda c: not c.sharp)
    radius = max(scale.eps * settings.dedupe_eps, width * settings.dedupe_width)
    corners = dedupe_by_distance(corners, lambda c: c.center, radius)

    name = "apex" if at_top else "vertex"
    instances = []
    for index, corner in enumerate(corners):
        if corner.sharp:
            tip = corner.center
            shape = PointShape(tip.x, tip.y)
            confidence = settings.sharp_confidence
        else:
            shape = LineShape(corner.left.x, corner.left.y, corner.right.x, corner.right.y)
            confidence = settings.ridge_confidence
        instances.append(
            FeatureInstance(
                id=f"{name}-{index}",
                shape=shape,
                confidence=confidence,
                anchors={"tip": corner.center, "left": corner.left, "right": corner.right},
                debug={"style": "sharp" if corner.sharp else "ridge"},
            )
        )
    return instances


def _extreme_hit(
    cache: GeometryCache,
    origin: Point,
    angle: float,
    length: float,
    band: tuple[float, float],
    topmost: bool,
) -> Point | None:
    lo, hi = band
    hits = [p for p in ray_hits(cache.shape, origin, angle, length) if lo <= p.y <= hi]
    if not hits:
        return None
    return max(hits, key=lambda p: p.y) if topmost else min(hits, key=lambda p: p.y)
