"""Tail detection.

A tail is a stroke that descends below the baseline (y, j, Q). Scanlines
from the baseline down to the bottom of the glyph collect the crossing
farthest from the glyph's centre line, which traces the outer edge of the
descending stroke. A diagonal ray at the baseline also catches the short
crossing tail of a Q.
"""

import math

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import centroid, hits_at, reference_heights
from glyphanatomy.core.geometry import ray_hits
from glyphanatomy.domain import FeatureInstance, LineShape, Point, PolylineShape, shape_center


def detect_tail(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect descending tails and Q-style diagonal tails."""
    settings = config.tail
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline = reference_heights(cache)[0]
    descent = cache.metrics.descent
    depth = baseline - descent if descent < baseline else cache.context.units_per_em * 0.2
    if bbox.min_y >= baseline - depth * settings.descender_ratio:
        return []

    instances: list[FeatureInstance] = []
    trace = _trace_descender(cache, config, baseline)
    if len(trace) >= settings.min_points:
        instances.append(
            FeatureInstance(
                id="tail-0",
                shape=PolylineShape(tuple(trace)),
                confidence=settings.trace_confidence,
                anchors={"start": trace[0], "end": trace[-1]},
                debug={"source": "descender-trace", "points": len(trace)},
            )
        )
    elif trace:
        end = trace[-1]
        instances.append(
            FeatureInstance(
                id="tail-0",
                shape=LineShape(end.x, baseline, end.x, end.y),
                confidence=settings.line_confidence,
                anchors={"start": Point(end.x, baseline), "end": end},
                debug={"source": "descender-line"},
            )
        )

    diagonal = _diagonal_tail(cache, config, baseline, len(instances))
    if diagonal is not None:
        radius = max(scale.bbox_w, scale.bbox_h) * settings.overlap
        center = shape_center(diagonal.shape)
        if all(shape_center(i.shape).distance_to(center) >= radius for i in instances):
            instances.append(diagonal)
    return instances


def _trace_descender(
    cache: GeometryCache,
    config: DetectionConfig,
    baseline: float,
) -> list[Point]:
    """Crossings farthest from the centre line, from the baseline down."""
    steps = config.tail.steps
    bbox = cache.glyph.bbox
    center_x = bbox.center.x

    points = []
    for i in range(1, steps + 1):
        y = baseline - (baseline - bbox.min_y) * i / steps
        # The bottom level grazes the outline
        if i == steps:
            y += cache.scale.eps
        hits = hits_at(cache, y)
        if hits:
            extreme = max(hits, key=lambda p: abs(p.x - center_x))
            points.append(Point(extreme.x, y))
    return points


def _diagonal_tail(
    cache: GeometryCache,
    config: DetectionConfig,
    baseline: float,
    index: int,
) -> FeatureInstance | None:
    settings = config.tail
    bbox = cache.glyph.bbox
    origin = Point(bbox.max_x - cache.scale.bbox_w * settings.diagonal_offset, baseline)
    hits = ray_hits(cache.shape, origin, -math.pi / 4, cache.scale.overshoot)
    if len(hits) < 2:
        return None

    start, end = hits[0], hits[-1]
    if end.y >= baseline - cache.scale.bbox_h * settings.diagonal_drop:
        return None
    if end.y >= start.y or end.x <= start.x:
        return None
    return FeatureInstance(
        id=f"tail-{index}",
        shape=LineShape(start.x, start.y, end.x, end.y),
        confidence=settings.diagonal_confidence,
        anchors={"start": start, "end": end, "center": centroid([start, end])},
        debug={"source": "diagonal"},
    )
