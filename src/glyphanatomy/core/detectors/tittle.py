"""Tittle detection.

The tittle is the dot of i and j. Mark contours that sit clearly above the
x-height and are small and roughly round are reported first. Otherwise
vertical probes look for a filled run above the x-height that is separated
from the rest of the glyph by empty space, which keeps the ascender of an l
from being mistaken for a dot.
"""

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.contours import mark_contours
from glyphanatomy.core.detectors._common import reference_heights, spans_at, vspans_at
from glyphanatomy.core.scanline import span_containing
from glyphanatomy.domain import CircleShape, FeatureInstance, Point


def detect_tittle(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect dots above the x-height."""
    settings = config.tittle
    scale = cache.scale
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    x_height = reference_heights(cache)[1]
    clearance = max(
        scale.eps * settings.clearance_eps,
        scale.stem_width * settings.clearance_stem,
    )
    floor = x_height + clearance

    instances = []
    for mark in mark_contours(cache.contours):
        box = mark.bbox
        if box.min_y <= floor or box.height <= 0:
            continue
        aspect = box.width / box.height
        if not settings.min_aspect < aspect < settings.max_aspect:
            continue
        if box.width >= scale.bbox_w * settings.max_width:
            continue
        if box.height >= scale.bbox_h * settings.max_height:
            continue
        if not (
            scale.stem_width**2 * settings.min_area_stem
            < mark.area
            < scale.bbox_w * scale.bbox_h * settings.max_area_bbox
        ):
            continue

        center = box.center
        instances.append(
            FeatureInstance(
                id=f"tittle-{len(instances)}",
                shape=CircleShape(center.x, center.y, max(box.width, box.height) / 2),
                confidence=settings.confidence,
                anchors={"center": center},
                debug={
                    "source": "mark-contour",
                    "contour": mark.index,
                    "aspect": aspect,
                    "area": mark.area,
                },
            )
        )

    if instances:
        return instances

    fallback = _isolated_dot(cache, config, floor)
    return [fallback] if fallback is not None else []


def _isolated_dot(
    cache: GeometryCache,
    config: DetectionConfig,
    floor: float,
) -> FeatureInstance | None:
    """Find a detached filled run above ``floor`` with vertical probes."""
    settings = config.tittle
    scale = cache.scale
    bbox = cache.glyph.bbox

    for ratio in settings.probe_x_ratios:
        x = bbox.min_x + scale.bbox_w * ratio
        runs = vspans_at(cache, x)
        if len(runs) < 2:
            continue

        bottom, top = runs[-1]
        # The run below must end before the dot starts
        if bottom <= floor or runs[-2][1] >= bottom:
            continue

        y = (bottom + top) / 2
        span = span_containing(spans_at(cache, y), x)
        if span is None:
            continue
        width = span[1] - span[0]
        height = top - bottom
        if width >= scale.bbox_w * settings.fallback_max_width or height <= 0:
            continue
        if not settings.min_aspect < width / height < settings.max_aspect:
            continue

        cx = (span[0] + span[1]) / 2
        return FeatureInstance(
            id="tittle-0",
            shape=CircleShape(cx, y, min(width, height) / 2),
            confidence=settings.fallback_confidence,
            anchors={"center": Point(cx, y)},
            debug={"source": "vertical-probe", "width": width, "height": height},
        )
    return None
