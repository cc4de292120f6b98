"""Bowl, counter, eye and loop detection.

These features describe enclosed space. The primary path works from hole
contours, which give exact geometry. Outlines whose counters are not drawn
as separate counter-clockwise contours fall back to finding an enclosed seed
point on a scanline and sweeping rays around it, with lower confidence.
"""

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.contours import hole_contours
from glyphanatomy.core.detectors._common import (
    centroid,
    farthest_hit,
    find_enclosed_seed,
    hits_at,
    nearest_hit,
    radial_sweep,
    reference_heights,
    stroke_outer_hit,
    vhits_at,
)
from glyphanatomy.core.geometry import to_svg_path
from glyphanatomy.domain import (
    CircleShape,
    ContourClassification,
    FeatureInstance,
    Point,
    PointShape,
    PolylineShape,
)


def _seed_levels(cache: GeometryCache, config: DetectionConfig) -> list[float]:
    bbox = cache.glyph.bbox
    return [bbox.min_y + cache.scale.bbox_h * r for r in config.enclosed.seed_levels]


def _min_seed_gap(cache: GeometryCache, config: DetectionConfig) -> float:
    return cache.scale.bbox_w * config.enclosed.min_seed_gap


def _hole_center(hole: ContourClassification) -> Point:
    return hole.bbox.center


def detect_bowl(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect bowls: the curved strokes enclosing each counter."""
    settings = config.enclosed
    if cache.scale.bbox_w <= 0 or cache.scale.bbox_h <= 0:
        return []

    instances = []
    for hole in hole_contours(cache.contours):
        center = _hole_center(hole)
        outline = radial_sweep(cache, center, settings.bowl_sweep_step, stroke_outer_hit)
        debug = {"source": "hole-contour", "contour": hole.index}
        if len(outline) >= settings.min_trace_points:
            shape = PolylineShape(tuple(outline), closed=True)
            confidence = settings.bowl_confidence
        else:
            radius = max(hole.bbox.width, hole.bbox.height) / 2 + cache.scale.stem_width
            shape = CircleShape(center.x, center.y, radius)
            confidence = settings.bowl_circle_confidence
        instances.append(
            FeatureInstance(
                id=f"bowl-{len(instances)}",
                shape=shape,
                confidence=confidence,
                anchors={"center": center},
                debug=debug,
            )
        )
    if instances:
        return instances

    seed = find_enclosed_seed(cache, _seed_levels(cache, config), _min_seed_gap(cache, config))
    if seed is None:
        return []
    outline = radial_sweep(cache, seed, settings.bowl_sweep_step, stroke_outer_hit)
    if len(outline) < settings.min_trace_points:
        return []
    return [
        FeatureInstance(
            id="bowl-0",
            shape=PolylineShape(tuple(outline), closed=True),
            confidence=settings.bowl_fallback_confidence,
            anchors={"seed": seed, "center": centroid(outline)},
            debug={"source": "radial-sweep"},
        )
    ]


def detect_counter(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect counters: the enclosed space inside bowls."""
    settings = config.enclosed
    if cache.scale.bbox_w <= 0 or cache.scale.bbox_h <= 0:
        return []

    instances = []
    for hole in hole_contours(cache.contours):
        center = _hole_center(hole)
        instances.append(
            FeatureInstance(
                id=f"counter-{len(instances)}",
                shape=CircleShape(center.x, center.y, min(hole.bbox.width, hole.bbox.height) / 2),
                confidence=settings.counter_confidence,
                anchors={"center": center},
                debug={
                    "source": "hole-contour",
                    "contour": hole.index,
                    "area": hole.area,
                    "path": to_svg_path(cache.contour_commands(hole)),
                },
            )
        )
    if instances:
        return instances

    seed = find_enclosed_seed(cache, _seed_levels(cache, config), _min_seed_gap(cache, config))
    if seed is None:
        return []
    return [
        _traced_or_seed(
            cache,
            seed,
            name="counter",
            step=settings.counter_sweep_step,
            min_points=settings.counter_min_points,
            trace_confidence=settings.counter_trace_confidence,
            seed_confidence=settings.counter_seed_confidence,
        )
    ]


def detect_eye(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect the eye: a small closed counter within the x-height band (e)."""
    settings = config.enclosed
    scale = cache.scale
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline, x_height, _ = reference_heights(cache)
    min_height = scale.bbox_h * settings.eye_min_height
    max_height = scale.bbox_h * settings.eye_max_height
    ceiling = x_height + scale.bbox_h * settings.eye_margin

    instances = []
    for hole in hole_contours(cache.contours):
        center = _hole_center(hole)
        if not baseline < center.y < x_height:
            continue
        if hole.bbox.max_y >= ceiling or not min_height < hole.bbox.height < max_height:
            continue
        instances.append(
            FeatureInstance(
                id=f"eye-{len(instances)}",
                shape=CircleShape(center.x, center.y, min(hole.bbox.width, hole.bbox.height) / 2),
                confidence=settings.eye_confidence,
                anchors={"center": center},
                debug={"source": "hole-contour", "contour": hole.index},
            )
        )
    if instances or hole_contours(cache.contours):
        return instances

    seed = find_enclosed_seed(
        cache,
        [baseline + (x_height - baseline) * i / 6 for i in (3, 4, 2, 5, 1)],
        _min_seed_gap(cache, config),
        max_gap=scale.bbox_w * settings.eye_max_gap,
        min_y=baseline,
        max_y=x_height,
    )
    if seed is None:
        return []
    return [
        _traced_or_seed(
            cache,
            seed,
            name="eye",
            step=settings.counter_sweep_step,
            min_points=settings.counter_min_points,
            trace_confidence=settings.eye_trace_confidence,
            seed_confidence=settings.eye_seed_confidence,
        )
    ]


def detect_loop(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect a loop: a closed or partial bowl below the baseline (g)."""
    settings = config.enclosed
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline = reference_heights(cache)[0]
    if bbox.min_y >= baseline - scale.bbox_h * settings.loop_descender:
        return []

    instances = []
    for hole in hole_contours(cache.contours):
        center = _hole_center(hole)
        if center.y >= baseline:
            continue
        outline = radial_sweep(cache, center, settings.bowl_sweep_step, stroke_outer_hit)
        if len(outline) < settings.loop_min_points:
            continue
        instances.append(
            FeatureInstance(
                id=f"loop-{len(instances)}",
                shape=PolylineShape(tuple(outline), closed=True),
                confidence=settings.loop_confidence,
                anchors={"center": center},
                debug={"source": "hole-contour", "contour": hole.index},
            )
        )
    if instances:
        return instances

    mid_y = (baseline + bbox.min_y) / 2
    crossings = len(hits_at(cache, mid_y))
    for i in range(1, 5):
        x = bbox.min_x + scale.bbox_w * i / 5
        below = [p for p in vhits_at(cache, x) if bbox.min_y <= p.y < baseline]
        crossings = max(crossings, len(below))
    if crossings < settings.loop_min_hits:
        return []

    seed = find_enclosed_seed(cache, [mid_y], _min_seed_gap(cache, config)) or Point(
        bbox.center.x, mid_y
    )
    outline = [
        p
        for p in radial_sweep(cache, seed, settings.bowl_sweep_step, farthest_hit)
        if p.y < baseline + scale.eps * 5
    ]
    if len(outline) >= settings.loop_min_points:
        return [
            FeatureInstance(
                id="loop-0",
                shape=PolylineShape(tuple(outline)),
                confidence=settings.loop_trace_confidence,
                anchors={"center": centroid(outline)},
                debug={"source": "radial-sweep", "crossings": crossings},
            )
        ]
    return [
        FeatureInstance(
            id="loop-0",
            shape=PointShape(seed.x, seed.y, label="Loop"),
            confidence=settings.loop_seed_confidence,
            anchors={"seed": seed},
            debug={"source": "seed-only", "crossings": crossings},
        )
    ]


def _traced_or_seed(
    cache: GeometryCache,
    seed: Point,
    name: str,
    step: float,
    min_points: int,
    trace_confidence: float,
    seed_confidence: float,
) -> FeatureInstance:
    """Trace the space around a seed, or report the seed alone."""
    outline = radial_sweep(cache, seed, step, nearest_hit)
    if len(outline) >= min_points:
        return FeatureInstance(
            id=f"{name}-0",
            shape=PolylineShape(tuple(outline), closed=True),
            confidence=trace_confidence,
            anchors={"seed": seed, "center": centroid(outline)},
            debug={"source": "radial-sweep"},
        )
    return FeatureInstance(
        id=f"{name}-0",
        shape=PointShape(seed.x, seed.y, label=name.capitalize()),
        confidence=seed_confidence,
        anchors={"seed": seed},
        debug={"source": "seed-only"},
    )
