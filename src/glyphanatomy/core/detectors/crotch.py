"""Crotch detection.

A crotch is the inside angle where two strokes meet, opening upwards (the
valley of V, W, M, y). Vertical rays across the glyph trace its top profile;
an interior local minimum that is deep enough is a crotch. When none is
found, a V-shaped dip of the bottom profile at the baseline is reported
instead.
"""

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import dedupe_by_distance, reference_heights, vhits_at
from glyphanatomy.domain import FeatureInstance, Point, PointShape


def detect_crotch(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect upward-opening valleys between strokes."""
    settings = config.crotch
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline = reference_heights(cache)[0]
    top_profile: list[Point] = []
    bottom_profile: list[Point] = []
    ratio = settings.probe_start
    while ratio <= 1.0 - settings.probe_start + 1e-9:
        x = bbox.min_x + scale.bbox_w * ratio
        hits = vhits_at(cache, x)
        if hits:
            top_profile.append(hits[-1])
            bottom_profile.append(hits[0])
        ratio += settings.probe_step

    if len(top_profile) < settings.min_probes:
        return []

    min_depth = scale.bbox_h * settings.min_depth
    floor = baseline + scale.bbox_h * settings.baseline_clearance

    valleys: list[tuple[Point, float]] = []
    for i in range(1, len(top_profile) - 1):
        point = top_profile[i]
        if not (point.y < top_profile[i - 1].y and point.y <= top_profile[i + 1].y):
            continue
        left_peak = max(p.y for p in top_profile[:i])
        right_peak = max(p.y for p in top_profile[i + 1 :])
        depth = min(left_peak, right_peak) - point.y
        if depth > min_depth and point.y > floor:
            valleys.append((point, depth))

    if valleys:
        valleys.sort(key=lambda v: -v[1])
        radius = scale.bbox_w * settings.probe_step * 2
        valleys = dedupe_by_distance(valleys, lambda v: v[0], radius)
        return [
            FeatureInstance(
                id=f"crotch-{index}",
                shape=PointShape(point.x, point.y),
                confidence=min(
                    settings.max_confidence,
                    settings.base_confidence
                    + depth / (scale.bbox_h * settings.depth_scale) * settings.depth_weight,
                ),
                anchors={"tip": point},
                debug={"depth": depth, "source": "top-profile"},
            )
            for index, (point, depth) in enumerate(sorted(valleys, key=lambda v: v[0].x))
        ]

    return _baseline_fallback(cache, config, bottom_profile, baseline)


def _baseline_fallback(
    cache: GeometryCache,
    config: DetectionConfig,
    profile: list[Point],
    baseline: float,
) -> list[FeatureInstance]:
    settings = config.crotch
    height = cache.scale.bbox_h
    rise = height * settings.v_min_depth

    for i in range(1, len(profile) - 1):
        point = profile[i]
        if abs(point.y - baseline) >= height * settings.v_baseline_distance:
            continue
        if profile[i - 1].y - point.y > rise and profile[i + 1].y - point.y > rise:
            return [
                FeatureInstance(
                    id="crotch-0",
                    shape=PointShape(point.x, point.y),
                    confidence=settings.v_confidence,
                    anchors={"tip": point},
                    debug={"source": "baseline-v"},
                )
            ]
    return []
