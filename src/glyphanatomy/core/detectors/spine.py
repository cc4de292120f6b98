"""Spine detection.

The spine is the main curved stroke of an S. Following the widest filled
span from the bottom of the glyph to the top, its midpoint swings from one
side of the centre line to the other; a spine needs at least one reversal of
that drift and excursions on both sides.
"""

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import spans_at
from glyphanatomy.domain import FeatureInstance, Point, PolylineShape


def detect_spine(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect an S-shaped spine as a polyline through span midpoints."""
    settings = config.spine
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    bottom = bbox.min_y + scale.bbox_h * settings.margin
    extent = scale.bbox_h * (1 - 2 * settings.margin)

    path: list[Point] = []
    for i in range(settings.bands):
        y = bottom + extent * i / (settings.bands - 1)
        spans = spans_at(cache, y)
        if not spans:
            continue
        # max() keeps the first of equal widths, i.e. the leftmost span
        lo, hi = max(spans, key=lambda s: s[1] - s[0])
        path.append(Point((lo + hi) / 2, y))

    if len(path) < 3:
        return []

    min_drift = scale.bbox_w * settings.min_drift
    signs = []
    for a, b in zip(path, path[1:]):
        drift = b.x - a.x
        if abs(drift) >= min_drift:
            signs.append(1 if drift > 0 else -1)
    changes = sum(1 for a, b in zip(signs, signs[1:]) if a != b)
    if changes < settings.min_direction_changes:
        return []

    center_x = bbox.center.x
    offset = scale.bbox_w * settings.min_offset
    swings_right = max(p.x for p in path) - center_x > offset
    swings_left = center_x - min(p.x for p in path) > offset
    if not (swings_right and swings_left):
        return []

    confidence = min(
        settings.max_confidence,
        settings.base_confidence + settings.confidence_step * (changes - 1),
    )
    return [
        FeatureInstance(
            id="spine-0",
            shape=PolylineShape(tuple(path)),
            confidence=confidence,
            anchors={"start": path[0], "end": path[-1], "center": path[len(path) // 2]},
            debug={"direction_changes": changes},
        )
    ]
