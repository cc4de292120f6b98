"""Aperture detection.

An aperture is the opening between a partially enclosed counter and the
outside (c, e, s, C). Scanlines through the body look for a gap between the
last filled span and the glyph edge, or between two spans near an edge,
that is closed above and below by strokes. A gap that persists over several
scanlines on one side becomes one aperture, drawn as a vertical line across
the opening.
"""

from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.contours import hole_contours
from glyphanatomy.core.detectors._common import (
    is_enclosed,
    mean,
    reference_heights,
    spans_at,
    vhits_at,
)
from glyphanatomy.core.geometry import point_in_polygon
from glyphanatomy.domain import FeatureInstance, LineShape, Point

RIGHT = "right"
LEFT = "left"


@dataclass(frozen=True, slots=True)
class _Gap:
    side: str
    x: float
    y: float
    width: float


def detect_aperture(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect openings on the left and right of the glyph."""
    settings = config.aperture
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline, x_height, cap_height = reference_heights(cache)
    is_tall = bbox.max_y > x_height + scale.bbox_h * config.stem.uppercase_margin
    top = cap_height if is_tall else x_height

    gaps: list[_Gap] = []
    for i in range(1, settings.levels):
        y = baseline + (top - baseline) * i / settings.levels
        if bbox.min_y < y < bbox.max_y:
            gaps.extend(_gaps_at(cache, config, y))

    instances = []
    for side in (RIGHT, LEFT):
        found = [g for g in gaps if g.side == side]
        if len(found) < settings.min_levels:
            continue
        instance = _opening(cache, config, side, found, len(instances))
        if instance is not None:
            instances.append(instance)
    return instances


def _gaps_at(cache: GeometryCache, config: DetectionConfig, y: float) -> list[_Gap]:
    settings = config.aperture
    scale = cache.scale
    bbox = cache.glyph.bbox
    spans = spans_at(cache, y)
    if not spans:
        return []

    min_gap = max(scale.stem_width * settings.min_gap_stem, scale.bbox_w * settings.min_gap_width)
    edge = scale.bbox_w * settings.edge_distance
    gaps = []

    # Gaps between the outermost spans and the glyph edges
    for side, start, end in ((LEFT, bbox.min_x, spans[0][0]), (RIGHT, spans[-1][1], bbox.max_x)):
        x = (start + end) / 2
        if end - start > min_gap and _is_bounded(cache, x, y):
            gaps.append(_Gap(side, x, y, end - start))

    # Gaps between spans, close to an edge and not inside a counter
    holes = [cache.subpaths[contour.index].points for contour in hole_contours(cache.contours)]
    for (_, start), (end, _) in zip(spans, spans[1:]):
        if end - start <= min_gap:
            continue
        x = (start + end) / 2
        point = Point(x, y)
        if end > bbox.max_x - edge:
            side = RIGHT
        elif start < bbox.min_x + edge:
            side = LEFT
        else:
            continue
        if any(point_in_polygon(point, hole) for hole in holes):
            continue
        if is_enclosed(cache, point) or not _is_bounded(cache, x, y):
            continue
        gaps.append(_Gap(side, x, y, end - start))

    return gaps


def _is_bounded(cache: GeometryCache, x: float, y: float) -> bool:
    """True when strokes lie both above and below (x, y)."""
    hits = vhits_at(cache, x)
    return any(p.y < y for p in hits) and any(p.y > y for p in hits)


def _opening(
    cache: GeometryCache,
    config: DetectionConfig,
    side: str,
    gaps: list[_Gap],
    index: int,
) -> FeatureInstance | None:
    settings = config.aperture
    x = mean([g.x for g in gaps])
    y = mean([g.y for g in gaps])

    # Span the unfilled interval at x that contains the average gap height
    hits = [p.y for p in vhits_at(cache, x)]
    below = [h for h in hits if h < y]
    above = [h for h in hits if h > y]
    y1 = max(below) if below else min(g.y for g in gaps)
    y2 = min(above) if above else max(g.y for g in gaps)
    if y2 <= y1:
        return None

    cap = settings.right_max_confidence if side == RIGHT else settings.left_max_confidence
    confidence = min(cap, settings.base_confidence + settings.confidence_step * len(gaps))
    return FeatureInstance(
        id=f"aperture-{index}",
        shape=LineShape(x, y1, x, y2),
        confidence=confidence,
        anchors={"top": Point(x, y2), "bottom": Point(x, y1), "center": Point(x, (y1 + y2) / 2)},
        debug={"side": side, "levels": len(gaps), "gap": mean([g.width for g in gaps])},
    )
