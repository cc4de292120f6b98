"""Serif, finial, spur and ear detection.

These detectors share one probe: at each terminal height (baseline, x-height,
cap-height and the glyph's own top and bottom) the filled span just inside
the outline is compared with the stroke a little further in. The difference
on each side is the horizontal projection of the terminal:

- serif: a projection of moderate size on at least one side
- finial: no projection on either side, scored by outline curvature
- spur: a small projection on exactly one side near the baseline

Ears are found separately, as a small stroke detached from the body near the
top right of the glyph.
"""

from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.curvature import (
    CurvatureClass,
    CurvatureResult,
    analyze_terminal_curvature,
)
from glyphanatomy.core.detectors._common import (
    dedupe_by_distance,
    reference_heights,
    spans_at,
    vertical_extent,
)
from glyphanatomy.core.scanline import Span
from glyphanatomy.domain import FeatureInstance, Point, PointShape

FOOT = "foot"
TOP = "top"

LEFT = "left"
RIGHT = "right"


@dataclass(frozen=True, slots=True)
class StrokeEnd:
    """Where a stroke meets a terminal height.

    Attributes:
        zone: FOOT for ends facing down, TOP for ends facing up
        level: Reference height the end was probed at
        probe_y: Height of the terminal span
        edge_y: Height of the outline at the end of the stroke
        terminal: Filled span just inside the end
        stroke: Filled span of the same stroke further in
    """

    zone: str
    level: float
    probe_y: float
    edge_y: float
    terminal: Span
    stroke: Span

    @property
    def left_projection(self) -> float:
        return self.stroke[0] - self.terminal[0]

    @property
    def right_projection(self) -> float:
        return self.terminal[1] - self.stroke[1]

    @property
    def center(self) -> Point:
        return Point((self.stroke[0] + self.stroke[1]) / 2, self.edge_y)

    def edge_point(self, side: str) -> Point:
        """Outer corner of the terminal on ``side``."""
        x = self.terminal[0] if side == LEFT else self.terminal[1]
        return Point(x, self.edge_y)

    def projection(self, side: str) -> float:
        return self.left_projection if side == LEFT else self.right_projection


def _terminal_levels(cache: GeometryCache) -> list[tuple[str, float]]:
    baseline, x_height, cap_height = reference_heights(cache)
    bbox = cache.glyph.bbox
    margin = cache.scale.bbox_h * 0.1

    levels = [(FOOT, baseline), (FOOT, bbox.min_y), (TOP, x_height), (TOP, cap_height)]
    levels.append((TOP, bbox.max_y))

    kept: list[tuple[str, float]] = []
    for zone, level in levels:
        if not bbox.min_y - margin <= level <= bbox.max_y + margin:
            continue
        if any(z == zone and abs(level - other) < cache.scale.eps for z, other in kept):
            continue
        kept.append((zone, level))
    return kept


def find_stroke_ends(cache: GeometryCache, config: DetectionConfig) -> list[StrokeEnd]:
    """Locate stroke ends at the glyph's terminal heights.

    Args:
        cache: Geometry snapshot
        config: Detection configuration

    Returns:
        Stroke ends ordered by zone and height, left to right
    """
    settings = config.terminal
    scale = cache.scale
    if scale.bbox_w <= 0 or scale.bbox_h <= 0 or scale.stem_width <= 0:
        return []

    nudge = scale.stem_width * settings.nudge
    reach = min(scale.stem_width * settings.reach_stem, scale.bbox_h * settings.reach_height)
    max_stroke = scale.stem_width * settings.max_stroke

    ends: list[StrokeEnd] = []
    for zone, level in _terminal_levels(cache):
        inward = 1 if zone == FOOT else -1
        probe_y = level + inward * nudge
        stroke_y = probe_y + inward * reach
        strokes = spans_at(cache, stroke_y)

        for terminal in spans_at(cache, probe_y):
            if terminal[1] - terminal[0] < scale.stem_width * 0.5:
                continue
            overlapping = [s for s in strokes if s[0] < terminal[1] and s[1] > terminal[0]]
            if not overlapping:
                continue
            stroke = max(overlapping, key=lambda s: s[1] - s[0])
            if stroke[1] - stroke[0] > max_stroke:
                continue

            extent = vertical_extent(cache, (stroke[0] + stroke[1]) / 2, probe_y)
            if extent is None:
                continue
            edge_y = extent[0] if zone == FOOT else extent[1]
            if abs(edge_y - level) > reach:
                continue
            ends.append(StrokeEnd(zone, level, probe_y, edge_y, terminal, stroke))
    return ends


def _projects(cache: GeometryCache, end: StrokeEnd, side: str, limit: float) -> bool:
    """True when the projection on ``side`` stays short vertically."""
    amount = end.projection(side)
    x = end.terminal[0] + amount / 2 if side == LEFT else end.terminal[1] - amount / 2
    extent = vertical_extent(cache, x, end.probe_y)
    return extent is not None and extent[1] - extent[0] < limit


def detect_serif(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect serifs: short horizontal projections at stroke ends."""
    settings = config.terminal
    sw = cache.scale.stem_width
    reach = min(sw * settings.reach_stem, cache.scale.bbox_h * settings.reach_height)
    confidence = settings.serif_confidence
    if cache.context.is_serif:
        confidence = min(1.0, confidence + settings.serif_context_boost)

    candidates: list[tuple[StrokeEnd, str]] = []
    for end in find_stroke_ends(cache, config):
        for side in (LEFT, RIGHT):
            amount = end.projection(side)
            if not sw * settings.serif_min < amount < sw * settings.serif_max:
                continue
            if _projects(cache, end, side, reach + sw * settings.nudge):
                candidates.append((end, side))

    kept = dedupe_by_distance(candidates, lambda c: c[0].edge_point(c[1]), sw * settings.dedupe)
    instances = []
    for end, side in kept:
        point = end.edge_point(side)
        stroke_x = end.stroke[0] if side == LEFT else end.stroke[1]
        instances.append(
            FeatureInstance(
                id=f"serif-{len(instances)}",
                shape=PointShape(point.x, point.y, label=f"{end.zone} serif"),
                confidence=confidence,
                anchors={"position": point, "stroke": Point(stroke_x, end.edge_y)},
                debug={"side": side, "zone": end.zone, "projection": end.projection(side)},
            )
        )
    return instances


def _end_curvature(
    cache: GeometryCache,
    config: DetectionConfig,
    end: StrokeEnd,
) -> CurvatureResult | None:
    for position in (end.center, end.edge_point(LEFT), end.edge_point(RIGHT)):
        result = analyze_terminal_curvature(cache, position, config.curvature)
        if result is not None:
            return result
    return None


def detect_finial(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect finials: stroke ends without a serif projection."""
    settings = config.terminal
    sw = cache.scale.stem_width
    by_class = {
        CurvatureClass.SHARP: settings.finial_sharp,
        CurvatureClass.MODERATE: settings.finial_moderate,
        CurvatureClass.GENTLE: settings.finial_gentle,
        CurvatureClass.STRAIGHT: settings.finial_straight,
    }

    ends = [
        end
        for end in find_stroke_ends(cache, config)
        if max(end.left_projection, end.right_projection) < sw * settings.serif_min
    ]
    ends = dedupe_by_distance(ends, lambda e: e.center, sw * settings.dedupe)

    instances = []
    for end in ends:
        curvature = _end_curvature(cache, config, end)
        if curvature is None:
            confidence = settings.finial_unknown
        else:
            confidence = by_class[curvature.classification]
        point = end.center
        instances.append(
            FeatureInstance(
                id=f"finial-{len(instances)}",
                shape=PointShape(point.x, point.y, label="Finial"),
                confidence=confidence,
                anchors={"position": point},
                debug={
                    "zone": end.zone,
                    "curvature": curvature.classification.value if curvature else None,
                    "curvature_value": curvature.curvature if curvature else None,
                },
            )
        )
    return instances


def detect_spur(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect spurs: small one-sided projections near the baseline."""
    settings = config.terminal
    sw = cache.scale.stem_width
    baseline = reference_heights(cache)[0]
    zone = cache.scale.bbox_h * settings.spur_zone

    candidates: list[tuple[StrokeEnd, str]] = []
    for end in find_stroke_ends(cache, config):
        if end.zone != FOOT or abs(end.edge_y - baseline) > zone:
            continue
        for side, other in ((LEFT, RIGHT), (RIGHT, LEFT)):
            if not sw * settings.spur_min < end.projection(side) < sw * settings.spur_max:
                continue
            if end.projection(other) < sw * settings.serif_min:
                candidates.append((end, side))

    kept = dedupe_by_distance(candidates, lambda c: c[0].edge_point(c[1]), sw * settings.dedupe)
    instances = []
    for end, side in kept:
        point = end.edge_point(side)
        curvature = analyze_terminal_curvature(cache, point, config.curvature)
        confidence = settings.spur_confidence
        if curvature is not None and curvature.classification is CurvatureClass.MODERATE:
            confidence = min(1.0, confidence + settings.spur_curvature_boost)
        instances.append(
            FeatureInstance(
                id=f"spur-{len(instances)}",
                shape=PointShape(point.x, point.y, label="Spur"),
                confidence=confidence,
                anchors={"position": point},
                debug={"side": side, "projection": end.projection(side)},
            )
        )
    return instances


def detect_ear(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect an ear: a small stroke detached from the body at the top right (g, r)."""
    settings = config.terminal
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    band = scale.bbox_h * settings.ear_band
    max_width = scale.stem_width * settings.ear_max_width
    min_bottom = bbox.min_y + scale.bbox_h * settings.ear_max_drop

    for i in range(1, settings.ear_levels + 1):
        y = bbox.max_y - band * i / (settings.ear_levels + 1)
        spans = spans_at(cache, y)
        if len(spans) < 2:
            continue

        lo, hi = spans[-1]
        if hi - lo > max_width or lo < bbox.center.x:
            continue
        x = (lo + hi) / 2
        extent = vertical_extent(cache, x, y)
        if extent is None or extent[0] < min_bottom:
            continue

        tip = Point(x, extent[1])
        confidence = settings.ear_confidence
        curvature = analyze_terminal_curvature(cache, tip, config.curvature)
        if curvature is not None and curvature.classification in (
            CurvatureClass.MODERATE,
            CurvatureClass.SHARP,
        ):
            confidence = min(1.0, confidence + settings.ear_curvature_boost)
        return [
            FeatureInstance(
                id="ear-0",
                shape=PointShape(tip.x, tip.y, label="Ear"),
                confidence=confidence,
                anchors={"position": tip, "base": Point(x, extent[0])},
                debug={"width": hi - lo, "level": y},
            )
        ]
    return []
