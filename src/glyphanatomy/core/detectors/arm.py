"""Arm detection.

An arm is a horizontal stroke attached to a stem at one end and free at the
other (E, F, L, T). Scanlines at body and cap zones find the part of each
filled span that extends beyond a stem; it is an arm when its free end
reaches towards the glyph edge and the stroke is thin vertically.
"""

from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import (
    italic_slope,
    mean,
    reference_heights,
    spans_at,
    vertical_extent,
    vhits_at,
)
from glyphanatomy.core.detectors.stem import Stem, find_stems
from glyphanatomy.core.scanline import span_containing
from glyphanatomy.domain import FeatureInstance, LineShape, Point


@dataclass(frozen=True, slots=True)
class _ArmCandidate:
    y: float
    attached: float
    free: float
    side: str


def detect_arm(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect arms extending from stems towards the left or right edge."""
    settings = config.arm
    scale = cache.scale
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    stems = find_stems(cache, config)
    candidates = [
        candidate
        for y in _arm_zones(cache, config)
        for candidate in _candidates_at(cache, config, stems, y)
    ]

    tolerance = scale.bbox_h * settings.group_tolerance
    groups: list[list[_ArmCandidate]] = []
    for candidate in sorted(candidates, key=lambda c: (c.side, c.y)):
        last = groups[-1] if groups else None
        if last and last[0].side == candidate.side and candidate.y - last[-1].y < tolerance:
            last.append(candidate)
        else:
            groups.append([candidate])

    instances = []
    for group in sorted(groups, key=lambda g: mean([c.y for c in g])):
        y = mean([c.y for c in group])
        free = Point(mean([c.free for c in group]), y)
        attached = Point(mean([c.attached for c in group]), y)
        left, right = sorted((free, attached), key=lambda p: p.x)
        instances.append(
            FeatureInstance(
                id=f"arm-{len(instances)}",
                shape=LineShape(left.x, y, right.x, y),
                confidence=min(
                    settings.max_confidence,
                    settings.base_confidence + settings.confidence_step * len(group),
                ),
                anchors={"free": free, "attached": attached},
                debug={"side": group[0].side, "samples": len(group)},
            )
        )

    if not instances:
        fallback = _slide_fallback(cache, config)
        if fallback is not None:
            instances.append(fallback)
    return instances


def _arm_zones(cache: GeometryCache, config: DetectionConfig) -> list[float]:
    bbox = cache.glyph.bbox
    baseline, x_height, cap_height = reference_heights(cache)
    margin = cache.scale.bbox_h * config.arm.zone_margin

    zones = [baseline + (x_height - baseline) * i / 5 for i in range(1, 5)]
    zones += [x_height + (cap_height - x_height) * i / 5 for i in range(1, 5)]
    zones += [baseline + margin, cap_height - margin]
    return sorted(y for y in set(zones) if bbox.min_y < y < bbox.max_y)


def _candidates_at(
    cache: GeometryCache,
    config: DetectionConfig,
    stems: list[Stem],
    y: float,
) -> list[_ArmCandidate]:
    settings = config.arm
    scale = cache.scale
    bbox = cache.glyph.bbox
    slack = scale.stem_width * settings.attach_tolerance
    edge = scale.bbox_w * settings.edge_distance
    max_thickness = max(
        scale.stem_width * settings.max_thickness_stem,
        scale.bbox_h * settings.max_thickness_height,
    )
    min_length = scale.stem_width * settings.min_length_stem
    max_length = scale.bbox_w * settings.max_length_width
    slope = italic_slope(cache)

    candidates = []
    for lo, hi in spans_at(cache, y):
        for stem in stems:
            shift = (y - stem.bottom) * slope
            s1, s2 = stem.x1 + shift, stem.x2 + shift
            if hi < s1 - slack or lo > s2 + slack:
                continue

            others = [
                (o.x1 + (y - o.bottom) * slope, o.x2 + (y - o.bottom) * slope)
                for o in stems
                if o is not stem
            ]
            for side, start, end in (("right", s2, hi), ("left", lo, s1)):
                length = end - start
                if not min_length <= length <= max_length:
                    continue
                free = end if side == "right" else start
                attached = start if side == "right" else end
                distance = bbox.max_x - free if side == "right" else free - bbox.min_x
                if distance > edge:
                    continue
                if any(o1 < end and o2 > start for o1, o2 in others):
                    continue
                extent = vertical_extent(cache, (start + end) / 2, y)
                if extent is None or extent[1] - extent[0] > max_thickness:
                    continue
                candidates.append(_ArmCandidate(y, attached, free, side))
    return candidates


def _slide_fallback(cache: GeometryCache, config: DetectionConfig) -> FeatureInstance | None:
    """Walk inwards from the right edge to the first stroke and test it."""
    settings = config.arm
    scale = cache.scale
    bbox = cache.glyph.bbox
    baseline, _, cap_height = reference_heights(cache)

    step = scale.bbox_w * settings.slide_step
    stop = bbox.min_x + scale.bbox_w * settings.slide_limit
    x = bbox.max_x - step
    hits = []
    while x > stop:
        hits = vhits_at(cache, x)
        if hits:
            break
        x -= step

    if len(hits) != 2:
        return None
    y1, y2 = hits[0].y, hits[1].y
    if not (y1 > baseline and y2 < cap_height):
        return None

    y = (y1 + y2) / 2
    span = span_containing(spans_at(cache, y), x)
    if span is None:
        return None
    return FeatureInstance(
        id="arm-0",
        shape=LineShape(span[0], y, span[1], y),
        confidence=settings.slide_confidence,
        anchors={"free": Point(span[1], y), "attached": Point(span[0], y)},
        debug={"side": "right", "source": "slide"},
    )
