"""Crossbar detection.

A crossbar is a thin horizontal stroke connecting or crossing stems (A, H,
e, t). Scanlines at several heights find filled spans; each span is sampled
vertically to find the part of it that is bar-thin, which separates the bar
from the stems it joins even when the scanline runs straight through them.
Bars seen from several scanlines are merged into one rectangle.
"""

from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import (
    dedupe_by_distance,
    mean,
    reference_heights,
    spans_at,
    vertical_extent,
)
from glyphanatomy.domain import FeatureInstance, LineShape, Point, RectShape, SegmentKind


@dataclass(frozen=True, slots=True)
class _Bar:
    x1: float
    x2: float
    bottom: float
    top: float

    @property
    def center_y(self) -> float:
        return (self.bottom + self.top) / 2


def detect_crossbar(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect horizontal bars inside the glyph body."""
    scale = cache.scale
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    bars = [bar for y in _scan_levels(cache, config) for bar in _bars_at(cache, config, y)]
    if bars:
        return _merge_bars(cache, config, bars)
    return _segment_fallback(cache, config)


def _scan_levels(cache: GeometryCache, config: DetectionConfig) -> list[float]:
    bbox = cache.glyph.bbox
    baseline, x_height, cap_height = reference_heights(cache)
    levels = set()
    for height in (cap_height, x_height):
        for ratio in config.crossbar.band_ratios:
            y = baseline + (height - baseline) * ratio
            if bbox.min_y < y < bbox.max_y:
                levels.add(round(y, 6))
    return sorted(levels)


def _bars_at(cache: GeometryCache, config: DetectionConfig, y: float) -> list[_Bar]:
    settings = config.crossbar
    scale = cache.scale
    bbox = cache.glyph.bbox

    max_thickness = max(
        scale.stem_width * settings.max_thickness_stem,
        scale.bbox_h * settings.max_thickness_height,
    )
    ceiling = bbox.max_y - scale.bbox_h * settings.interior_margin
    floor = bbox.min_y + scale.bbox_h * settings.interior_margin
    min_length = scale.stem_width * settings.min_width_stem

    bars = []
    for lo, hi in spans_at(cache, y):
        if hi - lo < min_length:
            continue

        step = (hi - lo) / settings.samples
        thin: list[tuple[float, float, float]] = []
        for k in range(settings.samples):
            x = lo + step * (k + 0.5)
            extent = vertical_extent(cache, x, y)
            if extent is None:
                continue
            y_lo, y_hi = extent
            if y_hi - y_lo <= max_thickness and y_hi < ceiling and y_lo > floor:
                thin.append((x, y_lo, y_hi))

        if len(thin) < settings.samples * settings.min_thin_fraction:
            continue

        centers = [(y_lo + y_hi) / 2 for _, y_lo, y_hi in thin]
        if max(centers) - min(centers) > scale.stem_width * settings.max_tilt:
            continue

        x1 = max(lo, thin[0][0] - step / 2)
        x2 = min(hi, thin[-1][0] + step / 2)
        if x2 - x1 < min_length:
            continue

        bars.append(
            _Bar(
                x1=x1,
                x2=x2,
                bottom=mean([t[1] for t in thin]),
                top=mean([t[2] for t in thin]),
            )
        )
    return bars


def _merge_bars(
    cache: GeometryCache,
    config: DetectionConfig,
    bars: list[_Bar],
) -> list[FeatureInstance]:
    settings = config.crossbar
    tolerance = cache.scale.bbox_h * settings.group_tolerance

    groups: list[list[_Bar]] = []
    for bar in sorted(bars, key=lambda b: b.center_y):
        if groups and abs(bar.center_y - mean([b.center_y for b in groups[-1]])) <= tolerance:
            groups[-1].append(bar)
        else:
            groups.append([bar])

    instances = []
    for index, group in enumerate(groups):
        x1 = min(b.x1 for b in group)
        x2 = max(b.x2 for b in group)
        bottom = mean([b.bottom for b in group])
        top = mean([b.top for b in group])
        center_y = (bottom + top) / 2

        # Seen from several scanlines means more evidence, not less
        confidence = min(
            settings.max_confidence,
            settings.base_confidence + settings.confidence_step * (len(group) - 1),
        )
        instances.append(
            FeatureInstance(
                id=f"crossbar-{index}",
                shape=RectShape(x1, bottom, x2 - x1, top - bottom),
                confidence=confidence,
                anchors={
                    "left": Point(x1, center_y),
                    "right": Point(x2, center_y),
                    "center": Point((x1 + x2) / 2, center_y),
                },
                debug={"scanlines": len(group), "source": "scanline"},
            )
        )
    return instances


def _segment_fallback(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Horizontal line segments near mid-height, for bars the scan misses.

    The bottom and top edges of one bar both qualify, so edges that bound the
    same filled run are paired into a single rectangle. Edges left unpaired
    are reported as lines.
    """
    settings = config.crossbar
    scale = cache.scale
    edges = sorted(_horizontal_edges(cache, config), key=lambda e: (e[0].y + e[1].y) / 2)

    paired: set[int] = set()
    bars: list[_Bar] = []
    for i, lower in enumerate(edges):
        if i in paired:
            continue
        for j in range(i + 1, len(edges)):
            if j in paired:
                continue
            bar = _pair_edges(cache, config, lower, edges[j])
            if bar is not None:
                paired.update((i, j))
                bars.append(bar)
                break

    tolerance = scale.stem_width * settings.segment_pair_tolerance
    lines = [
        edge
        for k, edge in enumerate(edges)
        if k not in paired and not any(_on_bar(edge, bar, tolerance) for bar in bars)
    ]
    lines = dedupe_by_distance(
        lines,
        lambda line: Point((line[0].x + line[1].x) / 2, (line[0].y + line[1].y) / 2),
        scale.stem_width,
    )

    instances = []
    for bar in bars:
        center_y = bar.center_y
        instances.append(
            FeatureInstance(
                id=f"crossbar-{len(instances)}",
                shape=RectShape(bar.x1, bar.bottom, bar.x2 - bar.x1, bar.top - bar.bottom),
                confidence=settings.segment_confidence,
                anchors={
                    "left": Point(bar.x1, center_y),
                    "right": Point(bar.x2, center_y),
                    "center": Point((bar.x1 + bar.x2) / 2, center_y),
                },
                debug={"source": "segment", "edges": 2},
            )
        )
    for left, right in lines:
        instances.append(
            FeatureInstance(
                id=f"crossbar-{len(instances)}",
                shape=LineShape(left.x, left.y, right.x, right.y),
                confidence=settings.segment_confidence,
                anchors={"left": left, "right": right},
                debug={"source": "segment", "edges": 1},
            )
        )
    return instances


def _horizontal_edges(cache: GeometryCache, config: DetectionConfig) -> list[tuple[Point, Point]]:
    settings = config.crossbar
    scale = cache.scale
    bbox = cache.glyph.bbox
    baseline, x_height, cap_height = reference_heights(cache)

    targets = [baseline + (h - baseline) / 2 for h in (cap_height, x_height)]
    tolerance = scale.bbox_h * settings.segment_tolerance
    margin = scale.bbox_h * settings.interior_margin
    min_length = scale.stem_width * settings.min_width_stem

    edges = []
    for segment in cache.segments:
        if segment.kind is not SegmentKind.LINE or len(segment.params) != 2:
            continue
        start, end = segment.params
        length = abs(end.x - start.x)
        drift = abs(end.y - start.y)
        y = (start.y + end.y) / 2
        if length < min_length or length <= drift * settings.segment_aspect:
            continue
        if not bbox.min_y + margin < y < bbox.max_y - margin:
            continue
        if any(abs(y - target) <= tolerance for target in targets):
            edges.append((min(start, end, key=lambda p: p.x), max(start, end, key=lambda p: p.x)))
    return edges


def _pair_edges(
    cache: GeometryCache,
    config: DetectionConfig,
    lower: tuple[Point, Point],
    upper: tuple[Point, Point],
) -> _Bar | None:
    """A bar when ``lower`` and ``upper`` bound the same filled vertical run."""
    settings = config.crossbar
    scale = cache.scale
    x1 = max(lower[0].x, upper[0].x)
    x2 = min(lower[1].x, upper[1].x)
    if x2 - x1 < scale.stem_width * settings.min_width_stem:
        return None

    bottom = (lower[0].y + lower[1].y) / 2
    top = (upper[0].y + upper[1].y) / 2
    if top - bottom <= scale.eps:
        return None

    extent = vertical_extent(cache, (x1 + x2) / 2, (bottom + top) / 2)
    if extent is None:
        return None
    tolerance = scale.stem_width * settings.segment_pair_tolerance
    if abs(extent[0] - bottom) > tolerance or abs(extent[1] - top) > tolerance:
        return None
    return _Bar(x1=x1, x2=x2, bottom=bottom, top=top)


def _on_bar(edge: tuple[Point, Point], bar: _Bar, tolerance: float) -> bool:
    y = (edge[0].y + edge[1].y) / 2
    overlaps = edge[0].x <= bar.x2 and edge[1].x >= bar.x1
    return overlaps and bar.bottom - tolerance <= y <= bar.top + tolerance
