"""Stem detection.

Stems are the main vertical strokes. Horizontal scanlines across the body of
the glyph collect filled spans of plausible stroke width; spans whose
midpoints line up (after removing the italic slant) across several bands
form one stem.
"""

from dataclasses import dataclass

from glyphanatomy.config import DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors._common import (
    italic_slope,
    mean,
    reference_heights,
    spans_at,
    std_dev,
)
from glyphanatomy.domain import FeatureInstance, Point, RectShape


@dataclass(frozen=True, slots=True)
class StemSample:
    """One filled span, with coordinates shifted to the stem's bottom."""

    x1: float
    x2: float
    y: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def mid(self) -> float:
        return (self.x1 + self.x2) / 2


@dataclass(frozen=True, slots=True)
class Stem:
    """A vertical stroke found by span grouping.

    Attributes:
        x1: Mean left edge at the stem bottom
        width: Mean span width
        bottom: Bottom of the scanned extent
        top: Top of the scanned extent
        samples: Number of supporting spans
        consistent: Whether span widths agree
    """

    x1: float
    width: float
    bottom: float
    top: float
    samples: int
    consistent: bool

    @property
    def x2(self) -> float:
        return self.x1 + self.width

    @property
    def mid(self) -> float:
        return self.x1 + self.width / 2


def find_stems(cache: GeometryCache, config: DetectionConfig) -> list[Stem]:
    """Group scanline spans into stems, left to right.

    The scanned extent runs from the baseline to the x-height, or to the
    cap-height when the glyph rises clearly above the x-height.
    """
    settings = config.stem
    scale = cache.scale
    bbox = cache.glyph.bbox
    if scale.bbox_w <= 0 or scale.bbox_h <= 0:
        return []

    baseline, x_height, cap_height = reference_heights(cache)
    is_tall = bbox.max_y > x_height + scale.bbox_h * settings.uppercase_margin
    top = min(bbox.max_y, cap_height if is_tall else x_height)
    bottom = max(bbox.min_y, baseline)
    if top <= bottom:
        return []

    min_width = max(
        scale.stem_width * settings.min_thickness_stem,
        scale.bbox_w * settings.min_thickness_width,
    )
    max_width = scale.stem_width * settings.max_thickness_stem
    slope = italic_slope(cache)

    samples: list[StemSample] = []
    for i in range(1, settings.bands):
        y = bottom + (top - bottom) * i / settings.bands
        shift = (y - bottom) * slope
        for lo, hi in spans_at(cache, y):
            if min_width <= hi - lo <= max_width:
                samples.append(StemSample(lo - shift, hi - shift, y))

    tolerance = scale.stem_width * settings.group_tolerance
    groups: list[list[StemSample]] = []
    for sample in sorted(samples, key=lambda s: s.mid):
        if groups and abs(sample.mid - mean([s.mid for s in groups[-1]])) <= tolerance:
            groups[-1].append(sample)
        else:
            groups.append([sample])

    stems = []
    for group in groups:
        if len(group) < settings.min_samples:
            continue
        if std_dev([s.mid for s in group]) > scale.stem_width * settings.max_drift:
            continue

        widths = [s.width for s in group]
        avg_width = mean(widths)
        stems.append(
            Stem(
                x1=mean([s.x1 for s in group]),
                width=avg_width,
                bottom=bottom,
                top=top,
                samples=len(group),
                consistent=std_dev(widths) < avg_width * settings.width_consistency,
            )
        )
    return stems


def detect_stem(cache: GeometryCache, config: DetectionConfig) -> list[FeatureInstance]:
    """Detect vertical stems as rectangles spanning the scanned extent."""
    settings = config.stem
    instances = []
    for index, stem in enumerate(find_stems(cache, config)):
        if stem.consistent:
            confidence = min(
                settings.max_confidence,
                settings.base_confidence + settings.confidence_step * stem.samples,
            )
        else:
            confidence = settings.base_confidence

        instances.append(
            FeatureInstance(
                id=f"stem-{index}",
                shape=RectShape(stem.x1, stem.bottom, stem.width, stem.top - stem.bottom),
                confidence=confidence,
                anchors={
                    "top": Point(stem.mid, stem.top),
                    "bottom": Point(stem.mid, stem.bottom),
                    "center": Point(stem.mid, (stem.top + stem.bottom) / 2),
                },
                debug={"samples": stem.samples, "width": stem.width},
            )
        )
    return instances
