"""Contour classification.

Partitions a glyph's sub-paths into base, mark and hole contours. Holes are
recognized purely by winding: with outer contours running clockwise, a
counter-clockwise sub-path cuts a counter out of the fill.
"""

from collections.abc import Sequence

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, ContourConfig
from glyphanatomy.core.geometry import Subpath, signed_area
from glyphanatomy.domain import BBox, ContourClassification, ContourType, FontMetrics


def classify_contours(
    subpaths: Sequence[Subpath],
    metrics: FontMetrics,
    glyph_bbox: BBox,
    config: ContourConfig | None = None,
) -> list[ContourClassification]:
    """Classify each sub-path of a glyph.

    The shoelace area is taken over all command points of the sub-path,
    control points included, and negated so clockwise contours are positive.

    Classification rules, in order:
    1. Negative (counter-clockwise) area: hole
    2. Small relative to the glyph and above 0.8 x-height or entirely
       below the baseline: mark
    3. Otherwise: base

    Args:
        subpaths: Sub-paths in drawing order
        metrics: Font metrics
        glyph_bbox: Bounding box of the whole glyph
        config: Contour configuration

    Returns:
        One classification per sub-path with at least three points
    """
    config = config or DEFAULT_DETECTION_CONFIG.contour
    results: list[ContourClassification] = []

    for index, subpath in enumerate(subpaths):
        points = subpath.raw_points
        if len(points) < 3:
            continue

        area = -signed_area(points)
        bbox = BBox.from_points(points)

        if area < 0:
            kind = ContourType.HOLE
        elif _is_mark(bbox, glyph_bbox, metrics, config):
            kind = ContourType.MARK
        else:
            kind = ContourType.BASE

        results.append(
            ContourClassification(
                index=index,
                type=kind,
                bbox=bbox,
                area=abs(area),
                winding=1 if area >= 0 else -1,
                start_index=subpath.start_index,
                end_index=subpath.end_index,
            )
        )

    return results


def _is_mark(
    bbox: BBox,
    glyph_bbox: BBox,
    metrics: FontMetrics,
    config: ContourConfig,
) -> bool:
    small = (
        bbox.width < glyph_bbox.width * config.mark_max_ratio
        and bbox.height < glyph_bbox.height * config.mark_max_ratio
    )
    if not small:
        return False

    above = bbox.min_y > metrics.x_height * config.mark_x_height_ratio
    below = bbox.max_y < metrics.baseline
    return above or below


def base_contours(contours: Sequence[ContourClassification]) -> list[ContourClassification]:
    return [c for c in contours if c.type is ContourType.BASE]


def mark_contours(contours: Sequence[ContourClassification]) -> list[ContourClassification]:
    return [c for c in contours if c.type is ContourType.MARK]


def hole_contours(contours: Sequence[ContourClassification]) -> list[ContourClassification]:
    return [c for c in contours if c.type is ContourType.HOLE]
