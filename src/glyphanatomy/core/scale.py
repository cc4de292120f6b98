"""Scale primitive estimation.

Derives the glyph-relative thresholds every detector works in: a numeric
epsilon, the bbox dimensions, a typical stroke width and a ray length that
is guaranteed to cross the whole glyph.
"""

import math

import structlog

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, ScaleConfig
from glyphanatomy.core.geometry import FlattenedPath
from glyphanatomy.core.scanline import horizontal_spans
from glyphanatomy.domain import BBox, FontMetrics, ScalePrimitives

logger = structlog.get_logger(__name__)


def compute_eps(bbox: BBox, units_per_em: int, config: ScaleConfig | None = None) -> float:
    """Numeric tolerance scaled to both the em and the glyph."""
    config = config or DEFAULT_DETECTION_CONFIG.scale
    return max(
        units_per_em * config.eps_upm_ratio,
        min(bbox.width, bbox.height) * config.eps_bbox_ratio,
    )


def estimate_stem_width(
    shape: FlattenedPath,
    bbox: BBox,
    metrics: FontMetrics,
    overshoot: float,
    config: ScaleConfig | None = None,
) -> float:
    """Estimate the typical stroke width of a glyph.

    Casts one horizontal ray halfway between baseline and x-height and takes
    a low percentile of the filled span widths, so thin joins and wide
    bowls do not dominate.

    Args:
        shape: Flattened outline
        bbox: Glyph bounding box
        metrics: Font metrics
        overshoot: Ray length
        config: Scale configuration

    Returns:
        Stem width estimate, or a fraction of the bbox width when the ray
        finds no filled spans
    """
    config = config or DEFAULT_DETECTION_CONFIG.scale
    fallback = bbox.width * config.stem_fallback_ratio

    y = (metrics.baseline + metrics.x_height) / 2
    widths = sorted(
        hi - lo for lo, hi in horizontal_spans(shape, y, bbox.min_x, overshoot) if hi > lo
    )
    if not widths:
        return fallback

    return widths[math.floor(len(widths) * config.stem_percentile)]


def compute_scale_primitives(
    bbox: BBox,
    metrics: FontMetrics,
    shape: FlattenedPath,
    config: ScaleConfig | None = None,
) -> ScalePrimitives:
    """Derive scale primitives for one glyph.

    Never raises: degenerate outlines produce zero-sized but usable
    primitives.

    Args:
        bbox: Glyph bounding box
        metrics: Font metrics
        shape: Flattened outline
        config: Scale configuration

    Returns:
        ScalePrimitives for the glyph
    """
    config = config or DEFAULT_DETECTION_CONFIG.scale
    bbox_w = max(bbox.width, 0.0)
    bbox_h = max(bbox.height, 0.0)

    eps = compute_eps(bbox, metrics.units_per_em, config)
    overshoot = config.overshoot_factor * max(bbox_w, bbox_h)

    try:
        stem_width = estimate_stem_width(shape, bbox, metrics, overshoot, config)
    except (ArithmeticError, ValueError):
        logger.debug("stem_width_fallback", exc_info=True)
        stem_width = bbox_w * config.stem_fallback_ratio

    return ScalePrimitives(
        eps=eps,
        bbox_w=bbox_w,
        bbox_h=bbox_h,
        stem_width=stem_width,
        overshoot=overshoot,
    )
