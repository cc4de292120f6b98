"""Per-glyph geometry snapshots.

A GeometryCache bundles everything detectors need about one glyph at one
variation: the flattened outline, enriched segments, classified contours,
scale primitives and font-level context. Snapshots are immutable; when a
variation changes, a new snapshot replaces the old one in the store.
"""

from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from glyphanatomy.core.context import build_detection_context
from glyphanatomy.core.contours import classify_contours
from glyphanatomy.core.geometry import FlattenedPath, Subpath, flatten_subpaths
from glyphanatomy.core.scale import compute_eps, compute_scale_primitives
from glyphanatomy.core.segments import flatten_to_segments
from glyphanatomy.domain import (
    ContourClassification,
    DetectionContext,
    Font,
    FontMetrics,
    Glyph,
    PathCommand,
    ScalePrimitives,
    SegmentWithMeta,
)

logger = structlog.get_logger(__name__)

DEFAULT_VARIATION_KEY = "default"

CacheKey = tuple[int, str]


@dataclass(frozen=True)
class GeometryCache:
    """Immutable geometry snapshot for one glyph at one variation.

    Attributes:
        glyph: Source glyph
        font: Font the glyph belongs to
        metrics: Resolved font metrics
        shape: Flattened outline used for ray casting
        subpaths: Flattened sub-paths in drawing order
        segments: Tangent-enriched segments, one per command
        contours: Classified contours
        italic_angle: Italic angle in degrees
        variation_key: Normalized variation settings
        context: Font-level detection flags
        scale: Glyph-relative thresholds
    """

    glyph: Glyph
    font: Font
    metrics: FontMetrics
    shape: FlattenedPath
    subpaths: tuple[Subpath, ...]
    segments: tuple[SegmentWithMeta, ...]
    contours: tuple[ContourClassification, ...]
    italic_angle: float
    variation_key: str
    context: DetectionContext
    scale: ScalePrimitives

    @property
    def key(self) -> CacheKey:
        return (self.glyph.id, self.variation_key)

    def contour_commands(self, contour: ContourClassification) -> tuple[PathCommand, ...]:
        """Outline commands that draw one contour."""
        return self.glyph.commands[contour.start_index : contour.end_index + 1]


def variation_key(variation: Mapping[str, float] | None) -> str:
    """Normalize variation settings into a stable key.

    Examples:
        >>> variation_key({"wght": 700, "opsz": 14.0})
        'opsz:14.00,wght:700.00'
        >>> variation_key(None)
        'default'
    """
    if not variation:
        return DEFAULT_VARIATION_KEY
    return ",".join(f"{axis}:{float(value):.2f}" for axis, value in sorted(variation.items()))


def build_geometry_cache(
    glyph: Glyph,
    font: Font,
    variation: Mapping[str, float] | None = None,
    config: DetectionConfig | None = None,
    context: DetectionContext | None = None,
) -> GeometryCache:
    """Build the geometry snapshot for a glyph.

    Never raises for degenerate outlines: an empty glyph yields an empty
    shape and zero-sized scale primitives.

    Args:
        glyph: Glyph outline, already resolved for the variation
        font: Font with resolved metrics
        variation: Axis settings the glyph was resolved at
        config: Detection configuration
        context: Precomputed font context, built from the font when omitted

    Returns:
        GeometryCache for the glyph
    """
    config = config or DEFAULT_DETECTION_CONFIG
    metrics = font.metrics

    eps = compute_eps(glyph.bbox, metrics.units_per_em, config.scale)
    tolerance = eps * config.scale.flatten_tolerance
    if tolerance <= 0:
        tolerance = 1.0

    subpaths = tuple(flatten_subpaths(glyph.commands, tolerance))
    shape = FlattenedPath.from_subpaths(subpaths)
    if shape.is_empty():
        shape = FlattenedPath.empty()

    if context is None:
        context = build_detection_context(font, config)

    cache = GeometryCache(
        glyph=glyph,
        font=font,
        metrics=metrics,
        shape=shape,
        subpaths=subpaths,
        segments=tuple(flatten_to_segments(glyph.commands)),
        contours=tuple(classify_contours(subpaths, metrics, glyph.bbox, config.contour)),
        italic_angle=metrics.italic_angle,
        variation_key=variation_key(variation),
        context=context,
        scale=compute_scale_primitives(glyph.bbox, metrics, shape, config.scale),
    )

    logger.debug(
        "geometry_cache_built",
        glyph=glyph.name,
        variation=cache.variation_key,
        contours=len(cache.contours),
        stem_width=cache.scale.stem_width,
    )
    return cache


class GeometryCacheStore:
    """Explicit store of geometry snapshots keyed by (glyph id, variation).

    Entries are written once per key and only replaced by invalidation.
    The font context is computed once and reused for every glyph.

    Example:
        >>> store = GeometryCacheStore()
        >>> cache = store.get_or_build(glyph, font)  # doctest: +SKIP
        >>> store.invalidate(glyph.id)  # doctest: +SKIP
    """

    def __init__(self, config: DetectionConfig | None = None) -> None:
        self.config = config or DEFAULT_DETECTION_CONFIG
        self._entries: dict[CacheKey, GeometryCache] = {}
        self._context: tuple[Font, DetectionContext] | None = None
        self.hits = 0
        self.misses = 0

    def get_or_build(
        self,
        glyph: Glyph,
        font: Font,
        variation: Mapping[str, float] | None = None,
    ) -> GeometryCache:
        """Return the cached snapshot, building it on first request."""
        key = (glyph.id, variation_key(variation))
        cached = self._entries.get(key)
        if cached is not None and cached.glyph == glyph and cached.font is font:
            self.hits += 1
            return cached

        self.misses += 1
        cache = build_geometry_cache(
            glyph,
            font,
            variation,
            self.config,
            context=self._context_for(font),
        )
        self._entries[key] = cache
        return cache

    def get(
        self,
        glyph_id: int,
        variation: Mapping[str, float] | None = None,
    ) -> GeometryCache | None:
        return self._entries.get((glyph_id, variation_key(variation)))

    def invalidate(self, glyph_id: int) -> int:
        """Drop every variation of a glyph.

        Returns:
            Number of entries removed
        """
        stale = [key for key in self._entries if key[0] == glyph_id]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
        self._context = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _context_for(self, font: Font) -> DetectionContext:
        if self._context is None or self._context[0] is not font:
            self._context = (font, build_detection_context(font, self.config))
        return self._context[1]
