"""Interactive detection session.

An inspection UI asks for the same glyph and feature set many times while
the user hovers or redraws. AnatomySession remembers the last request and
returns the previous results when nothing relevant has changed, and keeps a
GeometryCacheStore so geometry is built once per glyph and variation.
"""

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

import structlog

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from glyphanatomy.core.cache import GeometryCacheStore, variation_key
from glyphanatomy.core.registry import get_registered_features, run_detector
from glyphanatomy.domain import FeatureInstance, FeatureKind, Font, Glyph
from glyphanatomy.utils import DetectionLogger

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _RequestKey:
    glyph_id: int
    font_index: int
    variation: str
    features: frozenset[FeatureKind]


class AnatomySession:
    """Runs detection batches with a last-request guard.

    Example:
        >>> session = AnatomySession()
        >>> results = session.detect(glyph, font)  # doctest: +SKIP
        >>> session.detect(glyph, font) == results  # doctest: +SKIP
        True
    """

    def __init__(
        self,
        config: DetectionConfig | None = None,
        store: GeometryCacheStore | None = None,
        detection_logger: DetectionLogger | None = None,
    ) -> None:
        self.config = config or DEFAULT_DETECTION_CONFIG
        self.store = store or GeometryCacheStore(self.config)
        self.detection_logger = detection_logger
        self._last_key: _RequestKey | None = None
        self._last_results: dict[FeatureKind, list[FeatureInstance]] | None = None

    def detect(
        self,
        glyph: Glyph,
        font: Font,
        font_index: int = 0,
        features: Iterable[FeatureKind] | None = None,
        variation: Mapping[str, float] | None = None,
    ) -> dict[FeatureKind, list[FeatureInstance]]:
        """Detect features on a glyph, reusing the previous batch when unchanged.

        Args:
            glyph: Glyph to inspect
            font: Font the glyph belongs to
            font_index: Caller's identifier for the font (e.g. position in a list)
            features: Features to detect; all registered features when None
            variation: Variable-font axis location the glyph was resolved at

        Returns:
            Mapping of each requested feature to its instances
        """
        requested = list(features) if features is not None else get_registered_features()
        key = _RequestKey(glyph.id, font_index, variation_key(variation), frozenset(requested))
        if key == self._last_key and self._last_results is not None:
            logger.debug("Reusing previous detection", glyph=glyph.name, font_index=font_index)
            return _copy_results(self._last_results)

        start_time = time.perf_counter()
        if self.detection_logger:
            self.detection_logger.log_glyph_start(glyph.name)

        cache = self.store.get_or_build(glyph, font, variation)
        results: dict[FeatureKind, list[FeatureInstance]] = {}
        for feature in requested:
            outcome = run_detector(feature, cache, self.config)
            results[feature] = list(outcome.instances)
            if not outcome.ok and self.detection_logger:
                self.detection_logger.log_detector_failure(
                    glyph.name,
                    feature.value,
                    outcome.error or "",
                    outcome.error_type,
                )

        if self.detection_logger:
            self.detection_logger.log_glyph_complete(
                glyph.name,
                sum(len(instances) for instances in results.values()),
                (time.perf_counter() - start_time) * 1000,
            )
            self.detection_logger.log_cache_usage(self.store.hits, self.store.misses)

        self._last_key = key
        self._last_results = results
        return _copy_results(results)

    def reset(self) -> None:
        """Forget the previous request and all cached geometry."""
        self._last_key = None
        self._last_results = None
        self.store.clear()


def _copy_results(
    results: dict[FeatureKind, list[FeatureInstance]],
) -> dict[FeatureKind, list[FeatureInstance]]:
    # Callers may filter the lists in place; the cached batch stays intact.
    return {feature: list(instances) for feature, instances in results.items()}
