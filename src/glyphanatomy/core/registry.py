"""Detector registry and orchestration.

Maps each FeatureKind with a detector to its function and runs detectors
against a GeometryCache. A detector that raises never aborts a batch: the
failure is logged with its traceback and reported as an empty result.
Kinds without a detector (arc, beak, hook, ...) always return no instances.
"""

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

import structlog

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.core.detectors import (
    detect_aperture,
    detect_apex,
    detect_arm,
    detect_bowl,
    detect_counter,
    detect_crossbar,
    detect_crotch,
    detect_ear,
    detect_eye,
    detect_finial,
    detect_loop,
    detect_serif,
    detect_spine,
    detect_spur,
    detect_stem,
    detect_tail,
    detect_tittle,
    detect_vertex,
)
from glyphanatomy.domain import FeatureInstance, FeatureKind

logger = structlog.get_logger(__name__)

Detector = Callable[[GeometryCache, DetectionConfig], list[FeatureInstance]]

DETECTORS: dict[FeatureKind, Detector] = {
    FeatureKind.APEX: detect_apex,
    FeatureKind.APERTURE: detect_aperture,
    FeatureKind.ARM: detect_arm,
    FeatureKind.BOWL: detect_bowl,
    FeatureKind.COUNTER: detect_counter,
    FeatureKind.CROSSBAR: detect_crossbar,
    FeatureKind.CROTCH: detect_crotch,
    FeatureKind.EAR: detect_ear,
    FeatureKind.EYE: detect_eye,
    FeatureKind.FINIAL: detect_finial,
    FeatureKind.LOOP: detect_loop,
    FeatureKind.SERIF: detect_serif,
    FeatureKind.SPINE: detect_spine,
    FeatureKind.SPUR: detect_spur,
    FeatureKind.STEM: detect_stem,
    FeatureKind.TAIL: detect_tail,
    FeatureKind.TITTLE: detect_tittle,
    FeatureKind.VERTEX: detect_vertex,
}


@dataclass(frozen=True, slots=True)
class DetectionOutcome:
    """Result of running one detector.

    Attributes:
        feature: Feature that was detected
        instances: Detected instances; empty on failure
        error: Error message when the detector raised
        error_type: Exception class name when the detector raised
        duration_ms: Time spent in the detector
    """

    feature: FeatureKind
    instances: tuple[FeatureInstance, ...] = ()
    error: str | None = None
    error_type: str | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def found(self) -> bool:
        return bool(self.instances)


def run_detector(
    feature: FeatureKind,
    cache: GeometryCache,
    config: DetectionConfig | None = None,
) -> DetectionOutcome:
    """Run the detector for one feature, capturing any failure.

    Args:
        feature: Feature to detect
        cache: Geometry snapshot of the glyph
        config: Detection configuration

    Returns:
        DetectionOutcome; unregistered features yield an empty success
    """
    config = config or DEFAULT_DETECTION_CONFIG
    detector = DETECTORS.get(feature)
    if detector is None:
        return DetectionOutcome(feature)

    start_time = time.perf_counter()
    try:
        instances = tuple(detector(cache, config))
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.warning(
            "Detector failed",
            feature=feature.value,
            glyph=cache.glyph.name,
            glyph_id=cache.glyph.id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return DetectionOutcome(
            feature,
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=duration_ms,
        )

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(
        "Detector finished",
        feature=feature.value,
        glyph=cache.glyph.name,
        instances=len(instances),
        duration_ms=round(duration_ms, 2),
    )
    return DetectionOutcome(feature, instances=instances, duration_ms=duration_ms)


def detect_feature(
    feature: FeatureKind,
    cache: GeometryCache,
    config: DetectionConfig | None = None,
) -> list[FeatureInstance]:
    """Detect one feature; failures and unregistered features give ``[]``."""
    return list(run_detector(feature, cache, config).instances)


def detect_glyph_features(
    features: Iterable[FeatureKind],
    cache: GeometryCache,
    config: DetectionConfig | None = None,
) -> dict[FeatureKind, list[FeatureInstance]]:
    """Detect several features on one glyph.

    Every requested feature gets an entry, in request order, even when its
    detector fails or finds nothing.
    """
    return {feature: detect_feature(feature, cache, config) for feature in features}


def has_feature(
    feature: FeatureKind,
    cache: GeometryCache,
    config: DetectionConfig | None = None,
) -> bool:
    return bool(detect_feature(feature, cache, config))


def get_registered_features() -> list[FeatureKind]:
    return list(DETECTORS)


def is_feature_supported(feature: FeatureKind) -> bool:
    return feature in DETECTORS


def detect_all_features(
    cache: GeometryCache,
    config: DetectionConfig | None = None,
) -> dict[FeatureKind, list[FeatureInstance]]:
    """Run every registered detector on one glyph."""
    return detect_glyph_features(get_registered_features(), cache, config)


def filter_detected_features(
    results: Mapping[FeatureKind, list[FeatureInstance]],
) -> dict[FeatureKind, list[FeatureInstance]]:
    """Drop features that produced no instances."""
    return {feature: instances for feature, instances in results.items() if instances}


def get_best_instances(
    results: Mapping[FeatureKind, list[FeatureInstance]],
) -> dict[FeatureKind, FeatureInstance | None]:
    """Highest-confidence instance per feature, or None when none was found.

    Ties keep the instance reported first.
    """
    return {
        feature: max(instances, key=lambda i: i.confidence) if instances else None
        for feature, instances in results.items()
    }
