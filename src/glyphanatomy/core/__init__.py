"""Core detection algorithms for glyphanatomy.

This module contains the detection engine:

- Geometry operations (flattening, signed area, ray casting, spans)
- Outline analysis (contour classification, segment tangents, curvature)
- Feature detectors (one pure function per anatomical feature)
- Orchestration (registry, geometry cache store, interactive session)

Detectors and geometry helpers are pure functions of an immutable
GeometryCache. The only state lives in GeometryCacheStore and
AnatomySession.

Key functions:
- build_geometry_cache: Build the per-glyph snapshot detectors read
- detect_feature: Run one detector, folding failures into an empty result
- detect_glyph_features: Run several detectors on one glyph
- get_feature_hints: Features worth offering for a character

Key classes:
- GeometryCache: Immutable per-glyph geometry snapshot
- GeometryCacheStore: Snapshot store keyed by glyph and variation
- AnatomySession: Detection batches with a last-request guard
- DetectionOutcome: Result of one detector run, including failures
"""

from glyphanatomy.core.cache import (
    GeometryCache,
    GeometryCacheStore,
    build_geometry_cache,
    variation_key,
)
from glyphanatomy.core.context import build_detection_context
from glyphanatomy.core.hints import (
    FeatureHint,
    get_all_features,
    get_default_features,
    get_feature_hints,
    is_feature_hinted,
)
from glyphanatomy.core.registry import (
    DETECTORS,
    DetectionOutcome,
    detect_all_features,
    detect_feature,
    detect_glyph_features,
    filter_detected_features,
    get_best_instances,
    get_registered_features,
    has_feature,
    is_feature_supported,
    run_detector,
)
from glyphanatomy.core.session import AnatomySession

__all__ = [
    # Registry
    "DETECTORS",
    # Session and cache classes
    "AnatomySession",
    "DetectionOutcome",
    "FeatureHint",
    "GeometryCache",
    "GeometryCacheStore",
    # Functions
    "build_detection_context",
    "build_geometry_cache",
    "detect_all_features",
    "detect_feature",
    "detect_glyph_features",
    "filter_detected_features",
    "get_all_features",
    "get_best_instances",
    "get_default_features",
    "get_feature_hints",
    "get_registered_features",
    "has_feature",
    "is_feature_hinted",
    "is_feature_supported",
    "run_detector",
    "variation_key",
]
