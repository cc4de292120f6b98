"""Domain models for glyphanatomy.

This module contains the value types exchanged between the font-parsing
collaborator, the detection core and the rendering collaborator. All models
are immutable frozen dataclasses and independent of fonttools.

Key classes:
- Point, BBox: Basic geometry
- PathCommand, Glyph, FontMetrics, Font: Detection inputs
- ScalePrimitives: Glyph-relative thresholds
- ContourClassification, SegmentWithMeta: Derived outline structure
- FeatureKind, FeatureInstance: Detection outputs
- PointShape, LineShape, RectShape, CircleShape, PolylineShape, PathShape:
  Overlay shape union
"""

from glyphanatomy.domain.contour import (
    ContourClassification,
    ContourType,
    SegmentKind,
    SegmentWithMeta,
)
from glyphanatomy.domain.feature import (
    CircleShape,
    DetectionContext,
    FeatureInstance,
    FeatureKind,
    FeatureShape,
    LineShape,
    PathShape,
    PointShape,
    PolylineShape,
    RectShape,
    shape_center,
    shape_to_dict,
)
from glyphanatomy.domain.geometry import BBox, Point, ScalePrimitives
from glyphanatomy.domain.glyph import CommandKind, Font, FontMetrics, Glyph, PathCommand

__all__: list[str] = [
    # Enums
    "CommandKind",
    "ContourType",
    "FeatureKind",
    "SegmentKind",
    # Geometry
    "BBox",
    "Point",
    "ScalePrimitives",
    # Inputs
    "Font",
    "FontMetrics",
    "Glyph",
    "PathCommand",
    # Derived structure
    "ContourClassification",
    "DetectionContext",
    "SegmentWithMeta",
    # Outputs
    "CircleShape",
    "FeatureInstance",
    "FeatureShape",
    "LineShape",
    "PathShape",
    "PointShape",
    "PolylineShape",
    "RectShape",
    "shape_center",
    "shape_to_dict",
]
