"""Feature kinds, overlay shapes and detection results.

Shapes form a closed tagged union. Each shape class is its own tag, so
consumers dispatch with ``match``::

    match instance.shape:
        case CircleShape(cx=cx, cy=cy, r=r):
            ...
        case PointShape(x=x, y=y):
            ...

All coordinates are in the glyph's untransformed design space.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

from glyphanatomy.domain.geometry import Point


class FeatureKind(str, Enum):
    """Closed set of typographic features known to the engine."""

    APEX = "apex"
    APERTURE = "aperture"
    ARC = "arc"
    ARM = "arm"
    BAR = "bar"
    BEAK = "beak"
    BOWL = "bowl"
    BRACKET = "bracket"
    COUNTER = "counter"
    CROSSBAR = "crossbar"
    CROSS_STROKE = "cross-stroke"
    CROTCH = "crotch"
    EAR = "ear"
    EYE = "eye"
    FINIAL = "finial"
    FOOT = "foot"
    HOOK = "hook"
    LEG = "leg"
    LINK = "link"
    LOOP = "loop"
    NECK = "neck"
    SERIF = "serif"
    SHOULDER = "shoulder"
    SPINE = "spine"
    SPUR = "spur"
    STEM = "stem"
    TAIL = "tail"
    TERMINAL = "terminal"
    TITTLE = "tittle"
    VERTEX = "vertex"

    @property
    def display_name(self) -> str:
        """Human readable name, e.g. "Cross stroke"."""
        return self.value.replace("-", " ").capitalize()

    @classmethod
    def from_name(cls, name: str) -> "FeatureKind":
        """Parse an id or display name ("Cross stroke", "cross_stroke").

        Raises:
            ValueError: If the name matches no feature
        """
        normalized = name.strip().lower().replace(" ", "-").replace("_", "-")
        return cls(normalized)


@dataclass(frozen=True, slots=True)
class PointShape:
    x: float
    y: float
    label: str | None = None


@dataclass(frozen=True, slots=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True, slots=True)
class RectShape:
    """Axis-aligned rectangle anchored at its bottom-left corner."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class CircleShape:
    cx: float
    cy: float
    r: float


@dataclass(frozen=True, slots=True)
class PolylineShape:
    points: tuple[Point, ...]
    closed: bool = False


@dataclass(frozen=True, slots=True)
class PathShape:
    """Raw SVG path data, for outlines that are not polylines."""

    d: str


FeatureShape: TypeAlias = (
    PointShape | LineShape | RectShape | CircleShape | PolylineShape | PathShape
)


def shape_center(shape: FeatureShape) -> Point:
    """Representative location of a shape.

    Args:
        shape: Any feature shape

    Returns:
        Center point (path shapes have no parsed geometry and map to origin)
    """
    match shape:
        case PointShape(x=x, y=y):
            return Point(x, y)
        case LineShape(x1=x1, y1=y1, x2=x2, y2=y2):
            return Point((x1 + x2) / 2, (y1 + y2) / 2)
        case RectShape(x=x, y=y, width=w, height=h):
            return Point(x + w / 2, y + h / 2)
        case CircleShape(cx=cx, cy=cy):
            return Point(cx, cy)
        case PolylineShape(points=points):
            if not points:
                return Point(0.0, 0.0)
            return Point(
                sum(p.x for p in points) / len(points),
                sum(p.y for p in points) / len(points),
            )
        case PathShape():
            return Point(0.0, 0.0)
    raise TypeError(f"Unknown shape type: {type(shape).__name__}")


def shape_to_dict(shape: FeatureShape) -> dict[str, Any]:
    """Serialize a shape with an explicit ``type`` tag."""
    match shape:
        case PointShape(x=x, y=y, label=label):
            data: dict[str, Any] = {"type": "point", "x": x, "y": y}
            if label:
                data["label"] = label
            return data
        case LineShape(x1=x1, y1=y1, x2=x2, y2=y2):
            return {"type": "line", "x1": x1, "y1": y1, "x2": x2, "y2": y2}
        case RectShape(x=x, y=y, width=w, height=h):
            return {"type": "rect", "x": x, "y": y, "w": w, "h": h}
        case CircleShape(cx=cx, cy=cy, r=r):
            return {"type": "circle", "cx": cx, "cy": cy, "r": r}
        case PolylineShape(points=points, closed=closed):
            return {
                "type": "polyline",
                "points": [p.to_dict() for p in points],
                "closed": closed,
            }
        case PathShape(d=d):
            return {"type": "path", "d": d}
    raise TypeError(f"Unknown shape type: {type(shape).__name__}")


@dataclass(frozen=True)
class FeatureInstance:
    """One detected occurrence of a feature.

    Attributes:
        id: Identifier unique within one detection call (e.g. "stem-0")
        shape: Overlay geometry in design units
        confidence: Heuristic confidence in [0, 1]
        anchors: Named key points (e.g. "tip", "left", "right")
        debug: Free-form diagnostic values
    """

    id: str
    shape: FeatureShape
    confidence: float
    anchors: Mapping[str, Point] = field(default_factory=dict)
    debug: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "shape": shape_to_dict(self.shape),
            "confidence": self.confidence,
            "anchors": {name: p.to_dict() for name, p in self.anchors.items()},
            "debug": dict(self.debug),
        }


@dataclass(frozen=True, slots=True)
class DetectionContext:
    """Font-level flags that tune detection.

    Attributes:
        is_serif: Font has serifs
        is_italic: Italic angle is beyond half a degree
        italic_angle: Italic angle in degrees
        is_mono: Font is monospaced
        weight: OS/2 weight class
        units_per_em: Design units per em
    """

    is_serif: bool = False
    is_italic: bool = False
    italic_angle: float = 0.0
    is_mono: bool = False
    weight: int = 400
    units_per_em: int = 1000
