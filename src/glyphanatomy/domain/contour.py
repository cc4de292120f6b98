"""Derived outline structure: classified contours and enriched segments.

This module defines:
- ContourType: Enum for base / mark / hole contours
- ContourClassification: One classified sub-path
- SegmentKind: Enum for flattened segment types
- SegmentWithMeta: A path segment with unit tangent and normal
"""

from dataclasses import dataclass
from enum import Enum

from glyphanatomy.domain.geometry import BBox, Point


class ContourType(Enum):
    """Role of a contour within a glyph.

    - BASE: Main body of the letterform (clockwise)
    - MARK: Small detached shape above x-height or below the baseline
      (dots, accents)
    - HOLE: Counter-clockwise contour cutting a counter out of a base
    """

    BASE = "base"
    MARK = "mark"
    HOLE = "hole"


@dataclass(frozen=True, slots=True)
class ContourClassification:
    """A classified contour.

    Attributes:
        index: Position of the contour among the glyph's sub-paths
        type: Contour role
        bbox: Bounding box of the contour's points
        area: Absolute shoelace area
        winding: 1 for clockwise, -1 for counter-clockwise
        start_index: Index of the first command of the sub-path
        end_index: Index of the last command of the sub-path
    """

    index: int
    type: ContourType
    bbox: BBox
    area: float
    winding: int
    start_index: int
    end_index: int

    @property
    def is_hole(self) -> bool:
        return self.type is ContourType.HOLE


class SegmentKind(Enum):
    """Segment types produced by flattening an outline."""

    MOVE = "M"
    LINE = "L"
    QUADRATIC = "Q"
    CUBIC = "C"
    CLOSE = "Z"


@dataclass(frozen=True, slots=True)
class SegmentWithMeta:
    """A path segment enriched with direction data.

    Attributes:
        kind: Segment type
        params: Start point followed by control points and end point
            (2 points for lines, 3 for quadratics, 4 for cubics)
        tangent: Unit tangent at the start, None for move/close
        normal: Unit normal (tangent rotated clockwise), None for move/close
        direction: Sign of the tangent's x component (1 when vertical)
    """

    kind: SegmentKind
    params: tuple[Point, ...]
    tangent: Point | None = None
    normal: Point | None = None
    direction: int = 1

    @property
    def start(self) -> Point:
        return self.params[0]

    @property
    def end(self) -> Point:
        return self.params[-1]

    @property
    def is_curve(self) -> bool:
        return self.kind in (SegmentKind.QUADRATIC, SegmentKind.CUBIC)
