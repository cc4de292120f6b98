"""Core geometric value types.

This module defines the small immutable value types shared by every layer:
- Point: A 2D point in font design units
- BBox: An axis-aligned bounding box
- ScalePrimitives: Glyph-relative thresholds derived once per glyph
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D design space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        """True when both coordinates are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass(frozen=True, slots=True)
class BBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Left edge
        min_y: Bottom edge
        max_x: Right edge
        max_y: Top edge
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def is_empty(self) -> bool:
        """True when the box has no area."""
        return self.width <= 0 or self.height <= 0

    def contains(self, point: Point) -> bool:
        """Inclusive containment test."""
        return (
            self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BBox":
        """Bounding box of a point collection.

        Args:
            points: Points to enclose

        Returns:
            BBox of the points, or a zero box at the origin when empty
        """
        pts = list(points)
        if not pts:
            return cls(0.0, 0.0, 0.0, 0.0)

        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True, slots=True)
class ScalePrimitives:
    """Glyph-relative thresholds used instead of absolute font units.

    Every detector threshold is expressed as a multiple of one of these
    values so detection behaves the same at any units-per-em.

    Attributes:
        eps: Numeric tolerance scaled to the glyph
        bbox_w: Glyph bounding box width
        bbox_h: Glyph bounding box height
        stem_width: Estimated typical stroke width
        overshoot: Ray length guaranteed to cross the whole glyph
    """

    eps: float
    bbox_w: float
    bbox_h: float
    stem_width: float
    overshoot: float
