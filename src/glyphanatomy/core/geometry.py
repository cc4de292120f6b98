"""Geometric primitives for outline analysis.

This module provides the core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (ray casting algorithm)
- Bezier curve flattening
- Outline flattening into closed polylines
- Ray casting against a flattened outline
- SVG path serialization of outline commands

All functions are pure and stateless. Ray casting never raises: degenerate
input yields an empty hit list.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from glyphanatomy.core._bezier import flatten_cubic as _flatten_cubic
from glyphanatomy.core._bezier import flatten_quadratic as _flatten_quadratic
from glyphanatomy.domain import CommandKind, PathCommand, Point

Edge = tuple[float, float, float, float]


def signed_area(points: Sequence[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction (y-up):
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: Points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> p1 = Point(0.0, 0.0)
        >>> p2 = Point(1.0, 0.0)
        >>> p3 = Point(1.0, 1.0)
        >>> p4 = Point(0.0, 1.0)
        >>> signed_area([p1, p2, p3, p4])  # CCW square
        1.0
        >>> signed_area([p1, p4, p3, p2])  # CW square
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts
    intersections with polygon edges. Odd count means inside.

    Args:
        point: Point to test
        polygon: Points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if ((yi > point.y) != (yj > point.y)) and (
            point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi
        ):
            inside = not inside

        j = i

    return inside


def bezier_flatten(points: Sequence[Point], tolerance: float = 1.0) -> list[Point]:
    """Convert a Bezier curve to line segments.

    Args:
        points: Control points, 3 for quadratic or 4 for cubic
        tolerance: Maximum distance between curve and approximation

    Returns:
        Points approximating the curve, endpoints included

    Raises:
        ValueError: If the number of control points is not 3 or 4
    """
    if len(points) == 3:
        return _flatten_quadratic(list(points), tolerance)
    if len(points) == 4:
        return _flatten_cubic(list(points), tolerance)
    raise ValueError(f"Expected 3 or 4 control points, got {len(points)}")


@dataclass(frozen=True, slots=True)
class Subpath:
    """One sub-path of an outline, flattened to a polyline.

    Attributes:
        start_index: Index of the moveTo (or first) command
        end_index: Index of the last command belonging to the sub-path
        points: Flattened points, without the closing duplicate
        raw_points: All command points, control points included
    """

    start_index: int
    end_index: int
    points: tuple[Point, ...]
    raw_points: tuple[Point, ...]


def flatten_subpaths(commands: Sequence[PathCommand], tolerance: float) -> list[Subpath]:
    """Split outline commands into flattened sub-paths.

    A sub-path ends at closePath, at the next moveTo, or at the end of the
    command list. Open sub-paths are treated as implicitly closed.

    Args:
        commands: Outline commands
        tolerance: Curve flattening tolerance

    Returns:
        Flattened sub-paths in drawing order
    """
    subpaths: list[Subpath] = []
    points: list[Point] = []
    raw: list[Point] = []
    start_index = 0
    current: Point | None = None

    def finish(end_index: int) -> None:
        if points:
            pts = list(points)
            if len(pts) > 1 and pts[0] == pts[-1]:
                pts.pop()
            subpaths.append(Subpath(start_index, end_index, tuple(pts), tuple(raw)))
        points.clear()
        raw.clear()

    for index, cmd in enumerate(commands):
        if cmd.kind is CommandKind.MOVE_TO:
            finish(index - 1)
            start_index = index
            current = cmd.points[0]
            points.append(current)
            raw.append(current)
        elif cmd.kind is CommandKind.CLOSE_PATH:
            finish(index)
            start_index = index + 1
        else:
            if not points:
                start_index = index
                # Drawing without a moveTo starts at the previous pen position
                start = current if current is not None else cmd.points[0]
                points.append(start)
                raw.append(start)
            start = points[-1]
            raw.extend(cmd.points)
            if cmd.kind is CommandKind.LINE_TO:
                points.append(cmd.points[0])
            else:
                points.extend(bezier_flatten([start, *cmd.points], tolerance)[1:])
            current = cmd.points[-1]

    finish(len(commands) - 1)
    return subpaths


@dataclass(frozen=True, slots=True)
class FlattenedPath:
    """An outline flattened to closed polylines for ray casting.

    Attributes:
        rings: Closed polylines, one per sub-path
        edges: All ring edges as (x0, y0, x1, y1)
    """

    rings: tuple[tuple[Point, ...], ...]
    edges: tuple[Edge, ...]

    @classmethod
    def from_subpaths(cls, subpaths: Sequence[Subpath]) -> "FlattenedPath":
        rings = tuple(sp.points for sp in subpaths if len(sp.points) >= 2)
        edges: list[Edge] = []
        for ring in rings:
            n = len(ring)
            for i in range(n):
                a = ring[i]
                b = ring[(i + 1) % n]
                if a != b:
                    edges.append((a.x, a.y, b.x, b.y))
        return cls(rings=rings, edges=tuple(edges))

    @classmethod
    def empty(cls) -> "FlattenedPath":
        """Minimal valid shape for glyphs without drawable outlines."""
        return cls(rings=(), edges=())

    def is_empty(self) -> bool:
        return not self.edges


def flatten_outline(commands: Sequence[PathCommand], tolerance: float) -> FlattenedPath:
    """Flatten outline commands into a ray-castable shape."""
    return FlattenedPath.from_subpaths(flatten_subpaths(commands, tolerance))


def ray_hits(
    shape: FlattenedPath,
    origin: Point,
    angle: float,
    max_length: float,
) -> list[Point]:
    """Cast a ray against an outline and return the crossing points.

    The ray is expressed in its own frame (u along the ray, v across it).
    An edge crosses the ray when its endpoints fall on opposite sides using
    the half-open test ``(v0 > 0) != (v1 > 0)``, so a ray through a shared
    vertex is counted once and consecutive hits pair up as filled spans
    under the even-odd rule.

    Args:
        shape: Flattened outline
        origin: Ray origin
        angle: Direction in radians (0 points right, pi/2 points up)
        max_length: Ray length

    Returns:
        Hit points sorted by distance from the origin, limited to
        [0, max_length]. Empty for NaN input, non-positive length or no hits.

    Examples:
        >>> square = flatten_outline(
        ...     [PathCommand.move_to(0, 0), PathCommand.line_to(0, 10),
        ...      PathCommand.line_to(10, 10), PathCommand.line_to(10, 0),
        ...      PathCommand.close()], 1.0)
        >>> [p.x for p in ray_hits(square, Point(-5, 5), 0.0, 30)]
        [0.0, 10.0]
    """
    if not (math.isfinite(max_length) and max_length > 0):
        return []
    if not (origin.is_finite() and math.isfinite(angle)):
        return []

    dx = math.cos(angle)
    dy = math.sin(angle)
    ox, oy = origin.x, origin.y
    hits: list[tuple[float, Point]] = []

    for x0, y0, x1, y1 in shape.edges:
        v0 = (y0 - oy) * dx - (x0 - ox) * dy
        v1 = (y1 - oy) * dx - (x1 - ox) * dy
        if (v0 > 0) == (v1 > 0):
            continue

        s = v0 / (v0 - v1)
        hx = x0 + s * (x1 - x0)
        hy = y0 + s * (y1 - y0)
        t = (hx - ox) * dx + (hy - oy) * dy
        if 0.0 <= t <= max_length:
            hits.append((t, Point(hx, hy)))

    hits.sort(key=lambda hit: hit[0])
    return [point for _, point in hits]


def is_inside(shape: FlattenedPath, point: Point) -> bool:
    """Even-odd fill test for a point against a flattened outline.

    Args:
        shape: Flattened outline
        point: Point to test

    Returns:
        True if the point lies in the filled region
    """
    if not point.is_finite():
        return False

    inside = False
    px, py = point.x, point.y
    for x0, y0, x1, y1 in shape.edges:
        if (y0 > py) != (y1 > py) and px < (x1 - x0) * (py - y0) / (y1 - y0) + x0:
            inside = not inside
    return inside


def to_svg_path(commands: Sequence[PathCommand]) -> str:
    """Serialize outline commands as SVG path data.

    Args:
        commands: Outline commands

    Returns:
        Path data string such as "M0 0L0 100Z"
    """
    letters = {
        CommandKind.MOVE_TO: "M",
        CommandKind.LINE_TO: "L",
        CommandKind.QUAD_TO: "Q",
        CommandKind.CUBIC_TO: "C",
        CommandKind.CLOSE_PATH: "Z",
    }
    parts = []
    for cmd in commands:
        coords = " ".join(f"{_fmt(p.x)} {_fmt(p.y)}" for p in cmd.points)
        parts.append(f"{letters[cmd.kind]}{coords}")
    return "".join(parts)


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
