"""Adaptive subdivision and derivatives for Bezier segments.

Helpers behind geometry.bezier_flatten and the curvature analyzer; callers
outside the core should use those instead.
"""

import math

from glyphanatomy.domain import Point

# Subdivision stops here even if the tolerance is not met (NaN input, zero tolerance)
MAX_DEPTH = 16


def _mid(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def flatten_quadratic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Split a quadratic segment in halves until each half is flat.

    Args:
        points: Start, control and end point
        tolerance: Allowed gap between the curve and its chord at t=0.5
        depth: Subdivision level of this call

    Returns:
        Polyline from start to end, both included
    """
    p0, p1, p2 = points
    mid = Point(0.25 * p0.x + 0.5 * p1.x + 0.25 * p2.x, 0.25 * p0.y + 0.5 * p1.y + 0.25 * p2.y)

    if mid.distance_to(_mid(p0, p2)) <= tolerance or depth >= MAX_DEPTH:
        return [p0, p2]

    left = flatten_quadratic([p0, _mid(p0, p1), mid], tolerance, depth + 1)
    right = flatten_quadratic([mid, _mid(p1, p2), p2], tolerance, depth + 1)
    # Both halves contain the split point
    return left[:-1] + right


def flatten_cubic(points: list[Point], tolerance: float, depth: int = 0) -> list[Point]:
    """Split a cubic segment with de Casteljau until each piece is flat.

    Args:
        points: Start, two controls and end point
        tolerance: Allowed gap between the curve and its chord
        depth: Subdivision level of this call

    Returns:
        Polyline from start to end, both included
    """
    p0, p1, p2, p3 = points
    q1, q2, q3 = _mid(p0, p1), _mid(p1, p2), _mid(p2, p3)
    r1, r2 = _mid(q1, q2), _mid(q2, q3)
    mid = _mid(r1, r2)

    # A curve can bulge back onto its chord midpoint (S shapes), so only
    # accept flatness once the control points are close to the chord too
    flat = (
        mid.distance_to(_mid(p0, p3)) <= tolerance
        and _control_deviation(p0, p1, p2, p3) <= tolerance * 4
    )
    if flat or depth >= MAX_DEPTH:
        return [p0, p3]

    left = flatten_cubic([p0, q1, r1, mid], tolerance, depth + 1)
    right = flatten_cubic([mid, r2, q3, p3], tolerance, depth + 1)
    return left[:-1] + right


def _control_deviation(p0: Point, p1: Point, p2: Point, p3: Point) -> float:
    """Largest distance of the inner control points from the chord p0-p3."""
    dx = p3.x - p0.x
    dy = p3.y - p0.y
    length = math.hypot(dx, dy)
    if length == 0:
        return max(p0.distance_to(p1), p0.distance_to(p2))

    d1 = abs((p1.x - p0.x) * dy - (p1.y - p0.y) * dx) / length
    d2 = abs((p2.x - p0.x) * dy - (p2.y - p0.y) * dx) / length
    return max(d1, d2)


def quadratic_derivatives(
    points: list[Point], t: float
) -> tuple[tuple[float, float], tuple[float, float]]:
    """First and second derivatives of a quadratic Bezier at ``t``.

    Returns:
        ((dx, dy), (ddx, ddy))
    """
    p0, p1, p2 = points
    mt = 1 - t
    dx = 2 * mt * (p1.x - p0.x) + 2 * t * (p2.x - p1.x)
    dy = 2 * mt * (p1.y - p0.y) + 2 * t * (p2.y - p1.y)
    ddx = 2 * (p2.x - 2 * p1.x + p0.x)
    ddy = 2 * (p2.y - 2 * p1.y + p0.y)
    return (dx, dy), (ddx, ddy)


def cubic_derivatives(
    points: list[Point], t: float
) -> tuple[tuple[float, float], tuple[float, float]]:
    """First and second derivatives of a cubic Bezier at ``t``.

    Returns:
        ((dx, dy), (ddx, ddy))
    """
    p0, p1, p2, p3 = points
    mt = 1 - t
    dx = 3 * mt * mt * (p1.x - p0.x) + 6 * mt * t * (p2.x - p1.x) + 3 * t * t * (p3.x - p2.x)
    dy = 3 * mt * mt * (p1.y - p0.y) + 6 * mt * t * (p2.y - p1.y) + 3 * t * t * (p3.y - p2.y)
    ddx = 6 * mt * (p2.x - 2 * p1.x + p0.x) + 6 * t * (p3.x - 2 * p2.x + p1.x)
    ddy = 6 * mt * (p2.y - 2 * p1.y + p0.y) + 6 * t * (p3.y - 2 * p2.y + p1.y)
    return (dx, dy), (ddx, ddy)
