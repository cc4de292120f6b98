"""Tangent-enriched outline segments.

Converts outline commands into one SegmentWithMeta per command, carrying
the start point, control points and end point together with a unit tangent,
its clockwise normal and the horizontal direction of travel.
"""

import math
from collections.abc import Sequence

from glyphanatomy.core._bezier import cubic_derivatives, quadratic_derivatives
from glyphanatomy.domain import CommandKind, PathCommand, Point, SegmentKind, SegmentWithMeta

_KINDS = {
    CommandKind.MOVE_TO: SegmentKind.MOVE,
    CommandKind.LINE_TO: SegmentKind.LINE,
    CommandKind.QUAD_TO: SegmentKind.QUADRATIC,
    CommandKind.CUBIC_TO: SegmentKind.CUBIC,
    CommandKind.CLOSE_PATH: SegmentKind.CLOSE,
}


def flatten_to_segments(commands: Sequence[PathCommand]) -> list[SegmentWithMeta]:
    """Build enriched segments for a glyph outline.

    Drawing commands issued before any moveTo have no start point and are
    kept without direction data.

    Args:
        commands: Outline commands

    Returns:
        Segments in command order
    """
    segments: list[SegmentWithMeta] = []
    current: Point | None = None
    subpath_start: Point | None = None

    for cmd in commands:
        kind = _KINDS[cmd.kind]

        match cmd.kind:
            case CommandKind.MOVE_TO:
                current = subpath_start = cmd.points[0]
                segments.append(SegmentWithMeta(kind, (current,)))
            case CommandKind.CLOSE_PATH:
                params = (current,) if current is not None else ()
                segments.append(SegmentWithMeta(kind, params))
                current = subpath_start
            case _:
                if current is None:
                    segments.append(SegmentWithMeta(kind, cmd.points))
                else:
                    params = (current, *cmd.points)
                    tangent = _start_tangent(kind, params)
                    segments.append(_enrich(kind, params, tangent))
                current = cmd.points[-1]

    return segments


def _start_tangent(kind: SegmentKind, params: tuple[Point, ...]) -> tuple[float, float]:
    start, end = params[0], params[-1]
    chord = (end.x - start.x, end.y - start.y)

    if kind is SegmentKind.QUADRATIC:
        (dx, dy), _ = quadratic_derivatives(list(params), 0.0)
    elif kind is SegmentKind.CUBIC:
        (sx, sy), _ = cubic_derivatives(list(params), 0.0)
        (mx, my), _ = cubic_derivatives(list(params), 0.5)
        # Strongly bent cubics are better described by their midpoint
        if sx * sx + sy * sy > 2 * (mx * mx + my * my):
            dx, dy = mx, my
        else:
            dx, dy = sx, sy
    else:
        dx, dy = chord

    # Coincident control points give a zero derivative at the start
    if dx == 0 and dy == 0:
        dx, dy = chord
    return dx, dy


def _enrich(
    kind: SegmentKind,
    params: tuple[Point, ...],
    tangent: tuple[float, float],
) -> SegmentWithMeta:
    tx, ty = tangent
    length = math.hypot(tx, ty) or 1.0
    tx, ty = tx / length, ty / length

    direction = 1 if tx == 0 else int(math.copysign(1, tx))
    return SegmentWithMeta(
        kind=kind,
        params=params,
        tangent=Point(tx, ty),
        normal=Point(ty, -tx),
        direction=direction,
    )
