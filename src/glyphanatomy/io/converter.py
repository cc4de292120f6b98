"""Converters from fonttools outlines to domain models.

This module turns the drawing calls of a fonttools glyph into the path
commands the detection core consumes.
"""

from collections.abc import Sequence
from typing import Any

from fontTools.pens.basePen import decomposeQuadraticSegment
from fontTools.pens.boundsPen import BoundsPen
from fontTools.pens.recordingPen import RecordingPen
from fontTools.pens.reverseContourPen import ReverseContourPen

from glyphanatomy.domain import BBox, Glyph, PathCommand

Coordinate = tuple[float, float]


def fonttools_glyph_to_domain(
    name: str,
    fonttools_glyph: Any,
    glyph_set: Any,
    glyph_id: int,
    char: str | None = None,
    is_cff: bool = False,
) -> Glyph:
    """Convert a fonttools glyph to a domain Glyph.

    Handles both TrueType (quadratic curves) and OpenType/CFF (cubic curves).
    A RecordingPen captures the outline as drawing commands.

    Note: CFF fonts use the opposite winding convention (CCW=outer,
    CW=inner) from TrueType. CFF outlines are drawn through a
    ReverseContourPen so the core always sees clockwise outer contours.

    Args:
        name: Name of the glyph
        fonttools_glyph: Glyph object from a fonttools GlyphSet
        glyph_set: The GlyphSet, needed to resolve components
        glyph_id: Glyph index in the font
        char: Character mapped to the glyph, if any
        is_cff: Whether the outline comes from a CFF or CFF2 table

    Returns:
        Domain Glyph model
    """
    recording = RecordingPen()
    pen = ReverseContourPen(recording) if is_cff else recording
    fonttools_glyph.draw(pen)

    bounds_pen = BoundsPen(glyph_set)
    fonttools_glyph.draw(bounds_pen)

    commands = recording_to_commands(recording.value)
    if bounds_pen.bounds is None:
        bbox = BBox(0.0, 0.0, 0.0, 0.0)
    else:
        bbox = BBox(*(float(v) for v in bounds_pen.bounds))

    return Glyph(
        id=glyph_id,
        name=name,
        commands=tuple(commands),
        bbox=bbox,
        advance_width=float(getattr(fonttools_glyph, "width", 0) or 0),
        char=char,
    )


def recording_to_commands(
    recording: Sequence[tuple[str, tuple[Any, ...]]],
) -> list[PathCommand]:
    """Convert RecordingPen output to path commands.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), ..., (x, y)))  # Quadratic, implied on-curves
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ()) or ('endPath', ())

    Quadratic runs with several off-curve points are split at their implied
    on-curve points. A closed contour made only of off-curve points
    (``qCurveTo`` ending in None) starts at the midpoint of its last and
    first control points.

    Args:
        recording: List of drawing commands from RecordingPen

    Returns:
        List of PathCommand
    """
    commands: list[PathCommand] = []
    current: Coordinate | None = None

    for operator, args in recording:
        if operator == "moveTo":
            current = _xy(args[0])
            commands.append(PathCommand.move_to(*current))

        elif operator == "lineTo":
            current = _xy(args[0])
            commands.append(PathCommand.line_to(*current))

        elif operator == "qCurveTo":
            points = [_xy(p) for p in args if p is not None]
            if args[-1] is None:
                first, last = points[0], points[-1]
                start = ((first[0] + last[0]) / 2, (first[1] + last[1]) / 2)
                commands.append(PathCommand.move_to(*start))
                points.append(start)
            if len(points) == 1:
                commands.append(PathCommand.line_to(*points[0]))
                current = points[0]
                continue
            for control, end in decomposeQuadraticSegment(points):
                commands.append(PathCommand.quad_to(*control, *end))
            current = points[-1]

        elif operator == "curveTo":
            for i in range(0, len(args) - 2, 3):
                c1, c2, end = (_xy(p) for p in args[i : i + 3])
                commands.append(PathCommand.cubic_to(*c1, *c2, *end))
                current = end

        elif operator in ("closePath", "endPath"):
            if current is not None:
                commands.append(PathCommand.close())
            current = None

    return commands


def _xy(point: Sequence[float]) -> Coordinate:
    return (float(point[0]), float(point[1]))
