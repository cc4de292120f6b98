"""Glyph and font input models.

These are the read-only inputs handed to the detection core by a
font-parsing collaborator (see ``glyphanatomy.io``). Outlines are expressed
as ordered path commands in font design units with y pointing up.

Winding convention: outer contours run clockwise and holes run
counter-clockwise (the TrueType convention). CFF outlines are reversed by
the reader so that both formats arrive the same way.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from glyphanatomy.domain.geometry import BBox, Point
from glyphanatomy.exceptions import InvalidPathError


class CommandKind(Enum):
    """Outline drawing command."""

    MOVE_TO = "moveTo"
    LINE_TO = "lineTo"
    QUAD_TO = "quadraticCurveTo"
    CUBIC_TO = "bezierCurveTo"
    CLOSE_PATH = "closePath"


_POINT_COUNTS: dict[CommandKind, int] = {
    CommandKind.MOVE_TO: 1,
    CommandKind.LINE_TO: 1,
    CommandKind.QUAD_TO: 2,
    CommandKind.CUBIC_TO: 3,
    CommandKind.CLOSE_PATH: 0,
}


@dataclass(frozen=True, slots=True)
class PathCommand:
    """One outline command.

    Attributes:
        kind: Command type
        points: Control points followed by the end point. One point for
            move/line, two for quadratic, three for cubic, none for close.
    """

    kind: CommandKind
    points: tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        expected = _POINT_COUNTS[self.kind]
        if len(self.points) != expected:
            raise InvalidPathError(self.kind.value, expected, len(self.points))

    @property
    def end(self) -> Point | None:
        """End point of the command, None for close."""
        return self.points[-1] if self.points else None

    @classmethod
    def move_to(cls, x: float, y: float) -> "PathCommand":
        return cls(CommandKind.MOVE_TO, (Point(x, y),))

    @classmethod
    def line_to(cls, x: float, y: float) -> "PathCommand":
        return cls(CommandKind.LINE_TO, (Point(x, y),))

    @classmethod
    def quad_to(cls, x1: float, y1: float, x: float, y: float) -> "PathCommand":
        return cls(CommandKind.QUAD_TO, (Point(x1, y1), Point(x, y)))

    @classmethod
    def cubic_to(
        cls,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        x: float,
        y: float,
    ) -> "PathCommand":
        return cls(CommandKind.CUBIC_TO, (Point(x1, y1), Point(x2, y2), Point(x, y)))

    @classmethod
    def close(cls) -> "PathCommand":
        return cls(CommandKind.CLOSE_PATH)


@dataclass(frozen=True, slots=True)
class Glyph:
    """A single glyph outline.

    Attributes:
        id: Glyph index in the font
        name: Glyph name (e.g., "a", "uni0131")
        commands: Ordered outline commands
        bbox: Bounding box in design units
        advance_width: Horizontal advance in design units
        char: Character the glyph is mapped to, if any
    """

    id: int
    name: str
    commands: tuple[PathCommand, ...]
    bbox: BBox
    advance_width: float = 0.0
    char: str | None = None

    def is_empty(self) -> bool:
        """Check whether the glyph draws nothing."""
        return not any(cmd.kind is not CommandKind.CLOSE_PATH for cmd in self.commands)

    @classmethod
    def from_commands(
        cls,
        commands: Iterable[PathCommand],
        glyph_id: int = 0,
        name: str = "",
        advance_width: float | None = None,
        char: str | None = None,
    ) -> "Glyph":
        """Build a glyph whose bbox is taken from all command points.

        Control points are included, so the box is exact for polygonal
        outlines and slightly loose for curves.
        """
        cmds = tuple(commands)
        bbox = BBox.from_points(p for cmd in cmds for p in cmd.points)
        return cls(
            id=glyph_id,
            name=name or (char or ""),
            commands=cmds,
            bbox=bbox,
            advance_width=bbox.max_x if advance_width is None else advance_width,
            char=char,
        )


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Vertical metrics resolved for one font (and variation).

    Attributes:
        units_per_em: Design units per em
        ascent: Typographic ascender
        descent: Typographic descender (negative below baseline)
        cap_height: Height of flat capitals
        x_height: Height of flat lowercase letters
        italic_angle: Italic angle in degrees (negative leans right)
        baseline: Baseline position, normally 0
    """

    units_per_em: int
    ascent: float
    descent: float
    cap_height: float
    x_height: float
    italic_angle: float = 0.0
    baseline: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "units_per_em": self.units_per_em,
            "ascent": self.ascent,
            "descent": self.descent,
            "cap_height": self.cap_height,
            "x_height": self.x_height,
            "italic_angle": self.italic_angle,
            "baseline": self.baseline,
        }


@dataclass(frozen=True)
class Font:
    """Font-level information the detectors may consult.

    Attributes:
        metrics: Resolved vertical metrics
        family_name: Family name from the name table
        full_name: Full font name from the name table
        is_fixed_pitch: Monospaced flag from the post table
        weight_class: OS/2 weight class, None when unknown
        glyphs_by_char: Optional character lookup used for font-wide
            heuristics such as serif detection
    """

    metrics: FontMetrics
    family_name: str = ""
    full_name: str = ""
    is_fixed_pitch: bool = False
    weight_class: int | None = None
    glyphs_by_char: Mapping[str, Glyph] = field(default_factory=dict)

    def glyph_for_char(self, char: str) -> Glyph | None:
        """Look up a glyph by character."""
        return self.glyphs_by_char.get(char)
