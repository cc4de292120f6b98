"""Shared builders for glyph outlines and geometry caches.

Outlines follow the TrueType convention the detectors expect: outer
contours clockwise, holes counter-clockwise, in a 1000 UPM em with the
x-height at 500 and the cap-height at 700.
"""

import math
from collections.abc import Iterable, Sequence
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from glyphanatomy.core.cache import GeometryCache, build_geometry_cache
from glyphanatomy.domain import CommandKind, Font, FontMetrics, Glyph, PathCommand

Polygon = Sequence[tuple[float, float]]


def polygon(points: Polygon) -> list[PathCommand]:
    """Commands drawing one closed polygon."""
    (x0, y0), *rest = points
    commands = [PathCommand.move_to(x0, y0)]
    commands.extend(PathCommand.line_to(x, y) for x, y in rest)
    commands.append(PathCommand.close())
    return commands


def rect(x0: float, y0: float, x1: float, y1: float, hole: bool = False) -> list[PathCommand]:
    """A clockwise rectangle, or a counter-clockwise one when ``hole``."""
    if hole:
        return polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])
    return polygon([(x0, y0), (x0, y1), (x1, y1), (x1, y0)])


def arc(
    cx: float, cy: float, r: float, start: float, end: float, steps: int = 4
) -> list[PathCommand]:
    """Cubic segments along a circle from ``start`` to ``end`` degrees, without the move."""
    sweep = math.radians(end - start) / steps
    k = 4 / 3 * math.tan(sweep / 4) * r
    commands = []
    for i in range(steps):
        a0 = math.radians(start) + sweep * i
        a1 = a0 + sweep
        x0, y0 = cx + r * math.cos(a0), cy + r * math.sin(a0)
        x3, y3 = cx + r * math.cos(a1), cy + r * math.sin(a1)
        commands.append(
            PathCommand.cubic_to(
                x0 - k * math.sin(a0),
                y0 + k * math.cos(a0),
                x3 + k * math.sin(a1),
                y3 - k * math.cos(a1),
                x3,
                y3,
            )
        )
    return commands


def circle(cx: float, cy: float, r: float, hole: bool = False) -> list[PathCommand]:
    """A clockwise circle, or a counter-clockwise one when ``hole``."""
    end = 540 if hole else -180
    return [PathCommand.move_to(cx - r, cy), *arc(cx, cy, r, 180, end), PathCommand.close()]


def make_glyph(contours: Iterable[list[PathCommand]], char: str = "", glyph_id: int = 1) -> Glyph:
    commands = [cmd for contour in contours for cmd in contour]
    return Glyph.from_commands(commands, glyph_id=glyph_id, name=char or "glyph", char=char or None)


def make_metrics(scale: float = 1.0, **overrides: float) -> FontMetrics:
    values = {
        "units_per_em": int(1000 * scale),
        "ascent": 800 * scale,
        "descent": -200 * scale,
        "cap_height": 700 * scale,
        "x_height": 500 * scale,
    }
    values.update(overrides)
    return FontMetrics(**values)  # type: ignore[arg-type]


def make_font(metrics: FontMetrics | None = None, **kwargs: object) -> Font:
    kwargs.setdefault("family_name", "Test Sans")
    return Font(metrics=metrics or make_metrics(), **kwargs)  # type: ignore[arg-type]


def make_cache(
    glyph: Glyph,
    font: Font | None = None,
    config: DetectionConfig | None = None,
) -> GeometryCache:
    return build_geometry_cache(glyph, font or make_font(), config=config)


def scaled(points: Polygon, factor: float) -> list[tuple[float, float]]:
    return [(x * factor, y * factor) for x, y in points]


# Outlines used across the suite

L_STEM = [(0, 0), (0, 700), (100, 700), (100, 0)]

H_OUTLINE = [
    (0, 0), (0, 700), (100, 700), (100, 400), (400, 400), (400, 700),
    (500, 700), (500, 0), (400, 0), (400, 300), (100, 300), (100, 0),
]

THICK_BAR_H = [
    (0, 0), (0, 700), (100, 700), (100, 440), (400, 440), (400, 700),
    (500, 700), (500, 0), (400, 0), (400, 260), (100, 260), (100, 0),
]

L_OUTLINE = [(0, 0), (0, 700), (100, 700), (100, 100), (300, 100), (300, 0)]

TRIANGLE = [(0, 0), (50, 100), (100, 0)]

INVERTED_TRIANGLE = [(0, 100), (100, 100), (50, 0)]

V_OUTLINE = [(0, 700), (80, 700), (200, 200), (320, 700), (400, 700), (240, 0), (160, 0)]

C_OUTLINE = [(0, 0), (0, 500), (300, 500), (300, 400), (100, 400), (100, 100), (300, 100), (300, 0)]

S_OUTLINE = [
    (0, 0), (0, 60), (240, 60), (240, 220), (0, 220), (0, 500),
    (300, 500), (300, 440), (60, 440), (60, 280), (300, 280), (300, 0),
]

SLAB_I_STEM = [(75, 0), (75, 40), (150, 40), (150, 500), (250, 500), (250, 40), (325, 40), (325, 0)]

SLAB_I = [
    (0, 0), (0, 40), (100, 40), (100, 660), (0, 660), (0, 700),
    (300, 700), (300, 660), (200, 660), (200, 40), (300, 40), (300, 0),
]

SPUR_FOOT = [(0, 0), (0, 500), (100, 500), (100, 40), (150, 40), (150, 0)]


def o_glyph(factor: float = 1.0) -> Glyph:
    return make_glyph(
        [
            polygon(scaled([(0, 0), (0, 500), (400, 500), (400, 0)], factor)),
            polygon(scaled([(100, 100), (300, 100), (300, 400), (100, 400)], factor)),
        ],
        char="o",
    )


def curved_o_glyph() -> Glyph:
    return make_glyph([circle(250, 250, 250), circle(250, 250, 150, hole=True)], char="o")


def curved_c_glyph() -> Glyph:
    """A ring opened on the right between -45 and 45 degrees."""
    outer_start = 250 + 250 * math.cos(math.radians(-45)), 250 + 250 * math.sin(math.radians(-45))
    inner_end = 250 + 150 * math.cos(math.radians(45)), 250 + 150 * math.sin(math.radians(45))
    commands = [
        PathCommand.move_to(*outer_start),
        *arc(250, 250, 250, -45, -315, steps=3),
        PathCommand.line_to(*inner_end),
        *arc(250, 250, 150, 45, 315, steps=3),
        PathCommand.close(),
    ]
    return make_glyph([commands], char="c")


def capped_stem_glyph() -> Glyph:
    """A stem whose top is a round cubic cap."""
    commands = [
        PathCommand.move_to(0, 0),
        PathCommand.line_to(0, 650),
        PathCommand.cubic_to(0, 715, 100, 715, 100, 650),
        PathCommand.line_to(100, 0),
        PathCommand.close(),
    ]
    return make_glyph([commands], char="l")


def i_glyph() -> Glyph:
    return make_glyph([polygon(SLAB_I_STEM), rect(170, 600, 230, 660)], char="i")


@pytest.fixture
def config() -> DetectionConfig:
    return DEFAULT_DETECTION_CONFIG


@pytest.fixture
def font() -> Font:
    return make_font()


@pytest.fixture
def o_cache() -> GeometryCache:
    return make_cache(o_glyph())


@pytest.fixture
def i_cache() -> GeometryCache:
    return make_cache(i_glyph())


@pytest.fixture
def l_cache() -> GeometryCache:
    return make_cache(make_glyph([polygon(L_STEM)], char="l"))


@pytest.fixture
def empty_cache() -> GeometryCache:
    return make_cache(Glyph.from_commands([], glyph_id=0, name="space", char=" "))


# Real font files built with fontTools

O_OUTER = [(0, 0), (0, 500), (400, 500), (400, 0)]
O_HOLE = [(100, 100), (300, 100), (300, 400), (100, 400)]
I_DOT = [(170, 600), (170, 660), (230, 660), (230, 600)]

FONT_GLYPHS: dict[str, list[Polygon]] = {
    " ": [],
    "I": [L_STEM],
    "c": [C_OUTLINE],
    "i": [SLAB_I_STEM, I_DOT],
    "l": [L_STEM],
    "o": [O_OUTER, O_HOLE],
}


def glyph_name(char: str) -> str:
    return "space" if char == " " else char


def draw_scaled(pen, glyph: Glyph, scale: float) -> None:
    """Replay a glyph's commands into a fontTools pen."""
    for cmd in glyph.commands:
        points = [(round(p.x * scale), round(p.y * scale)) for p in cmd.points]
        match cmd.kind:
            case CommandKind.MOVE_TO:
                pen.moveTo(points[0])
            case CommandKind.LINE_TO:
                pen.lineTo(points[0])
            case CommandKind.QUAD_TO:
                pen.qCurveTo(*points)
            case CommandKind.CUBIC_TO:
                pen.curveTo(*points)
            case CommandKind.CLOSE_PATH:
                pen.closePath()


def build_font_file(
    path: Path,
    glyphs: dict[str, list[Polygon]] | None = None,
    scale: float = 1.0,
    family_name: str = "Test Sans",
    curved: dict[str, Glyph] | None = None,
) -> Path:
    """Write a TrueType font whose outlines are scaled polygons.

    Glyphs in ``curved`` replace same-named entries and have their cubics
    converted to TrueType quadratics.
    """
    glyphs = dict(FONT_GLYPHS if glyphs is None else glyphs)
    curved = curved or {}
    glyphs.update({char: [] for char in curved})
    upm = int(1000 * scale)
    order = [".notdef", *(glyph_name(char) for char in glyphs)]

    builder = FontBuilder(upm, isTTF=True)
    builder.setupGlyphOrder(order)
    builder.setupCharacterMap({ord(char): glyph_name(char) for char in glyphs})

    outlines = {".notdef": TTGlyphPen(None).glyph()}
    for char, polygons in glyphs.items():
        pen = TTGlyphPen(None)
        if char in curved:
            draw_scaled(Cu2QuPen(pen, max_err=1.0), curved[char], scale)
        for points in polygons:
            (x0, y0), *rest = [(round(x * scale), round(y * scale)) for x, y in points]
            pen.moveTo((x0, y0))
            for point in rest:
                pen.lineTo(point)
            pen.closePath()
        outlines[glyph_name(char)] = pen.glyph()
    builder.setupGlyf(outlines)

    glyf = builder.font["glyf"]
    builder.setupHorizontalMetrics(
        {name: (round(600 * scale), getattr(glyf[name], "xMin", 0)) for name in order}
    )
    builder.setupHorizontalHeader(ascent=round(800 * scale), descent=round(-200 * scale))
    builder.setupNameTable({"familyName": family_name, "styleName": "Regular"})
    builder.setupOS2(
        sTypoAscender=round(800 * scale),
        sTypoDescender=round(-200 * scale),
        usWinAscent=round(800 * scale),
        usWinDescent=round(200 * scale),
        sxHeight=round(500 * scale),
        sCapHeight=round(700 * scale),
    )
    builder.setupPost()
    builder.save(str(path))
    return path


@pytest.fixture
def font_file(tmp_path: Path) -> Path:
    return build_font_file(tmp_path / "TestSans-Regular.ttf")
