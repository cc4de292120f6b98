"""Bezier curvature analysis for stroke terminals.

Curvature is evaluated analytically from the first and second derivatives
of a segment and classified into four bands. The bands are calibrated at a
reference UPM and rescaled, so a terminal classifies the same way whatever
the em size of its font.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, CurvatureConfig
from glyphanatomy.core._bezier import cubic_derivatives, quadratic_derivatives
from glyphanatomy.core.cache import GeometryCache
from glyphanatomy.domain import Point, SegmentKind, SegmentWithMeta

MIN_DENOMINATOR = 1e-10


class CurvatureClass(Enum):
    STRAIGHT = "straight"
    GENTLE = "gentle"
    MODERATE = "moderate"
    SHARP = "sharp"


class TerminalKind(Enum):
    """Terminal style inferred from curvature and projection."""

    SERIF = "serif"
    FINIAL = "finial"
    SPUR = "spur"
    PLAIN = "plain"


@dataclass(frozen=True, slots=True)
class CurvatureResult:
    """Curvature of a curve at one parameter value.

    Attributes:
        curvature: Signed curvature in 1/design units
        direction: Sign of the curvature (1 convex left turn, -1 right, 0 none)
        tangent_angle: Tangent direction in radians
        normal_angle: Tangent angle rotated by a quarter turn
        classification: Magnitude band
    """

    curvature: float
    direction: int
    tangent_angle: float
    normal_angle: float
    classification: CurvatureClass


STRAIGHT_RESULT = CurvatureResult(
    curvature=0.0,
    direction=0,
    tangent_angle=0.0,
    normal_angle=math.pi / 2,
    classification=CurvatureClass.STRAIGHT,
)


def classify_curvature(
    curvature: float,
    units_per_em: int = 1000,
    config: CurvatureConfig | None = None,
) -> CurvatureClass:
    """Band a curvature magnitude, normalized to the reference UPM."""
    config = config or DEFAULT_DETECTION_CONFIG.curvature
    magnitude = abs(config.scale_curvature(curvature, units_per_em))

    if magnitude < config.straight_below:
        return CurvatureClass.STRAIGHT
    if magnitude < config.gentle_below:
        return CurvatureClass.GENTLE
    if magnitude < config.moderate_below:
        return CurvatureClass.MODERATE
    return CurvatureClass.SHARP


def _from_derivatives(
    first: tuple[float, float],
    second: tuple[float, float],
    units_per_em: int,
    config: CurvatureConfig | None,
) -> CurvatureResult:
    dx, dy = first
    ddx, ddy = second

    denominator = (dx * dx + dy * dy) ** 1.5
    if not math.isfinite(denominator) or denominator < MIN_DENOMINATOR:
        return STRAIGHT_RESULT

    curvature = (dx * ddy - dy * ddx) / denominator
    tangent_angle = math.atan2(dy, dx)
    direction = 0 if curvature == 0 else int(math.copysign(1, curvature))

    return CurvatureResult(
        curvature=curvature,
        direction=direction,
        tangent_angle=tangent_angle,
        normal_angle=tangent_angle + math.pi / 2,
        classification=classify_curvature(curvature, units_per_em, config),
    )


def analyze_cubic_curvature(
    p0: Point,
    p1: Point,
    p2: Point,
    p3: Point,
    t: float,
    units_per_em: int = 1000,
    config: CurvatureConfig | None = None,
) -> CurvatureResult:
    """Curvature of a cubic Bezier at parameter ``t``.

    Args:
        p0: Start point
        p1: First control point
        p2: Second control point
        p3: End point
        t: Curve parameter in [0, 1]
        units_per_em: Em size used to normalize the classification
        config: Curvature configuration

    Returns:
        CurvatureResult; a vanishing first derivative yields a straight,
        zero-curvature result
    """
    first, second = cubic_derivatives([p0, p1, p2, p3], t)
    return _from_derivatives(first, second, units_per_em, config)


def analyze_quadratic_curvature(
    p0: Point,
    p1: Point,
    p2: Point,
    t: float,
    units_per_em: int = 1000,
    config: CurvatureConfig | None = None,
) -> CurvatureResult:
    """Curvature of a quadratic Bezier at parameter ``t``."""
    first, second = quadratic_derivatives([p0, p1, p2], t)
    return _from_derivatives(first, second, units_per_em, config)


def find_terminal_segments(
    segments: Sequence[SegmentWithMeta],
    position: Point,
    tolerance: float,
) -> list[SegmentWithMeta]:
    """Drawing segments with any point closer than ``tolerance`` to ``position``."""
    nearby = []
    for segment in segments:
        if segment.kind in (SegmentKind.MOVE, SegmentKind.CLOSE) or len(segment.params) < 2:
            continue
        if any(p.distance_to(position) < tolerance for p in segment.params):
            nearby.append(segment)
    return nearby


def analyze_terminal_curvature(
    cache: GeometryCache,
    position: Point,
    config: CurvatureConfig | None = None,
) -> CurvatureResult | None:
    """Curvature of the outline near a stroke terminal.

    Uses the segment within half a stem width whose points come nearest to
    ``position``, preferring a curve on a tie, and evaluates it just inside
    whichever end is nearer.

    Args:
        cache: Geometry snapshot
        position: Terminal location
        config: Curvature configuration

    Returns:
        CurvatureResult, or None when no segment is near the terminal
    """
    config = config or DEFAULT_DETECTION_CONFIG.curvature
    tolerance = cache.scale.stem_width * config.terminal_tolerance
    segments = find_terminal_segments(cache.segments, position, tolerance)
    if not segments:
        return None

    segment = min(
        segments,
        key=lambda s: (
            min(p.distance_to(position) for p in s.params),
            s.kind is SegmentKind.LINE,
        ),
    )
    upm = cache.context.units_per_em
    near_start = segment.start.distance_to(position) < segment.end.distance_to(position)
    t = config.terminal_t if near_start else 1.0 - config.terminal_t

    match segment.kind:
        case SegmentKind.CUBIC:
            return analyze_cubic_curvature(*segment.params, t, upm, config)
        case SegmentKind.QUADRATIC:
            return analyze_quadratic_curvature(*segment.params, t, upm, config)
        case _:
            return STRAIGHT_RESULT


def classify_terminal(curvature: CurvatureResult, has_projection: bool) -> TerminalKind:
    """Infer a terminal style.

    A horizontal projection makes a serif; otherwise sharp curvature
    suggests a finial and moderate curvature a spur.
    """
    if has_projection:
        return TerminalKind.SERIF
    if curvature.classification is CurvatureClass.SHARP:
        return TerminalKind.FINIAL
    if curvature.classification is CurvatureClass.MODERATE:
        return TerminalKind.SPUR
    return TerminalKind.PLAIN
