"""Unit tests for outline analysis: scale, contours, segments and curvature."""

import math

import pytest
from conftest import H_OUTLINE, make_cache, make_glyph, make_metrics, polygon, rect

from glyphanatomy.config import CurvatureConfig, ScaleConfig
from glyphanatomy.core.contours import (
    base_contours,
    classify_contours,
    hole_contours,
    mark_contours,
)
from glyphanatomy.core.curvature import (
    CurvatureClass,
    TerminalKind,
    analyze_cubic_curvature,
    analyze_quadratic_curvature,
    analyze_terminal_curvature,
    classify_curvature,
    classify_terminal,
)
from glyphanatomy.core.geometry import flatten_outline, flatten_subpaths
from glyphanatomy.core.scale import compute_eps, compute_scale_primitives, estimate_stem_width
from glyphanatomy.core.segments import flatten_to_segments
from glyphanatomy.domain import BBox, ContourType, PathCommand, Point, SegmentKind


class TestScale:
    """Tests for scale primitive estimation."""

    def test_eps_takes_larger_candidate(self) -> None:
        """Test eps follows the em for small glyphs and the bbox for large ones."""
        assert compute_eps(BBox(0, 0, 100, 100), 1000) == pytest.approx(1.0)
        assert compute_eps(BBox(0, 0, 5000, 4000), 1000) == pytest.approx(4.0)

    def test_stem_width_from_h(self) -> None:
        """Test the stem width of an H is its stroke width."""
        glyph = make_glyph([polygon(H_OUTLINE)])
        shape = flatten_outline(glyph.commands, 1.0)
        width = estimate_stem_width(shape, glyph.bbox, make_metrics(), overshoot=1400)
        assert width == pytest.approx(100.0)

    def test_stem_width_fallback(self) -> None:
        """Test glyphs that miss the mid x-height scanline fall back to a bbox fraction."""
        glyph = make_glyph([rect(0, 600, 200, 700)])
        shape = flatten_outline(glyph.commands, 1.0)
        width = estimate_stem_width(shape, glyph.bbox, make_metrics(), overshoot=400)
        assert width == pytest.approx(200 * 0.08)

    def test_primitives(self) -> None:
        """Test primitives combine bbox size, eps and overshoot."""
        glyph = make_glyph([polygon(H_OUTLINE)])
        shape = flatten_outline(glyph.commands, 1.0)
        scale = compute_scale_primitives(glyph.bbox, make_metrics(), shape)
        assert scale.bbox_w == 500
        assert scale.bbox_h == 700
        assert scale.overshoot == pytest.approx(1400)
        assert scale.stem_width == pytest.approx(100.0)

    def test_empty_glyph(self) -> None:
        """Test degenerate glyphs give zero-sized primitives without raising."""
        scale = compute_scale_primitives(BBox(0, 0, 0, 0), make_metrics(), flatten_outline([], 1))
        assert scale.bbox_w == 0
        assert scale.overshoot == 0
        assert scale.eps == pytest.approx(1.0)

    def test_custom_ratios(self) -> None:
        """Test ratios come from configuration."""
        config = ScaleConfig(overshoot_factor=3.0)
        glyph = make_glyph([polygon(H_OUTLINE)])
        shape = flatten_outline(glyph.commands, 1.0)
        assert compute_scale_primitives(glyph.bbox, make_metrics(), shape, config).overshoot == 2100


class TestContourClassification:
    """Tests for base, mark and hole classification."""

    def classify(self, glyph):
        return classify_contours(flatten_subpaths(glyph.commands, 1.0), make_metrics(), glyph.bbox)

    def test_ring(self) -> None:
        """Test a ring has one base and one hole."""
        contours = self.classify(make_glyph([rect(0, 0, 400, 500), rect(100, 100, 300, 400, True)]))
        assert [c.type for c in contours] == [ContourType.BASE, ContourType.HOLE]
        assert contours[1].winding == -1
        assert contours[1].area == pytest.approx(200 * 300)
        assert contours[1].is_hole

    def test_dot_above_x_height_is_mark(self) -> None:
        """Test a small contour above the x-height is a mark."""
        contours = self.classify(make_glyph([rect(0, 0, 300, 500), rect(120, 600, 180, 660)]))
        assert len(mark_contours(contours)) == 1
        assert len(base_contours(contours)) == 1

    def test_small_contour_below_baseline_is_mark(self) -> None:
        """Test a cedilla-like contour below the baseline is a mark."""
        contours = self.classify(make_glyph([rect(0, 0, 400, 500), rect(180, -80, 220, -20)]))
        assert mark_contours(contours)[0].bbox.max_y == -20

    def test_large_contour_is_base(self) -> None:
        """Test contours larger than the mark ratio stay base."""
        contours = self.classify(make_glyph([rect(0, 0, 100, 500), rect(200, 0, 300, 500)]))
        assert len(base_contours(contours)) == 2
        assert hole_contours(contours) == []

    def test_command_range(self) -> None:
        """Test contours remember the commands that draw them."""
        contours = self.classify(make_glyph([rect(0, 0, 400, 500), rect(100, 100, 300, 400, True)]))
        assert (contours[1].start_index, contours[1].end_index) == (5, 9)


class TestSegments:
    """Tests for tangent-enriched segments."""

    def test_line_tangent_and_normal(self) -> None:
        """Test a rightward line has tangent (1, 0) and clockwise normal (0, -1)."""
        segments = flatten_to_segments([PathCommand.move_to(0, 0), PathCommand.line_to(10, 0)])
        line = segments[1]
        assert line.kind is SegmentKind.LINE
        assert line.tangent == Point(1, 0)
        assert line.normal == Point(0, -1)
        assert line.direction == 1

    def test_leftward_direction(self) -> None:
        """Test leftward segments carry a negative direction."""
        segments = flatten_to_segments([PathCommand.move_to(10, 0), PathCommand.line_to(0, 5)])
        assert segments[1].direction == -1

    def test_close_returns_to_start(self) -> None:
        """Test one segment per command, with close starting at the pen position."""
        segments = flatten_to_segments(rect(0, 0, 10, 10))
        assert len(segments) == 5
        assert segments[-1].kind is SegmentKind.CLOSE
        assert segments[-1].params == (Point(10, 0),)

    def test_curve_params_include_start(self) -> None:
        """Test curve segments carry the start point before their controls."""
        segments = flatten_to_segments(
            [PathCommand.move_to(0, 0), PathCommand.cubic_to(0, 50, 50, 100, 100, 100)]
        )
        assert segments[1].params[0] == Point(0, 0)
        assert segments[1].tangent == Point(0, 1)

    def test_drawing_without_move(self) -> None:
        """Test segments before any moveTo have no direction data."""
        segments = flatten_to_segments([PathCommand.line_to(5, 5)])
        assert segments[0].tangent is None


class TestCurvature:
    """Tests for Bezier curvature analysis."""

    def test_straight_cubic(self) -> None:
        """Test collinear control points have zero curvature."""
        result = analyze_cubic_curvature(
            Point(0, 0), Point(10, 0), Point(20, 0), Point(30, 0), t=0.5
        )
        assert result.curvature == 0
        assert result.classification is CurvatureClass.STRAIGHT

    def test_quadratic_sign(self) -> None:
        """Test a left-turning arc has positive curvature."""
        result = analyze_quadratic_curvature(Point(0, 0), Point(50, 0), Point(50, 50), t=0.5)
        assert result.curvature > 0
        assert result.direction == 1

    def test_vanishing_derivative(self) -> None:
        """Test coincident points give the straight result instead of dividing by zero."""
        p = Point(5, 5)
        result = analyze_cubic_curvature(p, p, p, p, t=0.0)
        assert result.classification is CurvatureClass.STRAIGHT
        assert result.normal_angle == pytest.approx(math.pi / 2)

    def test_bands(self) -> None:
        """Test the magnitude bands at the reference UPM."""
        assert classify_curvature(0.0005) is CurvatureClass.STRAIGHT
        assert classify_curvature(0.005) is CurvatureClass.GENTLE
        assert classify_curvature(-0.02) is CurvatureClass.MODERATE
        assert classify_curvature(0.2) is CurvatureClass.SHARP

    def test_upm_normalization(self) -> None:
        """Test the same shape classifies alike at twice the em size."""
        config = CurvatureConfig()
        assert classify_curvature(0.02, 1000, config) is CurvatureClass.MODERATE
        assert classify_curvature(0.01, 2000, config) is CurvatureClass.MODERATE

    def test_terminal_curvature_on_lines(self) -> None:
        """Test terminals drawn with lines are straight."""
        cache = make_cache(make_glyph([rect(0, 0, 100, 700)]))
        result = analyze_terminal_curvature(cache, Point(0, 700))
        assert result is not None
        assert result.classification is CurvatureClass.STRAIGHT

    def test_terminal_curvature_without_segments(self) -> None:
        """Test positions far from the outline give None."""
        cache = make_cache(make_glyph([rect(0, 0, 100, 700)]))
        assert analyze_terminal_curvature(cache, Point(5000, 5000)) is None

    def test_classify_terminal(self) -> None:
        """Test terminal style inference."""
        sharp = analyze_quadratic_curvature(Point(0, 0), Point(5, 0), Point(5, 5), t=0.5)
        assert classify_terminal(sharp, has_projection=True) is TerminalKind.SERIF
        assert classify_terminal(sharp, has_projection=False) is TerminalKind.FINIAL
        straight = analyze_cubic_curvature(
            Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0), t=0.5
        )
        assert classify_terminal(straight, has_projection=False) is TerminalKind.PLAIN
