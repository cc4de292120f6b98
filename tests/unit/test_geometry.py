"""Unit tests for geometry primitives and scanlines."""

import math

import pytest
from conftest import polygon, rect

from glyphanatomy.core.geometry import (
    bezier_flatten,
    flatten_outline,
    flatten_subpaths,
    is_inside,
    point_in_polygon,
    ray_hits,
    signed_area,
    to_svg_path,
)
from glyphanatomy.core.scanline import (
    horizontal_spans,
    pair_spans,
    span_containing,
    vertical_spans,
)
from glyphanatomy.domain import PathCommand, Point

SQUARE = [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


class TestSignedArea:
    """Tests for the shoelace formula."""

    def test_counterclockwise_is_positive(self) -> None:
        """Test CCW squares have positive area."""
        assert signed_area(SQUARE) == pytest.approx(10000.0)

    def test_clockwise_is_negative(self) -> None:
        """Test CW squares have negative area."""
        assert signed_area(list(reversed(SQUARE))) == pytest.approx(-10000.0)

    def test_degenerate(self) -> None:
        """Test fewer than three points have zero area."""
        assert signed_area([Point(0, 0), Point(1, 1)]) == 0.0


class TestPointInPolygon:
    """Tests for ray-casting containment."""

    def test_inside_and_outside(self) -> None:
        """Test points inside and outside a square."""
        assert point_in_polygon(Point(50, 50), SQUARE)
        assert not point_in_polygon(Point(150, 50), SQUARE)

    def test_degenerate_polygon(self) -> None:
        """Test degenerate polygons contain nothing."""
        assert not point_in_polygon(Point(0, 0), SQUARE[:2])


class TestBezierFlatten:
    """Tests for curve flattening."""

    def test_quadratic_endpoints(self) -> None:
        """Test flattened quadratics keep both endpoints."""
        points = bezier_flatten([Point(0, 0), Point(50, 100), Point(100, 0)], tolerance=0.5)
        assert points[0] == Point(0, 0)
        assert points[-1] == Point(100, 0)
        assert len(points) > 3

    def test_straight_cubic_needs_no_subdivision(self) -> None:
        """Test collinear control points produce a single segment."""
        points = bezier_flatten([Point(0, 0), Point(10, 0), Point(20, 0), Point(30, 0)])
        assert points == [Point(0, 0), Point(30, 0)]

    def test_wrong_control_point_count(self) -> None:
        """Test only quadratic and cubic curves are accepted."""
        with pytest.raises(ValueError, match="3 or 4"):
            bezier_flatten([Point(0, 0), Point(1, 1)])


class TestFlattenSubpaths:
    """Tests for sub-path splitting."""

    def test_two_contours(self) -> None:
        """Test each closed contour becomes one sub-path with command indices."""
        commands = rect(0, 0, 100, 100) + rect(20, 20, 80, 80, hole=True)
        subpaths = flatten_subpaths(commands, tolerance=1.0)

        assert len(subpaths) == 2
        assert (subpaths[0].start_index, subpaths[0].end_index) == (0, 4)
        assert (subpaths[1].start_index, subpaths[1].end_index) == (5, 9)
        assert len(subpaths[0].points) == 4

    def test_open_subpath_is_kept(self) -> None:
        """Test a sub-path without closePath still counts."""
        commands = [
            PathCommand.move_to(0, 0),
            PathCommand.line_to(10, 0),
            PathCommand.line_to(5, 9),
        ]
        subpaths = flatten_subpaths(commands, tolerance=1.0)
        assert len(subpaths) == 1
        assert subpaths[0].end_index == 2

    def test_raw_points_include_controls(self) -> None:
        """Test raw points carry curve control points."""
        commands = [
            PathCommand.move_to(0, 0),
            PathCommand.quad_to(50, 100, 100, 0),
            PathCommand.close(),
        ]
        subpath = flatten_subpaths(commands, tolerance=1.0)[0]
        assert Point(50, 100) in subpath.raw_points
        assert Point(50, 100) not in subpath.points


class TestRayHits:
    """Tests for ray casting."""

    @pytest.fixture
    def square(self):
        return flatten_outline(rect(0, 0, 10, 10), 1.0)

    def test_horizontal_ray(self, square) -> None:
        """Test a ray across the square hits both sides in order."""
        hits = ray_hits(square, Point(-5, 5), 0.0, 30)
        assert [p.x for p in hits] == [0.0, 10.0]

    def test_ray_through_vertex_counts_once(self, square) -> None:
        """Test a ray along a vertex height does not double count."""
        hits = ray_hits(square, Point(-5, 10), 0.0, 30)
        assert len(hits) % 2 == 0

    def test_length_limits_hits(self, square) -> None:
        """Test hits beyond the ray length are dropped."""
        assert len(ray_hits(square, Point(-5, 5), 0.0, 7)) == 1

    def test_degenerate_input(self, square) -> None:
        """Test NaN, infinite and non-positive input yields no hits."""
        assert ray_hits(square, Point(float("nan"), 5), 0.0, 30) == []
        assert ray_hits(square, Point(-5, 5), math.inf, 30) == []
        assert ray_hits(square, Point(-5, 5), 0.0, 0.0) == []
        assert ray_hits(square, Point(-5, 5), 0.0, math.nan) == []

    def test_upward_ray(self, square) -> None:
        """Test a vertical ray hits bottom then top."""
        hits = ray_hits(square, Point(5, -5), math.pi / 2, 30)
        assert [round(p.y, 6) for p in hits] == [0.0, 10.0]


class TestIsInside:
    """Tests for even-odd fill."""

    def test_hole_is_not_filled(self) -> None:
        """Test a point inside a counter is outside the fill."""
        shape = flatten_outline(rect(0, 0, 100, 100) + rect(25, 25, 75, 75, hole=True), 1.0)
        assert is_inside(shape, Point(10, 50))
        assert not is_inside(shape, Point(50, 50))
        assert not is_inside(shape, Point(150, 50))

    def test_non_finite_point(self) -> None:
        """Test NaN points are never inside."""
        shape = flatten_outline(rect(0, 0, 100, 100), 1.0)
        assert not is_inside(shape, Point(math.nan, 50))


class TestSvgPath:
    """Tests for SVG path serialization."""

    def test_rect(self) -> None:
        """Test commands map to SVG letters with trimmed numbers."""
        commands = polygon([(0, 0), (0, 100.5), (50, 100.5)])
        assert to_svg_path(commands) == "M0 0L0 100.5L50 100.5Z"


class TestScanline:
    """Tests for span pairing and scanline helpers."""

    def test_pair_spans(self) -> None:
        """Test crossings pair up and zero-width or odd leftovers are dropped."""
        assert pair_spans([0, 10, 20, 20, 30]) == [(0, 10)]

    def test_horizontal_spans_through_counter(self) -> None:
        """Test a scanline through a ring gives two spans."""
        shape = flatten_outline(rect(0, 0, 100, 100) + rect(25, 25, 75, 75, hole=True), 1.0)
        assert horizontal_spans(shape, 50, 0, 200) == [(0, 25), (75, 100)]

    def test_vertical_spans(self) -> None:
        """Test a vertical scanline gives bottom-to-top spans."""
        shape = flatten_outline(rect(0, 0, 100, 100) + rect(25, 25, 75, 75, hole=True), 1.0)
        spans = vertical_spans(shape, 50, 0, 200)
        assert [(round(a, 6), round(b, 6)) for a, b in spans] == [(0, 25), (75, 100)]

    def test_span_containing(self) -> None:
        """Test span lookup with and without slack."""
        spans = [(0.0, 10.0), (20.0, 30.0)]
        assert span_containing(spans, 25) == (20.0, 30.0)
        assert span_containing(spans, 15) is None
        assert span_containing(spans, 11, tolerance=2) == (0.0, 10.0)
