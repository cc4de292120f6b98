"""Tests for domain models to verify they work correctly."""

import pytest

from glyphanatomy.domain import (
    BBox,
    CircleShape,
    CommandKind,
    FeatureInstance,
    FeatureKind,
    Glyph,
    LineShape,
    PathCommand,
    PathShape,
    Point,
    PointShape,
    PolylineShape,
    RectShape,
    shape_center,
    shape_to_dict,
)
from glyphanatomy.exceptions import InvalidPathError


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        assert Point(100.0, 200.0).to_tuple() == (100.0, 200.0)

    def test_point_serialization(self) -> None:
        """Test point serialization and deserialization."""
        p1 = Point(12.5, -3.0)
        p2 = Point.from_dict(p1.to_dict())
        assert p2 == p1

    def test_distance(self) -> None:
        """Test Euclidean distance."""
        assert Point(0, 0).distance_to(Point(3, 4)) == pytest.approx(5.0)

    def test_is_finite(self) -> None:
        """Test NaN and infinity are not finite."""
        assert Point(1, 2).is_finite()
        assert not Point(float("nan"), 0).is_finite()
        assert not Point(0, float("inf")).is_finite()

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 300.0  # type: ignore


class TestBBox:
    """Tests for BBox class."""

    def test_dimensions(self) -> None:
        """Test width, height and center."""
        box = BBox(10, 20, 110, 220)
        assert box.width == 100
        assert box.height == 200
        assert box.center == Point(60, 120)

    def test_from_points(self) -> None:
        """Test bounding box of a point cloud."""
        box = BBox.from_points([Point(5, 1), Point(-2, 7), Point(3, 3)])
        assert box == BBox(-2, 1, 5, 7)

    def test_from_no_points(self) -> None:
        """Test empty input gives a zero box."""
        box = BBox.from_points([])
        assert box == BBox(0, 0, 0, 0)
        assert box.is_empty()

    def test_contains_is_inclusive(self) -> None:
        """Test containment includes the edges."""
        box = BBox(0, 0, 10, 10)
        assert box.contains(Point(10, 0))
        assert not box.contains(Point(10.1, 5))


class TestPathCommand:
    """Tests for PathCommand class."""

    def test_factories(self) -> None:
        """Test each factory produces the right kind and point count."""
        assert PathCommand.move_to(1, 2).kind is CommandKind.MOVE_TO
        assert len(PathCommand.quad_to(1, 2, 3, 4).points) == 2
        assert len(PathCommand.cubic_to(1, 2, 3, 4, 5, 6).points) == 3
        assert PathCommand.close().points == ()

    def test_end_point(self) -> None:
        """Test the end point is the last point."""
        assert PathCommand.cubic_to(1, 2, 3, 4, 5, 6).end == Point(5, 6)
        assert PathCommand.close().end is None

    def test_wrong_point_count(self) -> None:
        """Test malformed commands are rejected."""
        with pytest.raises(InvalidPathError, match="expects 1"):
            PathCommand(CommandKind.LINE_TO, (Point(0, 0), Point(1, 1)))


class TestGlyph:
    """Tests for Glyph class."""

    def test_from_commands_bbox(self) -> None:
        """Test bbox covers every command point, control points included."""
        glyph = Glyph.from_commands(
            [
                PathCommand.move_to(0, 0),
                PathCommand.quad_to(50, 120, 100, 0),
                PathCommand.close(),
            ],
            char="n",
        )
        assert glyph.bbox == BBox(0, 0, 100, 120)
        assert glyph.name == "n"
        assert glyph.advance_width == 100

    def test_is_empty(self) -> None:
        """Test glyphs that only close paths draw nothing."""
        assert Glyph.from_commands([]).is_empty()
        assert Glyph.from_commands([PathCommand.close()]).is_empty()
        assert not Glyph.from_commands([PathCommand.move_to(0, 0)]).is_empty()


class TestFeatureKind:
    """Tests for FeatureKind enum."""

    def test_from_name_accepts_display_names(self) -> None:
        """Test ids, display names and snake case all parse."""
        assert FeatureKind.from_name("bowl") is FeatureKind.BOWL
        assert FeatureKind.from_name("Bowl") is FeatureKind.BOWL
        assert FeatureKind.from_name(" TITTLE ") is FeatureKind.TITTLE

    def test_from_name_unknown(self) -> None:
        """Test unknown names raise ValueError."""
        with pytest.raises(ValueError):
            FeatureKind.from_name("nose")

    def test_display_name(self) -> None:
        """Test display names are capitalized."""
        assert FeatureKind.CROSSBAR.display_name == "Crossbar"


class TestShapes:
    """Tests for overlay shapes."""

    def test_shape_center(self) -> None:
        """Test representative points of each shape."""
        assert shape_center(PointShape(1, 2)) == Point(1, 2)
        assert shape_center(LineShape(0, 0, 10, 20)) == Point(5, 10)
        assert shape_center(RectShape(0, 0, 10, 20)) == Point(5, 10)
        assert shape_center(CircleShape(3, 4, 9)) == Point(3, 4)
        polyline = PolylineShape((Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)))
        assert shape_center(polyline) == Point(5, 5)
        assert shape_center(PathShape("M0 0Z")) == Point(0, 0)

    def test_shape_to_dict_tags(self) -> None:
        """Test every shape serializes with its type tag."""
        assert shape_to_dict(PointShape(1, 2, label="Ear")) == {
            "type": "point",
            "x": 1,
            "y": 2,
            "label": "Ear",
        }
        assert shape_to_dict(RectShape(0, 1, 2, 3))["type"] == "rect"
        assert shape_to_dict(CircleShape(0, 1, 2))["r"] == 2
        data = shape_to_dict(PolylineShape((Point(0, 0),), closed=True))
        assert data == {"type": "polyline", "points": [{"x": 0, "y": 0}], "closed": True}


class TestFeatureInstance:
    """Tests for FeatureInstance class."""

    def test_confidence_range(self) -> None:
        """Test confidence must lie within [0, 1]."""
        with pytest.raises(ValueError, match="confidence"):
            FeatureInstance(id="stem-0", shape=PointShape(0, 0), confidence=1.5)

    def test_to_dict(self) -> None:
        """Test instances serialize shape and anchors."""
        instance = FeatureInstance(
            id="apex-0",
            shape=PointShape(50, 100),
            confidence=0.9,
            anchors={"tip": Point(50, 100)},
            debug={"style": "sharp"},
        )
        data = instance.to_dict()
        assert data["id"] == "apex-0"
        assert data["shape"]["type"] == "point"
        assert data["anchors"]["tip"] == {"x": 50, "y": 100}
        assert data["debug"] == {"style": "sharp"}
