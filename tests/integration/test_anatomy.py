"""Integration tests running detection on real font files."""

import pytest
from conftest import build_font_file, curved_c_glyph, curved_o_glyph

from glyphanatomy.core import DETECTORS, AnatomySession, detect_glyph_features
from glyphanatomy.core.cache import build_geometry_cache
from glyphanatomy.domain import CircleShape, FeatureKind
from glyphanatomy.io import FontReader

STABLE_FEATURES = [
    FeatureKind.APERTURE,
    FeatureKind.BOWL,
    FeatureKind.COUNTER,
    FeatureKind.SERIF,
    FeatureKind.STEM,
    FeatureKind.TITTLE,
]


def inspect_font(path, char, features=None):
    with FontReader(path) as reader:
        font = reader.load_font()
        glyph = reader.get_glyph_for_char(char)
    return AnatomySession().detect(glyph, font, features=features)


class TestLetterAnatomy:
    """Detection results for whole letters read from a font."""

    def test_o(self, font_file) -> None:
        """Test o has a bowl and counter and nothing dotted or open."""
        results = inspect_font(font_file, "o")

        assert len(results[FeatureKind.BOWL]) == 1
        assert len(results[FeatureKind.COUNTER]) == 1
        assert results[FeatureKind.TITTLE] == []
        assert results[FeatureKind.APERTURE] == []
        assert results[FeatureKind.TAIL] == []

    def test_c(self, font_file) -> None:
        """Test c opens to the right and encloses nothing."""
        results = inspect_font(font_file, "c")

        apertures = results[FeatureKind.APERTURE]
        assert len(apertures) == 1
        assert apertures[0].debug["side"] == "right"
        assert results[FeatureKind.BOWL] == []
        assert results[FeatureKind.COUNTER] == []

    def test_i(self, font_file) -> None:
        """Test i has a tittle above its serifed stem."""
        results = inspect_font(font_file, "i")

        tittle = results[FeatureKind.TITTLE][0].shape
        assert isinstance(tittle, CircleShape)
        assert (tittle.cx, tittle.cy, tittle.r) == pytest.approx((200, 630, 30))

        stems = results[FeatureKind.STEM]
        assert len(stems) == 1
        assert stems[0].shape.x == pytest.approx(150, abs=2)
        assert len(results[FeatureKind.SERIF]) == 2

    def test_every_requested_feature_has_an_entry(self, font_file) -> None:
        """Test unsupported features are reported empty rather than missing."""
        results = inspect_font(font_file, "o", [FeatureKind.BOWL, FeatureKind.BEAK])
        assert list(results) == [FeatureKind.BOWL, FeatureKind.BEAK]
        assert results[FeatureKind.BEAK] == []


class TestCurvedLetters:
    """Letters drawn with curves, stored as TrueType quadratics."""

    @pytest.fixture
    def curved_font(self, tmp_path):
        return build_font_file(
            tmp_path / "TestRound-Regular.ttf",
            curved={"o": curved_o_glyph(), "c": curved_c_glyph()},
        )

    def test_round_o(self, curved_font) -> None:
        """Test a round o has one bowl and one counter and no opening."""
        results = inspect_font(curved_font, "o")

        assert len(results[FeatureKind.BOWL]) == 1
        assert results[FeatureKind.BOWL][0].confidence == pytest.approx(0.85)
        counters = results[FeatureKind.COUNTER]
        assert len(counters) == 1
        assert isinstance(counters[0].shape, CircleShape)
        assert counters[0].anchors["center"].x == pytest.approx(250, abs=2)
        assert results[FeatureKind.APERTURE] == []

    def test_round_c(self, curved_font) -> None:
        """Test an arc c opens to the right and encloses nothing."""
        results = inspect_font(curved_font, "c")

        apertures = results[FeatureKind.APERTURE]
        assert len(apertures) == 1
        assert apertures[0].debug["side"] == "right"
        assert results[FeatureKind.BOWL] == []
        assert results[FeatureKind.COUNTER] == []


class TestInvariance:
    """Detection does not depend on units per em or repetition."""

    @pytest.mark.parametrize("char", ["o", "c", "i"])
    def test_scale_invariance(self, tmp_path, char) -> None:
        """Test doubling the em doubles positions and keeps confidences."""
        small = inspect_font(build_font_file(tmp_path / "small.ttf"), char, STABLE_FEATURES)
        large = inspect_font(
            build_font_file(tmp_path / "large.ttf", scale=2.0), char, STABLE_FEATURES
        )

        for feature in STABLE_FEATURES:
            assert len(small[feature]) == len(large[feature]), feature
            for a, b in zip(small[feature], large[feature]):
                assert a.confidence == pytest.approx(b.confidence), feature
                for name, point in a.anchors.items():
                    other = b.anchors[name]
                    assert (other.x, other.y) == pytest.approx(
                        (point.x * 2, point.y * 2), abs=2
                    ), feature

    def test_idempotent(self, font_file) -> None:
        """Test independent runs give identical results."""
        first = inspect_font(font_file, "i")
        second = inspect_font(font_file, "i")

        assert {k: [i.to_dict() for i in v] for k, v in first.items()} == {
            k: [i.to_dict() for i in v] for k, v in second.items()
        }


class TestGracefulDegradation:
    """A failing detector never hides the others."""

    def test_failure_is_contained(self, font_file, monkeypatch) -> None:
        """Test the other features are still detected."""

        def broken(cache, config):
            raise IndexError("list index out of range")

        monkeypatch.setitem(DETECTORS, FeatureKind.COUNTER, broken)
        with FontReader(font_file) as reader:
            font = reader.load_font()
            glyph = reader.get_glyph_for_char("o")

        cache = build_geometry_cache(glyph, font)
        results = detect_glyph_features([FeatureKind.COUNTER, FeatureKind.BOWL], cache)

        assert results[FeatureKind.COUNTER] == []
        assert len(results[FeatureKind.BOWL]) == 1
