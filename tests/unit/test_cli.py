"""Unit tests for the command line interface."""

import json

import pytest
import typer
from typer.testing import CliRunner

from glyphanatomy import __version__
from glyphanatomy.cli import app
from glyphanatomy.cli.app import parse_axes, parse_feature, parse_features
from glyphanatomy.core import DETECTORS
from glyphanatomy.domain import FeatureKind

runner = CliRunner()


def boom(cache, config):
    raise RuntimeError("boom")


class TestArgumentParsing:
    """Tests for option parsing helpers."""

    def test_parse_feature(self) -> None:
        """Test ids and display names are accepted."""
        assert parse_feature("bowl") is FeatureKind.BOWL
        assert parse_feature("Cross stroke") is FeatureKind.CROSS_STROKE
        with pytest.raises(typer.BadParameter):
            parse_feature("zzz")

    def test_parse_features(self) -> None:
        """Test an empty list means all features."""
        assert parse_features(None) is None
        assert parse_features([]) is None
        assert parse_features(["stem", "tail"]) == [FeatureKind.STEM, FeatureKind.TAIL]

    def test_parse_axes(self) -> None:
        """Test TAG=VALUE settings parse to floats."""
        assert parse_axes(None) is None
        assert parse_axes(["wght=700", " wdth = 87.5"]) == {"wght": 700.0, "wdth": 87.5}
        with pytest.raises(typer.BadParameter):
            parse_axes(["wght"])
        with pytest.raises(typer.BadParameter):
            parse_axes(["wght=bold"])


class TestInfoCommands:
    """Tests for commands that do not read fonts."""

    def test_version(self) -> None:
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_features(self) -> None:
        """Test every feature is listed with its detector status."""
        result = runner.invoke(app, ["features"])
        assert result.exit_code == 0
        assert "bowl" in result.output
        assert "beak (no detector)" in result.output

    def test_hints(self) -> None:
        """Test serif hints only show with --serif."""
        sans = runner.invoke(app, ["hints", "l"])
        serif = runner.invoke(app, ["hints", "l", "--serif"])

        assert sans.exit_code == 0
        assert "stem" in sans.output
        assert "serif fonts" not in sans.output
        assert "serif (serif fonts)" in serif.output


class TestInspect:
    """Tests for the inspect command."""

    def test_table_output(self, font_file) -> None:
        """Test the default output lists features."""
        result = runner.invoke(app, ["inspect", str(font_file), "o", "-f", "bowl", "-f", "tittle"])
        assert result.exit_code == 0
        assert "Bowl" in result.output
        assert "1 of 2 features found" in result.output

    def test_quiet_output(self, font_file) -> None:
        """Test quiet output prints one line per found feature."""
        result = runner.invoke(
            app, ["inspect", str(font_file), "o", "-f", "counter", "-f", "tittle", "-q"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["counter", "1"]

    def test_hinted(self, font_file) -> None:
        """Test --hinted limits detection to the character's hints."""
        result = runner.invoke(app, ["inspect", str(font_file), "o", "--hinted", "-q"])
        assert result.exit_code == 0
        assert result.output.split() == ["bowl", "1", "counter", "1"]

    def test_json_output(self, font_file) -> None:
        """Test JSON output carries shapes and confidences."""
        result = runner.invoke(app, ["inspect", str(font_file), "i", "-f", "tittle", "--json"])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert data["glyph"] == "i"
        tittle = data["features"]["tittle"][0]
        assert tittle["shape"]["type"] == "circle"
        assert tittle["confidence"] == pytest.approx(0.9)

    def test_missing_font(self, tmp_path) -> None:
        """Test an unreadable font exits with an error."""
        result = runner.invoke(app, ["inspect", str(tmp_path / "missing.ttf"), "o"])
        assert result.exit_code == 1
        assert "Could not load font" in result.output

    def test_missing_glyph(self, font_file) -> None:
        """Test an unmapped character exits with an error."""
        result = runner.invoke(app, ["inspect", str(font_file), "z"])
        assert result.exit_code == 1
        assert "No glyph for 'z'" in result.output

    def test_unknown_feature(self, font_file) -> None:
        """Test an unknown feature name is a usage error."""
        result = runner.invoke(app, ["inspect", str(font_file), "o", "-f", "zzz"])
        assert result.exit_code == 2

    def test_failing_detector(self, font_file, monkeypatch) -> None:
        """Test failures are tolerated unless --strict is given."""
        monkeypatch.setitem(DETECTORS, FeatureKind.BOWL, boom)
        args = ["inspect", str(font_file), "o", "-f", "bowl", "-f", "counter", "-q"]

        lenient = runner.invoke(app, args)
        strict = runner.invoke(app, [*args, "--strict"])

        assert lenient.exit_code == 0
        assert lenient.output.split() == ["counter", "1"]
        assert strict.exit_code == 1
        assert "Detector 'bowl' failed on 'o': boom" in strict.output


class TestScan:
    """Tests for the scan command."""

    def test_scan_quiet(self, font_file) -> None:
        """Test quiet scans print matching characters only."""
        result = runner.invoke(app, ["scan", str(font_file), "-f", "tittle", "-q"])
        assert result.exit_code == 0
        assert result.output.split() == ["i"]

    def test_scan_table(self, font_file) -> None:
        """Test the default scan output reports the match count."""
        result = runner.invoke(app, ["scan", str(font_file), "-f", "counter"])
        assert result.exit_code == 0
        assert "1 glyphs with counter" in result.output

    def test_min_confidence(self, font_file) -> None:
        """Test instances below the threshold are ignored."""
        result = runner.invoke(app, ["scan", str(font_file), "-f", "tittle", "-c", "0.95", "-q"])
        assert result.exit_code == 0
        assert result.output.split() == []

    def test_unsupported_feature(self, font_file) -> None:
        """Test scanning for a feature without a detector fails."""
        result = runner.invoke(app, ["scan", str(font_file), "-f", "beak", "-q"])
        assert result.exit_code == 1
        assert "No detector for beak" in result.output
