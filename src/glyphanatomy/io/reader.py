"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files and
extracting glyphs and metrics into domain models, optionally at a variable
font axis location.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import structlog
from fontTools.ttLib import TTFont, TTLibError

from glyphanatomy.core.context import SERIF_TEST_CHARS
from glyphanatomy.domain import Font, FontMetrics, Glyph
from glyphanatomy.exceptions import FontLoadError, GlyphNotFoundError
from glyphanatomy.io.converter import fonttools_glyph_to_domain

logger = structlog.get_logger(__name__)


class FontReader:
    """Loads TTF/OTF fonts and extracts glyph data.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            font = reader.load_font()
            glyph = reader.get_glyph_for_char("a")
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the file does not exist or cannot be parsed
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError, AssertionError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e
        logger.debug("Font loaded", path=str(self._font_path), format=self.format)

    @property
    def tt_font(self) -> TTFont:
        """The underlying fonttools font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """'OpenType' for CFF-flavoured fonts, 'TrueType' otherwise."""
        return "OpenType" if self.is_cff else "TrueType"

    @property
    def is_cff(self) -> bool:
        font = self.tt_font
        return "CFF " in font or "CFF2" in font

    @property
    def units_per_em(self) -> int:
        return self.tt_font["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        return self.tt_font["maxp"].numGlyphs  # type: ignore[attr-defined]

    @property
    def axes(self) -> dict[str, tuple[float, float, float]]:
        """Variable font axes as ``tag -> (min, default, max)``; empty when static."""
        if "fvar" not in self.tt_font:
            return {}
        return {
            axis.axisTag: (axis.minValue, axis.defaultValue, axis.maxValue)
            for axis in self.tt_font["fvar"].axes  # type: ignore[attr-defined]
        }

    def read_metrics(self) -> FontMetrics:
        """Resolve vertical metrics.

        Ascent and descent come from hhea, falling back to the OS/2 typo
        values. Cap-height and x-height are zero when the OS/2 table is
        older than version 2.
        """
        font = self.tt_font
        os2 = font.get("OS/2")
        hhea = font.get("hhea")
        post = font.get("post")

        if hhea is not None:
            ascent, descent = hhea.ascent, hhea.descent  # type: ignore[attr-defined]
        elif os2 is not None:
            ascent, descent = os2.sTypoAscender, os2.sTypoDescender  # type: ignore[attr-defined]
        else:
            ascent, descent = self.units_per_em * 0.8, -self.units_per_em * 0.2

        cap_height = x_height = 0.0
        if os2 is not None and getattr(os2, "version", 0) >= 2:
            cap_height = float(getattr(os2, "sCapHeight", 0) or 0)
            x_height = float(getattr(os2, "sxHeight", 0) or 0)

        return FontMetrics(
            units_per_em=self.units_per_em,
            ascent=float(ascent),
            descent=float(descent),
            cap_height=cap_height,
            x_height=x_height,
            italic_angle=float(getattr(post, "italicAngle", 0.0) or 0.0),
        )

    def load_font(
        self,
        location: Mapping[str, float] | None = None,
        chars: tuple[str, ...] = SERIF_TEST_CHARS,
    ) -> Font:
        """Build the domain Font.

        Args:
            location: Variable font axis location, e.g. ``{"wght": 700}``
            chars: Characters to preload for font-wide heuristics

        Returns:
            Font with metrics, naming and the preloaded glyphs
        """
        font = self.tt_font
        name_table = font.get("name")
        os2 = font.get("OS/2")
        post = font.get("post")

        glyphs_by_char = {}
        for char in chars:
            glyph = self._glyph_for_char(char, location)
            if glyph is not None:
                glyphs_by_char[char] = glyph

        return Font(
            metrics=self.read_metrics(),
            family_name=(name_table.getBestFamilyName() or "") if name_table else "",
            full_name=(name_table.getBestFullName() or "") if name_table else "",
            is_fixed_pitch=bool(getattr(post, "isFixedPitch", 0)),
            weight_class=getattr(os2, "usWeightClass", None),
            glyphs_by_char=glyphs_by_char,
        )

    def get_glyph_for_char(
        self,
        char: str,
        location: Mapping[str, float] | None = None,
    ) -> Glyph:
        """Get the glyph mapped to a character.

        Raises:
            GlyphNotFoundError: If the character is not in the cmap
        """
        glyph = self._glyph_for_char(char, location)
        if glyph is None:
            raise GlyphNotFoundError(char)
        return glyph

    def get_glyph(self, name: str, location: Mapping[str, float] | None = None) -> Glyph:
        """Get a glyph by name.

        Raises:
            GlyphNotFoundError: If the font has no glyph with that name
        """
        font = self.tt_font
        if name not in font.getGlyphOrder():
            raise GlyphNotFoundError(name)
        return self._convert(name, self._glyph_set(location), char=self._char_for(name))

    def iter_char_glyphs(
        self,
        location: Mapping[str, float] | None = None,
    ) -> Iterator[Glyph]:
        """Iterate over glyphs mapped in the cmap, in code point order."""
        cmap = self.tt_font.getBestCmap() or {}
        glyph_set = self._glyph_set(location)
        for code_point in sorted(cmap):
            yield self._convert(cmap[code_point], glyph_set, char=chr(code_point))

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()

    def _glyph_set(self, location: Mapping[str, float] | None) -> Any:
        if location and self.axes:
            return self.tt_font.getGlyphSet(location=dict(location))
        return self.tt_font.getGlyphSet()

    def _glyph_for_char(
        self,
        char: str,
        location: Mapping[str, float] | None,
    ) -> Glyph | None:
        cmap = self.tt_font.getBestCmap() or {}
        name = cmap.get(ord(char)) if len(char) == 1 else None
        if name is None:
            return None
        return self._convert(name, self._glyph_set(location), char=char)

    def _char_for(self, name: str) -> str | None:
        cmap = self.tt_font.getBestCmap() or {}
        for code_point, glyph_name in sorted(cmap.items()):
            if glyph_name == name:
                return chr(code_point)
        return None

    def _convert(self, name: str, glyph_set: Any, char: str | None) -> Glyph:
        return fonttools_glyph_to_domain(
            name=name,
            fonttools_glyph=glyph_set[name],
            glyph_set=glyph_set,
            glyph_id=self.tt_font.getGlyphID(name),
            char=char,
            is_cff=self.is_cff,
        )
