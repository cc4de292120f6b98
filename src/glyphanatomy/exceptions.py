"""Exception hierarchy for Glyphanatomy."""


class GlyphAnatomyError(Exception):
    """Base exception for all Glyphanatomy errors."""

    pass


class FontError(GlyphAnatomyError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphError(GlyphAnatomyError):
    """Errors related to glyph lookup."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class GeometryError(GlyphAnatomyError):
    """Errors in geometric input data."""

    pass


class InvalidPathError(GeometryError):
    """A path command carries the wrong number of points."""

    def __init__(self, command: str, expected: int, actual: int) -> None:
        self.command = command
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Path command '{command}' expects {expected} points, got {actual}"
        )


class DetectionError(GlyphAnatomyError):
    """A feature detector failed on a glyph."""

    def __init__(self, feature: str, glyph_name: str, reason: str) -> None:
        self.feature = feature
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Detector '{feature}' failed on '{glyph_name}': {reason}")
