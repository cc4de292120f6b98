"""Font I/O layer for glyphanatomy.

This module reads font files using fonttools and converts them to the
domain models consumed by the detection core.

Key responsibilities:
- Load TTF/OTF fonts, including variable fonts at an axis location
- Resolve vertical metrics and naming
- Convert fonttools outlines to path commands with consistent winding

Key classes:
- FontReader: Load fonts and extract glyphs
"""

from glyphanatomy.io.reader import FontReader

__all__ = [
    "FontReader",
]
