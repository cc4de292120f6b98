"""Glyphanatomy - Typographic anatomy detection for font glyphs.

Glyphanatomy inspects a single glyph outline together with its font metrics
and reports where named typographic features live: apex, bowl, counter,
stem, crossbar, serif, tittle, aperture and more. Every detection is a
shape in design-space units with a confidence score, ready to be drawn as an
overlay by an inspection UI.

Example:
    $ glyphanatomy inspect Roboto-Regular.ttf a

This prints the bowl, counter, stem and aperture detected for 'a'.
"""

__version__ = "0.1.0"
__author__ = "Glyphanatomy contributors"

__all__ = ["__author__", "__version__"]
