"""Font-level detection context.

Builds the flags detectors consult to tune their heuristics: serif, italic,
monospace, weight and units per em. Serif style is measured from the
geometry of a few reference glyphs and only guessed from the family name
when the geometry is inconclusive.
"""

import structlog

from glyphanatomy.config import DEFAULT_DETECTION_CONFIG, DetectionConfig
from glyphanatomy.core.geometry import flatten_outline
from glyphanatomy.core.scale import compute_eps
from glyphanatomy.core.scanline import horizontal_hits, horizontal_spans
from glyphanatomy.domain import DetectionContext, Font, Glyph

logger = structlog.get_logger(__name__)

ITALIC_THRESHOLD = 0.5
DEFAULT_WEIGHT = 400
DEFAULT_UPM = 1000

# Glyphs whose terminals reveal serifs most reliably, in order of preference
SERIF_TEST_CHARS = ("I", "l", "i", "L")
SERIF_RATIO = 1.15
SANS_RATIO = 1.08
TERMINAL_BAND = 0.02

SANS_NAME_PATTERNS = (
    "sans",
    "grotesk",
    "gothic",
    "helvetica",
    "arial",
    "roboto",
    "inter",
    "nohemi",
    "monaspace",
    "neon",
)
SERIF_NAME_PATTERNS = (
    "serif",
    "times",
    "georgia",
    "palatino",
    "garamond",
    "cambria",
    "bodoni",
    "didot",
    "baskerville",
    "caslon",
    "century",
    "minion",
    "newsreader",
)


def build_detection_context(
    font: Font,
    config: DetectionConfig | None = None,
) -> DetectionContext:
    """Derive detection flags for a font.

    Args:
        font: Font with resolved metrics
        config: Detection configuration

    Returns:
        DetectionContext for every glyph of the font
    """
    italic_angle = font.metrics.italic_angle or 0.0
    return DetectionContext(
        is_serif=detect_serif_from_font(font, config),
        is_italic=abs(italic_angle) > ITALIC_THRESHOLD,
        italic_angle=italic_angle,
        is_mono=font.is_fixed_pitch,
        weight=font.weight_class or DEFAULT_WEIGHT,
        units_per_em=font.metrics.units_per_em or DEFAULT_UPM,
    )


def detect_serif_from_font(font: Font, config: DetectionConfig | None = None) -> bool:
    """Decide whether a font has serifs.

    Tries the reference glyphs in order and returns the first conclusive
    geometric verdict, then falls back to family name patterns.
    """
    for char in SERIF_TEST_CHARS:
        glyph = font.glyph_for_char(char)
        if glyph is None or glyph.is_empty():
            continue

        verdict = analyze_glyph_terminals(glyph, font, config)
        if verdict is not None:
            logger.debug("serif_from_geometry", char=char, is_serif=verdict)
            return verdict

    return detect_serif_from_name(font)


def analyze_glyph_terminals(
    glyph: Glyph,
    font: Font,
    config: DetectionConfig | None = None,
) -> bool | None:
    """Compare a glyph's terminal width with its stroke width.

    The narrowest span at mid-height is the stroke. A serifed terminal makes
    the outline noticeably wider than the stroke just above the bottom (or,
    as a tie-break, just below the top).

    Args:
        glyph: Reference glyph, typically 'I' or 'l'
        font: Font the glyph belongs to
        config: Detection configuration

    Returns:
        True for serif, False for sans, None when inconclusive
    """
    config = config or DEFAULT_DETECTION_CONFIG
    bbox = glyph.bbox
    if bbox.is_empty():
        return None

    eps = compute_eps(bbox, font.metrics.units_per_em, config.scale)
    shape = flatten_outline(glyph.commands, eps * config.scale.flatten_tolerance)
    overshoot = config.scale.overshoot_factor * max(bbox.width, bbox.height)

    mid_spans = horizontal_spans(shape, (bbox.min_y + bbox.max_y) / 2, bbox.min_x, overshoot)
    if not mid_spans:
        return None
    stroke = min(hi - lo for lo, hi in mid_spans)

    for y in (
        bbox.min_y + bbox.height * TERMINAL_BAND,
        bbox.max_y - bbox.height * TERMINAL_BAND,
    ):
        hits = horizontal_hits(shape, y, bbox.min_x, overshoot)
        if len(hits) < 2:
            continue

        ratio = (hits[-1].x - hits[0].x) / stroke
        if ratio > SERIF_RATIO:
            return True
        if ratio < SANS_RATIO:
            return False

    return None


def detect_serif_from_name(font: Font) -> bool:
    """Guess serif style from the font name.

    Sans patterns are checked first so that "Noto Sans Serif"-like names
    are not mistaken for serif faces.
    """
    name = (font.full_name or font.family_name or "").lower()

    if any(pattern in name for pattern in SANS_NAME_PATTERNS):
        return False
    return any(pattern in name for pattern in SERIF_NAME_PATTERNS)
