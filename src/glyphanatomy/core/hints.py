"""Per-character feature hints for inspection UIs.

Hints suggest which features are worth offering for a character and which
to switch on by default. They are not ground truth: detection decides
whether a feature is actually present.

Tables are written one character per line. Each word is a feature id; a
trailing ``*`` marks it on by default and a trailing ``?`` limits it to
serif fonts. Accented letters fall back to the hints of their base letter.
"""

import unicodedata
from dataclasses import dataclass

from glyphanatomy.domain import DetectionContext, FeatureKind


@dataclass(frozen=True, slots=True)
class FeatureHint:
    """A feature suggested for a character.

    Attributes:
        kind: Suggested feature
        default_on: Shown without the user asking
        serif_only: Only offered when the font has serifs
    """

    kind: FeatureKind
    default_on: bool = False
    serif_only: bool = False

    def applies_to(self, context: DetectionContext) -> bool:
        return context.is_serif or not self.serif_only


def _parse(row: str) -> tuple[FeatureHint, ...]:
    hints = []
    for word in row.split():
        default_on = word.endswith("*")
        serif_only = word.endswith("?")
        name = word.rstrip("*?")
        hints.append(FeatureHint(FeatureKind(name), default_on, serif_only))
    return tuple(hints)


def _table(rows: dict[str, str]) -> dict[str, tuple[FeatureHint, ...]]:
    return {char: _parse(row) for char, row in rows.items()}


LOWERCASE_HINTS = _table(
    {
        "a": "bowl* counter* stem aperture serif?",
        "b": "bowl* stem* counter serif?",
        "c": "aperture* serif?",
        "d": "bowl* stem* counter serif?",
        "e": "eye* counter* crossbar aperture",
        "f": "crossbar* stem* arm serif?",
        "g": "bowl* loop* ear tail counter",
        "h": "stem* shoulder serif?",
        "i": "tittle* stem* serif?",
        "j": "tittle* tail* stem serif?",
        "k": "stem* arm leg crotch serif?",
        "l": "stem* serif?",
        "m": "stem* shoulder serif?",
        "n": "stem* shoulder serif?",
        "o": "bowl* counter*",
        "p": "bowl* stem* tail counter serif?",
        "q": "bowl* tail* counter serif?",
        "r": "stem* ear serif?",
        "s": "spine* aperture serif?",
        "t": "crossbar* stem* serif?",
        "u": "stem* serif?",
        "v": "vertex* stem serif?",
        "w": "vertex* stem serif?",
        "x": "crotch* stem serif?",
        "y": "tail* crotch stem serif?",
        "z": "arm crossbar serif?",
    }
)

UPPERCASE_HINTS = _table(
    {
        "A": "apex* crossbar* stem crotch serif?",
        "B": "bowl* stem* counter serif?",
        "C": "aperture* serif?",
        "D": "bowl* stem* counter serif?",
        "E": "arm* crossbar* stem serif?",
        "F": "arm* crossbar* stem serif?",
        "G": "aperture* spur crossbar serif?",
        "H": "crossbar* stem* serif?",
        "I": "stem* serif?",
        "J": "stem* tail serif?",
        "K": "stem* arm leg crotch serif?",
        "L": "stem* arm serif?",
        "M": "apex* stem* crotch serif?",
        "N": "apex* stem* crotch serif?",
        "O": "bowl* counter*",
        "P": "bowl* stem* counter serif?",
        "Q": "bowl* tail* counter",
        "R": "bowl* stem* tail counter serif?",
        "S": "spine* aperture spur serif?",
        "T": "crossbar* stem* serif?",
        "U": "stem* serif?",
        "V": "vertex* stem serif?",
        "W": "vertex* apex stem serif?",
        "X": "crotch* stem serif?",
        "Y": "crotch* stem tail serif?",
        "Z": "arm crossbar serif?",
    }
)

DEFAULT_HINTS = _parse("stem bowl counter crossbar apex vertex tail tittle serif?")

GLYPH_FEATURE_HINTS = {**LOWERCASE_HINTS, **UPPERCASE_HINTS}


def _hints_for(char: str) -> tuple[FeatureHint, ...]:
    hints = GLYPH_FEATURE_HINTS.get(char)
    if hints is not None:
        return hints
    # "é" decomposes to "e" + combining accent
    base = unicodedata.normalize("NFD", char)[:1]
    return GLYPH_FEATURE_HINTS.get(base, DEFAULT_HINTS)


def get_feature_hints(char: str, context: DetectionContext) -> list[FeatureHint]:
    """Hints for a character that apply to the font.

    Args:
        char: Character to look up
        context: Font-level context; serif-only hints need ``is_serif``

    Returns:
        Applicable hints in table order; the default list for unknown
        characters
    """
    return [hint for hint in _hints_for(char) if hint.applies_to(context)]


def get_default_features(char: str, context: DetectionContext) -> list[FeatureKind]:
    return [hint.kind for hint in get_feature_hints(char, context) if hint.default_on]


def get_all_features(char: str, context: DetectionContext) -> list[FeatureKind]:
    return [hint.kind for hint in get_feature_hints(char, context)]


def is_feature_hinted(char: str, feature: FeatureKind, context: DetectionContext) -> bool:
    return any(hint.kind is feature for hint in get_feature_hints(char, context))
