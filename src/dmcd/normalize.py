"""Character fixes applied to every raw DMC line before parsing."""

from __future__ import annotations

ROMAN_NUMERAL_TWO = "Ⅱ"
IDEOGRAPHIC_SPACE = "　"

# The ideographic space occupies two columns in the source layout.
SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    (ROMAN_NUMERAL_TWO, "II"),
    (IDEOGRAPHIC_SPACE, "  "),
)


def normalize_line(line: str) -> str:
    for glyph, replacement in SUBSTITUTIONS:
        line = line.replace(glyph, replacement)
    return line
