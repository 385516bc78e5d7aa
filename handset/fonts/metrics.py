"""Per-character font metrics from font files.

Metrics are read with fontTools in the font's design units:

    advance: Horizontal advance width from the hmtx table.
    bounds: Outline bounds (minX, minY, maxX, maxY) from a BoundsPen; glyphs
        without outlines fall back to (0, 0, advance, ascent).
    baseline: The hhea descent (negative below the baseline).

The metrics are persisted with each character's captures; the capture and
playback pipeline does not consume them.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional
from urllib.parse import quote

from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont, TTLibError

from ..domain.variant import CharacterMetrics

logger = logging.getLogger(__name__)

GOOGLE_FONTS_CSS = 'https://fonts.googleapis.com/css2?family={family}:wght@400&display=swap'


def google_fonts_css_url(family: str) -> str:
    """Google Fonts stylesheet URL for a family at weight 400."""
    return GOOGLE_FONTS_CSS.format(family=quote('+'.join(family.split()), safe='+'))


@lru_cache(maxsize=16)
def _load_font(font_path: str) -> TTFont:
    return TTFont(font_path, lazy=True)


def clear_font_cache() -> None:
    _load_font.cache_clear()


def extract_font_metrics(font_path: str, char: str) -> Optional[CharacterMetrics]:
    """Read advance, bounds and baseline of a character.

    Args:
        font_path: Path to a TTF/OTF/WOFF font file.
        char: Single character to measure.

    Returns:
        CharacterMetrics with values rounded to whole design units, or None
        if the font cannot be read or has no glyph for char.
    """
    try:
        tt = _load_font(font_path)
    except (OSError, TTLibError) as e:
        logger.warning("Could not load font %s: %s", font_path, e)
        return None

    cmap = tt.getBestCmap() or {}
    glyph_name = cmap.get(ord(char))
    if not glyph_name:
        logger.warning("No glyph for %r in %s", char, font_path)
        return None

    advance, _lsb = tt['hmtx'][glyph_name]
    hhea = tt['hhea']

    glyph_set = tt.getGlyphSet()
    pen = BoundsPen(glyph_set)
    glyph_set[glyph_name].draw(pen)
    if pen.bounds is not None:
        min_x, min_y, max_x, max_y = pen.bounds
    else:
        min_x, min_y, max_x, max_y = 0, 0, advance, hhea.ascent

    return CharacterMetrics(
        advance=round(advance),
        bounds=(round(min_x), round(min_y), round(max_x), round(max_y)),
        baseline=round(hhea.descent),
    )


def units_per_em(font_path: str) -> Optional[int]:
    """The font's unitsPerEm, or None if the font cannot be read."""
    try:
        return _load_font(font_path)['head'].unitsPerEm
    except (OSError, TTLibError) as e:
        logger.warning("Could not load font %s: %s", font_path, e)
        return None
