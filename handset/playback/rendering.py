"""Glyph and reveal-mask rendering.

The reveal is drawn the way a canvas "destination-in" composite works: the
fully rendered glyph is kept only where the stroke mask has been painted.
These helpers produce the glyph bitmap, rasterize a RevealFrame into a
mask and combine the two.

Example usage::

    from handset.playback.rendering import render_glyph_image, render_reveal

    glyph = render_glyph_image('/fonts/Caveat.ttf', 'A', 400, 400)
    image = render_reveal(frame, glyph)
    # image is RGBA: glyph ink where revealed, transparent elsewhere
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont
from PIL.ImageFont import FreeTypeFont

from ..config import BASELINE_TWEAK, GLYPH_FILL
from .frames import RevealFrame

logger = logging.getLogger(__name__)

FONT_CACHE_SIZE = 64


@lru_cache(maxsize=FONT_CACHE_SIZE)
def _cached_font(font_path: str, size: int) -> FreeTypeFont:
    """Load a font with caching to avoid repeated disk I/O."""
    return ImageFont.truetype(font_path, size)


def render_glyph_image(font_path: str, char: str, width: int, height: int,
                       fill: float = GLYPH_FILL,
                       baseline_tweak: float = BASELINE_TWEAK) -> Optional[Image.Image]:
    """Render a character centered on a canvas.

    The glyph is sized to min(width, height) * fill and drawn centered,
    nudged down by baseline_tweak of its size, matching the template shown
    behind the capture surface.

    Args:
        font_path: Path to a TTF/OTF font file.
        char: Character to draw.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        fill: Glyph size as a fraction of the shorter canvas side.
        baseline_tweak: Downward offset as a fraction of glyph size.

    Returns:
        Grayscale ('L') image where 255 is ink and 0 is background, or None
        if the font cannot be loaded.
    """
    size = max(1, int(min(width, height) * fill))
    try:
        font = _cached_font(font_path, size)
    except OSError as e:
        logger.warning("Failed to load font %s: %s", font_path, e)
        return None

    img = Image.new('L', (width, height), 0)
    draw = ImageDraw.Draw(img)
    draw.text((width / 2, height / 2 + size * baseline_tweak), char,
              fill=255, font=font, anchor='mm')
    return img


def render_reveal_mask(frame: RevealFrame, size: Tuple[int, int]) -> Image.Image:
    """Rasterize the revealed (sub)segments of a frame into an 'L' mask.

    Each segment is drawn as a line of its computed width with round caps.
    """
    mask = Image.new('L', size, 0)
    draw = ImageDraw.Draw(mask)
    for seg in frame.segments:
        w = max(1, int(round(seg.width)))
        r = seg.width / 2
        draw.line([seg.start, seg.end], fill=255, width=w)
        for cx, cy in (seg.start, seg.end):
            draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=255)
    return mask


def render_reveal(frame: RevealFrame, glyph: Image.Image,
                  ink_color: Tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
    """Composite a frame: glyph coverage restricted to the reveal mask.

    Args:
        frame: Frame from compute_reveal().
        glyph: Glyph coverage image ('L', 255 = ink) for the same canvas.
        ink_color: RGB color of the revealed glyph.

    Returns:
        RGBA image of the glyph's size. Alpha is glyph coverage times mask
        coverage times the frame's ink-lag opacity.
    """
    coverage = np.asarray(glyph.convert('L'), dtype=np.float32) / 255.0
    mask = np.asarray(render_reveal_mask(frame, glyph.size), dtype=np.float32) / 255.0
    alpha = np.clip(coverage * mask * frame.glyph_alpha * 255.0, 0, 255).astype(np.uint8)

    h, w = alpha.shape
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., :3] = np.array(ink_color, dtype=np.uint8)
    rgba[..., 3] = alpha
    return Image.fromarray(rgba)


def mask_coverage(frame: RevealFrame, glyph: Image.Image) -> float:
    """Fraction of the glyph's ink pixels that the frame reveals."""
    ink = np.asarray(glyph.convert('L')) >= 128
    total = int(ink.sum())
    if total == 0:
        return 0.0
    mask = np.asarray(render_reveal_mask(frame, glyph.size)) >= 128
    return float((ink & mask).sum()) / total
