"""Shared pytest fixtures for the handset test suite.

Fixtures:
    raw_stroke: Straight three-point stroke along the x axis
    sample_strokes: Two raw strokes forming a 'T', with a pen-lift between
    glyph_box: Standard 100x100 glyph box at the origin
    sample_variant: Variant built from sample_strokes
    manual_clock: ManualClock starting at 0 ms
    scheduler: Empty FrameScheduler
    session_store: SessionStore on a temporary SQLite file
    glyph_image: 100x100 'L' image with a filled square of ink
    test_font_path: Path to a TTF font installed on the system

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test
"""

import sys
from pathlib import Path

import pytest
from fontTools.ttLib import TTFont, TTLibError
from PIL import Image, ImageDraw

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from handset.domain import GlyphBox, RawPoint
from handset.pipeline import build_variant
from handset.playback import FrameScheduler, ManualClock
from handset.storage import SessionStore


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# -----------------------------------------------------------------------------
# Stroke Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def raw_stroke():
    """Return the stroke (0,0,t=0,p=0.5) -> (10,0,100,0.8) -> (20,0,200,0.3).

    Returns:
        list[RawPoint]: Three collinear points 10 px apart.
    """
    return [
        RawPoint(0, 0, 0, 0.5),
        RawPoint(10, 0, 100, 0.8),
        RawPoint(20, 0, 200, 0.3),
    ]


@pytest.fixture
def sample_strokes():
    """Return two raw strokes forming a 'T' on a 100x100 canvas.

    1. Horizontal bar from (20, 20) to (80, 20) over 300 ms
    2. Vertical stem from (50, 20) to (50, 80), starting after a 200 ms lift

    Returns:
        list[list[RawPoint]]: Strokes in canvas pixels.
    """
    bar = [RawPoint(20 + i * 10, 20, i * 50, 0.5) for i in range(7)]
    stem = [RawPoint(50, 20 + i * 10, 500 + i * 50, 0.7) for i in range(7)]
    return [bar, stem]


@pytest.fixture
def glyph_box():
    """Return a 100x100 glyph box at the canvas origin."""
    return GlyphBox(0, 0, 100, 100)


@pytest.fixture
def sample_variant(sample_strokes, glyph_box):
    """Return a Variant built from sample_strokes with a fixed id."""
    return build_variant(sample_strokes, glyph_box, variant_id='v-test')


# -----------------------------------------------------------------------------
# Playback Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def scheduler():
    return FrameScheduler()


@pytest.fixture
def glyph_image():
    """Return a 100x100 'L' glyph image with ink in the square (20..80, 20..80).

    Returns:
        PIL.Image.Image: 255 = ink, 0 = background.
    """
    img = Image.new('L', (100, 100), 0)
    ImageDraw.Draw(img).rectangle([20, 20, 80, 80], fill=255)
    return img


# -----------------------------------------------------------------------------
# Storage Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def session_store(tmp_path):
    """SessionStore on a fresh SQLite file with the schema created.

    Yields:
        SessionStore: Initialized store.
    """
    store = SessionStore(str(tmp_path / 'captures.db'))
    assert store.initialize()
    yield store


# -----------------------------------------------------------------------------
# Font Path Fixture
# -----------------------------------------------------------------------------

def _has_glyph(path, char):
    try:
        with TTFont(str(path), lazy=True) as font:
            return ord(char) in (font.getBestCmap() or {})
    except (OSError, TTLibError):
        return False


@pytest.fixture
def test_font_path():
    """Return path to a TTF font available on this machine.

    Looks in the usual system font directories for a font that has a glyph
    for "A".

    Returns:
        str: Absolute path to a TTF font file.

    Raises:
        pytest.skip: If no font files are available for testing.
    """
    candidates = [
        Path('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'),
        Path('/usr/share/fonts/dejavu/DejaVuSans.ttf'),
        Path('/Library/Fonts/Arial.ttf'),
        Path('C:/Windows/Fonts/arial.ttf'),
    ]
    for fonts_dir in (Path('/usr/share/fonts'), Path('/usr/local/share/fonts')):
        if fonts_dir.exists():
            candidates.extend(sorted(fonts_dir.rglob('*.ttf')))

    for path in candidates:
        if path.exists() and _has_glyph(path, 'A'):
            return str(path)

    pytest.skip("No font files available for testing")
