"""Shared configuration for the handset capture tool.

This module centralizes the constants used by the capture pipeline, the
reveal player and the session layer:

    - Em-space and resampling defaults used when building variants
    - Glyph placement on the capture and preview canvases
    - Stroke width model constants for the reveal player
    - Character sets and font presets offered to a new session

It also provides configure_logging(), which sets up application-wide logging
for the CLI and any host application embedding the package.

Example:
    Configure at startup::

        from handset.config import configure_logging, CaptureConfig

        configure_logging(level='DEBUG')
        config = CaptureConfig(step_px=2.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Session document schema
SCHEMA_VERSION = 1
APP_BUILD = 'mvp-1'

# Em-space and resampling
DEFAULT_EM_SIZE = 1000
DEFAULT_STEP_PX = 3.0
DEFAULT_PRESSURE = 0.5

# Glyph placement: square box of min(W, H) * GLYPH_FILL centered on the canvas
GLYPH_FILL = 0.72
BASELINE_TWEAK = 0.06  # Glyph drawn slightly below center, as a fraction of size

# Reveal width model
BASE_WIDTH_FRACTION = 0.04
BASE_WIDTH_MIN = 6.0
BASE_WIDTH_MAX = 22.0
PRESSURE_FLOOR = 0.6
SPEED_DIVISOR = 0.02
SETTLE_MS = 16.0   # One frame past the last arrival before completion
MAX_INK_LAG_MS = 120.0

FRAME_INTERVAL_MS = 1000.0 / 60.0

DEFAULT_SPEED = 1.0
DEFAULT_WIDTH_GAIN = 30.0

CHARACTER_SETS = {
    'AZaz09basic': tuple(
        'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
        'abcdefghijklmnopqrstuvwxyz'
        '0123456789'
        '.,?!:-$\'"'
    ),
    'AZ': tuple('ABCDEFGHIJKLMNOPQRSTUVWXYZ'),
    'az': tuple('abcdefghijklmnopqrstuvwxyz'),
    '09': tuple('0123456789'),
}
DEFAULT_CHARACTER_SET = 'AZaz09basic'

FONT_PRESETS = ('Caveat', 'Gloria Hallelujah')
DEFAULT_FONT_FAMILY = 'Caveat'


@dataclass(frozen=True)
class CaptureConfig:
    """Parameters that control how raw captures become variants.

    Attributes:
        em_size: Size of the em square that the glyph box maps onto.
        step_px: Resampling step in canvas pixels.
        glyph_fill: Fraction of min(width, height) taken by the glyph box.
        baseline_tweak: Vertical offset of the rendered glyph, as a fraction
            of the glyph size.
    """
    em_size: float = DEFAULT_EM_SIZE
    step_px: float = DEFAULT_STEP_PX
    glyph_fill: float = GLYPH_FILL
    baseline_tweak: float = BASELINE_TWEAK


def configure_logging(level: str = 'INFO', log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level string ('DEBUG', 'INFO', 'WARNING', 'ERROR').
        log_file: Optional path to log file. If None, logs to stderr only.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)-8s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Third-party loggers are noisy at DEBUG
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('fontTools').setLevel(logging.WARNING)

    logger.info("Logging configured: level=%s, file=%s", level, log_file or 'stderr')
