"""Handwriting capture and reveal playback.

This package turns raw pointer input traced over a font glyph into
resampled, em-space-normalized stroke variants and replays them as an
animated reveal of the glyph, so a capture can be accepted or redone.

Architecture Overview:
    capture: CaptureBuffer groups pointer events into raw strokes.
    pipeline: resample -> to_em_space -> build_variant.
    playback: RevealPlayer drives compute_reveal() frame by frame through a
        FrameScheduler and composites the reveal mask with PIL.
    storage: Schema-1 JSON export/import and a SQLite SessionStore.
    fonts: Character metrics from font files via fontTools.
    session: CaptureSession, the explicit context of one capture workflow.

Example usage:
    Build and replay a capture::

        from handset import (CaptureBuffer, PointerEvent, build_variant,
                             glyph_box_for_canvas, FrameScheduler, ManualClock,
                             RevealPlayer, PlaybackParams)

        buf = CaptureBuffer()
        buf.pointer_down(PointerEvent(100, 100, 0.0, 0.5))
        buf.pointer_move(PointerEvent(180, 260, 120.0, 0.8))
        buf.pointer_up()

        variant = build_variant(buf.strokes(), glyph_box_for_canvas(400, 400))

        clock, scheduler = ManualClock(), FrameScheduler()
        player = RevealPlayer(scheduler, (400, 400), clock=clock)
        player.play(variant, PlaybackParams(speed_multiplier=1.5))
        scheduler.run_until_idle(clock)

Attributes:
    __version__ (str): Package version string.
"""

from .capture import CaptureBuffer, MaskConstraint, PointerEvent
from .config import CaptureConfig, configure_logging
from .domain import (
    CharacterData,
    CharacterMetrics,
    GlyphBox,
    ProcessedStroke,
    RawPoint,
    ResampledPoint,
    TracingSession,
    Variant,
    VariantStats,
)
from .errors import EmptyCaptureError, HandsetError, InvalidGlyphBoxError, UnsupportedSchemaError
from .pipeline import build_variant, glyph_box_for_canvas, resample, to_em_space
from .playback import (
    FrameScheduler,
    ManualClock,
    PlaybackParams,
    PlayerState,
    RevealPlayer,
    compute_reveal,
)
from .session import CaptureSession

__all__ = [
    # Domain objects
    'RawPoint', 'ResampledPoint', 'GlyphBox', 'ProcessedStroke', 'Variant', 'VariantStats',
    'CharacterMetrics', 'CharacterData', 'TracingSession',
    # Errors
    'HandsetError', 'EmptyCaptureError', 'InvalidGlyphBoxError', 'UnsupportedSchemaError',
    # Capture and pipeline
    'CaptureBuffer', 'PointerEvent', 'MaskConstraint',
    'resample', 'to_em_space', 'glyph_box_for_canvas', 'build_variant',
    # Playback
    'RevealPlayer', 'PlayerState', 'PlaybackParams', 'FrameScheduler', 'ManualClock',
    'compute_reveal',
    # Session
    'CaptureSession', 'CaptureConfig', 'configure_logging',
]

__version__ = '1.0.0'
