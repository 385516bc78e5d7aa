"""Reveal playback of captured variants.

    RevealPlayer: State machine driving a reveal one frame at a time.
    FrameScheduler: Single-threaded frame queue with cancellable handles.
    ManualClock: Deterministic clock for tests and headless replay.
    PlaybackParams: Speed, width gain, ink lag and pen-lift options.
    build_timeline / compute_reveal: Pure per-frame reveal computation.
    render_glyph_image / render_reveal: PIL glyph and mask compositing.
"""

from .engine import PlaybackStatus, PlayerState, RevealPlayer
from .frames import (
    DrawnSegment,
    PlaybackParams,
    RevealFrame,
    SegmentTimeline,
    TimedSegment,
    base_width,
    build_timeline,
    compute_reveal,
    stroke_width,
)
from .rendering import mask_coverage, render_glyph_image, render_reveal, render_reveal_mask
from .scheduler import FrameScheduler, ManualClock, monotonic_ms

__all__ = [
    'RevealPlayer', 'PlayerState', 'PlaybackStatus',
    'PlaybackParams', 'RevealFrame', 'DrawnSegment', 'SegmentTimeline', 'TimedSegment',
    'build_timeline', 'compute_reveal', 'stroke_width', 'base_width',
    'render_glyph_image', 'render_reveal', 'render_reveal_mask', 'mask_coverage',
    'FrameScheduler', 'ManualClock', 'monotonic_ms',
]
