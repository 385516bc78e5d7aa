"""Reveal playback engine.

RevealPlayer replays a Variant over a rendered glyph, one scheduled frame at
a time:

    IDLE --play--> PLAYING --(settled)--> COMPLETED
                      |
                      +--stop / play again--> STOPPED

There is no pause/resume: stopping discards progress, and replay() or a
parameter change restarts from animation time 0. Each player owns its
playback state and output; at most one playback runs per player, and
starting a new one cancels the pending frame of the previous one before
scheduling.

Example:
    Headless playback on a manual clock::

        clock = ManualClock()
        scheduler = FrameScheduler()
        player = RevealPlayer(scheduler, (400, 400), clock=clock)
        player.play(variant, PlaybackParams(speed_multiplier=2.0))
        scheduler.run_until_idle(clock)
        assert player.state is PlayerState.COMPLETED
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from PIL import Image

from ..config import DEFAULT_EM_SIZE
from ..domain.points import GlyphBox
from ..domain.variant import Variant
from ..pipeline.normalize import glyph_box_for_canvas
from .frames import PlaybackParams, RevealFrame, SegmentTimeline, build_timeline, compute_reveal
from .rendering import render_reveal
from .scheduler import FrameScheduler, monotonic_ms

logger = logging.getLogger(__name__)

FrameListener = Callable[[RevealFrame, Optional[Image.Image]], None]


class PlayerState(Enum):
    IDLE = 'idle'
    PLAYING = 'playing'
    COMPLETED = 'completed'
    STOPPED = 'stopped'


@dataclass
class PlaybackStatus:
    """Transient state of the active playback; discarded when it ends."""
    start_timestamp: float
    elapsed_at_speed: float = 0.0
    playing: bool = True


class RevealPlayer:
    """Drives the reveal animation of one target view.

    Args:
        scheduler: Frame scheduler shared with the host display loop.
        canvas_size: (width, height) of the output canvas in pixels.
        clock: Returns the current time in milliseconds; the start of a
            playback is read from it.
        glyph_image: Optional glyph coverage image ('L') for the canvas. When
            given, every frame is composited into last_image.
        glyph_box: Canvas rectangle of the em square. Defaults to the box
            centered on canvas_size.
        em_size: Em size the variants were normalized with.
        on_frame: Optional listener called with (frame, image) every frame.
    """

    def __init__(self, scheduler: FrameScheduler, canvas_size: Tuple[int, int], *,
                 clock: Callable[[], float] = monotonic_ms,
                 glyph_image: Optional[Image.Image] = None,
                 glyph_box: Optional[GlyphBox] = None,
                 em_size: float = DEFAULT_EM_SIZE,
                 on_frame: Optional[FrameListener] = None):
        self.scheduler = scheduler
        self.canvas_size = canvas_size
        self.clock = clock
        self.glyph_image = glyph_image
        self.glyph_box = glyph_box or glyph_box_for_canvas(*canvas_size)
        self.em_size = em_size
        self.on_frame = on_frame

        self.state = PlayerState.IDLE
        self.status: Optional[PlaybackStatus] = None
        self.variant: Optional[Variant] = None
        self.params = PlaybackParams()
        self.timeline: Optional[SegmentTimeline] = None
        self.last_frame: Optional[RevealFrame] = None
        self.last_image: Optional[Image.Image] = None
        self.frame_count = 0
        self._handle: Optional[int] = None

    @property
    def is_playing(self) -> bool:
        return self.state is PlayerState.PLAYING

    def play(self, variant: Variant, params: Optional[PlaybackParams] = None) -> None:
        """Start revealing variant from animation time 0.

        Any playback already running on this player is stopped first.
        """
        if self.state is PlayerState.PLAYING:
            self.stop()
        self.variant = variant
        if params is not None:
            self.params = params
        self.timeline = build_timeline(variant, self.params.pen_lift_gaps)
        self.status = PlaybackStatus(start_timestamp=self.clock())
        self.state = PlayerState.PLAYING
        self.frame_count = 0
        self.last_frame = None
        self.last_image = None
        logger.info("Playing variant %s: %d segments, %.0f ms at %.2fx",
                    variant.id, len(self.timeline), self.timeline.total_ms,
                    self.params.speed_multiplier)
        self._handle = self.scheduler.request_frame(self._on_frame)

    def replay(self) -> None:
        """Restart the current variant from the beginning."""
        if self.variant is None:
            raise RuntimeError("nothing to replay: no variant has been played")
        self.play(self.variant)

    def update_params(self, params: PlaybackParams) -> None:
        """Change playback parameters; a loaded variant restarts from 0."""
        self.params = params
        if self.variant is not None:
            self.play(self.variant, params)

    def stop(self) -> None:
        """Cancel the pending frame and discard playback progress."""
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None
        if self.state is PlayerState.PLAYING:
            self.state = PlayerState.STOPPED
            logger.info("Playback stopped after %d frames", self.frame_count)
        self.status = None

    def frame_at(self, elapsed: float) -> RevealFrame:
        """Compute the frame at an animation time without touching player state."""
        if self.timeline is None:
            raise RuntimeError("no variant loaded")
        return compute_reveal(self.timeline, elapsed, self.params, self.canvas_size,
                              self.glyph_box, self.em_size)

    def _on_frame(self, now: float) -> None:
        self._handle = None
        if self.state is not PlayerState.PLAYING or self.status is None:
            return

        elapsed = max(0.0, (now - self.status.start_timestamp) * self.params.speed_multiplier)
        self.status.elapsed_at_speed = elapsed
        frame = self.frame_at(elapsed)
        image = render_reveal(frame, self.glyph_image) if self.glyph_image is not None else None
        self.last_frame = frame
        self.last_image = image
        self.frame_count += 1

        # State settles before the listener runs; it may start a new playback.
        if frame.complete:
            self.status.playing = False
            self.status = None
            self.state = PlayerState.COMPLETED
            logger.info("Playback completed after %d frames (%.0f ms animation time)",
                        self.frame_count, elapsed)
        else:
            self._handle = self.scheduler.request_frame(self._on_frame)

        if self.on_frame is not None:
            self.on_frame(frame, image)
