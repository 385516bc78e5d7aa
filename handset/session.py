"""Capture session context.

CaptureSession bundles everything one capture workflow needs: the session
record, the position in the character order, the capture buffer for the
current character and the canvas geometry. Every operation works on this
explicit object, so several sessions can coexist and nothing lives in
module-level state.

Typical workflow::

    session = CaptureSession.new('Caveat', 'AZ', canvas_size=(400, 400), store=store)
    session.pointer_down(PointerEvent(120, 80, 0.0, 0.4))
    session.pointer_move(PointerEvent(124, 95, 16.0, 0.5))
    session.pointer_up()

    preview = session.preview_variant()   # feed to a RevealPlayer
    variant = session.approve()           # stored, moves to the next char
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from PIL import Image

from .capture.buffer import CaptureBuffer, PointerEvent, PointFilter
from .config import (
    APP_BUILD,
    CHARACTER_SETS,
    DEFAULT_CHARACTER_SET,
    DEFAULT_FONT_FAMILY,
    FONT_PRESETS,
    CaptureConfig,
)
from .domain.points import GlyphBox
from .domain.variant import (
    CharacterData,
    CharacterMetrics,
    FontInfo,
    SessionMeta,
    TracingSession,
    Variant,
)
from .fonts.metrics import extract_font_metrics, google_fonts_css_url
from .pipeline.builder import build_variant, metrics_from_strokes
from .pipeline.normalize import glyph_box_for_canvas
from .playback.rendering import render_glyph_image
from .storage.store import SessionStore

logger = logging.getLogger(__name__)

PREVIEW_VARIANT_ID = 'preview'


def new_tracing_session(font_family: str = DEFAULT_FONT_FAMILY,
                        set_key: str = DEFAULT_CHARACTER_SET,
                        config: CaptureConfig = CaptureConfig()) -> TracingSession:
    """Fresh session record with an empty entry for every character of the set.

    Raises:
        KeyError: If set_key is not a known character set.
    """
    order = CHARACTER_SETS[set_key]
    return TracingSession(
        font=FontInfo(font_family, google_fonts_css_url(font_family), config.em_size),
        meta=SessionMeta(
            session_id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc).isoformat(),
            app_build=APP_BUILD,
        ),
        set={char: CharacterData() for char in order},
        current_index=0,
    )


class CaptureSession:
    """Explicit state of one capture workflow.

    Attributes:
        record: The TracingSession being filled in.
        buffer: Capture buffer for the current character.
        canvas_size: (width, height) of the capture surface.
        config: Resampling and em-space parameters.
        store: Optional SessionStore; when set, drafts are saved after every
            stroke and approvals are persisted immediately.
        font_path: Optional local file of the session font, used for the
            template glyph image and for character metrics.
    """

    def __init__(self, record: TracingSession, *,
                 canvas_size: Tuple[float, float] = (400, 400),
                 config: CaptureConfig = CaptureConfig(),
                 store: Optional[SessionStore] = None,
                 font_path: Optional[str] = None,
                 origin: Tuple[float, float] = (0.0, 0.0),
                 point_filter: Optional[PointFilter] = None):
        if not record.set:
            raise ValueError("session has no characters to capture")
        self.record = record
        self.canvas_size = canvas_size
        self.config = config
        self.store = store
        self.font_path = font_path
        self.buffer = CaptureBuffer(origin=origin, point_filter=point_filter)
        if record.current_index is None or not 0 <= record.current_index < len(record.set):
            record.current_index = 0
        self._restore_draft()

    @classmethod
    def new(cls, font_family: str = DEFAULT_FONT_FAMILY, set_key: str = DEFAULT_CHARACTER_SET,
            **kwargs) -> CaptureSession:
        config = kwargs.get('config', CaptureConfig())
        if font_family not in FONT_PRESETS and kwargs.get('font_path') is None:
            logger.warning("Font %r is not a preset and no font file was given", font_family)
        session = cls(new_tracing_session(font_family, set_key, config), **kwargs)
        if session.store is not None:
            session.store.save_session(session.record)
        logger.info("New session %s: %s, %d characters",
                    session.record.session_id, font_family, len(session.order))
        return session

    @classmethod
    def resume(cls, store: SessionStore, session_id: Optional[str] = None,
               **kwargs) -> Optional[CaptureSession]:
        """Reopen a stored session (the last saved one by default)."""
        session_id = session_id or store.last_session_id()
        if session_id is None:
            return None
        record = store.load_session(session_id)
        if record is None:
            logger.warning("Session %s not found", session_id)
            return None
        logger.info("Resumed session %s at index %s", session_id, record.current_index)
        return cls(record, store=store, **kwargs)

    # -- geometry -----------------------------------------------------------

    @property
    def glyph_box(self) -> GlyphBox:
        return glyph_box_for_canvas(*self.canvas_size, fill=self.config.glyph_fill)

    def resize(self, canvas_size: Tuple[float, float]) -> None:
        self.canvas_size = canvas_size

    def glyph_image(self, char: Optional[str] = None) -> Optional[Image.Image]:
        """Template glyph for char (the current one by default) at canvas size.

        Returns None when the session has no font file or it cannot be loaded.
        """
        if self.font_path is None:
            return None
        width, height = (int(v) for v in self.canvas_size)
        return render_glyph_image(self.font_path, char or self.current_char, width, height,
                                  fill=self.config.glyph_fill,
                                  baseline_tweak=self.config.baseline_tweak)

    # -- position -----------------------------------------------------------

    @property
    def order(self) -> list:
        return self.record.order

    @property
    def index(self) -> int:
        return self.record.current_index

    @property
    def current_char(self) -> str:
        return self.order[self.index]

    @property
    def current_data(self) -> CharacterData:
        return self.record.set[self.current_char]

    def progress(self) -> Tuple[int, int]:
        """(captured characters, total characters)."""
        return self.record.captured_count(), len(self.order)

    def go_to(self, char: str) -> None:
        """Jump to a character; with a store, the current capture is kept as a draft."""
        self._move_to(self.order.index(char))

    def skip(self) -> None:
        """Move to the next character without saving a variant."""
        self._move_to(min(self.index + 1, len(self.order) - 1))

    # -- input --------------------------------------------------------------

    def pointer_down(self, event: PointerEvent) -> None:
        self.buffer.pointer_down(event)

    def pointer_move(self, event: PointerEvent) -> None:
        self.buffer.pointer_move(event)

    def pointer_up(self, event: Optional[PointerEvent] = None) -> None:
        if self.buffer.pointer_up(event) is not None:
            self._save_draft()

    def undo(self) -> None:
        if self.buffer.undo() is not None:
            self._save_draft()

    def clear(self) -> None:
        self.buffer.clear()
        self._save_draft()

    # -- variants -----------------------------------------------------------

    def preview_variant(self) -> Variant:
        """Temporary variant of the current capture for immediate playback.

        Raises:
            EmptyCaptureError: If nothing has been captured.
        """
        return self._build(starred=False, variant_id=PREVIEW_VARIANT_ID)

    def approve(self, metrics: Optional[CharacterMetrics] = None) -> Variant:
        """Accept the current capture as a new variant and move on.

        Args:
            metrics: Font metrics for the character. When omitted they are
                read from the font file, or approximated from the captured
                ink if there is none.

        Returns:
            The stored variant.

        Raises:
            EmptyCaptureError: If nothing has been captured.
        """
        variant = self._build(starred=True)
        char = self.current_char
        data = self.current_data
        data.variants.append(variant)
        if metrics is None and self.font_path is not None:
            metrics = extract_font_metrics(self.font_path, char)
        if metrics is None:
            metrics = metrics_from_strokes(variant.strokes)
        data.metrics = metrics
        logger.info("Approved variant %s for %r (%d variants)", variant.id, char, len(data.variants))

        self.buffer.clear()
        if self.store is not None:
            self.store.save_character(self.record.session_id, char, data)
            self.store.clear_draft(self.record.session_id, char)
        self._move_to(min(self.index + 1, len(self.order) - 1), keep_draft=True)
        return variant

    def redo(self) -> None:
        """Discard the current capture so the character can be traced again."""
        self.clear()

    # -- internals ----------------------------------------------------------

    def _build(self, starred: bool, variant_id: Optional[str] = None) -> Variant:
        return build_variant(
            self.buffer.strokes(), self.glyph_box,
            em_size=self.config.em_size, step=self.config.step_px,
            starred=starred, variant_id=variant_id,
        )

    def _move_to(self, index: int, keep_draft: bool = False) -> None:
        if not keep_draft:
            self._save_draft()
        self.record.current_index = index
        self.buffer.clear()
        if self.store is not None:
            self.store.save_progress(self.record.session_id, index)
        self._restore_draft()

    def _save_draft(self) -> None:
        if self.store is None:
            return
        self.store.save_draft(self.record.session_id, self.current_char, self.buffer.strokes())

    def _restore_draft(self) -> None:
        if self.store is None:
            return
        draft = self.store.load_draft(self.record.session_id, self.current_char)
        if draft:
            self.buffer.restore(draft)
            logger.debug("Restored draft for %r: %d strokes", self.current_char, len(draft))
