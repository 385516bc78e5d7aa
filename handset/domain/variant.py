"""Variant and session records.

A Variant is one recorded take of tracing a single character. Variants are
created once per capture approval and never mutated; a redo discards the
capture and builds a new one. CharacterData and TracingSession are the
containers that persistence reads and writes, using the schema version 1
JSON shape produced by the to_dict() methods below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import APP_BUILD, DEFAULT_EM_SIZE, SCHEMA_VERSION
from .points import RawPoint, ResampledPoint


@dataclass(frozen=True)
class ProcessedStroke:
    """A stroke after resampling and em-space normalization.

    Attributes:
        points: Resampled points in em-space, keeping absolute capture time.
        resampled: Playback points ordered by cumulative arc length.
    """
    points: Tuple[RawPoint, ...]
    resampled: Tuple[ResampledPoint, ...]

    @property
    def arc_length(self) -> float:
        """Total arc length in em units."""
        return self.resampled[-1].s if self.resampled else 0.0

    @property
    def segment_count(self) -> int:
        return max(0, len(self.resampled) - 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'points': [p.to_dict() for p in self.points],
            'resampled': [p.to_dict() for p in self.resampled],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ProcessedStroke:
        return cls(
            points=tuple(RawPoint.from_dict(p) for p in d.get('points', [])),
            resampled=tuple(ResampledPoint.from_dict(p) for p in d.get('resampled', [])),
        )


@dataclass(frozen=True)
class VariantStats:
    duration_ms: float = 0
    arc_len: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'durationMs': self.duration_ms, 'arcLen': self.arc_len}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> VariantStats:
        return cls(duration_ms=d.get('durationMs', 0), arc_len=d.get('arcLen', 0))


@dataclass(frozen=True)
class Variant:
    """One accepted or candidate capture of a character."""
    id: str
    strokes: Tuple[ProcessedStroke, ...]
    stats: VariantStats = field(default_factory=VariantStats)
    starred: bool = False
    weight: float = 1.0

    @property
    def segment_count(self) -> int:
        """Number of playback segments across all strokes."""
        return sum(s.segment_count for s in self.strokes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'starred': self.starred,
            'weight': self.weight,
            'strokes': [s.to_dict() for s in self.strokes],
            'stats': self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Variant:
        return cls(
            id=d['id'],
            strokes=tuple(ProcessedStroke.from_dict(s) for s in d.get('strokes', [])),
            stats=VariantStats.from_dict(d.get('stats') or {}),
            starred=d.get('starred', False),
            weight=d.get('weight', 1.0),
        )


@dataclass(frozen=True)
class CharacterMetrics:
    """Font metrics for one character, in font design units.

    Values may be None in documents exported before metrics were filled in.
    """
    advance: Optional[float] = 0
    bounds: Optional[Tuple[float, float, float, float]] = (0, 0, 0, 0)
    baseline: Optional[float] = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'advance': self.advance,
            'bounds': list(self.bounds) if self.bounds is not None else None,
            'baseline': self.baseline,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> CharacterMetrics:
        bounds = d.get('bounds')
        return cls(
            advance=d.get('advance'),
            bounds=tuple(bounds) if bounds is not None else None,
            baseline=d.get('baseline'),
        )


@dataclass
class CharacterData:
    """Metrics and recorded variants for one character of a session."""
    metrics: CharacterMetrics = field(default_factory=CharacterMetrics)
    variants: List[Variant] = field(default_factory=list)

    @property
    def is_captured(self) -> bool:
        return len(self.variants) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metrics': self.metrics.to_dict(),
            'variants': [v.to_dict() for v in self.variants],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> CharacterData:
        return cls(
            metrics=CharacterMetrics.from_dict(d.get('metrics') or {}),
            variants=[Variant.from_dict(v) for v in d.get('variants') or []],
        )


@dataclass(frozen=True)
class FontInfo:
    family: str
    source: str
    em_size: float = DEFAULT_EM_SIZE

    def to_dict(self) -> Dict[str, Any]:
        return {'family': self.family, 'source': self.source, 'emSize': self.em_size}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> FontInfo:
        return cls(d['family'], d.get('source', ''), d.get('emSize', DEFAULT_EM_SIZE))


@dataclass(frozen=True)
class SessionMeta:
    session_id: str
    created_at: str
    app_build: str = APP_BUILD

    def to_dict(self) -> Dict[str, Any]:
        return {'sessionId': self.session_id, 'createdAt': self.created_at,
                'appBuild': self.app_build}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> SessionMeta:
        return cls(d['sessionId'], d.get('createdAt', ''), d.get('appBuild', APP_BUILD))


@dataclass
class TracingSession:
    """A capture session: one font, an ordered character set and its captures.

    Attributes:
        font: Font the user traces over.
        meta: Session identity and provenance.
        set: Character to CharacterData, in capture order.
        current_index: Position in the character order. Working state only;
            dropped from exported documents.
        schema_version: Document schema version.
    """
    font: FontInfo
    meta: SessionMeta
    set: Dict[str, CharacterData] = field(default_factory=dict)
    current_index: Optional[int] = 0
    schema_version: int = SCHEMA_VERSION

    @property
    def session_id(self) -> str:
        return self.meta.session_id

    @property
    def order(self) -> List[str]:
        return list(self.set.keys())

    def captured_count(self) -> int:
        return sum(1 for data in self.set.values() if data.is_captured)

    def to_dict(self, include_index: bool = True) -> Dict[str, Any]:
        d = {
            'schemaVersion': self.schema_version,
            'font': self.font.to_dict(),
            'meta': self.meta.to_dict(),
            'set': {char: data.to_dict() for char, data in self.set.items()},
        }
        if include_index and self.current_index is not None:
            d['currentIndex'] = self.current_index
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> TracingSession:
        return cls(
            font=FontInfo.from_dict(d['font']),
            meta=SessionMeta.from_dict(d['meta']),
            set={char: CharacterData.from_dict(v) for char, v in (d.get('set') or {}).items()},
            current_index=d.get('currentIndex'),
            schema_version=d.get('schemaVersion', SCHEMA_VERSION),
        )
