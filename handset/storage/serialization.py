"""Canonical JSON export and import of capture sessions.

Exported documents use schema version 1:

    {
      "schemaVersion": 1,
      "font": {"family": ..., "source": ..., "emSize": 1000},
      "meta": {"sessionId": ..., "createdAt": ..., "appBuild": ...},
      "set": {
        "A": {
          "metrics": {"advance": ..., "bounds": [minX, minY, maxX, maxY], "baseline": ...},
          "variants": [{"id", "starred", "weight",
                        "strokes": [{"points": [{x, y, t, p}], "resampled": [{x, y, dt, p, s}]}],
                        "stats": {"durationMs", "arcLen"}}]
        }
      }
    }

The working-state field currentIndex is dropped on export. Character entries
round-trip through character_to_json()/character_from_json() unchanged.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Union

from ..config import SCHEMA_VERSION
from ..domain.variant import CharacterData, TracingSession, Variant
from ..errors import UnsupportedSchemaError

logger = logging.getLogger(__name__)


def character_to_json(data: CharacterData) -> Dict[str, Any]:
    return data.to_dict()


def character_from_json(d: Dict[str, Any]) -> CharacterData:
    return CharacterData.from_dict(d)


def variant_to_json(variant: Variant) -> Dict[str, Any]:
    return variant.to_dict()


def variant_from_json(d: Dict[str, Any]) -> Variant:
    return Variant.from_dict(d)


def export_session(session: TracingSession) -> Dict[str, Any]:
    """Session document for export (without currentIndex)."""
    return session.to_dict(include_index=False)


def dumps_session(session: TracingSession, indent: int = 2) -> str:
    return json.dumps(export_session(session), indent=indent, ensure_ascii=False)


def import_session(doc: Union[str, bytes, Dict[str, Any]]) -> TracingSession:
    """Parse an exported session document.

    Args:
        doc: JSON text or an already decoded dictionary.

    Returns:
        TracingSession with current_index reset to 0.

    Raises:
        UnsupportedSchemaError: If schemaVersion is not supported.
        json.JSONDecodeError: If doc is not valid JSON.
        KeyError: If required fields are missing.
    """
    if isinstance(doc, (str, bytes)):
        doc = json.loads(doc)
    version = doc.get('schemaVersion')
    if version != SCHEMA_VERSION:
        raise UnsupportedSchemaError(
            f"unsupported schemaVersion {version!r}, expected {SCHEMA_VERSION}")
    session = TracingSession.from_dict(doc)
    if session.current_index is None:
        session.current_index = 0
    logger.debug("Imported session %s with %d characters", session.session_id, len(session.set))
    return session


def export_filename(session: TracingSession) -> str:
    """Default file name: handset_<family>_<sessionId>.json."""
    family = re.sub(r'\s+', '_', session.font.family)
    return f"handset_{family}_{session.session_id}.json"


def save_session_file(session: TracingSession, directory: Union[str, Path]) -> Path:
    """Write the exported document into directory and return its path."""
    path = Path(directory) / export_filename(session)
    path.write_text(dumps_session(session), encoding='utf-8')
    logger.info("Exported session %s to %s", session.session_id, path)
    return path


def load_session_file(path: Union[str, Path]) -> TracingSession:
    return import_session(Path(path).read_text(encoding='utf-8'))
