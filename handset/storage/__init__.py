"""Persistence of capture sessions.

    serialization: Canonical schema-1 JSON export/import.
    store: SQLite SessionStore with drafts and resume support.
"""

from .serialization import (
    character_from_json,
    character_to_json,
    dumps_session,
    export_filename,
    export_session,
    import_session,
    load_session_file,
    save_session_file,
    variant_from_json,
    variant_to_json,
)
from .store import SessionStore

__all__ = [
    'character_to_json', 'character_from_json', 'variant_to_json', 'variant_from_json',
    'export_session', 'dumps_session', 'import_session', 'export_filename',
    'save_session_file', 'load_session_file',
    'SessionStore',
]
