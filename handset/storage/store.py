"""SQLite persistence for capture sessions.

SessionStore keeps sessions, per-character captures and in-progress drafts
in a local SQLite database so a capture session can be resumed later. Each
method opens and closes its own connection; database errors are logged and
reported through the return value rather than raised.

Example:
    >>> store = SessionStore('captures.db')
    >>> store.initialize()
    >>> store.save_session(session)
    True
    >>> store.load_session(store.last_session_id()).font.family
    'Caveat'
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..domain.points import RawPoint
from ..domain.variant import (
    CharacterData,
    CharacterMetrics,
    FontInfo,
    SessionMeta,
    TracingSession,
    Variant,
)

_logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    id TEXT PRIMARY KEY,
    font_family TEXT NOT NULL,
    font_source TEXT,
    em_size REAL NOT NULL,
    created_at TEXT NOT NULL,
    app_build TEXT,
    schema_version INTEGER NOT NULL,
    char_order TEXT NOT NULL,
    current_index INTEGER DEFAULT 0,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS glyphs (
    session_id TEXT NOT NULL REFERENCES sessions(id),
    char TEXT NOT NULL,
    metrics TEXT,
    variants TEXT NOT NULL DEFAULT '[]',
    draft TEXT,
    PRIMARY KEY (session_id, char)
);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""

LAST_SESSION_KEY = 'last_session'


class SessionStore:
    """SQLite-backed store for TracingSession records.

    Attributes:
        db_path: Path to the SQLite database file.
        connection_factory: Optional callable returning a database
            connection, for tests. Defaults to sqlite3.connect(db_path).
    """

    def __init__(self, db_path: str, connection_factory: Optional[Callable[[], sqlite3.Connection]] = None):
        self.db_path = db_path
        self._connection_factory = connection_factory

    def _get_connection(self) -> sqlite3.Connection:
        if self._connection_factory:
            conn = self._connection_factory()
        else:
            conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> bool:
        """Create tables if they do not exist."""
        conn = None
        try:
            conn = self._get_connection()
            conn.executescript(SCHEMA)
            conn.commit()
            return True
        except sqlite3.Error as e:
            _logger.warning("Database error creating schema in %s: %s", self.db_path, e)
            return False
        finally:
            if conn:
                conn.close()

    # -- sessions -----------------------------------------------------------

    def save_session(self, session: TracingSession) -> bool:
        """Insert or replace a session with all its characters.

        Drafts already stored for the session's characters are kept.
        """
        conn = None
        try:
            conn = self._get_connection()
            conn.execute(
                """
                INSERT OR REPLACE INTO sessions
                    (id, font_family, font_source, em_size, created_at, app_build,
                     schema_version, char_order, current_index, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (session.session_id, session.font.family, session.font.source,
                 session.font.em_size, session.meta.created_at, session.meta.app_build,
                 session.schema_version, json.dumps(session.order, ensure_ascii=False),
                 session.current_index or 0)
            )
            for char, data in session.set.items():
                self._upsert_character(conn, session.session_id, char, data)
            conn.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
                (LAST_SESSION_KEY, session.session_id)
            )
            conn.commit()
            return True
        except sqlite3.Error as e:
            _logger.warning("Database error saving session %s: %s", session.session_id, e)
            return False
        finally:
            if conn:
                conn.close()

    def load_session(self, session_id: str) -> Optional[TracingSession]:
        """Load a session, or None if it does not exist or cannot be read."""
        conn = None
        try:
            conn = self._get_connection()
            row = conn.execute("SELECT * FROM sessions WHERE id = ?", (session_id,)).fetchone()
            if row is None:
                return None
            glyph_rows = conn.execute(
                "SELECT char, metrics, variants FROM glyphs WHERE session_id = ?",
                (session_id,)
            ).fetchall()

            by_char = {r['char']: r for r in glyph_rows}
            char_set: Dict[str, CharacterData] = {}
            for char in json.loads(row['char_order']):
                r = by_char.get(char)
                char_set[char] = self._character_from_row(r) if r else CharacterData()

            return TracingSession(
                font=FontInfo(row['font_family'], row['font_source'] or '', row['em_size']),
                meta=SessionMeta(row['id'], row['created_at'], row['app_build']),
                set=char_set,
                current_index=row['current_index'],
                schema_version=row['schema_version'],
            )
        except sqlite3.Error as e:
            _logger.warning("Database error loading session %s: %s", session_id, e)
            return None
        except (json.JSONDecodeError, KeyError) as e:
            _logger.warning("Corrupt data for session %s: %s", session_id, e)
            return None
        finally:
            if conn:
                conn.close()

    def last_session_id(self) -> Optional[str]:
        """Id of the most recently saved session."""
        conn = None
        try:
            conn = self._get_connection()
            row = conn.execute(
                "SELECT value FROM settings WHERE key = ?", (LAST_SESSION_KEY,)
            ).fetchone()
            return row['value'] if row else None
        except sqlite3.Error as e:
            _logger.warning("Database error reading last session: %s", e)
            return None
        finally:
            if conn:
                conn.close()

    def list_sessions(self) -> List[Dict[str, Any]]:
        """Summaries of stored sessions, newest first."""
        conn = None
        try:
            conn = self._get_connection()
            rows = conn.execute(
                """
                SELECT s.id, s.font_family, s.created_at, s.char_order,
                       SUM(CASE WHEN g.variants != '[]' THEN 1 ELSE 0 END) AS captured
                FROM sessions s LEFT JOIN glyphs g ON g.session_id = s.id
                GROUP BY s.id
                ORDER BY s.created_at DESC
                """
            ).fetchall()
            return [
                {
                    'id': r['id'],
                    'fontFamily': r['font_family'],
                    'createdAt': r['created_at'],
                    'total': len(json.loads(r['char_order'])),
                    'captured': r['captured'] or 0,
                }
                for r in rows
            ]
        except sqlite3.Error as e:
            _logger.warning("Database error listing sessions: %s", e)
            return []
        finally:
            if conn:
                conn.close()

    def save_progress(self, session_id: str, current_index: int) -> bool:
        """Persist the session's position in its character order."""
        return self._execute(
            "UPDATE sessions SET current_index = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (current_index, session_id),
            f"saving progress for session {session_id}",
        )

    # -- characters ---------------------------------------------------------

    def save_character(self, session_id: str, char: str, data: CharacterData) -> bool:
        """Insert or replace the metrics and variants of one character."""
        conn = None
        try:
            conn = self._get_connection()
            self._upsert_character(conn, session_id, char, data)
            conn.commit()
            return True
        except sqlite3.Error as e:
            _logger.warning("Database error saving char %r of session %s: %s",
                            char, session_id, e)
            return False
        finally:
            if conn:
                conn.close()

    # -- drafts -------------------------------------------------------------

    def save_draft(self, session_id: str, char: str,
                   strokes: Sequence[Sequence[RawPoint]]) -> bool:
        """Store the in-progress raw strokes of a character."""
        payload = json.dumps([[p.to_dict() for p in s] for s in strokes])
        return self._execute(
            """
            INSERT INTO glyphs (session_id, char, draft) VALUES (?, ?, ?)
            ON CONFLICT(session_id, char) DO UPDATE SET draft = excluded.draft
            """,
            (session_id, char, payload),
            f"saving draft for char {char!r}",
        )

    def load_draft(self, session_id: str, char: str) -> Optional[List[List[RawPoint]]]:
        """Raw strokes saved by save_draft(), or None if there is no draft."""
        conn = None
        try:
            conn = self._get_connection()
            row = conn.execute(
                "SELECT draft FROM glyphs WHERE session_id = ? AND char = ?",
                (session_id, char)
            ).fetchone()
            if not row or not row['draft']:
                return None
            return [[RawPoint.from_dict(p) for p in s] for s in json.loads(row['draft'])]
        except sqlite3.Error as e:
            _logger.warning("Database error loading draft for char %r: %s", char, e)
            return None
        except json.JSONDecodeError as e:
            _logger.warning("Invalid JSON in draft for char %r: %s", char, e)
            return None
        finally:
            if conn:
                conn.close()

    def clear_draft(self, session_id: str, char: str) -> bool:
        return self._execute(
            "UPDATE glyphs SET draft = NULL WHERE session_id = ? AND char = ?",
            (session_id, char),
            f"clearing draft for char {char!r}",
        )

    # -- internals ----------------------------------------------------------

    def _execute(self, sql: str, params: tuple, action: str) -> bool:
        conn = None
        try:
            conn = self._get_connection()
            conn.execute(sql, params)
            conn.commit()
            return True
        except sqlite3.Error as e:
            _logger.warning("Database error %s: %s", action, e)
            return False
        finally:
            if conn:
                conn.close()

    @staticmethod
    def _upsert_character(conn: sqlite3.Connection, session_id: str, char: str,
                          data: CharacterData) -> None:
        conn.execute(
            """
            INSERT INTO glyphs (session_id, char, metrics, variants) VALUES (?, ?, ?, ?)
            ON CONFLICT(session_id, char) DO UPDATE
                SET metrics = excluded.metrics, variants = excluded.variants
            """,
            (session_id, char, json.dumps(data.metrics.to_dict()),
             json.dumps([v.to_dict() for v in data.variants]))
        )

    @staticmethod
    def _character_from_row(row: sqlite3.Row) -> CharacterData:
        metrics = json.loads(row['metrics']) if row['metrics'] else {}
        variants = json.loads(row['variants']) if row['variants'] else []
        return CharacterData(
            metrics=CharacterMetrics.from_dict(metrics) if metrics else CharacterMetrics(),
            variants=[Variant.from_dict(v) for v in variants],
        )
