"""SQLite journal store: entries, emotion lookup, generated insights, and filtered row fetches."""

import json
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import structlog

from db import wal_connect

logger = structlog.get_logger()

_DEFAULT_DB_PATH = Path(
    os.environ.get("ECOJOURNAL_DB")
    or Path(os.environ.get("ECOJOURNAL_HOME", Path.home() / "ecojournal")) / "journal.db"
)

DEFAULT_EMOTIONS = (
    "Joy",
    "Trust",
    "Fear",
    "Surprise",
    "Sadness",
    "Disgust",
    "Anger",
    "Anticipation",
)

ENTRY_COLUMNS = (
    "id",
    "user_id",
    "title",
    "content",
    "created_at",
    "updated_at",
    "mood_score",
    "weather_data",
    "latitude",
    "longitude",
    "location_name",
    "emotion_id",
    "emotion_analysis",
    "emotion_source",
)
EMOTION_SOURCES = ("ai", "manual")
MAX_CONTENT_LENGTH = 100_000

_JSON_COLUMNS = ("weather_data", "emotion_analysis")
_UPDATABLE = set(ENTRY_COLUMNS) - {"id", "user_id", "created_at", "updated_at"}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def normalize_emotion_name(name: str) -> str:
    """``joy`` / ``JOY`` -> ``Joy``."""
    name = name.strip()
    return name[:1].upper() + name[1:].lower()


def _serialize(column: str, value: Any) -> Any:
    if column in _JSON_COLUMNS and value is not None and not isinstance(value, str):
        return json.dumps(value)
    return value


class JournalStore:
    """Journal entries and the emotion reference table in one SQLite file."""

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path or _DEFAULT_DB_PATH).expanduser()
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        return wal_connect(self.db_path)

    def init_db(self) -> None:
        """Create tables and seed emotions if missing."""
        conn = self._connect()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS emotions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE
                );
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT,
                    content TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    mood_score REAL,
                    weather_data TEXT,
                    latitude REAL,
                    longitude REAL,
                    location_name TEXT,
                    emotion_id INTEGER REFERENCES emotions(id),
                    emotion_analysis TEXT,
                    emotion_source TEXT CHECK(emotion_source IN ('ai','manual'))
                );
                CREATE INDEX IF NOT EXISTS idx_entries_user_created
                    ON journal_entries(user_id, created_at);
                CREATE INDEX IF NOT EXISTS idx_entries_created
                    ON journal_entries(created_at);
                CREATE TABLE IF NOT EXISTS journal_insights (
                    journal_id TEXT PRIMARY KEY
                        REFERENCES journal_entries(id) ON DELETE CASCADE,
                    user_id TEXT NOT NULL,
                    insight_text TEXT NOT NULL,
                    generated_at TEXT NOT NULL
                );
            """)
            conn.executemany(
                "INSERT OR IGNORE INTO emotions (name) VALUES (?)",
                [(name,) for name in DEFAULT_EMOTIONS],
            )
            conn.commit()
        finally:
            conn.close()

    # --- Emotions ---

    def emotion_lookup(self) -> dict[int, str]:
        """id -> name map. Build once per request; never cache across requests."""
        conn = self._connect()
        try:
            rows = conn.execute("SELECT id, name FROM emotions").fetchall()
            return {row["id"]: row["name"] for row in rows}
        finally:
            conn.close()

    def emotion_id_for(self, name: Optional[str]) -> Optional[int]:
        if not name:
            return None
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id FROM emotions WHERE name = ?", (normalize_emotion_name(name),)
            ).fetchone()
            return row["id"] if row else None
        finally:
            conn.close()

    # --- Row fetcher ---

    def fetch_entries(
        self,
        user_id: Optional[str],
        columns: Iterable[str] = ENTRY_COLUMNS,
        since: Optional[str] = None,
        until: Optional[str] = None,
        ascending: Optional[bool] = None,
        require_coordinates: bool = False,
        require_weather: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Filtered read of journal rows.

        Args:
            user_id: Owner filter; None reads every user's entries.
            columns: Projection, restricted to known entry columns.
            since: Inclusive lower bound on created_at (date or timestamp string).
            until: Inclusive upper bound on created_at.
            ascending: Order by created_at; None leaves order unspecified.
            require_coordinates: Only rows with latitude and longitude.
            require_weather: Only rows with a weather payload.
            limit: Max rows.

        Raises:
            ValueError: Unknown column requested.
            sqlite3.Error: Store fault.
        """
        columns = list(columns)
        unknown = [c for c in columns if c not in ENTRY_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown journal columns: {unknown}")

        clauses, params = [], []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if since is not None:
            clauses.append("created_at >= ?")
            params.append(since)
        if until is not None:
            clauses.append("created_at <= ?")
            params.append(until)
        if require_coordinates:
            clauses.append("latitude IS NOT NULL AND longitude IS NOT NULL")
        if require_weather:
            clauses.append("weather_data IS NOT NULL")

        sql = f"SELECT {', '.join(columns)} FROM journal_entries"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if ascending is not None:
            sql += f" ORDER BY created_at {'ASC' if ascending else 'DESC'}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        conn = self._connect()
        try:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]
        finally:
            conn.close()

    def fetch_emotion_labels(self, user_id: str, since: Optional[str] = None) -> list[dict]:
        """Entries joined to their emotion name (None when unlabeled)."""
        sql = (
            "SELECT e.emotion_id, m.name AS emotion_name, e.created_at "
            "FROM journal_entries e LEFT JOIN emotions m ON m.id = e.emotion_id "
            "WHERE e.user_id = ?"
        )
        params: list[Any] = [user_id]
        if since is not None:
            sql += " AND e.created_at >= ?"
            params.append(since)

        conn = self._connect()
        try:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]
        finally:
            conn.close()

    # --- CRUD ---

    def create_entry(
        self,
        user_id: str,
        content: str,
        title: Optional[str] = None,
        mood_score: Optional[float] = None,
        weather_data: Any = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
        emotion_id: Optional[int] = None,
        emotion_analysis: Any = None,
        emotion_source: Optional[str] = None,
        created_at: Optional[str] = None,
    ) -> dict:
        """Insert a journal entry and return it.

        Raises:
            ValueError: content too long or emotion_source invalid.
        """
        if len(content) > MAX_CONTENT_LENGTH:
            raise ValueError(f"Content exceeds max length ({MAX_CONTENT_LENGTH} chars)")
        if emotion_source is not None and emotion_source not in EMOTION_SOURCES:
            raise ValueError(f"Invalid emotion_source '{emotion_source}'")

        now = utc_now()
        entry = {
            "id": uuid.uuid4().hex,
            "user_id": user_id,
            "title": title,
            "content": content,
            "created_at": created_at or now,
            "updated_at": now,
            "mood_score": mood_score,
            "weather_data": weather_data,
            "latitude": latitude,
            "longitude": longitude,
            "location_name": location_name,
            "emotion_id": emotion_id,
            "emotion_analysis": emotion_analysis,
            "emotion_source": emotion_source,
        }
        conn = self._connect()
        try:
            conn.execute(
                f"INSERT INTO journal_entries ({', '.join(ENTRY_COLUMNS)}) "
                f"VALUES ({', '.join('?' for _ in ENTRY_COLUMNS)})",
                [_serialize(c, entry[c]) for c in ENTRY_COLUMNS],
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("journal.entry_created", entry_id=entry["id"], user_id=user_id)
        return self.get_entry(entry["id"], user_id)

    def get_entry(self, entry_id: str, user_id: str) -> Optional[dict]:
        """Entry owned by user, or None."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    def list_entries(self, user_id: str, limit: int = 50) -> list[dict]:
        """User's entries, newest first."""
        return self.fetch_entries(user_id, ascending=False, limit=limit)

    def update_entry(self, entry_id: str, user_id: str, **fields) -> Optional[dict]:
        """Update whitelisted fields; returns the entry or None if not found."""
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")
        if fields.get("content") and len(fields["content"]) > MAX_CONTENT_LENGTH:
            raise ValueError(f"Content exceeds max length ({MAX_CONTENT_LENGTH} chars)")

        fields["updated_at"] = utc_now()
        assignments = ", ".join(f"{name} = ?" for name in fields)
        params = [_serialize(name, value) for name, value in fields.items()]
        conn = self._connect()
        try:
            cur = conn.execute(
                f"UPDATE journal_entries SET {assignments} WHERE id = ? AND user_id = ?",
                [*params, entry_id, user_id],
            )
            conn.commit()
            if cur.rowcount == 0:
                return None
        finally:
            conn.close()
        return self.get_entry(entry_id, user_id)

    def delete_entry(self, entry_id: str, user_id: str) -> bool:
        """Delete if owned by user. Returns True if deleted."""
        conn = self._connect()
        try:
            cur = conn.execute(
                "DELETE FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    # --- Insights ---

    def save_insight(self, journal_id: str, user_id: str, text: str) -> dict:
        """Store the generated insight for an entry, replacing any earlier one."""
        generated_at = utc_now()
        conn = self._connect()
        try:
            conn.execute(
                """INSERT INTO journal_insights (journal_id, user_id, insight_text, generated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(journal_id) DO UPDATE SET
                       insight_text = excluded.insight_text,
                       generated_at = excluded.generated_at""",
                (journal_id, user_id, text, generated_at),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("journal.insight_saved", entry_id=journal_id, user_id=user_id)
        return {"journal_id": journal_id, "insight_text": text, "generated_at": generated_at}

    def get_insight(self, journal_id: str, user_id: str) -> Optional[dict]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM journal_insights WHERE journal_id = ? AND user_id = ?",
                (journal_id, user_id),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()
