"""SQLite store for web users, chat history and usage events.

The journal itself lives in journal.db (see journal.store); this database only
holds what the web layer owns: the users seen in session tokens, their chat
conversations with the assistant, and a lightweight usage event log.
"""

import json as _json
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from db import wal_connect

logger = structlog.get_logger()

_DEFAULT_DB_PATH = Path(os.environ.get("ECOJOURNAL_HOME", Path.home() / "ecojournal")) / "users.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    email         TEXT,
    name          TEXT,
    created_at    TEXT NOT NULL,
    last_seen_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS conversations (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title       TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_conversations_user ON conversations(user_id, updated_at DESC);

CREATE TABLE IF NOT EXISTS chat_messages (
    id               TEXT PRIMARY KEY,
    conversation_id  TEXT NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
    role             TEXT NOT NULL CHECK(role IN ('user', 'assistant')),
    content          TEXT NOT NULL,
    created_at       TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_chat_messages_conv ON chat_messages(conversation_id, created_at);

CREATE TABLE IF NOT EXISTS usage_events (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    event       TEXT NOT NULL,
    user_id     TEXT,
    metadata    TEXT,
    created_at  TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_usage_events ON usage_events(event, created_at DESC);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def set_db_path(db_path: Path) -> None:
    """Point the module at the configured users database."""
    global _DEFAULT_DB_PATH
    _DEFAULT_DB_PATH = Path(db_path)


def _get_conn(db_path: Path | None = None) -> sqlite3.Connection:
    return wal_connect(db_path or _DEFAULT_DB_PATH, row_factory=True)


def init_db(db_path: Path | None = None) -> None:
    """Create tables if they don't exist."""
    conn = _get_conn(db_path)
    try:
        conn.executescript(_SCHEMA)
        conn.commit()
    finally:
        conn.close()


def get_or_create_user(
    user_id: str,
    email: str | None = None,
    name: str | None = None,
    db_path: Path | None = None,
) -> dict[str, Any]:
    """Upsert the token's user and bump last_seen_at.

    Claims missing from the token leave stored values untouched.
    """
    now = _now()
    conn = _get_conn(db_path)
    try:
        conn.execute(
            """INSERT INTO users (id, email, name, created_at, last_seen_at)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                   email = COALESCE(excluded.email, users.email),
                   name = COALESCE(excluded.name, users.name),
                   last_seen_at = excluded.last_seen_at""",
            (user_id, email, name, now, now),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    finally:
        conn.close()
    if row["created_at"] == now:
        logger.info("user_store.user_created", user_id=user_id)
    return dict(row)


def log_event(
    event: str,
    user_id: str | None = None,
    metadata: dict | None = None,
    db_path: Path | None = None,
) -> None:
    """Append a usage event. Storage errors are logged and dropped."""
    try:
        conn = _get_conn(db_path)
        try:
            conn.execute(
                "INSERT INTO usage_events (event, user_id, metadata, created_at) VALUES (?, ?, ?, ?)",
                (event, user_id, _json.dumps(metadata) if metadata else None, _now()),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning("user_store.log_event_failed", event=event, error=str(e))
