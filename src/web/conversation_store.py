"""Chat conversation persistence: per-user history in the users database."""

import uuid
from datetime import datetime, timezone

from web.user_store import _get_conn

TITLE_MAX_CHARS = 50


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_title(message: str) -> str:
    """Opening message, truncated."""
    message = message.strip()
    if len(message) > TITLE_MAX_CHARS:
        return message[:TITLE_MAX_CHARS] + "..."
    return message or "New conversation"


def create_conversation(user_id: str, title: str, db_path=None) -> str:
    """Create conversation, return its id."""
    conv_id = uuid.uuid4().hex
    now = _now()
    conn = _get_conn(db_path)
    try:
        conn.execute(
            "INSERT INTO conversations (id, user_id, title, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
            (conv_id, user_id, make_title(title), now, now),
        )
        conn.commit()
        return conv_id
    finally:
        conn.close()


def list_conversations(user_id: str, limit: int = 50, db_path=None) -> list[dict]:
    """Conversations with at least one message, most recently active first.

    Each carries ``lastMessage`` (content of the newest message) and
    ``messageCount``.
    """
    conn = _get_conn(db_path)
    try:
        rows = conn.execute(
            """
            SELECT c.id, c.title, c.created_at, c.updated_at,
                   COUNT(m.id) AS message_count,
                   (SELECT content FROM chat_messages
                    WHERE conversation_id = c.id
                    ORDER BY created_at DESC LIMIT 1) AS last_message
            FROM conversations c
            JOIN chat_messages m ON m.conversation_id = c.id
            WHERE c.user_id = ?
            GROUP BY c.id
            ORDER BY c.updated_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        return [
            {
                "id": r["id"],
                "title": r["title"],
                "created_at": r["created_at"],
                "updated_at": r["updated_at"],
                "lastMessage": r["last_message"] or "",
                "messageCount": r["message_count"],
            }
            for r in rows
        ]
    finally:
        conn.close()


def add_message(conv_id: str, role: str, content: str, db_path=None) -> str:
    """Add message to conversation and bump its updated_at; return message id."""
    msg_id = uuid.uuid4().hex
    now = _now()
    conn = _get_conn(db_path)
    try:
        conn.execute(
            "INSERT INTO chat_messages (id, conversation_id, role, content, created_at) VALUES (?, ?, ?, ?, ?)",
            (msg_id, conv_id, role, content, now),
        )
        conn.execute(
            "UPDATE conversations SET updated_at = ? WHERE id = ?",
            (now, conv_id),
        )
        conn.commit()
        return msg_id
    finally:
        conn.close()


def get_messages(conv_id: str, limit: int | None = None, db_path=None) -> list[dict]:
    """Messages oldest first; with ``limit``, only the last N."""
    conn = _get_conn(db_path)
    try:
        if limit is None:
            rows = conn.execute(
                "SELECT id, role, content, created_at FROM chat_messages "
                "WHERE conversation_id = ? ORDER BY created_at ASC",
                (conv_id,),
            ).fetchall()
        else:
            rows = conn.execute(
                """
                SELECT id, role, content, created_at FROM (
                    SELECT id, role, content, created_at
                    FROM chat_messages
                    WHERE conversation_id = ?
                    ORDER BY created_at DESC
                    LIMIT ?
                ) sub ORDER BY created_at ASC
                """,
                (conv_id, limit),
            ).fetchall()
        return [dict(r) for r in rows]
    finally:
        conn.close()


def conversation_belongs_to(conv_id: str, user_id: str, db_path=None) -> bool:
    """Check if conversation belongs to user."""
    conn = _get_conn(db_path)
    try:
        row = conn.execute(
            "SELECT 1 FROM conversations WHERE id = ? AND user_id = ?",
            (conv_id, user_id),
        ).fetchone()
        return row is not None
    finally:
        conn.close()
