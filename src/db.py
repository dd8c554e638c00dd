"""Shared SQLite helpers: WAL mode, row factory, foreign keys."""

import sqlite3
from pathlib import Path


def wal_connect(
    db_path: str | Path,
    row_factory: bool = True,
    timeout: float = 5.0,
) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode and FK enforcement.

    Args:
        db_path: Path to database file.
        row_factory: If True, rows come back as sqlite3.Row.
        timeout: Seconds to wait on a locked database.
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=timeout)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    if row_factory:
        conn.row_factory = sqlite3.Row
    return conn
