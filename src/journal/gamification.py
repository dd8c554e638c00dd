"""Points, writing streaks and achievements earned by journaling.

Lives in journal.db beside the entries. Every saved entry earns base points;
streak and first-entry achievements add their reward on top, while point
milestones are badges only.
"""

import sqlite3
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

import structlog

from db import wal_connect

logger = structlog.get_logger()

BASE_ENTRY_POINTS = 10


@dataclass(frozen=True)
class Achievement:
    name: str
    description: str
    points_reward: int


FIRST_ENTRY = Achievement("First Journal", "Wrote your very first journal entry.", 20)

# Awarded when the streak reaches exactly this many days
STREAK_ACHIEVEMENTS: dict[int, Achievement] = {
    days: Achievement(f"{days}-Day Streak", f"Journaled {days} days in a row.", days * 10)
    for days in (3, 7, 14, 30)
}

# Awarded when total points cross the threshold; reward is not added
POINT_MILESTONES: dict[int, Achievement] = {
    points: Achievement(f"Point Collector: {points}", f"Reached {points} total points.", 0)
    for points in (100, 250, 500)
}

ACHIEVEMENTS: tuple[Achievement, ...] = (
    FIRST_ENTRY,
    *STREAK_ACHIEVEMENTS.values(),
    *POINT_MILESTONES.values(),
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id          TEXT PRIMARY KEY,
    total_points     INTEGER NOT NULL DEFAULT 0,
    current_streak   INTEGER NOT NULL DEFAULT 0,
    last_entry_date  TEXT,
    created_at       TEXT NOT NULL,
    updated_at       TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS achievements (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL UNIQUE,
    description    TEXT,
    points_reward  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS user_achievements (
    user_id         TEXT NOT NULL,
    achievement_id  INTEGER NOT NULL REFERENCES achievements(id),
    earned_at       TEXT NOT NULL,
    PRIMARY KEY (user_id, achievement_id)
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def next_streak(current: int, last_entry: Optional[date], entry_day: date) -> int:
    """Streak after writing on ``entry_day``.

    The day after the last entry extends the streak, a gap resets it to 1, and
    a same-day or backdated entry leaves it unchanged.
    """
    if last_entry is None:
        return 1
    gap = (entry_day - last_entry).days
    if gap == 1:
        return current + 1
    if gap > 1:
        return 1
    return current or 1


class GamificationStore:
    """Per-user profile (points, streak) and earned achievements."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self.init_db()

    def _connect(self) -> sqlite3.Connection:
        return wal_connect(self.db_path)

    def init_db(self) -> None:
        """Create tables and seed the achievement catalogue."""
        conn = self._connect()
        try:
            conn.executescript(_SCHEMA)
            conn.executemany(
                "INSERT OR IGNORE INTO achievements (name, description, points_reward) "
                "VALUES (?, ?, ?)",
                [(a.name, a.description, a.points_reward) for a in ACHIEVEMENTS],
            )
            conn.commit()
        finally:
            conn.close()

    def _profile(self, conn: sqlite3.Connection, user_id: str) -> dict:
        now = _now()
        conn.execute(
            "INSERT OR IGNORE INTO user_profiles (user_id, created_at, updated_at) "
            "VALUES (?, ?, ?)",
            (user_id, now, now),
        )
        row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)).fetchone()
        return dict(row)

    def _award(
        self, conn: sqlite3.Connection, user_id: str, achievement: Achievement
    ) -> Optional[dict]:
        """Grant once per user; returns the achievement row only when newly earned."""
        row = conn.execute(
            "SELECT id, name, description, points_reward FROM achievements WHERE name = ?",
            (achievement.name,),
        ).fetchone()
        if row is None:
            return None
        cur = conn.execute(
            "INSERT OR IGNORE INTO user_achievements (user_id, achievement_id, earned_at) "
            "VALUES (?, ?, ?)",
            (user_id, row["id"], _now()),
        )
        if cur.rowcount == 0:
            return None
        logger.info("gamification.achievement_awarded", user_id=user_id, achievement=row["name"])
        return dict(row)

    def record_entry(self, user_id: str, entry_day: date) -> dict:
        """Apply points, streak and achievements for an entry written on ``entry_day``.

        Returns:
            {success, currentStreak, finalTotalPoints, newlyAwardedAchievements,
            pointsEarnedThisEntry}
        """
        conn = self._connect()
        try:
            profile = self._profile(conn, user_id)
            initial_points = profile["total_points"]
            streak = profile["current_streak"]
            last = profile["last_entry_date"]
            last_entry = date.fromisoformat(last) if last else None

            earned = BASE_ENTRY_POINTS
            awarded = []

            if last_entry is None and initial_points == 0 and streak == 0:
                first = self._award(conn, user_id, FIRST_ENTRY)
                if first:
                    awarded.append(first)
                    earned += first["points_reward"]

            streak = next_streak(streak, last_entry, entry_day)
            if streak in STREAK_ACHIEVEMENTS:
                badge = self._award(conn, user_id, STREAK_ACHIEVEMENTS[streak])
                if badge:
                    awarded.append(badge)
                    earned += badge["points_reward"]

            final_points = initial_points + earned
            if last_entry is not None and entry_day < last_entry:
                entry_day = last_entry
            conn.execute(
                "UPDATE user_profiles SET total_points = ?, current_streak = ?, "
                "last_entry_date = ?, updated_at = ? WHERE user_id = ?",
                (final_points, streak, entry_day.isoformat(), _now(), user_id),
            )

            for threshold, milestone in POINT_MILESTONES.items():
                if initial_points < threshold <= final_points:
                    badge = self._award(conn, user_id, milestone)
                    if badge:
                        awarded.append(badge)

            conn.commit()
        finally:
            conn.close()

        logger.info(
            "gamification.entry_recorded",
            user_id=user_id,
            points=earned,
            streak=streak,
            awarded=len(awarded),
        )
        return {
            "success": True,
            "currentStreak": streak,
            "finalTotalPoints": final_points,
            "newlyAwardedAchievements": awarded,
            "pointsEarnedThisEntry": earned,
        }

    def get_profile(self, user_id: str) -> dict:
        """Profile totals plus earned achievements, newest first."""
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)
            ).fetchone()
            earned = conn.execute(
                """SELECT a.name, a.description, a.points_reward, ua.earned_at
                   FROM user_achievements ua JOIN achievements a ON a.id = ua.achievement_id
                   WHERE ua.user_id = ?
                   ORDER BY ua.earned_at DESC, a.id DESC""",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()

        return {
            "totalPoints": row["total_points"] if row else 0,
            "currentStreak": row["current_streak"] if row else 0,
            "lastEntryDate": row["last_entry_date"] if row else None,
            "achievements": [dict(a) for a in earned],
        }
