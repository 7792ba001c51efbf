# Area: Storage
"""
math_battle._storage.repo_leaderboard — Leaderboard Repository
==============================================================

Persists LeaderboardEntry rows. Infinite best times (no win yet) are
stored as NULL.
"""

import math
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

from ..types import LeaderboardEntry
from .database import DEFAULT_DB_PATH, get_connection

_UPSERT = """
    INSERT INTO leaderboard_entries
    (player_name, wins, games_played, win_rate, best_time, last_updated)
    VALUES (?, ?, ?, ?, ?, ?)
    ON CONFLICT(player_name) DO UPDATE SET
        wins = excluded.wins,
        games_played = excluded.games_played,
        win_rate = excluded.win_rate,
        best_time = excluded.best_time,
        last_updated = excluded.last_updated
"""


def _to_row(entry: LeaderboardEntry) -> tuple:
    best_time = entry.best_time if math.isfinite(entry.best_time) else None
    return (
        entry.player_name,
        entry.wins,
        entry.games_played,
        entry.win_rate,
        best_time,
        entry.last_updated.isoformat(),
    )


def _from_row(row: sqlite3.Row) -> LeaderboardEntry:
    best_time = row["best_time"]
    return LeaderboardEntry(
        player_name=row["player_name"],
        wins=row["wins"],
        games_played=row["games_played"],
        win_rate=row["win_rate"],
        best_time=math.inf if best_time is None else best_time,
        last_updated=datetime.fromisoformat(row["last_updated"]),
    )


class LeaderboardRepository:
    """
    Repository for the leaderboard_entries table.

    One row per player name; rows are upserted, never deleted.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        # Commits on success, rolls back on error, always closes
        with closing(get_connection(self.db_path)) as conn, conn:
            yield conn

    def get_entry(self, player_name: str) -> Optional[LeaderboardEntry]:
        """Get one player's entry, or None if they never played."""
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM leaderboard_entries WHERE player_name = ?",
                (player_name,),
            ).fetchone()
        return _from_row(row) if row else None

    def get_all_entries(self) -> List[LeaderboardEntry]:
        """Get every entry, oldest player first."""
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM leaderboard_entries ORDER BY rowid"
            ).fetchall()
        return [_from_row(row) for row in rows]

    def save_entries(self, entries: Iterable[LeaderboardEntry]) -> None:
        """Upsert entries in a single transaction."""
        with self._transaction() as conn:
            conn.executemany(_UPSERT, [_to_row(e) for e in entries])
