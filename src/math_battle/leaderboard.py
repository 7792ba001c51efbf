"""
math_battle.leaderboard — Leaderboard aggregation
=================================================

Pure functions that fold a finished match into per-player stats.
Nothing here touches storage; the caller persists the returned list.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ._config import LEADERBOARD_SIZE
from ._battle.match_result import MatchResult
from .types import LeaderboardEntry


def _win_rate(wins: int, games_played: int) -> float:
    return wins / games_played if games_played else 0.0


def _record_game(
    entry: LeaderboardEntry,
    now: datetime,
    won: bool,
    duration: Optional[float] = None,
) -> LeaderboardEntry:
    wins = entry.wins + (1 if won else 0)
    games_played = entry.games_played + 1
    best_time = entry.best_time
    if won and duration is not None:
        best_time = min(best_time, duration)
    return entry.model_copy(update={
        "wins": wins,
        "games_played": games_played,
        "win_rate": _win_rate(wins, games_played),
        "best_time": best_time,
        "last_updated": now,
    })


def apply_match_result(
    entries: Iterable[LeaderboardEntry],
    result: MatchResult,
    now: Optional[datetime] = None,
) -> List[LeaderboardEntry]:
    """
    Fold one finished match into the leaderboard.

    Args:
        entries: Current leaderboard, one entry per player name
        result: The finished match
        now: Timestamp for updated entries; current UTC time by default

    Returns:
        New list of entries. Existing order is kept and new players are
        appended. The input entries are not modified.
    """
    now = now or datetime.now(timezone.utc)
    by_name: Dict[str, LeaderboardEntry] = {}
    for entry in entries:
        by_name[entry.player_name] = entry

    def current(name: str) -> LeaderboardEntry:
        return by_name.get(name) or LeaderboardEntry(player_name=name, last_updated=now)

    if result.is_tie:
        for name in dict.fromkeys(result.player_names):
            by_name[name] = _record_game(current(name), now, won=False)
    else:
        by_name[result.winner_name] = _record_game(
            current(result.winner_name), now, won=True, duration=result.duration_seconds,
        )
        by_name[result.loser_name] = _record_game(current(result.loser_name), now, won=False)

    return list(by_name.values())


def rank_entries(
    entries: Iterable[LeaderboardEntry], limit: Optional[int] = LEADERBOARD_SIZE
) -> List[LeaderboardEntry]:
    """Order by win rate, then wins, then fastest best time."""
    ranked = sorted(entries, key=lambda e: (-e.win_rate, -e.wins, e.best_time))
    return ranked if limit is None else ranked[:limit]


def format_best_time(seconds: float) -> str:
    """Render a best time as m:ss, or a dash before the first win."""
    if not math.isfinite(seconds):
        return "-"
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"
