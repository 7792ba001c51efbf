# Area: Storage
"""SQLite persistence for the leaderboard."""

from .database import init_database, get_connection
from .repo_leaderboard import LeaderboardRepository

__all__ = [
    "init_database",
    "get_connection",
    "LeaderboardRepository",
]
