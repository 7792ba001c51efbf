# Area: Storage
"""
math_battle._storage.database — Leaderboard database file
=========================================================

Opens the SQLite leaderboard file and creates its table on first use.
The table layout lives next to this module in schema.sql.
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

logger = logging.getLogger("math_battle.storage")

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
DEFAULT_DB_PATH = "math_battle.db"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Open the leaderboard file; rows come back as ``sqlite3.Row``."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = DEFAULT_DB_PATH) -> None:
    """
    Create the leaderboard table if the file does not have it yet.

    Safe to call on every start; existing rows are kept.
    """
    with closing(get_connection(db_path)) as conn, conn:
        conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
    logger.info(f"Leaderboard ready at {db_path}")
