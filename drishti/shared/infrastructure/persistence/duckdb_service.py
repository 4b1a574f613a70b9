"""DuckDB Persistence Service for INFRA-DRISHTI.

Stores UI preferences (theme), dashboard users and the current session.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import duckdb

logger = logging.getLogger(__name__)

# Target schema version for new databases
TARGET_SCHEMA_VERSION = 1

# The single row holding the signed-in user
SESSION_SLOT = 1


class DuckDBPersistenceService:
    """Manages persistent dashboard state using DuckDB.

    All calls are synchronous and cheap; the dashboard reads the session on
    every transition into the admin view.
    """

    def __init__(self, db_path: Optional[str] = None):
        # No path means a throwaway in-memory database
        self.db_path = db_path or ":memory:"
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

    def start(self) -> None:
        """Open the database and create the schema."""
        if self.conn is not None:
            return
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(self.db_path)
        self._create_schema()
        logger.info(f"Database initialized: {self.db_path}")

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def _require_conn(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            raise RuntimeError("DuckDBPersistenceService not started")
        return self.conn

    def _create_schema(self) -> None:
        conn = self._require_conn()

        conn.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key VARCHAR PRIMARY KEY,
                value VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                username VARCHAR PRIMARY KEY,
                display_name VARCHAR,
                role VARCHAR NOT NULL,
                password_hash VARCHAR NOT NULL,
                salt VARCHAR NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS session (
                slot INTEGER PRIMARY KEY,
                username VARCHAR NOT NULL,
                started_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_info (
                version INTEGER NOT NULL
            )
        """)
        row = conn.execute("SELECT version FROM schema_info").fetchone()
        if row is None:
            conn.execute("INSERT INTO schema_info VALUES (?)", (TARGET_SCHEMA_VERSION,))

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def get_preference(self, key: str) -> Optional[str]:
        row = self._require_conn().execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set_preference(self, key: str, value: str) -> None:
        self._require_conn().execute("""
            INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)
        """, (key, value))

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def insert_user(
        self,
        username: str,
        role: str,
        password_hash: str,
        salt: str,
        display_name: Optional[str] = None,
    ) -> None:
        self._require_conn().execute("""
            INSERT INTO users (username, display_name, role, password_hash, salt)
            VALUES (?, ?, ?, ?, ?)
        """, (username, display_name, role, password_hash, salt))

    def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        row = self._require_conn().execute("""
            SELECT username, display_name, role, password_hash, salt
            FROM users WHERE username = ?
        """, (username,)).fetchone()
        if row is None:
            return None
        return {
            "username": row[0],
            "display_name": row[1],
            "role": row[2],
            "password_hash": row[3],
            "salt": row[4],
        }

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def set_session_user(self, username: str) -> None:
        conn = self._require_conn()
        conn.execute("DELETE FROM session WHERE slot = ?", (SESSION_SLOT,))
        conn.execute("INSERT INTO session (slot, username) VALUES (?, ?)", (SESSION_SLOT, username))

    def clear_session(self) -> None:
        self._require_conn().execute("DELETE FROM session WHERE slot = ?", (SESSION_SLOT,))

    def get_session_username(self) -> Optional[str]:
        row = self._require_conn().execute(
            "SELECT username FROM session WHERE slot = ?", (SESSION_SLOT,)
        ).fetchone()
        return row[0] if row else None
