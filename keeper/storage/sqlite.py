# keeper/storage/sqlite.py
import os
import sqlite3
from pathlib import Path
from typing import Optional

from . import KeyValueStore


class SQLiteStore(KeyValueStore):
    """SQLite-backed key-value store. Each put/delete is one autocommitted statement."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            env_path = os.environ.get("KEEPER_DB_PATH")
            db_path = env_path if env_path else Path.cwd() / "keeper-state.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = self.db_path.resolve()

        self._conn: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self):
        self._conn = sqlite3.connect(str(self.db_path), isolation_level=None)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_schema()

    def _create_schema(self):
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS state (
                key     TEXT PRIMARY KEY,
                value   BLOB NOT NULL
            )
        """)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Storage connection is closed")
        return self._conn

    def get(self, key: str) -> Optional[bytes]:
        row = self.conn.execute("SELECT value FROM state WHERE key = ?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO state (key, value) VALUES (?, ?)",
            (key, sqlite3.Binary(value)),
        )

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM state WHERE key = ?", (key,))

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None
