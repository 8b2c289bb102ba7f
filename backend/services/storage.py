"""
Key-value storage used for best-score persistence.

Provides an in-memory store and a SQLite-backed store with environment-aware
path selection. Neither catches its own errors; callers decide how to
recover.
"""

import json
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional


DEFAULT_PREFIX = "snake-game-"


def get_database_path() -> str:
    """
    Determine the SQLite file used for persistence.

    Returns:
        SNAKE_DB_PATH if set, otherwise backend/snake.db.
    """
    env_path = os.getenv('SNAKE_DB_PATH')
    if env_path:
        parent = os.path.dirname(env_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        return env_path

    backend_dir = Path(__file__).resolve().parents[1]
    return str(backend_dir / 'snake.db')


class KeyValueStorage:
    """
    Base class/interface for storage backends.

    get() returns None for a missing key.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def is_available(self) -> bool:
        """Check the backend with a throwaway write."""
        test_key = "__storage_test__"
        try:
            self.set(test_key, test_key)
            self.remove(test_key)
            return True
        except Exception:
            return False


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        # Round-trip through JSON so both backends hand back equal values
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return sorted(self._data)


class SqliteStorage(KeyValueStorage):
    """
    SQLite-backed storage.

    Values are stored JSON-encoded in a single kv_store table; keys are
    namespaced with *prefix* so several games can share one file.
    """

    def __init__(self, db_path: Optional[str] = None, prefix: str = DEFAULT_PREFIX):
        self.db_path = db_path or get_database_path()
        self.prefix = prefix
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        return conn

    @contextmanager
    def connection(self) -> Generator[Any, None, None]:
        """
        Yield a (connection, cursor) pair, committing on success and
        rolling back on failure. The connection is always closed.
        """
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield conn, cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def _init_schema(self) -> None:
        with self.connection() as (_, cursor):
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def get(self, key: str) -> Optional[Any]:
        with self.connection() as (_, cursor):
            cursor.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (self.prefix + key,),
            )
            row = cursor.fetchone()
        return json.loads(row["value"]) if row else None

    def set(self, key: str, value: Any) -> None:
        with self.connection() as (_, cursor):
            cursor.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (self.prefix + key, json.dumps(value)),
            )

    def remove(self, key: str) -> None:
        with self.connection() as (_, cursor):
            cursor.execute("DELETE FROM kv_store WHERE key = ?", (self.prefix + key,))

    def clear(self) -> None:
        with self.connection() as (_, cursor):
            cursor.execute(
                "DELETE FROM kv_store WHERE substr(key, 1, ?) = ?",
                (len(self.prefix), self.prefix),
            )

    def keys(self) -> List[str]:
        with self.connection() as (_, cursor):
            cursor.execute(
                "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(self.prefix), self.prefix),
            )
            rows = cursor.fetchall()
        return [row["key"][len(self.prefix):] for row in rows]
