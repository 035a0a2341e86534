"""SQLite storage adapter.

Implements the core OptionStorePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Optional

from core.errors import StorageUnavailable


class SQLiteOptionStore:
    """Thin SQLite wrapper that satisfies the OptionStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - options: one JSON-encoded value per option name
        """

        try:
            with self._connect() as conn:
                # options mirrors a host CMS options table.
                # Fields:
                # - option_name: composed {prefix}_{entity}_{suffix} key (PRIMARY KEY)
                # - option_value: JSON-encoded scalar (timestamp or flag)
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS options (
                        option_name TEXT PRIMARY KEY,
                        option_value TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot initialize option store: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded option value, or None if absent."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT option_value FROM options WHERE option_name = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot read option {key}: {e}") from e
        if not row:
            return None
        try:
            return json.loads(row["option_value"])
        except ValueError as e:
            raise StorageUnavailable(f"Cannot decode option {key}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        """Upsert an option value."""

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO options (option_name, option_value)
                    VALUES (?, ?)
                    ON CONFLICT(option_name) DO UPDATE SET option_value = excluded.option_value
                    """,
                    (key, json.dumps(value)),
                )
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot write option {key}: {e}") from e

    def add(self, key: str, value: Any) -> bool:
        """Insert an option only if it does not exist."""

        try:
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    INSERT OR IGNORE INTO options (option_name, option_value)
                    VALUES (?, ?)
                    """,
                    (key, json.dumps(value)),
                )
                return cur.rowcount == 1
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot add option {key}: {e}") from e

    def delete(self, key: str) -> None:
        """Delete an option; missing keys are ignored."""

        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM options WHERE option_name = ?", (key,))
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot delete option {key}: {e}") from e
