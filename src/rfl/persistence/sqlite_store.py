from __future__ import annotations

import sqlite3
from contextlib import closing
from pathlib import Path

from rfl.core import StorageError, now_utc
from rfl.persistence.migrations import MigrationRunner


class SqliteStorage:
    """Durable key-value store standing in for browser local storage."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def initialize_schema(self) -> None:
        with closing(self.connect()) as conn:
            MigrationRunner(conn).apply()

    def get_item(self, key: str) -> str | None:
        try:
            with closing(self.connect()) as conn:
                row = conn.execute("SELECT value FROM local_storage WHERE storage_key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"failed to read '{key}': {exc}") from exc
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        try:
            with closing(self.connect()) as conn, conn:
                conn.execute(
                    """
                    INSERT INTO local_storage(storage_key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(storage_key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, value, now_utc().isoformat()),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"failed to write '{key}': {exc}") from exc
