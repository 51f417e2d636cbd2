"""DuckDB-backed key-value storage.

Survives process restarts; multi-key writes run in one transaction.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

import duckdb

from banana_client.shared.infrastructure.persistence.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class DuckDBStorage(KeyValueStorage):
    """Persists session keys in a single ``kv_store`` table.

    Writes are delete-then-insert inside one transaction, one row per key.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or ":memory:"
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[duckdb.DuckDBPyConnection] = duckdb.connect(self.db_path)
        self._create_schema()
        logger.info(f"Session storage initialized: {self.db_path}")

    def _create_schema(self) -> None:
        self._connection().execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key VARCHAR NOT NULL,
                value VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self.conn is None:
            raise RuntimeError(f"Storage {self.db_path} is closed")
        return self.conn

    def get(self, key: str) -> Optional[str]:
        row = self._connection().execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.update({key: value})

    def remove(self, key: str) -> None:
        self.update({key: None})

    def update(self, items: Mapping[str, Optional[str]]) -> None:
        conn = self._connection()
        conn.execute("BEGIN TRANSACTION")
        try:
            for key, value in items.items():
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                if value is not None:
                    conn.execute(
                        "INSERT INTO kv_store (key, value) VALUES (?, ?)",
                        (key, value),
                    )
            conn.execute("COMMIT")
        except Exception:
            logger.error(f"Rolling back write of {sorted(items)} to {self.db_path}")
            conn.execute("ROLLBACK")
            raise

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
