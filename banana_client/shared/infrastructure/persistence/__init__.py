"""Persistence adapters (memory, DuckDB)."""

from banana_client.shared.infrastructure.persistence.storage import KeyValueStorage, MemoryStorage
from banana_client.shared.infrastructure.persistence.duckdb_storage import DuckDBStorage

__all__ = ["KeyValueStorage", "MemoryStorage", "DuckDBStorage"]
