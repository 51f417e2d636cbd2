"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (backend HTTP API, local persistence).
"""

# HTTP
from banana_client.shared.infrastructure.http.api_client import BananaApiClient

# Persistence
from banana_client.shared.infrastructure.persistence.storage import KeyValueStorage, MemoryStorage
from banana_client.shared.infrastructure.persistence.duckdb_storage import DuckDBStorage

__all__ = [
    # HTTP
    "BananaApiClient",
    # Persistence
    "KeyValueStorage",
    "MemoryStorage",
    "DuckDBStorage",
]
