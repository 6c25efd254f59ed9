"""
Tool: Hydration Storage
Purpose: Load/store capability for profile, drink logs, responses and weights

Values are JSON documents stored under a fixed set of keys. Reads return
None for a missing key; callers decide the default.

Usage:
    from hydrotime.storage import SQLiteStore, load_weights, save_weights

    store = SQLiteStore(Path("data/hydration.db"))
    weights = load_weights(store)      # DEFAULT_WEIGHTS on first run
    save_weights(store, new_weights)

Database: data/hydration.db
    - kv_store: key -> JSON value
"""

from __future__ import annotations

import copy
import json
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

from hydrotime.learning.models import DEFAULT_WEIGHTS, NetworkWeights
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)

STORAGE_KEYS = {
    "profile": "hydration_profile",
    "logs": "hydration_logs",
    "responses": "hydration_responses",
    "weights": "neural_weights",
}


class KeyValueStore(ABC):
    """Anything that can get and set JSON-compatible values by key."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key was never set."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""


class MemoryStore(KeyValueStore):
    """Dict-backed store. Values are deep-copied so callers cannot alias them."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class SQLiteStore(KeyValueStore):
    """SQLite-backed store; one connection per operation."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        return conn

    def get(self, key: str) -> Any | None:
        conn = self.get_connection()
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        conn = self.get_connection()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()


def load_weights(store: KeyValueStore) -> NetworkWeights:
    """Stored weights, or DEFAULT_WEIGHTS when none have been saved yet."""
    data = store.get(STORAGE_KEYS["weights"])
    if not data:
        return DEFAULT_WEIGHTS
    return NetworkWeights.from_dict(data)


def save_weights(store: KeyValueStore, weights: NetworkWeights) -> None:
    store.set(STORAGE_KEYS["weights"], weights.to_dict())
    logger.debug("weights_saved")
