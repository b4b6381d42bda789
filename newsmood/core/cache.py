"""Local SQLite caching utility for news API pages."""

import hashlib
import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional

from newsmood.core.logger import logger


def make_cache_key(endpoint: str, params: Dict[str, Any]) -> str:
    """Build a stable cache key from an endpoint and its query params.

    Params are sorted so that key order does not matter; ``None`` values are
    dropped since they are never sent.
    """
    clean = {k: v for k, v in sorted(params.items()) if v is not None}
    digest = hashlib.sha1(json.dumps(clean, sort_keys=True, default=str).encode("utf-8"))
    return f"{endpoint}:{digest.hexdigest()}"


class SQLiteCache:
    """A minimal SQLite-backed key-value cache for JSON API responses."""

    def __init__(self, db_path: str = "output/.cache.db") -> None:
        """
        Initialize the SQLite cache.

        Args:
            db_path (str): Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a connection to the SQLite database."""
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        """Create the cache table if it doesn't exist."""
        with self._get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS api_cache (
                    cache_key TEXT PRIMARY KEY,
                    response_data TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a cached response parsed as a dictionary.

        Args:
            key (str): The cache key.

        Returns:
            Optional[Dict[str, Any]]: The parsed JSON response if found, else None.
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT response_data FROM api_cache WHERE cache_key = ?",
                    (key,)
                )
                row = cursor.fetchone()
                if row:
                    logger.debug(f"Cache hit for key: {key}")
                    return json.loads(row[0])
        except sqlite3.Error as e:
            logger.error(f"SQLite error retrieving cache for key {key}: {e}")
        except json.JSONDecodeError as e:
            logger.error(f"JSON decode error for cached key {key}: {e}")

        logger.debug(f"Cache miss for key: {key}")
        return None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        """
        Store a dictionary response as a JSON blob in the cache.

        Args:
            key (str): The cache key.
            value (Dict[str, Any]): The response dictionary to store.
        """
        try:
            value_str = json.dumps(value)
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO api_cache (cache_key, response_data)
                    VALUES (?, ?)
                    """,
                    (key, value_str)
                )
        except (sqlite3.Error, TypeError) as e:
            logger.error(f"Error saving to cache for key {key}: {e}")
