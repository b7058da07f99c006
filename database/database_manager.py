"""
Core database management for the SAR dog competition system.

The store is a key-value table: every value is a JSON document and carries a
version number that is bumped on each write. ``set`` accepts the version the
caller read so a read-modify-write can detect that someone else wrote in
between.
"""

import json
import sqlite3
import logging
from typing import Any, Dict, Optional, Tuple
from config.config_manager import ConfigManager
from models.errors import ConcurrentModification

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages the key-value store and its initialization."""

    def __init__(self, db_path: Optional[str] = None, config_file: str = "config.yaml"):
        self.config = ConfigManager.load_config(config_file)
        self.db_path = db_path or self.config.get('database_path', 'sardog.db')
        self.init_database()

    def init_database(self) -> None:
        """Initialize the database with required tables."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    version INTEGER NOT NULL DEFAULT 1,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            conn.commit()
            logger.info(f"Database initialized successfully at {self.db_path}")

    def get_connection(self):
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""
        value, _ = self.get_versioned(key, default)
        return value

    def get_versioned(self, key: str, default: Any = None) -> Tuple[Any, int]:
        """Return (value, version); a missing key has version 0."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value, version FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()

        if row is None:
            return default, 0
        return json.loads(row[0]), row[1]

    def set(self, key: str, value: Any, expected_version: Optional[int] = None) -> int:
        """
        Store value under key and return the new version.

        With expected_version the write only happens if the stored version
        still equals it; otherwise ConcurrentModification is raised and
        nothing is written.
        """
        payload = json.dumps(value, ensure_ascii=False)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            cursor.execute("SELECT version FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            current_version = row[0] if row else 0

            if expected_version is not None and expected_version != current_version:
                conn.rollback()
                logger.warning(f"Stale write to '{key}': expected version {expected_version}, found {current_version}")
                raise ConcurrentModification()

            new_version = current_version + 1
            if row:
                cursor.execute("""
                    UPDATE kv_store SET value = ?, version = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE key = ?
                """, (payload, new_version, key))
            else:
                cursor.execute("""
                    INSERT INTO kv_store (key, value, version) VALUES (?, ?, ?)
                """, (key, payload, new_version))

            conn.commit()

        logger.debug(f"Stored '{key}' at version {new_version}")
        return new_version

    def get_database_stats(self) -> Dict[str, int]:
        """Get basic database statistics."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*) FROM kv_store")
            keys = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM kv_store WHERE key LIKE 'profile:%'")
            profiles = cursor.fetchone()[0]

        competitions = self.get('competitions', []) or []
        participants = sum(len(c.get('participants') or []) for c in competitions)

        return {
            'keys': keys,
            'profiles': profiles,
            'competitions': len(competitions),
            'participants': participants
        }
