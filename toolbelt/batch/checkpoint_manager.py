"""
Checkpoint store for resumable imports.
Keeps, per category, how many batches of a given input have been submitted,
so an interrupted import can pick up where it stopped.
"""

import sqlite3
import logging
from datetime import datetime
from typing import Dict, List, Any
from pathlib import Path

from ..errors import CheckpointWriteError

logger = logging.getLogger(__name__)


class CheckpointManager:
    """
    Manages import checkpoints stored in a local SQLite database.

    Each checkpoint maps ``(category, fingerprint)`` to the number of batches
    fully submitted for that input. Reads never fail: a missing or unreadable
    database is an empty store. Writes raise CheckpointWriteError.
    """

    def __init__(self, db_path: str):
        """
        Initialize checkpoint manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def _ensure_database_exists(self, conn: sqlite3.Connection):
        """Create the checkpoints table if it doesn't exist."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS checkpoints (
                category TEXT NOT NULL,
                fingerprint TEXT NOT NULL,
                batch_index INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (category, fingerprint)
            )
        """)

    def load(self, category: str) -> Dict[str, int]:
        """
        Load all checkpoints of a category.

        Args:
            category: Checkpoint category (e.g. 'imports')

        Returns:
            Mapping of fingerprint to completed batch count, empty if the
            database is missing or unreadable
        """
        if not Path(self.db_path).exists():
            return {}

        try:
            conn = sqlite3.connect(self.db_path)
            try:
                rows = conn.execute("""
                    SELECT fingerprint, batch_index
                    FROM checkpoints
                    WHERE category = ?
                """, (category,)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not read checkpoints from {self.db_path}: {e}")
            return {}

        return {fingerprint: batch_index for fingerprint, batch_index in rows}

    def get(self, category: str, fingerprint: str) -> int:
        """Get the completed batch count for a fingerprint (0 if unknown)."""
        return self.load(category).get(fingerprint, 0)

    def save(self, category: str, fingerprint: str, batch_index: int):
        """
        Insert or update a single checkpoint.

        Args:
            category: Checkpoint category
            fingerprint: Input fingerprint
            batch_index: Number of batches fully submitted

        Raises:
            CheckpointWriteError: If the checkpoint could not be persisted
        """
        now = datetime.now().isoformat()

        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
            try:
                self._ensure_database_exists(conn)
                conn.execute("""
                    INSERT INTO checkpoints (category, fingerprint, batch_index, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(category, fingerprint)
                    DO UPDATE SET batch_index = excluded.batch_index,
                                  updated_at = excluded.updated_at
                """, (category, fingerprint, batch_index, now))
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise CheckpointWriteError(
                f"Could not save checkpoint {category}/{fingerprint} to {self.db_path}: {e}"
            ) from e

        logger.debug(f"Checkpoint saved: {category}/{fingerprint} - batch {batch_index}")

    def clear(self, category: str, fingerprint: str) -> bool:
        """
        Delete a single checkpoint.

        Returns:
            True if a checkpoint was deleted
        """
        if not Path(self.db_path).exists():
            return False

        try:
            conn = sqlite3.connect(self.db_path)
            try:
                self._ensure_database_exists(conn)
                cursor = conn.execute("""
                    DELETE FROM checkpoints
                    WHERE category = ? AND fingerprint = ?
                """, (category, fingerprint))
                conn.commit()
                deleted = cursor.rowcount > 0
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CheckpointWriteError(
                f"Could not clear checkpoint {category}/{fingerprint}: {e}"
            ) from e

        if deleted:
            logger.info(f"Cleared checkpoint {category}/{fingerprint}")
        return deleted

    def list_checkpoints(self, category: str) -> List[Dict[str, Any]]:
        """
        List checkpoints of a category, most recently updated first.

        Args:
            category: Checkpoint category

        Returns:
            List of checkpoint dictionaries
        """
        if not Path(self.db_path).exists():
            return []

        try:
            conn = sqlite3.connect(self.db_path)
            try:
                rows = conn.execute("""
                    SELECT fingerprint, batch_index, updated_at
                    FROM checkpoints
                    WHERE category = ?
                    ORDER BY updated_at DESC
                """, (category,)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Could not read checkpoints from {self.db_path}: {e}")
            return []

        return [
            {
                'category': category,
                'fingerprint': row[0],
                'batch_index': row[1],
                'updated_at': row[2],
            }
            for row in rows
        ]
