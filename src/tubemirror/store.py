"""Video store for mirrored playlist entries.

Provides the storage capability used by the reconciliation engine: a
SQLite-backed store for real runs and an in-memory store for dry runs.
"""
# Created: 2026-10-18

import sqlite3
import copy
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterable
from datetime import datetime
import logging

from .errors import PersistenceError
from .models import VideoRecord


logger = logging.getLogger(__name__)


class VideoStore(ABC):
    """Storage contract required by the reconciliation engine.

    No transactional guarantee is assumed: every save and delete takes
    effect immediately.
    """

    @abstractmethod
    def find_by_playlist_item_id(self, playlist_item_id: str) -> Optional[VideoRecord]:
        """Return the record with this playlist entry id, if any."""

    @abstractmethod
    def find_by_video_id(self, video_id: str) -> Optional[VideoRecord]:
        """Return the record with this video id, if any."""

    @abstractmethod
    def save(self, record: VideoRecord) -> VideoRecord:
        """Insert a record without an id, update one with an id."""

    @abstractmethod
    def list_all(self) -> List[VideoRecord]:
        """Return every persisted record ordered by id."""

    @abstractmethod
    def delete(self, record: VideoRecord) -> None:
        """Remove a record. No-op if it does not exist."""


class SQLiteVideoStore(VideoStore):
    """SQLite-based store for mirrored videos."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path of the SQLite database file (created if missing)
        """
        self.db_path = Path(db_path).expanduser()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create directory for {self.db_path}: {e}") from e

        self._init_database()
        logger.debug(f"Opened video store at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_database(self) -> None:
        """Initialize SQLite database with schema."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS store_metadata (
                        key TEXT PRIMARY KEY,
                        value TEXT,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)

                conn.execute("""
                    CREATE TABLE IF NOT EXISTS videos (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        title TEXT NOT NULL,
                        description TEXT,
                        playlist_item_id TEXT NOT NULL,
                        video_id TEXT NOT NULL,
                        thumbnail_url TEXT,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)

                # Both match keys are looked up once per fetched item
                conn.execute("CREATE INDEX IF NOT EXISTS idx_videos_playlist_item ON videos(playlist_item_id)")
                conn.execute("CREATE INDEX IF NOT EXISTS idx_videos_video ON videos(video_id)")

                cursor = conn.execute("SELECT value FROM store_metadata WHERE key = 'schema_version'")
                row = cursor.fetchone()

                if row is None:
                    conn.execute(
                        "INSERT INTO store_metadata (key, value) VALUES ('schema_version', ?)",
                        (str(self.SCHEMA_VERSION),)
                    )
                elif int(row[0]) < self.SCHEMA_VERSION:
                    logger.info(f"Migrating store schema from version {row[0]} to {self.SCHEMA_VERSION}")
                    conn.execute(
                        "UPDATE store_metadata SET value = ? WHERE key = 'schema_version'",
                        (str(self.SCHEMA_VERSION),)
                    )

                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to initialize video store at {self.db_path}: {e}") from e

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> VideoRecord:
        return VideoRecord(
            id=row['id'],
            title=row['title'],
            description=row['description'] or '',
            playlist_item_id=row['playlist_item_id'],
            video_id=row['video_id'],
            thumbnail_url=row['thumbnail_url'] or '',
            created_at=_parse_timestamp(row['created_at']),
            updated_at=_parse_timestamp(row['updated_at'])
        )

    def _find_one(self, column: str, value: str) -> Optional[VideoRecord]:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"SELECT * FROM videos WHERE {column} = ? ORDER BY id LIMIT 1",
                    (value,)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to look up video by {column}={value}: {e}") from e

        return self._row_to_record(row) if row else None

    def find_by_playlist_item_id(self, playlist_item_id: str) -> Optional[VideoRecord]:
        return self._find_one('playlist_item_id', playlist_item_id)

    def find_by_video_id(self, video_id: str) -> Optional[VideoRecord]:
        return self._find_one('video_id', video_id)

    def save(self, record: VideoRecord) -> VideoRecord:
        """Insert or update a video record.

        Args:
            record: The record to persist; inserted if it has no id

        Returns:
            The persisted record, read back with its id and timestamps

        Raises:
            PersistenceError: If the write fails
        """
        try:
            with self._connect() as conn:
                if record.id is None:
                    cursor = conn.execute("""
                        INSERT INTO videos
                        (title, description, playlist_item_id, video_id, thumbnail_url)
                        VALUES (?, ?, ?, ?, ?)
                    """, (
                        record.title,
                        record.description,
                        record.playlist_item_id,
                        record.video_id,
                        record.thumbnail_url
                    ))
                    record_id = cursor.lastrowid
                else:
                    cursor = conn.execute("""
                        UPDATE videos
                        SET title = ?, description = ?, playlist_item_id = ?,
                            video_id = ?, thumbnail_url = ?, updated_at = CURRENT_TIMESTAMP
                        WHERE id = ?
                    """, (
                        record.title,
                        record.description,
                        record.playlist_item_id,
                        record.video_id,
                        record.thumbnail_url,
                        record.id
                    ))
                    if cursor.rowcount == 0:
                        raise PersistenceError(f"Video record {record.id} no longer exists")
                    record_id = record.id

                conn.commit()

                row = conn.execute("SELECT * FROM videos WHERE id = ?", (record_id,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save video {record.video_id}: {e}") from e

        return self._row_to_record(row)

    def list_all(self) -> List[VideoRecord]:
        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT * FROM videos ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to list videos: {e}") from e

        return [self._row_to_record(row) for row in rows]

    def delete(self, record: VideoRecord) -> None:
        if record.id is None:
            return
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM videos WHERE id = ?", (record.id,))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to delete video record {record.id}: {e}") from e

    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dictionary with record counts, database size and timestamps
        """
        try:
            with self._connect() as conn:
                row = conn.execute("""
                    SELECT COUNT(*) AS total,
                           COUNT(DISTINCT video_id) AS distinct_videos,
                           MIN(created_at) AS oldest,
                           MAX(updated_at) AS newest
                    FROM videos
                """).fetchone()
                schema = conn.execute(
                    "SELECT value FROM store_metadata WHERE key = 'schema_version'"
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read store statistics: {e}") from e

        return {
            'total_videos': row['total'],
            'distinct_videos': row['distinct_videos'],
            'oldest_entry': row['oldest'],
            'newest_update': row['newest'],
            'schema_version': int(schema[0]) if schema else None,
            'db_size_mb': self.db_path.stat().st_size / (1024 * 1024) if self.db_path.exists() else 0,
            'db_path': str(self.db_path)
        }


class MemoryVideoStore(VideoStore):
    """Dict-backed store used for dry runs and tests."""

    def __init__(self):
        self._records: Dict[int, VideoRecord] = {}
        self._next_id = 1

    @classmethod
    def from_records(cls, records: Iterable[VideoRecord]) -> 'MemoryVideoStore':
        """Seed a store with copies of existing records, keeping their ids."""
        store = cls()
        for record in records:
            if record.id is None:
                store.save(record)
                continue
            store._records[record.id] = copy.copy(record)
            store._next_id = max(store._next_id, record.id + 1)
        return store

    def find_by_playlist_item_id(self, playlist_item_id: str) -> Optional[VideoRecord]:
        for record in self.list_all():
            if record.playlist_item_id == playlist_item_id:
                return record
        return None

    def find_by_video_id(self, video_id: str) -> Optional[VideoRecord]:
        for record in self.list_all():
            if record.video_id == video_id:
                return record
        return None

    def save(self, record: VideoRecord) -> VideoRecord:
        now = datetime.now()
        saved = copy.copy(record)
        if saved.id is None:
            saved.id = self._next_id
            self._next_id += 1
            saved.created_at = now
        elif saved.id not in self._records:
            raise PersistenceError(f"Video record {saved.id} no longer exists")
        saved.updated_at = now
        self._records[saved.id] = saved
        return copy.copy(saved)

    def list_all(self) -> List[VideoRecord]:
        return [copy.copy(self._records[key]) for key in sorted(self._records)]

    def delete(self, record: VideoRecord) -> None:
        if record.id is not None:
            self._records.pop(record.id, None)

    def __len__(self) -> int:
        return len(self._records)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a SQLite CURRENT_TIMESTAMP value."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
