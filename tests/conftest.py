"""Shared pytest fixtures for tubemirror tests.

Provides common fixtures and test utilities.
"""
# Created: 2026-10-18

import pytest
import sqlite3
from pathlib import Path
from typing import Dict, List, Any, Optional

# Import models from tubemirror package
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tubemirror.errors import RemoteUnavailable
from tubemirror.models import RemoteItem, VideoRecord
from tubemirror.store import SQLiteVideoStore, MemoryVideoStore


def make_item(playlist_item_id: str, video_id: str, title: str = "",
              description: str = "", thumbnail_url: str = "",
              playlist_id: Optional[str] = None) -> RemoteItem:
    """Build a RemoteItem with readable defaults."""
    return RemoteItem(
        playlist_item_id=playlist_item_id,
        video_id=video_id,
        title=title or f"Video {video_id}",
        description=description or f"About {video_id}",
        thumbnail_url=thumbnail_url or f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
        playlist_id=playlist_id
    )


def make_playlist_item_response(playlist_item_id: str, video_id: str,
                                title: str = "A video",
                                thumbnails: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build one playlistItems.list() entry as returned by the API."""
    if thumbnails is None:
        thumbnails = {
            'default': {'url': f"https://i.ytimg.com/vi/{video_id}/default.jpg", 'width': 120},
            'medium': {'url': f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg", 'width': 320},
            'high': {'url': f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg", 'width': 480},
        }
    return {
        'kind': 'youtube#playlistItem',
        'id': playlist_item_id,
        'snippet': {
            'title': title,
            'description': f"Description of {title}",
            'thumbnails': thumbnails,
        },
        'contentDetails': {'videoId': video_id},
    }


class FakeCatalogClient:
    """In-memory stand-in for YouTubeCatalogClient."""

    def __init__(self, playlists: Dict[str, str],
                 items: Dict[str, List[RemoteItem]],
                 failing: Optional[List[str]] = None):
        self.playlists = playlists
        self.items = items
        self.failing = set(failing or [])
        self.fetched: List[str] = []
        self.quota_used = 0

    def list_playlists(self, account) -> Dict[str, str]:
        self.quota_used += 1
        return dict(self.playlists)

    def list_playlist_items(self, playlist_id: str) -> List[RemoteItem]:
        self.quota_used += 1
        self.fetched.append(playlist_id)
        if playlist_id in self.failing:
            raise RemoteUnavailable(f"playlistItems.list failed for {playlist_id}")
        return list(self.items.get(playlist_id, []))


@pytest.fixture
def tmp_db_path(tmp_path):
    """Provide a temporary database path for tests."""
    return tmp_path / "store" / "videos.db"


@pytest.fixture
def sqlite_store(tmp_db_path):
    """Provide a SQLiteVideoStore backed by a temporary database."""
    return SQLiteVideoStore(tmp_db_path)


@pytest.fixture
def memory_store():
    """Provide an empty MemoryVideoStore."""
    return MemoryVideoStore()


@pytest.fixture(params=['sqlite', 'memory'])
def store(request, tmp_db_path):
    """Provide each VideoStore implementation in turn."""
    if request.param == 'sqlite':
        return SQLiteVideoStore(tmp_db_path)
    return MemoryVideoStore()


@pytest.fixture
def sample_record():
    """Provide an unsaved VideoRecord."""
    return VideoRecord(
        playlist_item_id="UUabc.123",
        video_id="dQw4w9WgXcQ",
        title="Never Gonna Give You Up",
        description="Official music video",
        thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
    )


def get_db_row_count(db_path: Path, table_name: str) -> int:
    """Helper to get row count from a table."""
    with sqlite3.connect(db_path) as conn:
        cursor = conn.execute(f"SELECT COUNT(*) FROM {table_name}")
        return cursor.fetchone()[0]
