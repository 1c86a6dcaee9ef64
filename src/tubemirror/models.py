"""Data models for remote playlist items and mirrored video records.

Defines the typed shapes decoded from the YouTube Data API and the
records persisted by the video store.
"""
# Created: 2026-10-18

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any, Union
import logging

from .errors import RemoteUnavailable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """Account selected by its legacy YouTube username."""
    name: str

    def query_params(self) -> Dict[str, str]:
        return {'forUsername': self.name}

    def __str__(self) -> str:
        return f"user {self.name}"


@dataclass(frozen=True)
class Channel:
    """Account selected by its channel id."""
    id: str

    def query_params(self) -> Dict[str, str]:
        return {'id': self.id}

    def __str__(self) -> str:
        return f"channel {self.id}"


AccountRef = Union[User, Channel]


def select_thumbnail(thumbnails: Optional[Dict[str, Any]]) -> str:
    """Pick the highest resolution thumbnail URL.

    The API orders the thumbnail map from lowest to highest resolution,
    so the last entry wins.

    Args:
        thumbnails: The ``snippet.thumbnails`` mapping of a playlist item

    Returns:
        URL of the last entry, or an empty string if there is none
    """
    if not thumbnails:
        return ""
    last = list(thumbnails.values())[-1]
    if isinstance(last, dict):
        return last.get('url', '')
    return ""


@dataclass
class RemoteItem:
    """One entry of a remote playlist, as fetched during a sync pass."""
    playlist_item_id: str
    video_id: str
    title: str
    description: str = ""
    thumbnail_url: str = ""

    # Source playlist, informational only
    playlist_id: Optional[str] = None

    @classmethod
    def from_playlist_item(cls, item: Dict[str, Any],
                           playlist_id: Optional[str] = None) -> Optional['RemoteItem']:
        """Create a RemoteItem from a playlistItems.list() response item.

        Args:
            item: Single item from playlistItems.list() response
            playlist_id: ID of the playlist the item was listed from

        Returns:
            RemoteItem instance, or None if the item lacks either id
        """
        snippet = item.get('snippet') or {}
        content_details = item.get('contentDetails') or {}

        playlist_item_id = item.get('id')
        video_id = content_details.get('videoId')
        if not playlist_item_id or not video_id:
            logger.warning(f"Skipping playlist item without ids in {playlist_id}: "
                           f"id={playlist_item_id!r} videoId={video_id!r}")
            return None

        return cls(
            playlist_item_id=playlist_item_id,
            video_id=video_id,
            title=snippet.get('title', ''),
            description=snippet.get('description', ''),
            thumbnail_url=select_thumbnail(snippet.get('thumbnails')),
            playlist_id=playlist_id
        )


@dataclass
class VideoRecord:
    """A mirrored video as persisted in the video store."""
    playlist_item_id: str
    video_id: str
    title: str
    description: str = ""
    thumbnail_url: str = ""

    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_remote_item(cls, item: RemoteItem) -> 'VideoRecord':
        """Build a new, unsaved record from a remote item."""
        return cls(
            playlist_item_id=item.playlist_item_id,
            video_id=item.video_id,
            title=item.title,
            description=item.description,
            thumbnail_url=item.thumbnail_url
        )

    def refresh_from(self, item: RemoteItem) -> None:
        """Copy the match keys and thumbnail of a remote item.

        Title and description are kept as they were at creation.
        """
        self.playlist_item_id = item.playlist_item_id
        self.video_id = item.video_id
        self.thumbnail_url = item.thumbnail_url

    def __str__(self) -> str:
        return f"{self.title} [{self.video_id}]"


@dataclass
class ChannelPlaylists:
    """Decoded channels.list() response: the related playlists of a channel."""
    channel_id: str
    playlists: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> Optional['ChannelPlaylists']:
        """Decode a channels.list() response.

        Args:
            response: Raw response of channels.list(part='contentDetails')

        Returns:
            ChannelPlaylists of the first channel, or None if the response
            holds no channel

        Raises:
            RemoteUnavailable: If the channel has no relatedPlaylists mapping
        """
        items = response.get('items') or []
        if not items:
            return None

        channel = items[0]
        related = (channel.get('contentDetails') or {}).get('relatedPlaylists')
        if not isinstance(related, dict):
            raise RemoteUnavailable(
                f"Malformed channels response: no relatedPlaylists for "
                f"channel {channel.get('id')!r}"
            )

        # Keep response order, drop empty ids the API sometimes returns
        playlists = {name: pid for name, pid in related.items() if pid}
        return cls(channel_id=channel.get('id', ''), playlists=playlists)


@dataclass
class PlaylistItemsPage:
    """Decoded playlistItems.list() response for a single page."""
    playlist_id: str
    items: List[RemoteItem] = field(default_factory=list)
    total_results: int = 0
    returned: int = 0
    next_page_token: Optional[str] = None

    @classmethod
    def from_response(cls, playlist_id: str,
                      response: Dict[str, Any]) -> 'PlaylistItemsPage':
        """Decode a playlistItems.list() response.

        Entries missing an id or video id are skipped.
        """
        page_info = response.get('pageInfo') or {}
        total_results = page_info.get('totalResults', 0) or 0
        raw_items = response.get('items') or []

        items = []
        if raw_items and total_results > 0:
            for raw in raw_items:
                item = RemoteItem.from_playlist_item(raw, playlist_id)
                if item is not None:
                    items.append(item)

        return cls(
            playlist_id=playlist_id,
            items=items,
            total_results=total_results,
            returned=len(raw_items),
            next_page_token=response.get('nextPageToken')
        )

    @property
    def truncated(self) -> bool:
        """True if the remote holds more items than this page returned."""
        return bool(self.next_page_token) or self.total_results > self.returned
