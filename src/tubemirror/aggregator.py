"""Aggregation of playlist items across the selected playlists."""
# Created: 2026-10-18

from dataclasses import dataclass, field
from typing import Dict, List, Protocol
import logging

from .errors import EmptyResult, RemoteUnavailable
from .models import RemoteItem


logger = logging.getLogger(__name__)


class PlaylistItemSource(Protocol):
    def list_playlist_items(self, playlist_id: str) -> List[RemoteItem]: ...


@dataclass
class AggregateResult:
    """Items collected in one pass, plus the playlists that failed."""
    items: List[RemoteItem] = field(default_factory=list)
    fetched: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)


class CatalogAggregator:
    """Merges the items of several playlists into one ordered sequence."""

    def __init__(self, client: PlaylistItemSource):
        self.client = client
        self.last_result = AggregateResult()

    def collect(self, playlists: Dict[str, str]) -> List[RemoteItem]:
        """Fetch and concatenate the items of every playlist.

        Items keep playlist order, then in-playlist order. Duplicates
        across playlists are kept. A playlist that fails to load
        contributes no items.

        Args:
            playlists: Mapping of playlist name to playlist id

        Returns:
            Flat list of RemoteItem objects

        Raises:
            RemoteUnavailable: If every playlist failed to load
        """
        result = AggregateResult()
        self.last_result = result

        for name, playlist_id in playlists.items():
            try:
                items = self.client.list_playlist_items(playlist_id)
            except (RemoteUnavailable, EmptyResult) as e:
                logger.warning(f"Skipping playlist {name} ({playlist_id}): {e}")
                result.failed[name] = str(e)
                continue

            result.fetched[name] = len(items)
            result.items.extend(items)
            logger.info(f"Playlist {name}: {len(items)} items")

        if playlists and not result.fetched:
            raise RemoteUnavailable(
                f"All {len(playlists)} selected playlists failed to load"
            )

        return result.items
