"""YouTube Data API client for catalogue mirroring.

Read-only wrapper around the YouTube Data API v3 that resolves an
account's playlists and lists playlist items as typed results.
"""
# Created: 2026-10-18

from typing import Dict, List, Optional, Any, Callable
import logging

import httplib2
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from .config.settings import YouTubeSettings
from .errors import ConfigurationError, EmptyResult, RemoteUnavailable
from .models import AccountRef, ChannelPlaylists, PlaylistItemsPage, RemoteItem


logger = logging.getLogger(__name__)


class YouTubeCatalogClient:
    """Fetches playlists and playlist items for a user or channel."""

    API_SERVICE_NAME = 'youtube'
    API_VERSION = 'v3'

    # Fixed page size; only the first page of a playlist is fetched
    PAGE_SIZE = 50

    QUOTA_COSTS = {
        'channels.list': 1,
        'playlistItems.list': 1,
    }

    def __init__(self, settings: YouTubeSettings, service: Optional[Resource] = None):
        """Initialize the client.

        Args:
            settings: YouTube settings carrying the API key
            service: Prebuilt API resource (built from the key if omitted)

        Raises:
            ConfigurationError: If the API key is missing or blank
        """
        api_key = (settings.api_key or '').strip()
        if not api_key:
            raise ConfigurationError(
                "A YouTube API key is required. Set youtube.api_key in the "
                "config file, YOUTUBE_API_KEY, or pass --api-key."
            )

        self.api_key = api_key
        self.youtube: Resource = service or build(
            self.API_SERVICE_NAME,
            self.API_VERSION,
            developerKey=api_key,
            cache_discovery=False
        )
        self.quota_used = 0

    def _track_quota(self, operation: str) -> None:
        """Record the quota units spent on an operation."""
        self.quota_used += self.QUOTA_COSTS.get(operation, 1)
        logger.debug(f"Quota used: {self.quota_used} (+{self.QUOTA_COSTS.get(operation, 1)} for {operation})")

    def _execute(self, operation: str, request_factory: Callable[[], Any]) -> Dict[str, Any]:
        """Execute a request, mapping transport and HTTP failures.

        Raises:
            RemoteUnavailable: On a non-2xx response or a transport error
        """
        self._track_quota(operation)
        try:
            response = request_factory().execute()
        except HttpError as e:
            status = e.resp.status if e.resp is not None else 'unknown'
            logger.error(f"{operation} failed with HTTP {status}: {e}")
            raise RemoteUnavailable(f"{operation} failed with HTTP {status}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"{operation} failed: {e}")
            raise RemoteUnavailable(f"{operation} failed: {e}") from e

        if not isinstance(response, dict):
            raise RemoteUnavailable(f"{operation} returned an unexpected response body")
        return response

    def list_playlists(self, account: AccountRef) -> Dict[str, str]:
        """Get the related playlists of a user or channel.

        Args:
            account: User or Channel to look up

        Returns:
            Mapping of playlist name to playlist id, in response order

        Raises:
            RemoteUnavailable: If the call fails or the body is malformed
            EmptyResult: If no account matches
        """
        response = self._execute(
            'channels.list',
            lambda: self.youtube.channels().list(
                part='contentDetails',
                **account.query_params()
            )
        )

        channel = ChannelPlaylists.from_response(response)
        if channel is None:
            raise EmptyResult(f"No YouTube account found for {account}")

        logger.info(f"Found {len(channel.playlists)} playlists for {account}")
        return channel.playlists

    def list_playlist_items(self, playlist_id: str) -> List[RemoteItem]:
        """Get the items of a playlist.

        Only the first page of PAGE_SIZE items is fetched. Items beyond
        it are reported with a warning and not returned.

        Args:
            playlist_id: ID of the playlist

        Returns:
            List of RemoteItem objects, empty if the playlist has no items

        Raises:
            RemoteUnavailable: If the call fails
        """
        response = self._execute(
            'playlistItems.list',
            lambda: self.youtube.playlistItems().list(
                part='contentDetails,snippet',
                playlistId=playlist_id,
                maxResults=self.PAGE_SIZE
            )
        )

        page = PlaylistItemsPage.from_response(playlist_id, response)
        if page.truncated:
            skipped = max(page.total_results - page.returned, 0)
            if skipped:
                logger.warning(
                    f"Playlist {playlist_id} holds {page.total_results} items; only the first "
                    f"{page.returned} are mirrored ({skipped} skipped, paging is not followed)"
                )
            else:
                logger.warning(
                    f"Playlist {playlist_id} has more pages available; only the first "
                    f"{page.returned} items are mirrored (paging is not followed)"
                )

        logger.debug(f"Fetched {len(page.items)} items from playlist {playlist_id}")
        return page.items
