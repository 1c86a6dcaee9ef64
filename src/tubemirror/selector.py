"""Playlist selection for a sync pass."""
# Created: 2026-10-18

from typing import Dict, List, Optional, Sequence, Union
import logging


logger = logging.getLogger(__name__)


def parse_playlist_filter(value: Optional[Union[str, Sequence[str]]]) -> List[str]:
    """Split a comma-separated playlist filter into names.

    Surrounding whitespace is stripped and empty names are dropped.
    """
    if not value:
        return []
    parts = value.split(',') if isinstance(value, str) else list(value)
    return [name.strip() for name in parts if name and name.strip()]


def select_playlists(playlists: Dict[str, str],
                     include: Optional[Union[str, Sequence[str]]] = None) -> Dict[str, str]:
    """Narrow an account's playlists to the ones to sync.

    Args:
        playlists: Mapping of playlist name to playlist id
        include: Optional comma-separated names (or list of names) to keep

    Returns:
        The matching subset in the mapping's order, or a copy of the whole
        mapping when no filter is given. Unknown names are ignored.
    """
    names = parse_playlist_filter(include)
    if not names:
        return dict(playlists)

    wanted = set(names)
    selected = {name: pid for name, pid in playlists.items() if name in wanted}

    for name in wanted - set(playlists):
        logger.debug(f"Playlist filter entry {name!r} matches no playlist, ignoring")

    return selected
