"""Sync pass orchestration.

Runs one pass: resolve the account's playlists, narrow them with the
playlist filter, collect their items and reconcile the store.
"""
# Created: 2026-10-18

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Union
import logging

from .aggregator import CatalogAggregator
from .errors import EmptyResult
from .models import AccountRef, RemoteItem
from .reconcile import ReconcileResult, ReconciliationEngine
from .selector import select_playlists
from .store import MemoryVideoStore, VideoStore


logger = logging.getLogger(__name__)


class CatalogClient(Protocol):
    def list_playlists(self, account: AccountRef) -> Dict[str, str]: ...
    def list_playlist_items(self, playlist_id: str) -> List[RemoteItem]: ...


@dataclass
class SyncReport:
    """Result of one sync pass."""
    account: str
    playlists_selected: List[str] = field(default_factory=list)
    playlists_failed: Dict[str, str] = field(default_factory=dict)
    items_fetched: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    quota_used: int = 0
    duration: float = 0.0
    dry_run: bool = False
    result: Optional[ReconcileResult] = None

    def __str__(self) -> str:
        lines = [
            f"Account: {self.account}" + (" (dry run)" if self.dry_run else ""),
            f"Playlists: {', '.join(self.playlists_selected) or '-'}",
            f"Items fetched: {self.items_fetched}",
            f"Created: {self.created}",
            f"Updated: {self.updated}",
            f"Deleted: {self.deleted}",
            f"Quota used: {self.quota_used} units",
            f"Duration: {self.duration:.1f}s",
        ]
        for name, error in self.playlists_failed.items():
            lines.append(f"Failed playlist {name}: {error}")
        return "\n".join(lines)


class CatalogSync:
    """Runs reconciliation passes for one store."""

    def __init__(self, client: CatalogClient, store: VideoStore):
        self.client = client
        self.store = store

    def run(self,
            account: AccountRef,
            playlist_filter: Optional[Union[str, Sequence[str]]] = None,
            dry_run: bool = False) -> SyncReport:
        """Perform one sync pass.

        Args:
            account: User or Channel whose playlists are mirrored
            playlist_filter: Optional comma-separated playlist names to keep
            dry_run: Compute operations against a copy of the store

        Returns:
            SyncReport describing the pass

        Raises:
            RemoteUnavailable: If the playlists cannot be listed or all fail
            EmptyResult: If the account is unknown or the filter keeps nothing
            PersistenceError: If the store fails mid-pass
        """
        start = time.time()
        report = SyncReport(account=str(account), dry_run=dry_run)

        logger.info(f"Starting sync for {account}" + (" (dry run)" if dry_run else ""))

        playlists = self.client.list_playlists(account)
        selected = select_playlists(playlists, playlist_filter)
        if not selected:
            raise EmptyResult(
                f"No playlists of {account} match the filter {playlist_filter!r} "
                f"(available: {', '.join(playlists) or 'none'})"
            )
        report.playlists_selected = list(selected)

        aggregator = CatalogAggregator(self.client)
        items = aggregator.collect(selected)
        report.playlists_failed = dict(aggregator.last_result.failed)
        report.items_fetched = len(items)

        store = MemoryVideoStore.from_records(self.store.list_all()) if dry_run else self.store
        result = ReconciliationEngine(store).reconcile(items)

        report.result = result
        report.created = result.created
        report.updated = result.updated
        report.deleted = result.deleted
        report.quota_used = getattr(self.client, 'quota_used', 0)
        report.duration = time.time() - start

        logger.info(f"Sync for {account} completed in {report.duration:.1f}s: "
                    f"+{report.created} ~{report.updated} -{report.deleted}")
        return report
