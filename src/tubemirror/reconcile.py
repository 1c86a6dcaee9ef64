"""Reconciliation of fetched playlist items against the video store.

Algorithm
---------
Each fetched item is matched against the store by playlist entry id
first and video id second, then written:

1. No match: create a record with the item's title and description.
2. Match (either key): keep title and description, refresh the
   playlist entry id, video id and thumbnail URL.
3. Remember the saved record's id as processed.

Once every item is written, records whose id was never processed are
deleted. Items are handled strictly in input order, so when two items
land on the same record the later one wins.

Writes are not transactional: a store failure aborts the pass and
leaves earlier writes in place.
"""
# Created: 2026-10-18

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple
import logging

from .errors import PersistenceError
from .models import RemoteItem, VideoRecord
from .store import VideoStore


logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"


@dataclass
class UpsertOp:
    """A record written for one fetched item."""
    action: str  # "create" or "update"
    record: VideoRecord
    matched_by: Optional[str] = None  # "playlist_item_id", "video_id" or None


@dataclass
class DeleteOp:
    """A record removed because no fetched item touched it."""
    record: VideoRecord


@dataclass
class ReconcileResult:
    """Operations applied during one reconciliation pass."""
    upserts: List[UpsertOp] = field(default_factory=list)
    deletes: List[DeleteOp] = field(default_factory=list)

    @property
    def created_ids(self) -> Set[int]:
        return {op.record.id for op in self.upserts if op.action == CREATE}

    @property
    def created(self) -> int:
        return len(self.created_ids)

    @property
    def updated(self) -> int:
        """Existing records matched in this pass."""
        created = self.created_ids
        return len({op.record.id for op in self.upserts
                    if op.action == UPDATE and op.record.id not in created})

    @property
    def deleted(self) -> int:
        return len(self.deletes)

    def __str__(self) -> str:
        return f"+{self.created} ~{self.updated} -{self.deleted}"


class ReconciliationEngine:
    """Applies a fetched item sequence to a video store."""

    def __init__(self, store: VideoStore):
        self.store = store

    def _match(self, item: RemoteItem) -> Tuple[Optional[VideoRecord], Optional[str]]:
        """Find the existing record for an item, playlist entry id first."""
        record = self.store.find_by_playlist_item_id(item.playlist_item_id)
        if record is not None:
            return record, 'playlist_item_id'

        record = self.store.find_by_video_id(item.video_id)
        if record is not None:
            return record, 'video_id'

        return None, None

    def _upsert(self, item: RemoteItem) -> UpsertOp:
        record, matched_by = self._match(item)

        if record is None:
            record = VideoRecord.from_remote_item(item)
            action = CREATE
        else:
            record.refresh_from(item)
            action = UPDATE

        saved = self.store.save(record)
        logger.debug(f"{action} {saved} (record {saved.id}, matched by {matched_by})")
        return UpsertOp(action=action, record=saved, matched_by=matched_by)

    def reconcile(self, items: Iterable[RemoteItem]) -> ReconcileResult:
        """Run one reconciliation pass.

        Args:
            items: Fetched items in aggregation order

        Returns:
            ReconcileResult listing every upsert and delete applied

        Raises:
            PersistenceError: If the store fails; earlier writes are kept
        """
        result = ReconcileResult()
        processed: Set[int] = set()

        try:
            for item in items:
                op = self._upsert(item)
                processed.add(op.record.id)
                result.upserts.append(op)

            for record in self.store.list_all():
                if record.id in processed:
                    continue
                self.store.delete(record)
                result.deletes.append(DeleteOp(record=record))
                logger.debug(f"delete {record} (record {record.id})")
        except PersistenceError:
            logger.error(f"Reconciliation aborted after {len(result.upserts)} upserts and "
                         f"{len(result.deletes)} deletes; the store is partially updated")
            raise

        logger.info(f"Reconciled {len(result.upserts)} items: {result.created} created, "
                    f"{result.updated} updated, {result.deleted} deleted")
        return result
