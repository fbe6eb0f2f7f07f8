"""Full import: bootstrap the register from a point-in-time feed snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from addrsync.config.sync import DEFAULT_BATCH_SIZE
from addrsync.domain.cancellation import raise_if_cancelled
from addrsync.domain.errors import ImportAbortedError, ImportCancelledError
from addrsync.domain.model import KIND_ORDER, EntityKind
from addrsync.domain.ports import CheckpointRange
from addrsync.domain.reconciliation import ApplyOutcome, IndexSnapshot, handler_for, reconcile

if TYPE_CHECKING:
    from threading import Event

    from addrsync.domain.model import AddressEntity, ExternalRecord
    from addrsync.domain.ports import AddressStore, Checkpoint, FeedClient

log = getLogger(__name__)


@dataclass(slots=True)
class FullImportResult:
    """Entities created per kind and the checkpoint the snapshot was taken at."""

    checkpoint: Checkpoint
    created: dict[EntityKind, int] = field(default_factory=dict)
    skipped: dict[EntityKind, int] = field(default_factory=dict)

    @property
    def total_created(self) -> int:
        return sum(self.created.values())


@dataclass(slots=True)
class _WriteBuffer:
    store: AddressStore
    batch_size: int
    pending: list[AddressEntity] = field(default_factory=list)
    written: int = 0

    def add(self, entity: AddressEntity, *, cancel: Event | None) -> None:
        self.pending.append(entity)
        if len(self.pending) >= self.batch_size:
            self.flush(cancel=cancel)

    def flush(self, *, cancel: Event | None) -> None:
        if not self.pending:
            return
        raise_if_cancelled(cancel, during="full import flush")
        stored = self.store.store_many(self.pending)
        if stored != len(self.pending):
            log.warning(
                "Store accepted %s of %s buffered entities; the rest were already mapped",
                stored,
                len(self.pending),
            )
        self.written += stored
        self.pending.clear()

    def discard(self) -> int:
        dropped = len(self.pending)
        self.pending.clear()
        return dropped


class FullImportEngine:
    """Streams every kind in dependency order and writes inserts in batches.

    Records already known to the index, or already seen earlier in the run under
    another status partition, are skipped. Any failure other than that aborts.
    """

    def __init__(
        self,
        feed: FeedClient,
        store: AddressStore,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._feed = feed
        self._store = store
        self._batch_size = batch_size

    def run(self, checkpoint: Checkpoint, *, cancel: Event | None = None) -> FullImportResult:
        result = FullImportResult(checkpoint=checkpoint)
        checkpoints = CheckpointRange(until=checkpoint)
        log.info("Starting full import at checkpoint %s", checkpoint)
        for kind in KIND_ORDER:
            created, skipped = self._import_kind(kind, checkpoints, cancel)
            result.created[kind] = created
            result.skipped[kind] = skipped
            log.info("Imported %s: created=%s, skipped=%s", kind, created, skipped)
        log.info("Finished full import: created=%s", result.total_created)
        return result

    def _import_kind(
        self,
        kind: EntityKind,
        checkpoints: CheckpointRange,
        cancel: Event | None,
    ) -> tuple[int, int]:
        handler = handler_for(kind)
        snapshot = IndexSnapshot.capture(self._store.index)
        buffer = _WriteBuffer(self._store, self._batch_size)
        seen: set[str] = set()
        skipped = 0

        try:
            for status in handler.full_import_statuses:
                raise_if_cancelled(cancel, during=f"full import of {kind}")
                records = self._feed.stream_entities(
                    kind, status=status, checkpoints=checkpoints, cancel=cancel
                )
                for record in records:
                    raise_if_cancelled(cancel, during=f"full import of {kind}")
                    if not self._is_new(record, seen):
                        continue
                    if self._apply(record, snapshot, buffer, cancel):
                        continue
                    skipped += 1
            buffer.flush(cancel=cancel)
        except ImportCancelledError:
            dropped = buffer.discard()
            log.warning("Full import cancelled; discarded %s buffered %s entities", dropped, kind)
            raise

        return buffer.written, skipped

    def _is_new(self, record: ExternalRecord, seen: set[str]) -> bool:
        if record.external_id in seen:
            log.debug("Skipping %s %r: already seen in this run", record.kind, record.external_id)
            return False
        seen.add(record.external_id)
        if self._store.index.lookup(record.kind, record.external_id) is not None:
            log.debug("Skipping %s %r: already known", record.kind, record.external_id)
            return False
        return True

    def _apply(
        self,
        record: ExternalRecord,
        snapshot: IndexSnapshot,
        buffer: _WriteBuffer,
        cancel: Event | None,
    ) -> bool:
        """Buffer the insert for ``record``; return False when it was skipped."""

        result = reconcile(record, self._store, snapshot)
        match result.outcome:
            case ApplyOutcome.INSERTED if result.entity is not None:
                buffer.add(result.entity, cancel=cancel)
                return True
            case ApplyOutcome.SKIPPED | ApplyOutcome.REJECTED:
                return False
            case _:
                raise ImportAbortedError(f"Full import aborted: {result.describe()}")
