"""Change import: replay feed deltas between two checkpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from addrsync.domain.cancellation import raise_if_cancelled
from addrsync.domain.errors import ImportAbortedError
from addrsync.domain.model import KIND_ORDER, EntityKind, kind_rank
from addrsync.domain.reconciliation import ApplyOutcome, IndexSnapshot, reconcile

if TYPE_CHECKING:
    from collections.abc import Iterable
    from threading import Event

    from addrsync.domain.model import ExternalRecord
    from addrsync.domain.ports import AddressStore, CheckpointRange, FeedClient
    from addrsync.domain.reconciliation import ApplyResult

log = getLogger(__name__)

MIN_UPDATED: Final[datetime] = datetime.min.replace(tzinfo=UTC)

type OrderingKey = tuple[int, datetime, int, int]


def ordering_key(record: ExternalRecord) -> OrderingKey:
    """Effective ordering key of a change.

    Post codes always sort first since the registry gives them no reliable
    update time. Other kinds order by update time, then feed sequence, then
    dependency rank.
    """

    if record.kind is EntityKind.POST_CODE:
        return (0, MIN_UPDATED, 0, 0)
    return (1, record.updated or MIN_UPDATED, record.sequence or 0, kind_rank(record.kind))


def order_changes(records: Iterable[ExternalRecord]) -> list[ExternalRecord]:
    return sorted(records, key=ordering_key)


@dataclass(slots=True)
class KindCounters:
    inserted: int = 0
    updated: int = 0
    deleted: int = 0
    noop: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.deleted + self.noop + self.skipped


@dataclass(slots=True)
class ChangeImportResult:
    checkpoints: CheckpointRange
    counters: dict[EntityKind, KindCounters] = field(
        default_factory=lambda: {kind: KindCounters() for kind in KIND_ORDER}
    )

    @property
    def total(self) -> int:
        return sum(counter.total for counter in self.counters.values())

    def summary(self) -> str:
        return ", ".join(
            f"{kind}(+{c.inserted} ~{c.updated} -{c.deleted} ={c.noop} !{c.skipped})"
            for kind, c in self.counters.items()
        )


class ChangeImportEngine:
    """Applies one checkpoint range, one record at a time, in dependency order."""

    def __init__(self, feed: FeedClient, store: AddressStore) -> None:
        self._feed = feed
        self._store = store

    def run(
        self,
        checkpoints: CheckpointRange,
        *,
        cancel: Event | None = None,
    ) -> ChangeImportResult:
        result = ChangeImportResult(checkpoints=checkpoints)
        changes = order_changes(self._collect(checkpoints, cancel))
        log.info("Applying %s changes in %s", len(changes), checkpoints)

        snapshot = IndexSnapshot.capture(self._store.index)
        for record in changes:
            raise_if_cancelled(cancel, during=f"change import {checkpoints}")
            self._apply(record, snapshot, result.counters[record.kind])

        log.info("Finished change import %s: %s", checkpoints, result.summary())
        return result

    def _collect(self, checkpoints: CheckpointRange, cancel: Event | None) -> list[ExternalRecord]:
        records: list[ExternalRecord] = []
        for kind in KIND_ORDER:
            raise_if_cancelled(cancel, during=f"fetching {kind} changes")
            fetched = list(
                self._feed.stream_entities(kind, checkpoints=checkpoints, cancel=cancel)
            )
            log.debug("Fetched %s %s changes in %s", len(fetched), kind, checkpoints)
            records.extend(fetched)
        return records

    def _apply(
        self,
        record: ExternalRecord,
        snapshot: IndexSnapshot,
        counters: KindCounters,
    ) -> None:
        result = reconcile(record, self._store, snapshot)
        match result.outcome:
            case ApplyOutcome.INSERTED | ApplyOutcome.UPDATED | ApplyOutcome.DELETED:
                self._write(result, snapshot, counters)
            case ApplyOutcome.NOOP:
                counters.noop += 1
            case ApplyOutcome.SKIPPED | ApplyOutcome.REJECTED:
                counters.skipped += 1
            case ApplyOutcome.FAILED:
                raise ImportAbortedError(f"Change import aborted: {result.describe()}")

    def _write(
        self,
        result: ApplyResult,
        snapshot: IndexSnapshot,
        counters: KindCounters,
    ) -> None:
        entity = result.entity
        if entity is None:
            raise ImportAbortedError(f"No entity to store for {result.describe()}")
        if not self._store.store(entity):
            log.debug("Store refused %s; already mapped", result.describe())
            counters.noop += 1
            return
        match result.outcome:
            case ApplyOutcome.INSERTED:
                snapshot.note_created(entity)
                counters.inserted += 1
            case ApplyOutcome.UPDATED:
                counters.updated += 1
            case _:
                counters.deleted += 1
