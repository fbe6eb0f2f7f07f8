from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import pytest

from addrsync.domain.address_import import FullImportEngine
from addrsync.domain.errors import ImportAbortedError, ImportCancelledError
from addrsync.domain.model import EntityKind, FeedStatus
from tests.helpers.fakes import FakeFeedClient
from tests.helpers.records import (
    make_access_address,
    make_post_code,
    make_road,
    make_unit_address,
)

if TYPE_CHECKING:
    from addrsync.adapters.register import EventSourcedAddressStore, InMemoryEventLog


def _register_feed() -> FakeFeedClient:
    return FakeFeedClient(
        [
            make_post_code("8000"),
            make_post_code("8200", name="Aarhus N"),
            make_road("R1"),
            make_road("R2", name="Nørregade", status=FeedStatus.TEMPORARY),
            make_access_address("A1"),
            make_access_address("A2", road="R2", status=FeedStatus.PENDING),
            make_unit_address("U1"),
        ],
        latest=42,
    )


def test_full_import_creates_every_kind_in_order(store: EventSourcedAddressStore) -> None:
    feed = _register_feed()

    result = FullImportEngine(feed, store).run(42)

    assert result.created == {
        EntityKind.POST_CODE: 2,
        EntityKind.ROAD: 2,
        EntityKind.ACCESS_ADDRESS: 2,
        EntityKind.UNIT_ADDRESS: 1,
    }
    assert result.total_created == 7
    assert all(call.checkpoints.is_snapshot for call in feed.calls)


def test_full_import_streams_each_live_status_partition(store: EventSourcedAddressStore) -> None:
    feed = _register_feed()

    FullImportEngine(feed, store).run(42)

    requested = [(call.kind, call.status) for call in feed.calls]
    assert requested == [
        (EntityKind.POST_CODE, None),
        (EntityKind.ROAD, FeedStatus.EFFECTIVE),
        (EntityKind.ROAD, FeedStatus.TEMPORARY),
        (EntityKind.ACCESS_ADDRESS, FeedStatus.ACTIVE),
        (EntityKind.ACCESS_ADDRESS, FeedStatus.PENDING),
        (EntityKind.UNIT_ADDRESS, FeedStatus.ACTIVE),
        (EntityKind.UNIT_ADDRESS, FeedStatus.PENDING),
    ]


def test_full_import_writes_in_batches(
    store: EventSourcedAddressStore, event_log: InMemoryEventLog
) -> None:
    feed = FakeFeedClient([make_post_code(str(number)) for number in range(1000, 1007)])
    batches: list[int] = []
    original = store.store_many

    def recording_store_many(entities):  # type: ignore[no-untyped-def]
        batches.append(len(entities))
        return original(entities)

    store.store_many = recording_store_many  # type: ignore[method-assign]

    result = FullImportEngine(feed, store, batch_size=3).run(1)

    assert batches == [3, 3, 1]
    assert result.created[EntityKind.POST_CODE] == 7
    assert len(event_log) == 7


def test_full_import_skips_unresolved_references(store: EventSourcedAddressStore) -> None:
    feed = FakeFeedClient(
        [
            make_post_code("8000"),
            make_road("R1"),
            make_access_address("A1"),
            make_access_address("A2", road="R404"),
        ]
    )

    result = FullImportEngine(feed, store).run(1)

    assert result.created[EntityKind.ACCESS_ADDRESS] == 1
    assert result.skipped[EntityKind.ACCESS_ADDRESS] == 1
    assert store.index.lookup(EntityKind.ACCESS_ADDRESS, "A2") is None


def test_full_import_ignores_records_already_known(store: EventSourcedAddressStore) -> None:
    FullImportEngine(FakeFeedClient([make_post_code("8000")]), store).run(1)

    result = FullImportEngine(FakeFeedClient([make_post_code("8000")]), store).run(2)

    assert result.total_created == 0


def test_full_import_aborts_on_invalid_record(store: EventSourcedAddressStore) -> None:
    feed = FakeFeedClient([make_post_code("8000", name="")])

    with pytest.raises(ImportAbortedError, match="Full import aborted"):
        FullImportEngine(feed, store).run(1)


def test_full_import_discards_buffer_when_cancelled(
    store: EventSourcedAddressStore, event_log: InMemoryEventLog
) -> None:
    cancel = threading.Event()
    cancel.set()
    feed = FakeFeedClient([make_post_code("8000")])

    with pytest.raises(ImportCancelledError):
        FullImportEngine(feed, store).run(1, cancel=cancel)

    assert len(event_log) == 0


def test_full_import_rejects_non_positive_batch_size(store: EventSourcedAddressStore) -> None:
    with pytest.raises(ValueError, match="batch_size"):
        FullImportEngine(FakeFeedClient(), store, batch_size=0)


def test_full_import_deduplicates_across_status_partitions(
    store: EventSourcedAddressStore,
) -> None:
    feed = FakeFeedClient(
        [
            make_road("R1", status=FeedStatus.EFFECTIVE),
            make_road("R1", status=FeedStatus.TEMPORARY),
        ]
    )

    result = FullImportEngine(feed, store).run(1)

    assert result.created[EntityKind.ROAD] == 1
    assert result.skipped[EntityKind.ROAD] == 0
