from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from addrsync.domain.address_import import ChangeImportEngine, FullImportEngine, order_changes
from addrsync.domain.errors import ImportAbortedError, IndexInconsistencyError
from addrsync.domain.model import EntityKind, FeedStatus, PostCode
from addrsync.domain.ports import CheckpointRange
from tests.helpers.fakes import FakeFeedClient
from tests.helpers.records import (
    make_access_address,
    make_post_code,
    make_road,
    make_unit_address,
)

if TYPE_CHECKING:
    from addrsync.adapters.register import EventSourcedAddressStore, InMemoryEventLog


def _at(hour: int) -> datetime:
    return datetime(2024, 3, 1, hour, tzinfo=UTC)


def _bootstrap(store: EventSourcedAddressStore) -> None:
    feed = FakeFeedClient(
        [make_post_code("8000"), make_road("R1"), make_access_address("A1")], latest=10
    )
    FullImportEngine(feed, store).run(10)


def test_changes_order_post_codes_first_then_time_then_sequence_then_kind() -> None:
    unit = make_unit_address("U1", updated=_at(9), sequence=5)
    access = make_access_address("A1", updated=_at(9), sequence=5)
    road_late = make_road("R2", updated=_at(10), sequence=1)
    road_early = make_road("R1", updated=_at(9), sequence=4)
    post_code = make_post_code("8000", sequence=99)

    ordered = order_changes([unit, access, road_late, road_early, post_code])

    assert ordered == [post_code, road_early, access, unit, road_late]


def test_change_import_applies_parents_created_in_same_range(
    store: EventSourcedAddressStore,
) -> None:
    feed = FakeFeedClient(
        [
            make_unit_address("U1", updated=_at(3), sequence=13),
            make_access_address("A1", updated=_at(2), sequence=12),
            make_road("R1", updated=_at(1), sequence=11),
            make_post_code("8000", sequence=11),
        ]
    )

    result = ChangeImportEngine(feed, store).run(CheckpointRange(after=10, until=13))

    assert result.counters[EntityKind.UNIT_ADDRESS].inserted == 1
    assert result.total == 4
    assert all(call.status is None for call in feed.calls)


def test_redelivered_changes_are_idempotent(
    store: EventSourcedAddressStore, event_log: InMemoryEventLog
) -> None:
    _bootstrap(store)
    feed = FakeFeedClient([make_post_code("8000", sequence=11)])
    engine = ChangeImportEngine(feed, store)
    history = len(event_log)

    result = engine.run(CheckpointRange(after=10, until=11))

    assert result.counters[EntityKind.POST_CODE].noop == 1
    assert len(event_log) == history


def test_road_discontinued_twice_deletes_once(
    store: EventSourcedAddressStore,
) -> None:
    _bootstrap(store)
    feed = FakeFeedClient(
        [
            make_road("R1", status=FeedStatus.DISCONTINUED, updated=_at(1), sequence=11),
            make_road("R1", status=FeedStatus.DISCONTINUED, updated=_at(2), sequence=12),
        ]
    )

    result = ChangeImportEngine(feed, store).run(CheckpointRange(after=10, until=12))

    counters = result.counters[EntityKind.ROAD]
    assert (counters.deleted, counters.noop) == (1, 1)
    road_id = store.index.lookup(EntityKind.ROAD, "R1")
    assert road_id is not None
    road = store.load(EntityKind.ROAD, road_id)
    assert road is not None
    assert road.deleted


def test_unit_address_under_deleted_parent_is_rejected_not_fatal(
    store: EventSourcedAddressStore,
) -> None:
    _bootstrap(store)
    feed = FakeFeedClient(
        [
            make_access_address("A1", status=FeedStatus.DISCONTINUED, updated=_at(1), sequence=11),
            make_unit_address("U1", updated=_at(2), sequence=12),
        ]
    )

    result = ChangeImportEngine(feed, store).run(CheckpointRange(after=10, until=12))

    assert result.counters[EntityKind.ACCESS_ADDRESS].deleted == 1
    assert result.counters[EntityKind.UNIT_ADDRESS].skipped == 1
    assert store.index.lookup(EntityKind.UNIT_ADDRESS, "U1") is None


def test_skipped_record_succeeds_once_parent_arrives(store: EventSourcedAddressStore) -> None:
    _bootstrap(store)
    first = FakeFeedClient([make_access_address("A2", road="R2", updated=_at(1), sequence=11)])
    second = FakeFeedClient(
        [
            make_road("R2", updated=_at(2), sequence=12),
            make_access_address("A2", road="R2", updated=_at(3), sequence=12),
        ]
    )

    skipped = ChangeImportEngine(first, store).run(CheckpointRange(after=10, until=11))
    applied = ChangeImportEngine(second, store).run(CheckpointRange(after=11, until=12))

    assert skipped.counters[EntityKind.ACCESS_ADDRESS].skipped == 1
    assert applied.counters[EntityKind.ACCESS_ADDRESS].inserted == 1
    assert store.index.lookup(EntityKind.ACCESS_ADDRESS, "A2") is not None


def test_ambiguous_status_aborts_the_range(store: EventSourcedAddressStore) -> None:
    _bootstrap(store)
    feed = FakeFeedClient([make_road("R1", status=FeedStatus.PENDING, sequence=11)])

    with pytest.raises(ImportAbortedError, match="ambiguous transition"):
        ChangeImportEngine(feed, store).run(CheckpointRange(after=10, until=11))


def test_delete_of_unloadable_mapping_is_fatal(store: EventSourcedAddressStore) -> None:
    store.index.register(PostCode.create(number="8000", name="Aarhus C").unwrap())
    feed = FakeFeedClient([make_post_code("8000", status=FeedStatus.DISCONTINUED, sequence=11)])

    with pytest.raises(IndexInconsistencyError):
        ChangeImportEngine(feed, store).run(CheckpointRange(after=10, until=11))
