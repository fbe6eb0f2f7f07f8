from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from addrsync.domain.errors import IndexInconsistencyError
from addrsync.domain.model import DomainErrorCode, EntityKind, FeedStatus, PostCode
from addrsync.domain.reconciliation import (
    HANDLERS,
    ApplyOutcome,
    ChangeOperation,
    IndexSnapshot,
    ResolvedReferences,
    handler_for,
    reconcile,
)
from tests.helpers.records import make_access_address, make_post_code, make_road

if TYPE_CHECKING:
    from addrsync.adapters.register import EventSourcedAddressStore
    from addrsync.domain.model import ExternalRecord
    from addrsync.domain.reconciliation import ApplyResult


def _apply(record: ExternalRecord, store: EventSourcedAddressStore) -> ApplyResult:
    result = reconcile(record, store, IndexSnapshot.capture(store.index))
    if result.entity is not None:
        store.store(result.entity)
    return result


def test_new_post_code_is_inserted_then_redelivery_is_noop(
    store: EventSourcedAddressStore,
) -> None:
    first = _apply(make_post_code("8000"), store)
    second = _apply(make_post_code("8000"), store)

    assert first.outcome is ApplyOutcome.INSERTED
    assert second.outcome is ApplyOutcome.NOOP
    assert second.error is not None
    assert second.error.code is DomainErrorCode.NO_CHANGES
    assert store.index.lookup(EntityKind.POST_CODE, "8000") is not None


def test_changed_record_is_updated(store: EventSourcedAddressStore) -> None:
    _apply(make_road("R1", name="Vestergade"), store)

    result = _apply(make_road("R1", name="Vestergade Nord"), store)

    assert result.outcome is ApplyOutcome.UPDATED
    assert result.entity is not None
    assert result.entity.name == "Vestergade Nord"  # type: ignore[attr-defined]


def test_unresolved_parent_is_skipped_without_entity(store: EventSourcedAddressStore) -> None:
    _apply(make_post_code("8000"), store)
    _apply(make_road("R1"), store)

    result = reconcile(
        make_access_address("A1", road="R404"), store, IndexSnapshot.capture(store.index)
    )

    assert result.outcome is ApplyOutcome.SKIPPED
    assert result.entity is None
    assert result.reason is not None
    assert "R404" in result.reason


def test_road_discontinued_twice_is_deleted_then_benign(
    store: EventSourcedAddressStore,
) -> None:
    _apply(make_road("R1"), store)

    deleted = _apply(make_road("R1", status=FeedStatus.DISCONTINUED), store)
    again = _apply(make_road("R1", status=FeedStatus.DISCONTINUED), store)

    assert deleted.outcome is ApplyOutcome.DELETED
    assert again.outcome is ApplyOutcome.NOOP
    assert again.error is not None
    assert again.error.code is DomainErrorCode.CANNOT_DELETE_ALREADY_DELETED


def test_update_after_delete_is_benign(store: EventSourcedAddressStore) -> None:
    _apply(make_road("R1"), store)
    _apply(make_road("R1", status=FeedStatus.DISCONTINUED), store)

    result = _apply(make_road("R1", name="Renamed"), store)

    assert result.outcome is ApplyOutcome.NOOP
    assert result.error is not None
    assert result.error.code is DomainErrorCode.CANNOT_UPDATE_DELETED


def test_delete_for_unknown_entity_is_skipped(store: EventSourcedAddressStore) -> None:
    result = _apply(make_road("R9", status=FeedStatus.CANCELED), store)

    assert result.outcome is ApplyOutcome.SKIPPED
    assert store.index.lookup(EntityKind.ROAD, "R9") is None


def test_ambiguous_status_fails(store: EventSourcedAddressStore) -> None:
    result = _apply(make_road("R1", status=FeedStatus.ACTIVE), store)

    assert result.outcome is ApplyOutcome.FAILED
    assert result.reason is not None
    assert result.reason.startswith("ambiguous transition")


def test_invalid_record_fails_with_domain_error(store: EventSourcedAddressStore) -> None:
    result = _apply(make_post_code("8000", name=" "), store)

    assert result.outcome is ApplyOutcome.FAILED
    assert result.error is not None
    assert result.error.code is DomainErrorCode.INVALID_NAME


def test_delete_of_mapped_but_unloadable_entity_is_fatal(
    store: EventSourcedAddressStore,
) -> None:
    orphan = PostCode.create(number="8000", name="Aarhus C").unwrap()
    store.index.register(orphan)

    with pytest.raises(IndexInconsistencyError) as exc:
        reconcile(
            make_post_code("8000", status=FeedStatus.DISCONTINUED),
            store,
            IndexSnapshot.capture(store.index),
        )

    assert exc.value.entity_id == orphan.id


def test_every_kind_has_a_handler() -> None:
    assert set(HANDLERS) == set(EntityKind)
    assert all(handler.kind is kind for kind, handler in HANDLERS.items())


@pytest.mark.parametrize(
    ("kind", "status", "exists", "expected"),
    [
        (EntityKind.ROAD, FeedStatus.EFFECTIVE, False, ChangeOperation.INSERT),
        (EntityKind.ROAD, FeedStatus.DISCONTINUED, True, ChangeOperation.DELETE),
        (EntityKind.UNIT_ADDRESS, FeedStatus.PENDING, True, ChangeOperation.UPDATE),
    ],
)
def test_handler_classifier_is_bound_to_its_kind(
    kind: EntityKind, status: FeedStatus, exists: bool, expected: ChangeOperation
) -> None:
    classification = handler_for(kind).classify(exists=exists, status=status)

    assert classification.operation is expected


def test_post_code_handler_needs_no_resolved_parents(store: EventSourcedAddressStore) -> None:
    handler = handler_for(EntityKind.POST_CODE)
    snapshot = IndexSnapshot.capture(store.index)

    created = handler.create(make_post_code("8000"), ResolvedReferences(), snapshot).unwrap()
    updated = handler.update(
        created, make_post_code("8000", name="Aarhus"), ResolvedReferences(), snapshot
    )

    assert isinstance(created, PostCode)
    assert updated.is_success
    assert created.name == "Aarhus"
