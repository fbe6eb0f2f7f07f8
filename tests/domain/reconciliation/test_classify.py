from __future__ import annotations

import pytest

from addrsync.domain.model import EntityKind, FeedStatus
from addrsync.domain.reconciliation import AMBIGUOUS_TRANSITION, ChangeOperation, classify


@pytest.mark.parametrize(
    ("kind", "exists", "status", "expected"),
    [
        (EntityKind.POST_CODE, False, FeedStatus.ACTIVE, ChangeOperation.INSERT),
        (EntityKind.POST_CODE, True, FeedStatus.ACTIVE, ChangeOperation.UPDATE),
        (EntityKind.POST_CODE, True, FeedStatus.DISCONTINUED, ChangeOperation.DELETE),
        (EntityKind.ROAD, False, FeedStatus.TEMPORARY, ChangeOperation.INSERT),
        (EntityKind.ROAD, True, FeedStatus.EFFECTIVE, ChangeOperation.UPDATE),
        (EntityKind.ROAD, True, FeedStatus.CANCELED, ChangeOperation.DELETE),
        (EntityKind.ROAD, False, FeedStatus.DISCONTINUED, ChangeOperation.SKIP),
        (EntityKind.ACCESS_ADDRESS, False, FeedStatus.PENDING, ChangeOperation.INSERT),
        (EntityKind.ACCESS_ADDRESS, True, FeedStatus.DISCONTINUED, ChangeOperation.DELETE),
        (EntityKind.UNIT_ADDRESS, True, FeedStatus.ACTIVE, ChangeOperation.UPDATE),
        (EntityKind.UNIT_ADDRESS, False, FeedStatus.CANCELED, ChangeOperation.SKIP),
    ],
)
def test_classify_maps_existence_and_status(
    kind: EntityKind,
    exists: bool,
    status: FeedStatus,
    expected: ChangeOperation,
) -> None:
    assert classify(kind, exists=exists, status=status).operation is expected


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (EntityKind.ROAD, FeedStatus.ACTIVE),
        (EntityKind.ACCESS_ADDRESS, FeedStatus.EFFECTIVE),
        (EntityKind.POST_CODE, FeedStatus.CANCELED),
    ],
)
def test_statuses_outside_the_kind_partition_are_errors(
    kind: EntityKind, status: FeedStatus
) -> None:
    for exists in (True, False):
        classification = classify(kind, exists=exists, status=status)

        assert classification.operation is ChangeOperation.ERROR
        assert classification.reason is not None
        assert classification.reason.startswith(AMBIGUOUS_TRANSITION)


def test_skip_explains_missing_local_entity() -> None:
    classification = classify(EntityKind.ROAD, exists=False, status=FeedStatus.DISCONTINUED)

    assert classification.reason == "delete for an entity never created locally"
