"""Change classification: existence plus feed status to a register operation."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from addrsync.domain.model import EntityKind, FeedStatus

from .contracts import AMBIGUOUS_TRANSITION, ChangeOperation, Classification

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class StatusPartition:
    """Split of feed statuses into live-like and terminal-like for one kind."""

    live: frozenset[FeedStatus]
    terminal: frozenset[FeedStatus]

    def __post_init__(self) -> None:
        if self.live & self.terminal:
            raise ValueError("A status cannot be both live and terminal")


_ADDRESS_PARTITION = StatusPartition(
    live=frozenset({FeedStatus.ACTIVE, FeedStatus.PENDING}),
    terminal=frozenset({FeedStatus.DISCONTINUED, FeedStatus.CANCELED}),
)

STATUS_PARTITIONS: Mapping[EntityKind, StatusPartition] = MappingProxyType(
    {
        EntityKind.POST_CODE: StatusPartition(
            live=frozenset({FeedStatus.ACTIVE}),
            terminal=frozenset({FeedStatus.DISCONTINUED}),
        ),
        EntityKind.ROAD: StatusPartition(
            live=frozenset({FeedStatus.EFFECTIVE, FeedStatus.TEMPORARY}),
            terminal=frozenset({FeedStatus.DISCONTINUED, FeedStatus.CANCELED}),
        ),
        EntityKind.ACCESS_ADDRESS: _ADDRESS_PARTITION,
        EntityKind.UNIT_ADDRESS: _ADDRESS_PARTITION,
    }
)

_INSERT = Classification(ChangeOperation.INSERT)
_UPDATE = Classification(ChangeOperation.UPDATE)
_DELETE = Classification(ChangeOperation.DELETE)
_SKIP = Classification(ChangeOperation.SKIP, "delete for an entity never created locally")


def classify(kind: EntityKind, *, exists: bool, status: FeedStatus) -> Classification:
    """Decide what a record with ``status`` means, given whether it is mapped locally.

    Pure and total: statuses outside the kind's partition classify as an error
    rather than raising.
    """

    partition = STATUS_PARTITIONS[kind]
    if status in partition.live:
        return _UPDATE if exists else _INSERT
    if status in partition.terminal:
        return _DELETE if exists else _SKIP
    return Classification(
        ChangeOperation.ERROR,
        f"{AMBIGUOUS_TRANSITION}: {kind} with status {status!r}",
    )
