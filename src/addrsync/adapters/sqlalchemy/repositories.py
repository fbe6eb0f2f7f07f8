"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter
from sqlalchemy import func, select

from addrsync.adapters.sqlalchemy.mappings import (
    CheckpointRecord,
    StoredEvent,
    address_event_table,
    import_checkpoint_table,
)
from addrsync.domain.model import EVENT_TYPES

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.orm import Session

    from addrsync.domain.model import AddressEvent, DomainEvent
    from addrsync.domain.ports import Checkpoint

READ_BATCH_SIZE: Final[int] = 1000


@cache
def _adapter_for(event_type: type[DomainEvent]) -> TypeAdapter[DomainEvent]:
    return TypeAdapter(event_type)


def encode_event(event: AddressEvent, *, recorded_at: datetime | None = None) -> StoredEvent:
    payload = _adapter_for(type(event)).dump_json(event).decode("utf-8")
    return StoredEvent(
        event_type=event.EVENT_TYPE,
        entity_kind=event.KIND,
        entity_id=event.entity_id,
        payload=payload,
        recorded_at=recorded_at or datetime.now(tz=UTC),
    )


def decode_event(stored: StoredEvent) -> AddressEvent:
    try:
        event_type = EVENT_TYPES[stored.event_type]
    except KeyError:
        raise ValueError(f"Unknown event type {stored.event_type!r}") from None
    return _adapter_for(event_type).validate_json(stored.payload)  # type: ignore[return-value]


class SqlAlchemyEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_all(self, events: Sequence[AddressEvent]) -> None:
        recorded_at = datetime.now(tz=UTC)
        self.session.add_all(encode_event(event, recorded_at=recorded_at) for event in events)

    def iter_all(self) -> Iterator[AddressEvent]:
        stmt = (
            select(StoredEvent)
            .order_by(address_event_table.c.position)
            .execution_options(yield_per=READ_BATCH_SIZE)
        )
        for stored in self.session.scalars(stmt):
            yield decode_event(stored)

    def count(self) -> int:
        stmt = select(func.count()).select_from(address_event_table)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyCheckpointRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, checkpoint: Checkpoint) -> None:
        record = CheckpointRecord.from_checkpoint(checkpoint, completed_at=datetime.now(tz=UTC))
        self.session.add(record)

    def latest(self) -> Checkpoint | None:
        stmt = select(CheckpointRecord).order_by(import_checkpoint_table.c.id.desc()).limit(1)
        record = self.session.scalars(stmt).first()
        return record.checkpoint if record is not None else None


if TYPE_CHECKING:
    from addrsync.domain.ports import CheckpointRepository, EventRepository

    _events_check: type[EventRepository] = SqlAlchemyEventRepository
    _checkpoints_check: type[CheckpointRepository] = SqlAlchemyCheckpointRepository
