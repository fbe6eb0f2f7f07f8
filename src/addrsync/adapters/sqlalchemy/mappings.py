"""SQLAlchemy mapping metadata for the persisted register history."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from addrsync.domain.model import EntityKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from addrsync.domain.ports import Checkpoint

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


@dataclass(eq=False, kw_only=True)
class StoredEvent:
    """One row of the append-only register history."""

    event_type: str
    entity_kind: EntityKind
    entity_id: uuid.UUID
    payload: str
    recorded_at: datetime
    position: int | None = None


@dataclass(eq=False, kw_only=True)
class CheckpointRecord:
    """A completed checkpoint; exactly one of ``sequence`` and ``timestamp`` is set."""

    completed_at: datetime
    sequence: int | None = None
    timestamp: datetime | None = None
    id: int | None = None

    @classmethod
    def from_checkpoint(cls, checkpoint: Checkpoint, *, completed_at: datetime) -> CheckpointRecord:
        if isinstance(checkpoint, datetime):
            return cls(timestamp=checkpoint, completed_at=completed_at)
        return cls(sequence=checkpoint, completed_at=completed_at)

    @property
    def checkpoint(self) -> Checkpoint:
        if self.sequence is not None:
            return self.sequence
        if self.timestamp is not None:
            return self.timestamp
        raise ValueError(f"Checkpoint record {self.id} has neither sequence nor timestamp")


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

address_event_table = Table(
    "address_event",
    mapper_registry.metadata,
    Column("position", Integer, primary_key=True, autoincrement=True),
    Column("event_type", String(64), nullable=False),
    Column("entity_kind", Enum(EntityKind, native_enum=False, length=32), nullable=False),
    Column("entity_id", UUIDColumnType, nullable=False),
    Column("payload", Text, nullable=False),
    Column("recorded_at", UTCDateTime, nullable=False),
    Index(None, "entity_id"),
)

import_checkpoint_table = Table(
    "import_checkpoint",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("sequence", BigInteger, nullable=True),
    Column("timestamp", UTCDateTime, nullable=True),
    Column("completed_at", UTCDateTime, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the persisted records."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(StoredEvent, address_event_table)
    mapper_registry.map_imperatively(CheckpointRecord, import_checkpoint_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
