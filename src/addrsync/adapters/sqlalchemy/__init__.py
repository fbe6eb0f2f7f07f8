"""SQLAlchemy persistence for the register history and import checkpoints."""

from __future__ import annotations

from .checkpoints import SqlAlchemyCheckpointStore
from .event_log import SqlAlchemyEventLog
from .mappings import (
    CheckpointRecord,
    StoredEvent,
    create_all_tables,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyCheckpointRepository,
    SqlAlchemyEventRepository,
    decode_event,
    encode_event,
)
from .unit_of_work import (
    SqlAlchemyRegisterUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "CheckpointRecord",
    "SqlAlchemyCheckpointRepository",
    "SqlAlchemyCheckpointStore",
    "SqlAlchemyEventLog",
    "SqlAlchemyEventRepository",
    "SqlAlchemyRegisterUnitOfWork",
    "StartupError",
    "StoredEvent",
    "configured_engine",
    "create_all_tables",
    "decode_event",
    "encode_event",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
