"""Domain port definitions for adapters."""

from __future__ import annotations

from .checkpoints import Checkpoint, CheckpointRange, CheckpointStore, EnumeratingCheckpointStore
from .feed import EnumeratingFeedClient, FeedClient
from .persistence import CheckpointRepository, EventRepository
from .store import AddressStore, EntityIndex, EventLog
from .unit_of_work import (
    RegisterRepositories,
    RegisterUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AddressStore",
    "Checkpoint",
    "CheckpointRange",
    "CheckpointRepository",
    "CheckpointStore",
    "EntityIndex",
    "EnumeratingCheckpointStore",
    "EnumeratingFeedClient",
    "EventLog",
    "EventRepository",
    "FeedClient",
    "RegisterRepositories",
    "RegisterUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
