"""Ports for the event-sourced address store and its entity index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from addrsync.domain.model import AddressEntity, AddressEvent, EntityKind


@runtime_checkable
class EntityIndex(Protocol):
    """Read view mapping external ids to internal ids, per entity kind."""

    def lookup(self, kind: EntityKind, external_id: str) -> UUID | None: ...

    def ids(self, kind: EntityKind) -> frozenset[UUID]:
        """Every internal id known for ``kind``. Expensive; call once per batch."""
        ...


@runtime_checkable
class AddressStore(Protocol):
    """Owner of aggregate state; the only writer of the entity index.

    ``store`` persists the entity's pending events and returns False when a new
    entity collides with an already mapped external id. Writes are visible to the
    next ``index`` lookup.
    """

    @property
    def index(self) -> EntityIndex: ...

    def load(self, kind: EntityKind, entity_id: UUID) -> AddressEntity | None: ...

    def store(self, entity: AddressEntity) -> bool: ...

    def store_many(self, entities: Sequence[AddressEntity]) -> int: ...

    def rehydrate_index(self) -> None: ...


@runtime_checkable
class EventLog(Protocol):
    """Append-only persisted history backing an address store."""

    def append(self, events: Sequence[AddressEvent]) -> None: ...

    def read_all(self) -> Iterator[AddressEvent]: ...


__all__ = ["AddressStore", "EntityIndex", "EventLog"]
