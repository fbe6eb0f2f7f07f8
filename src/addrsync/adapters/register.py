"""Event-sourced address store with an in-memory entity index."""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

from addrsync.domain.model import rebuild_register

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from addrsync.domain.model import AddressEntity, AddressEvent, EntityKind
    from addrsync.domain.ports import EventLog

log = getLogger(__name__)


class InMemoryEventLog:
    """Event log kept in process memory; history is lost with the process."""

    def __init__(self, events: Sequence[AddressEvent] = ()) -> None:
        self._events: list[AddressEvent] = list(events)

    def append(self, events: Sequence[AddressEvent]) -> None:
        self._events.extend(events)

    def read_all(self) -> Iterator[AddressEvent]:
        yield from list(self._events)

    def __len__(self) -> int:
        return len(self._events)


class RegisterIndex:
    """External id to internal id maps, one per entity kind."""

    def __init__(self) -> None:
        self._by_external_id: defaultdict[EntityKind, dict[str, UUID]] = defaultdict(dict)

    def lookup(self, kind: EntityKind, external_id: str) -> UUID | None:
        return self._by_external_id[kind].get(external_id)

    def ids(self, kind: EntityKind) -> frozenset[UUID]:
        return frozenset(self._by_external_id[kind].values())

    def register(self, entity: AddressEntity) -> None:
        self._by_external_id[entity.kind][entity.external_key] = entity.id

    def clear(self) -> None:
        self._by_external_id.clear()

    def __len__(self) -> int:
        return sum(len(mapping) for mapping in self._by_external_id.values())


class EventSourcedAddressStore:
    """Address store that persists aggregate events and keeps aggregates cached.

    Soft-deleted entities stay in the index; deletion is a state of the
    aggregate, not a removal.
    """

    def __init__(self, event_log: EventLog) -> None:
        self._event_log = event_log
        self._entities: dict[UUID, AddressEntity] = {}
        self._index = RegisterIndex()

    @property
    def index(self) -> RegisterIndex:
        return self._index

    def load(self, kind: EntityKind, entity_id: UUID) -> AddressEntity | None:
        entity = self._entities.get(entity_id)
        if entity is None or entity.kind is not kind:
            return None
        return entity

    def store(self, entity: AddressEntity) -> bool:
        if self._is_duplicate(entity):
            entity.pull_events()
            return False
        events = entity.pull_events()
        if events:
            self._event_log.append(events)
        self._remember(entity)
        return True

    def store_many(self, entities: Sequence[AddressEntity]) -> int:
        accepted: list[AddressEntity] = []
        events: list[AddressEvent] = []
        claimed: set[tuple[EntityKind, str]] = set()
        for entity in entities:
            key = (entity.kind, entity.external_key)
            if key in claimed or self._is_duplicate(entity):
                entity.pull_events()
                continue
            claimed.add(key)
            events.extend(entity.pull_events())
            accepted.append(entity)
        if events:
            self._event_log.append(events)
        for entity in accepted:
            self._remember(entity)
        return len(accepted)

    def rehydrate_index(self) -> None:
        entities = rebuild_register(self._event_log.read_all())
        self._entities.clear()
        self._index.clear()
        for entity in entities.values():
            self._remember(entity)
        log.info("Rehydrated register index with %s entities", len(self._entities))

    def _is_duplicate(self, entity: AddressEntity) -> bool:
        mapped = self._index.lookup(entity.kind, entity.external_key)
        if mapped is not None and mapped != entity.id:
            log.debug("Refusing %s: already mapped to %s", entity.label, mapped)
            return True
        return False

    def _remember(self, entity: AddressEntity) -> None:
        self._entities[entity.id] = entity
        self._index.register(entity)
