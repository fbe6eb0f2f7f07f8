"""Address register aggregates.

Commands validate their input, raise an event and return a ``DomainResult``.
State only changes by applying events, so an aggregate replayed from its history
ends up identical to the instance that raised it.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, ClassVar, Final, Self

from .entity import Entity, new_id
from .enums import EntityKind, RoadStatus
from .errors import DomainError, DomainErrorCode, DomainResult, done, fail, ok
from .events import (
    CREATED_EVENT_TYPES,
    AccessAddressCreated,
    AccessAddressDeleted,
    AccessAddressUpdated,
    PostCodeCreated,
    PostCodeDeleted,
    PostCodeUpdated,
    RoadCreated,
    RoadDeleted,
    RoadUpdated,
    UnitAddressCreated,
    UnitAddressDeleted,
    UnitAddressUpdated,
)
from .values import AccessAddressDetails, UnitAddressDetails  # noqa: TC001

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable
    from uuid import UUID

    from .events import AddressEvent, CreatedEvent


@dataclass(eq=False, kw_only=True)
class AddressEntity(Entity):
    """Common lifecycle of register entities: live until soft-deleted, never removed."""

    deleted: bool = False
    external_created: datetime | None = None
    external_updated: datetime | None = None

    @classmethod
    @abstractmethod
    def from_created(cls, event: CreatedEvent) -> Self:
        """Build the aggregate from its creation event without recording it again."""

    @abstractmethod
    def _deleted_event(self, external_updated: datetime | None) -> AddressEvent: ...

    @classmethod
    def _start(cls, created: CreatedEvent) -> Self:
        entity = cls.from_created(created)
        entity._pending_events.append(created)  # noqa: SLF001
        return entity

    @property
    def label(self) -> str:
        return f"{self.kind} {self.external_key!r}"

    def delete(self, *, external_updated: datetime | None = None) -> DomainResult[None]:
        if self.deleted:
            return fail(
                DomainErrorCode.CANNOT_DELETE_ALREADY_DELETED,
                f"{self.label} is already deleted",
            )
        self._raise(self._deleted_event(external_updated))
        return done()

    def _reject_update_if_deleted(self) -> DomainResult[None] | None:
        if self.deleted:
            return fail(
                DomainErrorCode.CANNOT_UPDATE_DELETED, f"Cannot update deleted {self.label}"
            )
        return None


@dataclass(eq=False, kw_only=True)
class PostCode(AddressEntity):
    KIND: ClassVar[EntityKind] = EntityKind.POST_CODE

    number: str
    name: str

    @property
    def external_key(self) -> str:
        return self.number

    @classmethod
    def create(
        cls,
        *,
        number: str,
        name: str,
        entity_id: UUID | None = None,
    ) -> DomainResult[PostCode]:
        if not number.strip():
            return fail(DomainErrorCode.INVALID_POST_CODE_NUMBER, "Post code number is blank")
        if not name.strip():
            return fail(DomainErrorCode.INVALID_NAME, f"Post code {number!r} has a blank name")
        created = PostCodeCreated(entity_id=entity_id or new_id(), number=number, name=name)
        return ok(cls._start(created))

    @classmethod
    def from_created(cls, event: CreatedEvent) -> Self:
        if not isinstance(event, PostCodeCreated):
            raise TypeError(f"Cannot build a post code from {type(event).__name__}")
        return cls(id=event.entity_id, number=event.number, name=event.name)

    def update(self, *, name: str) -> DomainResult[None]:
        rejected = self._reject_update_if_deleted()
        if rejected is not None:
            return rejected
        if not name.strip():
            return fail(DomainErrorCode.INVALID_NAME, f"Post code {self.number!r} has a blank name")
        if name == self.name:
            return fail(DomainErrorCode.NO_CHANGES, f"No changes to {self.label}")
        self._raise(PostCodeUpdated(entity_id=self.id, name=name))
        return done()

    def _deleted_event(self, external_updated: datetime | None) -> AddressEvent:
        _ = external_updated
        return PostCodeDeleted(entity_id=self.id)

    def _when(self, event: AddressEvent) -> None:
        match event:
            case PostCodeUpdated(name=name):
                self.name = name
            case PostCodeDeleted():
                self.deleted = True
            case _:
                raise TypeError(f"{type(event).__name__} does not apply to a post code")


@dataclass(eq=False, kw_only=True)
class Road(AddressEntity):
    KIND: ClassVar[EntityKind] = EntityKind.ROAD

    external_id: str
    name: str
    status: RoadStatus

    @property
    def external_key(self) -> str:
        return self.external_id

    @classmethod
    def create(
        cls,
        *,
        external_id: str,
        name: str,
        status: RoadStatus,
        entity_id: UUID | None = None,
    ) -> DomainResult[Road]:
        if not external_id.strip():
            return fail(DomainErrorCode.INVALID_EXTERNAL_ID, "Road external id is blank")
        if not name.strip():
            return fail(DomainErrorCode.INVALID_NAME, f"Road {external_id!r} has a blank name")
        created = RoadCreated(
            entity_id=entity_id or new_id(),
            external_id=external_id,
            name=name,
            status=status,
        )
        return ok(cls._start(created))

    @classmethod
    def from_created(cls, event: CreatedEvent) -> Self:
        if not isinstance(event, RoadCreated):
            raise TypeError(f"Cannot build a road from {type(event).__name__}")
        return cls(
            id=event.entity_id,
            external_id=event.external_id,
            name=event.name,
            status=event.status,
        )

    def update(self, *, name: str, status: RoadStatus) -> DomainResult[None]:
        rejected = self._reject_update_if_deleted()
        if rejected is not None:
            return rejected
        if not name.strip():
            return fail(DomainErrorCode.INVALID_NAME, f"{self.label} has a blank name")
        if name == self.name and status == self.status:
            return fail(DomainErrorCode.NO_CHANGES, f"No changes to {self.label}")
        self._raise(RoadUpdated(entity_id=self.id, name=name, status=status))
        return done()

    def _deleted_event(self, external_updated: datetime | None) -> AddressEvent:
        _ = external_updated
        return RoadDeleted(entity_id=self.id)

    def _when(self, event: AddressEvent) -> None:
        match event:
            case RoadUpdated(name=name, status=status):
                self.name = name
                self.status = status
            case RoadDeleted():
                self.deleted = True
            case _:
                raise TypeError(f"{type(event).__name__} does not apply to a road")


def _access_address_error(
    details: AccessAddressDetails,
    *,
    external_id: str,
    known_post_code_ids: Collection[UUID],
    known_road_ids: Collection[UUID],
) -> DomainError | None:
    if not details.house_number.strip():
        return DomainError(
            DomainErrorCode.INVALID_HOUSE_NUMBER,
            f"Access address {external_id!r} has a blank house number",
        )
    if details.post_code_id not in known_post_code_ids:
        return DomainError(
            DomainErrorCode.POST_CODE_NOT_FOUND,
            f"Access address {external_id!r} references unknown post code {details.post_code_id}",
        )
    if details.road_id not in known_road_ids:
        return DomainError(
            DomainErrorCode.ROAD_NOT_FOUND,
            f"Access address {external_id!r} references unknown road {details.road_id}",
        )
    return None


@dataclass(eq=False, kw_only=True)
class AccessAddress(AddressEntity):
    KIND: ClassVar[EntityKind] = EntityKind.ACCESS_ADDRESS

    external_id: str
    details: AccessAddressDetails

    @property
    def external_key(self) -> str:
        return self.external_id

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        external_id: str,
        details: AccessAddressDetails,
        known_post_code_ids: Collection[UUID],
        known_road_ids: Collection[UUID],
        external_created: datetime | None = None,
        external_updated: datetime | None = None,
        entity_id: UUID | None = None,
    ) -> DomainResult[AccessAddress]:
        if not external_id.strip():
            return fail(DomainErrorCode.INVALID_EXTERNAL_ID, "Access address external id is blank")
        error = _access_address_error(
            details,
            external_id=external_id,
            known_post_code_ids=known_post_code_ids,
            known_road_ids=known_road_ids,
        )
        if error is not None:
            return DomainResult(error=error)
        created = AccessAddressCreated(
            entity_id=entity_id or new_id(),
            external_id=external_id,
            external_created=external_created,
            external_updated=external_updated,
            details=details,
        )
        return ok(cls._start(created))

    @classmethod
    def from_created(cls, event: CreatedEvent) -> Self:
        if not isinstance(event, AccessAddressCreated):
            raise TypeError(f"Cannot build an access address from {type(event).__name__}")
        return cls(
            id=event.entity_id,
            external_id=event.external_id,
            external_created=event.external_created,
            external_updated=event.external_updated,
            details=event.details,
        )

    def update(
        self,
        *,
        details: AccessAddressDetails,
        known_post_code_ids: Collection[UUID],
        known_road_ids: Collection[UUID],
        external_updated: datetime | None = None,
    ) -> DomainResult[None]:
        rejected = self._reject_update_if_deleted()
        if rejected is not None:
            return rejected
        error = _access_address_error(
            details,
            external_id=self.external_id,
            known_post_code_ids=known_post_code_ids,
            known_road_ids=known_road_ids,
        )
        if error is not None:
            return DomainResult(error=error)
        if details == self.details:
            return fail(DomainErrorCode.NO_CHANGES, f"No changes to {self.label}")
        self._raise(
            AccessAddressUpdated(
                entity_id=self.id,
                external_updated=external_updated,
                details=details,
            )
        )
        return done()

    def _deleted_event(self, external_updated: datetime | None) -> AddressEvent:
        return AccessAddressDeleted(entity_id=self.id, external_updated=external_updated)

    def _when(self, event: AddressEvent) -> None:
        match event:
            case AccessAddressUpdated(details=details, external_updated=external_updated):
                self.details = details
                self.external_updated = external_updated or self.external_updated
            case AccessAddressDeleted(external_updated=external_updated):
                self.deleted = True
                self.external_updated = external_updated or self.external_updated
            case _:
                raise TypeError(f"{type(event).__name__} does not apply to an access address")


@dataclass(eq=False, kw_only=True)
class UnitAddress(AddressEntity):
    KIND: ClassVar[EntityKind] = EntityKind.UNIT_ADDRESS

    external_id: str
    details: UnitAddressDetails

    @property
    def external_key(self) -> str:
        return self.external_id

    @classmethod
    def create(
        cls,
        *,
        external_id: str,
        details: UnitAddressDetails,
        known_access_address_ids: Collection[UUID],
        external_created: datetime | None = None,
        external_updated: datetime | None = None,
        entity_id: UUID | None = None,
    ) -> DomainResult[UnitAddress]:
        if not external_id.strip():
            return fail(DomainErrorCode.INVALID_EXTERNAL_ID, "Unit address external id is blank")
        if details.access_address_id not in known_access_address_ids:
            return fail(
                DomainErrorCode.ACCESS_ADDRESS_NOT_FOUND,
                f"Unit address {external_id!r} references unknown access address "
                f"{details.access_address_id}",
            )
        created = UnitAddressCreated(
            entity_id=entity_id or new_id(),
            external_id=external_id,
            external_created=external_created,
            external_updated=external_updated,
            details=details,
        )
        return ok(cls._start(created))

    @classmethod
    def from_created(cls, event: CreatedEvent) -> Self:
        if not isinstance(event, UnitAddressCreated):
            raise TypeError(f"Cannot build a unit address from {type(event).__name__}")
        return cls(
            id=event.entity_id,
            external_id=event.external_id,
            external_created=event.external_created,
            external_updated=event.external_updated,
            details=event.details,
        )

    def update(
        self,
        *,
        details: UnitAddressDetails,
        known_access_address_ids: Collection[UUID],
        external_updated: datetime | None = None,
    ) -> DomainResult[None]:
        rejected = self._reject_update_if_deleted()
        if rejected is not None:
            return rejected
        if details.access_address_id not in known_access_address_ids:
            return fail(
                DomainErrorCode.ACCESS_ADDRESS_NOT_FOUND,
                f"{self.label} references unknown access address {details.access_address_id}",
            )
        if details == self.details:
            return fail(DomainErrorCode.NO_CHANGES, f"No changes to {self.label}")
        self._raise(
            UnitAddressUpdated(
                entity_id=self.id,
                external_updated=external_updated,
                details=details,
            )
        )
        return done()

    def _deleted_event(self, external_updated: datetime | None) -> AddressEvent:
        return UnitAddressDeleted(entity_id=self.id, external_updated=external_updated)

    def _when(self, event: AddressEvent) -> None:
        match event:
            case UnitAddressUpdated(details=details, external_updated=external_updated):
                self.details = details
                self.external_updated = external_updated or self.external_updated
            case UnitAddressDeleted(external_updated=external_updated):
                self.deleted = True
                self.external_updated = external_updated or self.external_updated
            case _:
                raise TypeError(f"{type(event).__name__} does not apply to a unit address")


AGGREGATE_TYPES: Final[dict[EntityKind, type[AddressEntity]]] = {
    EntityKind.POST_CODE: PostCode,
    EntityKind.ROAD: Road,
    EntityKind.ACCESS_ADDRESS: AccessAddress,
    EntityKind.UNIT_ADDRESS: UnitAddress,
}


def rebuild_register(events: Iterable[AddressEvent]) -> dict[UUID, AddressEntity]:
    """Replay an ordered event history into aggregates keyed by internal id."""

    entities: dict[UUID, AddressEntity] = {}
    for event in events:
        if isinstance(event, CREATED_EVENT_TYPES):
            if event.entity_id in entities:
                raise ValueError(f"{event.EVENT_TYPE} repeated for entity {event.entity_id}")
            entities[event.entity_id] = AGGREGATE_TYPES[event.KIND].from_created(event)
            continue
        entity = entities.get(event.entity_id)
        if entity is None:
            raise ValueError(f"{event.EVENT_TYPE} for unknown entity {event.entity_id}")
        entity.apply_event(event)
    return entities
