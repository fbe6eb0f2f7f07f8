"""Domain events raised by the address aggregates.

Events are the unit of persistence: the register is rebuilt by replaying them in
order. Each class carries an ``EVENT_TYPE`` tag used by storage adapters to pick
the class when decoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003
from typing import ClassVar, Final
from uuid import UUID  # noqa: TC003

from addrsync.domain.model.enums import EntityKind, RoadStatus  # noqa: TC001
from addrsync.domain.model.values import AccessAddressDetails, UnitAddressDetails


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainEvent:
    entity_id: UUID

    EVENT_TYPE: ClassVar[str]
    KIND: ClassVar[EntityKind]


# Post codes ------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class PostCodeCreated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "post_code_created"
    KIND: ClassVar[EntityKind] = EntityKind.POST_CODE

    number: str
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PostCodeUpdated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "post_code_updated"
    KIND: ClassVar[EntityKind] = EntityKind.POST_CODE

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PostCodeDeleted(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "post_code_deleted"
    KIND: ClassVar[EntityKind] = EntityKind.POST_CODE


# Roads -----------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class RoadCreated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "road_created"
    KIND: ClassVar[EntityKind] = EntityKind.ROAD

    external_id: str
    name: str
    status: RoadStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class RoadUpdated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "road_updated"
    KIND: ClassVar[EntityKind] = EntityKind.ROAD

    name: str
    status: RoadStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class RoadDeleted(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "road_deleted"
    KIND: ClassVar[EntityKind] = EntityKind.ROAD


# Access addresses ------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessAddressCreated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "access_address_created"
    KIND: ClassVar[EntityKind] = EntityKind.ACCESS_ADDRESS

    external_id: str
    external_created: datetime | None = None
    external_updated: datetime | None = None
    details: AccessAddressDetails


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessAddressUpdated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "access_address_updated"
    KIND: ClassVar[EntityKind] = EntityKind.ACCESS_ADDRESS

    external_updated: datetime | None = None
    details: AccessAddressDetails


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessAddressDeleted(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "access_address_deleted"
    KIND: ClassVar[EntityKind] = EntityKind.ACCESS_ADDRESS

    external_updated: datetime | None = None


# Unit addresses --------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitAddressCreated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "unit_address_created"
    KIND: ClassVar[EntityKind] = EntityKind.UNIT_ADDRESS

    external_id: str
    external_created: datetime | None = None
    external_updated: datetime | None = None
    details: UnitAddressDetails


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitAddressUpdated(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "unit_address_updated"
    KIND: ClassVar[EntityKind] = EntityKind.UNIT_ADDRESS

    external_updated: datetime | None = None
    details: UnitAddressDetails


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitAddressDeleted(DomainEvent):
    EVENT_TYPE: ClassVar[str] = "unit_address_deleted"
    KIND: ClassVar[EntityKind] = EntityKind.UNIT_ADDRESS

    external_updated: datetime | None = None


type AddressEvent = (
    PostCodeCreated
    | PostCodeUpdated
    | PostCodeDeleted
    | RoadCreated
    | RoadUpdated
    | RoadDeleted
    | AccessAddressCreated
    | AccessAddressUpdated
    | AccessAddressDeleted
    | UnitAddressCreated
    | UnitAddressUpdated
    | UnitAddressDeleted
)

type CreatedEvent = PostCodeCreated | RoadCreated | AccessAddressCreated | UnitAddressCreated

EVENT_TYPES: Final[dict[str, type[DomainEvent]]] = {
    cls.EVENT_TYPE: cls
    for cls in (
        PostCodeCreated,
        PostCodeUpdated,
        PostCodeDeleted,
        RoadCreated,
        RoadUpdated,
        RoadDeleted,
        AccessAddressCreated,
        AccessAddressUpdated,
        AccessAddressDeleted,
        UnitAddressCreated,
        UnitAddressUpdated,
        UnitAddressDeleted,
    )
}

CREATED_EVENT_TYPES: Final[tuple[type[DomainEvent], ...]] = (
    PostCodeCreated,
    RoadCreated,
    AccessAddressCreated,
    UnitAddressCreated,
)
