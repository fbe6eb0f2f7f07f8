"""Domain model for the address register."""

from __future__ import annotations

from .address import (
    AGGREGATE_TYPES,
    AccessAddress,
    AddressEntity,
    PostCode,
    Road,
    UnitAddress,
    rebuild_register,
)
from .entity import Entity, new_id
from .enums import (
    KIND_ORDER,
    AddressStatus,
    EntityKind,
    FeedStatus,
    RoadStatus,
    kind_rank,
)
from .errors import (
    BENIGN_ERROR_CODES,
    DomainError,
    DomainErrorCode,
    DomainResult,
)
from .events import (
    CREATED_EVENT_TYPES,
    EVENT_TYPES,
    AccessAddressCreated,
    AccessAddressDeleted,
    AccessAddressUpdated,
    AddressEvent,
    DomainEvent,
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
from .records import (
    AccessAddressRecord,
    AnyRecord,
    ExternalRecord,
    PostCodeRecord,
    RoadRecord,
    UnitAddressRecord,
)
from .values import AccessAddressDetails, UnitAddressDetails

__all__ = [
    "AGGREGATE_TYPES",
    "BENIGN_ERROR_CODES",
    "CREATED_EVENT_TYPES",
    "EVENT_TYPES",
    "KIND_ORDER",
    "AccessAddress",
    "AccessAddressCreated",
    "AccessAddressDeleted",
    "AccessAddressDetails",
    "AccessAddressRecord",
    "AccessAddressUpdated",
    "AddressEntity",
    "AddressEvent",
    "AddressStatus",
    "AnyRecord",
    "DomainError",
    "DomainErrorCode",
    "DomainEvent",
    "DomainResult",
    "Entity",
    "EntityKind",
    "ExternalRecord",
    "FeedStatus",
    "PostCode",
    "PostCodeCreated",
    "PostCodeDeleted",
    "PostCodeRecord",
    "PostCodeUpdated",
    "Road",
    "RoadCreated",
    "RoadDeleted",
    "RoadRecord",
    "RoadStatus",
    "RoadUpdated",
    "UnitAddress",
    "UnitAddressCreated",
    "UnitAddressDeleted",
    "UnitAddressDetails",
    "UnitAddressRecord",
    "UnitAddressUpdated",
    "kind_rank",
    "new_id",
    "rebuild_register",
]
