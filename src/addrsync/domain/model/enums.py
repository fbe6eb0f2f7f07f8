"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class EntityKind(StrEnum):
    """Discriminator for the four address register entity kinds."""

    POST_CODE = "post_code"
    ROAD = "road"
    ACCESS_ADDRESS = "access_address"
    UNIT_ADDRESS = "unit_address"


# Parents always precede the kinds that reference them.
KIND_ORDER: Final[tuple[EntityKind, ...]] = (
    EntityKind.POST_CODE,
    EntityKind.ROAD,
    EntityKind.ACCESS_ADDRESS,
    EntityKind.UNIT_ADDRESS,
)


def kind_rank(kind: EntityKind) -> int:
    return KIND_ORDER.index(kind)


class FeedStatus(StrEnum):
    """Lifecycle status as reported by the external registry."""

    ACTIVE = "active"
    PENDING = "pending"
    EFFECTIVE = "effective"
    TEMPORARY = "temporary"
    DISCONTINUED = "discontinued"
    CANCELED = "canceled"


class RoadStatus(StrEnum):
    EFFECTIVE = "effective"
    TEMPORARY = "temporary"


class AddressStatus(StrEnum):
    ACTIVE = "active"
    PENDING = "pending"
    DISCONTINUED = "discontinued"
    CANCELED = "canceled"
