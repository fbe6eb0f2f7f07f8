"""Records as delivered by the external registry feed.

Records are a tagged union over the four entity kinds. They carry the registry's
own identifiers; resolution to internal ids happens during reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003
from typing import ClassVar

from .enums import EntityKind, FeedStatus  # noqa: TC001


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalRecord:
    """Shared shape of every feed record.

    ``updated`` is the registry's own change timestamp, ``sequence`` the feed
    transaction that produced the record. Either may be absent.
    """

    KIND: ClassVar[EntityKind]

    external_id: str
    status: FeedStatus
    updated: datetime | None = None
    sequence: int | None = None

    @property
    def kind(self) -> EntityKind:
        return self.KIND


@dataclass(frozen=True, slots=True, kw_only=True)
class PostCodeRecord(ExternalRecord):
    """Post code keyed by its number (``external_id``)."""

    KIND: ClassVar[EntityKind] = EntityKind.POST_CODE

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RoadRecord(ExternalRecord):
    KIND: ClassVar[EntityKind] = EntityKind.ROAD

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessAddressRecord(ExternalRecord):
    KIND: ClassVar[EntityKind] = EntityKind.ACCESS_ADDRESS

    municipal_code: str
    road_code: str
    house_number: str
    post_code_number: str
    road_external_id: str
    east: float
    north: float
    supplementary_town_name: str | None = None
    plot_id: str | None = None
    pending_official: bool = False
    created: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitAddressRecord(ExternalRecord):
    KIND: ClassVar[EntityKind] = EntityKind.UNIT_ADDRESS

    access_address_external_id: str
    floor_name: str | None = None
    suite_name: str | None = None
    pending_official: bool = False
    created: datetime | None = None


type AnyRecord = PostCodeRecord | RoadRecord | AccessAddressRecord | UnitAddressRecord
