"""Value objects describing the mutable part of address aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID  # noqa: TC003

from addrsync.domain.model.enums import AddressStatus  # noqa: TC001


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessAddressDetails:
    municipal_code: str
    status: AddressStatus
    road_code: str
    house_number: str
    post_code_id: UUID
    road_id: UUID
    east: float
    north: float
    supplementary_town_name: str | None = None
    plot_id: str | None = None
    pending_official: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class UnitAddressDetails:
    access_address_id: UUID
    status: AddressStatus
    floor_name: str | None = None
    suite_name: str | None = None
    pending_official: bool = False
