"""Feed record builders for tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from addrsync.domain.model import (
    AccessAddressRecord,
    FeedStatus,
    PostCodeRecord,
    RoadRecord,
    UnitAddressRecord,
)

if TYPE_CHECKING:
    from datetime import datetime


def make_post_code(
    number: str = "8000",
    *,
    name: str = "Aarhus C",
    status: FeedStatus = FeedStatus.ACTIVE,
    sequence: int | None = None,
) -> PostCodeRecord:
    return PostCodeRecord(external_id=number, name=name, status=status, sequence=sequence)


def make_road(
    external_id: str = "R1",
    *,
    name: str = "Vestergade",
    status: FeedStatus = FeedStatus.EFFECTIVE,
    updated: datetime | None = None,
    sequence: int | None = None,
) -> RoadRecord:
    return RoadRecord(
        external_id=external_id,
        name=name,
        status=status,
        updated=updated,
        sequence=sequence,
    )


def make_access_address(  # noqa: PLR0913
    external_id: str = "A1",
    *,
    road: str = "R1",
    post_code: str = "8000",
    house_number: str = "12",
    status: FeedStatus = FeedStatus.ACTIVE,
    updated: datetime | None = None,
    sequence: int | None = None,
) -> AccessAddressRecord:
    return AccessAddressRecord(
        external_id=external_id,
        status=status,
        updated=updated,
        sequence=sequence,
        municipal_code="0751",
        road_code="1234",
        house_number=house_number,
        post_code_number=post_code,
        road_external_id=road,
        east=575000.0,
        north=6223000.0,
    )


def make_unit_address(
    external_id: str = "U1",
    *,
    access_address: str = "A1",
    floor_name: str | None = "1",
    suite_name: str | None = "tv",
    status: FeedStatus = FeedStatus.ACTIVE,
    updated: datetime | None = None,
    sequence: int | None = None,
) -> UnitAddressRecord:
    return UnitAddressRecord(
        external_id=external_id,
        status=status,
        updated=updated,
        sequence=sequence,
        access_address_external_id=access_address,
        floor_name=floor_name,
        suite_name=suite_name,
    )
