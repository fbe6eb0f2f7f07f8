"""Map registry statuses onto domain statuses."""

from __future__ import annotations

from typing import Final

from addrsync.domain.model import AddressStatus, FeedStatus, RoadStatus

_ROAD_STATUSES: Final[dict[FeedStatus, RoadStatus]] = {
    FeedStatus.EFFECTIVE: RoadStatus.EFFECTIVE,
    FeedStatus.TEMPORARY: RoadStatus.TEMPORARY,
}

_ADDRESS_STATUSES: Final[dict[FeedStatus, AddressStatus]] = {
    FeedStatus.ACTIVE: AddressStatus.ACTIVE,
    FeedStatus.PENDING: AddressStatus.PENDING,
    FeedStatus.DISCONTINUED: AddressStatus.DISCONTINUED,
    FeedStatus.CANCELED: AddressStatus.CANCELED,
}


def map_road_status(status: FeedStatus) -> RoadStatus:
    try:
        return _ROAD_STATUSES[status]
    except KeyError:
        raise ValueError(f"No road status for feed status {status!r}") from None


def map_address_status(status: FeedStatus) -> AddressStatus:
    try:
        return _ADDRESS_STATUSES[status]
    except KeyError:
        raise ValueError(f"No address status for feed status {status!r}") from None
