"""Pydantic models describing the registry feed payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from addrsync.domain.model import FeedStatus


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LatestTransactionResponse(FeedBaseModel):
    txid: int


class TransactionPayload(FeedBaseModel):
    txid: int
    occurred_at: datetime | None = Field(default=None, alias="occurredAt")


class TransactionListResponse(FeedBaseModel):
    transactions: list[TransactionPayload]


class PageResponse(FeedBaseModel):
    items: list[dict[str, Any]]
    page: int = 1
    total_pages: int = Field(default=1, alias="totalPages")


class ErrorResponse(FeedBaseModel):
    code: str
    message: str


class RecordPayload(FeedBaseModel):
    """Fields every entity payload carries."""

    status: FeedStatus
    updated: datetime | None = Field(default=None, alias="updatedAt")
    txid: int | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("updated", mode="after")
    @classmethod
    def _updated_as_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class PostCodePayload(RecordPayload):
    number: str
    name: str
    status: FeedStatus = FeedStatus.ACTIVE


class RoadPayload(RecordPayload):
    id: str
    name: str


class AccessAddressPayload(RecordPayload):
    id: str
    created: datetime | None = Field(default=None, alias="createdAt")
    municipal_code: str = Field(alias="municipalCode")
    road_code: str = Field(alias="roadCode")
    house_number: str = Field(alias="houseNumber")
    post_code: str = Field(alias="postCode")
    road_id: str = Field(alias="roadId")
    east: float
    north: float
    supplementary_town_name: str | None = Field(default=None, alias="supplementaryTownName")
    plot_id: str | None = Field(default=None, alias="plotId")
    pending_official: bool = Field(default=False, alias="pendingOfficial")

    _normalize_optional = field_validator(
        "supplementary_town_name", "plot_id", mode="before"
    )(_blank_to_none)

    @field_validator("created", mode="after")
    @classmethod
    def _created_as_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class UnitAddressPayload(RecordPayload):
    id: str
    created: datetime | None = Field(default=None, alias="createdAt")
    access_address_id: str = Field(alias="accessAddressId")
    floor: str | None = None
    suite: str | None = None
    pending_official: bool = Field(default=False, alias="pendingOfficial")

    _normalize_optional = field_validator("floor", "suite", mode="before")(_blank_to_none)

    @field_validator("created", mode="after")
    @classmethod
    def _created_as_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)
