"""Translate feed payloads into domain records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from addrsync.domain.model import (
    AccessAddressRecord,
    EntityKind,
    PostCodeRecord,
    RoadRecord,
    UnitAddressRecord,
)

from .schema import (
    AccessAddressPayload,
    PostCodePayload,
    RecordPayload,
    RoadPayload,
    UnitAddressPayload,
)

if TYPE_CHECKING:
    from addrsync.domain.model import ExternalRecord


class FeedPayloadError(ValueError):
    """Raised when a feed payload cannot be translated into a record."""


PAYLOAD_MODELS: Final[dict[EntityKind, type[RecordPayload]]] = {
    EntityKind.POST_CODE: PostCodePayload,
    EntityKind.ROAD: RoadPayload,
    EntityKind.ACCESS_ADDRESS: AccessAddressPayload,
    EntityKind.UNIT_ADDRESS: UnitAddressPayload,
}


def _translate_payload(payload: RecordPayload) -> ExternalRecord:
    match payload:
        case PostCodePayload():
            return PostCodeRecord(
                external_id=payload.number,
                name=payload.name,
                status=payload.status,
                updated=payload.updated,
                sequence=payload.txid,
            )
        case RoadPayload():
            return RoadRecord(
                external_id=payload.id,
                name=payload.name,
                status=payload.status,
                updated=payload.updated,
                sequence=payload.txid,
            )
        case AccessAddressPayload():
            return AccessAddressRecord(
                external_id=payload.id,
                status=payload.status,
                updated=payload.updated,
                sequence=payload.txid,
                created=payload.created,
                municipal_code=payload.municipal_code,
                road_code=payload.road_code,
                house_number=payload.house_number,
                post_code_number=payload.post_code,
                road_external_id=payload.road_id,
                east=payload.east,
                north=payload.north,
                supplementary_town_name=payload.supplementary_town_name,
                plot_id=payload.plot_id,
                pending_official=payload.pending_official,
            )
        case UnitAddressPayload():
            return UnitAddressRecord(
                external_id=payload.id,
                status=payload.status,
                updated=payload.updated,
                sequence=payload.txid,
                created=payload.created,
                access_address_external_id=payload.access_address_id,
                floor_name=payload.floor,
                suite_name=payload.suite,
                pending_official=payload.pending_official,
            )
        case _:
            raise FeedPayloadError(f"Unsupported payload {type(payload).__name__}")


def parse_record(kind: EntityKind, payload: RecordPayload | Mapping[str, Any]) -> ExternalRecord:
    """Validate ``payload`` for ``kind`` and translate it to a domain record."""

    model = PAYLOAD_MODELS[kind]
    if isinstance(payload, Mapping):
        try:
            validated = model.model_validate(payload)
        except ValidationError as exc:
            raise FeedPayloadError(f"Invalid {kind} payload: {exc}") from exc
    else:
        validated = payload
    if not isinstance(validated, model):
        raise FeedPayloadError(f"Expected {model.__name__}, got {type(validated).__name__}")
    return _translate_payload(validated)
