"""Reference resolution: parent external ids to internal ids through the index."""

from __future__ import annotations

from typing import TYPE_CHECKING

from addrsync.domain.model import (
    AccessAddressRecord,
    EntityKind,
    ExternalRecord,
    UnitAddressRecord,
)

from .contracts import (
    DeletedParent,
    Resolution,
    Resolved,
    ResolvedReferences,
    UnresolvedReference,
)

if TYPE_CHECKING:
    from addrsync.domain.ports import AddressStore, EntityIndex

_NO_REFERENCES = Resolved(references=ResolvedReferences())


def resolve_access_address(record: AccessAddressRecord, index: EntityIndex) -> Resolution:
    post_code_id = index.lookup(EntityKind.POST_CODE, record.post_code_number)
    if post_code_id is None:
        return UnresolvedReference(kind=EntityKind.POST_CODE, external_id=record.post_code_number)
    road_id = index.lookup(EntityKind.ROAD, record.road_external_id)
    if road_id is None:
        return UnresolvedReference(kind=EntityKind.ROAD, external_id=record.road_external_id)
    return Resolved(references=ResolvedReferences(post_code_id=post_code_id, road_id=road_id))


def resolve_unit_address(
    record: UnitAddressRecord,
    store: AddressStore,
    *,
    require_live_parent: bool,
) -> Resolution:
    parent_external_id = record.access_address_external_id
    parent_id = store.index.lookup(EntityKind.ACCESS_ADDRESS, parent_external_id)
    if parent_id is None:
        return UnresolvedReference(kind=EntityKind.ACCESS_ADDRESS, external_id=parent_external_id)
    if require_live_parent:
        parent = store.load(EntityKind.ACCESS_ADDRESS, parent_id)
        if parent is None:
            return UnresolvedReference(
                kind=EntityKind.ACCESS_ADDRESS,
                external_id=parent_external_id,
            )
        if parent.deleted:
            return DeletedParent(
                kind=EntityKind.ACCESS_ADDRESS,
                external_id=parent_external_id,
                entity_id=parent_id,
            )
    return Resolved(references=ResolvedReferences(access_address_id=parent_id))


def resolve_references(
    record: ExternalRecord,
    store: AddressStore,
    *,
    inserting: bool,
) -> Resolution:
    """Resolve the parents of ``record``.

    Lookups are live against the store's index, so parents written earlier in the
    same run are visible. Only unit-address inserts check that the parent is live.
    """

    match record:
        case AccessAddressRecord():
            return resolve_access_address(record, store.index)
        case UnitAddressRecord():
            return resolve_unit_address(record, store, require_live_parent=inserting)
        case _:
            return _NO_REFERENCES
