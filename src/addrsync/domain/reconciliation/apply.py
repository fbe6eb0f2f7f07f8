"""Per-kind dispatch and the single-record reconciliation step.

``reconcile`` classifies a record, resolves its parents and runs the matching
aggregate command. It does not write: the returned ``ApplyResult`` carries the
entity with pending events so each engine decides when to store it.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from addrsync.domain.errors import IndexInconsistencyError
from addrsync.domain.model import (
    AccessAddress,
    AccessAddressDetails,
    AccessAddressRecord,
    DomainErrorCode,
    EntityKind,
    FeedStatus,
    PostCode,
    PostCodeRecord,
    Road,
    RoadRecord,
    UnitAddress,
    UnitAddressDetails,
    UnitAddressRecord,
)

from .classify import classify
from .contracts import (
    ApplyOutcome,
    ApplyResult,
    ChangeOperation,
    Classification,
    DeletedParent,
    Resolved,
    ResolvedReferences,
    UnresolvedReference,
)
from .mapping import map_address_status, map_road_status
from .resolve import resolve_references

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from addrsync.domain.model import AddressEntity, DomainError, DomainResult, ExternalRecord
    from addrsync.domain.ports import AddressStore

    from .snapshot import IndexSnapshot

log = getLogger(__name__)


class ClassifyRecord(Protocol):
    """Classify a record of one kind by local existence and feed status."""

    def __call__(self, *, exists: bool, status: FeedStatus) -> Classification: ...


class CreateEntity[R: ExternalRecord, E: AddressEntity](Protocol):
    """Build a new aggregate from a record and its resolved parents."""

    def __call__(
        self, record: R, refs: ResolvedReferences, snapshot: IndexSnapshot, /
    ) -> DomainResult[E]: ...


class UpdateEntity[R: ExternalRecord, E: AddressEntity](Protocol):
    """Apply a record to an existing aggregate."""

    def __call__(
        self, entity: E, record: R, refs: ResolvedReferences, snapshot: IndexSnapshot, /
    ) -> DomainResult[None]: ...


@dataclass(frozen=True, slots=True)
class KindHandler[R: ExternalRecord, E: AddressEntity]:
    """Classifier, creator and updater for one entity kind."""

    kind: EntityKind
    full_import_statuses: tuple[FeedStatus | None, ...]
    classify: ClassifyRecord
    create: CreateEntity[R, E]
    update: UpdateEntity[R, E]


def _required(value: UUID | None, what: str) -> UUID:
    if value is None:
        raise ValueError(f"Resolved references lack {what}")
    return value


def _create_post_code(
    record: PostCodeRecord, _refs: ResolvedReferences, _snapshot: IndexSnapshot
) -> DomainResult[PostCode]:
    return PostCode.create(number=record.external_id, name=record.name)


def _update_post_code(
    entity: PostCode, record: PostCodeRecord, _refs: ResolvedReferences, _snapshot: IndexSnapshot
) -> DomainResult[None]:
    return entity.update(name=record.name)


def _create_road(
    record: RoadRecord, _refs: ResolvedReferences, _snapshot: IndexSnapshot
) -> DomainResult[Road]:
    return Road.create(
        external_id=record.external_id,
        name=record.name,
        status=map_road_status(record.status),
    )


def _update_road(
    entity: Road, record: RoadRecord, _refs: ResolvedReferences, _snapshot: IndexSnapshot
) -> DomainResult[None]:
    return entity.update(name=record.name, status=map_road_status(record.status))


def _access_address_details(
    record: AccessAddressRecord, refs: ResolvedReferences
) -> AccessAddressDetails:
    return AccessAddressDetails(
        municipal_code=record.municipal_code,
        status=map_address_status(record.status),
        road_code=record.road_code,
        house_number=record.house_number,
        post_code_id=_required(refs.post_code_id, "post code"),
        road_id=_required(refs.road_id, "road"),
        east=record.east,
        north=record.north,
        supplementary_town_name=record.supplementary_town_name,
        plot_id=record.plot_id,
        pending_official=record.pending_official,
    )


def _create_access_address(
    record: AccessAddressRecord, refs: ResolvedReferences, snapshot: IndexSnapshot
) -> DomainResult[AccessAddress]:
    return AccessAddress.create(
        external_id=record.external_id,
        details=_access_address_details(record, refs),
        known_post_code_ids=snapshot.ids(EntityKind.POST_CODE),
        known_road_ids=snapshot.ids(EntityKind.ROAD),
        external_created=record.created,
        external_updated=record.updated,
    )


def _update_access_address(
    entity: AccessAddress,
    record: AccessAddressRecord,
    refs: ResolvedReferences,
    snapshot: IndexSnapshot,
) -> DomainResult[None]:
    return entity.update(
        details=_access_address_details(record, refs),
        known_post_code_ids=snapshot.ids(EntityKind.POST_CODE),
        known_road_ids=snapshot.ids(EntityKind.ROAD),
        external_updated=record.updated,
    )


def _unit_address_details(
    record: UnitAddressRecord, refs: ResolvedReferences
) -> UnitAddressDetails:
    return UnitAddressDetails(
        access_address_id=_required(refs.access_address_id, "access address"),
        status=map_address_status(record.status),
        floor_name=record.floor_name,
        suite_name=record.suite_name,
        pending_official=record.pending_official,
    )


def _create_unit_address(
    record: UnitAddressRecord, refs: ResolvedReferences, snapshot: IndexSnapshot
) -> DomainResult[UnitAddress]:
    return UnitAddress.create(
        external_id=record.external_id,
        details=_unit_address_details(record, refs),
        known_access_address_ids=snapshot.ids(EntityKind.ACCESS_ADDRESS),
        external_created=record.created,
        external_updated=record.updated,
    )


def _update_unit_address(
    entity: UnitAddress,
    record: UnitAddressRecord,
    refs: ResolvedReferences,
    snapshot: IndexSnapshot,
) -> DomainResult[None]:
    return entity.update(
        details=_unit_address_details(record, refs),
        known_access_address_ids=snapshot.ids(EntityKind.ACCESS_ADDRESS),
        external_updated=record.updated,
    )


HANDLERS: Mapping[EntityKind, KindHandler[Any, Any]] = MappingProxyType(
    {
        EntityKind.POST_CODE: KindHandler(
            kind=EntityKind.POST_CODE,
            full_import_statuses=(None,),
            classify=partial(classify, EntityKind.POST_CODE),
            create=_create_post_code,
            update=_update_post_code,
        ),
        EntityKind.ROAD: KindHandler(
            kind=EntityKind.ROAD,
            full_import_statuses=(FeedStatus.EFFECTIVE, FeedStatus.TEMPORARY),
            classify=partial(classify, EntityKind.ROAD),
            create=_create_road,
            update=_update_road,
        ),
        EntityKind.ACCESS_ADDRESS: KindHandler(
            kind=EntityKind.ACCESS_ADDRESS,
            full_import_statuses=(FeedStatus.ACTIVE, FeedStatus.PENDING),
            classify=partial(classify, EntityKind.ACCESS_ADDRESS),
            create=_create_access_address,
            update=_update_access_address,
        ),
        EntityKind.UNIT_ADDRESS: KindHandler(
            kind=EntityKind.UNIT_ADDRESS,
            full_import_statuses=(FeedStatus.ACTIVE, FeedStatus.PENDING),
            classify=partial(classify, EntityKind.UNIT_ADDRESS),
            create=_create_unit_address,
            update=_update_unit_address,
        ),
    }
)


def handler_for(kind: EntityKind) -> KindHandler[Any, Any]:
    return HANDLERS[kind]


def _result(record: ExternalRecord, outcome: ApplyOutcome, **kwargs: Any) -> ApplyResult:
    return ApplyResult(outcome=outcome, kind=record.kind, external_id=record.external_id, **kwargs)


def _domain_failure(record: ExternalRecord, error: DomainError) -> ApplyResult:
    if not error.is_benign:
        return _result(record, ApplyOutcome.FAILED, error=error)
    if error.code is DomainErrorCode.CANNOT_UPDATE_DELETED:
        log.warning("Ignoring update of deleted %s %r: %s", record.kind, record.external_id, error)
    else:
        log.debug("No-op for %s %r: %s", record.kind, record.external_id, error)
    return _result(record, ApplyOutcome.NOOP, error=error)


def _load_target(store: AddressStore, record: ExternalRecord, entity_id: UUID) -> AddressEntity:
    entity = store.load(record.kind, entity_id)
    if entity is None:
        raise IndexInconsistencyError(record.kind, record.external_id, entity_id)
    return entity


def _apply_delete(
    record: ExternalRecord, store: AddressStore, entity_id: UUID | None
) -> ApplyResult:
    if entity_id is None:
        raise IndexInconsistencyError(record.kind, record.external_id)
    entity = _load_target(store, record, entity_id)
    outcome = entity.delete(external_updated=record.updated)
    if outcome.error is not None:
        return _domain_failure(record, outcome.error)
    return _result(record, ApplyOutcome.DELETED, entity=entity)


def reconcile(record: ExternalRecord, store: AddressStore, snapshot: IndexSnapshot) -> ApplyResult:
    """Reconcile one feed record against the register.

    Raises ``IndexInconsistencyError`` when a mapped target cannot be loaded;
    every other condition is returned as an ``ApplyResult``.
    """

    handler = handler_for(record.kind)
    entity_id = store.index.lookup(record.kind, record.external_id)
    classification: Classification = handler.classify(
        exists=entity_id is not None, status=record.status
    )

    match classification.operation:
        case ChangeOperation.ERROR:
            return _result(record, ApplyOutcome.FAILED, reason=classification.reason)
        case ChangeOperation.SKIP:
            log.warning(
                "Skipping %s %r with status %s: %s",
                record.kind,
                record.external_id,
                record.status,
                classification.reason,
            )
            return _result(record, ApplyOutcome.SKIPPED, reason=classification.reason)
        case ChangeOperation.DELETE:
            return _apply_delete(record, store, entity_id)
        case ChangeOperation.INSERT | ChangeOperation.UPDATE:
            pass

    inserting = classification.operation is ChangeOperation.INSERT
    resolution = resolve_references(record, store, inserting=inserting)
    match resolution:
        case UnresolvedReference(kind=parent_kind, external_id=parent_external_id):
            reason = f"unresolved {parent_kind} {parent_external_id!r}"
            log.warning("Skipping %s %r: %s", record.kind, record.external_id, reason)
            return _result(record, ApplyOutcome.SKIPPED, reason=reason)
        case DeletedParent(kind=parent_kind, external_id=parent_external_id):
            reason = f"{parent_kind} {parent_external_id!r} is deleted"
            log.error("Rejecting %s %r: %s", record.kind, record.external_id, reason)
            return _result(record, ApplyOutcome.REJECTED, reason=reason)
        case Resolved(references=references):
            pass

    if inserting:
        created = handler.create(record, references, snapshot)
        if created.error is not None:
            return _domain_failure(record, created.error)
        return _result(record, ApplyOutcome.INSERTED, entity=created.unwrap())

    entity = _load_target(store, record, _required(entity_id, f"{record.kind} id"))
    updated = handler.update(entity, record, references, snapshot)
    if updated.error is not None:
        return _domain_failure(record, updated.error)
    return _result(record, ApplyOutcome.UPDATED, entity=entity)
