"""Shared reconciliation contract components.

This module holds only the structured outcomes exchanged between the
classifier, the reference resolver, the per-kind appliers and the import
engines. None of them raise for expected business conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from uuid import UUID

    from addrsync.domain.model import AddressEntity, DomainError, EntityKind

AMBIGUOUS_TRANSITION: Final[str] = "ambiguous transition"


class ChangeOperation(StrEnum):
    """What an incoming record means for the local register."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SKIP = "skip"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Classification:
    operation: ChangeOperation
    reason: str | None = None


class ResolutionStatus(StrEnum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    DELETED_PARENT = "deleted_parent"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedReferences:
    """Internal ids of the parents a record points at."""

    post_code_id: UUID | None = None
    road_id: UUID | None = None
    access_address_id: UUID | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Resolved:
    """Every parent reference is known to the index."""

    references: ResolvedReferences
    status: Literal[ResolutionStatus.RESOLVED] = ResolutionStatus.RESOLVED


@dataclass(frozen=True, slots=True, kw_only=True)
class UnresolvedReference:
    """A parent external id has no internal mapping yet."""

    kind: EntityKind
    external_id: str
    status: Literal[ResolutionStatus.UNRESOLVED] = ResolutionStatus.UNRESOLVED


@dataclass(frozen=True, slots=True, kw_only=True)
class DeletedParent:
    """The parent exists but is soft-deleted."""

    kind: EntityKind
    external_id: str
    entity_id: UUID
    status: Literal[ResolutionStatus.DELETED_PARENT] = ResolutionStatus.DELETED_PARENT


type Resolution = Resolved | UnresolvedReference | DeletedParent


class ApplyOutcome(StrEnum):
    """Observable result of reconciling one record."""

    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"
    NOOP = "noop"
    SKIPPED = "skipped"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplyResult:
    """Outcome of one record; ``entity`` carries pending events to be stored."""

    outcome: ApplyOutcome
    kind: EntityKind
    external_id: str
    entity: AddressEntity | None = None
    error: DomainError | None = None
    reason: str | None = None

    @property
    def needs_write(self) -> bool:
        return self.outcome in {ApplyOutcome.INSERTED, ApplyOutcome.UPDATED, ApplyOutcome.DELETED}

    def describe(self) -> str:
        detail = self.reason or (str(self.error) if self.error else "")
        suffix = f": {detail}" if detail else ""
        return f"{self.kind} {self.external_id!r} {self.outcome}{suffix}"
