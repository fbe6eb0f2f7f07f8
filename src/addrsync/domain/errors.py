"""Errors that abort an import run."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from addrsync.domain.model import EntityKind


class AddressImportError(RuntimeError):
    """Base class for failures that stop an import run without storing a checkpoint."""


class ImportAbortedError(AddressImportError):
    """Raised for ambiguous transitions and unexpected domain validation failures."""


class IndexInconsistencyError(AddressImportError):
    """Raised when the index maps an external id the store cannot load."""

    def __init__(self, kind: EntityKind, external_id: str, entity_id: UUID | None = None) -> None:
        target = f" ({entity_id})" if entity_id is not None else ""
        super().__init__(
            f"Index maps {kind} {external_id!r}{target} but the store has no such entity"
        )
        self.kind = kind
        self.external_id = external_id
        self.entity_id = entity_id


class CheckpointStoreError(AddressImportError):
    """Raised when the checkpoint store reports a failed write."""


class ImportCancelledError(AddressImportError):
    """Raised when a run observes the cancellation signal."""
