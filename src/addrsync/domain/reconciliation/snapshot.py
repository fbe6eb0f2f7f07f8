"""Existence snapshot shared by one reconciliation batch."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID

from addrsync.domain.model import KIND_ORDER, EntityKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from addrsync.domain.model import AddressEntity
    from addrsync.domain.ports import EntityIndex

log = getLogger(__name__)


class KnownIds(Collection[UUID]):
    """Read-only union of scanned ids and ids written during the batch."""

    __slots__ = ("_created", "_scanned")

    def __init__(self, scanned: frozenset[UUID], created: set[UUID]) -> None:
        self._scanned = scanned
        self._created = created

    def __contains__(self, item: object) -> bool:
        return item in self._scanned or item in self._created

    def __iter__(self) -> Iterator[UUID]:
        yield from self._scanned
        yield from (entity_id for entity_id in self._created if entity_id not in self._scanned)

    def __len__(self) -> int:
        return len(self._scanned) + len(self._created - self._scanned)


@dataclass(slots=True)
class IndexSnapshot:
    """Known internal ids per kind, scanned from the index once.

    Entities written by the batch that owns the snapshot are added through
    ``note_created`` so later records in the same batch can reference them
    without another index scan.
    """

    _scanned: dict[EntityKind, frozenset[UUID]] = field(default_factory=dict)
    _created: dict[EntityKind, set[UUID]] = field(default_factory=dict)

    @classmethod
    def capture(
        cls,
        index: EntityIndex,
        kinds: Iterable[EntityKind] = KIND_ORDER,
    ) -> IndexSnapshot:
        scanned = {kind: index.ids(kind) for kind in kinds}
        log.debug(
            "Captured index snapshot: %s",
            ", ".join(f"{kind}={len(ids)}" for kind, ids in scanned.items()),
        )
        return cls(_scanned=scanned)

    def ids(self, kind: EntityKind) -> KnownIds:
        return KnownIds(
            self._scanned.get(kind, frozenset()),
            self._created.setdefault(kind, set()),
        )

    def note_created(self, entity: AddressEntity) -> None:
        self._created.setdefault(entity.kind, set()).add(entity.id)
