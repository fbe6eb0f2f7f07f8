"""Repository ports backing the persisted event log and checkpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from addrsync.domain.model import AddressEvent

    from .checkpoints import Checkpoint


@runtime_checkable
class EventRepository(Protocol):
    def add_all(self, events: Sequence[AddressEvent]) -> None: ...

    def iter_all(self) -> Iterator[AddressEvent]: ...

    def count(self) -> int: ...


@runtime_checkable
class CheckpointRepository(Protocol):
    def add(self, checkpoint: Checkpoint) -> None: ...

    def latest(self) -> Checkpoint | None: ...


__all__ = ["CheckpointRepository", "EventRepository"]
