"""Ports for reading the external registry feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from threading import Event

    from addrsync.domain.model import EntityKind, ExternalRecord, FeedStatus

    from .checkpoints import Checkpoint, CheckpointRange


@runtime_checkable
class FeedClient(Protocol):
    """Read access to the authoritative registry.

    ``stream_entities`` is lazy and finite. A stream that fails part way is
    requested again with the same range rather than resumed.
    """

    def latest_checkpoint(self) -> Checkpoint: ...

    def stream_entities(
        self,
        kind: EntityKind,
        *,
        status: FeedStatus | None = None,
        checkpoints: CheckpointRange,
        cancel: Event | None = None,
    ) -> Iterator[ExternalRecord]: ...


@runtime_checkable
class EnumeratingFeedClient(FeedClient, Protocol):
    """Feed that exposes its discrete transaction ids."""

    def list_checkpoints(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]: ...


__all__ = ["EnumeratingFeedClient", "FeedClient"]
