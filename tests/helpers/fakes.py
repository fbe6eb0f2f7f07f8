"""In-memory stand-ins for the feed and checkpoint ports."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from addrsync.domain.cancellation import raise_if_cancelled

if TYPE_CHECKING:
    from collections.abc import Iterator
    from threading import Event

    from addrsync.domain.model import EntityKind, ExternalRecord, FeedStatus
    from addrsync.domain.ports import Checkpoint, CheckpointRange


@dataclass(slots=True)
class StreamCall:
    kind: EntityKind
    status: FeedStatus | None
    checkpoints: CheckpointRange


class FakeFeedClient:
    """Serves a fixed record list.

    Records with a ``sequence`` are only delivered when the requested range
    contains it; records without one are part of every range.
    """

    def __init__(
        self,
        records: Iterable[ExternalRecord] = (),
        *,
        latest: Checkpoint = 1,
        checkpoints: Iterable[Checkpoint] = (),
        failing_until: Iterable[Checkpoint] = (),
        failing_kinds: Iterable[EntityKind] = (),
    ) -> None:
        self.records = list(records)
        self.latest = latest
        self.checkpoints = sorted(checkpoints)
        self.failing_until = set(failing_until)
        self.failing_kinds = set(failing_kinds)
        self.calls: list[StreamCall] = []

    def latest_checkpoint(self) -> Checkpoint:
        return self.latest

    def list_checkpoints(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]:
        return [checkpoint for checkpoint in self.checkpoints if after < checkpoint <= until]  # type: ignore[operator]

    def stream_entities(
        self,
        kind: EntityKind,
        *,
        status: FeedStatus | None = None,
        checkpoints: CheckpointRange,
        cancel: Event | None = None,
    ) -> Iterator[ExternalRecord]:
        self.calls.append(StreamCall(kind=kind, status=status, checkpoints=checkpoints))
        if checkpoints.until in self.failing_until or kind in self.failing_kinds:
            raise RuntimeError(f"feed unavailable for {checkpoints}")
        for record in self.records:
            raise_if_cancelled(cancel, during="fake stream")
            if record.kind is not kind:
                continue
            if status is not None and record.status is not status:
                continue
            if record.sequence is not None and not checkpoints.contains(record.sequence):
                continue
            yield record


@dataclass
class RangeCheckpointStore:
    """Checkpoint store without enumeration support."""

    newest_checkpoint: Checkpoint
    stored: list[Checkpoint] = field(default_factory=list)
    refuse_store: bool = False
    initialised: bool = False

    def init(self) -> None:
        self.initialised = True

    def last_completed(self) -> Checkpoint | None:
        return self.stored[-1] if self.stored else None

    def newest(self) -> Checkpoint:
        return self.newest_checkpoint

    def store(self, checkpoint: Checkpoint) -> bool:
        if self.refuse_store:
            return False
        self.stored.append(checkpoint)
        return True


@dataclass
class InMemoryCheckpointStore(RangeCheckpointStore):
    available: list[Checkpoint] = field(default_factory=list)

    def list_between(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]:
        return [c for c in sorted(self.available) if after < c <= until]  # type: ignore[operator]
