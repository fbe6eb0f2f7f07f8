"""Ports for checkpoint persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

type Checkpoint = int | datetime
"""Totally ordered pointer into the feed timeline: a transaction id or a UTC timestamp."""


@dataclass(frozen=True, slots=True)
class CheckpointRange:
    """Selects feed records with ``after < checkpoint <= until``.

    ``after=None`` selects the full state as of ``until``.
    """

    until: Checkpoint
    after: Checkpoint | None = None

    @property
    def is_snapshot(self) -> bool:
        return self.after is None

    def contains(self, checkpoint: Checkpoint) -> bool:
        if self.after is not None and checkpoint <= self.after:  # type: ignore[operator]
            return False
        return checkpoint <= self.until  # type: ignore[operator]

    def __str__(self) -> str:
        start = "start" if self.after is None else str(self.after)
        return f"({start}, {self.until}]"


@runtime_checkable
class CheckpointStore(Protocol):
    """Stores the last checkpoint an import run fully applied."""

    def init(self) -> None: ...

    def last_completed(self) -> Checkpoint | None: ...

    def newest(self) -> Checkpoint: ...

    def store(self, checkpoint: Checkpoint) -> bool: ...


@runtime_checkable
class EnumeratingCheckpointStore(CheckpointStore, Protocol):
    """Checkpoint store that can list the discrete checkpoints inside a range."""

    def list_between(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]: ...


__all__ = ["Checkpoint", "CheckpointRange", "CheckpointStore", "EnumeratingCheckpointStore"]
