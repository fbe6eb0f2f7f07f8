"""
Base building blocks:
internal identity and the pending-event buffer shared by all address aggregates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from addrsync.domain.model.enums import EntityKind
    from addrsync.domain.model.events import AddressEvent


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity(ABC):
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)

    _pending_events: list[AddressEvent] = field(default_factory=list, init=False, repr=False)

    # class-level discriminator; subclasses must override
    KIND: ClassVar[EntityKind]

    @property
    def kind(self) -> EntityKind:
        return self.KIND

    @property
    @abstractmethod
    def external_key(self) -> str:
        """Identifier issued by the external registry."""

    @property
    def pending_events(self) -> tuple[AddressEvent, ...]:
        return tuple(self._pending_events)

    def pull_events(self) -> list[AddressEvent]:
        """Hand over events raised since the last pull and forget them."""
        events = list(self._pending_events)
        self._pending_events.clear()
        return events

    def apply_event(self, event: AddressEvent) -> None:
        """Mutate state from a previously recorded event (used for replay)."""
        if event.entity_id != self.id:
            raise ValueError(f"event for {event.entity_id} applied to {self.id}")
        self._when(event)

    def _raise(self, event: AddressEvent) -> None:
        self._when(event)
        self._pending_events.append(event)

    @abstractmethod
    def _when(self, event: AddressEvent) -> None: ...
