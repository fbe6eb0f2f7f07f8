"""Event log persisted through the register unit of work."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from addrsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyRegisterUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from addrsync.domain.model import AddressEvent
    from addrsync.domain.ports.unit_of_work import RegisterUnitOfWork

log = getLogger(__name__)


class SqlAlchemyEventLog:
    """Appends each batch of events in its own transaction."""

    def __init__(
        self,
        unit_of_work_factory: Callable[[], RegisterUnitOfWork] = SqlAlchemyRegisterUnitOfWork,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    def append(self, events: Sequence[AddressEvent]) -> None:
        if not events:
            return
        with self._unit_of_work_factory() as uow:
            uow.repositories.events.add_all(events)
            uow.commit()
        log.debug("Appended %s events", len(events))

    def read_all(self) -> Iterator[AddressEvent]:
        with self._unit_of_work_factory() as uow:
            yield from uow.repositories.events.iter_all()

    def count(self) -> int:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.events.count()
