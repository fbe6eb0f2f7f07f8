"""Checkpoint store persisted through the register unit of work."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from addrsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRegisterUnitOfWork,
    is_started,
    startup,
)
from addrsync.config.errors import ConfigurationError
from addrsync.domain.ports import EnumeratingFeedClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from addrsync.domain.ports import Checkpoint, FeedClient
    from addrsync.domain.ports.unit_of_work import RegisterUnitOfWork

log = getLogger(__name__)


class SqlAlchemyCheckpointStore:
    """Persists completed checkpoints; asks ``source`` for the newest one.

    Without a source, checkpoints are timestamps and ``newest`` is the current
    UTC time.
    """

    def __init__(
        self,
        *,
        source: FeedClient | None = None,
        unit_of_work_factory: Callable[[], RegisterUnitOfWork] = SqlAlchemyRegisterUnitOfWork,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=UTC),
    ) -> None:
        self._source = source
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def init(self) -> None:
        if not is_started():
            startup()

    def last_completed(self) -> Checkpoint | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.checkpoints.latest()

    def newest(self) -> Checkpoint:
        if self._source is None:
            return self._clock()
        return self._source.latest_checkpoint()

    def list_between(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]:
        if not isinstance(self._source, EnumeratingFeedClient):
            raise ConfigurationError("The configured feed cannot list discrete checkpoints")
        return self._source.list_checkpoints(after, until)

    def store(self, checkpoint: Checkpoint) -> bool:
        try:
            with self._unit_of_work_factory() as uow:
                uow.repositories.checkpoints.add(checkpoint)
                uow.commit()
        except SQLAlchemyError:
            log.exception("Failed to store checkpoint %s", checkpoint)
            return False
        return True


if TYPE_CHECKING:
    from addrsync.domain.ports import EnumeratingCheckpointStore

    _store_check: EnumeratingCheckpointStore = SqlAlchemyCheckpointStore()
