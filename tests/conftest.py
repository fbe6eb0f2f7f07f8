from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from addrsync.adapters.register import EventSourcedAddressStore, InMemoryEventLog
from addrsync.adapters.sqlalchemy import start_mappers
from addrsync.adapters.sqlalchemy.migrations import upgrade_head
from addrsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyRegisterUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def event_log() -> InMemoryEventLog:
    return InMemoryEventLog()


@pytest.fixture
def store(event_log: InMemoryEventLog) -> EventSourcedAddressStore:
    return EventSourcedAddressStore(event_log)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyRegisterUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyRegisterUnitOfWork:
        return SqlAlchemyRegisterUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
