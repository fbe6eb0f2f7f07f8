"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from addrsync.adapters.feed import RegistryFeedClient
from addrsync.adapters.register import EventSourcedAddressStore
from addrsync.adapters.sqlalchemy import (
    SqlAlchemyCheckpointStore,
    SqlAlchemyEventLog,
    is_started,
    startup,
)
from addrsync.config import get_import_config
from addrsync.domain.address_import import ImportOrchestrator, ImportRunResult

if TYPE_CHECKING:
    from threading import Event

    from addrsync.config import ImportConfig
    from addrsync.domain.ports import AddressStore, CheckpointStore, FeedClient


log = getLogger(__name__)


def run_address_import(
    *,
    feed: FeedClient | None = None,
    store: AddressStore | None = None,
    checkpoints: CheckpointStore | None = None,
    config: ImportConfig | None = None,
    cancel: Event | None = None,
) -> ImportRunResult:
    """Bring the local register up to date with the registry feed."""

    if store is None or checkpoints is None:
        if not is_started():
            startup()
    effective_feed = feed or RegistryFeedClient()
    effective_store = store or EventSourcedAddressStore(SqlAlchemyEventLog())
    effective_checkpoints = checkpoints or SqlAlchemyCheckpointStore(source=effective_feed)
    effective_config = config or get_import_config()
    log.info(
        "Starting address import: batch_size=%s, checkpoint_mode=%s",
        effective_config.batch_size,
        effective_config.checkpoint_mode,
    )

    orchestrator = ImportOrchestrator(
        feed=effective_feed,
        store=effective_store,
        checkpoints=effective_checkpoints,
        config=effective_config,
    )
    result = orchestrator.run(cancel=cancel)

    log.info(
        f"Finished address import: path={result.path}, "
        f"stored_checkpoints={len(result.stored_checkpoints)}, last={result.last_checkpoint}"
    )
    return result
