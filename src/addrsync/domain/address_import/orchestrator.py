"""Top-level import control: bootstrap or catch up, then persist checkpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from addrsync.config.errors import ConfigurationError
from addrsync.config.sync import CheckpointMode, ImportConfig
from addrsync.domain.cancellation import raise_if_cancelled
from addrsync.domain.errors import CheckpointStoreError
from addrsync.domain.ports import CheckpointRange, EnumeratingCheckpointStore

from .change_import import ChangeImportEngine, ChangeImportResult
from .full_import import FullImportEngine, FullImportResult

if TYPE_CHECKING:
    from threading import Event

    from addrsync.domain.ports import AddressStore, Checkpoint, CheckpointStore, FeedClient

log = getLogger(__name__)


class RunPath(StrEnum):
    BOOTSTRAP = "bootstrap"
    CATCH_UP = "catch_up"
    UP_TO_DATE = "up_to_date"


@dataclass(slots=True)
class ImportRunResult:
    path: RunPath
    stored_checkpoints: list[Checkpoint] = field(default_factory=list)
    full_import: FullImportResult | None = None
    change_imports: list[ChangeImportResult] = field(default_factory=list)

    @property
    def last_checkpoint(self) -> Checkpoint | None:
        return self.stored_checkpoints[-1] if self.stored_checkpoints else None


class ImportOrchestrator:
    """Owns the checkpoint lifecycle of one import run.

    The index is rehydrated from the event log first, so entities persisted by
    an earlier interrupted run are known. Without a stored checkpoint the
    register is then bootstrapped by a full import at the newest checkpoint.
    Otherwise the changes up to the newest checkpoint are applied, either as
    one range or one checkpoint at a time depending on
    ``ImportConfig.checkpoint_mode``. A checkpoint is only stored after the work
    it covers completed.
    """

    def __init__(
        self,
        *,
        feed: FeedClient,
        store: AddressStore,
        checkpoints: CheckpointStore,
        config: ImportConfig | None = None,
        full_import: FullImportEngine | None = None,
        change_import: ChangeImportEngine | None = None,
    ) -> None:
        self._config = config or ImportConfig()
        self._store = store
        self._checkpoints = checkpoints
        self._full_import = full_import or FullImportEngine(
            feed, store, batch_size=self._config.batch_size
        )
        self._change_import = change_import or ChangeImportEngine(feed, store)

    def run(self, *, cancel: Event | None = None) -> ImportRunResult:
        self._checkpoints.init()
        last = self._checkpoints.last_completed()
        self._store.rehydrate_index()
        if last is None:
            return self._bootstrap(cancel)
        return self._catch_up(last, cancel)

    def _bootstrap(self, cancel: Event | None) -> ImportRunResult:
        newest = self._checkpoints.newest()
        log.info("No completed checkpoint; bootstrapping at %s", newest)
        result = ImportRunResult(path=RunPath.BOOTSTRAP)
        result.full_import = self._full_import.run(newest, cancel=cancel)
        raise_if_cancelled(cancel, during="bootstrap")
        self._store_checkpoint(newest, result)
        return result

    def _catch_up(self, last: Checkpoint, cancel: Event | None) -> ImportRunResult:
        log.info("Last completed checkpoint %s", last)
        newest = self._checkpoints.newest()
        if newest == last:
            log.info("Register is up to date at %s", last)
            return ImportRunResult(path=RunPath.UP_TO_DATE)

        result = ImportRunResult(path=RunPath.CATCH_UP)
        if self._config.checkpoint_mode is CheckpointMode.GRANULAR:
            self._apply_granular(last, newest, result, cancel)
        else:
            self._apply_range(CheckpointRange(after=last, until=newest), result, cancel)
        return result

    def _apply_range(
        self,
        checkpoints: CheckpointRange,
        result: ImportRunResult,
        cancel: Event | None,
    ) -> None:
        result.change_imports.append(self._change_import.run(checkpoints, cancel=cancel))
        raise_if_cancelled(cancel, during=f"change import {checkpoints}")
        self._store_checkpoint(checkpoints.until, result)

    def _apply_granular(
        self,
        last: Checkpoint,
        newest: Checkpoint,
        result: ImportRunResult,
        cancel: Event | None,
    ) -> None:
        if not isinstance(self._checkpoints, EnumeratingCheckpointStore):
            raise ConfigurationError(
                "Granular checkpoint mode needs a checkpoint store that can list checkpoints"
            )
        pending = self._checkpoints.list_between(last, newest)
        log.info("Applying %s checkpoints between %s and %s", len(pending), last, newest)
        previous = last
        for checkpoint in pending:
            raise_if_cancelled(cancel, during=f"granular import after {previous}")
            self._apply_range(CheckpointRange(after=previous, until=checkpoint), result, cancel)
            previous = checkpoint

    def _store_checkpoint(self, checkpoint: Checkpoint, result: ImportRunResult) -> None:
        if not self._checkpoints.store(checkpoint):
            raise CheckpointStoreError(f"Failed to store checkpoint {checkpoint}")
        log.info("Stored checkpoint %s", checkpoint)
        result.stored_checkpoints.append(checkpoint)
