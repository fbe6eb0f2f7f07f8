"""Location of the register database and the feed response cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "ADDRSYNC_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
REGISTER_DB_FILENAME: Final[str] = "register.db"
FEED_CACHE_FILENAME: Final[str] = "feed_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory holding the register's event log and the feed cache."""

    data_dir: Path

    @property
    def register_path(self) -> Path:
        return self.data_dir / REGISTER_DB_FILENAME

    @property
    def feed_cache_path(self) -> Path:
        return self.data_dir / FEED_CACHE_FILENAME

    def prepare(self) -> StorageConfig:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    if env_dir:
        data_dir = Path(env_dir)
    else:
        xdg_home = os.getenv("XDG_DATA_HOME")
        data_dir = (Path(xdg_home) if xdg_home else Path.home() / ".local" / "share") / "addrsync"
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Use ``DATABASE_URI`` when set, else a SQLite file in the data directory."""

    env_uri = os.getenv(DATABASE_URI_ENV)
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    register_path = (storage or get_storage_config()).prepare().register_path
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{register_path}")
