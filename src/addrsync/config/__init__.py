"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, positive_int_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .feed import FeedConfig, get_feed_config
from .http_resilience import CacheBackend, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import DEFAULT_BATCH_SIZE, CheckpointMode, ImportConfig, get_import_config

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "CacheBackend",
    "CacheConfig",
    "CheckpointMode",
    "ConfigurationError",
    "DatabaseConfig",
    "FeedConfig",
    "ImportConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "get_database_config",
    "get_feed_config",
    "get_import_config",
    "get_storage_config",
    "optional_env_var",
    "positive_int_env_var",
    "require_env_vars",
]
