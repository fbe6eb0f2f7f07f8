"""Retry, rate-limit and response-cache settings for feed HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

PayloadPredicate = Callable[[object], bool]

# The feed is read-only; only reads are ever retried.
RETRIED_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})


class CacheBackend(StrEnum):
    MEMORY = "memory"
    SQLITE = "sqlite"


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    total: int = 4
    backoff_factor: float = 0.5
    backoff_jitter: float = 1.0
    max_backoff_wait: float = 60.0
    status_forcelist: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; ``should_cache`` sees the decoded JSON body."""

    backend: CacheBackend = CacheBackend.MEMORY
    sqlite_path: Path | None = None
    ttl_seconds: float | None = None
    should_cache: PayloadPredicate | None = None

    def __post_init__(self) -> None:
        if self.backend is CacheBackend.SQLITE and self.sqlite_path is None:
            raise ConfigurationError("A SQLite response cache needs sqlite_path")


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None
