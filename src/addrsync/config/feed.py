"""Registry feed configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, positive_int_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import (
    CacheBackend,
    CacheConfig,
    PayloadPredicate,
    RateLimit,
    ResilienceConfig,
)
from .storage import get_storage_config

FEED_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 1000
API_KEY_HEADER = "X-Api-Key"
CACHE_DISABLED = "off"


@dataclass(frozen=True)
class FeedConfig:
    """Holds registry feed connection values."""

    base_url: str
    api_key: str | None
    resilience: ResilienceConfig
    page_size: int = DEFAULT_PAGE_SIZE


def _feed_cache(predicate: PayloadPredicate | None) -> CacheConfig | None:
    raw = (optional_env_var("ADDRSYNC_FEED_CACHE") or CacheBackend.MEMORY).lower()
    if raw == CACHE_DISABLED:
        return None
    try:
        backend = CacheBackend(raw)
    except ValueError as exc:
        choices = ", ".join([CACHE_DISABLED, *CacheBackend])
        raise ConfigurationError(
            f"ADDRSYNC_FEED_CACHE must be one of {choices}, got {raw!r}"
        ) from exc
    if backend is CacheBackend.SQLITE:
        cache_path = get_storage_config().prepare().feed_cache_path
        return CacheConfig(backend=backend, sqlite_path=cache_path, should_cache=predicate)
    return CacheConfig(backend=backend, should_cache=predicate)


def get_feed_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: PayloadPredicate | None = None,
) -> FeedConfig:
    values = require_env_vars(("ADDRSYNC_FEED_URL",))
    base_url = values["ADDRSYNC_FEED_URL"]
    api_key = optional_env_var("ADDRSYNC_FEED_API_KEY")
    headers = {API_KEY_HEADER: api_key} if api_key else None
    return FeedConfig(
        base_url=base_url,
        api_key=api_key,
        page_size=positive_int_env_var("ADDRSYNC_FEED_PAGE_SIZE", default=DEFAULT_PAGE_SIZE),
        resilience=resilience
        or ResilienceConfig(
            name="registry-feed",
            base_url=base_url,
            timeout_seconds=FEED_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=_feed_cache(cache_predicate),
            default_headers=headers,
        ),
    )
