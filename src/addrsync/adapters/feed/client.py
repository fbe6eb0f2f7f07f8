"""HTTP client for the address registry feed."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from addrsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from addrsync.config.feed import FeedConfig, get_feed_config
from addrsync.domain.cancellation import raise_if_cancelled
from addrsync.domain.model import EntityKind

from .schema import ErrorResponse, LatestTransactionResponse, PageResponse, TransactionListResponse
from .translator import FeedPayloadError, parse_record

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from threading import Event

    from addrsync.domain.model import ExternalRecord, FeedStatus
    from addrsync.domain.ports import Checkpoint, CheckpointRange

log = getLogger(__name__)

RESOURCE_PATHS: Final[dict[EntityKind, str]] = {
    EntityKind.POST_CODE: "postcodes",
    EntityKind.ROAD: "roads",
    EntityKind.ACCESS_ADDRESS: "accessaddresses",
    EntityKind.UNIT_ADDRESS: "unitaddresses",
}


def _should_cache_payload(payload: object) -> bool:
    # Pages are bounded by a fixed transaction id and never change.
    return isinstance(payload, dict) and "items" in payload


def _default_feed_config() -> FeedConfig:
    return get_feed_config(cache_predicate=_should_cache_payload)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _txid(checkpoint: Checkpoint) -> int:
    if isinstance(checkpoint, bool) or not isinstance(checkpoint, int):
        raise TypeError(f"Registry feed checkpoints are transaction ids, got {checkpoint!r}")
    return checkpoint


class FeedAPIError(RuntimeError):
    """Raised when the registry feed answers with an error."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


@dataclass(slots=True)
class RegistryFeedClient:
    """Feed client using transaction ids as checkpoints."""

    config: FeedConfig = field(default_factory=_default_feed_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def latest_checkpoint(self) -> int:
        payload = asyncio.run(self._get_once("transactions/latest", params={}))
        latest = LatestTransactionResponse.model_validate(payload)
        log.debug("Latest feed transaction is %s", latest.txid)
        return latest.txid

    def list_checkpoints(self, after: Checkpoint, until: Checkpoint) -> list[Checkpoint]:
        params = {"after": _txid(after), "until": _txid(until)}
        payload = asyncio.run(self._get_once("transactions", params=params))
        listed = TransactionListResponse.model_validate(payload)
        return sorted({transaction.txid for transaction in listed.transactions})

    def stream_entities(
        self,
        kind: EntityKind,
        *,
        status: FeedStatus | None = None,
        checkpoints: CheckpointRange,
        cancel: Event | None = None,
    ) -> Iterator[ExternalRecord]:
        """Yield records page by page; cancellation is checked before each page."""

        params: dict[str, str | int] = {
            "txiduntil": _txid(checkpoints.until),
            "per_page": self.config.page_size,
        }
        if checkpoints.after is not None:
            params["txidafter"] = _txid(checkpoints.after)
        if status is not None:
            params["status"] = status.value

        path = RESOURCE_PATHS[kind]
        with asyncio.Runner() as runner:
            client = self.client_factory(self.config.resilience)
            try:
                page = 1
                while True:
                    raise_if_cancelled(cancel, during=f"fetching {kind} page {page}")
                    payload = runner.run(
                        self._request(client, path, params={**params, "page": page})
                    )
                    response = PageResponse.model_validate(payload)
                    for item in response.items:
                        yield parse_record(kind, item)
                    if page >= response.total_pages:
                        break
                    page += 1
            finally:
                runner.run(client.aclose())

    async def _get_once(self, path: str, *, params: dict[str, str | int]) -> object:
        async with self.client_factory(self.config.resilience) as client:
            return await self._request(client, path, params=params)

    async def _request(
        self,
        client: ResilientClient,
        path: str,
        *,
        params: dict[str, str | int],
    ) -> object:
        url = f"{self.config.base_url.rstrip('/')}/{path}"
        response = await client.get(url, params=httpx.QueryParams(params))
        try:
            payload = response.json()
        except ValueError as exc:
            response.raise_for_status()
            raise FeedPayloadError(f"Feed returned non-JSON body for {path}") from exc

        if response.is_error or (isinstance(payload, dict) and "error" in payload):
            raise self._api_error(payload, response)
        return payload

    @staticmethod
    def _api_error(payload: object, response: httpx.Response) -> FeedAPIError:
        body = payload.get("error", payload) if isinstance(payload, dict) else payload
        try:
            error = ErrorResponse.model_validate(body)
        except ValidationError:
            message = f"Feed request failed with HTTP {response.status_code}"
            log.error(message)
            return FeedAPIError(message, status_code=response.status_code)
        log.error(f"Feed error {error.code}: {error.message}")
        return FeedAPIError(error.message, code=error.code, status_code=response.status_code)


if TYPE_CHECKING:
    from addrsync.domain.ports import EnumeratingFeedClient

    _client_check: EnumeratingFeedClient = RegistryFeedClient()
