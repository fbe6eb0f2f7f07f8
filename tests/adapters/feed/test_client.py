from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import httpx
import pytest

from addrsync.adapters.feed import FeedAPIError, RegistryFeedClient
from addrsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from addrsync.config.feed import FeedConfig
from addrsync.domain.errors import ImportCancelledError
from addrsync.domain.model import EntityKind, FeedStatus, RoadRecord
from addrsync.domain.ports import CheckpointRange

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://feed.example.test/api"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _feed_client(
    handler: Callable[[httpx.Request], httpx.Response], *, page_size: int = 2
) -> RegistryFeedClient:
    config = FeedConfig(
        base_url=BASE_URL,
        api_key=None,
        resilience=ResilienceConfig(name="registry-feed-test", cache=None),
        page_size=page_size,
    )
    return RegistryFeedClient(config=config, client_factory=_make_client_factory(handler))


def _road(external_id: str, txid: int) -> dict[str, object]:
    return {"id": external_id, "name": f"Road {external_id}", "status": "effective", "txid": txid}


def test_latest_checkpoint_reads_transaction_id() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/transactions/latest"
        return httpx.Response(200, json={"txid": 56})

    assert _feed_client(handler).latest_checkpoint() == 56


def test_list_checkpoints_returns_sorted_unique_ids() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["after"] == "50"
        assert request.url.params["until"] == "53"
        transactions = [{"txid": 53}, {"txid": 51}, {"txid": 52}, {"txid": 51}]
        return httpx.Response(200, json={"transactions": transactions})

    assert _feed_client(handler).list_checkpoints(50, 53) == [51, 52, 53]


def test_stream_entities_follows_pages_and_sends_range() -> None:
    requests: list[httpx.Request] = []
    pages = {
        "1": {"items": [_road("R1", 51), _road("R2", 52)], "page": 1, "totalPages": 2},
        "2": {"items": [_road("R3", 53)], "page": 2, "totalPages": 2},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=pages[request.url.params["page"]])

    records = list(
        _feed_client(handler).stream_entities(
            EntityKind.ROAD,
            status=FeedStatus.EFFECTIVE,
            checkpoints=CheckpointRange(after=50, until=53),
        )
    )

    assert [record.external_id for record in records] == ["R1", "R2", "R3"]
    assert all(isinstance(record, RoadRecord) for record in records)
    first = requests[0].url
    assert first.path == "/api/roads"
    assert first.params["txidafter"] == "50"
    assert first.params["txiduntil"] == "53"
    assert first.params["status"] == "effective"
    assert first.params["per_page"] == "2"


def test_snapshot_stream_omits_lower_bound() -> None:
    seen: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"items": [], "page": 1, "totalPages": 1})

    list(
        _feed_client(handler).stream_entities(
            EntityKind.POST_CODE, checkpoints=CheckpointRange(until=42)
        )
    )

    assert "txidafter" not in seen[0].params
    assert "status" not in seen[0].params
    assert seen[0].path == "/api/postcodes"


def test_error_payload_raises_feed_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(400, json={"error": {"code": "bad_range", "message": "Bad range"}})

    with pytest.raises(FeedAPIError) as exc:
        _feed_client(handler).latest_checkpoint()

    assert exc.value.code == "bad_range"
    assert exc.value.status_code == 400


def test_cancelled_stream_stops_before_next_page() -> None:
    cancel = threading.Event()

    def handler(request: httpx.Request) -> httpx.Response:
        cancel.set()
        del request
        return httpx.Response(
            200, json={"items": [_road("R1", 51)], "page": 1, "totalPages": 3}
        )

    stream = _feed_client(handler).stream_entities(
        EntityKind.ROAD, checkpoints=CheckpointRange(after=50, until=53), cancel=cancel
    )

    assert next(stream).external_id == "R1"
    with pytest.raises(ImportCancelledError):
        next(stream)
