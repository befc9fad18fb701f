"""Tests for the HTTP API routes."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from main import app
from marquee.api.routes import get_playback_service, get_registry, get_search_aggregator
from marquee.core.channels import DISNEY_PLUS, NETFLIX, ChannelRegistry, EmbyChannel, UnknownChannelError
from marquee.core.media import MediaReference
from marquee.core.playback import PlaybackResult, PlaybackService
from marquee.core.search_aggregator import SearchAggregator, SearchResult


@pytest.fixture
def registry(mock_http_client: AsyncMock) -> ChannelRegistry:
    emby = EmbyChannel("http://emby.lan:8096", "key", "user", mock_http_client)
    return ChannelRegistry([NETFLIX, DISNEY_PLUS, emby])


@pytest.fixture
def aggregator() -> AsyncMock:
    return AsyncMock(spec=SearchAggregator)


@pytest.fixture
def playback() -> MagicMock:
    service = MagicMock(spec=PlaybackService)
    service.play = AsyncMock()
    return service


@pytest.fixture
def client(registry: ChannelRegistry, aggregator: AsyncMock, playback: MagicMock) -> Iterator[TestClient]:
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_search_aggregator] = lambda: aggregator
    app.dependency_overrides[get_playback_service] = lambda: playback
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestChannels:
    def test_lists_in_registry_order(self, client: TestClient) -> None:
        response = client.get("/channels")

        assert response.status_code == 200
        data = response.json()
        assert [c["channel_id"] for c in data] == ["12", "291097", "44191"]
        assert data[0]["public_search_domain"] == "netflix.com"
        assert data[2]["public_search_domain"] == ""
        assert data[2]["search_url"] == "http://emby.lan:8096/web/index.html#!/search.html"


class TestSearch:
    def test_returns_results(self, client: TestClient, aggregator: AsyncMock) -> None:
        ref = MediaReference(channel_id="12", content_id="20557937", title="The Matrix", channel_name="Netflix")
        aggregator.search.return_value = [
            SearchResult(source="brave", title="The Matrix", reference=ref, url="https://www.netflix.com/title/20557937")
        ]

        response = client.get("/search", params={"q": "the matrix", "limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "the matrix"
        assert data["total_results"] == 1
        assert data["results"][0]["source"] == "brave"
        assert data["results"][0]["dedup_key"] == "12-20557937"
        assert data["results"][0]["content"]["content_id"] == "20557937"
        aggregator.search.assert_awaited_once_with("the matrix", 5)

    def test_default_limit(self, client: TestClient, aggregator: AsyncMock) -> None:
        aggregator.search.return_value = []

        response = client.get("/search", params={"q": "bluey"})

        assert response.status_code == 200
        assert aggregator.search.await_args.args[1] == 20

    def test_blank_query_rejected(self, client: TestClient, aggregator: AsyncMock) -> None:
        response = client.get("/search", params={"q": "   "})

        assert response.status_code == 400
        aggregator.search.assert_not_called()


class TestExtract:
    def test_known_url(self, client: TestClient) -> None:
        response = client.get("/extract", params={"url": "https://www.netflix.com/watch/81444554"})

        assert response.status_code == 200
        data = response.json()
        assert data["channel_id"] == "12"
        assert data["content_id"] == "81444554"
        assert data["media_type"] == "movie"
        assert data["original_url"] == "https://www.netflix.com/watch/81444554"

    def test_unknown_url(self, client: TestClient) -> None:
        response = client.get("/extract", params={"url": "https://example.com/video/1"})
        assert response.status_code == 404


class TestPlay:
    def test_success(self, client: TestClient, playback: MagicMock) -> None:
        playback.play.return_value = PlaybackResult(success=True, message="Launched channel 12 with content ID 1.")

        response = client.post(
            "/play",
            json={"channel_id": "12", "content_id": "1", "media_type": "movie", "device": "bedroom"},
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        ref = playback.play.await_args.args[0]
        assert ref.channel_id == "12"
        assert ref.content_id == "1"
        assert playback.play.await_args.kwargs["device"] == "bedroom"

    def test_resume_position_forwarded(self, client: TestClient, playback: MagicMock) -> None:
        playback.play.return_value = PlaybackResult(success=True, message="ok")

        client.post("/play", json={"channel_id": "44191", "content_id": "abc", "resume_position_ticks": 42})

        ref = playback.play.await_args.args[0]
        assert ref.metadata.resume_position_ticks == 42

    def test_device_failure(self, client: TestClient, playback: MagicMock) -> None:
        playback.play.return_value = PlaybackResult(
            success=False,
            message="Step 3 (keypress) failed: Roku returned status 500.",
            status_code=500,
            failed_step=3,
        )

        response = client.post("/play", json={"channel_id": "12", "content_id": "1"})

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["success"] is False
        assert detail["failed_step"] == 3
        assert detail["status_code"] == 500

    def test_unknown_channel(self, client: TestClient, playback: MagicMock) -> None:
        playback.play.side_effect = UnknownChannelError("999")

        response = client.post("/play", json={"channel_id": "999", "content_id": "1"})

        assert response.status_code == 404

    def test_no_device_configured(self, client: TestClient, playback: MagicMock) -> None:
        playback.play.side_effect = ValueError("No Roku device given and no default device configured")

        response = client.post("/play", json={"channel_id": "12", "content_id": "1"})

        assert response.status_code == 400

    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post("/play", json={"channel_id": "12"})
        assert response.status_code == 422
