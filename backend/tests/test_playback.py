"""Tests for the playback service."""

from unittest.mock import AsyncMock

import pytest

from marquee.core.channels import DISNEY_PLUS, NETFLIX, ChannelRegistry, EmbyChannel, UnknownChannelError
from marquee.core.commands import ActionSequence, DeepLinkCommand
from marquee.core.config import RokuConfig
from marquee.core.ecp import EcpExecutor
from marquee.core.media import MediaMetadata, MediaReference
from marquee.core.playback import PlaybackService
from tests.helpers import ROKU_BASE_URL, make_mock_response


@pytest.fixture
def service(mock_http_client: AsyncMock, no_sleep: AsyncMock) -> PlaybackService:
    mock_http_client.post.return_value = make_mock_response(200)
    emby = EmbyChannel("http://emby.lan:8096", "key", "user", mock_http_client)
    registry = ChannelRegistry([NETFLIX, DISNEY_PLUS, emby])
    executor = EcpExecutor(mock_http_client, sleep=no_sleep)
    roku = RokuConfig(ip="192.168.1.100", devices={"bedroom": "10.0.0.9"})
    return PlaybackService(registry, executor, roku)


def _posted_urls(mock_http_client: AsyncMock) -> list[str]:
    return [c.args[0] for c in mock_http_client.post.call_args_list]


class TestBuildCommand:
    def test_streaming_channel_sequence(self, service: PlaybackService) -> None:
        command = service.build_command(MediaReference(channel_id="12", content_id="81444554", media_type="movie"))
        assert isinstance(command, ActionSequence)
        assert len(command.actions) == 3

    def test_emby_deep_link(self, service: PlaybackService) -> None:
        ref = MediaReference(
            channel_id="44191",
            content_id="abc",
            metadata=MediaMetadata(resume_position_ticks=600000000),
        )
        command = service.build_command(ref)
        assert command == DeepLinkCommand(
            channel_id="44191", params="Command=PlayNow&ItemIds=abc&StartPositionTicks=600000000"
        )

    def test_unknown_channel(self, service: PlaybackService) -> None:
        with pytest.raises(UnknownChannelError):
            service.build_command(MediaReference(channel_id="999", content_id="x"))


class TestPlay:
    @pytest.mark.asyncio
    async def test_netflix_on_default_device(self, service: PlaybackService, mock_http_client: AsyncMock) -> None:
        ref = MediaReference(channel_id="12", content_id="81444554", media_type="movie", title="Movie")

        result = await service.play(ref)

        assert result.success is True
        assert result.message == "Launched channel 12 with content ID 81444554."
        assert _posted_urls(mock_http_client) == [
            f"{ROKU_BASE_URL}/launch/12?contentId=81444554&mediaType=movie",
            f"{ROKU_BASE_URL}/keypress/Play",
        ]

    @pytest.mark.asyncio
    async def test_named_device(self, service: PlaybackService, mock_http_client: AsyncMock) -> None:
        ref = MediaReference(channel_id="44191", content_id="abc")

        result = await service.play(ref, device="bedroom")

        assert result.success is True
        assert _posted_urls(mock_http_client) == ["http://10.0.0.9:8060/launch/44191?Command=PlayNow&ItemIds=abc"]

    @pytest.mark.asyncio
    async def test_device_failure_reported(self, service: PlaybackService, mock_http_client: AsyncMock) -> None:
        mock_http_client.post.side_effect = [make_mock_response(200), make_mock_response(500)]
        ref = MediaReference(channel_id="291097", content_id="f63db666", media_type="movie")

        result = await service.play(ref)

        assert result.success is False
        assert result.failed_step == 3
        assert result.status_code == 500
        assert "Step 3" in result.message

    @pytest.mark.asyncio
    async def test_unknown_channel_sends_nothing(self, service: PlaybackService, mock_http_client: AsyncMock) -> None:
        with pytest.raises(UnknownChannelError):
            await service.play(MediaReference(channel_id="999", content_id="x"))
        mock_http_client.post.assert_not_called()
