"""Play a media reference on a Roku: build the channel's command, then run it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .channels import ChannelRegistry
from .commands import PlaybackCommand
from .config import RokuConfig
from .ecp import CommandExecutionError, EcpExecutor, resolve_device_base
from .media import MediaReference

logger = logging.getLogger("marquee.playback")


@dataclass
class PlaybackResult:
    """Result of launching content on Roku."""

    success: bool
    message: str
    status_code: int | None = None
    failed_step: int | None = None


class PlaybackService:
    """Resolves a channel plugin and device, then executes the playback command."""

    def __init__(self, registry: ChannelRegistry, executor: EcpExecutor, roku: RokuConfig) -> None:
        self.registry = registry
        self.executor = executor
        self.roku = roku

    def build_command(self, ref: MediaReference) -> PlaybackCommand:
        """Build the playback command for ``ref``.

        Raises:
            UnknownChannelError: If no plugin is registered for the channel.
        """
        return self.registry.get(ref.channel_id).build_playback_command(ref)

    async def play(self, ref: MediaReference, device: str | None = None) -> PlaybackResult:
        """Play ``ref`` on the named device (or the default Roku).

        Device failures are reported in the result; an unregistered channel
        raises UnknownChannelError before anything is sent.
        """
        command = self.build_command(ref)
        device_base = resolve_device_base(device, self.roku.devices, self.roku.ip)
        label = ref.title or ref.content_id
        logger.info("Playing %s on channel %s via %s", label, ref.channel_id, device_base)

        try:
            await self.executor.execute(command, device_base)
        except CommandExecutionError as e:
            logger.error("Failed to play %s on %s: %s", label, device_base, e)
            return PlaybackResult(
                success=False,
                message=str(e),
                status_code=e.status_code,
                failed_step=e.step,
            )

        logger.info("Successfully initiated playback: %s", label)
        return PlaybackResult(
            success=True,
            message=f"Launched channel {ref.channel_id} with content ID {ref.content_id}.",
        )
