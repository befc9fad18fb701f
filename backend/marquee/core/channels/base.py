"""The capability set every Roku channel plugin provides."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..commands import PlaybackCommand
from ..media import MediaReference

# Empirically calibrated: profile-selection and play-confirmation screens
# take roughly two seconds to render after a deep-link launch.
DEFAULT_LAUNCH_WAIT_MS = 2000


@runtime_checkable
class ChannelPlugin(Protocol):
    """One streaming service on the Roku.

    Plugins are pure with respect to playback: building a command never
    performs I/O. Native search is optional; a plugin without it returns an
    empty list rather than raising.
    """

    channel_id: str
    channel_name: str
    public_search_domain: str  # "" keeps a private server out of web search
    search_url: str

    def build_playback_command(self, ref: MediaReference) -> PlaybackCommand:
        """Build the command that starts playback of ``ref``."""
        ...

    async def search(self, query: str) -> list[MediaReference]:
        """Search the channel's own catalog."""
        ...

    def extract_from_url(
        self,
        url: str,
        title: str | None = None,
        description: str | None = None,
    ) -> MediaReference | None:
        """Extract a reference from a service URL, or None if it doesn't match."""
        ...
