"""Channel registry: channel id -> plugin, built once at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import replace

import httpx

from ..config import Settings
from ..media import MediaReference
from .base import ChannelPlugin
from .emby import EmbyChannel
from .streaming import APPLE_TV_PLUS, DISNEY_PLUS, HBO_MAX, HULU, NETFLIX, PRIME_VIDEO, StreamingChannel

logger = logging.getLogger("marquee.channels.registry")

STREAMING_ALIASES: dict[str, StreamingChannel] = {
    "netflix": NETFLIX,
    "disney_plus": DISNEY_PLUS,
    "disneyplus": DISNEY_PLUS,
    "disney+": DISNEY_PLUS,
    "hbo_max": HBO_MAX,
    "hbomax": HBO_MAX,
    "hbo": HBO_MAX,
    "max": HBO_MAX,
    "prime_video": PRIME_VIDEO,
    "primevideo": PRIME_VIDEO,
    "prime": PRIME_VIDEO,
    "amazon": PRIME_VIDEO,
    "amazon_prime": PRIME_VIDEO,
    "hulu": HULU,
    "apple_tv_plus": APPLE_TV_PLUS,
    "appletv": APPLE_TV_PLUS,
}


class UnknownChannelError(LookupError):
    """No plugin is registered for the requested channel id."""

    def __init__(self, channel_id: str) -> None:
        super().__init__(f"No channel plugin registered for channel ID: {channel_id}")
        self.channel_id = channel_id


class ChannelRegistry:
    """Read-only, ordered collection of channel plugins keyed by channel id.

    Registration order matters: URL extraction tries plugins in that order
    and the first match wins.
    """

    def __init__(self, plugins: Iterable[ChannelPlugin]) -> None:
        self._plugins: dict[str, ChannelPlugin] = {}
        for plugin in plugins:
            if plugin.channel_id in self._plugins:
                raise ValueError(f"Duplicate channel ID: {plugin.channel_id}")
            self._plugins[plugin.channel_id] = plugin

    def get(self, channel_id: str) -> ChannelPlugin:
        plugin = self._plugins.get(str(channel_id))
        if plugin is None:
            raise UnknownChannelError(str(channel_id))
        return plugin

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._plugins

    def __iter__(self) -> Iterator[ChannelPlugin]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)

    def public_search_domains(self) -> list[str]:
        """Domains for site: filters, skipping private servers."""
        return [p.public_search_domain for p in self if p.public_search_domain]

    def extract_from_url(
        self,
        url: str,
        title: str | None = None,
        description: str | None = None,
    ) -> MediaReference | None:
        """Try each plugin in registration order; first match wins."""
        for plugin in self:
            ref = plugin.extract_from_url(url, title, description)
            if ref is not None:
                return ref
        return None

    def accepts_web_hit(self, url: str, title: str | None) -> bool:
        """Apply every plugin's hit filter; one rejection drops the hit for all plugins.

        A hit such as an unmarked amazon.com product page is refused here,
        before any plugin gets to claim it by URL alone.
        """
        for plugin in self:
            accepts_hit = getattr(plugin, "accepts_hit", None)
            if accepts_hit is not None and not accepts_hit(url, title):
                logger.debug("%s filter rejected web hit: %s", plugin.channel_name, url)
                return False
        return True


def build_registry(settings: Settings, http_client: httpx.AsyncClient) -> ChannelRegistry:
    """Create channel plugins for the configured channel names, in order."""
    plugins: list[ChannelPlugin] = []
    seen: set[str] = set()

    for name in settings.channels:
        key = name.strip().lower().replace(" ", "_")
        plugin: ChannelPlugin | None
        if key == "emby":
            plugin = _build_emby(settings, http_client)
        elif key in STREAMING_ALIASES:
            plugin = _with_launch_wait(STREAMING_ALIASES[key], settings.roku.launch_wait_ms)
        else:
            logger.warning("Unknown channel in config: %s", name)
            continue

        if plugin is None:
            continue
        if plugin.channel_id in seen:
            logger.warning("Channel %s listed more than once; keeping the first", name)
            continue
        seen.add(plugin.channel_id)
        plugins.append(plugin)
        logger.info("Registered channel: %s (ID: %s)", plugin.channel_name, plugin.channel_id)

    return ChannelRegistry(plugins)


def _with_launch_wait(channel: StreamingChannel, launch_wait_ms: int) -> StreamingChannel:
    if channel.launch_wait_ms == launch_wait_ms:
        return channel
    return replace(channel, launch_wait_ms=launch_wait_ms)


def _build_emby(settings: Settings, http_client: httpx.AsyncClient) -> EmbyChannel | None:
    emby = settings.emby
    if not emby.enabled or emby.api_key is None:
        logger.warning("Emby channel requires emby.server_url, emby.api_key and emby.user_id; skipping")
        return None
    return EmbyChannel(
        server_url=emby.server_url,
        api_key=emby.api_key.get_secret_value(),
        user_id=emby.user_id,
        http_client=http_client,
        timeout=emby.timeout,
    )
