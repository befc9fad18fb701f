"""Public streaming services that share the launch, wait, press pattern.

Deep links on these channels land on a profile picker or a content detail
page, so every one of them is driven the same way: launch with
contentId/mediaType, wait for the screen to render, then press one key.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlencode

from ..commands import ActionSequence, KeypressAction, LaunchAction, RokuKey, WaitAction
from ..media import DEFAULT_MEDIA_TYPE, MediaMetadata, MediaReference, normalize_media_type
from .base import DEFAULT_LAUNCH_WAIT_MS

logger = logging.getLogger("marquee.channels.streaming")

PRIME_VIDEO_MARKER = "| Prime Video"


def build_launch_sequence(
    channel_id: str,
    ref: MediaReference,
    post_launch_key: RokuKey,
    wait_ms: int = DEFAULT_LAUNCH_WAIT_MS,
) -> ActionSequence:
    """Launch ``ref`` on a channel, wait for the UI, then press one key."""
    params = urlencode({"contentId": ref.content_id, "mediaType": normalize_media_type(ref.media_type)})
    return ActionSequence(
        actions=(
            LaunchAction(channel_id=channel_id, params=params),
            WaitAction(milliseconds=wait_ms),
            KeypressAction(key=post_launch_key, count=1),
        )
    )


@dataclass(frozen=True)
class StreamingChannel:
    """A streaming service channel configuration."""

    channel_id: str
    channel_name: str
    public_search_domain: str
    search_url: str
    url_patterns: tuple[re.Pattern[str], ...] = field(repr=False)
    default_title: str
    post_launch_key: RokuKey = RokuKey.SELECT
    launch_wait_ms: int = DEFAULT_LAUNCH_WAIT_MS
    media_type_from_url: Callable[[str], str] | None = field(default=None, repr=False)
    accepts_hit: Callable[[str, str | None], bool] | None = field(default=None, repr=False)

    def build_playback_command(self, ref: MediaReference) -> ActionSequence:
        return build_launch_sequence(self.channel_id, ref, self.post_launch_key, self.launch_wait_ms)

    async def search(self, query: str) -> list[MediaReference]:
        # No public catalog API for these services.
        return []

    def extract_from_url(
        self,
        url: str,
        title: str | None = None,
        description: str | None = None,
    ) -> MediaReference | None:
        if self.accepts_hit is not None and not self.accepts_hit(url, title):
            logger.debug("%s rejected hit: %s", self.channel_name, url)
            return None

        for pattern in self.url_patterns:
            m = pattern.search(url)
            if m:
                media_type = self.media_type_from_url(url) if self.media_type_from_url else DEFAULT_MEDIA_TYPE
                return MediaReference(
                    channel_id=self.channel_id,
                    content_id=m.group(1),
                    media_type=media_type,
                    title=self.default_title,
                    channel_name=self.channel_name,
                    metadata=MediaMetadata(original_url=url),
                )
        return None


def _netflix_media_type(url: str) -> str:
    """/watch/ links point at a playable title, /title/ at a show page."""
    return "movie" if "/watch/" in url else "series"


def _is_prime_video_hit(url: str, title: str | None) -> bool:
    """Amazon hosts far more than video; only trust titles marked as Prime Video.

    A bare URL (no title supplied) is taken at face value.
    """
    if title is None or "amazon.com" not in url:
        return True
    return PRIME_VIDEO_MARKER in title


# --- Channel definitions ---

NETFLIX = StreamingChannel(
    channel_id="12",
    channel_name="Netflix",
    public_search_domain="netflix.com",
    search_url="https://www.netflix.com/search",
    url_patterns=(re.compile(r"netflix\.com/(?:[a-z]{2}(?:-[A-Za-z]{2})?/)?(?:watch|title)/(\d+)"),),
    default_title="Netflix Content",
    post_launch_key=RokuKey.PLAY,
    media_type_from_url=_netflix_media_type,
)

DISNEY_PLUS = StreamingChannel(
    channel_id="291097",
    channel_name="Disney+",
    public_search_domain="disneyplus.com",
    search_url="https://www.disneyplus.com/search",
    url_patterns=(
        re.compile(r"disneyplus\.com/(?:[A-Za-z]{2}(?:-[A-Za-z]{2})?/)?(?:(?:play|video)/|browse/entity-)([a-f0-9-]+)"),
        re.compile(r"disneyplus\.com/(?:[A-Za-z]{2}(?:-[A-Za-z]{2})?/)?(?:movies|series)/[^/?]+/([A-Za-z0-9]+)"),
    ),
    default_title="Disney+ Content",
)

HBO_MAX = StreamingChannel(
    channel_id="61322",
    channel_name="HBO Max",
    public_search_domain="hbomax.com",
    search_url="https://play.hbomax.com/search",
    url_patterns=(
        re.compile(r"(?:max\.com|hbomax\.com)/(?:(?:movies|series)/[^/]+/|(?:video/watch|play)/)([^/?]+)"),
        re.compile(
            r"(?:max\.com|hbomax\.com)/(?:show|movie|episode)/"
            r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})"
        ),
    ),
    default_title="HBO Max Content",
)

PRIME_VIDEO = StreamingChannel(
    channel_id="13",
    channel_name="Prime Video",
    public_search_domain="amazon.com",
    search_url="https://www.primevideo.com/search?phrase=",
    url_patterns=(
        # ASIN format: B + 9 alphanumeric characters
        re.compile(r"(?:amazon\.com|primevideo\.com)/.*?/(B[A-Z0-9]{9})"),
        re.compile(r"primevideo\.com/(?:[^?]*/)?detail/(?:[^/?]+/)?([0-9A-Z]{26})"),
    ),
    default_title="Prime Video Content",
    accepts_hit=_is_prime_video_hit,
)

HULU = StreamingChannel(
    channel_id="2285",
    channel_name="Hulu",
    public_search_domain="hulu.com",
    search_url="https://www.hulu.com/search",
    url_patterns=(
        re.compile(
            r"hulu\.com/(?:series|watch|movie)/(?:[a-z0-9-]+-)?("
            r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})"
        ),
    ),
    default_title="Hulu Content",
)

APPLE_TV_PLUS = StreamingChannel(
    channel_id="551012",
    channel_name="Apple TV+",
    public_search_domain="tv.apple.com",
    search_url="https://tv.apple.com/search",
    url_patterns=(re.compile(r"tv\.apple\.com/(?:\w{2}/)?(?:show|movie|episode)/[^/]+/(umc\.cmc\.[a-z0-9]+)"),),
    default_title="Apple TV+ Content",
)

STREAMING_CHANNELS: tuple[StreamingChannel, ...] = (NETFLIX, DISNEY_PLUS, HBO_MAX, PRIME_VIDEO, HULU, APPLE_TV_PLUS)
