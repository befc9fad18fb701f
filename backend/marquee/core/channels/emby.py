"""Emby for Roku: a private media server with real deep links and search."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..commands import DeepLinkCommand
from ..media import MediaMetadata, MediaReference

logger = logging.getLogger("marquee.channels.emby")

EMBY_CHANNEL_ID = "44191"
SEARCH_LIMIT = 50
SEARCH_FIELDS = "Overview,Path,ImageTags,Genres,CommunityRating,OfficialRating,UserData"


class EmbySearchError(Exception):
    """Raised when the Emby server rejects or fails a search."""


class EmbyChannel:
    """Roku channel plugin for an Emby server.

    Emby honours ``Command=PlayNow&ItemIds=<id>`` on launch, which starts
    playback directly (optionally at ``StartPositionTicks``), so no UI
    navigation is needed.
    """

    channel_id = EMBY_CHANNEL_ID
    channel_name = "Emby"
    public_search_domain = ""  # Private server, never part of public web search

    def __init__(
        self,
        server_url: str,
        api_key: str,
        user_id: str,
        http_client: httpx.AsyncClient,
        timeout: float = 10.0,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self.user_id = user_id
        self.http_client = http_client
        self.timeout = timeout

    @property
    def search_url(self) -> str:
        return f"{self.server_url}/web/index.html#!/search.html"

    def build_playback_command(self, ref: MediaReference) -> DeepLinkCommand:
        params = ["Command=PlayNow", f"ItemIds={ref.content_id}"]
        resume = ref.metadata.resume_position_ticks
        if resume is not None and resume > 0:
            params.append(f"StartPositionTicks={resume}")
        return DeepLinkCommand(channel_id=self.channel_id, params="&".join(params))

    def extract_from_url(
        self,
        url: str,
        title: str | None = None,
        description: str | None = None,
    ) -> MediaReference | None:
        # Emby items are never discovered through public URLs.
        return None

    async def search(self, query: str) -> list[MediaReference]:
        """Search the Emby library for movies and episodes.

        Raises:
            EmbySearchError: If the server is unreachable or returns non-2xx.
        """
        logger.debug("Searching Emby library for: %s", query)
        params: dict[str, Any] = {
            "searchTerm": query,
            "recursive": "true",
            "limit": SEARCH_LIMIT,
            "fields": SEARCH_FIELDS,
            "includeItemTypes": "Movie,Episode",
        }
        try:
            response = await self.http_client.get(
                f"{self.server_url}/Users/{self.user_id}/Items",
                params=params,
                headers={"X-Emby-Token": self.api_key, "Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmbySearchError(f"Emby search failed: {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise EmbySearchError(f"Emby search failed: {e}") from e

        data = response.json() or {}
        items: list[dict[str, Any]] = data.get("Items") or []
        logger.info("Found %d Emby results for query: %s", len(items), query)
        return [self._to_reference(item) for item in items if item.get("Id")]

    def _to_reference(self, item: dict[str, Any]) -> MediaReference:
        user_data = item.get("UserData") or {}
        image_tags = item.get("ImageTags") or {}
        return MediaReference(
            channel_id=self.channel_id,
            content_id=str(item["Id"]),
            media_type=item.get("Type"),
            title=build_title(item),
            channel_name=self.channel_name,
            metadata=MediaMetadata(
                description=item.get("Overview"),
                image_url=self._image_url(str(item["Id"]), image_tags.get("Primary")),
                server_id=item.get("ServerId"),
                item_type=item.get("Type"),
                series_name=item.get("SeriesName"),
                season_number=item.get("ParentIndexNumber"),
                episode_number=item.get("IndexNumber"),
                year=item.get("ProductionYear"),
                resume_position_ticks=user_data.get("PlaybackPositionTicks"),
                runtime_ticks=item.get("RunTimeTicks"),
                played_percentage=user_data.get("PlayedPercentage"),
                is_favorite=user_data.get("IsFavorite"),
                community_rating=item.get("CommunityRating"),
                official_rating=item.get("OfficialRating"),
                genres=tuple(item.get("Genres") or ()),
            ),
        )

    def _image_url(self, item_id: str, tag: str | None) -> str | None:
        if not tag:
            return None
        return f"{self.server_url}/Items/{item_id}/Images/Primary?tag={tag}"


def build_title(item: dict[str, Any]) -> str:
    """Human-readable title for an Emby item."""
    name = item.get("Name") or ""
    if item.get("Type") == "Episode":
        return f"{item.get('SeriesName')} - S{item.get('ParentIndexNumber')}E{item.get('IndexNumber')} - {name}"
    if item.get("Type") == "Movie" and item.get("ProductionYear"):
        return f"{name} ({item['ProductionYear']})"
    return name
