"""Media references: what the engine is asked to play."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_MEDIA_TYPE = "movie"


@dataclass(frozen=True)
class MediaMetadata:
    """Optional display and playback details attached to a reference."""

    description: str | None = None
    image_url: str | None = None
    original_url: str | None = None
    search_url: str | None = None
    resume_position_ticks: int | None = None
    runtime_ticks: int | None = None
    series_name: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    year: int | None = None
    community_rating: float | None = None
    official_rating: str | None = None
    genres: tuple[str, ...] = ()
    played_percentage: float | None = None
    is_favorite: bool | None = None
    server_id: str | None = None
    item_type: str | None = None


@dataclass(frozen=True)
class MediaReference:
    """A stored pointer to playable content on one channel."""

    channel_id: str
    content_id: str
    media_type: str | None = DEFAULT_MEDIA_TYPE
    title: str = ""
    channel_name: str = ""
    metadata: MediaMetadata = field(default_factory=MediaMetadata)

    @property
    def dedup_key(self) -> str:
        return f"{self.channel_id}-{self.content_id}"


def normalize_media_type(media_type: str | None) -> str:
    """Lower-case a media type, falling back to 'movie' when absent."""
    if not media_type or not media_type.strip():
        return DEFAULT_MEDIA_TYPE
    return media_type.strip().lower()
