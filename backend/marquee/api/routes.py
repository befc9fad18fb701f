"""HTTP endpoints for search, URL extraction and playback."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from starlette.requests import HTTPConnection

from ..core.channels import ChannelRegistry, UnknownChannelError
from ..core.config import settings
from ..core.media import MediaMetadata, MediaReference
from ..core.playback import PlaybackService
from ..core.search_aggregator import SearchAggregator, SearchResult

logger = logging.getLogger("marquee.api")

router = APIRouter()


class PlayRequest(BaseModel):
    """Play request from a client."""

    channel_id: str
    content_id: str
    media_type: str | None = None
    title: str = ""
    resume_position_ticks: int | None = None
    device: str | None = None


class PlayResponse(BaseModel):
    success: bool
    message: str
    status_code: int | None = None
    failed_step: int | None = None


class ReferenceModel(BaseModel):
    channel_id: str
    channel_name: str
    content_id: str
    media_type: str | None
    title: str
    description: str | None = None
    image_url: str | None = None
    original_url: str | None = None

    @classmethod
    def from_reference(cls, ref: MediaReference) -> "ReferenceModel":
        return cls(
            channel_id=ref.channel_id,
            channel_name=ref.channel_name,
            content_id=ref.content_id,
            media_type=ref.media_type,
            title=ref.title,
            description=ref.metadata.description,
            image_url=ref.metadata.image_url,
            original_url=ref.metadata.original_url,
        )


class SearchResultModel(BaseModel):
    source: str
    title: str
    url: str | None
    description: str | None
    image_url: str | None
    dedup_key: str | None
    content: ReferenceModel

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultModel":
        return cls(
            source=result.source,
            title=result.title,
            url=result.url,
            description=result.description,
            image_url=result.image_url,
            dedup_key=result.dedup_key,
            content=ReferenceModel.from_reference(result.reference),
        )


class SearchResponse(BaseModel):
    query: str
    total_results: int
    results: list[SearchResultModel]


class ChannelInfo(BaseModel):
    channel_id: str
    channel_name: str
    public_search_domain: str
    search_url: str


# --- Dependency injection helpers ---


def get_registry(conn: HTTPConnection) -> ChannelRegistry:
    """Get the channel registry from app state."""
    return conn.app.state.registry  # type: ignore[no-any-return]


def get_search_aggregator(conn: HTTPConnection) -> SearchAggregator:
    """Get the search aggregator from app state."""
    return conn.app.state.search_aggregator  # type: ignore[no-any-return]


def get_playback_service(conn: HTTPConnection) -> PlaybackService:
    """Get the playback service from app state."""
    return conn.app.state.playback_service  # type: ignore[no-any-return]


@router.get("/channels", response_model=list[ChannelInfo])
async def list_channels(registry: ChannelRegistry = Depends(get_registry)):
    """List registered channels in match priority order."""
    return [
        ChannelInfo(
            channel_id=plugin.channel_id,
            channel_name=plugin.channel_name,
            public_search_domain=plugin.public_search_domain,
            search_url=plugin.search_url,
        )
        for plugin in registry
    ]


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = Query(default=""),
    limit: int | None = Query(default=None, ge=1, le=100),
    aggregator: SearchAggregator = Depends(get_search_aggregator),
):
    """Aggregated search across Brave and channel-native providers."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")

    results = await aggregator.search(q, limit or settings.search.default_limit)
    return SearchResponse(
        query=q,
        total_results=len(results),
        results=[SearchResultModel.from_result(r) for r in results],
    )


@router.get("/extract", response_model=ReferenceModel)
async def extract(url: str, registry: ChannelRegistry = Depends(get_registry)):
    """Turn a streaming service URL into a playable reference."""
    ref = registry.extract_from_url(url)
    if ref is None:
        raise HTTPException(status_code=404, detail=f"No channel matched URL: {url}")
    return ReferenceModel.from_reference(ref)


@router.post("/play", response_model=PlayResponse)
async def play(request: PlayRequest, service: PlaybackService = Depends(get_playback_service)):
    """Play content on a Roku."""
    ref = MediaReference(
        channel_id=request.channel_id,
        content_id=request.content_id,
        media_type=request.media_type,
        title=request.title,
        metadata=MediaMetadata(resume_position_ticks=request.resume_position_ticks),
    )
    try:
        result = await service.play(ref, device=request.device)
    except UnknownChannelError as e:
        logger.warning("Play request for unknown channel: %s", e.channel_id)
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not result.success:
        raise HTTPException(status_code=502, detail=PlayResponse(**result.__dict__).model_dump())
    return PlayResponse(**result.__dict__)
