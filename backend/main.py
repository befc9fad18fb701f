import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marquee.api.routes import router
from marquee.core.brave_search import BraveSearchClient
from marquee.core.channels import build_registry
from marquee.core.config import settings
from marquee.core.ecp import EcpExecutor
from marquee.core.playback import PlaybackService
from marquee.core.search_aggregator import SearchAggregator

logging.basicConfig(
    level=settings.logging.level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("marquee")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP client and engine services."""
    http_client = httpx.AsyncClient(timeout=settings.roku.request_timeout)
    registry = build_registry(settings, http_client)

    brave_client = None
    if settings.brave.api_key:
        brave_client = BraveSearchClient(
            api_key=settings.brave.api_key.get_secret_value(),
            http_client=http_client,
            timeout=settings.brave.timeout,
        )
    else:
        logger.info("Brave Search disabled (no brave.api_key configured)")

    executor = EcpExecutor(
        http_client,
        keypress_delay_ms=settings.roku.keypress_delay_ms,
        char_delay_ms=settings.roku.char_delay_ms,
        timeout=settings.roku.request_timeout,
    )

    app.state.http_client = http_client
    app.state.registry = registry
    app.state.search_aggregator = SearchAggregator(
        registry, brave_client, provider_timeout=settings.search.provider_timeout
    )
    app.state.playback_service = PlaybackService(registry, executor, settings.roku)
    logger.info("Marquee started with %d channel(s)", len(registry))
    try:
        yield
    finally:
        await http_client.aclose()


app = FastAPI(
    title=settings.app.name,
    version=settings.app.version,
    description="Plays stored media references on Roku devices and searches streaming services",
    lifespan=lifespan,
)

# Configure CORS based on environment
if settings.app.environment == "production":
    cors_allow_credentials = False
    cors_allow_methods = ["GET", "POST"]
    cors_allow_headers = ["Content-Type", "Authorization", "Accept"]
    cors_max_age = 86400  # 24 hours
else:
    cors_allow_credentials = True
    cors_allow_methods = ["GET", "POST", "OPTIONS"]
    cors_allow_headers = ["*"]
    cors_max_age = 0  # No caching in development

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.allowed_origins,
    allow_credentials=cors_allow_credentials,
    allow_methods=cors_allow_methods,
    allow_headers=cors_allow_headers,
    max_age=cors_max_age,
)

app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.debug,
        log_level=settings.logging.level,
    )
