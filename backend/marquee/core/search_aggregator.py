"""Content discovery across Brave web search and channel-native search.

search() fans out concurrently to:
  1. Brave Search, scoped with site: filters for every public channel domain;
     each hit is routed through the channel plugins' URL extractors.
  2. Each channel plugin's own search (e.g. an Emby library).

Results are merged (web first), deduplicated by channel + content id and
truncated. A failing or slow provider contributes zero results and never
fails the whole search.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, replace

from .brave_search import BraveSearchClient, WebResult
from .channels import ChannelRegistry
from .media import MediaReference

logger = logging.getLogger("marquee.search_aggregator")

WEB_SOURCE = "brave"
DEFAULT_SEARCH_LIMIT = 20
DEFAULT_PROVIDER_TIMEOUT = 10.0


@dataclass
class SearchResult:
    """One deduplicated search hit, ready to be accepted into a library."""

    source: str
    title: str
    reference: MediaReference
    url: str | None = None
    description: str | None = None
    image_url: str | None = None
    dedup_key: str | None = None

    def __post_init__(self) -> None:
        if self.dedup_key is None:
            self.dedup_key = self.reference.dedup_key


def build_site_query(query: str, domains: list[str]) -> str:
    """Scope a query to the given domains.

    Example: "watch the matrix (site:netflix.com OR site:disneyplus.com)"
    """
    if not domains:
        logger.warning("No public search domains found, searching without site: filters")
        return query
    sites = " OR ".join(f"site:{domain}" for domain in domains)
    return f"watch {query} ({sites})"


def enrich_reference(ref: MediaReference, hit: WebResult) -> MediaReference:
    """Overlay the web hit's rich metadata onto a structural reference."""
    metadata = replace(
        ref.metadata,
        description=hit.description or ref.metadata.description,
        image_url=hit.thumbnail or ref.metadata.image_url,
        original_url=hit.url or ref.metadata.original_url,
    )
    return replace(ref, title=hit.title or ref.title, metadata=metadata)


def deduplicate(results: list[SearchResult]) -> list[SearchResult]:
    """Keep the first result for each dedup key."""
    seen: set[str] = set()
    unique: list[SearchResult] = []
    for result in results:
        key = result.dedup_key
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        unique.append(result)
    return unique


class SearchAggregator:
    """Merges Brave web search with each channel's native search."""

    def __init__(
        self,
        registry: ChannelRegistry,
        brave_client: BraveSearchClient | None = None,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> None:
        self.registry = registry
        self.brave_client = brave_client
        self.provider_timeout = provider_timeout

    async def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[SearchResult]:
        """Search every provider and return at most ``limit`` unique results."""
        query = query.strip()
        if not query or limit < 1:
            return []

        logger.info("Searching for '%s' across %d channel(s)", query, len(self.registry))
        providers: list[tuple[str, Awaitable[list[SearchResult]]]] = []
        if self.brave_client is not None:
            providers.append((WEB_SOURCE, self._web_search(query, limit)))
        for plugin in self.registry:
            providers.append((plugin.channel_name, self._native_search(plugin.channel_name, plugin.search(query))))

        batches = await asyncio.gather(*(self._guarded(name, call) for name, call in providers))

        merged = [result for batch in batches for result in batch]
        results = deduplicate(merged)[:limit]
        logger.info("Found %d total search results for query '%s'", len(results), query)
        return results

    async def _guarded(self, name: str, call: Awaitable[list[SearchResult]]) -> list[SearchResult]:
        """Run one provider; failures and timeouts count as zero results."""
        try:
            return await asyncio.wait_for(call, timeout=self.provider_timeout)
        except TimeoutError:
            logger.warning("Search provider '%s' timed out after %.1fs", name, self.provider_timeout)
        except Exception as e:
            logger.warning("Search provider '%s' failed: %s", name, e)
        return []

    async def _web_search(self, query: str, limit: int) -> list[SearchResult]:
        assert self.brave_client is not None
        site_query = build_site_query(query, self.registry.public_search_domains())
        logger.info("Searching Brave: %s", site_query)
        hits = await self.brave_client.search(site_query, count=limit)
        logger.info("Brave Search returned %d hits", len(hits))

        results: list[SearchResult] = []
        for hit in hits:
            if not hit.url:
                continue
            if not self.registry.accepts_web_hit(hit.url, hit.title or ""):
                continue
            ref = self.registry.extract_from_url(hit.url, hit.title or "", hit.description)
            if ref is None:
                logger.debug("No channel matched URL: %s", hit.url)
                continue
            enriched = enrich_reference(ref, hit)
            logger.info("Matched: channel=%s content_id=%s url=%s", ref.channel_name, ref.content_id, hit.url)
            results.append(
                SearchResult(
                    source=WEB_SOURCE,
                    title=enriched.title,
                    reference=enriched,
                    url=hit.url,
                    description=enriched.metadata.description,
                    image_url=enriched.metadata.image_url,
                )
            )
        return results

    async def _native_search(
        self, channel_name: str, call: Awaitable[list[MediaReference]]
    ) -> list[SearchResult]:
        refs = await call
        logger.debug("Channel '%s' returned %d results", channel_name, len(refs))
        return [
            SearchResult(
                source=channel_name,
                title=ref.title or "Unknown",
                reference=ref,
                description=ref.metadata.description,
                image_url=ref.metadata.image_url,
            )
            for ref in refs
        ]
