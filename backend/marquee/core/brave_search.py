"""Brave Search API client."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger("marquee.brave_search")

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
MAX_RESULTS = 20


@dataclass
class WebResult:
    """A single web search result."""

    title: str | None
    url: str | None
    description: str | None = None
    thumbnail: str | None = None


class BraveSearchError(Exception):
    """Raised when a Brave Search API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BraveSearchClient:
    """Async client for the Brave Web Search API."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    async def search(self, query: str, count: int = 10) -> list[WebResult]:
        """Execute a web search and return parsed results.

        Args:
            query: The search query string (may include site: filters).
            count: Maximum number of results (1-20).

        Returns:
            List of WebResult objects. Missing or null sections yield an empty list.

        Raises:
            BraveSearchError: If the API call fails or the body is not the expected JSON object.
        """
        client = self._get_client()
        params: dict[str, Any] = {"q": query, "count": max(1, min(count, MAX_RESULTS))}

        try:
            response = await client.get(
                BRAVE_SEARCH_URL,
                params=params,
                headers={
                    "Accept": "application/json",
                    "X-Subscription-Token": self.api_key,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Brave Search HTTP error: %s %s",
                e.response.status_code,
                e.response.text,
            )
            raise BraveSearchError(
                f"Brave Search returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("Brave Search request failed: %s", e)
            raise BraveSearchError(f"Brave Search request failed: {e}") from e

        try:
            data = response.json() or {}
        except ValueError as e:
            raise BraveSearchError(f"Brave Search returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise BraveSearchError("Brave Search returned a non-object response")
        web = data.get("web") or {}
        if not isinstance(web, dict):
            raise BraveSearchError("Brave Search returned a malformed 'web' section")
        raw_results = web.get("results") or []
        if not isinstance(raw_results, list):
            raise BraveSearchError("Brave Search returned malformed 'web.results'")

        return [_parse_result(r) for r in raw_results if isinstance(r, dict)]

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()


def _parse_result(raw: dict[str, Any]) -> WebResult:
    thumbnail = raw.get("thumbnail") or {}
    return WebResult(
        title=raw.get("title"),
        url=raw.get("url"),
        description=raw.get("description"),
        thumbnail=thumbnail.get("src") if isinstance(thumbnail, dict) else None,
    )
