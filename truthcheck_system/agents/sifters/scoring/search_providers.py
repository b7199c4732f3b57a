"""Serper-backed web and scholarly search providers.

Handles a missing SERPER_API_KEY by returning empty results, allowing tests
and development without API access. Transport failures are retried; any
other failure raises RemoteServiceError so the calling scorer reports 0
without caching it.

Result URLs are unwrapped (redirectors, tracker parameters) before the
domain is computed.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from truthcheck_system.agents.sifters.credibility.bias_resolver import normalize_host
from truthcheck_system.data_management.schemas import SourceRecord
from truthcheck_system.exceptions import RemoteServiceError
from truthcheck_system.llm.rate_limiter import RateLimiter, RateLimitExceeded
from truthcheck_system.utils.url_unwrapper import unwrap_redirect

SERPER_BASE_URL = "https://google.serper.dev"


class SerperSearchProvider:
    """
    Base Serper client; subclasses pick the endpoint.

    Attributes:
        endpoint: Serper path ("/search" or "/scholar")
        request_timeout: Seconds per HTTP request
    """

    endpoint = "/search"

    def __init__(
        self,
        api_key: Optional[str],
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        request_timeout: float = 15.0,
        base_url: str = SERPER_BASE_URL,
    ) -> None:
        """
        Args:
            api_key: Serper API key. None means every search returns [].
            http_client: Shared httpx client (one is created lazily if None)
            rate_limiter: Shared limiter; waiting for it is what makes
                searches "queued"
            request_timeout: Per-request timeout in seconds
            base_url: Serper base URL
        """
        self._api_key = api_key
        self._http_client = http_client
        self._owns_client = http_client is None
        self._rate_limiter = rate_limiter
        self.request_timeout = request_timeout
        self._base_url = base_url.rstrip("/")
        self._logger = structlog.get_logger().bind(
            component=type(self).__name__, endpoint=self.endpoint
        )

        if not self._api_key:
            self._logger.warning(
                "serper_api_key_not_set",
                msg="SERPER_API_KEY not set, searches return no results",
            )

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.request_timeout)
        return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def search(self, query: str, max_results: int) -> List[SourceRecord]:
        """
        Search and return up to max_results SourceRecords in relevance order.

        Raises:
            RemoteServiceError: If the request fails after retries or the
                response is malformed
        """
        if not query or not query.strip():
            return []
        if not self._api_key:
            self._logger.debug("mock_search", query=query[:50])
            return []

        if self._rate_limiter is not None:
            try:
                await self._rate_limiter.acquire()
            except RateLimitExceeded as e:
                raise RemoteServiceError("Search rate limit exhausted") from e

        payload = {"q": query, "num": max_results}
        data = await self._post(payload)
        records = self._parse(data, max_results)
        self._logger.info("search_executed", query=query[:80], results=len(records))
        return records

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = self._get_client()
        headers = {"X-API-KEY": self._api_key or "", "Content-Type": "application/json"}
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(3),
                wait=wait_exponential(multiplier=1, min=1, max=4),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await client.post(
                        f"{self._base_url}{self.endpoint}",
                        json=payload,
                        headers=headers,
                        timeout=self.request_timeout,
                    )
                    response.raise_for_status()
                    return response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("search_failed", query=payload["q"][:50], error=str(e))
            raise RemoteServiceError(f"Serper request failed: {e}") from e
        raise RemoteServiceError("Serper request made no attempts")

    def _parse(self, data: Dict[str, Any], max_results: int) -> List[SourceRecord]:
        organic = data.get("organic", []) if isinstance(data, dict) else []
        records: List[SourceRecord] = []
        seen_urls: set[str] = set()

        for result in organic:
            if not isinstance(result, dict):
                continue
            raw_url = result.get("link", "")
            if not raw_url:
                continue
            url = unwrap_redirect(raw_url)
            if url in seen_urls:
                continue
            seen_urls.add(url)

            records.append(
                SourceRecord(
                    url=url,
                    title=result.get("title", "") or "",
                    snippet=self._snippet(result),
                    domain=normalize_host(url),
                )
            )
            if len(records) >= max_results:
                break
        return records

    @staticmethod
    def _snippet(result: Dict[str, Any]) -> str:
        return result.get("snippet", "") or ""


class SerperWebSearchProvider(SerperSearchProvider):
    """General web search via Serper /search."""

    endpoint = "/search"


class SerperScholarSearchProvider(SerperSearchProvider):
    """Scholarly search via Serper /scholar."""

    endpoint = "/scholar"

    @staticmethod
    def _snippet(result: Dict[str, Any]) -> str:
        snippet = result.get("snippet", "") or ""
        publication = result.get("publicationInfo", "") or ""
        if publication and snippet:
            return f"{publication} - {snippet}"
        return snippet or publication
