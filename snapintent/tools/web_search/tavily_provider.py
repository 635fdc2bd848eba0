# snapintent/tools/web_search/tavily_provider.py
"""
Tavily web search, used only to enrich stored screenshots.

Search is never fatal: every failure is logged and returned as None so enrichment can
simply skip the record.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

import requests

from snapintent.config.settings import WebSearchConfig
from snapintent.schemas.models import SearchResultsMetadata, WebSearchResult

logger = logging.getLogger(__name__)


@runtime_checkable
class WebSearchProvider(Protocol):
    def search(self, query: str, *, max_results: int = 5) -> SearchResultsMetadata | None: ...


def travel_query(location: str) -> str:
    return f"{location} travel guide attractions activities"


def product_query(product_name: str) -> str:
    return f"{product_name} reviews comparison alternatives"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TavilySearchProvider(WebSearchProvider):
    def __init__(
        self,
        config: WebSearchConfig,
        *,
        session: requests.Session | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not config.api_key:
            raise RuntimeError("TAVILY_API_KEY not set for TavilySearchProvider.")
        self._api_key = config.api_key
        self._endpoint = config.endpoint
        self._timeout_s = config.timeout_s
        self._default_max = config.max_results
        self._session = session or requests.Session()
        self._clock = clock

    def search(self, query: str, *, max_results: int | None = None) -> SearchResultsMetadata | None:
        body = {
            "api_key": self._api_key,
            "query": query,
            "max_results": max_results or self._default_max,
            "search_depth": "basic",
        }
        started = time.monotonic()
        try:
            resp = self._session.post(self._endpoint, json=body, timeout=self._timeout_s)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("web search failed for %r: %s", query, exc)
            return None

        raw = data.get("results") if isinstance(data, dict) else None
        if not raw:
            logger.info("no web results for %r", query)
            return None

        try:
            results = [
                WebSearchResult(
                    title=r.get("title") or "",
                    url=r.get("url") or "",
                    content=r.get("content") or "",
                    score=float(r.get("score") or 0.0),
                )
                for r in raw
                if isinstance(r, dict)
            ]
        except (TypeError, ValueError) as exc:
            logger.warning("malformed web search results for %r: %s", query, exc)
            return None
        logger.info("web search %r: %d results in %.2fs", query, len(results), time.monotonic() - started)
        return SearchResultsMetadata(
            query=query,
            results=results,
            searched_at=self._clock(),
            result_count=len(results),
        )
