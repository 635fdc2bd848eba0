from __future__ import annotations

from snapintent.config.settings import WebSearchConfig

from .tavily_provider import TavilySearchProvider, WebSearchProvider, product_query, travel_query


def get_web_search(config: WebSearchConfig) -> WebSearchProvider | None:
    if config.provider == "none" or not config.api_key:
        return None
    return TavilySearchProvider(config)


__all__ = [
    "WebSearchProvider",
    "TavilySearchProvider",
    "travel_query",
    "product_query",
    "get_web_search",
]
