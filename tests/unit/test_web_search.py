# tests/unit/test_web_search.py

import requests

from snapintent.config.settings import WebSearchConfig
from snapintent.tools.web_search import (
    TavilySearchProvider,
    get_web_search,
    product_query,
    travel_query,
)
from tests.utils import FIXED_NOW, FakeResponse, FakeSession, fixed_clock

TAVILY_OK = {
    "query": "Paris travel guide attractions activities",
    "results": [
        {"title": "Top 10 Paris", "url": "https://example.com/paris", "content": "See the tower", "score": 0.91},
        {"title": "Paris on a budget", "url": "https://example.com/budget", "content": "Cheap eats", "score": 0.77},
    ],
}


def _provider(*responses):
    session = FakeSession(*responses)
    cfg = WebSearchConfig(api_key="tv-key", max_results=3)
    return TavilySearchProvider(cfg, session=session, clock=fixed_clock), session


def test_query_builders():
    assert travel_query("Paris") == "Paris travel guide attractions activities"
    assert product_query("Trail Runner 2") == "Trail Runner 2 reviews comparison alternatives"


def test_search_maps_results_and_request_body():
    prov, session = _provider(FakeResponse(200, TAVILY_OK))
    out = prov.search(travel_query("Paris"))

    assert out.result_count == 2
    assert out.results[0].title == "Top 10 Paris"
    assert out.searched_at == FIXED_NOW
    body = session.calls[0]["json"]
    assert body["api_key"] == "tv-key"
    assert body["max_results"] == 3
    assert body["search_depth"] == "basic"


def test_search_is_never_fatal():
    for resp in (FakeResponse(500, {"error": "x"}), requests.ConnectionError("down"), FakeResponse(200, None, text="<html>")):
        prov, _ = _provider(resp)
        assert prov.search("anything") is None


def test_empty_results_are_none():
    prov, _ = _provider(FakeResponse(200, {"results": []}))
    assert prov.search("nothing") is None


def test_selector_requires_key():
    assert get_web_search(WebSearchConfig(api_key=None)) is None
    assert get_web_search(WebSearchConfig(provider="none", api_key="k")) is None
    assert isinstance(get_web_search(WebSearchConfig(api_key="k")), TavilySearchProvider)


def test_malformed_result_score_is_none():
    payload = {"results": [{"title": "Odd", "url": "https://example.com", "content": "", "score": "high"}]}
    prov, _ = _provider(FakeResponse(200, payload))
    assert prov.search("anything") is None
