# tests/integration/test_enrichment.py

import pytest

from snapintent.orchestrators import enrich_screenshot, enrichment_query
from snapintent.schemas.models import SearchResultsMetadata, WebSearchResult
from tests.utils import FIXED_NOW, make_extraction_reply

pytestmark = pytest.mark.integration


class _RecordingSearch:
    def __init__(self, result_count=2, empty=False):
        self.queries = []
        self._n = result_count
        self._empty = empty

    def search(self, query, *, max_results=None):
        self.queries.append(query)
        if self._empty:
            return None
        return SearchResultsMetadata(
            query=query,
            results=[WebSearchResult(title=f"r{i}", url=f"https://example.com/{i}") for i in range(self._n)],
            searched_at=FIXED_NOW,
            result_count=self._n,
        )


def _process(pipeline_factory, png_bytes, reply):
    return pipeline_factory(reply=reply).process(png_bytes(), "image/png").image_id


def test_travel_enrichment_uses_first_place(pipeline_factory, memory_store, png_bytes):
    sid = _process(pipeline_factory, png_bytes, None)  # default Paris reply
    search = _RecordingSearch()

    out = enrich_screenshot(memory_store, search, sid, clock=lambda: FIXED_NOW)

    assert search.queries == ["Eiffel Tower travel guide attractions activities"]
    assert out.result_count == 2
    rec = memory_store.get_screenshot(sid)
    assert rec.search_results.result_count == 2
    assert rec.processed_at == FIXED_NOW
    assert "searchResults" in rec.to_document()


def test_shopping_enrichment_uses_first_product(pipeline_factory, memory_store, png_bytes):
    sid = _process(pipeline_factory, png_bytes, make_extraction_reply("shopping", products=["Trail Runner 2", "Sock"]))
    search = _RecordingSearch(result_count=1)
    out = enrich_screenshot(memory_store, search, sid)
    assert out.query == "Trail Runner 2 reviews comparison alternatives"


def test_travel_falls_back_to_entities(pipeline_factory, memory_store, png_bytes):
    sid = _process(pipeline_factory, png_bytes, make_extraction_reply("travel", entities=["Kyoto"]))
    assert enrichment_query(memory_store.get_screenshot(sid)) == "Kyoto travel guide attractions activities"


def test_general_bucket_is_not_enriched(pipeline_factory, memory_store, png_bytes):
    sid = _process(pipeline_factory, png_bytes, make_extraction_reply("general", entities=["x"]))
    search = _RecordingSearch()
    out = enrich_screenshot(memory_store, search, sid)
    assert out.query is None and out.result_count == 0
    assert search.queries == []


def test_empty_search_leaves_record_untouched(pipeline_factory, memory_store, png_bytes):
    sid = _process(pipeline_factory, png_bytes, None)
    out = enrich_screenshot(memory_store, _RecordingSearch(empty=True), sid)
    assert out.query is not None and out.result_count == 0
    assert memory_store.get_screenshot(sid).search_results is None


def test_unknown_screenshot(memory_store):
    with pytest.raises(LookupError):
        enrich_screenshot(memory_store, _RecordingSearch(), "missing")
