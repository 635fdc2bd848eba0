# snapintent/orchestrators/enrichment.py
"""
Web-search enrichment for stored screenshots.

Runs after (and independently of) `ScreenshotPipeline.process`. Picks a query by bucket:
  travel   → first extracted place name, else first entity
  shopping → first extracted product
  other    → skipped
On success `search_results` and `processed_at` are written back to the record.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from snapintent.schemas.models import EnrichmentResult, ScreenshotRecord
from snapintent.storage.base import DocumentStore
from snapintent.tools.web_search import WebSearchProvider, product_query, travel_query

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enrichment_query(record: ScreenshotRecord) -> str | None:
    data = record.extracted_data
    if record.bucket == "travel":
        subject = data.places[0].name if data.places else (data.entities[0] if data.entities else None)
        return travel_query(subject) if subject else None
    if record.bucket == "shopping" and data.products:
        return product_query(data.products[0])
    return None


def enrich_screenshot(
    store: DocumentStore,
    provider: WebSearchProvider,
    screenshot_id: str,
    *,
    clock: Callable[[], datetime] = _utcnow,
) -> EnrichmentResult:
    record = store.get_screenshot(screenshot_id)
    if record is None:
        raise LookupError(f"unknown screenshot {screenshot_id}")

    query = enrichment_query(record)
    if query is None:
        logger.info("screenshot %s (%s): nothing to enrich", screenshot_id, record.bucket)
        return EnrichmentResult(screenshot_id=screenshot_id)

    results = provider.search(query)
    if results is None:
        return EnrichmentResult(screenshot_id=screenshot_id, query=query)

    updated = record.model_copy(update={"search_results": results, "processed_at": clock()})
    store.update_screenshot(updated)
    return EnrichmentResult(screenshot_id=screenshot_id, query=query, result_count=results.result_count)
