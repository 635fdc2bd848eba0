# snapintent/orchestrators/factory.py
"""Wire a ScreenshotPipeline from one AppConfig (the only place adapters are constructed)."""

from __future__ import annotations

from snapintent.config.settings import AppConfig
from snapintent.orchestrators.screenshot_pipeline import ScreenshotPipeline
from snapintent.orchestrators.travel_agent import TravelAgent
from snapintent.storage import DocumentStore, get_store
from snapintent.tools.embedding import get_embedding_provider
from snapintent.tools.geocoding import get_geocoder
from snapintent.tools.vision import IntentExtractor, get_vision_provider


def build_pipeline(config: AppConfig, *, store: DocumentStore | None = None) -> ScreenshotPipeline:
    geocoder = get_geocoder(config.geocoding)
    return ScreenshotPipeline(
        IntentExtractor(get_vision_provider(config.vision)),
        store if store is not None else get_store(config.storage),
        embedder=get_embedding_provider(config.embedding),
        travel_agent=TravelAgent(geocoder) if geocoder is not None else None,
        thumbnail=config.thumbnail,
    )
