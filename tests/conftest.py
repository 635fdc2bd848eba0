# tests/conftest.py
from __future__ import annotations

import os
import random

import pytest

from snapintent.orchestrators import ScreenshotPipeline, TravelAgent
from snapintent.storage import InMemoryDocumentStore, JsonDocumentStore
from snapintent.tools.embedding import HashEmbeddingProvider
from snapintent.tools.geocoding import StaticGeocoder
from snapintent.tools.vision import IntentExtractor, MockVisionProvider
from tests.utils import fixed_clock, png_bytes as _make_png, sequential_ids


# -------- Global deterministic seed --------
@pytest.fixture(autouse=True, scope="session")
def _seed_session():
    random.seed(1337)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


# -------- Service keys never leak in from the developer shell --------
@pytest.fixture(autouse=True)
def _no_service_keys(monkeypatch):
    for var in ("OPENAI_API_KEY", "VOYAGE_API_KEY", "OPENCAGE_API_KEY", "TAVILY_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    yield


# -------- Stores --------
@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def json_store(tmp_path):
    return JsonDocumentStore(tmp_path / "store")


# -------- Pipeline factory --------
@pytest.fixture
def pipeline_factory(memory_store):
    """
    Callable factory for a fully offline ScreenshotPipeline.

    Usage:
        pipe = pipeline_factory()                                  # Paris travel reply
        pipe = pipeline_factory(reply=make_extraction_reply("shopping"))
        pipe = pipeline_factory(embedder=None, geocoder=None)
    """
    _unset = object()

    def _factory(*, reply=None, error=None, embedder=_unset, geocoder=_unset, store=None, thumbnail=None):
        ids = sequential_ids()
        emb = HashEmbeddingProvider(64) if embedder is _unset else embedder
        geo = StaticGeocoder() if geocoder is _unset else geocoder
        agent = TravelAgent(geo, id_factory=ids, clock=fixed_clock) if geo is not None else None
        return ScreenshotPipeline(
            IntentExtractor(MockVisionProvider(reply, error=error)),
            store if store is not None else memory_store,
            embedder=emb,
            travel_agent=agent,
            thumbnail=thumbnail,
            id_factory=ids,
            clock=fixed_clock,
        )

    return _factory


@pytest.fixture
def png_bytes():
    """
    Fixture that returns a callable to generate PNG bytes.
    Usage:
        data = png_bytes(64, 64)
    """
    return _make_png


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
