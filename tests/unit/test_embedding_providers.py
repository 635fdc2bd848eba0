# tests/unit/test_embedding_providers.py
"""
Embedding Adapters (No Network)

Purpose
-------
- Voyage adapter: request shape, auth header, error/timeout/dimension handling via a
  fake requests session.
- Hash adapter: deterministic, unit-length vectors of the configured size.
- Selector: degraded (None) when disabled or unkeyed.
"""

import math

import pytest
import requests

from snapintent.config.settings import EmbeddingConfig
from snapintent.core.errors import EmbeddingFailure
from snapintent.tools.embedding import (
    EmbeddingProvider,
    HashEmbeddingProvider,
    VoyageEmbeddingProvider,
    get_embedding_provider,
)
from tests.utils import FakeResponse, FakeSession


def _cfg(**kw):
    base = {"api_key": "voy-test-key", "dimensions": 4}
    base.update(kw)
    return EmbeddingConfig(**base)


def _ok(vec):
    return FakeResponse(200, {"data": [{"embedding": vec}], "model": "voyage-multimodal-3"})


def test_voyage_image_request_shape(png_bytes):
    session = FakeSession(_ok([0.1, 0.2, 0.3, 0.4]))
    prov = VoyageEmbeddingProvider(_cfg(), session=session)

    vec = prov.embed_image(png_bytes(), "image/png")

    assert vec == [0.1, 0.2, 0.3, 0.4]
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["headers"]["Authorization"] == "Bearer voy-test-key"
    body = call["json"]
    assert body["model"] == "voyage-multimodal-3"
    content = body["inputs"][0]["content"][0]
    assert content["type"] == "image_base64"
    assert content["image_base64"].startswith("data:image/png;base64,")
    assert call["timeout"] == 30.0


def test_voyage_text_request_shape():
    session = FakeSession(_ok([1, 0, 0, 0]))
    vec = VoyageEmbeddingProvider(_cfg(), session=session).embed_text("tropical beach")
    assert vec == [1.0, 0.0, 0.0, 0.0]
    assert session.calls[0]["json"]["inputs"][0]["content"][0] == {"type": "text", "text": "tropical beach"}


@pytest.mark.parametrize(
    "response, match",
    [
        (FakeResponse(429, {"detail": "rate limited"}), "429"),
        (FakeResponse(200, {"data": []}), "malformed"),
        (FakeResponse(200, {"data": [{"embedding": "nope"}]}), "numeric"),
        (FakeResponse(200, {"data": [{"embedding": [0.1, 0.2]}]}), "expected 4 dimensions"),
        (requests.Timeout("slow"), "network timeout"),
        (requests.ConnectionError("refused"), "network error"),
    ],
)
def test_voyage_failures_are_embedding_failures(response, match):
    prov = VoyageEmbeddingProvider(_cfg(), session=FakeSession(response))
    with pytest.raises(EmbeddingFailure, match=match):
        prov.embed_text("query")


def test_voyage_rejects_empty_inputs():
    prov = VoyageEmbeddingProvider(_cfg(), session=FakeSession())
    with pytest.raises(EmbeddingFailure):
        prov.embed_image(b"")
    with pytest.raises(EmbeddingFailure):
        prov.embed_text("   ")


def test_voyage_requires_key():
    with pytest.raises(RuntimeError):
        VoyageEmbeddingProvider(EmbeddingConfig(api_key=None))


def test_hash_provider_is_deterministic_and_normalised():
    prov = HashEmbeddingProvider(32)
    assert isinstance(prov, EmbeddingProvider)
    a = prov.embed_text("Eiffel Tower")
    b = prov.embed_text("  eiffel tower ")
    assert a == b
    assert len(a) == 32
    assert math.isclose(sum(x * x for x in a), 1.0, rel_tol=1e-9)
    assert prov.embed_image(b"abc") != prov.embed_text("abc")


def test_hash_provider_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        HashEmbeddingProvider(0)


def test_selector_modes():
    assert get_embedding_provider(EmbeddingConfig(provider="none")) is None
    assert get_embedding_provider(EmbeddingConfig(provider="voyage", api_key=None)) is None
    assert isinstance(get_embedding_provider(EmbeddingConfig(provider="hash", dimensions=16)), HashEmbeddingProvider)
    assert isinstance(get_embedding_provider(EmbeddingConfig(api_key="k")), VoyageEmbeddingProvider)
