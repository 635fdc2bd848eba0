# snapintent/tools/embedding/voyage_provider.py
"""
Voyage multimodal embeddings over plain HTTP.

Request shape (one input per call):
    {"model": "voyage-multimodal-3",
     "inputs": [{"content": [{"type": "image_base64", "image_base64": "data:image/png;base64,..."}]}]}
    {"model": "voyage-multimodal-3",
     "inputs": [{"content": [{"type": "text", "text": "tropical beach"}]}]}

Response: {"data": [{"embedding": [...]}], ...}

Any transport error, timeout, non-2xx status, malformed body or dimension mismatch
surfaces as EmbeddingFailure.
"""

from __future__ import annotations

import base64
from typing import Any

import requests

from snapintent.config.settings import EmbeddingConfig
from snapintent.core.errors import EmbeddingFailure, stage_error_guard

from .provider_base import EmbeddingProvider


class VoyageEmbeddingProvider(EmbeddingProvider):
    def __init__(self, config: EmbeddingConfig, *, session: requests.Session | None = None) -> None:
        if not config.api_key:
            raise RuntimeError("VOYAGE_API_KEY not set for VoyageEmbeddingProvider.")
        self._api_key = config.api_key
        self._endpoint = config.endpoint
        self._model = config.model
        self._timeout_s = config.timeout_s
        self._session = session or requests.Session()
        self.dimensions = config.dimensions

    def embed_image(self, image_bytes: bytes, media_type: str = "image/png") -> list[float]:
        if not image_bytes:
            raise EmbeddingFailure("empty image payload")
        b64 = base64.b64encode(image_bytes).decode("ascii")
        content = {"type": "image_base64", "image_base64": f"data:{media_type};base64,{b64}"}
        return self._embed(content)

    def embed_text(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingFailure("empty text query")
        return self._embed({"type": "text", "text": text})

    def _embed(self, content: dict[str, Any]) -> list[float]:
        body = {"model": self._model, "inputs": [{"content": [content]}]}
        headers = {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}
        with stage_error_guard(EmbeddingFailure):
            resp = self._session.post(self._endpoint, json=body, headers=headers, timeout=self._timeout_s)
            if resp.status_code >= 400:
                raise EmbeddingFailure(f"embedding API error {resp.status_code}: {resp.text[:200]}")
            payload = resp.json()
        return self._vector_from(payload)

    def _vector_from(self, payload: Any) -> list[float]:
        try:
            vec = payload["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise EmbeddingFailure(f"malformed embedding response: {e!r}") from e
        if not isinstance(vec, list) or not all(isinstance(x, (int, float)) for x in vec):
            raise EmbeddingFailure("embedding is not a numeric array")
        if len(vec) != self.dimensions:
            raise EmbeddingFailure(f"expected {self.dimensions} dimensions, got {len(vec)}")
        return [float(x) for x in vec]
