# snapintent/tools/embedding/hash_provider.py
"""Deterministic offline embeddings: sha256-seeded Gaussian vectors, L2-normalised."""

from __future__ import annotations

import hashlib

import numpy as np

from .provider_base import EmbeddingProvider


class HashEmbeddingProvider(EmbeddingProvider):
    def __init__(self, dimensions: int = 1024) -> None:
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.dimensions = dimensions

    def embed_image(self, image_bytes: bytes, media_type: str = "image/png") -> list[float]:
        return self._vector(b"image:" + image_bytes)

    def embed_text(self, text: str) -> list[float]:
        return self._vector(b"text:" + text.strip().lower().encode("utf-8"))

    def _vector(self, data: bytes) -> list[float]:
        seed = int.from_bytes(hashlib.sha256(data).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        v = rng.standard_normal(self.dimensions)
        v /= np.linalg.norm(v)
        return v.astype(float).tolist()
