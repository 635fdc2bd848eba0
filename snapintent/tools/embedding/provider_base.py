# snapintent/tools/embedding/provider_base.py
"""
Embedding Provider Interface

Both methods return a vector of exactly `dimensions` floats. Image and text go to the
same embedding space so a text query can retrieve screenshots.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    dimensions: int

    def embed_image(self, image_bytes: bytes, media_type: str = "image/png") -> list[float]: ...

    def embed_text(self, text: str) -> list[float]: ...
