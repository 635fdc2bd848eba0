from __future__ import annotations

from snapintent.config.settings import EmbeddingConfig

from .hash_provider import HashEmbeddingProvider
from .provider_base import EmbeddingProvider
from .voyage_provider import VoyageEmbeddingProvider


def get_embedding_provider(config: EmbeddingConfig) -> EmbeddingProvider | None:
    """None when embeddings are disabled or the Voyage key is missing (degraded mode)."""
    if config.provider == "none":
        return None
    if config.provider == "hash":
        return HashEmbeddingProvider(config.dimensions)
    if not config.api_key:
        return None
    return VoyageEmbeddingProvider(config)


__all__ = [
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "VoyageEmbeddingProvider",
    "get_embedding_provider",
]
