from __future__ import annotations

from snapintent.config.settings import StorageConfig

from .base import DocumentStore, rank_by_cosine
from .json_store import JsonDocumentStore
from .memory import InMemoryDocumentStore


def get_store(config: StorageConfig) -> DocumentStore:
    if config.backend == "memory":
        return InMemoryDocumentStore()
    return JsonDocumentStore(config.directory)


__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonDocumentStore",
    "rank_by_cosine",
    "get_store",
]
