# snapintent/storage/base.py
"""
Document store contract.

Entities are keyed by their natural `id`. Secondary lookups (bucket, source screenshot,
cluster) are filters on the listing calls. Each write is atomic on its own; there are no
multi-entity transactions.

Implementations:
  - InMemoryDocumentStore (storage/memory.py)
  - JsonDocumentStore     (storage/json_store.py)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from snapintent.schemas.models import Bucket, Place, PlaceCluster, ScreenshotRecord


@runtime_checkable
class DocumentStore(Protocol):
    # screenshots
    def insert_screenshot(self, record: ScreenshotRecord) -> None: ...
    def get_screenshot(self, screenshot_id: str) -> ScreenshotRecord | None: ...
    def update_screenshot(self, record: ScreenshotRecord) -> None: ...
    def list_screenshots(self, bucket: Bucket | None = None) -> list[ScreenshotRecord]: ...
    def vector_search(self, vector: Sequence[float], limit: int = 10) -> list[tuple[ScreenshotRecord, float]]: ...

    # places
    def insert_places(self, places: Sequence[Place]) -> None: ...
    def list_places(
        self, *, source_screenshot_id: str | None = None, cluster_id: str | None = None
    ) -> list[Place]: ...
    def set_cluster_id(self, place_ids: Sequence[str], cluster_id: str) -> None: ...

    # clusters
    def insert_clusters(self, clusters: Sequence[PlaceCluster]) -> None: ...
    def list_clusters(self) -> list[PlaceCluster]: ...


def rank_by_cosine(
    query: Sequence[float],
    records: Iterable[ScreenshotRecord],
    limit: int,
) -> list[tuple[ScreenshotRecord, float]]:
    """
    Cosine similarity of `query` against every record with an embedding of the same
    dimension; highest first. Records without an embedding are skipped.
    """
    if limit <= 0:
        return []
    q = np.asarray(query, dtype=np.float64)
    q_norm = float(np.linalg.norm(q))
    if q.ndim != 1 or q_norm == 0.0:
        return []

    scored: list[tuple[ScreenshotRecord, float]] = []
    for rec in records:
        if not rec.embedding or len(rec.embedding) != q.shape[0]:
            continue
        v = np.asarray(rec.embedding, dtype=np.float64)
        v_norm = float(np.linalg.norm(v))
        if v_norm == 0.0:
            continue
        scored.append((rec, float(np.dot(q, v) / (q_norm * v_norm))))

    scored.sort(key=lambda t: t[1], reverse=True)
    return scored[:limit]
