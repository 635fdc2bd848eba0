# snapintent/storage/memory.py

from __future__ import annotations

from collections.abc import Sequence

from snapintent.core.errors import StoreError
from snapintent.schemas.models import Bucket, Place, PlaceCluster, ScreenshotRecord

from .base import DocumentStore, rank_by_cosine


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local store. Every read and write deep-copies, so callers never share
    mutable state with the store (same observable behaviour as a real database).
    Insertion order is preserved for listings.
    """

    def __init__(self) -> None:
        self._screenshots: dict[str, ScreenshotRecord] = {}
        self._places: dict[str, Place] = {}
        self._clusters: dict[str, PlaceCluster] = {}

    # ---------- screenshots ----------
    def insert_screenshot(self, record: ScreenshotRecord) -> None:
        if record.id in self._screenshots:
            raise StoreError(f"duplicate screenshot id {record.id}")
        self._screenshots[record.id] = record.model_copy(deep=True)

    def get_screenshot(self, screenshot_id: str) -> ScreenshotRecord | None:
        rec = self._screenshots.get(screenshot_id)
        return rec.model_copy(deep=True) if rec else None

    def update_screenshot(self, record: ScreenshotRecord) -> None:
        if record.id not in self._screenshots:
            raise StoreError(f"unknown screenshot id {record.id}")
        self._screenshots[record.id] = record.model_copy(deep=True)

    def list_screenshots(self, bucket: Bucket | None = None) -> list[ScreenshotRecord]:
        return [r.model_copy(deep=True) for r in self._screenshots.values() if bucket is None or r.bucket == bucket]

    def vector_search(self, vector: Sequence[float], limit: int = 10) -> list[tuple[ScreenshotRecord, float]]:
        return [(r.model_copy(deep=True), s) for r, s in rank_by_cosine(vector, self._screenshots.values(), limit)]

    # ---------- places ----------
    def insert_places(self, places: Sequence[Place]) -> None:
        for p in places:
            if p.id in self._places:
                raise StoreError(f"duplicate place id {p.id}")
        for p in places:
            self._places[p.id] = p.model_copy(deep=True)

    def list_places(self, *, source_screenshot_id: str | None = None, cluster_id: str | None = None) -> list[Place]:
        out = []
        for p in self._places.values():
            if source_screenshot_id is not None and p.source_screenshot_id != source_screenshot_id:
                continue
            if cluster_id is not None and p.cluster_id != cluster_id:
                continue
            out.append(p.model_copy(deep=True))
        return out

    def set_cluster_id(self, place_ids: Sequence[str], cluster_id: str) -> None:
        missing = [pid for pid in place_ids if pid not in self._places]
        if missing:
            raise StoreError(f"unknown place ids {missing}")
        for pid in place_ids:
            self._places[pid].cluster_id = cluster_id

    # ---------- clusters ----------
    def insert_clusters(self, clusters: Sequence[PlaceCluster]) -> None:
        for c in clusters:
            if c.id in self._clusters:
                raise StoreError(f"duplicate cluster id {c.id}")
        for c in clusters:
            self._clusters[c.id] = c.model_copy(deep=True)

    def list_clusters(self) -> list[PlaceCluster]:
        return [c.model_copy(deep=True) for c in self._clusters.values()]
