# snapintent/storage/json_store.py
"""
Directory-backed document store: one JSON document per entity.

Layout (under `root/`):
  - screenshots/<id>.json
  - places/<id>.json
  - clusters/<id>.json
  - <collection>/_index.json   (ids in insertion order)

Writes go through a temp file + os.replace so a crash never leaves a half-written
document. Documents use the camelCase wire shape (`to_document()`).
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from snapintent.core.errors import StoreError
from snapintent.schemas.models import Bucket, Place, PlaceCluster, ScreenshotRecord

from .base import DocumentStore, rank_by_cosine

M = TypeVar("M", bound=BaseModel)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.\-]{1,128}$")
_INDEX = "_index.json"


def _write_json_atomic(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class _Collection:
    def __init__(self, root: Path, name: str) -> None:
        self.dir = root / name
        self.dir.mkdir(parents=True, exist_ok=True)

    def _path(self, doc_id: str) -> Path:
        if not _SAFE_ID.match(doc_id) or doc_id.startswith("_"):
            raise StoreError(f"invalid document id {doc_id!r}")
        return self.dir / f"{doc_id}.json"

    def ids(self) -> list[str]:
        p = self.dir / _INDEX
        if not p.exists():
            return []
        try:
            return list(json.loads(p.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"corrupt index {p}: {e}") from e

    def exists(self, doc_id: str) -> bool:
        return self._path(doc_id).exists()

    def read(self, doc_id: str, model: type[M]) -> M | None:
        p = self._path(doc_id)
        if not p.exists():
            return None
        try:
            return model.model_validate(json.loads(p.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StoreError(f"unreadable document {p}: {e}") from e

    def write(self, doc_id: str, doc: dict[str, Any]) -> None:
        try:
            _write_json_atomic(self._path(doc_id), doc)
        except OSError as e:
            raise StoreError(f"write failed for {doc_id}: {e}") from e

    def append_ids(self, new_ids: Sequence[str]) -> None:
        try:
            _write_json_atomic(self.dir / _INDEX, self.ids() + list(new_ids))
        except OSError as e:
            raise StoreError(f"index write failed: {e}") from e


class JsonDocumentStore(DocumentStore):
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self._screenshots = _Collection(self.root, "screenshots")
        self._places = _Collection(self.root, "places")
        self._clusters = _Collection(self.root, "clusters")

    # ---------- screenshots ----------
    def insert_screenshot(self, record: ScreenshotRecord) -> None:
        if self._screenshots.exists(record.id):
            raise StoreError(f"duplicate screenshot id {record.id}")
        self._screenshots.write(record.id, record.to_document())
        self._screenshots.append_ids([record.id])

    def get_screenshot(self, screenshot_id: str) -> ScreenshotRecord | None:
        return self._screenshots.read(screenshot_id, ScreenshotRecord)

    def update_screenshot(self, record: ScreenshotRecord) -> None:
        if not self._screenshots.exists(record.id):
            raise StoreError(f"unknown screenshot id {record.id}")
        self._screenshots.write(record.id, record.to_document())

    def list_screenshots(self, bucket: Bucket | None = None) -> list[ScreenshotRecord]:
        out = []
        for sid in self._screenshots.ids():
            rec = self._screenshots.read(sid, ScreenshotRecord)
            if rec is not None and (bucket is None or rec.bucket == bucket):
                out.append(rec)
        return out

    def vector_search(self, vector: Sequence[float], limit: int = 10) -> list[tuple[ScreenshotRecord, float]]:
        return rank_by_cosine(vector, self.list_screenshots(), limit)

    # ---------- places ----------
    def insert_places(self, places: Sequence[Place]) -> None:
        for p in places:
            if self._places.exists(p.id):
                raise StoreError(f"duplicate place id {p.id}")
        for p in places:
            self._places.write(p.id, p.to_document())
        self._places.append_ids([p.id for p in places])

    def list_places(self, *, source_screenshot_id: str | None = None, cluster_id: str | None = None) -> list[Place]:
        out = []
        for pid in self._places.ids():
            p = self._places.read(pid, Place)
            if p is None:
                continue
            if source_screenshot_id is not None and p.source_screenshot_id != source_screenshot_id:
                continue
            if cluster_id is not None and p.cluster_id != cluster_id:
                continue
            out.append(p)
        return out

    def set_cluster_id(self, place_ids: Sequence[str], cluster_id: str) -> None:
        loaded: list[Place] = []
        for pid in place_ids:
            p = self._places.read(pid, Place)
            if p is None:
                raise StoreError(f"unknown place id {pid}")
            loaded.append(p)
        for p in loaded:
            p.cluster_id = cluster_id
            self._places.write(p.id, p.to_document())

    # ---------- clusters ----------
    def insert_clusters(self, clusters: Sequence[PlaceCluster]) -> None:
        for c in clusters:
            if self._clusters.exists(c.id):
                raise StoreError(f"duplicate cluster id {c.id}")
        for c in clusters:
            self._clusters.write(c.id, c.to_document())
        self._clusters.append_ids([c.id for c in clusters])

    def list_clusters(self) -> list[PlaceCluster]:
        out = []
        for cid in self._clusters.ids():
            c = self._clusters.read(cid, PlaceCluster)
            if c is not None:
                out.append(c)
        return out
