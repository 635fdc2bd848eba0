# snapintent/orchestrators/screenshot_pipeline.py
"""
Screenshot Intent Pipeline

Purpose
-------
Process one uploaded image end-to-end into a persisted ScreenshotRecord and, for travel
screenshots, persisted Places and PlaceClusters.

Stages (strictly sequential, one pass)
--------------------------------------
  received → extracting → thumbnailing → embedding → persisting → completed
                     └──→ failed

  1) new id
  2) extraction        REQUIRED    ExtractionFailure aborts, nothing is written
  3) thumbnail         best-effort Degraded → record without thumbnail
  4) embedding         best-effort Degraded → record without embedding
  5) persist record    status="completed"
  6) travel places     isolated    ClusteringPersistFailure is logged and reported as a
                                   warning; the record from (5) stands

Read side
---------
search(), list_places(), list_clusters(), map_region(), get_screenshot(),
list_screenshots(), places_for_screenshot(), and geocode_and_cluster() for the
geocoding-first flow (see travel_agent.py).
"""

from __future__ import annotations

import base64
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from snapintent.config.settings import ThumbnailConfig
from snapintent.core.errors import (
    ClusteringPersistFailure,
    EmbeddingFailure,
    ExtractionFailure,
    SnapIntentError,
    classify_stage_error,
    stage_error_guard,
)
from snapintent.core.geo.clustering import calculate_map_region, cluster_places
from snapintent.core.media.thumbnail import make_thumbnail
from snapintent.core.stages import Degraded, Ok, StageResult, run_best_effort, skipped
from snapintent.orchestrators.travel_agent import TravelAgent
from snapintent.schemas.models import (
    Bucket,
    Coordinates,
    ExtractedData,
    ImageInfo,
    MapRegion,
    Place,
    PlaceCluster,
    ProcessResult,
    ScreenshotRecord,
    SearchHit,
    TravelAgentResult,
)
from snapintent.storage.base import DocumentStore
from snapintent.tools.embedding import EmbeddingProvider
from snapintent.tools.vision import IntentExtractor

logger = logging.getLogger(__name__)

_EXT_BY_MEDIA_TYPE = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif", "image/webp": "webp"}


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =========================
# Run state machine
# =========================


class PipelineState(str, Enum):
    RECEIVED = "received"
    EXTRACTING = "extracting"
    THUMBNAILING = "thumbnailing"
    EMBEDDING = "embedding"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.RECEIVED: frozenset({PipelineState.EXTRACTING}),
    PipelineState.EXTRACTING: frozenset({PipelineState.THUMBNAILING, PipelineState.FAILED}),
    PipelineState.THUMBNAILING: frozenset({PipelineState.EMBEDDING}),
    PipelineState.EMBEDDING: frozenset({PipelineState.PERSISTING}),
    PipelineState.PERSISTING: frozenset({PipelineState.COMPLETED}),
}


@dataclass
class PipelineRun:
    """Book-keeping for one `process` call; rejects re-entry and skipped stages."""

    image_id: str
    state: PipelineState = PipelineState.RECEIVED
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.RECEIVED])

    def advance(self, new: PipelineState) -> None:
        if new not in _TRANSITIONS.get(self.state, frozenset()):
            raise RuntimeError(f"illegal pipeline transition {self.state.value} -> {new.value}")
        self.state = new
        self.history.append(new)
        logger.debug("run %s: %s", self.image_id, new.value)


# =========================
# Pipeline
# =========================


class ScreenshotPipeline:
    def __init__(
        self,
        extractor: IntentExtractor,
        store: DocumentStore,
        *,
        embedder: EmbeddingProvider | None = None,
        travel_agent: TravelAgent | None = None,
        thumbnail: ThumbnailConfig | None = None,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._extractor = extractor
        self._store = store
        self._embedder = embedder
        self._travel_agent = travel_agent
        self._thumb = thumbnail or ThumbnailConfig()
        self._id_factory = id_factory
        self._clock = clock
        self.last_run: PipelineRun | None = None

    # ---------- write side ----------

    def process(self, image_bytes: bytes, media_type: str = "image/jpeg", *, filename: str | None = None) -> ProcessResult:
        """
        Run the full pipeline for one image.

        Raises:
            ExtractionFailure: the required extraction stage failed (no record written).
            StoreError:        the record itself could not be persisted.
        """
        image_id = self._id_factory()
        run = PipelineRun(image_id=image_id)
        self.last_run = run

        run.advance(PipelineState.EXTRACTING)
        try:
            extraction = self._extractor.extract_intent(image_bytes, media_type)
        except ExtractionFailure as exc:
            run.advance(PipelineState.FAILED)
            logger.error("extraction failed for %s: %s", image_id, exc)
            raise

        run.advance(PipelineState.THUMBNAILING)
        thumb: StageResult[bytes] = run_best_effort(
            "thumbnail",
            make_thumbnail,
            image_bytes,
            self._thumb.max_width,
            self._thumb.max_height,
            self._thumb.quality,
            logger=logger,
        )

        run.advance(PipelineState.EMBEDDING)
        embedding: StageResult[list[float]]
        if self._embedder is None:
            embedding = skipped("no embedding provider configured")
        else:
            embedding = run_best_effort("embedding", self._embed_image, image_bytes, media_type, logger=logger)

        warnings: list[str] = []
        thumbnail_b64: str | None = None
        if isinstance(thumb, Ok):
            thumbnail_b64 = base64.b64encode(thumb.value).decode("ascii")
        elif isinstance(thumb, Degraded):
            warnings.append(f"thumbnail: {thumb.reason}")

        vector: list[float] | None = None
        if isinstance(embedding, Ok):
            vector = embedding.value
        elif isinstance(embedding, Degraded):
            warnings.append(f"embedding: {embedding.reason}")

        run.advance(PipelineState.PERSISTING)
        now = self._clock()
        record = ScreenshotRecord(
            id=image_id,
            bucket=extraction.primary_bucket,
            image_base64=base64.b64encode(image_bytes).decode("ascii"),
            thumbnail_base64=thumbnail_b64,
            metadata=ImageInfo(
                filename=filename or f"{image_id}.{_EXT_BY_MEDIA_TYPE.get(media_type, 'bin')}",
                size=len(image_bytes),
                content_type=media_type,
                uploaded_at=now,
            ),
            intent=extraction.to_intent(),
            extracted_data=extraction.extracted_data,
            embedding=vector,
            status="completed",
        )
        self._store.insert_screenshot(record)
        run.advance(PipelineState.COMPLETED)
        logger.info("stored screenshot %s bucket=%s embedding=%s", image_id, record.bucket, vector is not None)

        places_processed: int | None = None
        clusters_created: int | None = None
        if extraction.primary_bucket == "travel":
            travel = run_best_effort(
                "places",
                self._persist_places,
                image_id,
                extraction.extracted_data,
                logger=logger,
                expected=(ClusteringPersistFailure,),
            )
            if isinstance(travel, Ok):
                places_processed, clusters_created = travel.value
            else:
                warnings.append(f"places: {travel.reason}")

        return ProcessResult(
            image_id=image_id,
            bucket=extraction.primary_bucket,
            intent=record.intent,
            extracted_data=extraction.extracted_data,
            embedding_dimensions=len(vector) if vector else 0,
            has_embedding=vector is not None,
            has_thumbnail=thumbnail_b64 is not None,
            places_processed=places_processed,
            clusters_created=clusters_created,
            warnings=warnings,
        )

    def _embed_image(self, image_bytes: bytes, media_type: str) -> list[float]:
        if self._embedder is None:
            raise EmbeddingFailure("no embedding provider configured")
        with stage_error_guard(EmbeddingFailure):
            vec = self._embedder.embed_image(image_bytes, media_type)
        if not vec:
            raise EmbeddingFailure("embedding provider returned an empty vector")
        return vec

    def _persist_places(self, image_id: str, extracted: ExtractedData) -> tuple[int, int]:
        """Coordinates-first travel branch. Returns (places persisted, clusters created)."""
        try:
            places = self._build_places(image_id, extracted)
            if not places:
                return 0, 0
            self._store.insert_places(places)
            clusters = (
                cluster_places(places, id_factory=self._id_factory, clock=self._clock) if len(places) >= 2 else []
            )
            if clusters:
                self._store.insert_clusters(clusters)
                for c in clusters:
                    self._store.set_cluster_id(c.place_ids, c.id)
            logger.info("screenshot %s: %d places, %d clusters", image_id, len(places), len(clusters))
            return len(places), len(clusters)
        except SnapIntentError as exc:
            raise ClusteringPersistFailure(f"{type(exc).__name__}: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            raise classify_stage_error(exc, ClusteringPersistFailure) from exc

    def _build_places(self, image_id: str, extracted: ExtractedData) -> list[Place]:
        now = self._clock()
        out: list[Place] = []
        for ep in extracted.places:
            if ep.latitude is None or ep.longitude is None:
                continue
            if not (-90 <= ep.latitude <= 90 and -180 <= ep.longitude <= 180):
                logger.warning(
                    "screenshot %s: dropping %r with out-of-range coordinates (%s, %s)",
                    image_id,
                    ep.name,
                    ep.latitude,
                    ep.longitude,
                )
                continue
            out.append(
                Place(
                    id=self._id_factory(),
                    name=ep.name,
                    coordinates=Coordinates(latitude=ep.latitude, longitude=ep.longitude),
                    source_screenshot_id=image_id,
                    created_at=now,
                )
            )
        return out

    def geocode_and_cluster(self, screenshot_id: str) -> TravelAgentResult:
        """
        Geocoding-first flow for a stored screenshot (see TravelAgent). Only geocoder-made places
        count for idempotence: if the flow already ran for the screenshot its places and
        clusters are returned unchanged and nothing is written. Places stored by `process`
        from reply coordinates are left alone.

        Raises:
            LookupError:              unknown screenshot id.
            RuntimeError:             no travel agent configured.
            ClusteringPersistFailure: places/clusters could not be persisted.
        """
        if self._travel_agent is None:
            raise RuntimeError("geocode_and_cluster requires a TravelAgent (no geocoder configured).")
        record = self._store.get_screenshot(screenshot_id)
        if record is None:
            raise LookupError(f"unknown screenshot {screenshot_id}")

        existing = [
            p for p in self._store.list_places(source_screenshot_id=screenshot_id) if p.origin == "geocoder"
        ]
        if existing:
            ids = {p.cluster_id for p in existing if p.cluster_id}
            clusters = [c for c in self._store.list_clusters() if c.id in ids]
            return TravelAgentResult(places=existing, clusters=clusters)

        result = self._travel_agent.extract_and_process_places(record.extracted_data, screenshot_id)
        try:
            # places go in unclustered; cluster ids are linked only once the clusters exist
            if result.places:
                self._store.insert_places([p.model_copy(update={"cluster_id": None}) for p in result.places])
            if result.clusters:
                self._store.insert_clusters(result.clusters)
                for c in result.clusters:
                    self._store.set_cluster_id(c.place_ids, c.id)
        except SnapIntentError as exc:
            raise ClusteringPersistFailure(f"{type(exc).__name__}: {exc}") from exc
        return result

    # ---------- read side ----------

    def search(self, query: str, limit: int = 10) -> list[SearchHit]:
        """Nearest screenshots to a text query by embedding similarity."""
        if self._embedder is None:
            raise EmbeddingFailure("search requires an embedding provider")
        if limit <= 0:
            raise ValueError("limit must be positive")
        with stage_error_guard(EmbeddingFailure):
            vec = self._embedder.embed_text(query)
        return [SearchHit(record=rec.summary(), score=score) for rec, score in self._store.vector_search(vec, limit)]

    def get_screenshot(self, screenshot_id: str) -> ScreenshotRecord | None:
        return self._store.get_screenshot(screenshot_id)

    def list_screenshots(self, bucket: Bucket | None = None) -> list[ScreenshotRecord]:
        return self._store.list_screenshots(bucket)

    def list_places(self) -> list[Place]:
        return self._store.list_places()

    def places_for_screenshot(self, screenshot_id: str) -> list[Place]:
        return self._store.list_places(source_screenshot_id=screenshot_id)

    def list_clusters(self) -> list[PlaceCluster]:
        return self._store.list_clusters()

    def map_region(self) -> MapRegion | None:
        return calculate_map_region(self._store.list_places())


__all__ = ["PipelineState", "PipelineRun", "ScreenshotPipeline"]
