# snapintent/schemas/models.py

from __future__ import annotations

import base64
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat

Bucket = Literal["travel", "shopping", "startup", "general"]
BUCKETS: tuple[Bucket, ...] = ("travel", "shopping", "startup", "general")

ProcessingStatus = Literal["pending", "processing", "completed", "failed"]

# "vision": coordinates came with the extraction reply; "geocoder": resolved by name.
PlaceOrigin = Literal["vision", "geocoder"]

SUPPORTED_MEDIA_TYPES: frozenset[str] = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class _Document(BaseModel):
    """Base for persisted shapes: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =========================
# Vision extraction reply
# =========================


class BucketCandidate(BaseModel):
    bucket: Bucket = Field(..., description="Candidate intent bucket.")
    confidence: StrictFloat = Field(..., ge=0, le=1, description="Service confidence for this bucket.")


class ExtractedPlace(BaseModel):
    """
    A named place as reported by the vision service. Coordinates may be approximate, absent
    or out of range; range checks happen where places are built, not here.
    """

    name: str
    latitude: StrictFloat | None = None
    longitude: StrictFloat | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class ExtractedData(_Document):
    ocr_text: str | None = Field(None, alias="ocrText", description="Visible text (OCR).")
    entities: list[str] = Field(default_factory=list, description="Named entities (people, places, orgs, products).")
    places: list[ExtractedPlace] = Field(default_factory=list, description="Places with optional coordinates.")
    products: list[str] = Field(default_factory=list, description="Products or items visible.")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Any other service-provided metadata.")


class IntentExtraction(BaseModel):
    """
    Strict reply contract of the vision-language service.

    `primary_bucket` matching the top-confidence candidate is the service's promise; it is
    not re-checked here.
    """

    primary_bucket: Bucket
    bucket_candidates: list[BucketCandidate]
    confidence: StrictFloat = Field(..., ge=0, le=1)
    rationale: str
    extracted_data: ExtractedData = Field(default_factory=ExtractedData)

    def to_intent(self) -> Intent:
        return Intent(
            primary_bucket=self.primary_bucket,
            bucket_candidates=[c.model_copy() for c in self.bucket_candidates],
            confidence=self.confidence,
            rationale=self.rationale,
        )


class Intent(BaseModel):
    """Persisted subset of an IntentExtraction."""

    primary_bucket: Bucket
    bucket_candidates: list[BucketCandidate] = Field(default_factory=list)
    confidence: float = Field(..., ge=0, le=1)
    rationale: str = ""


# =========================
# Web search enrichment
# =========================


class WebSearchResult(BaseModel):
    title: str = ""
    url: str = ""
    content: str = ""
    score: float = 0.0


class SearchResultsMetadata(_Document):
    query: str
    results: list[WebSearchResult] = Field(default_factory=list)
    searched_at: datetime = Field(..., alias="searchedAt")
    result_count: int = Field(0, alias="resultCount")


# =========================
# Screenshot record
# =========================


class ImageInfo(_Document):
    filename: str
    size: int = Field(..., ge=0, description="Original payload size in bytes.")
    content_type: str = Field(..., alias="contentType")
    uploaded_at: datetime = Field(..., alias="uploadedAt")


class ScreenshotRecord(_Document):
    """
    One ingested image. Raw image and thumbnail are owned by the record and stored base64-encoded.
    `status` is only ever written as "completed" by the pipeline (after extraction succeeded).
    """

    id: str
    bucket: Bucket
    image_base64: str = Field(..., alias="imageBase64")
    thumbnail_base64: str | None = Field(None, alias="thumbnailBase64")
    metadata: ImageInfo
    intent: Intent
    extracted_data: ExtractedData = Field(default_factory=ExtractedData, alias="extractedData")
    embedding: list[float] | None = None
    status: ProcessingStatus = "pending"
    error: str | None = None
    processed_at: datetime | None = Field(None, alias="processedAt")
    search_results: SearchResultsMetadata | None = Field(None, alias="searchResults")
    ai_output: dict[str, Any] | None = Field(None, alias="aiOutput")
    generated_at: datetime | None = Field(None, alias="generatedAt")

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail_base64)

    def image_bytes(self) -> bytes:
        return base64.b64decode(self.image_base64)

    def thumbnail_bytes(self) -> bytes | None:
        return base64.b64decode(self.thumbnail_base64) if self.thumbnail_base64 else None

    def summary(self) -> ScreenshotSummary:
        return ScreenshotSummary(
            id=self.id,
            bucket=self.bucket,
            confidence=self.intent.confidence,
            rationale=self.intent.rationale,
            uploaded_at=self.metadata.uploaded_at,
            has_thumbnail=self.has_thumbnail,
        )


# =========================
# Places & clusters
# =========================


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class PlaceMetadata(_Document):
    neighborhood: str | None = None
    city: str | None = None
    country: str | None = None
    place_type: str | None = Field(None, alias="placeType")


class Place(_Document):
    """A geolocated place. `cluster_id` is written once by the clustering stage."""

    id: str
    name: str
    address: str | None = None
    coordinates: Coordinates
    category: str | None = None
    source_screenshot_id: str = Field(..., alias="sourceScreenshotId")
    cluster_id: str | None = Field(None, alias="clusterId")
    origin: PlaceOrigin = "vision"
    metadata: PlaceMetadata = Field(default_factory=PlaceMetadata)
    created_at: datetime | None = Field(None, alias="createdAt")


class PlaceCluster(_Document):
    id: str
    name: str
    centroid: Coordinates
    place_ids: list[str] = Field(..., min_length=2, alias="placeIds")
    color: str
    created_at: datetime | None = Field(None, alias="createdAt")


class MapRegion(_Document):
    latitude: float
    longitude: float
    latitude_delta: float = Field(..., alias="latitudeDelta")
    longitude_delta: float = Field(..., alias="longitudeDelta")


class GeocodeResult(BaseModel):
    name: str
    coordinates: Coordinates
    address: str | None = None
    metadata: PlaceMetadata = Field(default_factory=PlaceMetadata)


# =========================
# Caller-facing results
# =========================


class ScreenshotSummary(_Document):
    id: str
    bucket: Bucket
    confidence: float
    rationale: str = ""
    uploaded_at: datetime = Field(..., alias="uploadedAt")
    has_thumbnail: bool = Field(False, alias="hasThumbnail")


class SearchHit(_Document):
    record: ScreenshotSummary
    score: float


class ProcessResult(_Document):
    """Summary returned by `ScreenshotPipeline.process`."""

    image_id: str = Field(..., alias="imageId")
    bucket: Bucket
    intent: Intent
    extracted_data: ExtractedData = Field(..., alias="extractedData")
    embedding_dimensions: int = Field(0, alias="embeddingDimensions")
    has_embedding: bool = Field(False, alias="hasEmbedding")
    has_thumbnail: bool = Field(False, alias="hasThumbnail")
    places_processed: int | None = Field(None, alias="placesProcessed")
    clusters_created: int | None = Field(None, alias="clustersCreated")
    warnings: list[str] = Field(default_factory=list)


class TravelAgentResult(BaseModel):
    places: list[Place] = Field(default_factory=list)
    clusters: list[PlaceCluster] = Field(default_factory=list)


class EnrichmentResult(_Document):
    screenshot_id: str = Field(..., alias="screenshotId")
    query: str | None = None
    result_count: int = Field(0, alias="resultCount")
