# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import io
import itertools
import json
from datetime import datetime, timezone
from typing import Any

import requests
from PIL import Image

from snapintent.schemas.models import Coordinates, Place, PlaceMetadata

# -----------------------------
# Global defaults (edit once)
# -----------------------------

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
DEFAULT_SCREENSHOT_ID = "shot-1"

PARIS_PLACES: list[dict[str, Any]] = [
    {"name": "Eiffel Tower", "latitude": 48.8584, "longitude": 2.2945},
    {"name": "Trocadero", "latitude": 48.8616, "longitude": 2.2893},
    {"name": "Louvre Museum", "latitude": 48.8606, "longitude": 2.3376},
]


def fixed_clock() -> datetime:
    return FIXED_NOW


def sequential_ids(prefix: str = "id"):
    """Callable returning id-1, id-2, ... (deterministic id_factory)."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


# -----------------------------
# Image helpers
# -----------------------------


def png_bytes(width: int = 32, height: int = 32, color: tuple[int, ...] = (200, 80, 40), mode: str = "RGB") -> bytes:
    img = Image.new(mode, (width, height), color=color)
    buf = io.BytesIO()
    img.save(buf, format="PNG", compress_level=1)
    return buf.getvalue()


# -----------------------------
# Domain factories
# -----------------------------


def make_place(
    place_id: str,
    latitude: float,
    longitude: float,
    *,
    name: str | None = None,
    city: str | None = None,
    source_screenshot_id: str = DEFAULT_SCREENSHOT_ID,
) -> Place:
    return Place(
        id=place_id,
        name=name or place_id,
        coordinates=Coordinates(latitude=latitude, longitude=longitude),
        source_screenshot_id=source_screenshot_id,
        metadata=PlaceMetadata(city=city),
    )


def make_extraction_reply(
    bucket: str = "travel",
    *,
    places: list[dict[str, Any]] | None = None,
    products: list[str] | None = None,
    entities: list[str] | None = None,
    confidence: float = 0.9,
    as_text: bool = True,
) -> str | dict[str, Any]:
    """Vision reply in the exact JSON contract the extractor validates."""
    other = "general" if bucket != "general" else "travel"
    payload = {
        "primary_bucket": bucket,
        "bucket_candidates": [
            {"bucket": bucket, "confidence": confidence},
            {"bucket": other, "confidence": round(1 - confidence, 4)},
        ],
        "confidence": confidence,
        "rationale": f"looks like {bucket}",
        "extracted_data": {
            "ocrText": "sample text",
            "entities": entities or [],
            "places": places if places is not None else [],
            "products": products or [],
            "metadata": {},
        },
    }
    return json.dumps(payload) if as_text else payload


# -----------------------------
# HTTP fakes (requests.Session stand-ins)
# -----------------------------


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Records calls; returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def _next(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError("FakeSession ran out of responses")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, **kwargs)
