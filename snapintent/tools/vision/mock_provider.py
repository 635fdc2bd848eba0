# snapintent/tools/vision/mock_provider.py
"""
Mock Vision Provider

Deterministic, network-free `VisionProvider` for tests, local runs and the CLI's
--offline mode. It ignores the image and returns a fixed reply (or raises a fixed error),
so the parsing, persistence and clustering paths can be exercised end-to-end.
"""

from __future__ import annotations

import json

from .provider_base import VisionProvider

DEFAULT_TRAVEL_REPLY: dict = {
    "primary_bucket": "travel",
    "bucket_candidates": [
        {"bucket": "travel", "confidence": 0.86},
        {"bucket": "general", "confidence": 0.14},
    ],
    "confidence": 0.86,
    "rationale": "Screenshot lists restaurants and landmarks in one city.",
    "extracted_data": {
        "ocrText": "Top spots in Paris: Eiffel Tower, Trocadero, Louvre",
        "entities": ["Paris", "Eiffel Tower", "Trocadero", "Louvre"],
        "places": [
            {"name": "Eiffel Tower", "latitude": 48.8584, "longitude": 2.2945},
            {"name": "Trocadero", "latitude": 48.8616, "longitude": 2.2893},
            {"name": "Louvre Museum", "latitude": 48.8606, "longitude": 2.3376},
        ],
        "products": [],
        "metadata": {},
    },
}


class MockVisionProvider(VisionProvider):
    """Returns `reply` verbatim (str) or JSON-encoded (dict); raises `error` if given."""

    def __init__(self, reply: str | dict | None = None, *, error: Exception | None = None) -> None:
        if reply is None:
            reply = DEFAULT_TRAVEL_REPLY
        self._reply = reply if isinstance(reply, str) else json.dumps(reply)
        self._error = error
        self.calls: list[tuple[str, int]] = []

    def complete(self, *, image_b64: str, media_type: str, prompt: str) -> str:
        self.calls.append((media_type, len(image_b64)))
        if self._error is not None:
            raise self._error
        return self._reply
