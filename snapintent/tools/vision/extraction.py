# snapintent/tools/vision/extraction.py
"""
Intent extraction over a VisionProvider.

Purpose
-------
Turn one screenshot into a validated `IntentExtraction`:
  1) send the fixed EXTRACTION_PROMPT + image to the provider,
  2) strip any Markdown code fences from the reply,
  3) json.loads + strict pydantic validation.

Failure contract
----------------
- Provider/transport errors (network, auth, rate limit, timeout) → ExtractionFailure
- Reply not JSON, or JSON not matching the schema              → ParseFailure
This stage is required; callers abort the whole invocation on either.
"""

from __future__ import annotations

import base64
import json
import logging
import re

from pydantic import ValidationError

from snapintent.core.errors import ExtractionFailure, ParseFailure, stage_error_guard
from snapintent.schemas.models import SUPPORTED_MEDIA_TYPES, IntentExtraction

from .provider_base import VisionProvider

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are an expert at analyzing screenshots and inferring user intent.

Analyze this screenshot and determine:
1. What the user is interested in based on the visual content
2. Which category this screenshot belongs to:
   - travel: locations, destinations, maps, places to visit, restaurants, hotels, cafes
   - shopping: fashion, clothing, accessories, beauty products, product photos, e-commerce pages, reviews, pricing, items to buy, outfit posts, shopping hauls
   - startup: company info, funding, tech news, startup opportunities, business ideas, tech industry content
   - general: anything that doesn't clearly fit the above categories

CLASSIFICATION RULES:
- Clothing, fashion, accessories, beauty items or product displays -> "shopping"
- Social media posts featuring products, outfits or items -> "shopping"
- Location names, places, restaurants or travel destinations -> "travel"
- Use "general" only if the content truly doesn't fit travel, shopping or startup

3. Extract relevant data:
   - Any text visible in the screenshot (OCR)
   - Named entities (people, places, organizations, products)
   - Specific places or locations mentioned WITH their approximate latitude and longitude
   - Products or items visible
   - Any other relevant metadata

For each place, provide the name AND approximate coordinates (latitude, longitude).
Use your knowledge to estimate coordinates for well-known places, cities or landmarks.

Respond with JSON EXACTLY in this shape:

{
  "primary_bucket": "travel",
  "bucket_candidates": [
    {"bucket": "travel", "confidence": 0.8},
    {"bucket": "general", "confidence": 0.2}
  ],
  "confidence": 0.8,
  "rationale": "brief explanation",
  "extracted_data": {
    "ocrText": "visible text",
    "entities": ["entity1", "entity2"],
    "places": [
      {"name": "Eiffel Tower", "latitude": 48.8584, "longitude": 2.2945}
    ],
    "products": ["product1"],
    "metadata": {}
  }
}

CRITICAL:
- primary_bucket and every bucket MUST be one of: travel, shopping, startup, general.
- bucket_candidates MUST be an array of objects, not a single object.
- places MUST be an array of objects with name, latitude and longitude fields.
- Provide coordinates even if approximate.
Return ONLY the JSON, no markdown, no explanation."""

_FENCE = re.compile(r"```(?:json)?[ \t]*\n?", flags=re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers wherever they appear and trim whitespace."""
    return _FENCE.sub("", text).strip()


def parse_extraction(text: str) -> IntentExtraction:
    """Validate a raw provider reply. Raises ParseFailure on any shape problem."""
    if not isinstance(text, str):
        raise ParseFailure("Provider returned non-string response.")
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise ParseFailure("Provider returned an empty response.")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Reply is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(payload).__name__}.")
    try:
        return IntentExtraction.model_validate(payload)
    except ValidationError as e:
        raise ParseFailure(f"Reply failed schema validation: {e}") from e


class IntentExtractor:
    """Required pipeline stage: image bytes → IntentExtraction."""

    def __init__(self, provider: VisionProvider, *, prompt: str = EXTRACTION_PROMPT) -> None:
        self._provider = provider
        self._prompt = prompt

    def extract_intent(self, image_bytes: bytes, media_type: str = "image/jpeg") -> IntentExtraction:
        if not image_bytes:
            raise ExtractionFailure("empty image payload")
        if media_type not in SUPPORTED_MEDIA_TYPES:
            raise ExtractionFailure(f"unsupported media type {media_type!r}")

        image_b64 = base64.b64encode(image_bytes).decode("ascii")
        with stage_error_guard(ExtractionFailure):
            reply = self._provider.complete(image_b64=image_b64, media_type=media_type, prompt=self._prompt)
        result = parse_extraction(reply)
        logger.debug(
            "extracted bucket=%s confidence=%.2f places=%d",
            result.primary_bucket,
            result.confidence,
            len(result.extracted_data.places),
        )
        return result


__all__ = ["EXTRACTION_PROMPT", "strip_code_fences", "parse_extraction", "IntentExtractor"]
