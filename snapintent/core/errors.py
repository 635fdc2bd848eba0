# snapintent/core/errors.py
"""
Typed failures for the screenshot pipeline and its adapters.

Exports
-------
- SnapIntentError (base)
- ExtractionFailure, ParseFailure, EmbeddingFailure, ThumbnailFailure,
  GeocodeFailure, ClusteringPersistFailure, StoreError
- PIPELINE_ERRORS
- classify_stage_error(exc, kind)
- stage_error_guard(kind)

Propagation
-----------
ExtractionFailure (and ParseFailure) is fatal to a `process` call. Every other kind is
caught by the orchestrator and turned into a degraded result.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager

import requests
from pydantic import ValidationError

# =========================
# Exception types
# =========================


class SnapIntentError(RuntimeError):
    """Base class for pipeline and adapter failures."""


class ExtractionFailure(SnapIntentError):
    """The vision service call failed or its reply could not be used."""


class ParseFailure(ExtractionFailure):
    """The vision reply was not valid JSON or did not match the extraction schema."""


class EmbeddingFailure(SnapIntentError):
    """Transport or service error while computing an embedding."""


class ThumbnailFailure(SnapIntentError):
    """The image could not be decoded, resized or re-encoded."""


class GeocodeFailure(SnapIntentError):
    """Geocoding a single place name failed."""


class ClusteringPersistFailure(SnapIntentError):
    """Building, clustering or persisting places for a screenshot failed."""


class StoreError(SnapIntentError):
    """The document store rejected a read or write."""


PIPELINE_ERRORS = (
    ExtractionFailure,
    EmbeddingFailure,
    ThumbnailFailure,
    GeocodeFailure,
    ClusteringPersistFailure,
    StoreError,
)

# =========================
# Classification helpers
# =========================


def classify_stage_error(exc: BaseException, kind: type[SnapIntentError]) -> SnapIntentError:
    """
    Map an arbitrary exception raised inside an adapter to `kind`.

    Rules:
      - An existing SnapIntentError passes through unchanged.
      - JSON decode / pydantic validation errors under an extraction guard → ParseFailure.
      - requests.* errors (timeouts included) → `kind` with a "network" prefix.
      - Anything else → `kind` carrying "<ExcType>: <message>".
    """
    if isinstance(exc, SnapIntentError):
        return exc

    if issubclass(kind, ExtractionFailure) and isinstance(exc, (json.JSONDecodeError, ValidationError)):
        return ParseFailure(f"{type(exc).__name__}: {exc}")

    if isinstance(exc, requests.Timeout):
        return kind(f"network timeout: {exc}")
    if isinstance(exc, requests.RequestException):
        return kind(f"network error: {exc}")

    return kind(f"{type(exc).__name__}: {exc}")


@contextmanager
def stage_error_guard(kind: type[SnapIntentError]) -> Iterator[None]:
    """Normalise unexpected exceptions from adapter internals into `kind`."""
    try:
        yield
    except SnapIntentError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_stage_error(exc, kind) from exc


__all__ = [
    "SnapIntentError",
    "ExtractionFailure",
    "ParseFailure",
    "EmbeddingFailure",
    "ThumbnailFailure",
    "GeocodeFailure",
    "ClusteringPersistFailure",
    "StoreError",
    "PIPELINE_ERRORS",
    "classify_stage_error",
    "stage_error_guard",
]
