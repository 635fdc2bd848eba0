# snapintent/tools/geocoding/provider_base.py
"""
Geocoding Provider Interface

`geocode(name)` returns a GeocodeResult, or None when the service knows no such place.
Transport and service errors raise GeocodeFailure; callers decide whether that is fatal.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from snapintent.schemas.models import GeocodeResult


@runtime_checkable
class GeocodingProvider(Protocol):
    def geocode(self, name: str) -> GeocodeResult | None: ...
