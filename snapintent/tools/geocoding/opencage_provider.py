# snapintent/tools/geocoding/opencage_provider.py
"""
OpenCage forward geocoder.

Only the top result is used. Response fields consumed:
  results[0].geometry.{lat,lng}
  results[0].formatted
  results[0].components.{neighbourhood|suburb, city|town|village, country, _type}
"""

from __future__ import annotations

from typing import Any

import requests

from snapintent.config.settings import GeocodingConfig
from snapintent.core.errors import GeocodeFailure, stage_error_guard
from snapintent.schemas.models import Coordinates, GeocodeResult, PlaceMetadata

from .provider_base import GeocodingProvider


class OpenCageGeocoder(GeocodingProvider):
    def __init__(self, config: GeocodingConfig, *, session: requests.Session | None = None) -> None:
        if not config.api_key:
            raise RuntimeError("OPENCAGE_API_KEY not set for OpenCageGeocoder.")
        self._api_key = config.api_key
        self._endpoint = config.endpoint
        self._timeout_s = config.timeout_s
        self._session = session or requests.Session()

    def geocode(self, name: str) -> GeocodeResult | None:
        if not name or not name.strip():
            return None
        params = {"q": name, "key": self._api_key, "limit": 1}
        with stage_error_guard(GeocodeFailure):
            resp = self._session.get(self._endpoint, params=params, timeout=self._timeout_s)
            if resp.status_code >= 400:
                raise GeocodeFailure(f"geocoding API error {resp.status_code} for {name!r}")
            data = resp.json()
            return _to_result(name, data)


def _to_result(name: str, data: Any) -> GeocodeResult | None:
    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        return None
    top = results[0]
    try:
        lat = float(top["geometry"]["lat"])
        lng = float(top["geometry"]["lng"])
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeFailure(f"malformed geocoding result for {name!r}: {e!r}") from e

    comp = top.get("components")
    if not isinstance(comp, dict):
        comp = {}
    return GeocodeResult(
        name=name,
        coordinates=Coordinates(latitude=lat, longitude=lng),
        address=top.get("formatted"),
        metadata=PlaceMetadata(
            neighborhood=comp.get("neighbourhood") or comp.get("suburb"),
            city=comp.get("city") or comp.get("town") or comp.get("village"),
            country=comp.get("country"),
            place_type=comp.get("_type"),
        ),
    )
