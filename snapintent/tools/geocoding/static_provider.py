# snapintent/tools/geocoding/static_provider.py
"""
Offline geocoder backed by an in-memory table (case-insensitive names).

Used by tests and the CLI's --offline mode. Unknown names return None, like a real
service with zero results.
"""

from __future__ import annotations

from collections.abc import Mapping

from snapintent.schemas.models import Coordinates, GeocodeResult, PlaceMetadata

from .provider_base import GeocodingProvider

# name -> (lat, lng, city, country)
DEFAULT_TABLE: dict[str, tuple[float, float, str, str]] = {
    "eiffel tower": (48.8584, 2.2945, "Paris", "France"),
    "trocadero": (48.8616, 2.2893, "Paris", "France"),
    "louvre museum": (48.8606, 2.3376, "Paris", "France"),
    "golden gate bridge": (37.8199, -122.4783, "San Francisco", "United States"),
    "ferry building": (37.7955, -122.3937, "San Francisco", "United States"),
    "central park": (40.7829, -73.9654, "New York", "United States"),
}


class StaticGeocoder(GeocodingProvider):
    def __init__(self, table: Mapping[str, tuple[float, float, str, str]] | None = None) -> None:
        src = DEFAULT_TABLE if table is None else table
        self._table = {k.strip().lower(): v for k, v in src.items()}

    def geocode(self, name: str) -> GeocodeResult | None:
        row = self._table.get(name.strip().lower())
        if row is None:
            return None
        lat, lng, city, country = row
        return GeocodeResult(
            name=name,
            coordinates=Coordinates(latitude=lat, longitude=lng),
            address=f"{name}, {city}, {country}",
            metadata=PlaceMetadata(city=city, country=country),
        )
