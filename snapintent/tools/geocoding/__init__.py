from __future__ import annotations

from snapintent.config.settings import GeocodingConfig

from .batch import geocode_places
from .opencage_provider import OpenCageGeocoder
from .provider_base import GeocodingProvider
from .static_provider import StaticGeocoder


def get_geocoder(config: GeocodingConfig) -> GeocodingProvider | None:
    if config.provider == "none":
        return None
    if config.provider == "static":
        return StaticGeocoder()
    if not config.api_key:
        return None
    return OpenCageGeocoder(config)


__all__ = [
    "GeocodingProvider",
    "OpenCageGeocoder",
    "StaticGeocoder",
    "geocode_places",
    "get_geocoder",
]
