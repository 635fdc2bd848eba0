# snapintent/core/geo/geometry.py
"""
Flat-earth coordinate helpers.

Distances are planar Euclidean in decimal degrees: sqrt(dlat^2 + dlon^2). This is not a
great-circle distance and under-estimates east-west separation away from the equator.
Cluster membership depends on this exact metric, so it must not be swapped for haversine
without treating it as a behaviour change.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from snapintent.schemas.models import Coordinates


def planar_distance(a: Coordinates, b: Coordinates) -> float:
    dlat = a.latitude - b.latitude
    dlon = a.longitude - b.longitude
    return math.sqrt(dlat * dlat + dlon * dlon)


def centroid(coords: Sequence[Coordinates]) -> Coordinates:
    """Arithmetic mean of latitudes and of longitudes."""
    if not coords:
        raise ValueError("centroid() requires at least one coordinate.")
    n = len(coords)
    return Coordinates(
        latitude=sum(c.latitude for c in coords) / n,
        longitude=sum(c.longitude for c in coords) / n,
    )


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def center(self) -> Coordinates:
        return Coordinates(
            latitude=(self.min_lat + self.max_lat) / 2,
            longitude=(self.min_lon + self.max_lon) / 2,
        )

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon


def bounding_box(coords: Sequence[Coordinates]) -> BoundingBox:
    if not coords:
        raise ValueError("bounding_box() requires at least one coordinate.")
    lats = [c.latitude for c in coords]
    lons = [c.longitude for c in coords]
    return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons))


__all__ = ["planar_distance", "centroid", "BoundingBox", "bounding_box"]
