# snapintent/core/geo/clustering.py
"""
Geospatial Clustering Engine

Purpose
-------
Group geolocated places by proximity into named, colored clusters and compute a map
region that fits a set of places.

Algorithm
---------
Seeded radius clustering over the input order:
  1) Walk places in order; skip any already assigned.
  2) The current place seeds a group; every *unassigned* place within
     CLUSTER_THRESHOLD_DEGREES (planar distance to the seed) joins it.
  3) Groups of two or more become a PlaceCluster: centroid = mean coordinates,
     fresh id, members get `cluster_id`, color cycles through CLUSTER_COLORS by the
     number of clusters emitted so far.
  4) Singletons are dropped; their `cluster_id` stays None.

The threshold is ~5 km at the equator in degree units. See geometry.planar_distance for
the metric caveat.

Public API
----------
cluster_places(places, *, threshold=..., id_factory=..., clock=None) -> list[PlaceCluster]
cluster_name(members) -> str
calculate_map_region(places) -> MapRegion | None
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime

from snapintent.core.geo.geometry import bounding_box, centroid, planar_distance
from snapintent.schemas.models import MapRegion, Place, PlaceCluster

CLUSTER_THRESHOLD_DEGREES = 0.045

CLUSTER_COLORS: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
)

# Map-fit knobs
SINGLE_PLACE_DELTA = 0.05
REGION_PADDING = 1.5
MIN_REGION_DELTA = 0.05


def _new_id() -> str:
    return str(uuid.uuid4())


def cluster_places(
    places: Sequence[Place],
    *,
    threshold: float = CLUSTER_THRESHOLD_DEGREES,
    id_factory: Callable[[], str] = _new_id,
    clock: Callable[[], datetime] | None = None,
) -> list[PlaceCluster]:
    """
    Partition `places` into clusters of >= 2 members. Mutates `cluster_id` on every
    clustered place; unclustered places are left untouched.

    Deterministic for a fixed input order (ids aside, which come from `id_factory`).
    """
    clusters: list[PlaceCluster] = []
    assigned = [False] * len(places)

    for i, seed in enumerate(places):
        if assigned[i]:
            continue
        assigned[i] = True
        members: list[Place] = [seed]

        for j in range(i + 1, len(places)):
            if assigned[j]:
                continue
            if planar_distance(seed.coordinates, places[j].coordinates) <= threshold:
                members.append(places[j])
                assigned[j] = True

        if len(members) < 2:
            continue

        cluster_id = id_factory()
        for p in members:
            p.cluster_id = cluster_id

        clusters.append(
            PlaceCluster(
                id=cluster_id,
                name=cluster_name(members),
                centroid=centroid([p.coordinates for p in members]),
                place_ids=[p.id for p in members],
                color=CLUSTER_COLORS[len(clusters) % len(CLUSTER_COLORS)],
                created_at=clock() if clock else None,
            )
        )

    return clusters


def cluster_name(members: Sequence[Place]) -> str:
    """
    "{city} Area ({n} places)" using the most frequent non-empty city (ties go to the
    city seen first), else "Cluster of {n} places".
    """
    cities = [p.metadata.city for p in members if p.metadata and p.metadata.city]
    n = len(members)
    if cities:
        # Counter.most_common keeps first-insertion order among equal counts
        city, _ = Counter(cities).most_common(1)[0]
        return f"{city} Area ({n} places)"
    return f"Cluster of {n} places"


def calculate_map_region(places: Sequence[Place]) -> MapRegion | None:
    """Region that fits all `places`; None for an empty input."""
    if not places:
        return None

    if len(places) == 1:
        c = places[0].coordinates
        return MapRegion(
            latitude=c.latitude,
            longitude=c.longitude,
            latitude_delta=SINGLE_PLACE_DELTA,
            longitude_delta=SINGLE_PLACE_DELTA,
        )

    box = bounding_box([p.coordinates for p in places])
    center = box.center
    return MapRegion(
        latitude=center.latitude,
        longitude=center.longitude,
        latitude_delta=max(box.lat_span * REGION_PADDING, MIN_REGION_DELTA),
        longitude_delta=max(box.lon_span * REGION_PADDING, MIN_REGION_DELTA),
    )


__all__ = [
    "CLUSTER_THRESHOLD_DEGREES",
    "CLUSTER_COLORS",
    "SINGLE_PLACE_DELTA",
    "REGION_PADDING",
    "MIN_REGION_DELTA",
    "cluster_places",
    "cluster_name",
    "calculate_map_region",
]
