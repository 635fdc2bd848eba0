from .clustering import (
    CLUSTER_COLORS,
    CLUSTER_THRESHOLD_DEGREES,
    calculate_map_region,
    cluster_name,
    cluster_places,
)
from .geometry import BoundingBox, bounding_box, centroid, planar_distance

__all__ = [
    "CLUSTER_COLORS",
    "CLUSTER_THRESHOLD_DEGREES",
    "calculate_map_region",
    "cluster_name",
    "cluster_places",
    "BoundingBox",
    "bounding_box",
    "centroid",
    "planar_distance",
]
