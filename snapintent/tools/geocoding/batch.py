# snapintent/tools/geocoding/batch.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from snapintent.core.errors import GeocodeFailure
from snapintent.schemas.models import GeocodeResult

from .provider_base import GeocodingProvider

logger = logging.getLogger(__name__)


def geocode_places(provider: GeocodingProvider, names: Iterable[str]) -> list[GeocodeResult]:
    """
    Geocode `names` one at a time, in order. A failed or empty lookup drops that name;
    it never aborts the batch.
    """
    results: list[GeocodeResult] = []
    for name in names:
        try:
            res = provider.geocode(name)
        except GeocodeFailure as exc:
            logger.warning("geocode failed for %r: %s", name, exc)
            continue
        if res is None:
            logger.info("no geocoding result for %r", name)
            continue
        results.append(res)
    return results
