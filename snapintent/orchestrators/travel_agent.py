# snapintent/orchestrators/travel_agent.py
"""
Travel Agent: geocode-then-cluster.

This is the second way of turning extracted places into Places/Clusters. Unlike the
pipeline's travel branch (which trusts coordinates supplied by the vision service and
drops places without them), the agent re-resolves every place *name* through the
geocoder, so it also recovers places the vision service left without coordinates and
picks up address/city metadata for cluster naming. The two paths can disagree for the
same input and are kept separate on purpose.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from snapintent.core.geo.clustering import cluster_places
from snapintent.schemas.models import ExtractedData, Place, TravelAgentResult
from snapintent.tools.geocoding import GeocodingProvider, geocode_places

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class TravelAgent:
    def __init__(
        self,
        geocoder: GeocodingProvider,
        *,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._geocoder = geocoder
        self._id_factory = id_factory
        self._clock = clock

    def extract_and_process_places(self, extracted: ExtractedData, image_id: str) -> TravelAgentResult:
        names = [p.name for p in extracted.places if p.name.strip()]
        if not names:
            logger.info("no places found in screenshot %s", image_id)
            return TravelAgentResult()

        geocoded = geocode_places(self._geocoder, names)
        now = self._clock() if self._clock else None
        places = [
            Place(
                id=self._id_factory(),
                name=g.name,
                address=g.address,
                coordinates=g.coordinates,
                source_screenshot_id=image_id,
                metadata=g.metadata,
                origin="geocoder",
                created_at=now,
            )
            for g in geocoded
        ]
        logger.info("geocoded %d of %d places for screenshot %s", len(places), len(names), image_id)

        clusters = (
            cluster_places(places, id_factory=self._id_factory, clock=self._clock) if len(places) > 1 else []
        )
        return TravelAgentResult(places=places, clusters=clusters)
