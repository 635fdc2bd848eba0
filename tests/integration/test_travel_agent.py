# tests/integration/test_travel_agent.py
"""
Geocode-then-cluster flow

Purpose
-------
TravelAgent resolves place names through the geocoder (ignoring any coordinates the
vision service supplied) and clusters the results; the pipeline's geocode_and_cluster
persists them once per screenshot.
"""

import pytest

from snapintent.core.errors import ClusteringPersistFailure, StoreError
from snapintent.orchestrators import TravelAgent
from snapintent.schemas.models import ExtractedData, ExtractedPlace
from snapintent.storage import InMemoryDocumentStore
from snapintent.tools.geocoding import StaticGeocoder
from tests.utils import fixed_clock, make_extraction_reply, sequential_ids

pytestmark = pytest.mark.integration


class _ClustersDownStore(InMemoryDocumentStore):
    def insert_clusters(self, clusters):
        raise StoreError("clusters collection unavailable")


def _extracted(*names):
    return ExtractedData(places=[ExtractedPlace(name=n) for n in names])


def test_agent_geocodes_and_clusters_named_places():
    agent = TravelAgent(StaticGeocoder(), id_factory=sequential_ids("t"), clock=fixed_clock)
    out = agent.extract_and_process_places(_extracted("Eiffel Tower", "Trocadero", "Atlantis"), "shot-9")

    assert [p.name for p in out.places] == ["Eiffel Tower", "Trocadero"]
    assert all(p.source_screenshot_id == "shot-9" for p in out.places)
    assert all(p.origin == "geocoder" for p in out.places)
    assert out.places[0].metadata.city == "Paris"
    (cluster,) = out.clusters
    assert cluster.name == "Paris Area (2 places)"
    assert all(p.cluster_id == cluster.id for p in out.places)


def test_agent_single_or_no_places():
    agent = TravelAgent(StaticGeocoder())
    one = agent.extract_and_process_places(_extracted("Central Park"), "s")
    assert len(one.places) == 1 and one.clusters == []
    none = agent.extract_and_process_places(_extracted(" "), "s")
    assert none.places == [] and none.clusters == []


def test_geocode_and_cluster_persists_once(pipeline_factory, memory_store, png_bytes):
    reply = make_extraction_reply("travel", places=[{"name": "Eiffel Tower"}, {"name": "Trocadero"}])
    pipe = pipeline_factory(reply=reply)
    res = pipe.process(png_bytes(), "image/png")
    assert res.places_processed == 0  # no coordinates from the vision reply

    first = pipe.geocode_and_cluster(res.image_id)
    assert len(first.places) == 2
    assert len(first.clusters) == 1
    assert len(memory_store.list_places()) == 2

    second = pipe.geocode_and_cluster(res.image_id)
    assert [p.id for p in second.places] == [p.id for p in first.places]
    assert [c.id for c in second.clusters] == [c.id for c in first.clusters]
    assert len(memory_store.list_places()) == 2
    assert len(memory_store.list_clusters()) == 1


def test_geocode_and_cluster_errors(pipeline_factory):
    with pytest.raises(LookupError):
        pipeline_factory().geocode_and_cluster("missing")
    with pytest.raises(RuntimeError):
        pipeline_factory(geocoder=None).geocode_and_cluster("missing")


def test_geocode_and_cluster_runs_after_coordinate_places(pipeline_factory, memory_store, png_bytes):
    reply = make_extraction_reply(
        "travel",
        places=[
            {"name": "Eiffel Tower", "latitude": 48.8584, "longitude": 2.2945},
            {"name": "Trocadero"},
            {"name": "Louvre Museum"},
        ],
    )
    pipe = pipeline_factory(reply=reply)
    res = pipe.process(png_bytes(), "image/png")
    assert res.places_processed == 1
    assert [p.origin for p in memory_store.list_places()] == ["vision"]

    first = pipe.geocode_and_cluster(res.image_id)
    assert [p.name for p in first.places] == ["Eiffel Tower", "Trocadero", "Louvre Museum"]
    assert all(p.origin == "geocoder" for p in first.places)
    (cluster,) = first.clusters
    assert cluster.name == "Paris Area (3 places)"
    assert len(pipe.places_for_screenshot(res.image_id)) == 4

    second = pipe.geocode_and_cluster(res.image_id)
    assert [p.id for p in second.places] == [p.id for p in first.places]
    assert [c.id for c in second.clusters] == [cluster.id]
    assert len(memory_store.list_places()) == 4
    assert len(memory_store.list_clusters()) == 1


def test_geocode_and_cluster_failure_leaves_no_dangling_cluster_ids(pipeline_factory, png_bytes):
    store = _ClustersDownStore()
    reply = make_extraction_reply("travel", places=[{"name": "Eiffel Tower"}, {"name": "Trocadero"}])
    pipe = pipeline_factory(reply=reply, store=store)
    res = pipe.process(png_bytes(), "image/png")

    with pytest.raises(ClusteringPersistFailure, match="StoreError"):
        pipe.geocode_and_cluster(res.image_id)

    cluster_ids = {c.id for c in store.list_clusters()}
    for place in store.list_places():
        assert place.cluster_id is None or place.cluster_id in cluster_ids
