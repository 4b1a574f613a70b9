import pytest

from conftest import grounded_body, maps_chunk, web_chunk
from drishti.shared.domain.discovery.models import DiscoveryOutcome, DiscoveryStatus, extract_grounding_chunks
from drishti.shared.infrastructure.llm.base import MalformedResponseError


def test_chunks_are_read_from_first_candidate():
    body = grounded_body(maps_chunk("Atal Setu", placeId="places/abc"), web_chunk())
    body["candidates"].append({"groundingMetadata": {"groundingChunks": [maps_chunk("Ignored")]}})

    chunks = extract_grounding_chunks(body)

    assert len(chunks) == 2
    assert chunks[0].maps.title == "Atal Setu"
    assert chunks[0].maps.place_id == "places/abc"
    assert chunks[1].maps is None
    assert chunks[1].web.uri == "https://example.org"


def test_point_is_only_available_with_location():
    with_point, without = extract_grounding_chunks(
        grounded_body(
            maps_chunk("A", location={"latitude": 12.9, "longitude": 77.6}),
            maps_chunk("B"),
        )
    )

    assert with_point.maps.point == (12.9, 77.6)
    assert without.maps.point is None


@pytest.mark.parametrize(
    "location",
    [
        {"latitude": 19.03},
        {"longitude": 72.81},
        {"latitude": 120, "longitude": 0},
        {"latitude": "north", "longitude": 72.81},
        "19.03,72.81",
    ],
)
def test_unusable_location_keeps_the_chunk_without_a_point(location):
    (chunk,) = extract_grounding_chunks(grounded_body(maps_chunk("Bandra Worli Sea Link", location=location)))

    assert chunk.maps.title == "Bandra Worli Sea Link"
    assert chunk.maps.location is None
    assert chunk.maps.point is None


def test_non_object_chunks_keep_their_position():
    chunks = extract_grounding_chunks(grounded_body("junk", None, maps_chunk("Good Bridge")))

    assert len(chunks) == 3
    assert chunks[0].maps is None
    assert chunks[1].maps is None
    assert chunks[2].maps.title == "Good Bridge"


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": None},
        {"candidates": [{"groundingMetadata": None}]},
        {"candidates": [{"groundingMetadata": {"groundingChunks": None}}]},
    ],
)
def test_null_lists_are_an_empty_result(body):
    assert extract_grounding_chunks(body) == []


def test_unknown_fields_are_ignored():
    chunks = extract_grounding_chunks(
        {"candidates": [{"finishReason": "STOP", "groundingMetadata": {"groundingChunks": [maps_chunk("X")], "webSearchQueries": []}}]}
    )

    assert chunks[0].maps.title == "X"


@pytest.mark.parametrize("body", [{"candidates": "nope"}, {"candidates": [{"groundingMetadata": "x"}]}])
def test_unrecognised_envelope_raises(body):
    with pytest.raises(MalformedResponseError):
        extract_grounding_chunks(body)


def test_outcome_merged_flag():
    assert DiscoveryOutcome(query="q", status=DiscoveryStatus.MERGED).merged
    assert not DiscoveryOutcome(query="q", status=DiscoveryStatus.BUSY).merged
