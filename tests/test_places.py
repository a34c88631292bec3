"""
Tests for the places client.

The HTTP session is mocked; no request leaves the test process.
"""

from unittest.mock import Mock

import pytest
import requests

from burbli.places import PlaceDetails, PlacePrediction, PlacesClient, PlacesError, parse_address_components


def make_client(payload=None, error=None):
    """Build a PlacesClient whose session returns `payload` or raises `error`."""
    session = Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        response = Mock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        session.get.return_value = response
    return PlacesClient(api_key="test-key", country="au", timeout=5, session=session), session


EPPING_COMPONENTS = [
    {"long_name": "Epping", "short_name": "Epping", "types": ["locality", "political"]},
    {"long_name": "City of Whittlesea", "short_name": "Whittlesea", "types": ["administrative_area_level_2"]},
    {"long_name": "Victoria", "short_name": "VIC", "types": ["administrative_area_level_1", "political"]},
    {"long_name": "Australia", "short_name": "AU", "types": ["country", "political"]},
    {"long_name": "3076", "short_name": "3076", "types": ["postal_code"]},
]


def test_search_returns_predictions():
    client, session = make_client({
        "status": "OK",
        "predictions": [
            {"place_id": "p1", "description": "Epping VIC, Australia"},
            {"place_id": "p2", "description": "Epping NSW, Australia"},
        ],
    })

    results = client.search("  Epping ")

    assert results == [
        PlacePrediction("p1", "Epping VIC, Australia"),
        PlacePrediction("p2", "Epping NSW, Australia"),
    ]
    _, kwargs = session.get.call_args
    assert kwargs["params"]["input"] == "Epping"
    assert kwargs["params"]["components"] == "country:au"
    assert kwargs["params"]["key"] == "test-key"
    assert kwargs["timeout"] == 5


def test_search_zero_results():
    client, _ = make_client({"status": "ZERO_RESULTS", "predictions": []})
    assert client.search("Nowhereville") == []


def test_blank_search_skips_the_request():
    client, session = make_client({"status": "OK"})

    assert client.search("   ") == []
    assert client.search(None) == []
    session.get.assert_not_called()


def test_search_error_status_raises():
    client, _ = make_client({"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."})

    with pytest.raises(PlacesError) as exc_info:
        client.search("Epping")

    assert exc_info.value.status == "REQUEST_DENIED"
    assert exc_info.value.message == "The provided API key is invalid."


def test_network_failure_raises_places_error():
    client, _ = make_client(error=requests.exceptions.ConnectionError("connection refused"))

    with pytest.raises(PlacesError) as exc_info:
        client.search("Epping")
    assert exc_info.value.status == "REQUEST_FAILED"


def test_invalid_json_raises_places_error():
    client, session = make_client({})
    session.get.return_value.json.side_effect = ValueError("Expecting value")

    with pytest.raises(PlacesError) as exc_info:
        client.search("Epping")
    assert exc_info.value.status == "INVALID_RESPONSE"


def test_resolve_maps_components():
    client, session = make_client({"status": "OK", "result": {"address_components": EPPING_COMPONENTS}})

    details = client.resolve("p1")

    assert details == PlaceDetails(suburb="Epping", state="VIC", postcode="3076")
    _, kwargs = session.get.call_args
    assert kwargs["params"]["place_id"] == "p1"


def test_resolve_error_status_raises():
    client, _ = make_client({"status": "NOT_FOUND"})

    with pytest.raises(PlacesError) as exc_info:
        client.resolve("missing")
    assert exc_info.value.status == "NOT_FOUND"


def test_parse_falls_back_to_postal_town_and_short_name():
    components = [
        {"long_name": "Alice Springs", "short_name": "Alice Springs", "types": ["postal_town"]},
        {"long_name": "Northern Territory (AU)", "short_name": "NT", "types": ["administrative_area_level_1"]},
    ]

    assert parse_address_components(components) == PlaceDetails(suburb="Alice Springs", state="NT", postcode="")


def test_parse_empty_components():
    assert parse_address_components([]) == PlaceDetails()
