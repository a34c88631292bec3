"""
Place lookup - Suburb autocomplete via the Google Places API

Used by the submission form to suggest suburbs as the user types and to
fill in suburb, state and postcode once a suggestion is picked. Only
locality-level details are returned; street addresses are never stored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from burbli.constants import STATE_ABBR

logger = logging.getLogger(__name__)

PLACES_API = "https://maps.googleapis.com/maps/api/place"

# Address component types that name the suburb, in order of preference
SUBURB_COMPONENT_TYPES = ["locality", "postal_town", "sublocality", "sublocality_level_1"]


class PlacesError(Exception):
    """Raised when the places API returns an error or cannot be reached."""

    def __init__(self, status: str, message: Optional[str] = None):
        super().__init__(f"{status}: {message}" if message else status)
        self.status = status
        self.message = message


@dataclass
class PlacePrediction:
    """An autocomplete suggestion."""
    place_id: str
    description: str


@dataclass
class PlaceDetails:
    """Suburb-level location for a chosen suggestion."""
    suburb: str = ''
    state: str = ''
    postcode: str = ''


class PlacesClient:
    """Thin client for the Places autocomplete and details endpoints."""

    def __init__(
        self,
        api_key: str,
        country: str = "au",
        timeout: int = 10,
        base_url: str = PLACES_API,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.country = country
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _get(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}/json"
        try:
            response = self.session.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Places request to {endpoint} failed: {e}")
            raise PlacesError("REQUEST_FAILED", str(e)) from e
        except ValueError as e:
            logger.error(f"Places {endpoint} returned invalid JSON: {e}")
            raise PlacesError("INVALID_RESPONSE", str(e)) from e

    def search(self, text: str) -> List[PlacePrediction]:
        """
        Suggest places matching the typed text, limited to the configured country.

        Args:
            text: Partial suburb name typed by the user

        Returns:
            List of PlacePrediction (empty for blank input or no results)

        Raises:
            PlacesError: If the API reports an error status
        """
        text = (text or "").strip()
        if not text:
            return []

        data = self._get("autocomplete", {"input": text, "components": f"country:{self.country}"})
        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise PlacesError(status or "UNKNOWN_ERROR", data.get("error_message"))

        return [
            PlacePrediction(place_id=p.get("place_id", ""), description=p.get("description", ""))
            for p in data.get("predictions") or []
        ]

    def resolve(self, place_id: str) -> PlaceDetails:
        """
        Look up suburb, state and postcode for a suggestion.

        Args:
            place_id: Identifier from a PlacePrediction

        Returns:
            PlaceDetails; missing components are empty strings

        Raises:
            PlacesError: If the API reports an error status
        """
        data = self._get("details", {"place_id": place_id, "fields": "address_component,name"})
        status = data.get("status")
        if status != "OK":
            raise PlacesError(status or "UNKNOWN_ERROR", data.get("error_message"))

        components = (data.get("result") or {}).get("address_components") or []
        return parse_address_components(components)


def _find_component(components: List[Dict[str, Any]], component_type: str) -> Optional[Dict[str, Any]]:
    for component in components:
        if component_type in (component.get("types") or []):
            return component
    return None


def parse_address_components(components: List[Dict[str, Any]]) -> PlaceDetails:
    """
    Extract suburb, state code and postcode from address components.

    The state long name is mapped to its region code; unknown states fall
    back to the component's short name.
    """
    suburb_component = None
    for component_type in SUBURB_COMPONENT_TYPES:
        suburb_component = _find_component(components, component_type)
        if suburb_component:
            break

    state_component = _find_component(components, "administrative_area_level_1") or {}
    postcode_component = _find_component(components, "postal_code") or {}

    state_long = state_component.get("long_name", "")
    state = STATE_ABBR.get(state_long) or state_component.get("short_name", "")

    return PlaceDetails(
        suburb=(suburb_component or {}).get("long_name", ""),
        state=state,
        postcode=postcode_component.get("long_name", ""),
    )
