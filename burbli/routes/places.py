"""
Places Routes Blueprint - Suburb autocomplete proxy

Keeps the Google Maps API key on the server. The submission form calls
this with ?q= while the user types and ?place_id= once they pick one.
"""

import logging
from dataclasses import asdict
from flask import Blueprint, current_app, jsonify, request

from burbli.places import PlacesClient, PlacesError

logger = logging.getLogger(__name__)

places_bp = Blueprint("places", __name__)


def get_places_client():
    """
    Return the app's places client, creating it on first use.

    Returns:
        PlacesClient, or None when no API key is configured
    """
    client = current_app.config.get("PLACES_CLIENT")
    if client is not None:
        return client

    config = current_app.config["BURBLI_CONFIG"]
    if not config.places_api_key:
        return None

    client = PlacesClient(
        api_key=config.places_api_key,
        country=config.places_country,
        timeout=config.places_timeout,
    )
    current_app.config["PLACES_CLIENT"] = client
    return client


@places_bp.route("/api/places")
def lookup_places():
    """
    Suburb autocomplete and lookup.

    Route: GET /api/places

    Query Parameters:
        q (str): Text typed so far; returns {predictions: [...]}
        place_id (str): Chosen suggestion; returns {suburb, state, postcode}

    Returns:
        500 if the API key is missing, 502 if the places API fails
    """
    client = get_places_client()
    if client is None:
        return jsonify({"error": "Missing GOOGLE_MAPS_API_KEY"}), 500

    q = request.args.get("q")
    place_id = request.args.get("place_id")

    try:
        if q:
            predictions = client.search(q)
            return jsonify({"predictions": [asdict(p) for p in predictions]})

        if place_id:
            return jsonify(asdict(client.resolve(place_id)))
    except PlacesError as e:
        logger.warning(f"Places lookup failed: {e}")
        return jsonify({"error": e.message or e.status, "status": e.status}), 502

    return jsonify({"predictions": []})
