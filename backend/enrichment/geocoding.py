"""
Forward geocoding via the Mapbox Geocoding API, with approximate city-center
fallback when the API is unavailable or returns nothing.
Docs: https://docs.mapbox.com/api/search/geocoding/
"""
from __future__ import annotations

import logging
import random
from typing import Optional
from urllib.parse import quote

import requests

from models import GeocodeResult

logger = logging.getLogger(__name__)

MAPBOX_GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
MAPBOX_SOURCE = "Mapbox Geocoding"
FALLBACK_SOURCE = "Fallback Data (approximate city center)"
RANDOM_FALLBACK_SOURCE = "Fallback Data (random point in state bounds)"

FALLBACK_CITY_CENTERS: dict[str, tuple[float, float]] = {
    "Austin, TX": (30.2672, -97.7431),
    "Dallas, TX": (32.7767, -96.7970),
    "Houston, TX": (29.7604, -95.3698),
    "San Antonio, TX": (29.4241, -98.4936),
    "Fort Worth, TX": (32.7555, -97.3308),
    "Porter, TX": (30.1472, -95.2996),
    "El Paso, TX": (31.7619, -106.4850),
    "Arlington, TX": (32.7357, -97.1081),
    "Corpus Christi, TX": (27.8006, -97.3964),
    "Plano, TX": (33.0198, -96.6989),
}

# (min_lat, max_lat, min_lon, max_lon)
TEXAS_BOUNDS = (25.8, 36.5, -106.6, -93.5)


class GeocodingService:
    def __init__(self, api_key: str = "", timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout
        if not api_key:
            logger.warning("MAPBOX_API_KEY not set; geocoding will use fallback coordinates")

    def geocode_address(self, address: str, city: str, state: str) -> Optional[GeocodeResult]:
        """
        Resolve an address to coordinates. Never raises: API faults and empty
        results fall back to approximate coordinates, and None is returned only
        when no fallback exists for the city/state.
        """
        full_address = f"{address}, {city}, {state}"
        logger.info("Geocoding address: %s", full_address)

        if not self.api_key:
            logger.error("Cannot geocode: MAPBOX_API_KEY not configured")
            return self._fallback_geocode(city, state)

        try:
            url = MAPBOX_GEOCODING_URL.format(query=quote(full_address, safe=""))
            response = requests.get(
                url,
                params={"access_token": self.api_key, "limit": 1},
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"Mapbox API returned {response.status_code}: {response.reason}")
            features = response.json().get("features") or []
            if features:
                lon, lat = features[0]["center"]
                logger.info("Geocoded %r to (%s, %s)", full_address, lat, lon)
                return GeocodeResult(lat=lat, lon=lon, source=MAPBOX_SOURCE)
            logger.warning("No results found for address: %s", full_address)
        except Exception as e:
            logger.error("Mapbox geocoding failed: %s", e)
        return self._fallback_geocode(city, state)

    def _fallback_geocode(self, city: str, state: str) -> Optional[GeocodeResult]:
        key = f"{city}, {state}"
        logger.info("Using fallback geocoding for %s", key)
        coords = FALLBACK_CITY_CENTERS.get(key)
        if coords:
            return GeocodeResult(lat=coords[0], lon=coords[1], source=FALLBACK_SOURCE, is_fallback=True)

        if state == "TX":
            min_lat, max_lat, min_lon, max_lon = TEXAS_BOUNDS
            lat = min_lat + random.random() * (max_lat - min_lat)
            lon = min_lon + random.random() * (max_lon - min_lon)
            logger.info("Generated Texas fallback: %s, %s", lat, lon)
            return GeocodeResult(lat=lat, lon=lon, source=RANDOM_FALLBACK_SOURCE, is_fallback=True)

        logger.warning("No fallback available for %s", key)
        return None
