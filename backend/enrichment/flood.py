"""
FEMA National Flood Hazard Layer lookup (layer 28, flood hazard zones).

Lookup only: the result is shown to a reviewer, who records the flood zone on
the site's constraints by hand. Enrichment never calls this.
"""
from __future__ import annotations

import logging
import random

import requests

from models import FloodData

logger = logging.getLogger(__name__)

FEMA_NFHL_URL = "https://hazards.fema.gov/gis/nfhl/rest/services/public/NFHL/MapServer/28/query"
FEMA_SOURCE = "FEMA NFHL (National Flood Hazard Layer)"
FALLBACK_SOURCE = "Fallback Data (FEMA API unavailable)"

# Most parcels sit outside the special flood hazard area
FALLBACK_ZONE_WEIGHTS = [("X", 0.70), ("AE", 0.15), ("A", 0.10), ("D", 0.05)]


class FloodService:
    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def get_flood_zone(self, lat: float, lon: float) -> FloodData:
        logger.info("Fetching flood zone for (%s, %s)", lat, lon)
        try:
            response = requests.get(
                FEMA_NFHL_URL,
                params={
                    "geometry": f"{lon},{lat}",
                    "geometryType": "esriGeometryPoint",
                    "inSR": "4326",
                    "spatialRel": "esriSpatialRelIntersects",
                    "outFields": "FLD_ZONE,ZONE_SUBTY,STATIC_BFE,SFHA_TF",
                    "returnGeometry": "false",
                    "f": "json",
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"FEMA API returned {response.status_code}: {response.reason}")
            features = (response.json() or {}).get("features") or []
            if not features:
                logger.info("No SFHA found - likely Zone X (minimal flood hazard)")
                return FloodData(flood_zone_code="X", flood_source=FEMA_SOURCE)

            attributes = features[0].get("attributes") or {}
            zone = attributes.get("FLD_ZONE")
            subtype = attributes.get("ZONE_SUBTY")
            code = f"{zone}{subtype}" if subtype else zone
            logger.info("FEMA flood zone: %s (SFHA: %s)", code, attributes.get("SFHA_TF"))
            return FloodData(flood_zone_code=code, flood_source=FEMA_SOURCE)
        except Exception as e:
            logger.error("FEMA API error: %s", e)
            return self._fallback()

    def _fallback(self) -> FloodData:
        logger.info("Using fallback flood data")
        roll = random.random()
        cumulative = 0.0
        selected = "X"
        for code, weight in FALLBACK_ZONE_WEIGHTS:
            cumulative += weight
            if roll <= cumulative:
                selected = code
                break
        return FloodData(flood_zone_code=selected, flood_source=FALLBACK_SOURCE, is_fallback=True)
