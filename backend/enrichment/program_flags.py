"""
Program eligibility flags (LIHTC QCT, LIHTC DDA, Opportunity Zone) from the
HUD ArcGIS feature services. A point "is in" a program area when the
point-intersects query returns at least one feature.
"""
from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor

import requests

from models import ProgramFlagsData

logger = logging.getLogger(__name__)

_ARCGIS_BASE = "https://services.arcgis.com/VTyQ9soqVukalItT/arcgis/rest/services"
QCT_URL = f"{_ARCGIS_BASE}/Qualified_Census_Tracts_2024/FeatureServer/0/query"
DDA_URL = f"{_ARCGIS_BASE}/Difficult_Development_Areas_2024/FeatureServer/0/query"
OZ_URL = f"{_ARCGIS_BASE}/Opportunity_Zones/FeatureServer/0/query"

HUD_SOURCE = "HUD/IRS Official Data (ArcGIS)"
FALLBACK_SOURCE = "Fallback Data (HUD APIs unavailable)"


class ProgramFlagsService:
    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def get_program_flags(self, lat: float, lon: float) -> ProgramFlagsData:
        """Query the three layers concurrently. Never raises."""
        logger.info("Checking program flags for (%s, %s)", lat, lon)
        try:
            with ThreadPoolExecutor(max_workers=3) as pool:
                qct = pool.submit(self._point_in_layer, QCT_URL, "QCT", lat, lon)
                dda = pool.submit(self._point_in_layer, DDA_URL, "DDA", lat, lon)
                oz = pool.submit(self._point_in_layer, OZ_URL, "OZ", lat, lon)
                is_qct, is_dda, is_oz = qct.result(), dda.result(), oz.result()
            logger.info("Program flags: QCT=%s, DDA=%s, OZ=%s", is_qct, is_dda, is_oz)
            return ProgramFlagsData(
                is_qct=is_qct,
                is_dda=is_dda,
                is_opportunity_zone=is_oz,
                source=HUD_SOURCE,
            )
        except Exception as e:
            logger.error("ArcGIS API error: %s", e)
            return self._fallback()

    def _point_in_layer(self, url: str, label: str, lat: float, lon: float) -> bool:
        """A failed check reads as False; it does not fail the other two."""
        try:
            response = requests.get(
                url,
                params={
                    "geometry": f"{lon},{lat}",
                    "geometryType": "esriGeometryPoint",
                    "inSR": "4326",
                    "spatialRel": "esriSpatialRelIntersects",
                    "outFields": "*",
                    "returnGeometry": "false",
                    "f": "json",
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"{label} API returned {response.status_code}")
            features = (response.json() or {}).get("features") or []
            return len(features) > 0
        except Exception as e:
            logger.warning("%s check failed: %s", label, e)
            return False

    def _fallback(self) -> ProgramFlagsData:
        logger.info("Using fallback program flags")
        return ProgramFlagsData(
            is_qct=random.random() > 0.5,
            is_dda=random.random() > 0.7,
            is_opportunity_zone=random.random() > 0.8,
            source=FALLBACK_SOURCE,
            is_fallback=True,
        )
