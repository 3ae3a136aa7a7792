"""
Demographics for a point: Census geocoder (coordinates -> tract GEOID), then
ACS 5-Year estimates for that tract. Any failure substitutes synthetic values
tagged is_fallback=True.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

import requests

from models import DemographicData

logger = logging.getLogger(__name__)

CENSUS_GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/geographies/coordinates"
ACS_API_URL = "https://api.census.gov/data/2022/acs/acs5"
ACS_SOURCE = "US Census Bureau (ACS 5-Year 2022)"
FALLBACK_SOURCE = "Fallback Data (Census API unavailable)"
ACS_YEAR = 2022

# B19013_001E median household income, B01003_001E total population
INCOME_VAR = "B19013_001E"
POPULATION_VAR = "B01003_001E"
# ACS "estimate not available" sentinel
ACS_MISSING = "-666666666"

FALLBACK_BASE_INCOME = 75000
FALLBACK_BASE_POPULATION = 50000


def _acs_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == ACS_MISSING:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class DemographicsService:
    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def get_demographics(self, lat: float, lon: float, radius_miles: float) -> DemographicData:
        """Never raises; falls back to synthetic data on any fault."""
        logger.info("Fetching demographics for (%s, %s) at %s mile radius", lat, lon, radius_miles)
        try:
            tract_fips = self._get_census_tract(lat, lon)
            if not tract_fips:
                logger.warning("Could not determine census tract, using fallback")
                return self._fallback(radius_miles)

            income, population = self._get_acs_data(tract_fips)
            if not income and not population:
                logger.warning("No ACS data found, using fallback")
                return self._fallback(radius_miles)

            logger.info("Census data: MHI=$%s, Pop=%s", income, population)
            return DemographicData(
                median_household_income=income,
                population=population,
                source=ACS_SOURCE,
                as_of_year=ACS_YEAR,
            )
        except Exception as e:
            logger.error("Census API error: %s", e)
            return self._fallback(radius_miles)

    def _get_census_tract(self, lat: float, lon: float) -> Optional[str]:
        try:
            response = requests.get(
                CENSUS_GEOCODER_URL,
                params={
                    "x": lon,
                    "y": lat,
                    "benchmark": "Public_AR_Current",
                    "vintage": "Current_Current",
                    "format": "json",
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"Census Geocoder returned {response.status_code}")
            data = response.json() or {}
            tracts = ((data.get("result") or {}).get("geographies") or {}).get("Census Tracts") or []
            if tracts:
                geoid = tracts[0].get("GEOID")
                logger.info("Found census tract: %s", geoid)
                return geoid
            return None
        except Exception as e:
            logger.error("Census Geocoder error: %s", e)
            return None

    def _get_acs_data(self, tract_fips: str) -> tuple[Optional[int], Optional[int]]:
        """Returns (median_household_income, population) for an 11-digit tract GEOID (SSCCCTTTTTT)."""
        state, county, tract = tract_fips[:2], tract_fips[2:5], tract_fips[5:]
        try:
            logger.info("Querying ACS API: state=%s, county=%s, tract=%s", state, county, tract)
            response = requests.get(
                ACS_API_URL,
                params={
                    "get": f"NAME,{INCOME_VAR},{POPULATION_VAR}",
                    "for": f"tract:{tract}",
                    "in": f"state:{state} county:{county}",
                },
                timeout=self.timeout,
            )
            if not response.ok:
                raise RuntimeError(f"ACS API returned {response.status_code}")
            rows = response.json()
            # First row is headers, second row is data
            if rows and len(rows) > 1:
                headers, values = rows[0], rows[1]
                income = _acs_int(values[headers.index(INCOME_VAR)])
                population = _acs_int(values[headers.index(POPULATION_VAR)])
                logger.info("ACS data for %s: MHI=$%s, Pop=%s", values[headers.index("NAME")], income, population)
                return income, population
            return None, None
        except Exception as e:
            logger.error("ACS API error: %s", e)
            return None, None

    def _fallback(self, radius_miles: float) -> DemographicData:
        logger.info("Using fallback demographics for %s mile radius", radius_miles)
        radius_multiplier = 1.5 if radius_miles == 3 else 1.0
        random_factor = 0.9 + random.random() * 0.2
        return DemographicData(
            median_household_income=round(FALLBACK_BASE_INCOME * radius_multiplier * random_factor),
            population=round(FALLBACK_BASE_POPULATION * radius_multiplier * random_factor),
            source=FALLBACK_SOURCE,
            as_of_year=ACS_YEAR,
            is_fallback=True,
        )
