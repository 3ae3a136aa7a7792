"""
Site enrichment: geocode if needed, then demographics and program flags in
parallel, then upsert both and return the re-read site.

Writes are sequential commits with no spanning transaction. Each step is
idempotent, so a run that dies part way can simply be re-run.
Flood zone is entered by a reviewer and is never written here.
"""
from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from sqlalchemy.orm import Session, selectinload

from db.models import Demographics, ProgramFlags, Site
from enrichment.demographics import DemographicsService
from enrichment.geocoding import GeocodingService
from enrichment.program_flags import ProgramFlagsService
from errors import EnrichmentFailedError, NotFoundError
from models import DemographicData, ProgramFlagsData

logger = logging.getLogger(__name__)

ENRICHMENT_RADIUS_MILES = 1


class EnrichmentOrchestrator:
    def __init__(
        self,
        geocoder: GeocodingService,
        demographics: DemographicsService,
        program_flags: ProgramFlagsService,
    ):
        self.geocoder = geocoder
        self.demographics = demographics
        self.program_flags = program_flags

    def enrich_site(self, db: Session, site_id: str) -> Site:
        logger.info("Starting enrichment for site %s", site_id)
        site = db.query(Site).filter(Site.id == site_id).first()
        if not site:
            raise NotFoundError(f"Site with ID {site_id} not found")

        latitude, longitude = site.latitude, site.longitude
        if latitude is None or longitude is None:
            logger.info("Site missing lat/lon, geocoding...")
            coords = self.geocoder.geocode_address(site.address_line1, site.city, site.state)
            if coords is None:
                logger.error("Geocoding failed, cannot enrich without coordinates")
                raise EnrichmentFailedError("Failed to geocode address")
            latitude, longitude = coords.lat, coords.lon
            site.latitude = latitude
            site.longitude = longitude
            site.geocode_source = coords.source
            site.geocode_is_fallback = coords.is_fallback
            db.commit()
            logger.info("Geocoded to (%s, %s) source=%s", latitude, longitude, coords.source)

        # Both lookups absorb their own faults, so this join always completes.
        with ThreadPoolExecutor(max_workers=2) as pool:
            demographics_future = pool.submit(
                self.demographics.get_demographics, latitude, longitude, ENRICHMENT_RADIUS_MILES
            )
            flags_future = pool.submit(self.program_flags.get_program_flags, latitude, longitude)
            demographics = demographics_future.result()
            flags = flags_future.result()

        self._upsert_demographics(db, site_id, demographics)
        logger.info("Demographics upserted")
        self._upsert_program_flags(db, site_id, flags)
        logger.info("Program flags upserted")

        db.expire_all()
        enriched = (
            db.query(Site)
            .options(
                selectinload(Site.demographics),
                selectinload(Site.program_flags),
                selectinload(Site.constraints),
                selectinload(Site.utilities),
            )
            .filter(Site.id == site_id)
            .first()
        )
        logger.info("Enrichment complete for site %s", site_id)
        return enriched

    def _upsert_demographics(self, db: Session, site_id: str, data: DemographicData) -> None:
        row = (
            db.query(Demographics)
            .filter(Demographics.site_id == site_id, Demographics.radius_miles == ENRICHMENT_RADIUS_MILES)
            .first()
        )
        if row is None:
            row = Demographics(id=str(uuid.uuid4()), site_id=site_id, radius_miles=ENRICHMENT_RADIUS_MILES)
            db.add(row)
        row.median_household_income = data.median_household_income
        row.population = data.population
        row.source = data.source
        row.as_of_year = data.as_of_year
        row.is_fallback = data.is_fallback
        db.commit()

    def _upsert_program_flags(self, db: Session, site_id: str, data: ProgramFlagsData) -> None:
        row = db.query(ProgramFlags).filter(ProgramFlags.site_id == site_id).first()
        if row is None:
            row = ProgramFlags(id=str(uuid.uuid4()), site_id=site_id)
            db.add(row)
        row.in_lihtc_qct = data.is_qct
        row.in_lihtc_dda = data.is_dda
        row.in_opportunity_zone = data.is_opportunity_zone
        row.source = data.source
        row.is_fallback = data.is_fallback
        row.program_flags_last_checked_at = datetime.utcnow()
        db.commit()
