"""
Site CRUD, list filtering/sorting/paging, and the deal summary snapshot.
"""
from __future__ import annotations

import logging
import math
import uuid
from typing import Any

from sqlalchemy.orm import Session, selectinload

from db.models import Site, SiteConstraints, SiteUtilities
from engine.metrics import calculate_scenario_derived, calculate_site_derived
from errors import NotFoundError, ValidationFailedError
from models import (
    DealSummary,
    SiteCreate,
    SiteListItem,
    SitePage,
    SiteQuery,
    SiteStatus,
    SiteUpdate,
    SortOrder,
)
from om_extract import SiteExtractor

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = (
    "name",
    "city",
    "state",
    "status",
    "size_acres",
    "ask_price_total",
    "ask_price_per_sf",
    "created_at",
)
DEFAULT_SORT_FIELD = "created_at"

_NESTED_FIELDS = {"constraints", "utilities"}
_REQUIRED_SITE_FIELDS = {
    "name", "address_line1", "city", "state", "zip", "size_acres", "ask_price_total", "status",
}


def list_sites(db: Session, query: SiteQuery) -> SitePage:
    sort_by = query.sort_by or DEFAULT_SORT_FIELD
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationFailedError(
            f"Cannot sort by '{sort_by}'. Allowed: {', '.join(SORTABLE_FIELDS)}"
        )

    q = db.query(Site)
    if query.status is not None:
        q = q.filter(Site.status == query.status.value)
    if query.state:
        q = q.filter(Site.state == query.state)
    if query.city:
        q = q.filter(Site.city == query.city)

    total = q.count()
    column = getattr(Site, sort_by)
    q = q.order_by(column.asc() if query.sort_order == SortOrder.ASC else column.desc())
    rows = q.offset((query.page - 1) * query.limit).limit(query.limit).all()

    return SitePage(
        data=[SiteListItem.model_validate(r) for r in rows],
        total=total,
        page=query.page,
        limit=query.limit,
        total_pages=math.ceil(total / query.limit),
    )


def get_site(db: Session, site_id: str) -> Site:
    site = (
        db.query(Site)
        .options(selectinload(Site.constraints), selectinload(Site.utilities))
        .filter(Site.id == site_id)
        .first()
    )
    if not site:
        raise NotFoundError(f"Site with ID {site_id} not found")
    return site


def create_site(db: Session, body: SiteCreate) -> Site:
    derived = calculate_site_derived(body.size_acres, body.ask_price_total)
    fields = body.model_dump(exclude=_NESTED_FIELDS)
    fields["status"] = (body.status or SiteStatus.NEW).value

    site = Site(
        id=str(uuid.uuid4()),
        size_sf=derived.size_sf,
        ask_price_per_sf=derived.ask_price_per_sf,
        **fields,
    )
    if body.constraints is not None:
        site.constraints = SiteConstraints(id=str(uuid.uuid4()), **body.constraints.model_dump())
    if body.utilities is not None:
        site.utilities = SiteUtilities(id=str(uuid.uuid4()), **body.utilities.model_dump())

    db.add(site)
    db.commit()
    logger.info("Created site %s (%s)", site.id, site.name)
    return get_site(db, site.id)


def update_site(db: Session, site_id: str, body: SiteUpdate) -> Site:
    site = get_site(db, site_id)
    changes = body.model_dump(exclude_unset=True, exclude=_NESTED_FIELDS)
    # Explicit nulls cannot clear required columns
    changes = {
        k: v for k, v in changes.items() if v is not None or k not in _REQUIRED_SITE_FIELDS
    }
    if "status" in changes:
        changes["status"] = changes["status"].value

    for key, value in changes.items():
        setattr(site, key, value)

    if "size_acres" in changes or "ask_price_total" in changes:
        derived = calculate_site_derived(site.size_acres, site.ask_price_total)
        site.size_sf = derived.size_sf
        site.ask_price_per_sf = derived.ask_price_per_sf

    if "ask_price_total" in changes:
        # Land price per door is priced off the site's current ask
        for scenario in site.scenarios:
            scenario_derived = calculate_scenario_derived(
                scenario.assumed_net_acres, scenario.assumed_units, site.ask_price_total
            )
            scenario.density_units_per_acre = scenario_derived.density_units_per_acre
            scenario.land_price_per_door = scenario_derived.land_price_per_door

    if body.constraints is not None:
        _apply_nested(site, "constraints", SiteConstraints, body.constraints.model_dump(exclude_unset=True))
    if body.utilities is not None:
        _apply_nested(site, "utilities", SiteUtilities, body.utilities.model_dump(exclude_unset=True))

    db.commit()
    logger.info("Updated site %s fields=%s", site_id, sorted(body.model_fields_set))
    return get_site(db, site_id)


def _apply_nested(site: Site, attr: str, model: type, values: dict[str, Any]) -> None:
    row = getattr(site, attr)
    if row is None:
        setattr(site, attr, model(id=str(uuid.uuid4()), **values))
        return
    for key, value in values.items():
        setattr(row, key, value)


def delete_site(db: Session, site_id: str) -> None:
    site = get_site(db, site_id)
    db.delete(site)
    db.commit()
    logger.info("Deleted site %s", site_id)


def build_site_snapshot(site: Site) -> dict[str, Any]:
    """Plain-dict view of everything known about a site, fed to the deal summary prompt."""
    snapshot: dict[str, Any] = {
        "name": site.name,
        "address": f"{site.address_line1}, {site.city}, {site.state} {site.zip}",
        "county": site.county,
        "status": site.status,
        "sizeAcres": site.size_acres,
        "sizeSf": site.size_sf,
        "askPriceTotal": site.ask_price_total,
        "askPricePerSf": round(site.ask_price_per_sf, 2),
        "notes": site.notes_internal,
    }

    c = site.constraints
    if c is not None:
        snapshot["constraints"] = {
            "zoning": c.zoning_type,
            "floodZone": c.flood_zone_code,
            "detentionRequired": c.detention_required,
            "detentionNotes": c.detention_notes,
            "deedRestrictions": c.deed_restrictions_text,
            "schoolDistrict": c.school_district_name,
            "schoolRating": c.school_district_rating_value,
        }
    u = site.utilities
    if u is not None:
        snapshot["utilities"] = {
            "water": u.water_provider,
            "sewer": u.sewer_provider,
            "mud": u.mud_name,
            "taxRateTotal": u.tax_rate_total,
        }
    if site.demographics:
        latest = max(site.demographics, key=lambda d: d.updated_at or d.created_at)
        snapshot["demographics"] = {
            "radiusMiles": latest.radius_miles,
            "medianHouseholdIncome": latest.median_household_income,
            "population": latest.population,
            "source": latest.source,
            "approximate": latest.is_fallback,
        }
    f = site.program_flags
    if f is not None:
        snapshot["programFlags"] = {
            "lihtcQct": f.in_lihtc_qct,
            "lihtcDda": f.in_lihtc_dda,
            "opportunityZone": f.in_opportunity_zone,
            "approximate": f.is_fallback,
        }
    snapshot["scenarios"] = [
        {
            "type": s.scenario_type,
            "netAcres": s.assumed_net_acres,
            "units": s.assumed_units,
            "densityPerAcre": round(s.density_units_per_acre, 2),
            "landPricePerDoor": round(s.land_price_per_door),
        }
        for s in site.scenarios
    ]
    snapshot["rentComps"] = [
        {
            "name": r.comp_name,
            "type": r.comp_type,
            "avgRentPsf": r.average_rent_psf,
            "distanceMiles": r.distance_miles,
        }
        for r in sorted(site.rent_comps, key=lambda r: (r.distance_miles is None, r.distance_miles or 0))
    ]
    return snapshot


def summarize_site(db: Session, site_id: str, extractor: SiteExtractor) -> DealSummary:
    site = (
        db.query(Site)
        .options(
            selectinload(Site.constraints),
            selectinload(Site.utilities),
            selectinload(Site.demographics),
            selectinload(Site.program_flags),
            selectinload(Site.scenarios),
            selectinload(Site.rent_comps),
        )
        .filter(Site.id == site_id)
        .first()
    )
    if not site:
        raise NotFoundError(f"Site with ID {site_id} not found")
    return extractor.generate_deal_summary(build_site_snapshot(site))
