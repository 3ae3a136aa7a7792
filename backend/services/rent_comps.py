from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from db.models import RentComp, Site
from errors import NotFoundError
from models import CompFacts, RentCompCreate, RentCompUpdate
from om_extract import SiteExtractor

logger = logging.getLogger(__name__)


def _fmt(value) -> str:
    return "?" if value is None else f"{value:g}"


def create_rent_comp(db: Session, site_id: str, body: RentCompCreate) -> RentComp:
    if not db.query(Site.id).filter(Site.id == site_id).first():
        raise NotFoundError(f"Site with ID {site_id} not found")
    fields = body.model_dump()
    fields["comp_type"] = body.comp_type.value
    comp = RentComp(id=str(uuid.uuid4()), site_id=site_id, **fields)
    db.add(comp)
    db.commit()
    db.refresh(comp)
    return comp


def list_rent_comps(db: Session, site_id: str) -> list[RentComp]:
    if not db.query(Site.id).filter(Site.id == site_id).first():
        raise NotFoundError(f"Site with ID {site_id} not found")
    # Unknown distances sort last
    return (
        db.query(RentComp)
        .filter(RentComp.site_id == site_id)
        .order_by(RentComp.distance_miles.is_(None), RentComp.distance_miles.asc())
        .all()
    )


def get_rent_comp(db: Session, comp_id: str) -> RentComp:
    comp = db.query(RentComp).filter(RentComp.id == comp_id).first()
    if not comp:
        raise NotFoundError(f"Rent comp with ID {comp_id} not found")
    return comp


def update_rent_comp(db: Session, comp_id: str, body: RentCompUpdate) -> RentComp:
    comp = get_rent_comp(db, comp_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("comp_type") is not None:
        changes["comp_type"] = changes["comp_type"].value
    elif "comp_type" in changes:
        del changes["comp_type"]
    if "comp_name" in changes and changes["comp_name"] is None:
        del changes["comp_name"]
    for key, value in changes.items():
        setattr(comp, key, value)
    db.commit()
    db.refresh(comp)
    return comp


def delete_rent_comp(db: Session, comp_id: str) -> None:
    comp = get_rent_comp(db, comp_id)
    db.delete(comp)
    db.commit()


def comp_facts(comp: RentComp) -> CompFacts:
    return CompFacts(
        name=comp.comp_name,
        type=comp.comp_type,
        rent_per_sf=_fmt(comp.average_rent_psf) if comp.average_rent_psf is not None else None,
        rent_range=f"{_fmt(comp.rent_range_low)} - {_fmt(comp.rent_range_high)}",
        distance=f"{_fmt(comp.distance_miles)} miles",
        current_notes=comp.notes,
    )


def summarize_comp(db: Session, comp_id: str, extractor: SiteExtractor) -> RentComp:
    """Generate a short summary from the comp's own facts and store it as its notes."""
    comp = get_rent_comp(db, comp_id)
    summary = extractor.generate_comp_summary(comp_facts(comp))
    comp.notes = summary
    db.commit()
    db.refresh(comp)
    logger.info("Summarized rent comp %s", comp_id)
    return comp
