from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.session import get_db
from models import RentCompCreate, RentCompOut, RentCompUpdate
from om_extract import SiteExtractor
from routes.deps import get_extractor
from services import rent_comps as comp_service

router = APIRouter(tags=["rent-comps"])


@router.post("/sites/{site_id}/rent-comps", response_model=RentCompOut, status_code=201)
def create_rent_comp(site_id: str, body: RentCompCreate, db: Session = Depends(get_db)):
    return comp_service.create_rent_comp(db, site_id, body)


@router.get("/sites/{site_id}/rent-comps", response_model=list[RentCompOut])
def list_rent_comps(site_id: str, db: Session = Depends(get_db)):
    return comp_service.list_rent_comps(db, site_id)


@router.put("/rent-comps/{comp_id}", response_model=RentCompOut)
def update_rent_comp(comp_id: str, body: RentCompUpdate, db: Session = Depends(get_db)):
    return comp_service.update_rent_comp(db, comp_id, body)


@router.delete("/rent-comps/{comp_id}")
def delete_rent_comp(comp_id: str, db: Session = Depends(get_db)):
    comp_service.delete_rent_comp(db, comp_id)
    return {"ok": True}


@router.post("/rent-comps/{comp_id}/summarize", response_model=RentCompOut)
def summarize_rent_comp(
    comp_id: str,
    db: Session = Depends(get_db),
    extractor: SiteExtractor = Depends(get_extractor),
):
    """Replace the comp's notes with a short generated summary of its own facts."""
    return comp_service.summarize_comp(db, comp_id, extractor)
