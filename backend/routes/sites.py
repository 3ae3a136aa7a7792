from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from db.session import get_db
from enrichment.flood import FloodService
from enrichment.orchestrator import EnrichmentOrchestrator
from errors import ValidationFailedError
from models import (
    DealSummary,
    EnrichedSiteOut,
    FloodData,
    SiteCreate,
    SiteOut,
    SitePage,
    SiteQuery,
    SiteStatus,
    SiteUpdate,
    SortOrder,
)
from om_extract import SiteExtractor
from routes.deps import get_extractor, get_flood_service, get_orchestrator
from services import sites as site_service

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("", response_model=SitePage)
def list_sites(
    status: Optional[SiteStatus] = None,
    state: Optional[str] = None,
    city: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = SiteQuery(
        status=status,
        state=state,
        city=city,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return site_service.list_sites(db, query)


@router.post("", response_model=SiteOut, status_code=201)
def create_site(body: SiteCreate, db: Session = Depends(get_db)):
    return site_service.create_site(db, body)


@router.get("/{site_id}", response_model=SiteOut)
def get_site(site_id: str, db: Session = Depends(get_db)):
    return site_service.get_site(db, site_id)


@router.patch("/{site_id}", response_model=SiteOut)
def update_site(site_id: str, body: SiteUpdate, db: Session = Depends(get_db)):
    return site_service.update_site(db, site_id, body)


@router.delete("/{site_id}")
def delete_site(site_id: str, db: Session = Depends(get_db)):
    site_service.delete_site(db, site_id)
    return {"ok": True}


@router.post("/{site_id}/enrich", response_model=EnrichedSiteOut)
def enrich_site(
    site_id: str,
    db: Session = Depends(get_db),
    orchestrator: EnrichmentOrchestrator = Depends(get_orchestrator),
):
    return orchestrator.enrich_site(db, site_id)


@router.get("/{site_id}/flood-zone", response_model=FloodData)
def lookup_flood_zone(
    site_id: str,
    db: Session = Depends(get_db),
    flood: FloodService = Depends(get_flood_service),
):
    """FEMA zone at the site's coordinates for the reviewer to confirm. Not saved."""
    site = site_service.get_site(db, site_id)
    if site.latitude is None or site.longitude is None:
        raise ValidationFailedError("Site has no coordinates; run enrichment first")
    return flood.get_flood_zone(site.latitude, site.longitude)


@router.post("/{site_id}/summary", response_model=DealSummary)
def summarize_site(
    site_id: str,
    db: Session = Depends(get_db),
    extractor: SiteExtractor = Depends(get_extractor),
):
    return site_service.summarize_site(db, site_id, extractor)
