from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from config import Settings
from models import SiteExtraction
from om_extract import SiteExtractor
from routes.deps import get_extractor, get_settings
from services.intake import parse_document

router = APIRouter(prefix="/intake", tags=["intake"])


@router.post("/parse-om", response_model=SiteExtraction)
def parse_om(
    file: Optional[UploadFile] = File(None),
    listing_url: Optional[str] = Form(None, alias="listingUrl"),
    raw_text: Optional[str] = Form(None, alias="rawText"),
    extractor: SiteExtractor = Depends(get_extractor),
    settings: Settings = Depends(get_settings),
):
    """Suggest site fields from an OM PDF or pasted listing text. Nothing is saved."""
    file_bytes: Optional[bytes] = None
    filename: Optional[str] = None
    if file is not None and file.filename:
        filename = file.filename
        content_type = (file.content_type or "").lower().strip()
        if content_type != "application/pdf" and not filename.lower().strip().endswith(".pdf"):
            raise HTTPException(status_code=400, detail="Only PDF files are allowed")
        file_bytes = file.file.read()
        if not file_bytes:
            raise HTTPException(status_code=400, detail="Empty file")
        if len(file_bytes) > settings.max_upload_bytes:
            max_mb = settings.max_upload_bytes / (1024 * 1024)
            raise HTTPException(status_code=413, detail=f"File exceeds {max_mb:g}MB")

    return parse_document(
        extractor,
        file_bytes=file_bytes,
        filename=filename,
        listing_url=listing_url,
        raw_text=raw_text,
    )
