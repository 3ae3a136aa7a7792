"""
OM intake: pick one text source (PDF upload > pasted text > listing URL),
then hand it to the extractor. Nothing is written to the database; the result
is a set of suggestions for the reviewer's create-site form.
"""
from __future__ import annotations

import io
import logging
from typing import Optional

from errors import ValidationFailedError
from models import SiteExtraction
from om_extract import SiteExtractor, extract_text_from_pdf

logger = logging.getLogger(__name__)

MIN_DOCUMENT_CHARS = 50


def parse_document(
    extractor: SiteExtractor,
    file_bytes: Optional[bytes] = None,
    filename: Optional[str] = None,
    listing_url: Optional[str] = None,
    raw_text: Optional[str] = None,
) -> SiteExtraction:
    if file_bytes:
        logger.info("[intake] using PDF upload %s (%d bytes)", filename or "<unnamed>", len(file_bytes))
        text = extract_text_from_pdf(io.BytesIO(file_bytes))
    elif raw_text and raw_text.strip():
        logger.info("[intake] using pasted text (%d chars)", len(raw_text))
        text = raw_text
    elif listing_url and listing_url.strip():
        raise ValidationFailedError(
            "URL scraping not yet implemented. Please upload a PDF or paste the listing text."
        )
    else:
        raise ValidationFailedError("Provide a PDF file, raw text, or a listing URL")

    if len(text.strip()) < MIN_DOCUMENT_CHARS:
        raise ValidationFailedError(
            "Extracted text is too short. Please provide a more detailed document."
        )
    return extractor.extract_site_data(text)
