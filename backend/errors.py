"""
Error kinds raised by the intake, site and enrichment services.
main.py maps each kind to an HTTP status; services never raise HTTPException.
"""
from __future__ import annotations


class SiteIntakeError(Exception):
    """Base class; status_code is what the API layer responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SiteIntakeError):
    """Referenced site, scenario or rent comp does not exist."""

    status_code = 404


class ValidationFailedError(SiteIntakeError):
    """Malformed or unusable input (bad PDF, too-short text, unknown sort field)."""

    status_code = 400


class ExtractionFailedError(SiteIntakeError):
    """Model call, parse or empty-response fault. Message carries the original reason."""

    status_code = 500


class EnrichmentFailedError(SiteIntakeError):
    # Only raised when a site has no coordinates and geocoding returns nothing.
    status_code = 502
