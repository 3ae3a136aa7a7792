from __future__ import annotations

import logging
import os
import time
import uuid
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend directory so OPENAI_API_KEY, MAPBOX_API_KEY etc. are available
load_dotenv(Path(__file__).resolve().parent / ".env")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config import Settings
from enrichment.demographics import DemographicsService
from enrichment.flood import FloodService
from enrichment.geocoding import GeocodingService
from enrichment.orchestrator import EnrichmentOrchestrator
from enrichment.program_flags import ProgramFlagsService
from errors import SiteIntakeError
from om_extract import SiteExtractor
from routes.intake import router as intake_router
from routes.rent_comps import router as rent_comps_router
from routes.scenarios import router as scenarios_router
from routes.sites import router as sites_router

_LOG = logging.getLogger("uvicorn.error")

VERSION = (os.environ.get("GIT_COMMIT") or "").strip() or "unknown"

settings = Settings.from_env()

app = FastAPI(title="Site Intake Backend", version="0.1.0")

# Clients are built once and shared; routes reach them through routes.deps
app.state.settings = settings
app.state.extractor = SiteExtractor.from_settings(settings)
app.state.orchestrator = EnrichmentOrchestrator(
    geocoder=GeocodingService(api_key=settings.mapbox_api_key, timeout=settings.http_timeout),
    demographics=DemographicsService(timeout=settings.http_timeout),
    program_flags=ProgramFlagsService(timeout=settings.http_timeout),
)
app.state.flood = FloodService(timeout=settings.http_timeout)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        _LOG.info(
            "request_id=%s method=%s path=%s status=%s duration_ms=%.0f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(RequestLogMiddleware)
app.include_router(intake_router)
app.include_router(sites_router)
app.include_router(scenarios_router)
app.include_router(rent_comps_router)


@app.exception_handler(SiteIntakeError)
async def site_intake_error_handler(request: Request, exc: SiteIntakeError) -> JSONResponse:
    rid = getattr(request.state, "request_id", "-")
    if exc.status_code >= 500:
        _LOG.error("request_id=%s %s: %s", rid, type(exc).__name__, exc.message)
    else:
        _LOG.info("request_id=%s %s: %s", rid, type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
def startup_log() -> None:
    port = os.environ.get("PORT", "8010")
    host = os.environ.get("HOST", "127.0.0.1")
    _LOG.info(
        "Backend starting on http://%s:%s (OPENAI_API_KEY configured: %s, MAPBOX_API_KEY configured: %s) model=%s version=%s",
        host, port, settings.ai_enabled, bool(settings.mapbox_api_key), settings.openai_om_model, VERSION,
    )
    if not settings.ai_enabled:
        _LOG.warning("OPENAI_API_KEY is not set. OM extraction and summaries will fail.")
    if not settings.mapbox_api_key:
        _LOG.warning("MAPBOX_API_KEY is not set. Geocoding will use approximate fallback coordinates.")


@app.get("/health")
def health():
    return {
        "status": "ok",
        "ai_enabled": settings.ai_enabled,
        "openai_configured": app.state.extractor.configured,
        "geocoding_configured": bool(settings.mapbox_api_key),
        "model": settings.openai_om_model,
        "version": VERSION,
    }


def get_app() -> FastAPI:
    """
    Convenience accessor for ASGI servers.
    """
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8010,
        reload=True,
    )
