"""FastAPI dependencies for the clients main.py builds once at startup and keeps on app.state."""
from __future__ import annotations

from fastapi import Request

from config import Settings
from enrichment.flood import FloodService
from enrichment.orchestrator import EnrichmentOrchestrator
from om_extract import SiteExtractor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_extractor(request: Request) -> SiteExtractor:
    return request.app.state.extractor


def get_orchestrator(request: Request) -> EnrichmentOrchestrator:
    return request.app.state.orchestrator


def get_flood_service(request: Request) -> FloodService:
    return request.app.state.flood
