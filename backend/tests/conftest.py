"""Add backend to path so 'from models import' resolves when run from project root.

Env is pinned before any app import: db.session builds its engine at import time.
"""
import json
import os
import sys
from types import SimpleNamespace

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["MAPBOX_API_KEY"] = ""

_backend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)

import pytest
from fastapi.testclient import TestClient

from db import Base, SessionLocal, engine, get_db
from models import DemographicData, GeocodeResult, ProgramFlagsData
from om_extract import SiteExtractor


class StubCompletions:
    """Stands in for client.chat.completions; records every call."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = self.reply if isinstance(self.reply, str) or self.reply is None else json.dumps(self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class StubLLM:
    def __init__(self, reply=None, error=None):
        self.chat = SimpleNamespace(completions=StubCompletions(reply=reply, error=error))

    @property
    def calls(self):
        return self.chat.completions.calls


def make_extractor(reply=None, error=None) -> SiteExtractor:
    return SiteExtractor(client=StubLLM(reply=reply, error=error), model="test-model")


class StubGeocoder:
    def __init__(self, result=None):
        self.result = result
        self.calls = 0

    def geocode_address(self, address, city, state):
        self.calls += 1
        return self.result


class StubDemographics:
    def __init__(self, income=82000, population=6400, is_fallback=False):
        self.income = income
        self.population = population
        self.is_fallback = is_fallback
        self.calls = 0

    def get_demographics(self, lat, lon, radius_miles):
        self.calls += 1
        return DemographicData(
            median_household_income=self.income,
            population=self.population,
            source="stub census",
            as_of_year=2022,
            is_fallback=self.is_fallback,
        )


class StubProgramFlags:
    def __init__(self, qct=True, dda=False, oz=False):
        self.flags = (qct, dda, oz)
        self.calls = 0

    def get_program_flags(self, lat, lon):
        self.calls += 1
        qct, dda, oz = self.flags
        return ProgramFlagsData(is_qct=qct, is_dda=dda, is_opportunity_zone=oz, source="stub hud")


def austin_geocode() -> GeocodeResult:
    return GeocodeResult(lat=30.2672, lon=-97.7431, source="stub mapbox")


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from main import app

    def _override_get_db():
        yield db

    saved = {k: getattr(app.state, k) for k in ("extractor", "orchestrator", "flood")}
    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        for key, value in saved.items():
            setattr(app.state, key, value)


@pytest.fixture
def site_payload():
    return {
        "name": "Porter Road Tract",
        "addressLine1": "123 FM 1314",
        "city": "Porter",
        "state": "TX",
        "zip": "77365",
        "sizeAcres": 10,
        "askPriceTotal": 1_000_000,
        "brokerName": "Dana Broker",
        "brokerEmail": "dana@landco.com",
    }
