from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db.session import get_db
from models import ScenarioOut, ScenarioUpdate
from services import scenarios as scenario_service

router = APIRouter(tags=["scenarios"])


@router.post("/sites/{site_id}/scenarios/create-defaults", response_model=list[ScenarioOut])
def create_default_scenarios(site_id: str, db: Session = Depends(get_db)):
    return scenario_service.create_default_scenarios(db, site_id)


@router.get("/sites/{site_id}/scenarios", response_model=list[ScenarioOut])
def list_scenarios(site_id: str, db: Session = Depends(get_db)):
    return scenario_service.list_scenarios(db, site_id)


@router.get("/scenarios/{scenario_id}", response_model=ScenarioOut)
def get_scenario(scenario_id: str, db: Session = Depends(get_db)):
    return scenario_service.get_scenario(db, scenario_id)


@router.put("/scenarios/{scenario_id}", response_model=ScenarioOut)
def update_scenario(scenario_id: str, body: ScenarioUpdate, db: Session = Depends(get_db)):
    return scenario_service.update_scenario(db, scenario_id, body)


@router.delete("/scenarios/{scenario_id}")
def delete_scenario(scenario_id: str, db: Session = Depends(get_db)):
    scenario_service.delete_scenario(db, scenario_id)
    return {"ok": True}
