"""
Development scenarios for a site: the four default density plays and edits to them.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from db.models import Scenario, Site
from engine.metrics import calculate_scenario_derived, units_for_density
from errors import NotFoundError
from models import ScenarioStatus, ScenarioType, ScenarioUpdate

logger = logging.getLogger(__name__)

NET_ACRE_RATIO = 0.75

# Units per net acre for each default scenario
DEFAULT_DENSITIES: dict[ScenarioType, float] = {
    ScenarioType.MF_GARDEN_MARKET: 25,
    ScenarioType.MF_GARDEN_LIHTC: 25,
    ScenarioType.BTR_DUPLEX: 11,
    ScenarioType.BTR_ROW_TOWNHOME: 15,
}


def _load_site(db: Session, site_id: str) -> Site:
    site = db.query(Site).filter(Site.id == site_id).first()
    if not site:
        raise NotFoundError(f"Site with ID {site_id} not found")
    return site


def create_default_scenarios(db: Session, site_id: str) -> list[Scenario]:
    """Create any missing default scenario; existing ones are returned untouched."""
    site = _load_site(db, site_id)
    net_acres = site.size_acres * NET_ACRE_RATIO
    existing = {
        s.scenario_type: s
        for s in db.query(Scenario).filter(Scenario.site_id == site_id).all()
    }

    created = 0
    for scenario_type, density in DEFAULT_DENSITIES.items():
        if scenario_type.value in existing:
            continue
        units = units_for_density(net_acres, density)
        derived = calculate_scenario_derived(net_acres, units, site.ask_price_total)
        db.add(
            Scenario(
                id=str(uuid.uuid4()),
                site_id=site_id,
                scenario_type=scenario_type.value,
                assumed_net_acres=net_acres,
                assumed_units=units,
                density_units_per_acre=derived.density_units_per_acre,
                land_price_per_door=derived.land_price_per_door,
                status=ScenarioStatus.TODO.value,
            )
        )
        created += 1
    db.commit()
    logger.info("Default scenarios for site %s: %d created, %d existing", site_id, created, len(existing))
    return list_scenarios(db, site_id)


def list_scenarios(db: Session, site_id: str) -> list[Scenario]:
    _load_site(db, site_id)
    return (
        db.query(Scenario)
        .filter(Scenario.site_id == site_id)
        .order_by(Scenario.scenario_type.asc())
        .all()
    )


def get_scenario(db: Session, scenario_id: str) -> Scenario:
    scenario = db.query(Scenario).filter(Scenario.id == scenario_id).first()
    if not scenario:
        raise NotFoundError(f"Scenario with ID {scenario_id} not found")
    return scenario


def update_scenario(db: Session, scenario_id: str, body: ScenarioUpdate) -> Scenario:
    scenario = get_scenario(db, scenario_id)
    if body.assumed_net_acres is not None:
        scenario.assumed_net_acres = body.assumed_net_acres
    if body.assumed_units is not None:
        scenario.assumed_units = body.assumed_units
    if body.status is not None:
        scenario.status = body.status.value

    derived = calculate_scenario_derived(
        scenario.assumed_net_acres, scenario.assumed_units, scenario.site.ask_price_total
    )
    scenario.density_units_per_acre = derived.density_units_per_acre
    scenario.land_price_per_door = derived.land_price_per_door
    db.commit()
    db.refresh(scenario)
    return scenario


def delete_scenario(db: Session, scenario_id: str) -> None:
    scenario = get_scenario(db, scenario_id)
    db.delete(scenario)
    db.commit()
