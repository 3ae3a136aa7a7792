"""
Derived site and scenario metrics. Pure functions, no I/O.

Each derived pair is always computed together from the latest raw inputs so
callers never persist one half of a pair against stale inputs.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

SQFT_PER_ACRE = 43560.0


@dataclass(frozen=True)
class SiteDerived:
    size_sf: float
    ask_price_per_sf: float


@dataclass(frozen=True)
class ScenarioDerived:
    density_units_per_acre: float
    land_price_per_door: float


def acres_to_sqft(acres: float) -> float:
    return acres * SQFT_PER_ACRE


def calculate_site_derived(size_acres: float, ask_price_total: float) -> SiteDerived:
    """
    Area in square feet and asking price per square foot.
    A zero (or negative) area yields a price per square foot of 0 rather than
    a division error.
    """
    size_sf = acres_to_sqft(size_acres)
    price_per_sf = ask_price_total / size_sf if size_sf > 0 else 0.0
    return SiteDerived(size_sf=size_sf, ask_price_per_sf=price_per_sf)


def calculate_scenario_derived(net_acres: float, units: int, total_price: float) -> ScenarioDerived:
    """Density (units per net acre) and land price per unit, both 0 when their divisor is 0."""
    density = units / net_acres if net_acres > 0 else 0.0
    price_per_door = total_price / units if units > 0 else 0.0
    return ScenarioDerived(density_units_per_acre=density, land_price_per_door=price_per_door)


def units_for_density(net_acres: float, density_per_acre: float) -> int:
    """Whole units at a target density; halves round up."""
    return int(math.floor(net_acres * density_per_acre + 0.5))
